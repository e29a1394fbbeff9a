"""Writing typed records as delimited text."""

from __future__ import annotations

import io
import logging
from typing import IO, Any, Generic, Iterable, TypeVar

from typed_csv.codec import encode_value
from typed_csv.errors import EmptyCollectionError, FormattingError
from typed_csv.options import CsvOptions
from typed_csv.protocols import RecordCapabilities
from typed_csv.shape import FieldShape, derive_header, new_record, shape_of, writable_fields

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CsvWriter(CsvOptions, Generic[T]):
    """Writes records to a CSV stream.

    The stream only needs ``write()`` and ``flush()``. Binary streams receive
    the text encoded with ``encoding``. Text streams should be opened with
    ``newline=""`` so the configured terminator is written untranslated.
    """

    def __init__(
        self,
        stream: IO[Any],
        *,
        delimiter: str = ",",
        include_header: bool = True,
        use_crlf: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(
            delimiter=delimiter,
            include_header=include_header,
            use_crlf=use_crlf,
            encoding=encoding,
        )
        self.stream = stream
        self._binary = not isinstance(stream, io.TextIOBase) and isinstance(
            stream, (io.RawIOBase, io.BufferedIOBase)
        )

    def _write_line(self, cells: list[str]) -> None:
        line = self.join_cells(cells)
        if self._binary:
            self.stream.write(line.encode(self.encoding))
        else:
            self.stream.write(line)

    def _check_cells(self, cells: list[str], where: str) -> list[str]:
        for cell in cells:
            if self.delimiter in cell:
                raise FormattingError(cell, self.delimiter, where=where)
        return cells

    def write(self, records: Iterable[T], record_type: type[T] | None = None) -> None:
        """Write ``records`` (and the header, if enabled) and flush the stream.

        ``record_type`` is only needed to write the header of an empty
        collection through a ``csv_header()`` override; otherwise the type
        of the first record is used.

        Raises:
            EmptyCollectionError: Header mode with no records and no header
                override to take the header from.
            FormattingError: A header name or cell value contains the
                delimiter.
            UnsupportedTypeError: A field value has no rendering rule.
        """
        self.validate()
        records = list(records)
        if record_type is None and records:
            record_type = type(records[0])

        if self.include_header:
            self._write_line(self._header(record_type, records))

        fields_by_type: dict[type, list[FieldShape]] = {}
        for record in records:
            self._write_line(self._row(record, fields_by_type))

        self.stream.flush()
        logger.debug("wrote %d records", len(records))

    def write_elems(self, *records: T) -> None:
        """Same as :meth:`write`, for a handful of records passed inline."""
        self.write(records)

    def _header(self, record_type: type | None, records: list[Any]) -> list[str]:
        if record_type is not None and RecordCapabilities.of(record_type).header_override:
            sample = records[0] if records else new_record(record_type)
            return self._check_cells(list(sample.csv_header()), "header")
        if record_type is None or not records:
            raise EmptyCollectionError()
        return derive_header(shape_of(record_type), self.delimiter)

    def _row(self, record: Any, fields_by_type: dict[type, list[FieldShape]]) -> list[str]:
        record_type = type(record)
        if RecordCapabilities.of(record_type).body_encode:
            return self._check_cells(list(record.marshal_csv()), "body")

        fields = fields_by_type.get(record_type)
        if fields is None:
            fields = writable_fields(shape_of(record_type))
            for f in fields:
                if self.delimiter in f.name:
                    raise FormattingError(f.name, self.delimiter, where="body")
            fields_by_type[record_type] = fields
        cells = [encode_value(getattr(record, f.name), f) for f in fields]
        return self._check_cells(cells, "body")


def write_csv(
    stream: IO[Any],
    records: Iterable[T],
    record_type: type[T] | None = None,
    **options: Any,
) -> None:
    """Write ``records`` to ``stream``.

    Keyword options are the :class:`CsvWriter` settings.
    """
    CsvWriter(stream, **options).write(records, record_type)


def write_csv_text(
    records: Iterable[T], record_type: type[T] | None = None, **options: Any
) -> str:
    """Render ``records`` as a CSV string."""
    buf = io.StringIO()
    write_csv(buf, records, record_type, **options)
    return buf.getvalue()
