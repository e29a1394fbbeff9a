"""Reading delimited text into a list of typed records."""

from __future__ import annotations

import io
import logging
from typing import IO, Any, TypeVar

from typed_csv.codec import UNCHANGED, decode_value
from typed_csv.errors import MissingDecoderError, ParseError
from typed_csv.options import CsvOptions
from typed_csv.protocols import RecordCapabilities
from typed_csv.shape import FieldShape, bind_header, new_record, shape_of

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CsvReader(CsvOptions):
    """Reads a CSV stream into records.

    The stream only needs ``readline()``. Text streams should be opened with
    ``newline=""`` when ``use_crlf`` is set so the terminator reaches the
    reader untranslated. Binary streams are decoded with ``encoding``.

    Example:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Person:
        ...     name: str
        ...     age: int
        >>> CsvReader(io.StringIO("Name,Age\\nAda,36\\n")).read(Person)
        [Person(name='Ada', age=36)]
    """

    def __init__(
        self,
        stream: IO[Any],
        *,
        delimiter: str = ",",
        include_header: bool = True,
        use_crlf: bool = False,
        encoding: str = "utf-8",
        strict_types: bool = False,
    ) -> None:
        super().__init__(
            delimiter=delimiter,
            include_header=include_header,
            use_crlf=use_crlf,
            encoding=encoding,
            strict_types=strict_types,
        )
        self.stream = stream
        self._line_number = 0

    def _read_line(self) -> str | None:
        """Return the next line, or None at end of input."""
        line = self.stream.readline()
        if isinstance(line, (bytes, bytearray)):
            line = line.decode(self.encoding)
        if not line:
            return None
        self._line_number += 1
        return line

    def read(self, record_type: type[T]) -> list[T]:
        """Read every remaining line of the stream as ``record_type`` records.

        Raises:
            MissingDecoderError: Header-less read of a type with neither
                ``unmarshal_csv`` nor ``unmarshal_csv_with_header``.
            ParseError: A cell does not parse as its field's kind.
            UnsupportedTypeError: ``record_type`` is not a dataclass, or a
                field has no decode rule and ``strict_types`` is set.
        """
        self.validate()
        caps = RecordCapabilities.of(record_type)
        if not self.include_header and not (caps.header_free_decode or caps.header_aware_decode):
            raise MissingDecoderError(record_type)

        header_free = caps.header_free_decode and not self.include_header
        shape = None if header_free or caps.header_aware_decode else shape_of(record_type)

        header: list[str] = []
        if self.include_header:
            line = self._read_line()
            if line is None:
                return []
            header = self.split_line(line)

        bindings: list[FieldShape | None] = []
        if shape is not None:
            bindings = bind_header(shape, header)

        result: list[T] = []
        while True:
            line = self._read_line()
            if line is None:
                break
            values = self.split_line(line)
            record = new_record(record_type)
            if header_free:
                record.unmarshal_csv(values)
            elif caps.header_aware_decode:
                record.unmarshal_csv_with_header(values, list(header))
            else:
                self._bind_row(record, bindings, values)
            result.append(record)

        logger.debug("read %d %s records", len(result), record_type.__name__)
        return result

    def _bind_row(
        self, record: Any, bindings: list[FieldShape | None], values: list[str]
    ) -> None:
        for f, text in zip(bindings, values):
            if f is None:
                continue
            try:
                value = decode_value(text, f, strict=self.strict_types)
            except ParseError as e:
                e.line = self._line_number
                raise
            if value is not UNCHANGED:
                setattr(record, f.name, value)


def read_csv(stream: IO[Any], record_type: type[T], **options: Any) -> list[T]:
    """Read ``stream`` into a list of ``record_type`` records.

    Keyword options are the :class:`CsvReader` settings.
    """
    return CsvReader(stream, **options).read(record_type)


def read_csv_text(text: str, record_type: type[T], **options: Any) -> list[T]:
    """Read records from an in-memory CSV string."""
    return read_csv(io.StringIO(text), record_type, **options)
