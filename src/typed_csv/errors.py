"""Error types raised by the binding engine."""

from __future__ import annotations


class CsvError(Exception):
    """Base class for every error raised while binding CSV data."""


class FormattingError(CsvError, ValueError):
    """A header name or cell value contains the active delimiter."""

    def __init__(self, value: str, delimiter: str, where: str = "body") -> None:
        self.value = value
        self.delimiter = delimiter
        self.where = where
        super().__init__(f"no {delimiter!r} allowed in {where}: {value!r}")


class ParseError(CsvError, ValueError):
    """Cell text cannot be converted to the field's scalar kind.

    ``field`` and ``line`` are filled in as the error travels up through the
    codec and the reader, so the message points at the offending cell.
    """

    def __init__(
        self,
        text: str,
        kind: str,
        reason: str | None = None,
        field: str | None = None,
        line: int | None = None,
    ) -> None:
        self.text = text
        self.kind = kind
        self.reason = reason
        self.field = field
        self.line = line
        super().__init__(text)

    def __str__(self) -> str:
        where = ""
        if self.line is not None:
            where += f"line {self.line}: "
        if self.field is not None:
            where += f"field '{self.field}': "
        msg = f"{where}cannot parse {self.text!r} as {self.kind}"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


class UnsupportedTypeError(CsvError, TypeError):
    """No encode/decode rule exists for a value or field type."""


class MissingDecoderError(CsvError):
    """Header-less read of a record type with no custom decode capability."""

    def __init__(self, record_type: type) -> None:
        self.record_type = record_type
        super().__init__(
            f"cannot unmarshal {record_type.__name__} without header: "
            "define unmarshal_csv() or unmarshal_csv_with_header()"
        )


class EmptyCollectionError(CsvError, ValueError):
    """Header requested for an empty collection with no header override."""

    def __init__(self) -> None:
        super().__init__("empty collection was received")
