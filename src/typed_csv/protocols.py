"""Optional capabilities a record type (or field type) can implement.

The engine checks these by duck typing, once per read/write call, in this
precedence order:

- ``unmarshal_csv(values)``: header-free decode, only used when the reader
  runs without a header.
- ``unmarshal_csv_with_header(values, names)``: header-aware decode.
- ``marshal_csv()``: body encode, returns the output cells of one record.
- ``csv_header()``: classmethod, returns the output header names.

Field types can additionally implement:

- ``format_csv()``: renders the field value instead of the default scalar
  formatting.
- ``parse_csv(text)``: classmethod receiving the raw cell text and returning
  a new value to store instead of the default scalar decoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UnmarshalerWithoutHeader(Protocol):
    """Populates a record from the raw cells of one row."""

    def unmarshal_csv(self, values: list[str]) -> None:
        ...


@runtime_checkable
class Unmarshaler(Protocol):
    """Populates a record from the raw cells of one row and the header."""

    def unmarshal_csv_with_header(self, values: list[str], names: list[str]) -> None:
        ...


@runtime_checkable
class BodyMarshaler(Protocol):
    """Returns the ordered output cells for one record."""

    def marshal_csv(self) -> list[str]:
        ...


@runtime_checkable
class HeaderMarshaler(Protocol):
    """Returns the ordered output header names for a record type."""

    def csv_header(self) -> list[str]:
        ...


@runtime_checkable
class Formatter(Protocol):
    """A field value with its own text rendering."""

    def format_csv(self) -> str:
        ...


@runtime_checkable
class Parser(Protocol):
    """A field type that builds its values from raw cell text."""

    def parse_csv(self, text: str) -> Any:
        ...


def _implements(tp: Any, protocol: type) -> bool:
    try:
        return issubclass(tp, protocol)
    except TypeError:
        # Not a class: generic aliases, typing special forms
        return False


@dataclass(frozen=True)
class RecordCapabilities:
    """The record-level capabilities of one record type."""

    header_free_decode: bool = False
    header_aware_decode: bool = False
    body_encode: bool = False
    header_override: bool = False

    @classmethod
    def of(cls, record_type: type) -> RecordCapabilities:
        return cls(
            header_free_decode=_implements(record_type, UnmarshalerWithoutHeader),
            header_aware_decode=_implements(record_type, Unmarshaler),
            body_encode=_implements(record_type, BodyMarshaler),
            header_override=_implements(record_type, HeaderMarshaler),
        )


def field_parser(value_type: Any) -> type | None:
    """Return ``value_type`` if it implements ``parse_csv``, else None."""
    if _implements(value_type, Parser):
        return value_type
    return None


def has_formatter(value: Any) -> bool:
    return isinstance(value, Formatter)
