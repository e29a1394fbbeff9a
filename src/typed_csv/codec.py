"""Conversion between cell text and typed scalar values."""

from __future__ import annotations

import logging
import math
import re
import struct
from typing import Any

from typed_csv.errors import ParseError, UnsupportedTypeError
from typed_csv.kinds import ScalarKind, kind_of_value
from typed_csv.parsing import ComplexParser
from typed_csv.protocols import has_formatter
from typed_csv.shape import FieldShape

logger = logging.getLogger(__name__)

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_complex_parser: ComplexParser | None = None


def _get_complex_parser() -> ComplexParser:
    global _complex_parser
    if _complex_parser is None:
        _complex_parser = ComplexParser()
    return _complex_parser


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def format_float(value: float) -> str:
    """Shortest text that parses back to the same float."""
    return repr(float(value))


def format_complex(value: complex) -> str:
    """Render a complex value as ``<re>+<im>i``."""
    real = format_float(value.real)
    imag = format_float(value.imag)
    if not imag.startswith("-"):
        imag = "+" + imag
    return f"{real}{imag}i"


def format_scalar(value: Any, kind: ScalarKind) -> str:
    """Render a value of a known scalar kind."""
    if kind is ScalarKind.BOOL:
        if not isinstance(value, bool):
            raise UnsupportedTypeError(f"expected bool, got {type(value).__name__}")
        return "true" if value else "false"
    if kind is ScalarKind.TEXT:
        if not isinstance(value, str):
            raise UnsupportedTypeError(f"expected str, got {type(value).__name__}")
        return str.__str__(value)
    if kind.is_integer:
        if isinstance(value, bool) or not isinstance(value, int):
            raise UnsupportedTypeError(f"expected int, got {type(value).__name__}")
        return str(int(value))
    if kind.is_float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise UnsupportedTypeError(f"expected float, got {type(value).__name__}")
        return format_float(value)
    if not isinstance(value, (int, float, complex)) or isinstance(value, bool):
        raise UnsupportedTypeError(f"expected complex, got {type(value).__name__}")
    return format_complex(complex(value))


def encode_value(value: Any, field: FieldShape | None = None) -> str:
    """Render one field value as cell text.

    A value implementing ``format_csv()`` renders through it. An absent
    (``None``) value renders as the zero text of the field's kind. Other
    values render by the field's declared kind, falling back to the kind of
    the runtime value.

    Raises:
        UnsupportedTypeError: If no rendering rule applies.
    """
    if has_formatter(value):
        return value.format_csv()

    kind = field.kind if field is not None else None
    if value is None:
        if kind is None:
            name = field.name if field is not None else "value"
            raise UnsupportedTypeError(f"cannot render absent {name} of unsupported type")
        return kind.zero_text

    if kind is None:
        kind = kind_of_value(value)
    if kind is None:
        raise UnsupportedTypeError(f"unsupported type {type(value).__name__}")
    return format_scalar(value, kind)


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


def parse_int(text: str, kind: ScalarKind) -> int:
    """Parse a base-10 integer and check it fits ``kind``."""
    pattern = _UNSIGNED_RE if kind.is_unsigned else _SIGNED_RE
    if not pattern.fullmatch(text):
        raise ParseError(text, kind.value, "invalid syntax")
    value = int(text)
    low, high = kind.int_range
    if not low <= value <= high:
        raise ParseError(text, kind.value, "value out of range")
    return value


def _narrow32(value: float, text: str, kind: ScalarKind) -> float:
    if math.isinf(value) or math.isnan(value):
        return value
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        raise ParseError(text, kind.value, "value out of range") from None


def parse_float(text: str, kind: ScalarKind = ScalarKind.FLOAT64) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ParseError(text, kind.value, "invalid syntax")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ParseError(text, kind.value, "value out of range")
    if kind is ScalarKind.FLOAT32:
        value = _narrow32(value, text, kind)
    return value


def parse_complex(text: str, kind: ScalarKind = ScalarKind.COMPLEX128) -> complex:
    try:
        value = _get_complex_parser().parse(text)
    except SyntaxError as e:
        raise ParseError(text, kind.value, e.msg) from None
    if kind is ScalarKind.COMPLEX64:
        value = complex(_narrow32(value.real, text, kind), _narrow32(value.imag, text, kind))
    return value


def parse_bool(text: str) -> bool:
    if text in _TRUE_TOKENS:
        return True
    if text in _FALSE_TOKENS:
        return False
    raise ParseError(text, ScalarKind.BOOL.value, "invalid syntax")


def unquote(text: str) -> str:
    """Strip one trailing and one leading double quote, if present."""
    return text.removesuffix('"').removeprefix('"')


def parse_scalar(text: str, kind: ScalarKind) -> Any:
    """Convert cell text to the builtin value of ``kind``."""
    if kind is ScalarKind.TEXT:
        return unquote(text)
    text = text.strip()
    if kind is ScalarKind.BOOL:
        return parse_bool(text)
    if kind.is_integer:
        return parse_int(text, kind)
    if kind.is_float:
        return parse_float(text, kind)
    return parse_complex(text, kind)


# Returned by decode_value when the field must keep its current value
UNCHANGED = object()


def decode_value(text: str, field: FieldShape, *, strict: bool = False) -> Any:
    """Convert cell text to the value stored in ``field``.

    A field type implementing ``parse_csv()`` receives the raw text first.
    Fields whose type has no decode rule return the ``UNCHANGED`` sentinel
    (the caller leaves the field as it is) unless ``strict`` is set.

    Raises:
        ParseError: If the text does not parse as the field's kind.
        UnsupportedTypeError: In strict mode, for fields with no decode rule.
    """
    if field.parser is not None:
        return field.parser.parse_csv(text)

    if field.kind is None:
        if strict:
            raise UnsupportedTypeError(
                f"field '{field.name}': no decode rule for {field.value_type!r}"
            )
        logger.debug("field '%s': no decode rule for %r, skipped", field.name, field.value_type)
        return UNCHANGED

    try:
        value = parse_scalar(text, field.kind)
    except ParseError as e:
        e.field = field.name
        raise
    if type(value) is not field.value_type and isinstance(field.value_type, type):
        # Subclasses of the builtin scalars (IntEnum, str-backed enums, ...)
        try:
            value = field.value_type(value)
        except (TypeError, ValueError) as e:
            raise ParseError(text, field.kind.value, str(e), field=field.name) from None
    return value

