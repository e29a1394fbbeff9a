"""Scalar kinds supported by the value codec."""

from __future__ import annotations

import dataclasses
import types
import typing
from enum import Enum
from typing import Annotated, Any, Union

from typed_csv.errors import UnsupportedTypeError


class ScalarKind(Enum):
    """Built-in scalar kinds a record field can bind to."""

    TEXT = "text"
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"

    @property
    def bits(self) -> int:
        """Return the storage width in bits (0 for text)."""
        widths = {
            ScalarKind.TEXT: 0,
            ScalarKind.BOOL: 1,
            ScalarKind.INT: 64,
            ScalarKind.INT8: 8,
            ScalarKind.INT16: 16,
            ScalarKind.INT32: 32,
            ScalarKind.INT64: 64,
            ScalarKind.UINT: 64,
            ScalarKind.UINT8: 8,
            ScalarKind.UINT16: 16,
            ScalarKind.UINT32: 32,
            ScalarKind.UINT64: 64,
            ScalarKind.FLOAT32: 32,
            ScalarKind.FLOAT64: 64,
            ScalarKind.COMPLEX64: 64,
            ScalarKind.COMPLEX128: 128,
        }
        return widths[self]

    @property
    def is_signed(self) -> bool:
        return self in _SIGNED

    @property
    def is_unsigned(self) -> bool:
        return self in _UNSIGNED

    @property
    def is_integer(self) -> bool:
        return self in _SIGNED or self in _UNSIGNED

    @property
    def is_float(self) -> bool:
        return self in (ScalarKind.FLOAT32, ScalarKind.FLOAT64)

    @property
    def is_complex(self) -> bool:
        return self in (ScalarKind.COMPLEX64, ScalarKind.COMPLEX128)

    @property
    def python_type(self) -> type:
        """Return the builtin Python type values of this kind are stored as."""
        if self is ScalarKind.TEXT:
            return str
        if self is ScalarKind.BOOL:
            return bool
        if self.is_integer:
            return int
        if self.is_float:
            return float
        return complex

    @property
    def int_range(self) -> tuple[int, int]:
        """Return the inclusive (min, max) range of an integer kind."""
        if self in _SIGNED:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        if self in _UNSIGNED:
            return 0, (1 << self.bits) - 1
        raise TypeError(f"{self.value} is not an integer kind")

    @property
    def zero_text(self) -> str:
        """Return the text an absent value of this kind encodes as."""
        if self is ScalarKind.TEXT:
            return ""
        if self is ScalarKind.BOOL:
            return "false"
        return "0"


_SIGNED = frozenset(
    {ScalarKind.INT, ScalarKind.INT8, ScalarKind.INT16, ScalarKind.INT32, ScalarKind.INT64}
)
_UNSIGNED = frozenset(
    {ScalarKind.UINT, ScalarKind.UINT8, ScalarKind.UINT16, ScalarKind.UINT32, ScalarKind.UINT64}
)

# Default kind for each builtin Python scalar type. bool must be checked
# before int because it is an int subclass.
_BUILTIN_KINDS: tuple[tuple[type, ScalarKind], ...] = (
    (bool, ScalarKind.BOOL),
    (str, ScalarKind.TEXT),
    (int, ScalarKind.INT),
    (float, ScalarKind.FLOAT64),
    (complex, ScalarKind.COMPLEX128),
)


# Sized annotations for dataclass fields, e.g. ``age: Uint8``
Int8 = Annotated[int, ScalarKind.INT8]
Int16 = Annotated[int, ScalarKind.INT16]
Int32 = Annotated[int, ScalarKind.INT32]
Int64 = Annotated[int, ScalarKind.INT64]
Uint = Annotated[int, ScalarKind.UINT]
Uint8 = Annotated[int, ScalarKind.UINT8]
Uint16 = Annotated[int, ScalarKind.UINT16]
Uint32 = Annotated[int, ScalarKind.UINT32]
Uint64 = Annotated[int, ScalarKind.UINT64]
# Float32 and Complex64 values are narrowed to single precision when read, so
# a value that is not exactly representable (0.1) reads back as its nearest
# float32 (0.10000000149011612), not as the value that was written.
Float32 = Annotated[float, ScalarKind.FLOAT32]
Complex64 = Annotated[complex, ScalarKind.COMPLEX64]


def kind_of_type(tp: Any) -> ScalarKind | None:
    """Return the default kind for a Python type, or None if unsupported."""
    if not isinstance(tp, type):
        return None
    for builtin, kind in _BUILTIN_KINDS:
        if issubclass(tp, builtin):
            return kind
    return None


def kind_of_value(value: Any) -> ScalarKind | None:
    """Return the default kind for a runtime value, or None if unsupported."""
    return kind_of_type(type(value))


@dataclasses.dataclass(frozen=True)
class ResolvedAnnotation:
    """A field annotation reduced to what the codec needs."""

    value_type: Any
    kind: ScalarKind | None
    optional: bool = False


def resolve_annotation(annotation: Any) -> ResolvedAnnotation:
    """Unwrap ``Optional``/``Annotated`` and work out the field's scalar kind.

    ``X | None`` marks an ownership-optional field; ``Annotated[int,
    ScalarKind.UINT8]`` selects a sized kind. Anything that does not reduce
    to a builtin scalar type resolves with ``kind=None``.
    """
    optional = False
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            optional = True
            annotation = args[0]
            origin = typing.get_origin(annotation)
        else:
            return ResolvedAnnotation(value_type=annotation, kind=None)

    if origin is Annotated:
        base, *extras = typing.get_args(annotation)
        declared = next((e for e in extras if isinstance(e, ScalarKind)), None)
        default = kind_of_type(base)
        if declared is not None and default is not None:
            if declared.python_type is not default.python_type:
                raise UnsupportedTypeError(
                    f"kind {declared.value} does not apply to {base.__name__}"
                )
            return ResolvedAnnotation(value_type=base, kind=declared, optional=optional)
        return ResolvedAnnotation(value_type=base, kind=default, optional=optional)

    return ResolvedAnnotation(
        value_type=annotation, kind=kind_of_type(annotation), optional=optional
    )
