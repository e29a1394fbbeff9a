"""Record shapes and the column-to-field resolver.

A record type is a dataclass. Its shape is the ordered list of its fields,
each carrying the declared name, an optional override name (the ``csv``
metadata key, see :func:`csv_field`) and the scalar kind the codec binds it
to.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import sys
import typing
from dataclasses import dataclass, field
from typing import Any

from typed_csv.errors import FormattingError, UnsupportedTypeError
from typed_csv.kinds import ScalarKind, resolve_annotation
from typed_csv.protocols import field_parser

logger = logging.getLogger(__name__)

# Metadata key holding a field's override name
TAG_KEY = "csv"

# Override name that removes a field from binding entirely
EXCLUDE_TAG = "-"


def csv_field(name: str | None = None, *, exclude: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field with a CSV override name.

    ``csv_field("Full Name")`` renames the column; ``csv_field(exclude=True)``
    removes the field from both reading and writing. Remaining keyword
    arguments are passed through to :func:`dataclasses.field`.
    """
    if name is not None and exclude:
        raise ValueError("csv_field() takes either a name or exclude=True, not both")
    metadata = dict(kwargs.pop("metadata", None) or {})
    if exclude:
        metadata[TAG_KEY] = EXCLUDE_TAG
    elif name is not None:
        metadata[TAG_KEY] = name
    return field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldShape:
    """One field of a record shape."""

    name: str
    position: int
    value_type: Any
    kind: ScalarKind | None
    tag: str | None = None
    optional: bool = False
    parser: type | None = None
    has_default: bool = False

    @property
    def visible(self) -> bool:
        """Whether the field is part of the public contract."""
        return not self.name.startswith("_")

    @property
    def excluded(self) -> bool:
        return self.tag == EXCLUDE_TAG

    @property
    def embedded(self) -> bool:
        """Whether the field holds a nested record (never flattened)."""
        return isinstance(self.value_type, type) and dataclasses.is_dataclass(self.value_type)

    @property
    def effective_name(self) -> str:
        return self.tag if self.tag is not None else self.name

    @property
    def bindable(self) -> bool:
        """Whether the field takes part in read binding at all."""
        return self.visible and not self.excluded


@dataclass(frozen=True)
class RecordShape:
    """The ordered fields of a record type."""

    record_type: type
    fields: tuple[FieldShape, ...] = ()

    def get_field(self, name: str) -> FieldShape | None:
        """Get a field by declared name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


def _field_annotations(record_type: type) -> dict[str, Any]:
    """Evaluate the field annotations of a dataclass.

    Postponed (string) annotations naming something the module cannot see,
    such as a class local to a function, are resolved field by field so the
    error names the offending field.
    """
    try:
        return typing.get_type_hints(record_type, include_extras=True)
    except NameError:
        pass

    module = sys.modules.get(record_type.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    hints = {}
    for f in dataclasses.fields(record_type):
        if not isinstance(f.type, str):
            hints[f.name] = f.type
            continue
        try:
            hints[f.name] = eval(f.type, globalns)
        except NameError as e:
            raise UnsupportedTypeError(
                f"{record_type.__name__}.{f.name}: cannot resolve annotation {f.type!r} ({e})"
            ) from None
    return hints


@functools.lru_cache(maxsize=None)
def shape_of(record_type: type) -> RecordShape:
    """Derive (and cache) the shape of a dataclass record type."""
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise UnsupportedTypeError(f"{record_type!r} is not a dataclass record type")

    hints = _field_annotations(record_type)
    shapes = []
    for position, f in enumerate(dataclasses.fields(record_type)):
        resolved = resolve_annotation(hints.get(f.name, f.type))
        shapes.append(
            FieldShape(
                name=f.name,
                position=position,
                value_type=resolved.value_type,
                kind=resolved.kind,
                tag=f.metadata.get(TAG_KEY),
                optional=resolved.optional,
                parser=field_parser(resolved.value_type),
                has_default=(
                    f.default is not dataclasses.MISSING
                    or f.default_factory is not dataclasses.MISSING
                ),
            )
        )
    return RecordShape(record_type=record_type, fields=tuple(shapes))


def writable_fields(shape: RecordShape) -> list[FieldShape]:
    """Fields that appear in a derived header and in encoded rows, in order."""
    return [f for f in shape.fields if f.bindable and not f.embedded]


def derive_header(shape: RecordShape, delimiter: str) -> list[str]:
    """Derive header names from a record shape.

    Raises:
        FormattingError: If an effective name contains the delimiter.
    """
    names = []
    for f in writable_fields(shape):
        name = f.effective_name
        if delimiter in name:
            raise FormattingError(name, delimiter, where="header")
        names.append(name)
    return names


def resolve_column(shape: RecordShape, column: str) -> FieldShape | None:
    """Find the field a header column binds to.

    An exact override-name match wins; otherwise a case-insensitive match
    on the declared name of a field without an override name. Returns None
    for an unmatched column.
    """
    for f in shape.fields:
        if f.bindable and f.tag is not None and f.tag == column:
            return f
    folded = column.casefold()
    for f in shape.fields:
        if f.bindable and f.tag is None and f.name.casefold() == folded:
            return f
    return None


def bind_header(shape: RecordShape, header: list[str]) -> list[FieldShape | None]:
    """Resolve every header column against the shape."""
    bindings = [resolve_column(shape, column) for column in header]
    unmatched = [c for c, b in zip(header, bindings) if b is None]
    if unmatched:
        logger.debug(
            "%s: ignoring unmatched columns %s", shape.record_type.__name__, unmatched
        )
    return bindings


def zero_value(f: FieldShape) -> Any:
    """The value a freshly created record holds in field ``f``."""
    if f.optional or f.kind is None:
        return None
    return f.kind.python_type()


def new_record(record_type: type) -> Any:
    """Create a record holding zero values.

    Dataclass fields with a declared default keep it; every other init field
    gets the zero value of its kind (None for optional or unsupported
    fields). Other types are created with no arguments.
    """
    if not dataclasses.is_dataclass(record_type):
        return record_type()
    shape = shape_of(record_type)
    kwargs = {}
    for f, dc_field in zip(shape.fields, dataclasses.fields(record_type)):
        if dc_field.init and not f.has_default:
            kwargs[f.name] = zero_value(f)
    return record_type(**kwargs)
