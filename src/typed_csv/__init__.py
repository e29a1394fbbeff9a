"""Typed CSV - Bind delimited text to dataclass records and back."""

from typed_csv.errors import (
    CsvError,
    EmptyCollectionError,
    FormattingError,
    MissingDecoderError,
    ParseError,
    UnsupportedTypeError,
)
from typed_csv.kinds import (
    Complex64,
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    ScalarKind,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from typed_csv.options import CsvOptions
from typed_csv.reader import CsvReader, read_csv, read_csv_text
from typed_csv.shape import FieldShape, RecordShape, csv_field, shape_of
from typed_csv.writer import CsvWriter, write_csv, write_csv_text

__all__ = [
    # Main API
    "CsvReader",
    "CsvWriter",
    "CsvOptions",
    "read_csv",
    "read_csv_text",
    "write_csv",
    "write_csv_text",
    # Record declaration
    "csv_field",
    "shape_of",
    "RecordShape",
    "FieldShape",
    # Scalar kinds
    "ScalarKind",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Complex64",
    # Errors
    "CsvError",
    "FormattingError",
    "ParseError",
    "UnsupportedTypeError",
    "MissingDecoderError",
    "EmptyCollectionError",
]

__version__ = "0.1.0"
