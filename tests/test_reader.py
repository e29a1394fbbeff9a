"""Tests for reading CSV streams into records."""

from __future__ import annotations

import dataclasses
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest

from typed_csv import (
    Complex64,
    CsvReader,
    MissingDecoderError,
    ParseError,
    Uint,
    UnsupportedTypeError,
    csv_field,
    read_csv,
    read_csv_text,
)

DATA_DIR = Path(__file__).parent / "data"


@dataclass
class Person:
    name: str
    age: int


@dataclass
class S:
    String: str = ""
    Int: int = 0
    Float: float = 0.0
    Complex: Complex64 = 0j
    Bool: bool = False
    uint: Uint = 0
    PointerInt: Optional[int] = None


@dataclass
class STagged:
    tagged_string: str = csv_field("String", default="")
    tagged_int: int = csv_field("Int", default=0)
    tagged_float: float = csv_field("Float", default=0.0)
    tagged_bool: bool = csv_field("Bool", default=False)
    pointer_int: Optional[int] = csv_field("_", default=None)


class SUnmarshal:
    """Decodes itself, with and without a header."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.calls: list[str] = []

    def unmarshal_csv(self, values: list[str]) -> None:
        self.calls.append("without_header")
        self.values = {"String": values[0], "Int": values[1].strip()}

    def unmarshal_csv_with_header(self, values: list[str], names: list[str]) -> None:
        self.calls.append("with_header")
        self.values = dict(zip(names, values))


class SHeaderAware:
    def __init__(self) -> None:
        self.values: list[str] = []
        self.names: list[str] = []

    def unmarshal_csv_with_header(self, values: list[str], names: list[str]) -> None:
        self.values = values
        self.names = names


class Custom:
    def __init__(self, text: str = "") -> None:
        self.text = text

    @classmethod
    def parse_csv(cls, text: str) -> Custom:
        return cls(text)


@dataclass
class SCustom:
    custom: Optional[Custom] = None


@dataclass
class WithList:
    name: str = ""
    tags: list = None  # type: ignore[assignment]


@dataclass
class Excluded:
    a: str = ""
    b: int = csv_field(exclude=True, default=0)


@pytest.fixture
def s_csv():
    with open(DATA_DIR / "s.csv", newline="") as f:
        yield f


class TestReadReflection:
    """Field-by-field binding from a header."""

    def test_concrete_scenario(self):
        records = read_csv_text("Name,Age\nAda,36\n", Person)
        assert records == [Person(name="Ada", age=36)]

    def test_fixture_file(self, s_csv):
        records = CsvReader(s_csv).read(S)
        assert len(records) == 2
        first, second = records
        # "Uint" binds case-insensitively; surrounding quotes and numeric
        # padding are stripped.
        assert first == S(
            String="hello",
            Int=1,
            Float=1.5,
            Complex=complex(1, 2),
            Bool=True,
            uint=7,
            PointerInt=3,
        )
        assert second.Float == 2000.0
        assert second.Complex == complex(0.5, -1)
        assert second.Bool is False
        assert second.PointerInt == -4

    def test_pointer_field_by_case_insensitive_name(self):
        @dataclass
        class Pointer:
            pointerint: Optional[int] = None

        records = read_csv_text("PointerInt\n3\n", Pointer)
        assert records[0].pointerint == 3

    def test_tagged_fields(self, s_csv):
        records = CsvReader(s_csv).read(STagged)
        assert len(records) == 2
        for r in records:
            assert r.pointer_int is None
            assert r.tagged_string != ""
        assert records[0].tagged_int == 1

    def test_override_blocks_declared_name(self):
        records = read_csv_text("tagged_string,String\nnope,yes\n", STagged)
        assert records[0].tagged_string == "yes"

    def test_unmatched_columns_ignored(self):
        records = read_csv_text("Name,Unknown,Age\nAda,?,36\n", Person)
        assert records == [Person(name="Ada", age=36)]

    def test_excluded_left_at_zero(self):
        records = read_csv_text("a,b\nx,7\n", Excluded)
        assert records == [Excluded(a="x", b=0)]

    def test_trailing_delimiter(self):
        records = read_csv_text("Name,Age,\nAda,36,\n", Person)
        assert records == [Person(name="Ada", age=36)]

    def test_custom_delimiter_and_crlf(self):
        reader = CsvReader(io.StringIO("Name;Age\r\nAda;36\r\n", newline=""))
        reader.delimiter = ";"
        reader.use_crlf = True
        assert reader.read(Person) == [Person(name="Ada", age=36)]

    def test_binary_stream(self):
        stream = io.BytesIO("Name,Age\nZoë,36\n".encode("utf-8"))
        assert read_csv(stream, Person) == [Person(name="Zoë", age=36)]

    def test_last_line_without_terminator(self):
        records = read_csv_text("Name,Age\nAda,36\nBob,41", Person)
        assert records[-1] == Person(name="Bob", age=41)

    def test_short_row_leaves_fields(self):
        records = read_csv_text("Name,Age\nAda\n", Person)
        assert records == [Person(name="Ada", age=0)]

    def test_empty_input(self):
        assert read_csv_text("", Person) == []

    def test_header_only(self):
        assert read_csv_text("Name,Age\n", Person) == []

    def test_local_parser_field(self):
        class Money:
            def __init__(self, cents=0):
                self.cents = cents

            @classmethod
            def parse_csv(cls, text):
                return cls(int(text) * 100)

        Row = dataclasses.make_dataclass(
            "Row", [("amount", Money, dataclasses.field(default=None))]
        )
        records = read_csv_text("amount\n12\n", Row)
        assert records[0].amount.cents == 1200

    def test_custom_parser_field(self):
        with open(DATA_DIR / "s_custom.csv", newline="") as f:
            records = read_csv(f, SCustom)
        assert [r.custom.text for r in records] == ["red", "green", "blue"]

    def test_unsupported_field_is_skipped(self):
        records = read_csv_text("name,tags\nAda,a b\n", WithList)
        assert records == [WithList(name="Ada", tags=None)]

    def test_unsupported_field_strict(self):
        with pytest.raises(UnsupportedTypeError):
            read_csv_text("name,tags\nAda,a b\n", WithList, strict_types=True)

    def test_not_a_record_type(self):
        with pytest.raises(UnsupportedTypeError):
            read_csv_text("a\n1\n", dict)

    def test_logs_unmatched(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="typed_csv"):
            read_csv_text("Name,Unknown,Age\nAda,?,36\n", Person)
        assert "Unknown" in caplog.text


class TestReadErrors:
    """Every error aborts the whole read."""

    def test_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            read_csv_text("Name,Age\nAda,36\nBob,old\n", Person)
        assert exc_info.value.line == 3
        assert exc_info.value.field == "age"

    def test_missing_decoder_before_any_row(self):
        stream = io.StringIO("Ada,36\n")
        with pytest.raises(MissingDecoderError):
            CsvReader(stream, include_header=False).read(Person)
        assert stream.tell() == 0

    def test_non_ascii_digits(self):
        with pytest.raises(ParseError):
            read_csv_text("Name,Age\nAda,\u0663\u0666\n", Person)

    def test_unresolvable_field_type(self):
        class Money:
            @classmethod
            def parse_csv(cls, text):
                return cls()

        @dataclass
        class Row:
            amount: Money = None

        with pytest.raises(UnsupportedTypeError, match="amount"):
            read_csv_text("amount\n12\n", Row)

    def test_invalid_delimiter(self):
        with pytest.raises(ValueError):
            read_csv_text("Name,Age\n", Person, delimiter=",,")

    def test_io_error_propagates(self):
        class Broken(io.StringIO):
            def readline(self, *args):
                raise OSError("disk on fire")

        with pytest.raises(OSError):
            read_csv(Broken(), Person)


class TestReadCustomDecoders:
    """Record types that decode themselves."""

    def test_with_header(self, s_csv):
        records = CsvReader(s_csv).read(SUnmarshal)
        assert len(records) == 2
        assert records[0].calls == ["with_header"]
        assert records[0].values["String"] == '"hello"'
        assert records[1].values["Uint"] == "0"

    def test_without_header(self):
        with open(DATA_DIR / "s_no_header.csv", newline="") as f:
            reader = CsvReader(f)
            reader.include_header = False
            records = reader.read(SUnmarshal)
        assert len(records) == 2
        # The header-free decoder wins and the header-aware one is skipped
        assert records[0].calls == ["without_header"]
        assert records[1].values == {"String": "world", "Int": "-2"}

    def test_header_aware_without_header(self):
        records = read_csv_text("a,b\n", SHeaderAware, include_header=False)
        assert records[0].values == ["a", "b"]
        assert records[0].names == []

    def test_decoder_errors_propagate(self):
        class Failing:
            def unmarshal_csv_with_header(self, values, names):
                raise ValueError("bad row")

        with pytest.raises(ValueError, match="bad row"):
            read_csv_text("a\n1\n", Failing)
