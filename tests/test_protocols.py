"""Tests for capability detection."""

from __future__ import annotations

from typed_csv.protocols import (
    BodyMarshaler,
    HeaderMarshaler,
    Parser,
    RecordCapabilities,
    Unmarshaler,
    UnmarshalerWithoutHeader,
    field_parser,
    has_formatter,
)


class Everything:
    def unmarshal_csv(self, values):
        pass

    def unmarshal_csv_with_header(self, values, names):
        pass

    def marshal_csv(self):
        return []

    @classmethod
    def csv_header(cls):
        return []


class Blocked(Everything):
    """Setting a capability to None switches it off."""

    marshal_csv = None


class Plain:
    pass


class Amount:
    @classmethod
    def parse_csv(cls, text):
        return cls()

    def format_csv(self):
        return "amount"


class TestProtocols:
    """Tests for the structural capability protocols."""

    def test_structural_match(self):
        assert issubclass(Everything, UnmarshalerWithoutHeader)
        assert issubclass(Everything, Unmarshaler)
        assert issubclass(Everything, BodyMarshaler)
        assert issubclass(Everything, HeaderMarshaler)
        assert issubclass(Amount, Parser)
        assert not issubclass(Plain, Parser)

    def test_has_formatter(self):
        assert has_formatter(Amount())
        assert not has_formatter("text")


class TestRecordCapabilities:
    """Tests for the per-type capability set."""

    def test_all(self):
        caps = RecordCapabilities.of(Everything)
        assert caps == RecordCapabilities(
            header_free_decode=True,
            header_aware_decode=True,
            body_encode=True,
            header_override=True,
        )

    def test_none(self):
        assert RecordCapabilities.of(Plain) == RecordCapabilities()

    def test_blocked_capability(self):
        caps = RecordCapabilities.of(Blocked)
        assert caps.body_encode is False
        assert caps.header_aware_decode is True


class TestFieldParser:
    """Tests for field-level parser detection."""

    def test_parser_type(self):
        assert field_parser(Amount) is Amount

    def test_plain_types(self):
        assert field_parser(str) is None
        assert field_parser(Plain) is None

    def test_non_class_annotations(self):
        assert field_parser(list[int]) is None
        assert field_parser(int | str) is None
