"""Parsing module for scalar literal grammars."""

from typed_csv.parsing.complex_parser import ComplexParser

__all__ = [
    "ComplexParser",
]
