"""Parser for complex number literals.

Accepted forms, optionally wrapped in parentheses::

    N       real part only
    Ni      imaginary part only
    N+Ni    both parts; the imaginary part must carry an explicit sign
    N-Ni

where ``N`` is a decimal or exponential float, ``inf``/``infinity`` or
``nan`` (case-insensitive).
"""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from typed_csv.parsing.complex_lexer import ComplexLexer


class ComplexParser:
    """Parser for complex literals."""

    tokens = ComplexLexer.tokens

    def __init__(self) -> None:
        self.lexer = ComplexLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_literal_paren(self, p: yacc.YaccProduction) -> None:
        """literal : LPAREN value RPAREN"""
        p[0] = p[2]

    def p_literal(self, p: yacc.YaccProduction) -> None:
        """literal : value"""
        p[0] = p[1]

    def p_value_real(self, p: yacc.YaccProduction) -> None:
        """value : number"""
        p[0] = complex(p[1], 0.0)

    def p_value_imag(self, p: yacc.YaccProduction) -> None:
        """value : number IMAG"""
        p[0] = complex(0.0, p[1])

    def p_value_both(self, p: yacc.YaccProduction) -> None:
        """value : number PLUS NUMBER IMAG
        | number MINUS NUMBER IMAG"""
        imag = float(p[3])
        p[0] = complex(p[1], imag if p[2] == "+" else -imag)

    def p_number(self, p: yacc.YaccProduction) -> None:
        """number : NUMBER"""
        p[0] = float(p[1])

    def p_number_signed(self, p: yacc.YaccProduction) -> None:
        """number : PLUS NUMBER
        | MINUS NUMBER"""
        p[0] = float(p[2]) if p[1] == "+" else -float(p[2])

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> complex:
        """Parse a complex literal and return its value."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        if not data:
            raise SyntaxError("Empty complex literal")
        return self.parser.parse(data, lexer=self.lexer.lexer)
