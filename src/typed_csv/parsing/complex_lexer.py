"""Lexer for complex number literals such as ``1.5-2e3i``."""

import ply.lex as lex


class ComplexLexer:
    """Lexer for tokenizing complex literals."""

    # Token list
    tokens = [
        "NUMBER",
        "IMAG",
        "PLUS",
        "MINUS",
        "LPAREN",
        "RPAREN",
    ]

    # Simple tokens
    t_PLUS = r"\+"
    t_MINUS = r"-"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"

    # No ignored characters: embedded whitespace is a syntax error
    t_ignore = ""

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    # NUMBER is defined before IMAG so "inf" is never split into "i" + "nf".
    def t_NUMBER(self, t: lex.LexToken) -> lex.LexToken:
        r"(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[iI][nN][fF](?:[iI][nN][iI][tT][yY])?|[nN][aA][nN])"
        return t

    def t_IMAG(self, t: lex.LexToken) -> lex.LexToken:
        r"i"
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
