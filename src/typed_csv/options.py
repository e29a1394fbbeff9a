"""Configuration shared by the reader and the writer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CsvOptions:
    """Mutable dialect settings.

    Attributes:
        delimiter: Single character separating cells.
        include_header: Whether a header line is read or written.
        use_crlf: Use ``\\r\\n`` instead of ``\\n`` as the line terminator.
        encoding: Text encoding applied when the stream is binary.
        strict_types: Reader only. Raise on fields whose type has no decode
            rule instead of leaving them untouched.
    """

    delimiter: str = ","
    include_header: bool = True
    use_crlf: bool = False
    encoding: str = "utf-8"
    strict_types: bool = False

    @property
    def line_terminator(self) -> str:
        return "\r\n" if self.use_crlf else "\n"

    def validate(self) -> None:
        """Raise ValueError if the settings cannot describe a CSV dialect."""
        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if self.delimiter in "\r\n":
            raise ValueError("delimiter cannot be a line terminator character")

    def split_line(self, line: str) -> list[str]:
        """Split one input line into cells.

        Strips the line terminator, then at most one trailing delimiter so a
        trailing separator does not produce a final empty cell.
        """
        line = line.removesuffix(self.line_terminator)
        line = line.removesuffix(self.delimiter)
        return line.split(self.delimiter)

    def join_cells(self, cells: list[str]) -> str:
        return self.delimiter.join(cells) + self.line_terminator
