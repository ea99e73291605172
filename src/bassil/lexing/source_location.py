from typing import NamedTuple
from typing import final


@final
class Position(NamedTuple):
    line: int
    column: int


@final
class Span(NamedTuple):
    """A 1-based line plus an inclusive 1-based column range on that line."""

    line: int
    start_column: int
    end_column: int

    @property
    def start(self) -> Position:
        return Position(line=self.line, column=self.start_column)

    @property
    def end(self) -> Position:
        return Position(line=self.line, column=self.end_column)

    @property
    def width(self) -> int:
        return self.end_column - self.start_column + 1

    def __str__(self) -> str:
        return f"line {self.line}, columns {self.start_column}-{self.end_column}"
