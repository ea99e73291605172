from typing import NamedTuple
from typing import final

from bassil.lexing.source_location import Span
from bassil.lexing.token_kinds import TokenKind


@final
class Token(NamedTuple):
    kind: TokenKind
    text: str
    line: int
    start_column: int
    end_column: int

    @property
    def span(self) -> Span:
        return Span(
            line=self.line,
            start_column=self.start_column,
            end_column=self.end_column,
        )

    def describe(self) -> str:
        return f"Token at line {self.line}, columns {self.start_column}-{self.end_column}: {self.kind}: {self.text}"
