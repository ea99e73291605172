from pathlib import Path
from typing import NamedTuple
from typing import final

from bassil.lexing.source_location import Span


@final
class Diagnostic(NamedTuple):
    path: Path
    line: int
    start_column: int
    end_column: int
    message: str

    @classmethod
    def from_span(cls, path: Path, span: Span, message: str) -> "Diagnostic":
        return cls(
            path=path,
            line=span.line,
            start_column=span.start_column,
            end_column=span.end_column,
            message=message,
        )
