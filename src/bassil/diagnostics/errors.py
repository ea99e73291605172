from pathlib import Path
from typing import Final
from typing import final


class DiagnosticError(RuntimeError): ...


class InvalidDiagnosticError(DiagnosticError):
    """The caller passed a position that cannot describe any source span."""


@final
class InvalidColumnRangeError(InvalidDiagnosticError):
    def __init__(self, start_column: int, end_column: int) -> None:
        if start_column < 1:
            msg = f"Start column must be at least 1, got {start_column}."
        else:
            msg = f"Start column {start_column} is greater than end column {end_column}."
        super().__init__(msg)
        self.start_column: Final = start_column
        self.end_column: Final = end_column


@final
class InvalidLineNumberError(InvalidDiagnosticError):
    def __init__(self, line_number: int) -> None:
        super().__init__(f"Line number must be at least 1, got {line_number}.")
        self.line_number: Final = line_number


@final
class SourceFileNotFoundError(DiagnosticError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot open source file '{path}': {reason}")
        self.path: Final = path


@final
class LineOutOfRangeError(DiagnosticError):
    def __init__(self, name: str, line_number: int, line_count: int) -> None:
        super().__init__(f"Line {line_number} does not exist in '{name}', which has {line_count} line(s).")
        self.line_number: Final = line_number
        self.line_count: Final = line_count


@final
class SourceReadError(DiagnosticError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Failed to read from '{name}': {reason}")
