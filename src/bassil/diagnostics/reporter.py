import logging
import sys
from collections.abc import Callable
from collections.abc import Mapping
from pathlib import Path
from typing import Final
from typing import NamedTuple
from typing import Optional
from typing import TextIO
from typing import final
from typing import TypeAlias

from bassil.diagnostics.decoration import BOLD
from bassil.diagnostics.decoration import ITALIC
from bassil.diagnostics.decoration import RED
from bassil.diagnostics.decoration import DecorationMode
from bassil.diagnostics.decoration import sink_supports_decoration
from bassil.diagnostics.decoration import style
from bassil.diagnostics.diagnostic import Diagnostic
from bassil.diagnostics.errors import InvalidColumnRangeError
from bassil.diagnostics.errors import InvalidLineNumberError
from bassil.persistence import read_line_from_file

logger: Final = logging.getLogger(__name__)

_INDENT: Final = "    "
_FILLER: Final = "-"
_CARET: Final = "^"

LineReader: TypeAlias = Callable[[Path, int], str]


@final
class ReporterSettings(NamedTuple):
    decoration: DecorationMode = DecorationMode.AUTO


def validate_diagnostic(line_number: int, start_column: int, end_column: int) -> None:
    if start_column < 1 or start_column > end_column:
        raise InvalidColumnRangeError(start_column, end_column)
    if line_number < 1:
        raise InvalidLineNumberError(line_number)


def render_marker(source_line: str, start_column: int, end_column: int) -> str:
    # Tabs are repeated so that the carets line up no matter how wide the terminal renders them.
    filler: Final = "".join(
        "\t" if index < len(source_line) and source_line[index] == "\t" else _FILLER
        for index in range(start_column - 1)
    )
    return filler + _CARET * (end_column - start_column + 1)


def render_diagnostic(diagnostic: Diagnostic, source_line: str, *, decorated: bool) -> str:
    def _style(text: str, *codes: str) -> str:
        return style(text, *codes) if decorated else text

    header: Final = f"error: {diagnostic.path}:{diagnostic.line}:{diagnostic.start_column}"
    position: Final = f"line {diagnostic.line}, columns {diagnostic.start_column}-{diagnostic.end_column}"
    marker: Final = render_marker(source_line, diagnostic.start_column, diagnostic.end_column)
    lines: Final = [
        _style(header, BOLD),
        _style(position, ITALIC),
        _INDENT + source_line,
        _INDENT + _style(marker, BOLD, RED),
        _style(diagnostic.message, BOLD),
    ]
    return "\n".join(lines) + "\n"


@final
class DiagnosticReporter:
    def __init__(
        self,
        settings: Optional[ReporterSettings] = None,
        sink: Optional[TextIO] = None,
        line_reader: LineReader = read_line_from_file,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._settings: Final = ReporterSettings() if settings is None else settings
        self._sink: Final = sys.stderr if sink is None else sink
        self._line_reader: Final = line_reader
        self._environ: Final = environ
        self._informed_about_missing_decoration = False

    def report(
        self,
        path: Path | str,
        line_number: int,
        start_column: int,
        end_column: int,
        message: str,
    ) -> str:
        """Render an error pointing at columns `start_column` to `end_column` (inclusive) of a line.

        The rendered text is written to the sink and returned. Invalid positions are rejected before
        the file is touched. All failures propagate as `DiagnosticError` subclasses.
        """
        validate_diagnostic(line_number, start_column, end_column)
        diagnostic: Final = Diagnostic(
            path=Path(path),
            line=line_number,
            start_column=start_column,
            end_column=end_column,
            message=message,
        )
        source_line: Final = self._line_reader(diagnostic.path, line_number)
        rendered: Final = render_diagnostic(diagnostic, source_line, decorated=self._should_decorate())
        self._sink.write(rendered)
        self._sink.flush()
        return rendered

    def report_diagnostic(self, diagnostic: Diagnostic) -> str:
        return self.report(
            diagnostic.path,
            diagnostic.line,
            diagnostic.start_column,
            diagnostic.end_column,
            diagnostic.message,
        )

    def _should_decorate(self) -> bool:
        match self._settings.decoration:
            case DecorationMode.NEVER:
                return False
            case DecorationMode.ALWAYS:
                return True
            case DecorationMode.AUTO:
                if sink_supports_decoration(self._sink, self._environ):
                    return True
                if not self._informed_about_missing_decoration:
                    self._informed_about_missing_decoration = True
                    logger.info("Output does not support text decoration, falling back to plain diagnostics.")
                return False
