import logging
import sys
from pathlib import Path
from typing import Final
from typing import Optional
from typing import TextIO
from typing import final

from bassil.config import Config
from bassil.diagnostics.diagnostic import Diagnostic
from bassil.diagnostics.errors import DiagnosticError
from bassil.diagnostics.reporter import DiagnosticReporter
from bassil.lexing.lexer import Lexer
from bassil.lexing.lexer import UnterminatedStringError
from bassil.notifier import LoggingNotifier
from bassil.notifier import NotificationKind
from bassil.notifier import Notifier
from bassil.persistence import clear_file
from bassil.persistence import read_source_file
from bassil.persistence import save_tokens

logger: Final = logging.getLogger(__name__)

EXIT_SUCCESS: Final = 0
EXIT_FAILURE: Final = 1
EXIT_CONFIGURATION_ERROR: Final = 2


@final
class Shell:
    def __init__(
        self,
        config: Config,
        notifier: Optional[Notifier] = None,
        sink: Optional[TextIO] = None,
    ) -> None:
        self._config: Final = config
        self._notifier: Final = LoggingNotifier() if notifier is None else notifier
        self._reporter: Final = DiagnosticReporter(config.reporter_settings, sink)

    def run(self) -> int:
        source_file: Final = self._config.source_file
        tokens_file: Final = self._config.tokens_file
        self._notifier.notify("Started bassil shell", f"Tokenizing '{source_file}'.")
        clear_file(tokens_file)

        try:
            source: Final = read_source_file(source_file)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Unable to read source file '{source_file}': {e}")
            self._notifier.notify("Unable to read source file", str(e), NotificationKind.ERROR)
            return EXIT_FAILURE

        lexer: Final = Lexer(source, self._config.lexer_settings)
        try:
            tokens: Final = lexer.tokenize()
        except UnterminatedStringError as e:
            logger.error(f"Tokenization of '{source_file}' aborted: {e}")
            # Keep whatever was scanned before the failure.
            save_tokens(tokens_file, e.tokens)
            self._report(Diagnostic.from_span(source_file, e.span, str(e)))
            self._notifier.notify("Tokenization failed", str(e), NotificationKind.ERROR)
            return EXIT_FAILURE

        anomalies: Final = lexer.anomalies
        for anomaly in anomalies:
            self._report(Diagnostic.from_span(source_file, anomaly.span, anomaly.message))
        save_tokens(tokens_file, tokens)

        if anomalies:
            self._notifier.notify(
                "Tokenization finished with warnings",
                f"Produced {len(tokens)} token(s), {len(anomalies)} warning(s).",
                NotificationKind.WARNING,
            )
        else:
            self._notifier.notify("Tokenization finished", f"Produced {len(tokens)} token(s).")
        return EXIT_SUCCESS

    def _report(self, diagnostic: Diagnostic) -> None:
        try:
            self._reporter.report_diagnostic(diagnostic)
        except DiagnosticError as e:
            # A broken diagnostic must not abort the rest of the run.
            logger.error(f"Unable to report diagnostic for {diagnostic.path}:{diagnostic.line}: {e}")


def _create_log_file_handler(path: Path) -> logging.FileHandler:
    # Every run starts with an empty log.
    clear_file(path)
    handler: Final = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    return handler


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        config: Final = Config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(EXIT_CONFIGURATION_ERROR)
    root_logger: Final = logging.getLogger()
    root_logger.setLevel(config.log_level)
    if config.log_file is not None:
        root_logger.addHandler(_create_log_file_handler(config.log_file))
    sys.exit(Shell(config).run())


if __name__ == "__main__":
    main()
