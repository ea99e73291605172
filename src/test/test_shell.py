import io
import logging
from pathlib import Path
from typing import Final
from typing import NamedTuple
from typing import final

import pytest

from bassil.config import DECORATION_ENV_VARIABLE
from bassil.config import LOG_FILE_ENV_VARIABLE
from bassil.config import SOURCE_FILE_ENV_VARIABLE
from bassil.config import Config
from bassil.diagnostics.errors import LineOutOfRangeError
from bassil.diagnostics.reporter import DiagnosticReporter
from bassil.lexing.token_kinds import TokenKind
from bassil.notifier import NotificationKind
from bassil.notifier import Notifier
from bassil.persistence import load_token_file
from bassil.shell import EXIT_CONFIGURATION_ERROR
from bassil.shell import EXIT_FAILURE
from bassil.shell import EXIT_SUCCESS
from bassil.shell import Shell
from bassil.shell import main


@final
class _Notification(NamedTuple):
    title: str
    message: str
    kind: NotificationKind


@final
class _RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.notifications: Final[list[_Notification]] = []

    def notify(self, title: str, message: str, kind: NotificationKind = NotificationKind.INFO) -> None:
        self.notifications.append(_Notification(title, message, kind))


@final
class _Session(NamedTuple):
    shell: Shell
    notifier: _RecordingNotifier
    sink: io.StringIO
    tokens_file: Path


def _create_session(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, source: str) -> _Session:
    source_file: Final = tmp_path / "program.bsl"
    source_file.write_text(source, encoding="utf-8")
    monkeypatch.setenv(SOURCE_FILE_ENV_VARIABLE, str(source_file))
    monkeypatch.setenv(DECORATION_ENV_VARIABLE, "never")
    config: Final = Config()
    notifier: Final = _RecordingNotifier()
    sink: Final = io.StringIO()
    return _Session(Shell(config, notifier, sink), notifier, sink, config.tokens_file)


def test_run_tokenizes_and_stores_tokens(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    session: Final = _create_session(monkeypatch, tmp_path, "int x = 5;\n")

    assert session.shell.run() == EXIT_SUCCESS

    tokens: Final = load_token_file(session.tokens_file)
    assert [token.text for token in tokens] == ["int", "x", "=", "5", ";"]
    assert not session.sink.getvalue()
    assert [notification.kind for notification in session.notifier.notifications] == [
        NotificationKind.INFO,
        NotificationKind.INFO,
    ]
    assert session.notifier.notifications[-1].message == "Produced 5 token(s)."


def test_run_reports_anomalies_and_continues(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    session: Final = _create_session(monkeypatch, tmp_path, "float f = 3.14.15;\nchar c = @;\n")

    assert session.shell.run() == EXIT_SUCCESS

    output: Final = session.sink.getvalue()
    assert "line 1, columns 15-17" in output
    assert "    float f = 3.14.15;\n    --------------^^^\n" in output
    assert "unexpected second decimal point" in output
    assert "line 2, columns 10-10" in output
    assert "Unexpected character '@'." in output

    tokens: Final = load_token_file(session.tokens_file)
    assert [token.kind for token in tokens].count(TokenKind.UNKNOWN) == 2
    assert session.notifier.notifications[-1].kind == NotificationKind.WARNING


def test_run_keeps_partial_tokens_on_unterminated_string(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    session: Final = _create_session(monkeypatch, tmp_path, 'int x;\nstring s = "oops\n')

    assert session.shell.run() == EXIT_FAILURE

    tokens: Final = load_token_file(session.tokens_file)
    assert [token.text for token in tokens] == ["int", "x", ";", "string", "s", "="]
    output: Final = session.sink.getvalue()
    assert "line 2, columns 12-17" in output
    assert '    string s = "oops\n    -----------^^^^^^\n' in output
    assert "Unterminated string literal starting at line 2, column 12." in output
    assert session.notifier.notifications[-1].kind == NotificationKind.ERROR


def test_run_fails_on_missing_source_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    session: Final = _create_session(monkeypatch, tmp_path, "")
    (tmp_path / "program.bsl").unlink()

    assert session.shell.run() == EXIT_FAILURE

    assert session.notifier.notifications[-1].kind == NotificationKind.ERROR
    assert session.tokens_file.read_text(encoding="utf-8") == ""


def test_failing_diagnostic_does_not_abort_the_run(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    session: Final = _create_session(monkeypatch, tmp_path, "a @ b;\n")

    def _failing_line_reader(path: Path, line_number: int) -> str:
        raise LineOutOfRangeError(str(path), line_number, 0)

    monkeypatch.setattr(
        session.shell,
        "_reporter",
        DiagnosticReporter(sink=session.sink, line_reader=_failing_line_reader),
    )
    with caplog.at_level(logging.ERROR, logger="bassil.shell"):
        assert session.shell.run() == EXIT_SUCCESS

    assert "Unable to report diagnostic" in caplog.text
    assert len(load_token_file(session.tokens_file)) == 4


def test_main_exits_with_configuration_error(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="bassil.shell"), pytest.raises(SystemExit) as e:
        main()
    assert e.value.code == EXIT_CONFIGURATION_ERROR
    assert "Invalid configuration" in caplog.text


def test_main_runs_the_shell(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    source_file: Final = tmp_path / "program.bsl"
    source_file.write_text("int x;\n", encoding="utf-8")
    monkeypatch.setenv(SOURCE_FILE_ENV_VARIABLE, str(source_file))

    root_logger: Final = logging.getLogger()
    original_level: Final = root_logger.level
    try:
        with pytest.raises(SystemExit) as e:
            main()
    finally:
        root_logger.setLevel(original_level)

    assert e.value.code == EXIT_SUCCESS
    assert len(load_token_file(tmp_path / "after_lex.json")) == 3


def test_run_ignores_a_byte_order_mark(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    session: Final = _create_session(monkeypatch, tmp_path, "")
    (tmp_path / "program.bsl").write_bytes(b"\xef\xbb\xbfint x = 5;\n")

    assert session.shell.run() == EXIT_SUCCESS

    tokens: Final = load_token_file(session.tokens_file)
    assert tokens[0].kind == TokenKind.TYPE_INT
    assert tokens[0].start_column == 1
    assert not session.sink.getvalue()
    assert session.notifier.notifications[-1].kind == NotificationKind.INFO


def test_main_writes_a_fresh_log_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    source_file: Final = tmp_path / "program.bsl"
    source_file.write_text("int x;\n", encoding="utf-8")
    log_file: Final = tmp_path / "logs" / "logs.txt"
    log_file.parent.mkdir()
    log_file.write_text("previous run\n", encoding="utf-8")
    monkeypatch.setenv(SOURCE_FILE_ENV_VARIABLE, str(source_file))
    monkeypatch.setenv(LOG_FILE_ENV_VARIABLE, str(log_file))

    root_logger: Final = logging.getLogger()
    original_level: Final = root_logger.level
    original_handlers: Final = list(root_logger.handlers)
    try:
        with pytest.raises(SystemExit) as e:
            main()
    finally:
        root_logger.setLevel(original_level)
        for handler in list(root_logger.handlers):
            if handler not in original_handlers:
                root_logger.removeHandler(handler)
                handler.close()

    assert e.value.code == EXIT_SUCCESS
    contents: Final = log_file.read_text(encoding="utf-8")
    assert "previous run" not in contents
    assert "Tokenization finished: Produced 3 token(s)." in contents
