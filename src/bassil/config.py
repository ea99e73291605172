import logging
import os
from pathlib import Path
from typing import Final
from typing import Optional
from typing import final

from dotenv import load_dotenv

from bassil.diagnostics.decoration import DecorationMode
from bassil.diagnostics.reporter import ReporterSettings
from bassil.lexing.lexer import LexerSettings

SOURCE_FILE_ENV_VARIABLE: Final = "BASSIL_SOURCE_FILE"
TOKENS_FILE_ENV_VARIABLE: Final = "BASSIL_TOKENS_FILE"
TRACE_ENV_VARIABLE: Final = "BASSIL_TRACE"
DECORATION_ENV_VARIABLE: Final = "BASSIL_DECORATION"
LOG_LEVEL_ENV_VARIABLE: Final = "BASSIL_LOG_LEVEL"
LOG_FILE_ENV_VARIABLE: Final = "BASSIL_LOG_FILE"

DEFAULT_TOKENS_FILE_NAME: Final = "after_lex.json"

_TRUE_VALUES: Final = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final = frozenset({"0", "false", "no", "off"})


def get_environment_variable_or_raise(key: str) -> str:
    value = os.getenv(key)
    if value is None or not value.strip():
        raise ValueError(f"Environment variable '{key}' is not set.")
    return value.strip()


def get_environment_variable_or_default(
    key: str,
    default: str | None,
) -> str | None:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_environment_variable_or_fallback(key: str, fallback: str) -> str:
    value: Final = get_environment_variable_or_default(key, None)
    return fallback if value is None else value


def parse_bool(key: str, value: str) -> bool:
    normalized: Final = value.lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Environment variable '{key}' must be a boolean, got '{value}'.")


def parse_decoration_mode(key: str, value: str) -> DecorationMode:
    try:
        return DecorationMode(value.lower())
    except ValueError as e:
        allowed: Final = ", ".join(mode.value for mode in DecorationMode)
        raise ValueError(f"Environment variable '{key}' must be one of {allowed}, got '{value}'.") from e


def parse_log_level(key: str, value: str) -> int:
    level: Final = logging.getLevelNamesMapping().get(value.upper())
    if level is None:
        raise ValueError(f"Environment variable '{key}' is not a valid log level: '{value}'.")
    return level


@final
class Config:
    def __init__(self) -> None:
        self._source_file: Optional[Path] = None
        self._tokens_file: Optional[Path] = None
        self._trace: bool = False
        self._decoration: DecorationMode = DecorationMode.AUTO
        self._log_level: int = logging.INFO
        self._log_file: Optional[Path] = None
        self.reload()

    def reload(self) -> None:
        load_dotenv(Path.cwd() / ".env")
        self._source_file = Path(get_environment_variable_or_raise(SOURCE_FILE_ENV_VARIABLE))
        tokens_file: Final = get_environment_variable_or_default(TOKENS_FILE_ENV_VARIABLE, None)
        self._tokens_file = (
            self._source_file.with_name(DEFAULT_TOKENS_FILE_NAME) if tokens_file is None else Path(tokens_file)
        )
        self._trace = parse_bool(
            TRACE_ENV_VARIABLE,
            get_environment_variable_or_fallback(TRACE_ENV_VARIABLE, "false"),
        )
        self._decoration = parse_decoration_mode(
            DECORATION_ENV_VARIABLE,
            get_environment_variable_or_fallback(DECORATION_ENV_VARIABLE, DecorationMode.AUTO.value),
        )
        self._log_level = parse_log_level(
            LOG_LEVEL_ENV_VARIABLE,
            get_environment_variable_or_fallback(LOG_LEVEL_ENV_VARIABLE, "INFO"),
        )
        log_file: Final = get_environment_variable_or_default(LOG_FILE_ENV_VARIABLE, None)
        self._log_file = None if log_file is None else Path(log_file)

    @property
    def source_file(self) -> Path:
        if self._source_file is None:
            raise AssertionError("Source file path is not set. This should not happen.")
        return self._source_file

    @property
    def tokens_file(self) -> Path:
        if self._tokens_file is None:
            raise AssertionError("Tokens file path is not set. This should not happen.")
        return self._tokens_file

    @property
    def log_level(self) -> int:
        return self._log_level

    @property
    def log_file(self) -> Optional[Path]:
        return self._log_file

    @property
    def lexer_settings(self) -> LexerSettings:
        return LexerSettings(trace=self._trace)

    @property
    def reporter_settings(self) -> ReporterSettings:
        return ReporterSettings(decoration=self._decoration)
