from collections.abc import Callable
from collections.abc import Iterator
from pathlib import Path
from typing import TypeAlias

import pytest

from bassil.config import DECORATION_ENV_VARIABLE
from bassil.config import LOG_FILE_ENV_VARIABLE
from bassil.config import LOG_LEVEL_ENV_VARIABLE
from bassil.config import SOURCE_FILE_ENV_VARIABLE
from bassil.config import TOKENS_FILE_ENV_VARIABLE
from bassil.config import TRACE_ENV_VARIABLE

SourceWriter: TypeAlias = Callable[[str], Path]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    for variable in (
        SOURCE_FILE_ENV_VARIABLE,
        TOKENS_FILE_ENV_VARIABLE,
        TRACE_ENV_VARIABLE,
        DECORATION_ENV_VARIABLE,
        LOG_LEVEL_ENV_VARIABLE,
        LOG_FILE_ENV_VARIABLE,
        "NO_COLOR",
    ):
        monkeypatch.delenv(variable, raising=False)
    # Keep `load_dotenv()` from picking up a developer's `.env` file.
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def write_source(tmp_path: Path) -> SourceWriter:
    def _write(contents: str) -> Path:
        path = tmp_path / "program.bsl"
        path.write_text(contents, encoding="utf-8")
        return path

    return _write
