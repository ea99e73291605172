import logging
from pathlib import Path
from typing import Final
from typing import TextIO

from bassil.diagnostics.errors import InvalidLineNumberError
from bassil.diagnostics.errors import LineOutOfRangeError
from bassil.diagnostics.errors import SourceFileNotFoundError
from bassil.diagnostics.errors import SourceReadError
from bassil.lexing.token import Token
from bassil.lexing.token_stream import dump_tokens
from bassil.lexing.token_stream import load_tokens

logger: Final = logging.getLogger(__name__)


def read_source_file(path: Path) -> str:
    """Read a source file, making sure that every line (including the last one) ends in a line feed.

    A leading UTF-8 byte order mark is dropped.
    """
    with path.open(encoding="utf-8-sig") as file:
        return "".join(line.removesuffix("\n") + "\n" for line in file)


def read_line(handle: TextIO, line_number: int, *, name: str = "<stream>") -> str:
    """Return line `line_number` (1-based) of `handle` without its line terminator.

    The read position of `handle` is restored before returning, even if reading fails,
    so that other readers of the same handle are not disturbed.
    """
    if line_number < 1:
        raise InvalidLineNumberError(line_number)
    try:
        original_position: Final = handle.tell()
    except (OSError, ValueError) as e:
        raise SourceReadError(name, str(e)) from e

    try:
        handle.seek(0)
        line_count = 0
        while True:
            line = handle.readline()
            if not line:
                break
            line_count += 1
            if line_count == line_number:
                return line.removesuffix("\n")
        raise LineOutOfRangeError(name, line_number, line_count)
    except (OSError, ValueError) as e:
        # `ValueError` covers undecodable bytes as well as closed or detached handles.
        raise SourceReadError(name, str(e)) from e
    finally:
        handle.seek(original_position)


def read_line_from_file(path: Path, line_number: int) -> str:
    if line_number < 1:
        raise InvalidLineNumberError(line_number)
    try:
        file: Final = path.open(encoding="utf-8-sig")
    except OSError as e:
        raise SourceFileNotFoundError(path, e.strerror or str(e)) from e
    with file:
        return read_line(file, line_number, name=str(path))


def save_tokens(path: Path, tokens: list[Token]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_tokens(tokens), encoding="utf-8")
    logger.info(f"Saved {len(tokens)} token(s) to '{path}'")


def load_token_file(path: Path) -> list[Token]:
    return load_tokens(path.read_text(encoding="utf-8"))


def clear_file(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
