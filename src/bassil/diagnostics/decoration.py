import os
from collections.abc import Mapping
from enum import Enum
from typing import Final
from typing import Optional
from typing import TextIO
from typing import final

BOLD: Final = "\033[1m"
ITALIC: Final = "\033[3m"
RED: Final = "\033[31m"
RESET: Final = "\033[0m"


@final
class DecorationMode(Enum):
    AUTO = "auto"  # Decorate only if the sink looks like it understands escape sequences.
    ALWAYS = "always"
    NEVER = "never"


def sink_supports_decoration(sink: TextIO, environ: Optional[Mapping[str, str]] = None) -> bool:
    if environ is None:
        environ = os.environ
    # See https://no-color.org/.
    if environ.get("NO_COLOR"):
        return False
    if environ.get("TERM") == "dumb":
        return False
    try:
        return sink.isatty()
    except ValueError:
        # The sink has already been closed.
        return False


def style(text: str, *codes: str) -> str:
    if not codes:
        return text
    return "".join(codes) + text + RESET
