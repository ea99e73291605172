import subprocess
import sys

from bassil.diagnostics.reporter import DiagnosticReporter
from bassil.lexing.lexer import Lexer
from bassil.lexing.lexer import tokenize
from bassil.lexing.token import Token
from bassil.lexing.token_kinds import TokenKind

__all__ = [
    "DiagnosticReporter",
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
]


def _run_poe_task(task: str) -> None:
    sys.exit(subprocess.run(["poe", task]).returncode)


def check() -> None:
    _run_poe_task("check")


def fix() -> None:
    _run_poe_task("fix")


def test() -> None:
    _run_poe_task("test")
