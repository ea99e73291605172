import logging
from typing import Final
from typing import NamedTuple
from typing import Optional
from typing import final

from bassil.lexing.source_location import Span
from bassil.lexing.token import Token
from bassil.lexing.token_kinds import TokenKind

logger: Final = logging.getLogger(__name__)

_KEYWORDS: Final = {
    "int": TokenKind.TYPE_INT,
    "char": TokenKind.TYPE_CHAR,
    "float": TokenKind.TYPE_FLOAT,
    "string": TokenKind.TYPE_STRING,
}

# Two-character operators are always tried before their one-character prefixes.
_TWO_CHAR_TOKENS: Final = {
    "==": TokenKind.COMPARISON_OPERATOR,
    "!=": TokenKind.COMPARISON_OPERATOR,
    "<=": TokenKind.COMPARISON_OPERATOR,
    ">=": TokenKind.COMPARISON_OPERATOR,
    "&&": TokenKind.LOGICAL_OPERATOR,
    "||": TokenKind.LOGICAL_OPERATOR,
}

_SINGLE_CHAR_TOKENS: Final = {
    "+": TokenKind.MATH_OPERATOR,
    "-": TokenKind.MATH_OPERATOR,
    "*": TokenKind.MATH_OPERATOR,
    "/": TokenKind.MATH_OPERATOR,
    "%": TokenKind.MATH_OPERATOR,
    "=": TokenKind.EQUALS_SIGN,
    "<": TokenKind.COMPARISON_OPERATOR,
    ">": TokenKind.COMPARISON_OPERATOR,
    "!": TokenKind.LOGICAL_OPERATOR,
    "(": TokenKind.LEFT_PARENTHESIS,
    ")": TokenKind.RIGHT_PARENTHESIS,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
}


@final
class LexerSettings(NamedTuple):
    trace: bool = False  # Log every produced token at DEBUG level?


@final
class LexicalAnomaly(NamedTuple):
    message: str
    span: Span


class LexerError(RuntimeError):
    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.span: Final = span


@final
class UnterminatedStringError(LexerError):
    """Raised when a string literal is not closed before the end of its line.

    `span` starts at the opening quote and ends at the column right after the
    last character that was scanned. `tokens` holds everything that was
    successfully scanned before the string literal started.
    """

    def __init__(self, span: Span, tokens: list[Token]) -> None:
        super().__init__(
            f"Unterminated string literal starting at line {span.line}, column {span.start_column}.",
            span,
        )
        self.tokens: Final = tokens


@final
class Lexer:
    def __init__(self, source: str, settings: Optional[LexerSettings] = None) -> None:
        self._source: Final = source
        self._settings: Final = LexerSettings() if settings is None else settings
        self._current_offset = 0
        self._line = 1
        self._column = 1
        self._anomalies: list[LexicalAnomaly] = []

    @property
    def anomalies(self) -> list[LexicalAnomaly]:
        """Recoverable problems found by the most recent call to `tokenize()`."""
        return list(self._anomalies)

    def tokenize(self) -> list[Token]:
        self._current_offset = 0
        self._line = 1
        self._column = 1
        self._anomalies = []

        tokens: Final[list[Token]] = []
        while True:
            self._discard_whitespace()
            if self._is_at_end():
                break
            match self._current():
                case _ as char if Lexer._is_valid_identifier_start(char):
                    self._scan_identifier_or_keyword(tokens)
                case _ as char if Lexer._is_digit(char):
                    self._scan_number(tokens)
                case '"':
                    self._scan_string(tokens)
                case _ as char if char + self._peek() in _TWO_CHAR_TOKENS:
                    start_offset = self._current_offset
                    start_column = self._column
                    self._advance()
                    self._advance()
                    self._emit(tokens, _TWO_CHAR_TOKENS[char + self._previous()], start_offset, start_column)
                case _ as char if char in _SINGLE_CHAR_TOKENS:
                    start_offset = self._current_offset
                    start_column = self._column
                    self._advance()
                    self._emit(tokens, _SINGLE_CHAR_TOKENS[char], start_offset, start_column)
                case _ as char:
                    start_offset = self._current_offset
                    start_column = self._column
                    self._advance()
                    token = self._emit(tokens, TokenKind.UNKNOWN, start_offset, start_column)
                    if char.isascii():
                        self._record_anomaly(f"Unexpected character '{char}'.", token.span)
                    else:
                        self._record_anomaly(f"Invalid character '{char}'.", token.span)
        return tokens

    def _scan_identifier_or_keyword(self, tokens: list[Token]) -> None:
        start_offset: Final = self._current_offset
        start_column: Final = self._column
        self._advance()
        while not self._is_at_end() and Lexer._is_valid_identifier_continuation(self._current()):
            self._advance()
        lexeme: Final = self._source[start_offset : self._current_offset]
        self._emit(tokens, _KEYWORDS.get(lexeme, TokenKind.IDENTIFIER), start_offset, start_column)

    def _scan_number(self, tokens: list[Token]) -> None:
        start_offset: Final = self._current_offset
        start_column: Final = self._column
        seen_decimal_point = False
        while not self._is_at_end():
            char = self._current()
            if Lexer._is_digit(char):
                self._advance()
            elif char == "." and not seen_decimal_point:
                seen_decimal_point = True
                self._advance()
            else:
                break
        self._emit(
            tokens,
            TokenKind.FLOAT if seen_decimal_point else TokenKind.INTEGER,
            start_offset,
            start_column,
        )

        if self._is_at_end() or self._current() != ".":
            return

        # A second decimal point: the rest of the numeric run becomes a single unknown token.
        rest_offset: Final = self._current_offset
        rest_column: Final = self._column
        while not self._is_at_end() and (Lexer._is_digit(self._current()) or self._current() == "."):
            self._advance()
        token: Final = self._emit(tokens, TokenKind.UNKNOWN, rest_offset, rest_column)
        literal: Final = self._source[start_offset : self._current_offset]
        self._record_anomaly(
            f"Malformed numeric literal '{literal}': unexpected second decimal point.",
            token.span,
        )

    def _scan_string(self, tokens: list[Token]) -> None:
        start_offset: Final = self._current_offset
        start_column: Final = self._column
        self._advance()  # Consume opening quote.
        while True:
            self._ensure_string_continues(tokens, start_column)
            char = self._advance()
            if char == "\\":
                # Escape sequences are kept verbatim, only the escaped character is skipped.
                self._ensure_string_continues(tokens, start_column)
                self._advance()
                continue
            if char == '"':
                break
        self._emit(tokens, TokenKind.STRING, start_offset, start_column)

    def _ensure_string_continues(self, tokens: list[Token], start_column: int) -> None:
        if not self._is_at_end() and self._current() != "\n":
            return
        span: Final = Span(line=self._line, start_column=start_column, end_column=self._column)
        logger.debug(f"Unterminated string literal at {span}")
        raise UnterminatedStringError(span, tokens=list(tokens))

    @staticmethod
    def _is_valid_identifier_start(char: str) -> bool:
        return char.isascii() and (char.isalpha() or char == "_")

    @staticmethod
    def _is_valid_identifier_continuation(char: str) -> bool:
        return Lexer._is_valid_identifier_start(char) or Lexer._is_digit(char)

    @staticmethod
    def _is_digit(char: str) -> bool:
        return "0" <= char <= "9"

    def _emit(self, tokens: list[Token], kind: TokenKind, start_offset: int, start_column: int) -> Token:
        text: Final = self._source[start_offset : self._current_offset]
        token: Final = Token(
            kind=kind,
            text=text,
            line=self._line,
            start_column=start_column,
            end_column=start_column + len(text) - 1,
        )
        tokens.append(token)
        if self._settings.trace:
            logger.debug(token.describe())
        return token

    def _record_anomaly(self, message: str, span: Span) -> None:
        anomaly: Final = LexicalAnomaly(message=message, span=span)
        self._anomalies.append(anomaly)
        logger.warning(f"{message} ({span})")

    def _discard_whitespace(self) -> None:
        while not self._is_at_end() and self._current().isspace():
            self._advance()

    def _is_at_end(self) -> bool:
        return self._current_offset >= len(self._source)

    def _current(self) -> str:
        return "\0" if self._is_at_end() else self._source[self._current_offset]

    def _peek(self) -> str:
        next_offset: Final = self._current_offset + 1
        return "\0" if next_offset >= len(self._source) else self._source[next_offset]

    def _previous(self) -> str:
        return self._source[self._current_offset - 1]

    def _advance(self) -> str:
        result: Final = self._current()
        if self._is_at_end():
            return result
        self._current_offset += 1
        if result == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return result


def tokenize(source: str, settings: Optional[LexerSettings] = None) -> list[Token]:
    return Lexer(source, settings).tokenize()
