from typing import Final
from typing import Self
from typing import final

from pydantic import Field
from pydantic import TypeAdapter
from pydantic import model_validator
from pydantic.main import BaseModel

from bassil.lexing.token import Token
from bassil.lexing.token_kinds import TokenKind


@final
class TokenRecord(BaseModel):
    kind: TokenKind
    value: str
    line: int = Field(ge=1)
    start_column: int = Field(ge=1)
    end_column: int = Field(ge=1)

    @model_validator(mode="after")
    def check_column_range(self) -> Self:
        if self.start_column > self.end_column:
            raise ValueError(f"start_column {self.start_column} is greater than end_column {self.end_column}.")
        return self

    @classmethod
    def from_token(cls, token: Token) -> "TokenRecord":
        return cls(
            kind=token.kind,
            value=token.text,
            line=token.line,
            start_column=token.start_column,
            end_column=token.end_column,
        )

    def to_token(self) -> Token:
        return Token(
            kind=self.kind,
            text=self.value,
            line=self.line,
            start_column=self.start_column,
            end_column=self.end_column,
        )


_TOKEN_RECORDS_ADAPTER: Final = TypeAdapter(list[TokenRecord])


def dump_tokens(tokens: list[Token]) -> str:
    """Serialize tokens as a JSON array with exactly one token object per line."""
    if not tokens:
        return "[]\n"
    lines: Final = [TokenRecord.from_token(token).model_dump_json() for token in tokens]
    return "[\n" + ",\n".join(lines) + "\n]\n"


def load_tokens(text: str) -> list[Token]:
    records: Final = _TOKEN_RECORDS_ADAPTER.validate_json(text)
    return [record.to_token() for record in records]
