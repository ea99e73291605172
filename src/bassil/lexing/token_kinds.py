from enum import Enum
from typing import final


@final
class TokenKind(Enum):
    # The values are the stable names used when serializing a token stream.
    IDENTIFIER = "Identifier"

    TYPE_INT = "TypeInt"
    TYPE_CHAR = "TypeChar"
    TYPE_FLOAT = "TypeFloat"
    TYPE_STRING = "TypeString"

    INTEGER = "Integer"
    FLOAT = "Float"
    STRING = "String"

    MATH_OPERATOR = "MathOperator"
    COMPARISON_OPERATOR = "ComparisonOperator"
    LOGICAL_OPERATOR = "LogicalOperator"
    EQUALS_SIGN = "EqualsSign"

    SEMICOLON = "Semicolon"
    COMMA = "Comma"
    LEFT_PARENTHESIS = "LeftParenthesis"
    RIGHT_PARENTHESIS = "RightParenthesis"
    LEFT_BRACE = "LeftBrace"
    RIGHT_BRACE = "RightBrace"

    UNKNOWN = "Unknown"

    @property
    def is_keyword(self) -> bool:
        return self in _KEYWORD_KINDS

    @property
    def is_literal(self) -> bool:
        return self in _LITERAL_KINDS

    @property
    def is_operator(self) -> bool:
        return self in _OPERATOR_KINDS

    def __str__(self) -> str:
        return self.value


_KEYWORD_KINDS = frozenset(
    {
        TokenKind.TYPE_INT,
        TokenKind.TYPE_CHAR,
        TokenKind.TYPE_FLOAT,
        TokenKind.TYPE_STRING,
    }
)

_LITERAL_KINDS = frozenset(
    {
        TokenKind.INTEGER,
        TokenKind.FLOAT,
        TokenKind.STRING,
    }
)

_OPERATOR_KINDS = frozenset(
    {
        TokenKind.MATH_OPERATOR,
        TokenKind.COMPARISON_OPERATOR,
        TokenKind.LOGICAL_OPERATOR,
        TokenKind.EQUALS_SIGN,
    }
)
