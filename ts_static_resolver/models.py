from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ValueType(Enum):
    """Discriminant of a resolved static value."""

    NUMERIC_LITERAL = "NumericLiteral"
    BIGINT_LITERAL = "BigIntLiteral"
    STRING_LITERAL = "StringLiteral"
    REGULAR_EXPRESSION_LITERAL = "RegularExpressionLiteral"
    TRUE_KEYWORD = "TrueKeyword"
    FALSE_KEYWORD = "FalseKeyword"
    ARRAY_LITERAL_EXPRESSION = "ArrayLiteralExpression"
    OBJECT_LITERAL_EXPRESSION = "ObjectLiteralExpression"


@dataclass(frozen=True)
class ResolverResult:
    """
    Outcome of resolving a node to a literal value.

    value_type is None when no static value is available; value is None then too.
    Aggregate values hold the raw child values, never nested ResolverResults.
    """

    value_type: Optional[ValueType]
    value: Any = None

    @property
    def is_resolved(self) -> bool:
        return self.value_type is not None

    @classmethod
    def numeric(cls, value: float) -> "ResolverResult":
        return cls(ValueType.NUMERIC_LITERAL, value)

    @classmethod
    def string(cls, value: str) -> "ResolverResult":
        return cls(ValueType.STRING_LITERAL, value)

    @classmethod
    def boolean(cls, value: bool) -> "ResolverResult":
        return cls(ValueType.TRUE_KEYWORD if value else ValueType.FALSE_KEYWORD, value)


UNRESOLVED = ResolverResult(None, None)
