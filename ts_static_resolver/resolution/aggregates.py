"""
Aggregate resolution: array literals, object literals, template expressions.

Each aggregate keeps its own failure policy:
- arrays always resolve; unresolved elements leave None holes
- objects always resolve; unresolved values are stored as None
- templates are all-or-nothing
"""

from typing import Any, Callable, Dict, List, Optional

from ..logging_utils import get_logger
from ..models import UNRESOLVED, ResolverResult, ValueType
from ..syntax.nodes import (
    ArrayLiteralExpression,
    Node,
    ObjectLiteralExpression,
    PropertyAssignment,
    TemplateExpression,
)
from ..syntax.numbers import format_js_number

logger = get_logger(__name__)

Resolve = Callable[[Node], ResolverResult]


def stringify_literal(result: ResolverResult) -> Optional[str]:
    """
    Text of a resolved primitive as JavaScript would coerce it to a string.

    Returns None for anything that has no string coercion here (aggregates,
    patterns, unresolved).
    """
    vt = result.value_type
    if vt is ValueType.STRING_LITERAL:
        return result.value
    if vt is ValueType.NUMERIC_LITERAL:
        return format_js_number(result.value)
    if vt is ValueType.BIGINT_LITERAL:
        return str(result.value)
    if vt is ValueType.TRUE_KEYWORD:
        return "true"
    if vt is ValueType.FALSE_KEYWORD:
        return "false"
    return None


def resolve_array(node: ArrayLiteralExpression, resolve: Resolve) -> ResolverResult:
    values: List[Any] = [resolve(element).value for element in node.elements]
    return ResolverResult(ValueType.ARRAY_LITERAL_EXPRESSION, values)


def resolve_object(node: ObjectLiteralExpression, resolve: Resolve) -> ResolverResult:
    values: Dict[str, Any] = {}
    for prop in node.properties:
        # shorthand, spread and method members carry no static value
        if not isinstance(prop, PropertyAssignment):
            continue
        key = stringify_literal(resolve(prop.name))
        if key is None:
            logger.debug(f"Skipping object property with non-literal key ({prop.name.kind.value})")
            continue
        values[key] = resolve(prop.initializer).value
    return ResolverResult(ValueType.OBJECT_LITERAL_EXPRESSION, values)


def resolve_template(node: TemplateExpression, resolve: Resolve) -> ResolverResult:
    parts = [node.head]
    for span in node.spans:
        text = stringify_literal(resolve(span.expression))
        if text is None:
            return UNRESOLVED
        parts.append(text)
        parts.append(span.literal)
    return ResolverResult.string("".join(parts))
