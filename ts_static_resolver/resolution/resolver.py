# ts_static_resolver/resolution/resolver.py
from __future__ import annotations

# -----------------------------------------------------------------------------
# Static literal resolution
#
# resolve_to_literal(node, model) computes the compile-time literal a syntax
# node denotes, without evaluating code:
#   - literals map to their value
#   - wrappers (parentheses, computed names, assertions, declarations) unwrap
#   - arrays / objects / templates rebuild from their parts (aggregates.py)
#   - identifiers go symbol -> declaration, or symbol -> inferred type
#
# The only failure signal is UNRESOLVED. Nothing escapes the entry point.
# -----------------------------------------------------------------------------

import re
from typing import Callable, Dict, List, Optional, Protocol, Set

from ..logging_utils import get_logger
from ..models import UNRESOLVED, ResolverResult, ValueType
from ..semantic.symbols import Symbol, SymbolFlags
from ..semantic.types import ObjectFlags, Type, TypeFlags
from ..syntax.nodes import (
    ArrayLiteralExpression,
    BigIntLiteral,
    Identifier,
    Node,
    NumericLiteral,
    ObjectLiteralExpression,
    PrefixUnaryExpression,
    RegularExpressionLiteral,
    SyntaxKind,
    TemplateExpression,
    VariableDeclaration,
)
from ..syntax.numbers import parse_bigint_literal, parse_numeric_literal
from .aggregates import resolve_array, resolve_object, resolve_template

logger = get_logger(__name__)

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


class SemanticModel(Protocol):
    """What the resolver needs from a type checker."""

    def get_symbol_at_location(self, node: Node) -> Optional[Symbol]: ...

    def get_aliased_symbol(self, symbol: Symbol) -> Symbol: ...

    def get_type_of_symbol(self, symbol: Symbol) -> Type: ...

    def get_type_arguments(self, type_: Type) -> List[Type]: ...


def resolve_to_literal(node: Node, model: SemanticModel) -> ResolverResult:
    """
    Resolve a node to the literal value it statically denotes.

    Args:
        node: Any syntax node
        model: Semantic model of the program the node belongs to

    Returns:
        A ResolverResult; UNRESOLVED when no static value is available
    """
    try:
        return LiteralResolver(model).resolve(node)
    except RecursionError:
        logger.warning(f"Recursion limit reached resolving {type(node).__name__}")
        return UNRESOLVED
    except Exception as e:
        logger.warning(f"Semantic model failed while resolving {type(node).__name__}: {e}")
        return UNRESOLVED


class LiteralResolver:
    """
    One resolution request.

    The in-flight symbol set lives as long as the request, so reference cycles
    are cut without any state leaking into the next call.
    """

    def __init__(self, model: SemanticModel):
        self.model = model
        self._in_flight: Set[int] = set()
        self._dispatch: Dict[SyntaxKind, Callable[[Node], ResolverResult]] = {
            SyntaxKind.NUMERIC_LITERAL: self._numeric_literal,
            SyntaxKind.BIGINT_LITERAL: self._bigint_literal,
            SyntaxKind.STRING_LITERAL: lambda n: ResolverResult.string(n.text),
            SyntaxKind.NO_SUBSTITUTION_TEMPLATE_LITERAL: lambda n: ResolverResult.string(n.text),
            SyntaxKind.REGULAR_EXPRESSION_LITERAL: self._regular_expression,
            SyntaxKind.TRUE_KEYWORD: lambda n: ResolverResult.boolean(True),
            SyntaxKind.FALSE_KEYWORD: lambda n: ResolverResult.boolean(False),
            SyntaxKind.PREFIX_UNARY_EXPRESSION: self._prefix_unary,
            SyntaxKind.ARRAY_LITERAL_EXPRESSION: self._array,
            SyntaxKind.PARENTHESIZED_EXPRESSION: lambda n: self.resolve(n.expression),
            SyntaxKind.COMPUTED_PROPERTY_NAME: lambda n: self.resolve(n.expression),
            SyntaxKind.AS_EXPRESSION: lambda n: self.resolve(n.expression),
            SyntaxKind.TYPE_ASSERTION: lambda n: self.resolve(n.expression),
            SyntaxKind.VARIABLE_DECLARATION: self._variable_declaration,
            SyntaxKind.OBJECT_LITERAL_EXPRESSION: self._object,
            SyntaxKind.IDENTIFIER: self._identifier,
            SyntaxKind.TEMPLATE_EXPRESSION: self._template,
        }

    def resolve(self, node: Node) -> ResolverResult:
        handler = self._dispatch.get(node.kind)
        if handler is None:
            logger.debug(f"No static value for {node.kind.value}")
            return UNRESOLVED
        return handler(node)

    # -------------------------------------------------------------------------
    # Literals
    # -------------------------------------------------------------------------

    def _numeric_literal(self, node: NumericLiteral) -> ResolverResult:
        try:
            return ResolverResult.numeric(parse_numeric_literal(node.text))
        except ValueError:
            logger.debug(f"Invalid numeric literal {node.text!r}")
            return UNRESOLVED

    def _bigint_literal(self, node: BigIntLiteral) -> ResolverResult:
        try:
            return ResolverResult(ValueType.BIGINT_LITERAL, parse_bigint_literal(node.text))
        except ValueError:
            logger.debug(f"Invalid bigint literal {node.text!r}")
            return UNRESOLVED

    def _regular_expression(self, node: RegularExpressionLiteral) -> ResolverResult:
        text = node.text
        end = text.rfind("/")
        if not text.startswith("/") or end <= 0:
            return UNRESOLVED
        body, flag_text = text[1:end], text[end + 1:]
        flags = 0
        for ch in flag_text:
            flags |= _REGEX_FLAGS.get(ch, 0)
        try:
            return ResolverResult(ValueType.REGULAR_EXPRESSION_LITERAL, re.compile(body, flags))
        except re.error as e:
            logger.debug(f"Regular expression /{body}/ not supported: {e}")
            return UNRESOLVED

    def _prefix_unary(self, node: PrefixUnaryExpression) -> ResolverResult:
        if node.operator != "-":
            return UNRESOLVED
        operand = self.resolve(node.operand)
        if operand.value_type is not ValueType.NUMERIC_LITERAL:
            return UNRESOLVED
        return ResolverResult.numeric(-operand.value)

    # -------------------------------------------------------------------------
    # Wrappers and aggregates
    # -------------------------------------------------------------------------

    def _variable_declaration(self, node: VariableDeclaration) -> ResolverResult:
        if node.initializer is None:
            return UNRESOLVED
        return self.resolve(node.initializer)

    def _array(self, node: ArrayLiteralExpression) -> ResolverResult:
        return resolve_array(node, self.resolve)

    def _object(self, node: ObjectLiteralExpression) -> ResolverResult:
        return resolve_object(node, self.resolve)

    def _template(self, node: TemplateExpression) -> ResolverResult:
        return resolve_template(node, self.resolve)

    # -------------------------------------------------------------------------
    # Identifiers and symbols
    # -------------------------------------------------------------------------

    def _identifier(self, node: Identifier) -> ResolverResult:
        symbol = self.model.get_symbol_at_location(node)
        if symbol is None:
            return _identifier_name_fallback(node)
        return self.resolve_symbol(symbol)

    def resolve_symbol(self, symbol: Symbol) -> ResolverResult:
        if symbol.flags is SymbolFlags.ALIAS:
            symbol = self.model.get_aliased_symbol(symbol)

        key = id(symbol)
        if key in self._in_flight:
            logger.debug(f"Reference cycle through symbol {symbol.name!r}")
            return UNRESOLVED
        self._in_flight.add(key)
        try:
            return self._resolve_symbol(symbol)
        finally:
            self._in_flight.discard(key)

    def _resolve_symbol(self, symbol: Symbol) -> ResolverResult:
        if symbol.flags is SymbolFlags.PROPERTY:
            return ResolverResult.string(symbol.name)
        if symbol.flags in (SymbolFlags.OBJECT_LITERAL, SymbolFlags.BLOCK_SCOPED_VARIABLE):
            if symbol.value_declaration is not None:
                return self.resolve(symbol.value_declaration)
        return self.resolve_type(self.model.get_type_of_symbol(symbol))

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def resolve_type(self, type_: Type) -> ResolverResult:
        if type_.flags is TypeFlags.STRING_LITERAL:
            return ResolverResult.string(type_.value)
        if type_.flags is TypeFlags.NUMBER_LITERAL:
            return ResolverResult.numeric(type_.value)
        if type_.flags is TypeFlags.OBJECT:
            if type_.object_flags is ObjectFlags.REFERENCE:
                values = [self.resolve_type(arg).value for arg in self.model.get_type_arguments(type_)]
                return ResolverResult(ValueType.ARRAY_LITERAL_EXPRESSION, values)
            if type_.symbol is not None:
                return self.resolve_symbol(type_.symbol)
        return UNRESOLVED


def _identifier_name_fallback(node: Identifier) -> ResolverResult:
    """An identifier with no symbol stands for its own name."""
    return ResolverResult.string(node.text)
