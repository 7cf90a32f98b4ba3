# ts_static_resolver/semantic/checker.py
from __future__ import annotations

# -----------------------------------------------------------------------------
# Type checker (the resolver's semantic model)
#
# Purpose:
#   - Map identifiers to symbols (declaration names first, then scope chain)
#   - Follow import/export aliases one hop to the exporting module
#   - Infer just enough types for literal recovery:
#       literal types, const vs. widened declarations, `as const` tuples,
#       annotations (literal, tuple, array, readonly, references, unions)
#
# Non-goals:
#   - Assignability, overloads, generics instantiation, control-flow narrowing
# -----------------------------------------------------------------------------

from typing import TYPE_CHECKING, List, Optional, Set

from ..logging_utils import get_logger
from ..syntax.nodes import (
    ArrayLiteralExpression,
    ArrayType,
    AsExpression,
    BigIntLiteral,
    BindingElement,
    FalseKeyword,
    FunctionExpression,
    Identifier,
    KeywordType,
    LiteralType,
    MethodDeclaration,
    NoSubstitutionTemplateLiteral,
    Node,
    NullKeyword,
    NumericLiteral,
    ObjectLiteralExpression,
    OmittedExpression,
    Parameter,
    ParenthesizedExpression,
    PrefixUnaryExpression,
    PropertyAssignment,
    PropertySignature,
    RegularExpressionLiteral,
    SatisfiesExpression,
    ShorthandPropertyAssignment,
    SpreadElement,
    StringLiteral,
    TemplateExpression,
    TrueKeyword,
    TupleType,
    TypeAliasDeclaration,
    TypeAssertion,
    TypeLiteral,
    TypeOperator,
    TypeReference,
    UnionType,
    VariableDeclaration,
    is_const_assertion,
)
from ..syntax.numbers import parse_bigint_literal, parse_numeric_literal
from .symbols import UNKNOWN_SYMBOL, Symbol, SymbolFlags
from .types import (
    ANY_TYPE,
    UNKNOWN_TYPE,
    ObjectFlags,
    Type,
    TypeFlags,
    anonymous_type,
    literal_type,
    reference_type,
    union_type,
)

if TYPE_CHECKING:
    from .program import Program

logger = get_logger(__name__)

_KEYWORD_TYPES = {
    "any": TypeFlags.ANY,
    "unknown": TypeFlags.UNKNOWN,
    "never": TypeFlags.NEVER,
    "string": TypeFlags.STRING,
    "number": TypeFlags.NUMBER,
    "bigint": TypeFlags.BIGINT,
    "boolean": TypeFlags.BOOLEAN,
    "null": TypeFlags.NULL,
    "undefined": TypeFlags.UNDEFINED,
    "void": TypeFlags.UNDEFINED,
    "object": TypeFlags.OBJECT,
}

_AMBIENT_TYPES = {
    "undefined": Type(TypeFlags.UNDEFINED),
    "NaN": Type(TypeFlags.NUMBER),
    "Infinity": Type(TypeFlags.NUMBER),
}

_VARIABLE_FLAGS = (SymbolFlags.BLOCK_SCOPED_VARIABLE, SymbolFlags.FUNCTION_SCOPED_VARIABLE)


class TypeChecker:
    """
    Answers symbol and type queries over a bound Program.

    Holds only a guard set for in-progress symbols between calls; results are
    recomputed on every query.
    """

    def __init__(self, program: "Program"):
        self.program = program
        self._resolving: Set[int] = set()

    # =========================================================================
    # Symbols
    # =========================================================================

    def get_symbol_at_location(self, node: Node) -> Optional[Symbol]:
        declared = self.program.declared.get(node)
        if declared is not None:
            return declared
        if isinstance(node, Identifier):
            scope = self.program.scopes.get(node)
            if scope is not None:
                return scope.lookup(node.text)
        return None

    def get_aliased_symbol(self, symbol: Symbol) -> Symbol:
        """One hop through an import or export specifier."""
        if symbol.flags is not SymbolFlags.ALIAS:
            return symbol

        if symbol.module_specifier is None:
            # export { a as b } / export default a: target is a local of the same file
            fs = self.program.file_symbols.get(symbol.source_file or "")
            if fs is None or symbol.import_name is None:
                return UNKNOWN_SYMBOL
            target = fs.locals.symbols.get(symbol.import_name) or fs.locals.types.get(symbol.import_name)
            return target or UNKNOWN_SYMBOL

        path = self.program.resolve_module(symbol.source_file or "", symbol.module_specifier)
        if path is None:
            logger.debug(f"Unresolved module {symbol.module_specifier!r} for alias {symbol.name}")
            return UNKNOWN_SYMBOL
        if symbol.import_name is None:
            return self.program.module_symbols[path]
        target = self._resolve_export(path, symbol.import_name, set())
        return target or UNKNOWN_SYMBOL

    def _resolve_export(self, path: str, name: str, visited: Set[str]) -> Optional[Symbol]:
        visited.add(path)
        fs = self.program.file_symbols.get(path)
        if fs is None:
            return None
        found = fs.exports.get(name)
        if found is not None:
            return found
        if name == "default":
            return None
        for specifier in fs.star_exports:
            next_path = self.program.resolve_module(path, specifier)
            if next_path is None or next_path in visited:
                continue
            found = self._resolve_export(next_path, name, visited)
            if found is not None:
                return found
        return None

    def resolve_alias_chain(self, symbol: Symbol) -> Symbol:
        seen: Set[int] = set()
        while symbol.flags is SymbolFlags.ALIAS and id(symbol) not in seen:
            seen.add(id(symbol))
            symbol = self.get_aliased_symbol(symbol)
        return symbol

    # =========================================================================
    # Types of symbols
    # =========================================================================

    def get_type_of_symbol(self, symbol: Symbol) -> Type:
        key = id(symbol)
        if key in self._resolving:
            return ANY_TYPE
        self._resolving.add(key)
        try:
            return self._compute_type_of_symbol(symbol)
        finally:
            self._resolving.discard(key)

    def _compute_type_of_symbol(self, symbol: Symbol) -> Type:
        flags = symbol.flags
        decl = symbol.value_declaration

        if flags in _VARIABLE_FLAGS:
            if decl is None:
                return _AMBIENT_TYPES.get(symbol.name, UNKNOWN_TYPE)
            if isinstance(decl, (VariableDeclaration, Parameter)):
                if decl.type is not None:
                    return self.type_from_type_node(decl.type)
                if decl.initializer is None:
                    return ANY_TYPE
                inferred = self._type_of_expression(decl.initializer)
                if symbol.is_const or _is_const_context(decl.initializer):
                    return inferred
                return inferred.widened()
            if isinstance(decl, BindingElement):
                # destructured names are not followed into their source
                return ANY_TYPE
            # `export default <expression>`
            return self._type_of_expression(decl)

        if flags is SymbolFlags.PROPERTY:
            if isinstance(decl, PropertyAssignment):
                inferred = self._type_of_expression(decl.initializer)
                return inferred if _is_const_context(decl.initializer) else inferred.widened()
            if isinstance(decl, ShorthandPropertyAssignment):
                scope = self.program.scopes.get(decl.name)
                target = scope.lookup(decl.name.text) if scope is not None else None
                return self.get_type_of_symbol(target) if target is not None else UNKNOWN_TYPE
            if isinstance(decl, PropertySignature):
                return self.type_from_type_node(decl.type) if decl.type is not None else ANY_TYPE
            if isinstance(decl, MethodDeclaration):
                return anonymous_type(symbol)
            return UNKNOWN_TYPE

        if flags is SymbolFlags.ALIAS:
            target = self.resolve_alias_chain(symbol)
            if target.flags in (SymbolFlags.ALIAS, SymbolFlags.UNKNOWN):
                return UNKNOWN_TYPE
            return self.get_type_of_symbol(target)

        if flags in (SymbolFlags.FUNCTION, SymbolFlags.ENUM, SymbolFlags.NAMESPACE):
            return anonymous_type(symbol)
        if flags is SymbolFlags.CLASS:
            return anonymous_type(symbol, ObjectFlags.CLASS)

        # object literals, type-only symbols, modules
        return UNKNOWN_TYPE

    def get_type_arguments(self, type_: Type) -> List[Type]:
        if type_.object_flags is ObjectFlags.REFERENCE:
            return list(type_.type_arguments)
        return []

    # =========================================================================
    # Types of expressions
    # =========================================================================

    def get_type_of_expression(self, node: Node) -> Type:
        return self._type_of_expression(node)

    def _type_of_expression(self, node: Node, const_context: bool = False) -> Type:
        if isinstance(node, (ParenthesizedExpression, SatisfiesExpression)):
            return self._type_of_expression(node.expression, const_context)
        if isinstance(node, (AsExpression, TypeAssertion)):
            if is_const_assertion(node):
                return self._type_of_expression(node.expression, True)
            return self.type_from_type_node(node.type)

        if isinstance(node, NumericLiteral):
            try:
                return literal_type(TypeFlags.NUMBER_LITERAL, parse_numeric_literal(node.text))
            except ValueError:
                return Type(TypeFlags.NUMBER)
        if isinstance(node, BigIntLiteral):
            try:
                return literal_type(TypeFlags.BIGINT_LITERAL, parse_bigint_literal(node.text))
            except ValueError:
                return Type(TypeFlags.BIGINT)
        if isinstance(node, (StringLiteral, NoSubstitutionTemplateLiteral)):
            return literal_type(TypeFlags.STRING_LITERAL, node.text)
        if isinstance(node, TemplateExpression):
            return Type(TypeFlags.STRING)
        if isinstance(node, TrueKeyword):
            return literal_type(TypeFlags.BOOLEAN_LITERAL, True)
        if isinstance(node, FalseKeyword):
            return literal_type(TypeFlags.BOOLEAN_LITERAL, False)
        if isinstance(node, NullKeyword):
            return Type(TypeFlags.NULL)
        if isinstance(node, RegularExpressionLiteral):
            return anonymous_type(None, ObjectFlags.INTERFACE)

        if isinstance(node, PrefixUnaryExpression):
            return self._type_of_prefix_unary(node)
        if isinstance(node, ArrayLiteralExpression):
            return self._type_of_array(node, const_context)
        if isinstance(node, ObjectLiteralExpression):
            return anonymous_type(self.program.literal_symbols.get(node))
        if isinstance(node, FunctionExpression):
            return anonymous_type(None)

        if isinstance(node, Identifier):
            symbol = self.get_symbol_at_location(node)
            if symbol is None:
                return UNKNOWN_TYPE
            return self.get_type_of_symbol(symbol)

        return UNKNOWN_TYPE

    def _type_of_prefix_unary(self, node: PrefixUnaryExpression) -> Type:
        if node.operator == "!":
            return Type(TypeFlags.BOOLEAN)
        if node.operator not in ("-", "+", "~"):
            return UNKNOWN_TYPE
        operand = self._type_of_expression(node.operand)
        if operand.flags is TypeFlags.BIGINT_LITERAL and node.operator == "-":
            return literal_type(TypeFlags.BIGINT_LITERAL, -operand.value)
        if operand.flags is TypeFlags.NUMBER_LITERAL and node.operator == "-" and isinstance(
            node.operand, NumericLiteral
        ):
            return literal_type(TypeFlags.NUMBER_LITERAL, -operand.value)
        if operand.flags in (TypeFlags.BIGINT, TypeFlags.BIGINT_LITERAL):
            return Type(TypeFlags.BIGINT)
        return Type(TypeFlags.NUMBER)

    def _type_of_array(self, node: ArrayLiteralExpression, const_context: bool) -> Type:
        elements: List[Type] = []
        for element in node.elements:
            if isinstance(element, OmittedExpression):
                elements.append(Type(TypeFlags.UNDEFINED))
            elif isinstance(element, SpreadElement):
                spread = self._type_of_expression(element.expression, const_context)
                if spread.object_flags is ObjectFlags.REFERENCE and spread.target == "tuple":
                    elements.extend(spread.type_arguments)
                elif spread.object_flags is ObjectFlags.REFERENCE:
                    elements.append(union_type(spread.type_arguments))
                else:
                    elements.append(UNKNOWN_TYPE)
            else:
                elements.append(self._type_of_expression(element, const_context))

        if const_context:
            return reference_type("tuple", elements, readonly=True)
        return reference_type("Array", [union_type([e.widened() for e in elements])])

    # =========================================================================
    # Types from annotations
    # =========================================================================

    def type_from_type_node(self, node: Optional[Node]) -> Type:
        if node is None:
            return UNKNOWN_TYPE

        if isinstance(node, LiteralType):
            return self._type_of_literal_type(node.literal)
        if isinstance(node, KeywordType):
            flags = _KEYWORD_TYPES.get(node.keyword)
            return Type(flags) if flags is not None else UNKNOWN_TYPE
        if isinstance(node, TupleType):
            return reference_type("tuple", [self.type_from_type_node(e) for e in node.elements])
        if isinstance(node, ArrayType):
            return reference_type("Array", [self.type_from_type_node(node.element_type)])
        if isinstance(node, TypeOperator):
            if node.operator != "readonly":
                return UNKNOWN_TYPE
            return _as_readonly(self.type_from_type_node(node.type))
        if isinstance(node, TypeReference):
            return self._type_of_type_reference(node)
        if isinstance(node, TypeLiteral):
            return anonymous_type(self.program.literal_symbols.get(node))
        if isinstance(node, UnionType):
            return union_type([self.type_from_type_node(t) for t in node.types])
        return UNKNOWN_TYPE

    def _type_of_literal_type(self, literal: Node) -> Type:
        if isinstance(literal, Identifier) and literal.text == "undefined":
            return Type(TypeFlags.UNDEFINED)
        if isinstance(literal, PrefixUnaryExpression) and not isinstance(literal.operand, (NumericLiteral, BigIntLiteral)):
            return UNKNOWN_TYPE
        if isinstance(literal, (Identifier, ObjectLiteralExpression, ArrayLiteralExpression)):
            return UNKNOWN_TYPE
        return self._type_of_expression(literal)

    def _type_of_type_reference(self, node: TypeReference) -> Type:
        name = node.type_name.text
        args = [self.type_from_type_node(a) for a in node.type_arguments]
        scope = self.program.scopes.get(node.type_name)
        symbol = scope.lookup_type(name) if scope is not None else None

        if symbol is None:
            if name in ("Array", "ReadonlyArray"):
                element = args[0] if args else UNKNOWN_TYPE
                return reference_type(name, [element], readonly=name == "ReadonlyArray")
            if name == "Readonly" and args:
                return _as_readonly(args[0])
            return UNKNOWN_TYPE

        symbol = self.resolve_alias_chain(symbol)
        if symbol.flags is SymbolFlags.TYPE_ALIAS:
            key = id(symbol)
            if key in self._resolving:
                return ANY_TYPE
            self._resolving.add(key)
            try:
                decl = symbol.value_declaration
                return self.type_from_type_node(decl.type) if isinstance(decl, TypeAliasDeclaration) else UNKNOWN_TYPE
            finally:
                self._resolving.discard(key)
        if symbol.flags is SymbolFlags.INTERFACE:
            return anonymous_type(symbol, ObjectFlags.INTERFACE)
        if symbol.flags is SymbolFlags.CLASS:
            return anonymous_type(symbol, ObjectFlags.CLASS)
        return UNKNOWN_TYPE


def _is_const_context(node: Node) -> bool:
    while isinstance(node, ParenthesizedExpression):
        node = node.expression
    return is_const_assertion(node)


def _as_readonly(t: Type) -> Type:
    if t.object_flags is not ObjectFlags.REFERENCE:
        return t
    target = "ReadonlyArray" if t.target == "Array" else t.target
    return reference_type(target, t.type_arguments, readonly=True)
