# ts_static_resolver/semantic/binder.py
from __future__ import annotations

# -----------------------------------------------------------------------------
# Binding & Scopes
#
# Purpose:
#   - Build lexical scopes per file (global -> file -> function -> block)
#   - Declare symbols for variables, parameters, functions, classes, types,
#     destructured names, loop variables, catch parameters, enums and namespaces
#   - Turn import / export specifiers into ALIAS symbols + a per-file export table
#   - Give every object literal and type literal its own symbol with PROPERTY members
#   - Remember the scope each identifier is referenced from, for later lookups
#
# Non-goals:
#   - Flow-sensitive or TDZ-aware lookup (all declarations in a scope are visible)
#   - Class members and enum member values
# -----------------------------------------------------------------------------

from dataclasses import fields
from typing import Dict, List, Optional

from ..logging_utils import get_logger
from ..syntax.nodes import (
    ArrayBindingPattern,
    BindingElement,
    Block,
    CatchClause,
    ClassDeclaration,
    EnumDeclaration,
    ExportAssignment,
    ExportDeclaration,
    ForInStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    ImportDeclaration,
    InterfaceDeclaration,
    MethodDeclaration,
    ModuleDeclaration,
    Node,
    NumericLiteral,
    ObjectBindingPattern,
    ObjectLiteralExpression,
    Parameter,
    PropertyAssignment,
    PropertySignature,
    ShorthandPropertyAssignment,
    SourceFile,
    StringLiteral,
    TypeAliasDeclaration,
    TypeLiteral,
    TypeReference,
    VariableDeclaration,
    VariableStatement,
)
from .symbols import FileSymbols, Scope, Symbol, SymbolFlags

logger = get_logger(__name__)

# Ambient values every program sees; their types live in the checker.
AMBIENT_GLOBALS = ("undefined", "NaN", "Infinity")


def create_global_scope() -> Scope:
    scope = Scope(kind="global")
    for name in AMBIENT_GLOBALS:
        scope.symbols[name] = Symbol(name=name, flags=SymbolFlags.FUNCTION_SCOPED_VARIABLE)
    return scope


class Binder:
    """Single pass over one SourceFile producing its FileSymbols."""

    def __init__(self, global_scope: Scope):
        self.global_scope = global_scope
        self._fs: Optional[FileSymbols] = None
        # export table of the innermost namespace being bound, else the file's
        self._exports: Dict[str, Symbol] = {}

    def bind(self, source_file: SourceFile) -> FileSymbols:
        file_scope = Scope(kind="file", parent=self.global_scope)
        self._fs = FileSymbols(file_name=source_file.file_name, locals=file_scope)
        self._exports = self._fs.exports
        for stmt in source_file.statements:
            self._visit(stmt, file_scope)
        logger.debug(
            f"Bound {source_file.file_name}: {len(file_scope.symbols)} values, "
            f"{len(file_scope.types)} types, {len(self._fs.exports)} exports"
        )
        fs, self._fs = self._fs, None
        self._exports = {}
        return fs

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _declare(self, scope: Scope, name: Identifier, symbol: Symbol, *, as_type: bool = False,
                 as_value: bool = True, exported: bool = False) -> None:
        if as_value:
            scope.symbols[name.text] = symbol
        if as_type:
            scope.types[name.text] = symbol
        self._fs.declared[name] = symbol
        if exported:
            self._exports[name.text] = symbol

    def _declare_binding(self, scope: Scope, name: Node, flags: SymbolFlags, declaration: Node, *,
                         is_const: bool = False, exported: bool = False) -> None:
        """Declare every name in `name`, descending into destructuring patterns."""
        if isinstance(name, Identifier):
            symbol = Symbol(name=name.text, flags=flags, value_declaration=declaration, is_const=is_const)
            self._declare(scope, name, symbol, exported=exported)
        elif isinstance(name, (ObjectBindingPattern, ArrayBindingPattern)):
            for element in name.elements:
                if not isinstance(element, BindingElement):
                    continue
                if element.property_name is not None and not isinstance(element.property_name, Identifier):
                    self._visit(element.property_name, scope)
                self._declare_binding(scope, element.name, flags, element, is_const=is_const, exported=exported)
                self._visit(element.initializer, scope)

    def _visit_all(self, nodes: List[Node], scope: Scope) -> None:
        for n in nodes:
            self._visit(n, scope)

    def _visit(self, node: Optional[Node], scope: Scope) -> None:
        if node is None:
            return
        handler = getattr(self, f"_visit_{type(node).__name__}", None)
        if handler is not None:
            handler(node, scope)
            return
        self._visit_children(node, scope)

    def _visit_children(self, node: Node, scope: Scope) -> None:
        for f in fields(node):
            if f.name == "span":
                continue
            value = getattr(node, f.name)
            if isinstance(value, Node):
                self._visit(value, scope)
            elif isinstance(value, list):
                self._visit_all([v for v in value if isinstance(v, Node)], scope)

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def _visit_Identifier(self, node: Identifier, scope: Scope) -> None:
        self._fs.scopes[node] = scope

    def _visit_TypeReference(self, node: TypeReference, scope: Scope) -> None:
        self._fs.scopes[node.type_name] = scope
        self._visit_all(node.type_arguments, scope)

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _visit_VariableStatement(self, node: VariableStatement, scope: Scope) -> None:
        block_scoped = node.declaration_kind in ("const", "let")
        flags = SymbolFlags.BLOCK_SCOPED_VARIABLE if block_scoped else SymbolFlags.FUNCTION_SCOPED_VARIABLE
        target = scope if block_scoped else scope.nearest_function_scope()
        for decl in node.declarations:
            self._declare_binding(
                target, decl.name, flags, decl,
                is_const=node.declaration_kind == "const",
                exported=node.exported,
            )
            self._visit(decl.type, scope)
            self._visit(decl.initializer, scope)

    def _visit_ForInStatement(self, node: ForInStatement, scope: Scope) -> None:
        self._visit(node.expression, scope)
        loop_scope = Scope(kind="block", parent=scope)
        decl = node.initializer
        if node.declaration_kind is not None and isinstance(decl, VariableDeclaration):
            if node.declaration_kind == "var":
                target, flags = scope.nearest_function_scope(), SymbolFlags.FUNCTION_SCOPED_VARIABLE
            else:
                target, flags = loop_scope, SymbolFlags.BLOCK_SCOPED_VARIABLE
            self._declare_binding(target, decl.name, flags, decl, is_const=node.declaration_kind == "const")
        else:
            self._visit(decl, scope)
        if isinstance(node.statement, Block):
            self._visit_all(node.statement.statements, loop_scope)
        else:
            self._visit(node.statement, loop_scope)

    _visit_ForOfStatement = _visit_ForInStatement

    def _visit_CatchClause(self, node: CatchClause, scope: Scope) -> None:
        catch_scope = Scope(kind="block", parent=scope)
        decl = node.variable_declaration
        if decl is not None:
            self._declare_binding(catch_scope, decl.name, SymbolFlags.FUNCTION_SCOPED_VARIABLE, decl)
            self._visit(decl.type, scope)
        if node.block is not None:
            self._visit_all(node.block.statements, catch_scope)

    def _visit_FunctionDeclaration(self, node: FunctionDeclaration, scope: Scope) -> None:
        if node.name is not None:
            symbol = Symbol(name=node.name.text, flags=SymbolFlags.FUNCTION, value_declaration=node)
            self._declare(scope.nearest_function_scope(), node.name, symbol, exported=node.exported)
        self._bind_function(node.parameters, node.body, scope)

    def _visit_FunctionExpression(self, node: FunctionExpression, scope: Scope) -> None:
        inner = Scope(kind="function", parent=scope)
        if node.name is not None:
            symbol = Symbol(name=node.name.text, flags=SymbolFlags.FUNCTION, value_declaration=node)
            self._declare(inner, node.name, symbol)
        self._bind_function(node.parameters, node.body, inner)

    def _bind_function(self, parameters: List[Parameter], body: Optional[Node], scope: Scope) -> None:
        fn_scope = scope if scope.kind == "function" else Scope(kind="function", parent=scope)
        for param in parameters:
            self._declare_binding(fn_scope, param.name, SymbolFlags.FUNCTION_SCOPED_VARIABLE, param)
            self._visit(param.type, fn_scope)
            self._visit(param.initializer, fn_scope)
        if isinstance(body, Block):
            # the body block shares the function scope
            self._visit_all(body.statements, fn_scope)
        else:
            self._visit(body, fn_scope)

    def _visit_Block(self, node: Block, scope: Scope) -> None:
        self._visit_all(node.statements, Scope(kind="block", parent=scope))

    def _visit_ClassDeclaration(self, node: ClassDeclaration, scope: Scope) -> None:
        if node.name is None:
            return
        symbol = Symbol(name=node.name.text, flags=SymbolFlags.CLASS, value_declaration=node)
        self._declare(scope, node.name, symbol, as_type=True, exported=node.exported)

    def _visit_TypeAliasDeclaration(self, node: TypeAliasDeclaration, scope: Scope) -> None:
        symbol = Symbol(name=node.name.text, flags=SymbolFlags.TYPE_ALIAS, value_declaration=node)
        self._declare(scope, node.name, symbol, as_type=True, as_value=False, exported=node.exported)
        self._visit(node.type, scope)

    def _visit_InterfaceDeclaration(self, node: InterfaceDeclaration, scope: Scope) -> None:
        symbol = Symbol(name=node.name.text, flags=SymbolFlags.INTERFACE, value_declaration=node)
        self._declare(scope, node.name, symbol, as_type=True, as_value=False, exported=node.exported)
        self._bind_members(symbol, node.members, scope)

    def _visit_EnumDeclaration(self, node: EnumDeclaration, scope: Scope) -> None:
        symbol = Symbol(name=node.name.text, flags=SymbolFlags.ENUM, value_declaration=node)
        self._declare(scope, node.name, symbol, as_type=True, exported=node.exported)
        for member in node.members:
            self._bind_property_name(symbol, member.name, member, scope, flags=SymbolFlags.ENUM_MEMBER)
            self._visit(member.initializer, scope)

    def _visit_ModuleDeclaration(self, node: ModuleDeclaration, scope: Scope) -> None:
        outer_exports = self._exports
        if isinstance(node.name, Identifier):
            symbol = Symbol(name=node.name.text, flags=SymbolFlags.NAMESPACE, value_declaration=node)
            self._declare(scope, node.name, symbol, as_type=True, exported=node.exported)
            self._exports = symbol.members
        else:
            # declare module "m" {}: its exports do not belong to this file
            self._exports = {}
        try:
            if node.body is not None:
                self._visit_all(node.body.statements, Scope(kind="module", parent=scope))
        finally:
            self._exports = outer_exports

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    def _visit_ImportDeclaration(self, node: ImportDeclaration, scope: Scope) -> None:
        for spec in node.specifiers:
            symbol = Symbol(
                name=spec.name.text,
                flags=SymbolFlags.ALIAS,
                value_declaration=spec,
                source_file=self._fs.file_name,
                module_specifier=node.module_specifier,
                import_name=None if spec.is_namespace else spec.property_name,
            )
            self._declare(scope, spec.name, symbol, as_type=True)

    def _visit_ExportDeclaration(self, node: ExportDeclaration, scope: Scope) -> None:
        if node.is_star:
            if node.module_specifier is not None and self._exports is self._fs.exports:
                self._fs.star_exports.append(node.module_specifier)
            return
        for spec in node.specifiers:
            # local `export { a as b }` has no module specifier: the alias targets a
            # name in this file's scope
            self._exports[spec.name] = Symbol(
                name=spec.name,
                flags=SymbolFlags.ALIAS,
                value_declaration=spec,
                source_file=self._fs.file_name,
                module_specifier=node.module_specifier,
                import_name=spec.property_name,
            )

    def _visit_ExportAssignment(self, node: ExportAssignment, scope: Scope) -> None:
        expr = node.expression
        if isinstance(expr, Identifier):
            self._exports["default"] = Symbol(
                name="default",
                flags=SymbolFlags.ALIAS,
                value_declaration=node,
                source_file=self._fs.file_name,
                import_name=expr.text,
            )
        else:
            self._exports["default"] = Symbol(
                name="default",
                flags=SymbolFlags.BLOCK_SCOPED_VARIABLE,
                value_declaration=expr,
                is_const=True,
            )
        self._visit(expr, scope)

    # -------------------------------------------------------------------------
    # Object and type literals
    # -------------------------------------------------------------------------

    def _visit_ObjectLiteralExpression(self, node: ObjectLiteralExpression, scope: Scope) -> None:
        symbol = Symbol(name="__object", flags=SymbolFlags.OBJECT_LITERAL, value_declaration=node)
        self._fs.literal_symbols[node] = symbol
        for prop in node.properties:
            if isinstance(prop, (PropertyAssignment, ShorthandPropertyAssignment, MethodDeclaration)):
                self._bind_property_name(symbol, prop.name, prop, scope)
            if isinstance(prop, PropertyAssignment):
                self._visit(prop.initializer, scope)
            elif isinstance(prop, MethodDeclaration):
                self._bind_function([], prop.body, scope)
            elif isinstance(prop, ShorthandPropertyAssignment):
                self._fs.scopes[prop.name] = scope
            else:
                self._visit(prop, scope)

    def _visit_TypeLiteral(self, node: TypeLiteral, scope: Scope) -> None:
        symbol = Symbol(name="__type", flags=SymbolFlags.TYPE_LITERAL, value_declaration=node)
        self._fs.literal_symbols[node] = symbol
        self._bind_members(symbol, node.members, scope)

    def _bind_members(self, owner: Symbol, members: List[PropertySignature], scope: Scope) -> None:
        for member in members:
            self._bind_property_name(owner, member.name, member, scope)
            self._visit(member.type, scope)

    def _bind_property_name(self, owner: Symbol, name: Node, declaration: Node, scope: Scope,
                            flags: SymbolFlags = SymbolFlags.PROPERTY) -> None:
        if isinstance(name, Identifier):
            text = name.text
        elif isinstance(name, (StringLiteral, NumericLiteral)):
            text = name.text
        else:
            # computed names are ordinary expressions
            self._visit(name, scope)
            return
        member = Symbol(name=text, flags=flags, value_declaration=declaration)
        owner.members[text] = member
        if isinstance(name, Identifier):
            self._fs.declared[name] = member
