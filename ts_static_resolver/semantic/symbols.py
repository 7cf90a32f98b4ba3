from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

from ..syntax.nodes import Node


class SymbolFlags(Enum):
    PROPERTY = auto()
    OBJECT_LITERAL = auto()
    BLOCK_SCOPED_VARIABLE = auto()
    FUNCTION_SCOPED_VARIABLE = auto()  # var declarations and parameters
    ALIAS = auto()  # import / export specifiers
    FUNCTION = auto()
    CLASS = auto()
    INTERFACE = auto()
    TYPE_ALIAS = auto()
    TYPE_LITERAL = auto()
    ENUM = auto()
    ENUM_MEMBER = auto()
    NAMESPACE = auto()  # `namespace N {}`; exported members live in members
    MODULE = auto()  # a whole file, as seen through `import * as ns`
    UNKNOWN = auto()


@dataclass(eq=False)
class Symbol:
    """
    A named binding.

    value_declaration is the node whose value the symbol denotes: the
    VariableDeclaration, Parameter, ObjectLiteralExpression, ... For aliases it
    is the ImportSpecifier / ExportSpecifier, and source_file is the file the
    specifier appears in, so the target module can be located.
    """
    name: str
    flags: SymbolFlags
    value_declaration: Optional[Node] = None
    members: Dict[str, "Symbol"] = field(default_factory=dict, repr=False)
    source_file: Optional[str] = field(default=None, repr=False)
    module_specifier: Optional[str] = field(default=None, repr=False)
    import_name: Optional[str] = field(default=None, repr=False)  # None = whole module
    is_const: bool = False


UNKNOWN_SYMBOL = Symbol(name="unknown", flags=SymbolFlags.UNKNOWN)


@dataclass
class Scope:
    """Lexical scope: a file, a namespace body, a function, or a block."""
    kind: str  # "global" | "file" | "module" | "function" | "block"
    parent: Optional["Scope"] = None
    symbols: Dict[str, Symbol] = field(default_factory=dict)
    types: Dict[str, Symbol] = field(default_factory=dict)  # type namespace

    def lookup(self, name: str) -> Optional[Symbol]:
        scope: Optional[Scope] = self
        while scope is not None:
            found = scope.symbols.get(name)
            if found is not None:
                return found
            scope = scope.parent
        return None

    def lookup_type(self, name: str) -> Optional[Symbol]:
        scope: Optional[Scope] = self
        while scope is not None:
            found = scope.types.get(name)
            if found is not None:
                return found
            scope = scope.parent
        return None

    def nearest_function_scope(self) -> "Scope":
        scope = self
        while scope.kind == "block" and scope.parent is not None:
            scope = scope.parent
        return scope


@dataclass
class FileSymbols:
    """Everything the binder learned about one SourceFile."""
    file_name: str
    locals: Scope
    exports: Dict[str, Symbol] = field(default_factory=dict)
    star_exports: List[str] = field(default_factory=list)  # module specifiers of `export *`
    # identifier node -> symbol it declares (declaration names, property names)
    declared: Dict[Node, Symbol] = field(default_factory=dict, repr=False)
    # identifier node -> scope it is referenced from
    scopes: Dict[Node, Scope] = field(default_factory=dict, repr=False)
    # object literal / type literal node -> its anonymous symbol
    literal_symbols: Dict[Node, Symbol] = field(default_factory=dict, repr=False)
