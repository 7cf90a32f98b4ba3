# ts_static_resolver/syntax/nodes.py
from __future__ import annotations

# -----------------------------------------------------------------------------
# Syntax tree for TypeScript source, as produced by ts_lowering.
#
# - One dataclass per node kind, tagged with a closed SyntaxKind
# - Nodes compare and hash by identity (eq=False) so they can key symbol maps
# - Trees are built once by the front end and never mutated afterwards
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional


class SyntaxKind(Enum):
    # files & statements
    SOURCE_FILE = "SourceFile"
    EXPRESSION_STATEMENT = "ExpressionStatement"
    VARIABLE_STATEMENT = "VariableStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    IMPORT_DECLARATION = "ImportDeclaration"
    IMPORT_SPECIFIER = "ImportSpecifier"
    EXPORT_DECLARATION = "ExportDeclaration"
    EXPORT_SPECIFIER = "ExportSpecifier"
    EXPORT_ASSIGNMENT = "ExportAssignment"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    PARAMETER = "Parameter"
    BLOCK = "Block"
    CLASS_DECLARATION = "ClassDeclaration"
    TYPE_ALIAS_DECLARATION = "TypeAliasDeclaration"
    INTERFACE_DECLARATION = "InterfaceDeclaration"
    PROPERTY_SIGNATURE = "PropertySignature"
    OBJECT_BINDING_PATTERN = "ObjectBindingPattern"
    ARRAY_BINDING_PATTERN = "ArrayBindingPattern"
    BINDING_ELEMENT = "BindingElement"
    FOR_IN_STATEMENT = "ForInStatement"
    FOR_OF_STATEMENT = "ForOfStatement"
    CATCH_CLAUSE = "CatchClause"
    ENUM_DECLARATION = "EnumDeclaration"
    ENUM_MEMBER = "EnumMember"
    MODULE_DECLARATION = "ModuleDeclaration"

    # expressions
    NUMERIC_LITERAL = "NumericLiteral"
    BIGINT_LITERAL = "BigIntLiteral"
    STRING_LITERAL = "StringLiteral"
    NO_SUBSTITUTION_TEMPLATE_LITERAL = "NoSubstitutionTemplateLiteral"
    REGULAR_EXPRESSION_LITERAL = "RegularExpressionLiteral"
    TRUE_KEYWORD = "TrueKeyword"
    FALSE_KEYWORD = "FalseKeyword"
    NULL_KEYWORD = "NullKeyword"
    IDENTIFIER = "Identifier"
    PREFIX_UNARY_EXPRESSION = "PrefixUnaryExpression"
    ARRAY_LITERAL_EXPRESSION = "ArrayLiteralExpression"
    OMITTED_EXPRESSION = "OmittedExpression"
    SPREAD_ELEMENT = "SpreadElement"
    OBJECT_LITERAL_EXPRESSION = "ObjectLiteralExpression"
    PROPERTY_ASSIGNMENT = "PropertyAssignment"
    SHORTHAND_PROPERTY_ASSIGNMENT = "ShorthandPropertyAssignment"
    SPREAD_ASSIGNMENT = "SpreadAssignment"
    METHOD_DECLARATION = "MethodDeclaration"
    COMPUTED_PROPERTY_NAME = "ComputedPropertyName"
    PARENTHESIZED_EXPRESSION = "ParenthesizedExpression"
    AS_EXPRESSION = "AsExpression"
    TYPE_ASSERTION = "TypeAssertionExpression"
    SATISFIES_EXPRESSION = "SatisfiesExpression"
    TEMPLATE_EXPRESSION = "TemplateExpression"
    TEMPLATE_SPAN = "TemplateSpan"

    # types
    LITERAL_TYPE = "LiteralType"
    KEYWORD_TYPE = "KeywordType"
    TUPLE_TYPE = "TupleType"
    ARRAY_TYPE = "ArrayType"
    TYPE_OPERATOR = "TypeOperator"
    TYPE_REFERENCE = "TypeReference"
    TYPE_LITERAL = "TypeLiteral"
    UNION_TYPE = "UnionType"

    UNKNOWN = "Unknown"
    UNKNOWN_TYPE = "UnknownType"


@dataclass
class Span:
    start_line: int  # 1-based
    start_column: int  # 0-based
    end_line: int
    end_column: int


@dataclass(eq=False)
class Node:
    kind: ClassVar[SyntaxKind] = SyntaxKind.UNKNOWN
    span: Optional[Span] = field(default=None, repr=False, kw_only=True)


# --- literals & names ---

@dataclass(eq=False)
class Identifier(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.IDENTIFIER
    text: str


@dataclass(eq=False)
class NumericLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.NUMERIC_LITERAL
    text: str  # lexical form as written, e.g. "0xFF" or "1_000"


@dataclass(eq=False)
class BigIntLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.BIGINT_LITERAL
    text: str  # includes the trailing "n"


@dataclass(eq=False)
class StringLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.STRING_LITERAL
    text: str  # decoded, without quotes


@dataclass(eq=False)
class NoSubstitutionTemplateLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.NO_SUBSTITUTION_TEMPLATE_LITERAL
    text: str


@dataclass(eq=False)
class RegularExpressionLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.REGULAR_EXPRESSION_LITERAL
    text: str  # "/body/flags"


@dataclass(eq=False)
class TrueKeyword(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TRUE_KEYWORD


@dataclass(eq=False)
class FalseKeyword(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.FALSE_KEYWORD


@dataclass(eq=False)
class NullKeyword(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.NULL_KEYWORD


# --- expressions ---

@dataclass(eq=False)
class PrefixUnaryExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PREFIX_UNARY_EXPRESSION
    operator: str
    operand: Node


@dataclass(eq=False)
class OmittedExpression(Node):
    """A hole in an array literal, e.g. the middle of [1, , 2]."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.OMITTED_EXPRESSION


@dataclass(eq=False)
class SpreadElement(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.SPREAD_ELEMENT
    expression: Node


@dataclass(eq=False)
class ArrayLiteralExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ARRAY_LITERAL_EXPRESSION
    elements: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ComputedPropertyName(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.COMPUTED_PROPERTY_NAME
    expression: Node


@dataclass(eq=False)
class PropertyAssignment(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PROPERTY_ASSIGNMENT
    name: Node  # Identifier | StringLiteral | NumericLiteral | ComputedPropertyName
    initializer: Node


@dataclass(eq=False)
class ShorthandPropertyAssignment(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.SHORTHAND_PROPERTY_ASSIGNMENT
    name: Identifier


@dataclass(eq=False)
class SpreadAssignment(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.SPREAD_ASSIGNMENT
    expression: Node


@dataclass(eq=False)
class MethodDeclaration(Node):
    """Methods and get/set accessors inside an object literal."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.METHOD_DECLARATION
    name: Node
    body: Optional["Block"] = None


@dataclass(eq=False)
class ObjectLiteralExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.OBJECT_LITERAL_EXPRESSION
    properties: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ParenthesizedExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PARENTHESIZED_EXPRESSION
    expression: Node


@dataclass(eq=False)
class AsExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.AS_EXPRESSION
    expression: Node
    type: "Node"  # KeywordType("const") for `as const`


@dataclass(eq=False)
class TypeAssertion(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_ASSERTION
    type: Node
    expression: Node


@dataclass(eq=False)
class SatisfiesExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.SATISFIES_EXPRESSION
    expression: Node
    type: Node


@dataclass(eq=False)
class TemplateSpan(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TEMPLATE_SPAN
    expression: Node
    literal: str  # decoded text following the substitution


@dataclass(eq=False)
class TemplateExpression(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TEMPLATE_EXPRESSION
    head: str
    spans: List[TemplateSpan] = field(default_factory=list)


@dataclass(eq=False)
class UnknownNode(Node):
    """Anything the front end has no dedicated node for (calls, loops, ...)."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.UNKNOWN
    source_type: str = ""
    children: List[Node] = field(default_factory=list)


# --- types ---

@dataclass(eq=False)
class LiteralType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.LITERAL_TYPE
    literal: Node


@dataclass(eq=False)
class KeywordType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.KEYWORD_TYPE
    keyword: str  # "string", "number", ..., or "const" in `as const`


@dataclass(eq=False)
class TupleType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TUPLE_TYPE
    elements: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ArrayType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ARRAY_TYPE
    element_type: Node


@dataclass(eq=False)
class TypeOperator(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_OPERATOR
    operator: str  # "readonly" | "keyof" | "unique"
    type: Node


@dataclass(eq=False)
class TypeReference(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_REFERENCE
    type_name: Identifier
    type_arguments: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class PropertySignature(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PROPERTY_SIGNATURE
    name: Node
    type: Optional[Node] = None


@dataclass(eq=False)
class TypeLiteral(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_LITERAL
    members: List[PropertySignature] = field(default_factory=list)


@dataclass(eq=False)
class UnionType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.UNION_TYPE
    types: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class UnknownType(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.UNKNOWN_TYPE
    source_type: str = ""


# --- declarations & statements ---

@dataclass(eq=False)
class VariableDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.VARIABLE_DECLARATION
    name: Node  # Identifier or a binding pattern
    type: Optional[Node] = None
    initializer: Optional[Node] = None


@dataclass(eq=False)
class VariableStatement(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.VARIABLE_STATEMENT
    declaration_kind: str  # "const" | "let" | "var"
    declarations: List[VariableDeclaration] = field(default_factory=list)
    exported: bool = False
    ambient: bool = False  # `declare const ...`


@dataclass(eq=False)
class ExpressionStatement(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPRESSION_STATEMENT
    expression: Node


@dataclass(eq=False)
class Block(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.BLOCK
    statements: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class Parameter(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.PARAMETER
    name: Node
    type: Optional[Node] = None
    initializer: Optional[Node] = None


@dataclass(eq=False)
class FunctionDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.FUNCTION_DECLARATION
    name: Optional[Identifier]
    parameters: List[Parameter] = field(default_factory=list)
    body: Optional[Block] = None
    exported: bool = False


@dataclass(eq=False)
class FunctionExpression(Node):
    """Function expressions and arrow functions; body may be a bare expression."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.FUNCTION_EXPRESSION
    name: Optional[Identifier] = None
    parameters: List[Parameter] = field(default_factory=list)
    body: Optional[Node] = None


@dataclass(eq=False)
class ClassDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.CLASS_DECLARATION
    name: Optional[Identifier]
    exported: bool = False


@dataclass(eq=False)
class TypeAliasDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.TYPE_ALIAS_DECLARATION
    name: Identifier
    type: Node
    exported: bool = False


@dataclass(eq=False)
class InterfaceDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.INTERFACE_DECLARATION
    name: Identifier
    members: List[PropertySignature] = field(default_factory=list)
    exported: bool = False


@dataclass(eq=False)
class ImportSpecifier(Node):
    """
    One imported binding.

    property_name is the exported name when renamed ({ a as b }), "default" for
    default imports, and None for namespace imports (import * as ns).
    """
    kind: ClassVar[SyntaxKind] = SyntaxKind.IMPORT_SPECIFIER
    name: Identifier
    property_name: Optional[str] = None
    is_namespace: bool = False


@dataclass(eq=False)
class ImportDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.IMPORT_DECLARATION
    module_specifier: str
    specifiers: List[ImportSpecifier] = field(default_factory=list)


@dataclass(eq=False)
class ExportSpecifier(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPORT_SPECIFIER
    name: str  # exported name
    property_name: str  # local (or re-exported) name


@dataclass(eq=False)
class ExportDeclaration(Node):
    """export { a, b as c } [from "m"] and export * from "m"."""
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPORT_DECLARATION
    specifiers: List[ExportSpecifier] = field(default_factory=list)
    module_specifier: Optional[str] = None
    is_star: bool = False


@dataclass(eq=False)
class ExportAssignment(Node):
    """export default <expression>"""
    kind: ClassVar[SyntaxKind] = SyntaxKind.EXPORT_ASSIGNMENT
    expression: Node


@dataclass(eq=False)
class BindingElement(Node):
    """
    One name in a destructuring pattern.

    `{ key: name = init }` has property_name `key`; `...rest` sets is_rest.
    name is an Identifier or a nested pattern.
    """
    kind: ClassVar[SyntaxKind] = SyntaxKind.BINDING_ELEMENT
    name: Node
    property_name: Optional[Node] = None
    initializer: Optional[Node] = None
    is_rest: bool = False


@dataclass(eq=False)
class ObjectBindingPattern(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.OBJECT_BINDING_PATTERN
    elements: List[BindingElement] = field(default_factory=list)


@dataclass(eq=False)
class ArrayBindingPattern(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ARRAY_BINDING_PATTERN
    elements: List[Node] = field(default_factory=list)  # BindingElement or OmittedExpression


@dataclass(eq=False)
class ForInStatement(Node):
    """
    for (<initializer> in <expression>) <statement>

    initializer is a VariableDeclaration without initializer when the loop
    declares its variable, otherwise the assigned expression.
    """
    kind: ClassVar[SyntaxKind] = SyntaxKind.FOR_IN_STATEMENT
    initializer: Node
    expression: Node
    statement: Optional[Node] = None
    declaration_kind: Optional[str] = None  # "const" | "let" | "var"


@dataclass(eq=False)
class ForOfStatement(ForInStatement):
    kind: ClassVar[SyntaxKind] = SyntaxKind.FOR_OF_STATEMENT


@dataclass(eq=False)
class CatchClause(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.CATCH_CLAUSE
    variable_declaration: Optional[VariableDeclaration] = None
    block: Optional[Block] = None


@dataclass(eq=False)
class EnumMember(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ENUM_MEMBER
    name: Node
    initializer: Optional[Node] = None


@dataclass(eq=False)
class EnumDeclaration(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.ENUM_DECLARATION
    name: Identifier
    members: List[EnumMember] = field(default_factory=list)
    is_const: bool = False
    exported: bool = False


@dataclass(eq=False)
class ModuleDeclaration(Node):
    """namespace N { ... } and declare module "m" { ... }"""
    kind: ClassVar[SyntaxKind] = SyntaxKind.MODULE_DECLARATION
    name: Node  # Identifier, or StringLiteral for ambient external modules
    body: Optional[Block] = None
    exported: bool = False


@dataclass(eq=False)
class SourceFile(Node):
    kind: ClassVar[SyntaxKind] = SyntaxKind.SOURCE_FILE
    file_name: str
    statements: List[Node] = field(default_factory=list)
    anomalies: List[Dict[str, str]] = field(default_factory=list, repr=False)


def is_const_assertion(node: Node) -> bool:
    """True for `expr as const` and `<const>expr`."""
    if not isinstance(node, (AsExpression, TypeAssertion)):
        return False
    return isinstance(node.type, KeywordType) and node.type.keyword == "const"
