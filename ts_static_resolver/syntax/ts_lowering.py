# ts_static_resolver/syntax/ts_lowering.py
from __future__ import annotations

# -----------------------------------------------------------------------------
# Tree-sitter front end for TypeScript
#
# - Parses with tree_sitter + tree_sitter_typescript (typescript / tsx dialects)
# - Lowers the concrete syntax tree into syntax.nodes dataclasses
# - Decodes string/template text and records parse anomalies on the SourceFile
# - Unsupported constructs become UnknownNode, keeping their lowered children
# - Subtrees nested deeper than Config.max_nesting_depth are cut to UnknownNode
# -----------------------------------------------------------------------------

from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node as TSNode, Parser

from ..config import Config
from ..logging_utils import get_logger
from .escapes import InvalidEscapeError, decode_js_string
from .nodes import (
    ArrayBindingPattern,
    ArrayLiteralExpression,
    ArrayType,
    AsExpression,
    BigIntLiteral,
    BindingElement,
    Block,
    CatchClause,
    ClassDeclaration,
    ComputedPropertyName,
    EnumDeclaration,
    EnumMember,
    ExportAssignment,
    ExportDeclaration,
    ExportSpecifier,
    ExpressionStatement,
    FalseKeyword,
    ForInStatement,
    ForOfStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    ImportDeclaration,
    ImportSpecifier,
    InterfaceDeclaration,
    KeywordType,
    LiteralType,
    MethodDeclaration,
    ModuleDeclaration,
    NoSubstitutionTemplateLiteral,
    Node,
    NullKeyword,
    NumericLiteral,
    ObjectBindingPattern,
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
    SourceFile,
    Span,
    SpreadAssignment,
    SpreadElement,
    StringLiteral,
    TemplateExpression,
    TemplateSpan,
    TrueKeyword,
    TupleType,
    TypeAliasDeclaration,
    TypeAssertion,
    TypeLiteral,
    TypeOperator,
    TypeReference,
    UnionType,
    UnknownNode,
    UnknownType,
    VariableDeclaration,
    VariableStatement,
)

logger = get_logger(__name__)

_LANGUAGE_FACTORIES: Dict[str, Callable[[], object]] = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_NAME_TYPES = {
    "identifier",
    "property_identifier",
    "shorthand_property_identifier",
    "private_property_identifier",
    "type_identifier",
    "statement_identifier",
}
_SKIPPED = {"comment", "empty_statement", "hash_bang_line", ";"}


@lru_cache(maxsize=None)
def _get_parser(dialect: str) -> Parser:
    factory = _LANGUAGE_FACTORIES.get(dialect)
    if factory is None:
        raise ValueError(f"Unsupported dialect: {dialect}")
    return Parser(Language(factory()))


# =============================================================================
# Public API
# =============================================================================

def parse_source(
    text: str,
    file_name: str = "input.ts",
    dialect: Optional[str] = None,
    config: Optional[Config] = None,
) -> SourceFile:
    """Parse TypeScript source text into a lowered SourceFile."""
    config = config or Config()
    dialect = dialect or config.dialect_for(file_name)
    source = text.encode("utf-8")
    tree = _get_parser(dialect).parse(source)
    return TreeSitterLowering(source, file_name, config).lower(tree.root_node)


def parse_file(path: str | Path, config: Optional[Config] = None) -> SourceFile:
    """
    Read and parse a file from disk.

    Never raises for I/O or decoding problems: they are recorded as anomalies
    on an empty SourceFile, the same way parse errors are.
    """
    config = config or Config()
    p = Path(path)
    file_name = str(p)

    if not any(file_name.endswith(ext) for ext in config.supported_extensions):
        return SourceFile(
            file_name=file_name,
            anomalies=[{"reason": "UNSUPPORTED_EXTENSION", "detail": p.suffix}],
        )

    try:
        size = p.stat().st_size
        if size > config.max_file_size:
            return SourceFile(
                file_name=file_name,
                anomalies=[{"reason": "FILE_TOO_LARGE", "detail": f"{size} bytes"}],
            )
        src_bytes = p.read_bytes()
    except OSError as e:
        return SourceFile(file_name=file_name, anomalies=[{"reason": "IO_ERROR", "detail": str(e)}])

    anomalies: List[Dict[str, str]] = []
    try:
        text = src_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        anomalies.append({"reason": "DECODE_ERROR", "detail": str(e)})
        text = src_bytes.decode("utf-8", errors="replace")

    sf = parse_source(text, file_name=file_name, dialect=config.dialect_for(file_name), config=config)
    sf.anomalies[:0] = anomalies
    return sf


# =============================================================================
# Lowering
# =============================================================================

class TreeSitterLowering:
    """
    Converts one tree-sitter tree into syntax nodes.

    Text is sliced from the original bytes by offsets, so grammar differences in
    how string/template fragments are exposed as children do not matter.
    """

    def __init__(self, source: bytes, file_name: str, config: Optional[Config] = None):
        self._source = source
        self.file_name = file_name
        self._max_depth = (config or Config()).max_nesting_depth
        self._depth = 0
        self._anomalies: List[Dict[str, str]] = []
        self._statements: Dict[str, Callable[[TSNode], Optional[Node]]] = {
            "expression_statement": self._expression_statement,
            "lexical_declaration": self._lexical_declaration,
            "variable_declaration": self._variable_declaration,
            "ambient_declaration": self._ambient_declaration,
            "export_statement": self._export_statement,
            "import_statement": self._import_statement,
            "function_declaration": self._function_declaration,
            "generator_function_declaration": self._function_declaration,
            "function_signature": self._function_declaration,
            "class_declaration": self._class_declaration,
            "abstract_class_declaration": self._class_declaration,
            "type_alias_declaration": self._type_alias_declaration,
            "interface_declaration": self._interface_declaration,
            "enum_declaration": self._enum_declaration,
            "internal_module": self._module_declaration,
            "module": self._module_declaration,
            "for_in_statement": self._for_in_statement,
            "catch_clause": self._catch_clause,
            "statement_block": self._block,
        }
        self._expressions: Dict[str, Callable[[TSNode], Node]] = {
            "number": self._number,
            "string": self._string,
            "template_string": self._template_string,
            "regex": lambda n: RegularExpressionLiteral(self._text(n), span=self._span(n)),
            "true": lambda n: TrueKeyword(span=self._span(n)),
            "false": lambda n: FalseKeyword(span=self._span(n)),
            "null": lambda n: NullKeyword(span=self._span(n)),
            "undefined": self._identifier,
            "unary_expression": self._unary_expression,
            "array": self._array,
            "object": self._object,
            "parenthesized_expression": self._parenthesized_expression,
            "as_expression": self._as_expression,
            "satisfies_expression": self._satisfies_expression,
            "type_assertion": self._type_assertion,
            "spread_element": lambda n: SpreadElement(self._expression(self._first_named(n)), span=self._span(n)),
            "computed_property_name": self._computed_property_name,
            "arrow_function": self._function_expression,
            "function_expression": self._function_expression,
            "function": self._function_expression,
            "generator_function": self._function_expression,
        }
        for name_type in _NAME_TYPES:
            self._expressions[name_type] = self._identifier

    # ------------------------------------------------------------------ helpers

    def _text(self, n: TSNode) -> str:
        return self._source[n.start_byte:n.end_byte].decode("utf-8", errors="replace")

    def _slice(self, start: int, end: int) -> str:
        return self._source[start:end].decode("utf-8", errors="replace")

    def _span(self, n: TSNode) -> Span:
        sl, sc = n.start_point[0], n.start_point[1]
        el, ec = n.end_point[0], n.end_point[1]
        return Span(start_line=sl + 1, start_column=sc, end_line=el + 1, end_column=ec)

    def _named(self, n: TSNode) -> List[TSNode]:
        return [c for c in n.named_children if c.type not in _SKIPPED]

    def _first_named(self, n: TSNode) -> Optional[TSNode]:
        named = self._named(n)
        return named[0] if named else None

    def _has_token(self, n: TSNode, token: str) -> bool:
        return any(c.type == token for c in n.children)

    def _record(self, reason: str, n: TSNode, detail: str) -> None:
        self._anomalies.append({"reason": reason, "detail": f"line {n.start_point[0] + 1}: {detail}"})

    def _guarded(
        self, n: TSNode, lower: Callable[[TSNode], Optional[Node]], placeholder: type = UnknownNode
    ) -> Optional[Node]:
        if self._depth >= self._max_depth:
            if not any(a["reason"] == "NESTING_TOO_DEEP" for a in self._anomalies):
                self._record("NESTING_TOO_DEEP", n, f"more than {self._max_depth} levels")
            return placeholder(source_type=n.type, span=self._span(n))
        self._depth += 1
        try:
            return lower(n)
        finally:
            self._depth -= 1

    def _decode(self, text: str, n: TSNode) -> Optional[str]:
        try:
            return decode_js_string(text)
        except InvalidEscapeError as e:
            self._record("INVALID_ESCAPE", n, str(e))
            return None

    def _unknown(self, n: TSNode) -> UnknownNode:
        children = [self._generic(c) for c in self._named(n)]
        return UnknownNode(source_type=n.type, children=children, span=self._span(n))

    def _generic(self, n: TSNode) -> Node:
        handler = self._statements.get(n.type)
        if handler is not None:
            lowered = self._guarded(n, handler)
            return lowered if lowered is not None else self._unknown(n)
        return self._expression(n)

    # ------------------------------------------------------------------ files

    def lower(self, root: TSNode) -> SourceFile:
        anomalies: List[Dict[str, str]] = []
        if root.has_error:
            anomalies.append({"reason": "PARSE_ERROR", "detail": "tree-sitter reported syntax errors"})
            logger.debug(f"Parse errors in {self.file_name}")

        statements: List[Node] = []
        for c in self._named(root):
            try:
                lowered = self._statement(c)
            except RecursionError:
                # depth guard bypassed (e.g. deeply nested binding patterns)
                self._depth = 0
                self._record("NESTING_TOO_DEEP", c, "recursion limit reached")
                lowered = UnknownNode(source_type=c.type, span=self._span(c))
            if lowered is not None:
                statements.append(lowered)

        anomalies.extend(self._anomalies)
        for anomaly in self._anomalies:
            logger.warning(f"{self.file_name}: {anomaly['reason']} {anomaly['detail']}")
        return SourceFile(
            file_name=self.file_name,
            statements=statements,
            anomalies=anomalies,
            span=self._span(root),
        )

    # ------------------------------------------------------------------ statements

    def _statement(self, n: TSNode) -> Optional[Node]:
        if n.type in _SKIPPED:
            return None
        handler = self._statements.get(n.type)
        if handler is None:
            return self._guarded(n, self._unknown)
        return self._guarded(n, handler)

    def _expression_statement(self, n: TSNode) -> Optional[Node]:
        inner = self._first_named(n)
        if inner is None:
            return None
        if inner.type == "internal_module":
            # `namespace N {}` at statement level parses as an expression
            return self._module_declaration(inner)
        return ExpressionStatement(self._expression(inner), span=self._span(n))

    def _lexical_declaration(self, n: TSNode) -> VariableStatement:
        kind = "let" if self._has_token(n, "let") else "const"
        return self._variable_statement(n, kind)

    def _variable_declaration(self, n: TSNode) -> VariableStatement:
        return self._variable_statement(n, "var")

    def _variable_statement(self, n: TSNode, kind: str) -> VariableStatement:
        declarations = []
        for d in self._named(n):
            if d.type != "variable_declarator":
                continue
            value = d.child_by_field_name("value")
            declarations.append(VariableDeclaration(
                name=self._binding_name(d.child_by_field_name("name")),
                type=self._type_annotation(d.child_by_field_name("type")),
                initializer=self._expression(value) if value is not None else None,
                span=self._span(d),
            ))
        return VariableStatement(declaration_kind=kind, declarations=declarations, span=self._span(n))

    def _ambient_declaration(self, n: TSNode) -> Optional[Node]:
        inner = self._first_named(n)
        if inner is None:
            return None
        lowered = self._statement(inner)
        if isinstance(lowered, VariableStatement):
            lowered.ambient = True
        return lowered

    def _export_statement(self, n: TSNode) -> Optional[Node]:
        decl = n.child_by_field_name("declaration")
        if decl is not None:
            lowered = self._statement(decl)
            if lowered is not None and hasattr(lowered, "exported"):
                lowered.exported = True
            return lowered

        source = n.child_by_field_name("source")
        module_specifier = self._string_value(source) if source is not None else None

        if self._has_token(n, "default"):
            value = n.child_by_field_name("value") or self._first_named(n)
            if value is None:
                return None
            return ExportAssignment(self._expression(value), span=self._span(n))

        clause = next((c for c in self._named(n) if c.type == "export_clause"), None)
        if clause is not None:
            specifiers = []
            for spec in self._named(clause):
                if spec.type != "export_specifier":
                    continue
                name_node = spec.child_by_field_name("name")
                alias_node = spec.child_by_field_name("alias")
                local = self._module_export_name(name_node)
                specifiers.append(ExportSpecifier(
                    name=self._module_export_name(alias_node) if alias_node is not None else local,
                    property_name=local,
                    span=self._span(spec),
                ))
            return ExportDeclaration(specifiers=specifiers, module_specifier=module_specifier, span=self._span(n))

        if self._has_token(n, "*") and module_specifier is not None and not any(
            c.type == "namespace_export" for c in n.children
        ):
            return ExportDeclaration(module_specifier=module_specifier, is_star=True, span=self._span(n))

        return self._unknown(n)

    def _import_statement(self, n: TSNode) -> Node:
        source = n.child_by_field_name("source")
        if source is None:
            return self._unknown(n)
        specifiers: List[ImportSpecifier] = []
        clause = next((c for c in self._named(n) if c.type == "import_clause"), None)
        for part in self._named(clause) if clause is not None else []:
            if part.type == "identifier":
                specifiers.append(ImportSpecifier(
                    name=self._identifier(part), property_name="default", span=self._span(part)
                ))
            elif part.type == "namespace_import":
                ident = self._first_named(part)
                if ident is not None:
                    specifiers.append(ImportSpecifier(
                        name=self._identifier(ident), is_namespace=True, span=self._span(part)
                    ))
            elif part.type == "named_imports":
                for spec in self._named(part):
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    imported = self._module_export_name(name_node)
                    local = alias_node if alias_node is not None else name_node
                    specifiers.append(ImportSpecifier(
                        name=Identifier(self._module_export_name(local), span=self._span(local)),
                        property_name=imported,
                        span=self._span(spec),
                    ))
        return ImportDeclaration(
            module_specifier=self._string_value(source), specifiers=specifiers, span=self._span(n)
        )

    def _function_declaration(self, n: TSNode) -> FunctionDeclaration:
        name = n.child_by_field_name("name")
        body = n.child_by_field_name("body")
        return FunctionDeclaration(
            name=self._identifier(name) if name is not None else None,
            parameters=self._parameters(n),
            body=self._block(body) if body is not None else None,
            span=self._span(n),
        )

    def _class_declaration(self, n: TSNode) -> ClassDeclaration:
        name = n.child_by_field_name("name")
        return ClassDeclaration(
            name=self._identifier(name) if name is not None else None, span=self._span(n)
        )

    def _type_alias_declaration(self, n: TSNode) -> Node:
        name = n.child_by_field_name("name")
        value = n.child_by_field_name("value")
        if name is None or value is None:
            return self._unknown(n)
        return TypeAliasDeclaration(name=self._identifier(name), type=self._type(value), span=self._span(n))

    def _interface_declaration(self, n: TSNode) -> Node:
        name = n.child_by_field_name("name")
        body = n.child_by_field_name("body")
        if name is None:
            return self._unknown(n)
        members = self._property_signatures(body) if body is not None else []
        return InterfaceDeclaration(name=self._identifier(name), members=members, span=self._span(n))

    def _block(self, n: TSNode) -> Block:
        statements = [s for s in (self._statement(c) for c in self._named(n)) if s is not None]
        return Block(statements=statements, span=self._span(n))

    def _parameters(self, n: TSNode) -> List[Parameter]:
        single = n.child_by_field_name("parameter")
        if single is not None:
            return [Parameter(name=self._binding_name(single), span=self._span(single))]
        params = n.child_by_field_name("parameters")
        if params is None:
            return []
        out = []
        for p in self._named(params):
            if p.type not in ("required_parameter", "optional_parameter"):
                continue
            value = p.child_by_field_name("value")
            out.append(Parameter(
                name=self._binding_name(p.child_by_field_name("pattern")),
                type=self._type_annotation(p.child_by_field_name("type")),
                initializer=self._expression(value) if value is not None else None,
                span=self._span(p),
            ))
        return out

    def _enum_declaration(self, n: TSNode) -> Node:
        name = n.child_by_field_name("name")
        body = n.child_by_field_name("body")
        if name is None:
            return self._unknown(n)
        members = []
        for c in self._named(body) if body is not None else []:
            if c.type == "enum_assignment":
                value = c.child_by_field_name("value")
                members.append(EnumMember(
                    name=self._property_name(c.child_by_field_name("name")),
                    initializer=self._expression(value) if value is not None else None,
                    span=self._span(c),
                ))
            else:
                members.append(EnumMember(name=self._property_name(c), span=self._span(c)))
        return EnumDeclaration(
            name=self._identifier(name),
            members=members,
            is_const=self._has_token(n, "const"),
            span=self._span(n),
        )

    def _module_declaration(self, n: TSNode) -> Node:
        name = n.child_by_field_name("name")
        body = n.child_by_field_name("body")
        if name is None:
            return self._unknown(n)
        if name.type == "string":
            lowered_name: Node = self._string(name)
        elif name.type == "nested_identifier":
            # namespace A.B {}: only the outermost name is bound
            lowered_name = Identifier(self._text(name).split(".")[0].strip(), span=self._span(name))
        else:
            lowered_name = self._identifier(name)
        return ModuleDeclaration(
            name=lowered_name,
            body=self._block(body) if body is not None else None,
            span=self._span(n),
        )

    def _for_in_statement(self, n: TSNode) -> ForInStatement:
        left = n.child_by_field_name("left")
        right = n.child_by_field_name("right")
        body = n.child_by_field_name("body")
        declaration_kind = next((c.type for c in n.children if c.type in ("const", "let", "var")), None)
        if declaration_kind is not None:
            initializer: Node = VariableDeclaration(
                name=self._binding_name(left),
                span=self._span(left) if left is not None else None,
            )
        else:
            initializer = self._expression(left)
        loop = ForOfStatement if self._has_token(n, "of") else ForInStatement
        return loop(
            initializer=initializer,
            expression=self._expression(right),
            statement=self._statement(body) if body is not None else None,
            declaration_kind=declaration_kind,
            span=self._span(n),
        )

    def _catch_clause(self, n: TSNode) -> CatchClause:
        param = n.child_by_field_name("parameter")
        body = n.child_by_field_name("body")
        declaration = None
        if param is not None:
            declaration = VariableDeclaration(
                name=self._binding_name(param),
                type=self._type_annotation(n.child_by_field_name("type")),
                span=self._span(param),
            )
        return CatchClause(
            variable_declaration=declaration,
            block=self._block(body) if body is not None else None,
            span=self._span(n),
        )

    def _binding_name(self, n: Optional[TSNode]) -> Node:
        if n is None:
            return UnknownNode(source_type="missing")
        if n.type in ("identifier", "undefined", "shorthand_property_identifier_pattern"):
            return self._identifier(n)
        if n.type == "object_pattern":
            return ObjectBindingPattern(
                elements=[self._binding_element(c) for c in self._named(n)], span=self._span(n)
            )
        if n.type == "array_pattern":
            return ArrayBindingPattern(elements=self._comma_list(n, self._binding_element), span=self._span(n))
        return self._unknown(n)

    def _binding_element(self, n: Optional[TSNode]) -> BindingElement:
        if n is None:
            return BindingElement(name=UnknownNode(source_type="missing"))
        span = self._span(n)
        if n.type == "pair_pattern":
            element = self._binding_element(n.child_by_field_name("value"))
            element.property_name = self._property_name(n.child_by_field_name("key"))
            element.span = span
            return element
        if n.type in ("assignment_pattern", "object_assignment_pattern"):
            right = n.child_by_field_name("right")
            return BindingElement(
                name=self._binding_name(n.child_by_field_name("left")),
                initializer=self._expression(right) if right is not None else None,
                span=span,
            )
        if n.type == "rest_pattern":
            return BindingElement(name=self._binding_name(self._first_named(n)), is_rest=True, span=span)
        return BindingElement(name=self._binding_name(n), span=span)

    def _module_export_name(self, n: Optional[TSNode]) -> str:
        if n is None:
            return ""
        if n.type == "string":
            return self._string_value(n)
        return self._text(n)

    # ------------------------------------------------------------------ expressions

    def _expression(self, n: Optional[TSNode]) -> Node:
        if n is None:
            return UnknownNode(source_type="missing")
        return self._guarded(n, self._expressions.get(n.type, self._unknown))

    def _identifier(self, n: TSNode) -> Identifier:
        return Identifier(self._text(n), span=self._span(n))

    def _number(self, n: TSNode) -> Node:
        text = self._text(n)
        if text.endswith("n"):
            return BigIntLiteral(text, span=self._span(n))
        return NumericLiteral(text, span=self._span(n))

    def _string_value(self, n: TSNode) -> str:
        """Decoded text for names and module specifiers; raw text if undecodable."""
        raw = self._text(n)[1:-1]
        value = self._decode(raw, n)
        return raw if value is None else value

    def _string(self, n: TSNode) -> Node:
        value = self._decode(self._text(n)[1:-1], n)
        if value is None:
            return UnknownNode(source_type=n.type, span=self._span(n))
        return StringLiteral(value, span=self._span(n))

    def _template_string(self, n: TSNode) -> Node:
        subs = [c for c in n.children if c.type == "template_substitution"]
        start, end = n.start_byte + 1, n.end_byte - 1
        if not subs:
            text = self._decode(self._slice(start, end), n)
            if text is None:
                return UnknownNode(source_type=n.type, span=self._span(n))
            return NoSubstitutionTemplateLiteral(text, span=self._span(n))

        head = self._decode(self._slice(start, subs[0].start_byte), n)
        spans = []
        for i, sub in enumerate(subs):
            literal_end = subs[i + 1].start_byte if i + 1 < len(subs) else end
            literal = self._decode(self._slice(sub.end_byte, literal_end), n)
            if head is None or literal is None:
                return UnknownNode(source_type=n.type, span=self._span(n))
            spans.append(TemplateSpan(
                expression=self._expression(self._first_named(sub)),
                literal=literal,
                span=self._span(sub),
            ))
        return TemplateExpression(head=head, spans=spans, span=self._span(n))

    def _unary_expression(self, n: TSNode) -> Node:
        op = n.child_by_field_name("operator")
        arg = n.child_by_field_name("argument")
        if op is None or arg is None:
            return self._unknown(n)
        return PrefixUnaryExpression(operator=op.type, operand=self._expression(arg), span=self._span(n))

    def _comma_list(self, n: TSNode, lower: Callable[[TSNode], Node]) -> List[Node]:
        """Bracketed elements with holes (`[a, , b]`) kept as OmittedExpression."""
        elements: List[Node] = []
        expecting = True
        for c in n.children:
            if c.type in _SKIPPED or c.type == "[":
                continue
            if c.type == "]":
                break
            if c.type == ",":
                if expecting:
                    elements.append(OmittedExpression(span=self._span(c)))
                expecting = True
                continue
            elements.append(lower(c))
            expecting = False
        return elements

    def _array(self, n: TSNode) -> ArrayLiteralExpression:
        return ArrayLiteralExpression(elements=self._comma_list(n, self._expression), span=self._span(n))

    def _object(self, n: TSNode) -> ObjectLiteralExpression:
        properties: List[Node] = []
        for c in self._named(n):
            if c.type == "pair":
                properties.append(PropertyAssignment(
                    name=self._property_name(c.child_by_field_name("key")),
                    initializer=self._expression(c.child_by_field_name("value")),
                    span=self._span(c),
                ))
            elif c.type == "shorthand_property_identifier":
                properties.append(ShorthandPropertyAssignment(self._identifier(c), span=self._span(c)))
            elif c.type == "spread_element":
                properties.append(SpreadAssignment(self._expression(self._first_named(c)), span=self._span(c)))
            elif c.type == "method_definition":
                body = c.child_by_field_name("body")
                properties.append(MethodDeclaration(
                    name=self._property_name(c.child_by_field_name("name")),
                    body=self._block(body) if body is not None else None,
                    span=self._span(c),
                ))
            else:
                properties.append(self._unknown(c))
        return ObjectLiteralExpression(properties=properties, span=self._span(n))

    def _property_name(self, n: Optional[TSNode]) -> Node:
        if n is None:
            return UnknownNode(source_type="missing")
        if n.type in _NAME_TYPES:
            return self._identifier(n)
        if n.type in ("string", "number", "computed_property_name"):
            return self._expression(n)
        return self._unknown(n)

    def _computed_property_name(self, n: TSNode) -> ComputedPropertyName:
        return ComputedPropertyName(self._expression(self._first_named(n)), span=self._span(n))

    def _parenthesized_expression(self, n: TSNode) -> ParenthesizedExpression:
        return ParenthesizedExpression(self._expression(self._first_named(n)), span=self._span(n))

    def _asserted_type(self, n: TSNode, named: List[TSNode]) -> Node:
        if self._has_token(n, "const"):
            return KeywordType("const")
        if len(named) < 2:
            return UnknownType(source_type="missing")
        return self._type(named[1])

    def _as_expression(self, n: TSNode) -> AsExpression:
        named = self._named(n)
        return AsExpression(
            expression=self._expression(named[0] if named else None),
            type=self._asserted_type(n, named),
            span=self._span(n),
        )

    def _satisfies_expression(self, n: TSNode) -> SatisfiesExpression:
        named = self._named(n)
        return SatisfiesExpression(
            expression=self._expression(named[0] if named else None),
            type=self._type(named[1]) if len(named) > 1 else UnknownType(source_type="missing"),
            span=self._span(n),
        )

    def _type_assertion(self, n: TSNode) -> Node:
        named = self._named(n)
        if len(named) < 2:
            return self._unknown(n)
        type_args, expr = named[0], named[-1]
        if self._text(type_args).strip("<> \t\n") == "const":
            asserted: Node = KeywordType("const")
        else:
            inner = self._first_named(type_args)
            asserted = self._type(inner) if inner is not None else UnknownType(source_type="missing")
        return TypeAssertion(type=asserted, expression=self._expression(expr), span=self._span(n))

    def _function_expression(self, n: TSNode) -> FunctionExpression:
        name = n.child_by_field_name("name")
        body = n.child_by_field_name("body")
        lowered_body: Optional[Node] = None
        if body is not None:
            lowered_body = self._block(body) if body.type == "statement_block" else self._expression(body)
        return FunctionExpression(
            name=self._identifier(name) if name is not None else None,
            parameters=self._parameters(n),
            body=lowered_body,
            span=self._span(n),
        )

    # ------------------------------------------------------------------ types

    def _type_annotation(self, n: Optional[TSNode]) -> Optional[Node]:
        if n is None:
            return None
        if n.type in ("type_annotation", "opting_type_annotation", "omitting_type_annotation"):
            inner = self._first_named(n)
            return self._type(inner) if inner is not None else None
        return self._type(n)

    def _type(self, n: TSNode) -> Node:
        return self._guarded(n, self._lower_type, placeholder=UnknownType)

    def _lower_type(self, n: TSNode) -> Node:
        t = n.type
        span = self._span(n)
        named = self._named(n)

        if t == "literal_type" and named:
            return LiteralType(self._expression(named[0]), span=span)
        if t == "predefined_type":
            return KeywordType(self._text(n), span=span)
        if t == "tuple_type":
            return TupleType(elements=[self._tuple_member(c) for c in named], span=span)
        if t == "array_type" and named:
            return ArrayType(self._type(named[0]), span=span)
        if t == "readonly_type" and named:
            return TypeOperator("readonly", self._type(named[0]), span=span)
        if t == "index_type_query" and named:
            return TypeOperator("keyof", self._type(named[0]), span=span)
        if t == "generic_type":
            name = n.child_by_field_name("name")
            args = n.child_by_field_name("type_arguments")
            return TypeReference(
                type_name=Identifier(self._text(name) if name is not None else "", span=span),
                type_arguments=[self._type(a) for a in self._named(args)] if args is not None else [],
                span=span,
            )
        if t in ("type_identifier", "nested_type_identifier"):
            return TypeReference(type_name=Identifier(self._text(n), span=span), span=span)
        if t == "object_type":
            return TypeLiteral(members=self._property_signatures(n), span=span)
        if t == "union_type":
            members: List[Node] = []
            for c in named:
                lowered = self._type(c)
                if isinstance(lowered, UnionType):
                    members.extend(lowered.types)
                else:
                    members.append(lowered)
            return UnionType(types=members, span=span)
        if t == "parenthesized_type" and named:
            return self._type(named[0])
        return UnknownType(source_type=t, span=span)

    def _tuple_member(self, n: TSNode) -> Node:
        if n.type in ("required_parameter", "optional_parameter"):
            annotated = self._type_annotation(n.child_by_field_name("type"))
            return annotated if annotated is not None else UnknownType(source_type=n.type)
        return self._type(n)

    def _property_signatures(self, n: TSNode) -> List[PropertySignature]:
        members = []
        for c in self._named(n):
            if c.type != "property_signature":
                continue
            members.append(PropertySignature(
                name=self._property_name(c.child_by_field_name("name")),
                type=self._type_annotation(c.child_by_field_name("type")),
                span=self._span(c),
            ))
        return members
