"""
Tests for identifier resolution: local constants, the name fallback, imports.
"""

import pytest

from ts_static_resolver import UNRESOLVED, Program, ValueType, resolve_to_literal
from ts_static_resolver.syntax.nodes import CatchClause, ExpressionStatement, UnknownNode


def _expressions(statements):
    return [s.expression for s in statements if isinstance(s, ExpressionStatement)]


class TestLocalIdentifiers:
    """References to declarations in the same file."""

    def test_const_declaration(self, parse_code):
        statements, program = parse_code(
            """
            const str = "hello";
            str;
            """
        )
        assert len(statements) == 2
        assert isinstance(statements[1], ExpressionStatement)
        result = resolve_to_literal(statements[1].expression, program)

        assert result.value_type is ValueType.STRING_LITERAL
        assert result.value == "hello"

    def test_let_declaration_resolves_its_initializer(self, parse_code):
        statements, program = parse_code('let s = "x";\ns;')
        assert resolve_to_literal(statements[1].expression, program).value == "x"

    def test_chain_of_constants(self, parse_code):
        statements, program = parse_code("const a = 5;\nconst b = a;\nconst c = -b;\nc;")
        result = resolve_to_literal(statements[3].expression, program)

        assert result.value_type is ValueType.NUMERIC_LITERAL
        assert result.value == -5

    def test_constant_holding_an_array(self, parse_code):
        statements, program = parse_code('const xs = ["a", 1];\nxs;')
        assert resolve_to_literal(statements[1].expression, program).value == ["a", 1]

    def test_unbound_identifier_falls_back_to_its_name(self, parse_code, first_expression):
        statements, program = parse_code("SOME_GLOBAL")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value_type is ValueType.STRING_LITERAL
        assert result.value == "SOME_GLOBAL"

    def test_undefined_is_unresolved(self, parse_code, first_expression):
        statements, program = parse_code("undefined")
        assert resolve_to_literal(first_expression(statements), program) == UNRESOLVED

    def test_var_with_string_is_widened(self, parse_code):
        """A `var` is resolved through its declared type, which widens to string."""
        statements, program = parse_code('var v = "x";\nv;')
        assert resolve_to_literal(statements[1].expression, program) == UNRESOLVED

    def test_block_scoped_shadowing(self, parse_code):
        statements, program = parse_code(
            """
            const x = "outer";
            {
              const x = "inner";
            }
            x;
            """
        )
        assert resolve_to_literal(statements[2].expression, program).value == "outer"

    def test_inner_reference_sees_inner_declaration(self, parse_code):
        statements, program = parse_code(
            """
            const x = "outer";
            {
              const x = "inner";
              x;
            }
            """
        )
        inner = statements[1].statements[1].expression
        assert resolve_to_literal(inner, program).value == "inner"


class TestImportedConstants:
    """Constants imported from another file resolve through the alias."""

    @pytest.mark.parametrize("fixture", ["two-files-with-as-const", "two-files-without-as-const"])
    def test_imported_constants(self, fixture_program, fixture):
        program, statements = fixture_program(fixture)
        assert len(statements) == 5  # 1 import + 4 expressions

        string_result, number_result, array_result, object_result = [
            resolve_to_literal(e, program) for e in _expressions(statements)
        ]

        assert string_result.value_type is ValueType.STRING_LITERAL
        assert string_result.value == "hello world"

        assert number_result.value_type is ValueType.NUMERIC_LITERAL
        assert number_result.value == 42

        assert array_result.value_type is ValueType.ARRAY_LITERAL_EXPRESSION
        assert array_result.value == ["a", "b", "c"]

        assert object_result.value_type is ValueType.OBJECT_LITERAL_EXPRESSION
        assert object_result.value == {"key1": "value1", "key2": 123}

    def test_renamed_import(self, tmp_path):
        (tmp_path / "a.ts").write_text('export const A = "a";\n')
        (tmp_path / "b.ts").write_text("import { A as Renamed } from './a';\nRenamed;\n")

        program = Program.from_files([tmp_path / "a.ts", tmp_path / "b.ts"])
        expr = program.get_source_file(tmp_path / "b.ts").statements[1].expression

        assert resolve_to_literal(expr, program).value == "a"

    def test_default_import(self, tmp_path):
        (tmp_path / "a.ts").write_text('export default "hello";\n')
        (tmp_path / "b.ts").write_text("import greeting from './a';\ngreeting;\n")

        program = Program.from_files([tmp_path / "a.ts", tmp_path / "b.ts"])
        expr = program.get_source_file(tmp_path / "b.ts").statements[1].expression

        assert resolve_to_literal(expr, program).value == "hello"

    def test_missing_module_gives_unresolved(self, tmp_path):
        (tmp_path / "b.ts").write_text("import { A } from './missing';\nA;\n")

        program = Program.from_files([tmp_path / "b.ts"])
        expr = program.get_source_file(tmp_path / "b.ts").statements[1].expression

        assert resolve_to_literal(expr, program) == UNRESOLVED


class TestNamesWithoutStaticValues:
    """Declared names with no initializer of their own are bound, and unresolved."""

    @pytest.mark.parametrize(
        "code",
        [
            "const {a} = {a: 1};\na;",
            "const [a] = [1];\na;",
            "var {a} = {a: 1};\na;",
            "let {k: a = 2} = {k: 1};\na;",
            "const [, [a]] = [0, [1]];\na;",
            "const {...a} = {b: 1};\na;",
            "enum a { A = 1 }\na;",
            "namespace a { export const x = 1; }\na;",
        ],
    )
    def test_top_level_declaration(self, parse_code, code):
        statements, program = parse_code(code)
        assert resolve_to_literal(statements[-1].expression, program) == UNRESOLVED

    def test_destructured_parameter(self, parse_code):
        statements, program = parse_code("function f({a}, [b]) {\n  a;\n  b;\n}")
        body = statements[0].body.statements

        assert resolve_to_literal(body[0].expression, program) == UNRESOLVED
        assert resolve_to_literal(body[1].expression, program) == UNRESOLVED

    def test_for_of_variable(self, parse_code):
        statements, program = parse_code("for (const i of [1]) {\n  i;\n}")
        inner = statements[0].statement.statements[0].expression

        assert resolve_to_literal(inner, program) == UNRESOLVED

    def test_for_in_var_is_visible_after_the_loop(self, parse_code):
        statements, program = parse_code("for (var key in {a: 1}) {}\nkey;")
        assert resolve_to_literal(statements[1].expression, program) == UNRESOLVED

    def test_for_of_let_does_not_leak(self, parse_code):
        statements, program = parse_code("for (let item of [1]) {}\nitem;")
        assert resolve_to_literal(statements[1].expression, program).value == "item"

    def test_catch_parameter(self, parse_code):
        statements, program = parse_code("try {\n} catch (err) {\n  err;\n}")
        assert isinstance(statements[0], UnknownNode)
        clause = next(c for c in statements[0].children if isinstance(c, CatchClause))

        assert resolve_to_literal(clause.block.statements[0].expression, program) == UNRESOLVED

    def test_default_value_in_pattern_still_resolves_its_own_references(self, parse_code):
        statements, program = parse_code('const d = "dflt";\nconst {a = d} = {};\nd;')
        assert resolve_to_literal(statements[2].expression, program).value == "dflt"

    def test_names_inside_a_namespace_stay_local(self, parse_code):
        statements, program = parse_code('namespace N {\n  export const x = "in";\n  x;\n}\nx;')

        inner = statements[0].body.statements[1].expression
        assert resolve_to_literal(inner, program).value == "in"
        assert resolve_to_literal(statements[1].expression, program).value == "x"
