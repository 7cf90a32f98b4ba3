"""
Tests for aggregate resolution: arrays, object literals, templates.
"""

from ts_static_resolver import UNRESOLVED, ValueType, resolve_to_literal
from ts_static_resolver.syntax.nodes import ExpressionStatement, VariableStatement


class TestArrays:
    """Array literals always resolve; unresolved elements become None holes."""

    def test_mixed_primitives(self, parse_code, first_expression):
        statements, program = parse_code('["hello", 123]')
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value_type is ValueType.ARRAY_LITERAL_EXPRESSION
        assert result.value == ["hello", 123]

    def test_empty_array(self, parse_code, first_expression):
        statements, program = parse_code("[]")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value_type is ValueType.ARRAY_LITERAL_EXPRESSION
        assert result.value == []

    def test_unresolved_elements_keep_their_position(self, parse_code, first_expression):
        statements, program = parse_code("[compute(), 1, null]")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == [None, 1, None]

    def test_holes(self, parse_code, first_expression):
        statements, program = parse_code("[1, , 3]")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == [1, None, 3]

    def test_nested_aggregates_hold_raw_values(self, parse_code, first_expression):
        statements, program = parse_code('[[1, 2], {a: "b"}]')
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == [[1, 2], {"a": "b"}]


class TestObjects:
    """Object literals: only property assignments contribute."""

    def test_simple_object(self, parse_code, first_expression):
        statements, program = parse_code("({ hello: 123 })")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value_type is ValueType.OBJECT_LITERAL_EXPRESSION
        assert result.value == {"hello": 123}

    def test_computed_property_name(self, parse_code):
        statements, program = parse_code(
            """
            const key = "hello";
            ({ [key]: 123 });
            """
        )
        assert len(statements) == 2
        assert isinstance(statements[1], ExpressionStatement)
        result = resolve_to_literal(statements[1].expression, program)

        assert result.value == {"hello": 123}

    def test_quoted_string_key(self, parse_code, first_expression):
        statements, program = parse_code('({ "hello": 123 })')
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == {"hello": 123}

    def test_numeric_keys_use_number_formatting(self, parse_code, first_expression):
        statements, program = parse_code('({ 1: "a", 1.50: "b", [2n]: "c", [true]: "d" })')
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == {"1": "a", "1.5": "b", "2": "c", "true": "d"}

    def test_object_in_variable_declaration(self, parse_code):
        statements, program = parse_code('const obj = { "hello": 123 }')
        assert len(statements) == 1
        assert isinstance(statements[0], VariableStatement)
        declaration = statements[0].declarations[0]
        result = resolve_to_literal(declaration.initializer, program)

        assert result.value == {"hello": 123}

    def test_declaration_resolves_through_initializer(self, parse_code):
        statements, program = parse_code('const obj = { "hello": 123 }')
        declaration = statements[0].declarations[0]

        assert resolve_to_literal(declaration, program).value == {"hello": 123}

    def test_declaration_without_initializer_is_unresolved(self, parse_code):
        statements, program = parse_code("let pending;")
        declaration = statements[0].declarations[0]

        assert resolve_to_literal(declaration, program) == UNRESOLVED

    def test_later_keys_override_earlier(self, parse_code, first_expression):
        statements, program = parse_code("({ a: 1, b: 2, a: 3 })")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == {"a": 3, "b": 2}
        assert list(result.value) == ["a", "b"]

    def test_non_assignment_members_are_skipped(self, parse_code):
        statements, program = parse_code(
            """
            const v = 1;
            const rest = { z: 0 };
            ({ v, ...rest, m() { return 1; }, get g() { return 2; }, w: 2 });
            """
        )
        result = resolve_to_literal(statements[2].expression, program)

        assert result.value == {"w": 2}

    def test_key_that_cannot_be_coerced_skips_the_property(self, parse_code, first_expression):
        statements, program = parse_code("({ [compute()]: 1, [/re/]: 2, b: 2 })")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == {"b": 2}

    def test_unresolved_value_is_stored_as_none(self, parse_code, first_expression):
        statements, program = parse_code("({ a: compute() })")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value_type is ValueType.OBJECT_LITERAL_EXPRESSION
        assert result.value == {"a": None}


class TestTemplates:
    """Templates with substitutions are all-or-nothing."""

    def test_numeric_substitution(self, parse_code, first_expression):
        statements, program = parse_code("`Value: ${123}`")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value_type is ValueType.STRING_LITERAL
        assert result.value == "Value: 123"

    def test_string_substitution(self, parse_code, first_expression):
        statements, program = parse_code('`Hello ${"world"}`')
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == "Hello world"

    def test_multiple_substitutions(self, parse_code, first_expression):
        statements, program = parse_code("`${1} + ${2} = ${3}`")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == "1 + 2 = 3"

    def test_stringification_rules(self, parse_code, first_expression):
        statements, program = parse_code("`${0.1}|${1e21}|${-0}|${10n}|${true}|${false}`")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == "0.1|1e+21|0|10|true|false"

    def test_substitution_through_constant(self, parse_code):
        statements, program = parse_code(
            """
            const name = "world";
            `hello ${name}!`;
            """
        )
        result = resolve_to_literal(statements[1].expression, program)

        assert result.value == "hello world!"

    def test_escapes_in_literal_parts(self, parse_code, first_expression):
        statements, program = parse_code(r"`a\t${1}\n`")
        result = resolve_to_literal(first_expression(statements), program)

        assert result.value == "a\t1\n"

    def test_one_unresolved_span_fails_the_whole_template(self, parse_code, first_expression):
        statements, program = parse_code("`a ${compute()} b ${1}`")
        assert resolve_to_literal(first_expression(statements), program) == UNRESOLVED

    def test_aggregate_span_fails_the_template(self, parse_code, first_expression):
        statements, program = parse_code("`${[1]}`")
        assert resolve_to_literal(first_expression(statements), program) == UNRESOLVED
