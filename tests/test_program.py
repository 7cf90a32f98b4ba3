"""
Tests for binding, type inference and module resolution across a Program.
"""

from ts_static_resolver import Config, Program, resolve_to_literal
from ts_static_resolver.semantic.symbols import UNKNOWN_SYMBOL, SymbolFlags
from ts_static_resolver.semantic.types import ObjectFlags, TypeFlags


def _locals(program, name="test.ts"):
    return program.file_symbols[name].locals.symbols


class TestBinder:
    """Scopes and symbols produced by the binder."""

    def test_declaration_flags(self):
        program = Program.from_sources({
            "test.ts": (
                "const a = 1;\nlet b = 2;\nvar c = 3;\n"
                "function f() {}\nclass K {}\n"
                "type T = string;\ninterface I { x: number }\n"
                "import { m } from './other';\n"
            ),
            "other.ts": "export const m = 1;",
        })
        symbols = _locals(program)

        assert symbols["a"].flags is SymbolFlags.BLOCK_SCOPED_VARIABLE and symbols["a"].is_const
        assert symbols["b"].flags is SymbolFlags.BLOCK_SCOPED_VARIABLE and not symbols["b"].is_const
        assert symbols["c"].flags is SymbolFlags.FUNCTION_SCOPED_VARIABLE
        assert symbols["f"].flags is SymbolFlags.FUNCTION
        assert symbols["K"].flags is SymbolFlags.CLASS
        assert symbols["m"].flags is SymbolFlags.ALIAS
        # type-only declarations live in the type namespace
        assert "T" not in symbols and "I" not in symbols
        types = program.file_symbols["test.ts"].locals.types
        assert types["T"].flags is SymbolFlags.TYPE_ALIAS
        assert types["I"].flags is SymbolFlags.INTERFACE
        assert set(types["I"].members) == {"x"}

    def test_var_hoists_out_of_blocks(self):
        program = Program.from_sources({"test.ts": "{ var hoisted = 1; let scoped = 2; }"})
        symbols = _locals(program)

        assert "hoisted" in symbols
        assert "scoped" not in symbols

    def test_object_literal_members(self):
        program = Program.from_sources({"test.ts": "const o = { a: 1, 'b': 2, [k]: 3, c };"})
        initializer = program.source_files["test.ts"].statements[0].declarations[0].initializer
        symbol = program.literal_symbols[initializer]

        assert symbol.flags is SymbolFlags.OBJECT_LITERAL
        assert symbol.value_declaration is initializer
        assert set(symbol.members) == {"a", "b", "c"}
        assert all(m.flags is SymbolFlags.PROPERTY for m in symbol.members.values())

    def test_property_name_maps_to_property_symbol(self):
        program = Program.from_sources({"test.ts": "const o = { a: 1 };"})
        prop = program.source_files["test.ts"].statements[0].declarations[0].initializer.properties[0]
        symbol = program.get_symbol_at_location(prop.name)

        assert symbol.flags is SymbolFlags.PROPERTY
        assert symbol.name == "a"

    def test_exports_table(self):
        program = Program.from_sources({
            "test.ts": "export const a = 1;\nconst b = 2;\nexport { b as c };\nexport * from './x';\nexport default b;",
            "x.ts": "",
        })
        fs = program.file_symbols["test.ts"]

        assert set(fs.exports) == {"a", "c", "default"}
        assert fs.star_exports == ["./x"]

    def test_destructured_names_are_declared(self):
        program = Program.from_sources({"test.ts": "export const { a, b: [c, ...d] } = o;\nvar [e = 1] = xs;"})
        symbols = _locals(program)

        assert {"a", "c", "d", "e"} <= set(symbols)
        assert "b" not in symbols
        assert symbols["a"].is_const and symbols["a"].flags is SymbolFlags.BLOCK_SCOPED_VARIABLE
        assert symbols["e"].flags is SymbolFlags.FUNCTION_SCOPED_VARIABLE
        assert set(program.file_symbols["test.ts"].exports) == {"a", "c", "d"}

    def test_enum_and_namespace_symbols(self):
        program = Program.from_sources({
            "test.ts": 'export enum E { A, B = "b" }\nnamespace N {\n  export const x = 1;\n  const hidden = 2;\n}',
        })
        fs = program.file_symbols["test.ts"]
        enum, ns = fs.locals.symbols["E"], fs.locals.symbols["N"]

        assert enum.flags is SymbolFlags.ENUM and fs.locals.types["E"] is enum
        assert {n: m.flags for n, m in enum.members.items()} == {
            "A": SymbolFlags.ENUM_MEMBER,
            "B": SymbolFlags.ENUM_MEMBER,
        }
        assert ns.flags is SymbolFlags.NAMESPACE
        assert set(ns.members) == {"x"}
        assert set(fs.exports) == {"E"}
        assert "x" not in fs.locals.symbols

    def test_ambient_module_exports_stay_out_of_the_file(self):
        program = Program.from_sources({"test.ts": 'declare module "lib" {\n  export const v: 1;\n}\nexport const w = 2;'})
        assert set(program.file_symbols["test.ts"].exports) == {"w"}


class TestChecker:
    """Inferred types of declarations."""

    def _type_of(self, code, name):
        program = Program.from_sources({"test.ts": code})
        return program.get_type_of_symbol(_locals(program)[name])

    def test_const_keeps_literal_type(self):
        t = self._type_of('const a = "x";', "a")
        assert t.flags is TypeFlags.STRING_LITERAL
        assert t.value == "x"

    def test_let_and_var_widen(self):
        assert self._type_of('let a = "x";', "a").flags is TypeFlags.STRING
        assert self._type_of("var a = 1;", "a").flags is TypeFlags.NUMBER

    def test_const_assertion_keeps_literal_type_on_var(self):
        t = self._type_of('var a = "x" as const;', "a")
        assert t.flags is TypeFlags.STRING_LITERAL

    def test_array_inference(self):
        t = self._type_of("var a = [1, 2];", "a")
        assert t.object_flags is ObjectFlags.REFERENCE
        assert t.target == "Array"
        assert [arg.flags for arg in t.type_arguments] == [TypeFlags.NUMBER]

    def test_const_asserted_array_is_readonly_tuple(self):
        t = self._type_of('var a = ["x", 1] as const;', "a")
        assert t.target == "tuple"
        assert t.readonly
        assert [arg.value for arg in t.type_arguments] == ["x", 1]

    def test_annotation_wins_over_initializer(self):
        t = self._type_of('var a: "fixed" = "other" as any;', "a")
        assert t.flags is TypeFlags.STRING_LITERAL
        assert t.value == "fixed"

    def test_readonly_array_annotation(self):
        t = self._type_of("declare var a: readonly string[];", "a")
        assert t.target == "ReadonlyArray"
        assert t.readonly

    def test_generic_array_reference(self):
        t = self._type_of('declare var a: Array<"x">;', "a")
        assert t.target == "Array"
        assert t.type_arguments[0].value == "x"

    def test_object_literal_type_carries_its_symbol(self):
        program = Program.from_sources({"test.ts": "var o = { k: 1 };"})
        t = program.get_type_of_symbol(_locals(program)["o"])

        assert t.flags is TypeFlags.OBJECT
        assert t.symbol.flags is SymbolFlags.OBJECT_LITERAL

    def test_get_type_arguments_of_non_reference(self):
        program = Program.from_sources({"test.ts": 'const a = "x";'})
        t = program.get_type_of_symbol(_locals(program)["a"])

        assert program.get_type_arguments(t) == []


class TestModules:
    """Module resolution and alias hops."""

    def test_resolve_module_candidates(self):
        program = Program.from_sources({
            "src/app.ts": "",
            "src/lib.tsx": "",
            "src/util/index.ts": "",
            "src/types.d.ts": "",
            "shared.ts": "",
        })

        assert program.resolve_module("src/app.ts", "./lib") == "src/lib.tsx"
        assert program.resolve_module("src/app.ts", "./util") == "src/util/index.ts"
        assert program.resolve_module("src/app.ts", "./types") == "src/types.d.ts"
        assert program.resolve_module("src/app.ts", "../shared") == "shared.ts"
        assert program.resolve_module("src/app.ts", "./lib.js") == "src/lib.tsx"
        assert program.resolve_module("src/app.ts", "react") is None
        assert program.resolve_module("src/app.ts", "./nope") is None

    def test_star_reexport(self):
        program = Program.from_sources({
            "a.ts": 'export const A = "a";',
            "b.ts": "export * from './a';",
            "c.ts": "import { A } from './b';\nA;",
        })
        expr = program.get_source_file("c.ts").statements[1].expression

        assert resolve_to_literal(expr, program).value == "a"

    def test_renamed_local_export(self):
        program = Program.from_sources({
            "a.ts": "const x = 1;\nexport { x as y };",
            "b.ts": "import { y } from './a';\ny;",
        })
        expr = program.get_source_file("b.ts").statements[1].expression

        assert resolve_to_literal(expr, program).value == 1

    def test_named_reexport_chain(self):
        program = Program.from_sources({
            "a.ts": "export const x = [1, 2] as const;",
            "b.ts": "export { x } from './a';",
            "c.ts": "import { x } from './b';\nx;",
        })
        expr = program.get_source_file("c.ts").statements[1].expression

        assert resolve_to_literal(expr, program).value == [1, 2]

    def test_alias_hop_is_one_step(self):
        program = Program.from_sources({
            "a.ts": "export const x = 1;",
            "b.ts": "export { x } from './a';",
            "c.ts": "import { x } from './b';",
        })
        alias = _locals(program, "c.ts")["x"]
        hop = program.get_aliased_symbol(alias)

        assert hop.flags is SymbolFlags.ALIAS
        assert program.get_aliased_symbol(hop).flags is SymbolFlags.BLOCK_SCOPED_VARIABLE

    def test_namespace_import_is_a_module(self):
        program = Program.from_sources({
            "a.ts": "export const x = 1;",
            "b.ts": "import * as ns from './a';\nns;",
        })
        alias = _locals(program, "b.ts")["ns"]
        module = program.get_aliased_symbol(alias)

        assert module.flags is SymbolFlags.MODULE
        assert "x" in module.members

    def test_unknown_export_gives_unknown_symbol(self):
        program = Program.from_sources({
            "a.ts": "export const x = 1;",
            "b.ts": "import { nope } from './a';",
        })
        alias = _locals(program, "b.ts")["nope"]

        assert program.get_aliased_symbol(alias) is UNKNOWN_SYMBOL

    def test_star_exports_do_not_forward_default(self):
        program = Program.from_sources({
            "a.ts": 'export default "d";',
            "b.ts": "export * from './a';",
            "c.ts": "import d from './b';",
        })
        alias = _locals(program, "c.ts")["d"]

        assert program.get_aliased_symbol(alias) is UNKNOWN_SYMBOL


class TestAnomalies:
    """Program-level anomaly aggregation."""

    def test_unresolved_relative_module_is_reported(self):
        program = Program.from_sources({"a.ts": "import { x } from './missing';\nimport React from 'react';"})
        anomalies = program.anomalies

        assert len(anomalies) == 1
        assert anomalies[0]["reason"] == "UNRESOLVED_MODULE"
        assert anomalies[0]["detail"] == "./missing"
        assert anomalies[0]["file"] == "a.ts"
        assert anomalies[0]["code"] == 2001

    def test_file_anomalies_carry_codes(self, tmp_path):
        good = tmp_path / "good.ts"
        good.write_text("const = ;")
        program = Program.from_files([good, tmp_path / "gone.ts"], Config())
        reasons = {(a["reason"], a["code"]) for a in program.anomalies}

        assert ("PARSE_ERROR", 1003) in reasons
        assert ("IO_ERROR", 1001) in reasons

    def test_get_source_file_normalizes_paths(self, tmp_path):
        path = tmp_path / "a.ts"
        path.write_text("1;")
        program = Program.from_files([path])

        assert program.get_source_file(tmp_path / "sub" / ".." / "a.ts") is not None
