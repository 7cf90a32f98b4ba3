"""
Tests for the command-line report.
"""

import json
import math
import re
from pathlib import Path

from ts_static_resolver.cli import main, run, to_json_value

FIXTURES = Path(__file__).parent / "fixtures"


class TestJsonValues:
    """Resolved values are made JSON-safe."""

    def test_patterns_become_their_source(self):
        assert to_json_value(re.compile("a+b")) == "a+b"

    def test_bigints_become_decimal_text(self):
        assert to_json_value(2 ** 70) == str(2 ** 70)

    def test_non_finite_numbers_become_names(self):
        assert to_json_value(math.nan) == "NaN"
        assert to_json_value(math.inf) == "Infinity"
        assert to_json_value(-math.inf) == "-Infinity"

    def test_integral_floats_become_ints(self):
        assert to_json_value(42.0) == 42
        assert isinstance(to_json_value(42.0), int)
        assert to_json_value(0.5) == 0.5

    def test_nested_values(self):
        assert to_json_value([1.0, None, {"k": True}]) == [1, None, {"k": True}]


class TestMain:
    """End to end runs of the CLI over fixture projects."""

    def test_report_written_to_file(self, tmp_path, capsys):
        fixture_dir = FIXTURES / "two-files-with-as-const"
        out = tmp_path / "reports" / "report.json"

        code = main([str(fixture_dir / "constants.ts"), str(fixture_dir / "imports.ts"), "--out", str(out)])

        assert code == 0
        assert "Wrote report" in capsys.readouterr().err
        report = json.loads(out.read_text(encoding="utf-8"))
        assert set(report) == {"timestamp_utc", "files", "anomalies", "versions"}
        assert report["anomalies"] == []

        imports = next(v for k, v in report["files"].items() if k.endswith("imports.ts"))
        assert [e["value"] for e in imports] == [
            "hello world",
            42,
            ["a", "b", "c"],
            {"key1": "value1", "key2": 123},
        ]
        assert [e["line"] for e in imports] == [3, 4, 5, 6]
        assert all(e["kind"] == "Identifier" for e in imports)
        assert imports[3]["value_type"] == "ObjectLiteralExpression"

    def test_exported_constants_are_named(self, tmp_path, capsys):
        fixture_dir = FIXTURES / "two-files-without-as-const"
        out = tmp_path / "report.json"

        main([str(fixture_dir / "constants.ts"), str(fixture_dir / "imports.ts"), "--out", str(out)])
        report = json.loads(out.read_text(encoding="utf-8"))

        constants = next(v for k, v in report["files"].items() if k.endswith("constants.ts"))
        assert {e["name"]: e["value"] for e in constants} == {
            "STRING_CONSTANT": "hello world",
            "NUMBER_CONSTANT": 42,
            "ARRAY_CONSTANT": ["a", "b", "c"],
            "OBJECT_CONSTANT": {"key1": "value1", "key2": 123},
        }
        assert all(e["kind"] == "VariableDeclaration" for e in constants)

    def test_target_limits_the_report(self, tmp_path, capsys):
        fixture_dir = FIXTURES / "two-files-with-as-const"

        code = main([
            str(fixture_dir / "constants.ts"),
            str(fixture_dir / "imports.ts"),
            "--target",
            str(fixture_dir / "imports.ts"),
        ])
        report = json.loads(capsys.readouterr().out)

        assert code == 0
        assert len(report["files"]) == 1
        assert next(iter(report["files"])).endswith("imports.ts")

    def test_unresolved_entries_and_anomalies(self, tmp_path):
        path = tmp_path / "a.ts"
        path.write_text("import { x } from './gone';\ncompute();\n/a+/i;\n10n;\n")

        report = run([str(path)])
        entries = report["files"][path.as_posix()]

        assert entries[0] == {"line": 2, "kind": "Unknown", "value_type": None, "value": None}
        assert entries[1]["value"] == "a+"
        assert entries[1]["value_type"] == "RegularExpressionLiteral"
        assert entries[2]["value"] == "10"
        assert [a["reason"] for a in report["anomalies"]] == ["UNRESOLVED_MODULE"]
