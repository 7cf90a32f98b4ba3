"""
Shared helpers: parse a snippet into a one-file Program on disk.
"""

from pathlib import Path
from typing import List, Tuple

import pytest

from ts_static_resolver import Program
from ts_static_resolver.syntax.nodes import ExpressionStatement, Node

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def parse_code(tmp_path):
    """Write code to test.ts and return (statements, program)."""

    def _parse(code: str, file_name: str = "test.ts") -> Tuple[List[Node], Program]:
        path = tmp_path / file_name
        path.write_text(code, encoding="utf-8")
        program = Program.from_files([path])
        source_file = program.get_source_file(path)
        assert source_file is not None
        return source_file.statements, program

    return _parse


@pytest.fixture
def first_expression():
    def _first(statements: List[Node]) -> Node:
        assert len(statements) >= 1
        assert isinstance(statements[0], ExpressionStatement)
        return statements[0].expression

    return _first


@pytest.fixture
def fixture_program():
    """Load one of the fixture projects; returns (program, imports.ts statements)."""

    def _load(name: str) -> Tuple[Program, List[Node]]:
        fixture_dir = FIXTURES / name
        imports_path = fixture_dir / "imports.ts"
        program = Program.from_files([fixture_dir / "constants.ts", imports_path])
        source_file = program.get_source_file(imports_path)
        assert source_file is not None
        return program, source_file.statements

    return _load
