from __future__ import annotations
import argparse
import json
import math
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import Config
from .logging_utils import configure_logging, get_logger
from .models import ResolverResult
from .resolution import resolve_to_literal
from .semantic import Program
from .semantic.program import normalize_path
from .syntax.nodes import ExpressionStatement, Identifier, Node, SourceFile, VariableStatement

logger = get_logger(__name__)


def to_json_value(value: Any) -> Any:
    # patterns -> source, bigints -> decimal text, non-finite numbers -> names
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return int(value) if value.is_integer() and abs(value) < 2 ** 53 else value
    if isinstance(value, list):
        return [to_json_value(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json_value(v) for k, v in value.items()}
    return str(value)


def _entry(node: Node, source_kind: str, result: ResolverResult, name: Optional[str] = None) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "line": node.span.start_line if node.span is not None else None,
        "kind": source_kind,
        "value_type": result.value_type.value if result.value_type is not None else None,
        "value": to_json_value(result.value),
    }
    if name is not None:
        entry["name"] = name
    return entry


def resolve_file(program: Program, sf: SourceFile) -> List[Dict[str, Any]]:
    """Resolve every top-level expression statement and exported const of a file."""
    entries: List[Dict[str, Any]] = []
    for stmt in sf.statements:
        if isinstance(stmt, ExpressionStatement):
            result = resolve_to_literal(stmt.expression, program)
            entries.append(_entry(stmt.expression, stmt.expression.kind.value, result))
        elif isinstance(stmt, VariableStatement) and stmt.exported and stmt.declaration_kind == "const":
            for decl in stmt.declarations:
                if not isinstance(decl.name, Identifier):
                    continue
                result = resolve_to_literal(decl, program)
                entries.append(_entry(decl, decl.kind.value, result, name=decl.name.text))
    return entries


def run(files: List[str], target: Optional[str] = None, config: Optional[Config] = None) -> Dict[str, Any]:
    config = config or Config()
    program = Program.from_files(files, config)

    targets = [target] if target else files
    results: Dict[str, List[Dict[str, Any]]] = {}
    for path in targets:
        sf = program.get_source_file(path)
        if sf is None:
            logger.error(f"Target {path} is not part of the program")
            continue
        results[normalize_path(path)] = resolve_file(program, sf)

    return {
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "files": results,
        "anomalies": program.anomalies,
        "versions": {"ts_static_resolver": __version__},
    }


def _write_report(report: Dict[str, Any], out: Path) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    return out


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve TypeScript expressions to static literal values")
    parser.add_argument("files", nargs="+", help="TypeScript files making up the program")
    parser.add_argument("--target", help="Only report this file (defaults to every input file)")
    parser.add_argument("--out", help="Write the JSON report here instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    config = Config(debug=args.debug)
    configure_logging(config)

    report = run(args.files, target=args.target, config=config)
    if args.out:
        out_path = _write_report(report, Path(args.out))
        print(f"Wrote report → {out_path}", file=sys.stderr)
    else:
        json.dump(report, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
