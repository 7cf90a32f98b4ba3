"""
Program: a set of parsed source files bound together.

Files are keyed by normalized POSIX path. Relative module specifiers resolve
against the importing file; bare package specifiers are left unresolved.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..config import AnomalyCodes, Config
from ..logging_utils import get_logger, log_anomalies, log_load_step
from ..syntax.nodes import ExportDeclaration, ImportDeclaration, Node, SourceFile
from ..syntax.ts_lowering import parse_file, parse_source
from .binder import Binder, create_global_scope
from .checker import TypeChecker
from .symbols import FileSymbols, Scope, Symbol, SymbolFlags
from .types import Type

logger = get_logger(__name__)


def normalize_path(path: str | Path) -> str:
    return posixpath.normpath(Path(path).as_posix())


class Program:
    """Bound source files plus the TypeChecker answering queries over them."""

    def __init__(self, source_files: Iterable[SourceFile], config: Optional[Config] = None):
        self.config = config or Config()
        self.source_files: Dict[str, SourceFile] = {}
        for sf in source_files:
            self.source_files[normalize_path(sf.file_name)] = sf

        self.global_scope: Scope = create_global_scope()
        self.file_symbols: Dict[str, FileSymbols] = {}
        self.module_symbols: Dict[str, Symbol] = {}
        self.declared: Dict[Node, Symbol] = {}
        self.scopes: Dict[Node, Scope] = {}
        self.literal_symbols: Dict[Node, Symbol] = {}
        self._module_anomalies: List[Dict[str, Any]] = []

        self._bind_all()
        self.checker = TypeChecker(self)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_files(cls, paths: Iterable[str | Path], config: Optional[Config] = None) -> "Program":
        config = config or Config()
        paths = list(paths)
        log_load_step("program", "started", files=len(paths))
        source_files = [parse_file(p, config) for p in paths]
        program = cls(source_files, config)
        log_load_step("program", "completed", files=len(program.source_files), anomalies=len(program.anomalies))
        return program

    @classmethod
    def from_sources(cls, sources: Mapping[str, str], config: Optional[Config] = None) -> "Program":
        """Build a program from in-memory text, keyed by file name."""
        config = config or Config()
        return cls([parse_source(text, file_name=name, config=config) for name, text in sources.items()], config)

    def _bind_all(self) -> None:
        binder = Binder(self.global_scope)
        for path, sf in self.source_files.items():
            log_anomalies(logger, path, sf.anomalies)
            try:
                fs = binder.bind(sf)
            except RecursionError:
                logger.warning(f"Binding {path} exceeded the recursion limit; its symbols are dropped")
                self._module_anomalies.append({
                    "file": path,
                    "reason": "NESTING_TOO_DEEP",
                    "detail": "binder recursion limit",
                    "code": AnomalyCodes.NESTING_TOO_DEEP,
                })
                fs = FileSymbols(file_name=path, locals=Scope(kind="file", parent=self.global_scope))
            fs.file_name = path
            # aliases record the file they appear in by its normalized key
            for symbol in list(fs.locals.symbols.values()) + list(fs.exports.values()):
                if symbol.flags is SymbolFlags.ALIAS:
                    symbol.source_file = path
            self.file_symbols[path] = fs
            self.module_symbols[path] = Symbol(
                name=path,
                flags=SymbolFlags.MODULE,
                value_declaration=sf,
                members=fs.exports,
                source_file=path,
            )
            self.declared.update(fs.declared)
            self.scopes.update(fs.scopes)
            self.literal_symbols.update(fs.literal_symbols)

        for path, sf in self.source_files.items():
            self._check_module_specifiers(path, sf)

        logger.debug(f"Bound {len(self.file_symbols)} files, {len(self.declared)} declarations")

    def _check_module_specifiers(self, path: str, sf: SourceFile) -> None:
        for stmt in sf.statements:
            if not isinstance(stmt, (ImportDeclaration, ExportDeclaration)):
                continue
            specifier = stmt.module_specifier
            if specifier is None or not _is_relative(specifier):
                continue
            if self.resolve_module(path, specifier) is None:
                self._module_anomalies.append({
                    "file": path,
                    "reason": "UNRESOLVED_MODULE",
                    "detail": specifier,
                    "code": AnomalyCodes.UNRESOLVED_MODULE,
                })

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_source_file(self, path: str | Path) -> Optional[SourceFile]:
        return self.source_files.get(normalize_path(path))

    def resolve_module(self, from_file: str, specifier: str) -> Optional[str]:
        """Map a relative specifier to a file of this program, or None."""
        if not _is_relative(specifier):
            return None
        base = posixpath.normpath(posixpath.join(posixpath.dirname(from_file), specifier))

        candidates = [base]
        if base.endswith(".js"):
            candidates.append(base[:-3])
        stems = list(candidates)
        for stem in stems:
            candidates.extend(stem + ext for ext in self.config.module_extensions)
        for stem in stems:
            candidates.extend(posixpath.join(stem, index) for index in self.config.index_files)

        for candidate in candidates:
            if candidate in self.source_files:
                return candidate
        return None

    @property
    def anomalies(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for path, sf in self.source_files.items():
            for anomaly in sf.anomalies:
                out.append({"file": path, **anomaly, "code": AnomalyCodes.for_reason(anomaly["reason"])})
        out.extend(self._module_anomalies)
        return out

    # -------------------------------------------------------------------------
    # SemanticModel
    # -------------------------------------------------------------------------

    def get_symbol_at_location(self, node: Node) -> Optional[Symbol]:
        return self.checker.get_symbol_at_location(node)

    def get_aliased_symbol(self, symbol: Symbol) -> Symbol:
        return self.checker.get_aliased_symbol(symbol)

    def get_type_of_symbol(self, symbol: Symbol) -> Type:
        return self.checker.get_type_of_symbol(symbol)

    def get_type_arguments(self, type_: Type) -> List[Type]:
        return self.checker.get_type_arguments(type_)


def _is_relative(specifier: str) -> bool:
    return specifier in (".", "..") or specifier.startswith(("./", "../"))
