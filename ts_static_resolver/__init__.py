"""
ts-static-resolver: compile-time literal values of TypeScript expressions.
"""

from .config import Config
from .models import UNRESOLVED, ResolverResult, ValueType
from .resolution import resolve_to_literal
from .semantic import Program
from .syntax import parse_file, parse_source

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Program",
    "ResolverResult",
    "UNRESOLVED",
    "ValueType",
    "parse_file",
    "parse_source",
    "resolve_to_literal",
]
