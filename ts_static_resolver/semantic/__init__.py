"""
Semantic module - binding and type inference

Binds parsed source files into scopes and symbols and infers the types the
literal resolver falls back to.
"""

from .binder import Binder
from .checker import TypeChecker
from .program import Program
from .symbols import UNKNOWN_SYMBOL, Symbol, SymbolFlags
from .types import ObjectFlags, Type, TypeFlags

__all__ = [
    "Binder",
    "TypeChecker",
    "Program",
    "Symbol",
    "SymbolFlags",
    "UNKNOWN_SYMBOL",
    "Type",
    "TypeFlags",
    "ObjectFlags",
]
