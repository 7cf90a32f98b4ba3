"""
Resolution module - static literal values

Computes the compile-time literal a syntax node denotes: literals, references
to constants, aggregate literals and literal types.
"""

from .aggregates import stringify_literal
from .resolver import LiteralResolver, SemanticModel, resolve_to_literal

__all__ = [
    "LiteralResolver",
    "SemanticModel",
    "resolve_to_literal",
    "stringify_literal",
]
