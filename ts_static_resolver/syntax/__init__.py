"""
Syntax module - TypeScript front end

Parses TypeScript with tree-sitter and lowers it into the node dataclasses
the binder and resolver work on.
"""

from .nodes import Node, SourceFile, SyntaxKind
from .ts_lowering import TreeSitterLowering, parse_file, parse_source

__all__ = [
    "Node",
    "SourceFile",
    "SyntaxKind",
    "TreeSitterLowering",
    "parse_file",
    "parse_source",
]
