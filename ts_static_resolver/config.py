"""
Configuration management for the static resolver front end.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class Config:
    """Main configuration class for parsing and binding programs."""

    # Parser settings
    default_dialect: str = "typescript"
    dialect_by_extension: Optional[Dict[str, str]] = None

    # Module resolution
    module_extensions: List[str] = None
    index_files: List[str] = None

    # File processing
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    max_nesting_depth: int = 100  # lowered tree levels; deeper subtrees become UnknownNode
    supported_extensions: List[str] = None

    # General settings
    debug: bool = False

    def __post_init__(self):
        if self.dialect_by_extension is None:
            self.dialect_by_extension = {
                ".ts": "typescript",
                ".mts": "typescript",
                ".cts": "typescript",
                ".tsx": "tsx",
            }
        if self.module_extensions is None:
            self.module_extensions = [".ts", ".tsx", ".d.ts"]
        if self.index_files is None:
            self.index_files = ["index.ts", "index.tsx"]
        if self.supported_extensions is None:
            self.supported_extensions = [".ts", ".tsx", ".mts", ".cts"]

    def dialect_for(self, file_name: str) -> str:
        """Pick the grammar dialect for a file name."""
        for ext, dialect in self.dialect_by_extension.items():
            if file_name.endswith(ext):
                return dialect
        return self.default_dialect


class AnomalyCodes:
    """Standard anomaly codes recorded while loading programs."""

    # Ingestion anomalies (1000-1999)
    IO_ERROR = 1001
    DECODE_ERROR = 1002
    PARSE_ERROR = 1003
    UNSUPPORTED_EXTENSION = 1004
    FILE_TOO_LARGE = 1005
    INVALID_ESCAPE = 1006
    NESTING_TOO_DEEP = 1007

    # Binding anomalies (2000-2999)
    UNRESOLVED_MODULE = 2001

    @classmethod
    def for_reason(cls, reason: str) -> Optional[int]:
        return getattr(cls, reason, None)
