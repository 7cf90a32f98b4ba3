"""
Logging helpers for the static resolver.

The library only creates loggers; handlers are installed by the CLI through
configure_logging.
"""

import logging
from typing import Any, Dict, Iterable

from .config import Config

_LOAD_LOGGER = "ts_static_resolver.load"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module."""
    return logging.getLogger(name)


def configure_logging(config: Config) -> None:
    """Root handler at DEBUG when config.debug is set, WARNING otherwise."""
    logging.basicConfig(level=logging.DEBUG if config.debug else logging.WARNING, format=_FORMAT)


def log_load_step(step: str, status: str, **counts: int) -> None:
    """
    Log one program-loading step.

    The step, status and counts are also attached to the record as `extra`
    fields so structured handlers can pick them up.
    """
    summary = ", ".join(f"{k}={v}" for k, v in counts.items())
    level = logging.ERROR if status == "failed" else logging.INFO
    get_logger(_LOAD_LOGGER).log(
        level,
        f"Load {step}: {status}" + (f" ({summary})" if summary else ""),
        extra={"step": step, "status": status, "counts": counts},
    )


def log_anomalies(logger: logging.Logger, file_name: str, anomalies: Iterable[Dict[str, Any]]) -> None:
    for anomaly in anomalies:
        logger.debug(f"{file_name}: {anomaly['reason']} {anomaly.get('detail', '')}".rstrip())
