"""Logging for the comparison service: one stream handler, key=value messages."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

ROOT_NAMESPACE = "propcompare"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(namespace: str = ROOT_NAMESPACE) -> logging.Logger:
    """Return the package logger, attaching its handler on first use.

    The level comes from ``LOG_LEVEL`` (default ``INFO``). Records do not
    propagate to the root logger, so an embedding app keeps its own format.
    """

    logger = logging.getLogger(namespace)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    logger.propagate = False
    return logger


def get_logger(child: Optional[str] = None) -> logging.Logger:
    base = configure_logging()
    return base.getChild(child) if child else base


def kv(**fields: Any) -> str:
    """Render ``key=value`` pairs; strings with spaces are quoted."""

    parts = []
    for key, value in fields.items():
        if isinstance(value, str) and (" " in value or not value):
            value = repr(value)
        parts.append(f"{key}={value}")
    return " ".join(parts)
