"""
Configure application logging.

Modules log through `logging.getLogger(__name__)` and pass structured context
with `extra={...}`. python-json-logger renders each record as one JSON line
with those extra fields at the top level.
"""

from __future__ import annotations

import logging

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_json_formatter() -> jsonlogger.JsonFormatter:
    return jsonlogger.JsonFormatter(
        LOG_FORMAT,
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single JSON console handler."""

    root = logging.getLogger()
    root.setLevel(level)
    # Remove any default handlers (e.g. from basicConfig)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(build_json_formatter())
    root.addHandler(handler)


__all__ = ["LOG_FORMAT", "build_json_formatter", "configure_logging"]
