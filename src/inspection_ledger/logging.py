"""Logging setup shared by the API process and scripts."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"
_QUIET_LOGGERS = ("azure", "azure.core.pipeline.policies.http_logging_policy", "uvicorn.access")


def configure_logging(level: str = "INFO", *, log_file: str | None = None) -> None:
    """Install root handlers once; repeated calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(h, "_inspection_ledger", False) for h in root.handlers):
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        formatter = logging.Formatter(_FORMAT)
        for handler in handlers:
            handler.setFormatter(formatter)
            handler._inspection_ledger = True  # type: ignore[attr-defined]
            root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
