from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

ROOT_LOGGER = "item_vector_sync"
LOG_LEVEL_ENV = "ITEM_SYNC_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def resolve_level(environ: Optional[Mapping[str, str]] = None) -> int:
    """Level named by ``ITEM_SYNC_LOG_LEVEL``; unknown names fall back to INFO."""
    env = os.environ if environ is None else environ
    name = (env.get(LOG_LEVEL_ENV) or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure(logger: Optional[logging.Logger] = None, environ: Optional[Mapping[str, str]] = None) -> logging.Logger:
    """Attach one stream handler to the package logger.

    Repeated calls are no-ops, and the process root logger is left alone so
    a host application keeps its own handlers.
    """
    target = logger if logger is not None else logging.getLogger(ROOT_LOGGER)
    if not target.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        target.addHandler(handler)
        target.setLevel(resolve_level(environ))
    return target


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, a dotted child of ``item_vector_sync``."""
    configure()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
