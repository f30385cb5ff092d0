"""
Logging for billsight: one stderr handler on the ``billsight`` logger.

Entrypoints (CLI, app lifespan) call ``configure_logging`` once. Modules take
their logger from ``get_logger`` and never attach handlers themselves, so the
package stays silent when imported as a library.

openpyxl reports malformed bank workbooks through ``warnings`` (missing
default styles, unknown extensions); those are routed to the same handler.
"""
from __future__ import annotations

import logging
import sys
from typing import IO

from billsight.config import LOG_FORMAT, LOG_LEVEL

PACKAGE = "billsight"

_package_logger = logging.getLogger(PACKAGE)
_package_logger.addHandler(logging.NullHandler())
_configured = False


class ShortNameFormatter(logging.Formatter):
    """Exposes ``%(short_name)s``: ``billsight.data.store`` → ``data.store``."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = PACKAGE + "."
        record.short_name = record.name[len(prefix):] if record.name.startswith(prefix) else record.name
        return super().format(record)


def _level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or LOG_LEVEL).strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def configure_logging(level: int | str | None = None, stream: IO[str] | None = None) -> None:
    """Attach the stderr handler; later calls only adjust the level."""
    global _configured
    resolved = _level(level)
    _package_logger.setLevel(resolved)
    if _configured:
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ShortNameFormatter(LOG_FORMAT))
    _package_logger.addHandler(handler)
    _package_logger.propagate = False

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger inside the package namespace; ``"data.store"`` and ``"billsight.data.store"`` are the same."""
    if name != PACKAGE and not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)
