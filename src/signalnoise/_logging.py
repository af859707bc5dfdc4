"""Logging configuration for signalnoise.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
:func:`configure_logging` once at startup. The level comes from the
``SIGNALNOISE_LOG_LEVEL`` environment variable (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
import sys


def configure_logging(level_name: str | None = None) -> None:
    """Attach a stderr handler to the ``signalnoise`` logger.

    Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger("signalnoise")
    if root_logger.handlers:
        return

    if level_name is None:
        level_name = os.environ.get("SIGNALNOISE_LOG_LEVEL", "INFO")
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False
