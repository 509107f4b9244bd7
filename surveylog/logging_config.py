"""Root logger configuration for surveylog.

``setup_logging`` attaches a single console handler to the root logger.
It is safe to call more than once (repeated app startups in tests).
"""

import logging
import os
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger from ``level`` or `LOG_LEVEL` (default INFO)."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = level or os.getenv("LOG_LEVEL", "INFO")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
