from __future__ import annotations

import logging
import sys


def configure_logging(log_level: str = "INFO") -> None:
    """Route application and third-party logs to stdout at the given level."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=log_level.upper(),
    )
