"""
hkanno.logging - Package logger and CLI logging setup.

Everything logs through the "hkanno" logger. Load and save failures are
errors. Warnings cover failed previews and time line sync the editor gave up
on because per-track annotation counts differ between text and preview.
Debug output traces map rebuilds and discarded stale previews.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("hkanno")


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the hkanno CLI.

    The level is set on the package logger as well, so --verbose takes
    effect even when the root logger was configured earlier.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise WARNING level
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    logger.setLevel(level)
