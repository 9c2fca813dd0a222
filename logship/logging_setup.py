"""loguru sink configuration shared by the CLI and long-running forwarders."""

import sys
from typing import Optional, TextIO

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZZ} [{level}] {name}: {message}"


def configure_logging(level: str = "INFO", sink: Optional[TextIO] = None) -> int:
    """
    Replace loguru's default handler with a single plain-text sink.

    Args:
        level: Minimum level name ("DEBUG", "INFO", ...)
        sink: Writable stream; stderr when omitted

    Returns:
        The loguru handler id, usable with ``logger.remove``.
    """
    logger.remove()
    return logger.add(
        sink or sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        colorize=False,
    )
