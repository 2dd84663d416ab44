from __future__ import annotations

import sys

from loguru import logger

VERBOSE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
)
QUIET_FORMAT = "<level>{level}</level>: {message}"


def _stderr_sink(message) -> None:
    # looked up per message so a redirected stderr (CliRunner, capture) is honoured
    sys.stderr.write(message)


def setup_logger(verbose: bool = False):
    """配置 Loguru 日志系统: one stderr sink, WARNING by default, DEBUG with ``verbose``.

    stdout is left to the match lines.
    """
    logger.remove()
    logger.add(
        _stderr_sink,
        level="DEBUG" if verbose else "WARNING",
        format=VERBOSE_FORMAT if verbose else QUIET_FORMAT,
        colorize=sys.stderr.isatty(),
    )
    return logger
