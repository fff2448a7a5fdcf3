"""
Logger configuration.

Routes engine logs to stdout and quiets chatty HTTP, PDF and FAISS
libraries. The level defaults to the LOG_LEVEL setting.

Dependencies: logging (stdlib), rag_engine.configs
System role: Centralized logging configuration
"""

import logging
import sys

from rag_engine.configs import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "pypdf", "faiss")


def configure_logging(level: str | int | None = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Level name or number; settings.log_level when None.
            Unknown names fall back to INFO.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
