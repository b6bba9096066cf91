"""
Logging configuration for the news extractor.

The package logger ("news_extractor") writes to stdout, and optionally to a
file.  Its level comes from the caller, or from the NEWS_EXTRACTOR_LOG_LEVEL
environment variable (a level name such as DEBUG or WARNING) when the caller
gives none.  Pipeline stages log through child loggers.
"""

import logging
import os
import sys
from typing import Optional, Union

LOG_LEVEL_ENV = "NEWS_EXTRACTOR_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: Union[int, str, None] = None) -> int:
    """
    Turn a level number or name into a logging level.

    None falls back to NEWS_EXTRACTOR_LOG_LEVEL, then INFO.  Unknown names
    resolve to INFO.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = "news_extractor",
    level: Union[int, str, None] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return a logger instance.

    Calling it again for a configured logger only changes the level of the
    logger and its handlers (CLI --verbose, ArticleExtractor(log_level=...)).

    Args:
        name: Logger name
        level: Level number or name (default: NEWS_EXTRACTOR_LOG_LEVEL, else INFO)
        log_file: Optional file path for logging

    Returns:
        Configured logger instance
    """
    level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Child logger of the package logger, e.g. "news_extractor.fetcher".

    Records propagate to the package handlers; the name tells which stage
    (pipeline, assembler, fetcher...) wrote them.
    """
    return logging.getLogger(f"news_extractor.{module_name}")
