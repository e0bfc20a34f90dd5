"""
Logging utilities for GymBuddy Backend.

PRIVACY RULES:
- NEVER log Supabase Auth tokens, API keys, or secrets
- NEVER log full profiles (email, bio) or the full prompt sent to Gemini
- Raw Gemini output is only logged truncated, at error level, when parsing fails

Acceptable logging:
- High-level events (e.g., "Calling Gemini API", "Profile saved")
- Counts and decisions (pool size, fallback used, gym matches)
- Error codes and sanitized error messages
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once at process start.

    Args:
        level: Level name such as "INFO" or "DEBUG" (unknown names fall back to INFO)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger for the specified module.

    A stream handler is attached only when nothing has configured the root
    logger yet (e.g. a script importing a module before configure_logging).

    Usage:
        >>> from gymbuddy.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
