"""
Helper utilities for AdoptApp.
"""

import sys
from typing import Optional
from loguru import logger

from ..config import settings


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install the stderr log sink.

    Args:
        level: Log level; defaults to DEBUG when settings.debug is set,
            otherwise settings.log_level
    """
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level

    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=level.upper())


def mask_email(email: str) -> str:
    """
    Mask the local part of an email for log output.

    Args:
        email: Email address

    Returns:
        Email with all but the first character of the local part hidden
    """
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"

