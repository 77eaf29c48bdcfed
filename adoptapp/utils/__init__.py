"""Utility modules for AdoptApp."""

from .validators import (
    REQUIRED_FIELDS,
    normalize_email,
    normalize_zip_code,
    find_missing_fields,
    find_empty_fields,
    describe_validation_errors,
)
from .helpers import configure_logging, mask_email

__all__ = [
    "REQUIRED_FIELDS",
    "normalize_email",
    "normalize_zip_code",
    "find_missing_fields",
    "find_empty_fields",
    "describe_validation_errors",
    "configure_logging",
    "mask_email",
]
