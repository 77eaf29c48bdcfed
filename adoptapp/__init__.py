"""
AdoptApp - Pet Adoption Request Manager

This package validates requests to adopt pets, keeps each adopter's capped
interest set consistent, and records completed adoptions.
"""

__version__ = "1.0.0"

from .managers import AdoptionRequestManager, AdoptionManager
from .errors import ErrorKind, AdoptionRequestError

__all__ = [
    "AdoptionRequestManager",
    "AdoptionManager",
    "ErrorKind",
    "AdoptionRequestError",
]
