"""Managers implementing AdoptApp's adoption rules."""

from .adoption_request_manager import AdoptionRequestManager
from .adoption_manager import AdoptionManager

__all__ = [
    "AdoptionRequestManager",
    "AdoptionManager",
]
