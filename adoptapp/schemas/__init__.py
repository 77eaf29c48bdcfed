"""Data schemas and models for AdoptApp."""

from .pet_data import City, Pet, PetAttribute, Adoption
from .user_profile import AdoptionRequest, User, OperationResult

__all__ = [
    "City",
    "Pet",
    "PetAttribute",
    "Adoption",
    "AdoptionRequest",
    "User",
    "OperationResult",
]
