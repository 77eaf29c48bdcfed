"""
Adoption Manager - Completed Adoptions
Turns a registered interest into a terminal adoption record.
"""

from typing import List

from loguru import logger

from ..errors import AdoptionRequestError, NotFoundError, RuleViolationError
from ..schemas.pet_data import Adoption, Pet
from ..schemas.user_profile import OperationResult
from ..utils.repositories import AdoptionRepository, PetRepository, UserRepository
from ..utils.validators import normalize_email
from .base import BaseManager


class AdoptionManager(BaseManager):
    """Records completed adoptions."""

    def __init__(
        self,
        user_repository: UserRepository,
        pet_repository: PetRepository,
        adoption_repository: AdoptionRepository
    ):
        self.users = user_repository
        self.pets = pet_repository
        self.adoptions = adoption_repository

    def complete_adoption(self, email: str, pet_id: int) -> OperationResult:
        """
        Complete the adoption of a pet the user asked for.

        The pet is claimed first with a version-checked write, so of two
        concurrent adoptions of the same pet only one gets past this point.
        The user (minus the adopted pet) and the adoption record are written
        next; if either write fails the claim is released again. Finally the
        pet is linked to the new adoption record.

        Args:
            email: Adopting user's email
            pet_id: Pet identifier

        Returns:
            OperationResult with the updated user and the adoption

        Raises:
            NotFoundError: If the user or pet does not exist
            ConflictError: If the user never requested the pet, or the pet or
                user was modified concurrently
            RuleViolationError: If the pet was already adopted
        """
        email = normalize_email(email)
        user = self._store("getting user", self.users.find_user_by_email, email, with_interests=True)
        if user is None:
            raise NotFoundError("The user does not exist in the database.", email=email)

        pet = self._store("getting pet", self.pets.find_pet_by_id, pet_id)
        if pet is None:
            raise NotFoundError(f"There is no pet with ID {pet_id}.", pet_id=pet_id)

        if not pet.available or pet.adoption_id is not None:
            logger.warning(f"Adoption rejected: pet {pet_id} is no longer available")
            raise RuleViolationError(
                f"The pet with ID {pet_id} is no longer available.",
                pet_id=pet_id,
                adoption_id=pet.adoption_id,
            )

        user.remove_interest(pet_id)

        pet.available = False
        claimed = self._store("claiming pet", self.pets.save_pet, pet)

        try:
            saved_user = self._store("saving user", self.users.save_user, user)
            adoption = self._store(
                "saving adoption",
                self.adoptions.save_adoption,
                Adoption(pet_id=claimed.pet_id, user_id=saved_user.user_id, city_id=claimed.city_id),
            )
        except AdoptionRequestError:
            self._release_pet(claimed)
            raise

        claimed.adoption_id = adoption.adoption_id
        self._store("saving pet", self.pets.save_pet, claimed)

        logger.info(f"Pet {pet_id} adopted by user {saved_user.user_id} (adoption {adoption.adoption_id})")
        return OperationResult(
            message=f"{saved_user.fullname} adopted {claimed.name}.",
            user=saved_user,
            adoption=adoption,
        )

    def _release_pet(self, pet: Pet) -> None:
        """Make a claimed pet available again after a failed adoption."""
        pet.available = True
        try:
            self._store("releasing pet", self.pets.save_pet, pet)
        except AdoptionRequestError as e:
            logger.error(f"Pet {pet.pet_id} stays claimed after a failed adoption: {e.message}")

    def list_adoptions(self) -> List[Adoption]:
        """Get all completed adoptions."""
        return self._store("getting adoptions", self.adoptions.find_all_adoptions)
