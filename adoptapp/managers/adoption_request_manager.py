"""
Adoption Request Manager - Interest Registration
Validates adoption requests and maintains each user's interest set.
"""

from typing import Any, List, Mapping, Optional, Union

from loguru import logger
from pydantic import ValidationError

from ..config import settings
from ..errors import (
    MalformedRequestError,
    NotFoundError,
    RuleViolationError,
)
from ..schemas.pet_data import City, Pet
from ..schemas.user_profile import AdoptionRequest, OperationResult, User
from ..utils.helpers import mask_email
from ..utils.repositories import CityRepository, PetRepository, UserRepository
from ..utils.validators import (
    REQUIRED_FIELDS,
    dedupe_ids,
    describe_validation_errors,
    find_empty_fields,
    find_missing_fields,
    normalize_email,
)
from .base import BaseManager


class AdoptionRequestManager(BaseManager):
    """
    Registers and withdraws a user's interest in adopting pets.

    Each operation is a sequence of validation gates followed by a single
    user write. Any failing gate raises before anything is persisted.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        city_repository: CityRepository,
        pet_repository: PetRepository,
        max_interest_requests: Optional[int] = None
    ):
        """
        Initialize the manager.

        Args:
            user_repository: User store
            city_repository: City store
            pet_repository: Pet store
            max_interest_requests: Interest set cap, defaults to settings
        """
        self.users = user_repository
        self.cities = city_repository
        self.pets = pet_repository
        if max_interest_requests is None:
            max_interest_requests = settings.max_interest_requests
        self.max_interest_requests = max_interest_requests

    def submit_interest(
        self,
        payload: Union[AdoptionRequest, Mapping[str, Any]]
    ) -> OperationResult:
        """
        Register interest in adopting a pet.

        A first-time email creates the user with every requested pet; an
        existing user gets the anchor pet added to their interest set.

        Args:
            payload: Request using the wire field names (fullname, zipCode, interestedIn, ...)

        Returns:
            OperationResult with the created or updated user

        Raises:
            MalformedRequestError: Missing, empty or ill-typed fields, or no pets requested
            NotFoundError: Unknown postal code or anchor pet
            RuleViolationError: Quota exceeded or pet already requested
        """
        request = self._parse_request(payload)

        city = self._store("looking up city", self.cities.find_city_by_zip_code, request.zip_code)
        if city is None:
            logger.warning(f"Adoption request rejected: unknown zip code {request.zip_code}")
            raise NotFoundError(
                f"There is no city with zip code {request.zip_code}.",
                zip_code=request.zip_code,
            )

        if not request.interested_in:
            raise MalformedRequestError("No pet information requested.", email=request.email)

        anchor_id = request.anchor_pet_id
        pet = self._store("looking up pet", self.pets.find_pet_by_id, anchor_id)
        if pet is None:
            logger.warning(f"Adoption request rejected: unknown pet {anchor_id}")
            raise NotFoundError(f"There is no pet with ID {anchor_id}.", pet_id=anchor_id)

        user = self._store(
            "looking up user",
            self.users.find_user_by_email,
            request.email,
            with_interests=True,
        )

        if user is None:
            return self._create_user(request, city)

        return self._add_interest(user, pet, request)

    def _parse_request(
        self,
        payload: Union[AdoptionRequest, Mapping[str, Any]]
    ) -> AdoptionRequest:
        """Run the shape gates and build a typed request."""
        if isinstance(payload, AdoptionRequest):
            data: Mapping[str, Any] = payload.model_dump(by_alias=True)
        else:
            data = payload

        if not isinstance(data, Mapping):
            raise MalformedRequestError("Request body must be an object.")

        missing = find_missing_fields(data)
        if missing:
            raise MalformedRequestError(
                "Required fields missing: " + ", ".join(REQUIRED_FIELDS) + ".",
                missing=missing,
            )

        empty = find_empty_fields(data)
        if empty:
            raise MalformedRequestError("Empty fields are not accepted.", empty=empty)

        try:
            return AdoptionRequest.model_validate(data)
        except ValidationError as e:
            problems = describe_validation_errors(e.errors())
            logger.warning(f"Adoption request failed validation: {problems}")
            raise MalformedRequestError(
                "Invalid request: " + "; ".join(problems),
                errors=problems,
            ) from e

    def _create_user(self, request: AdoptionRequest, city: City) -> OperationResult:
        """Create a first-time user with every requested pet that exists."""
        pet_ids = dedupe_ids(request.interested_in)
        pets: List[Pet] = self._store("looking up pets", self.pets.find_pets_by_ids, pet_ids)

        if len(pets) > self.max_interest_requests:
            logger.warning(f"Adoption request rejected: {len(pets)} pets requested at once")
            raise RuleViolationError(
                "Maximum adoption requests reached.",
                email=request.email,
                limit=self.max_interest_requests,
                requested=[pet.pet_id for pet in pets],
            )

        user = User(
            fullname=request.fullname,
            age=request.age,
            email=request.email,
            phone_number=request.phone_number,
            address=request.address,
            zip_code=request.zip_code,
            city_id=city.city_id,
            has_pet=request.has_pet,
            living_place=request.living_place,
            interested_in=pets,
        )

        saved = self._store("saving user", self.users.save_user, user)

        logger.info(
            f"Created user {saved.user_id} ({mask_email(saved.email)}) "
            f"interested in pets {saved.interest_ids}"
        )
        return OperationResult(message=f"User {saved.fullname} was added.", user=saved)

    def _add_interest(self, user: User, pet: Pet, request: AdoptionRequest) -> OperationResult:
        """Add the anchor pet to an existing user's interest set."""
        try:
            user.add_interest(pet, self.max_interest_requests)
        except RuleViolationError as e:
            logger.warning(f"Adoption request rejected for user {user.user_id}: {e.message}")
            raise

        saved = self._store("saving user", self.users.save_user, user)

        logger.info(f"User {saved.user_id} now interested in pets {saved.interest_ids}")
        return OperationResult(message=f"User {request.fullname} was updated.", user=saved)

    def list_users(self) -> List[User]:
        """
        Get all users with their interest sets.

        Raises:
            InternalError: If the store fails
        """
        return self._store("getting users", self.users.find_all_users, with_interests=True)

    def get_user(self, user_id: int) -> User:
        """
        Get one user with their interest set.

        Raises:
            NotFoundError: If no user has this id
        """
        user = self._store("getting user", self.users.find_user_by_id, user_id, with_interests=True)
        if user is None:
            raise NotFoundError(f"There is no user with ID {user_id}.", user_id=user_id)
        return user

    def delete_user(self, email: str) -> OperationResult:
        """
        Delete a user and their interest set.

        Pets and adoption records are left untouched.

        Raises:
            NotFoundError: If no user has this email
        """
        email = normalize_email(email)
        user = self._store("getting user", self.users.find_user_by_email, email)
        if user is None:
            raise NotFoundError("The user does not exist in the database.", email=email)

        self._store("deleting user", self.users.remove_user, user)

        logger.info(f"Deleted user {user.user_id} ({mask_email(email)})")
        return OperationResult(message=f"{user.fullname} was deleted from database.", user=user)

    def withdraw_interest(self, email: str, pet_id: int) -> OperationResult:
        """
        Remove one pet from a user's interest set.

        Args:
            email: User email
            pet_id: Pet to withdraw

        Returns:
            OperationResult with the updated user

        Raises:
            NotFoundError: If no user has this email
            ConflictError: If the pet was never requested by the user
        """
        email = normalize_email(email)
        user = self._store("getting user", self.users.find_user_by_email, email, with_interests=True)
        if user is None:
            raise NotFoundError("The user does not exist in the database.", email=email)

        user.remove_interest(pet_id)
        saved = self._store("saving user", self.users.save_user, user)

        logger.info(f"Pet {pet_id} withdrawn from user {saved.user_id}")
        return OperationResult(
            message=f"The pet with id {pet_id} was removed from user {saved.fullname}.",
            user=saved,
        )

