"""
Repository contracts consumed by the managers, plus in-memory implementations.

The managers never talk to a database directly: each operation asks a
repository for exactly the relations it needs (``with_interests``) and hands
back a whole aggregate to persist.
"""

import threading
from abc import ABC, abstractmethod
from itertools import count
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..errors import DuplicateEmailError, StaleWriteError, StoreError
from ..schemas.pet_data import Adoption, City, Pet
from ..schemas.user_profile import User
from .validators import normalize_email


class CityRepository(ABC):
    """Read access to cities."""

    @abstractmethod
    def find_city_by_zip_code(self, zip_code: int) -> Optional[City]:
        """Find the city with the given postal code."""


class PetRepository(ABC):
    """Read/write access to pets."""

    @abstractmethod
    def find_pet_by_id(self, pet_id: int) -> Optional[Pet]:
        """Find a single pet."""

    @abstractmethod
    def find_pets_by_ids(self, pet_ids: Iterable[int]) -> List[Pet]:
        """
        Find several pets at once.

        Ids that do not resolve are silently omitted; the remaining pets keep
        the order of ``pet_ids``.
        """

    @abstractmethod
    def save_pet(self, pet: Pet) -> Pet:
        """
        Insert or update a pet.

        Updates of a stored pet succeed only if ``pet.version`` still matches
        the stored version; the returned pet carries the incremented version.

        Raises:
            StaleWriteError: If the pet changed since it was read
        """


class UserRepository(ABC):
    """Read/write access to users."""

    @abstractmethod
    def find_user_by_email(self, email: str, with_interests: bool = False) -> Optional[User]:
        """Find a user by (normalized) email."""

    @abstractmethod
    def find_user_by_id(self, user_id: int, with_interests: bool = False) -> Optional[User]:
        """Find a user by id."""

    @abstractmethod
    def find_all_users(self, with_interests: bool = False) -> List[User]:
        """Return every user."""

    @abstractmethod
    def save_user(self, user: User) -> User:
        """
        Insert or update a user.

        Updates succeed only if ``user.version`` still matches the stored
        version; the returned user carries the incremented version.

        Raises:
            StaleWriteError: If the user changed since it was read
            DuplicateEmailError: If a new user reuses a stored email
        """

    @abstractmethod
    def remove_user(self, user: User) -> None:
        """Delete a user and its interest associations."""


class AdoptionRepository(ABC):
    """Read/write access to completed adoptions."""

    @abstractmethod
    def save_adoption(self, adoption: Adoption) -> Adoption:
        """Insert an adoption record."""

    @abstractmethod
    def find_all_adoptions(self) -> List[Adoption]:
        """Return every adoption record."""


class InMemoryCityRepository(CityRepository):
    """City store backed by a dictionary keyed by postal code."""

    def __init__(self, cities: Optional[Iterable[City]] = None):
        self._cities: Dict[int, City] = {}
        for city in cities or []:
            self.add_city(city)

    def add_city(self, city: City) -> City:
        self._cities[city.zip_code] = city.model_copy(deep=True)
        return city

    def find_city_by_zip_code(self, zip_code: int) -> Optional[City]:
        city = self._cities.get(zip_code)
        return city.model_copy(deep=True) if city else None


class InMemoryPetRepository(PetRepository):
    """Pet store backed by a dictionary keyed by pet id."""

    def __init__(self, pets: Optional[Iterable[Pet]] = None):
        self._lock = threading.Lock()
        self._pets: Dict[int, Pet] = {}
        for pet in pets or []:
            self._pets[pet.pet_id] = pet.model_copy(deep=True)

    def find_pet_by_id(self, pet_id: int) -> Optional[Pet]:
        with self._lock:
            pet = self._pets.get(pet_id)
            return pet.model_copy(deep=True) if pet else None

    def find_pets_by_ids(self, pet_ids: Iterable[int]) -> List[Pet]:
        with self._lock:
            return [
                self._pets[pet_id].model_copy(deep=True)
                for pet_id in pet_ids
                if pet_id in self._pets
            ]

    def save_pet(self, pet: Pet) -> Pet:
        with self._lock:
            stored = self._pets.get(pet.pet_id)
            if stored is None:
                saved = pet.model_copy(deep=True)
            else:
                if stored.version != pet.version:
                    raise StaleWriteError("pet", pet.pet_id, pet.version, stored.version)
                saved = pet.model_copy(update={"version": pet.version + 1}, deep=True)
            self._pets[pet.pet_id] = saved

        logger.debug(f"Saved pet {pet.pet_id} (version {saved.version})")
        return saved.model_copy(deep=True)


class InMemoryUserRepository(UserRepository):
    """
    User store backed by a dictionary keyed by user id.

    Interest sets are stored as pet ids and resolved through the pet
    repository when a caller asks for them.
    """

    def __init__(self, pet_repository: PetRepository):
        self._lock = threading.Lock()
        self._pet_repository = pet_repository
        self._records: Dict[int, Dict[str, Any]] = {}
        self._ids = count(1)

    def _to_user(self, record: Dict[str, Any], with_interests: bool) -> User:
        data = dict(record)
        interest_ids = data.pop("interest_ids")
        pets = self._pet_repository.find_pets_by_ids(interest_ids) if with_interests else []
        return User(**data, interested_in=pets)

    def _find_record_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        email = normalize_email(email)
        for record in self._records.values():
            if record["email"] == email:
                return record
        return None

    def find_user_by_email(self, email: str, with_interests: bool = False) -> Optional[User]:
        with self._lock:
            record = self._find_record_by_email(email)
        return self._to_user(record, with_interests) if record else None

    def find_user_by_id(self, user_id: int, with_interests: bool = False) -> Optional[User]:
        with self._lock:
            record = self._records.get(user_id)
        return self._to_user(record, with_interests) if record else None

    def find_all_users(self, with_interests: bool = False) -> List[User]:
        with self._lock:
            records = list(self._records.values())
        return [self._to_user(record, with_interests) for record in records]

    def save_user(self, user: User) -> User:
        with self._lock:
            if user.user_id is None:
                if self._find_record_by_email(user.email):
                    raise DuplicateEmailError(user.email)
                user_id = next(self._ids)
                version = 1
            else:
                user_id = user.user_id
                stored = self._records.get(user_id)
                if stored is None:
                    raise StoreError(f"User {user_id} does not exist")
                if stored["version"] != user.version:
                    raise StaleWriteError("user", user_id, user.version, stored["version"])
                version = user.version + 1

            saved = user.model_copy(update={"user_id": user_id, "version": version}, deep=True)
            record = saved.model_dump(exclude={"interested_in"})
            record["interest_ids"] = saved.interest_ids
            self._records[user_id] = record

        logger.debug(f"Saved user {user_id} (version {version})")
        return saved

    def remove_user(self, user: User) -> None:
        with self._lock:
            if self._records.pop(user.user_id, None) is None:
                raise StoreError(f"User {user.user_id} does not exist")


class InMemoryAdoptionRepository(AdoptionRepository):
    """Adoption store backed by a list."""

    def __init__(self):
        self._lock = threading.Lock()
        self._adoptions: List[Adoption] = []
        self._ids = count(1)

    def save_adoption(self, adoption: Adoption) -> Adoption:
        with self._lock:
            saved = adoption.model_copy(update={"adoption_id": next(self._ids)})
            self._adoptions.append(saved)
        return saved

    def find_all_adoptions(self) -> List[Adoption]:
        with self._lock:
            return list(self._adoptions)
