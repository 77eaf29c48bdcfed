"""
Service wiring for AdoptApp.
Builds the configured repositories and hands them to the managers.
"""

import json
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from loguru import logger

from .config import Settings, settings as default_settings
from .managers.adoption_manager import AdoptionManager
from .managers.adoption_request_manager import AdoptionRequestManager
from .schemas.pet_data import City, Pet
from .utils.firestore_store import FirestoreStore
from .utils.repositories import (
    InMemoryAdoptionRepository,
    InMemoryCityRepository,
    InMemoryPetRepository,
    InMemoryUserRepository,
)


def load_seed_file(path: Union[str, Path]) -> Tuple[List[City], List[Pet]]:
    """
    Load cities and pets from a JSON seed file.

    The file holds an object with ``cities`` and ``pets`` arrays whose items
    use the model field names.

    Args:
        path: Seed file location

    Returns:
        Tuple of (cities, pets)
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    cities = [City.model_validate(item) for item in data.get("cities", [])]
    pets = [Pet.model_validate(item) for item in data.get("pets", [])]
    logger.info(f"Loaded {len(cities)} cities and {len(pets)} pets from {path}")
    return cities, pets


class AdoptAppServices:
    """Collection of managers sharing one set of repositories."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        cities: Optional[Iterable[City]] = None,
        pets: Optional[Iterable[Pet]] = None
    ):
        """
        Initialize repositories and managers.

        Args:
            config: Settings to use, defaults to the global settings
            cities: Seed cities for the in-memory backend
            pets: Seed pets for the in-memory backend; both default to
                the contents of settings.seed_file when it is set
        """
        self.config = config or default_settings
        backend = self.config.store_backend.lower()

        if backend == "memory":
            if cities is None and pets is None and self.config.seed_file:
                cities, pets = load_seed_file(self.config.seed_file)
            self.city_repository = InMemoryCityRepository(cities)
            self.pet_repository = InMemoryPetRepository(pets)
            self.user_repository = InMemoryUserRepository(self.pet_repository)
            self.adoption_repository = InMemoryAdoptionRepository()
        elif backend == "firestore":
            store = FirestoreStore(project_id=self.config.gcp_project_id)
            self.city_repository = store
            self.pet_repository = store
            self.user_repository = store
            self.adoption_repository = store
        else:
            raise ValueError(f"Unknown store backend: {self.config.store_backend}")

        logger.info(f"Using {backend} store backend")

        self.request_manager = AdoptionRequestManager(
            user_repository=self.user_repository,
            city_repository=self.city_repository,
            pet_repository=self.pet_repository,
            max_interest_requests=self.config.max_interest_requests,
        )
        self.adoption_manager = AdoptionManager(
            user_repository=self.user_repository,
            pet_repository=self.pet_repository,
            adoption_repository=self.adoption_repository,
        )
