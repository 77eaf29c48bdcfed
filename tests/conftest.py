"""
Shared fixtures for AdoptApp tests.
"""

import pytest

from adoptapp.managers.adoption_manager import AdoptionManager
from adoptapp.managers.adoption_request_manager import AdoptionRequestManager
from adoptapp.schemas.pet_data import City, Pet, PetAttribute
from adoptapp.utils.repositories import (
    InMemoryAdoptionRepository,
    InMemoryCityRepository,
    InMemoryPetRepository,
    InMemoryUserRepository,
)


@pytest.fixture
def sample_city():
    """City with postal code 1000."""
    return City(city_id=1, name="Tandil", zip_code=1000)


@pytest.fixture
def sample_pets():
    """Four adoptable pets in the sample city."""
    return [
        Pet(
            pet_id=42,
            name="Luna",
            species="dog",
            sex="female",
            age=3,
            city_id=1,
            attributes=[PetAttribute(attribute_id=1, name="vaccinated")],
        ),
        Pet(pet_id=7, name="Simba", species="cat", sex="male", age=2, city_id=1),
        Pet(pet_id=8, name="Rocky", species="dog", sex="male", age=5, city_id=1),
        Pet(pet_id=9, name="Nala", species="cat", sex="female", age=1, city_id=1),
    ]


@pytest.fixture
def city_repository(sample_city):
    return InMemoryCityRepository([sample_city])


@pytest.fixture
def pet_repository(sample_pets):
    return InMemoryPetRepository(sample_pets)


@pytest.fixture
def user_repository(pet_repository):
    return InMemoryUserRepository(pet_repository)


@pytest.fixture
def adoption_repository():
    return InMemoryAdoptionRepository()


@pytest.fixture
def request_manager(user_repository, city_repository, pet_repository):
    """AdoptionRequestManager over in-memory stores with a cap of two."""
    return AdoptionRequestManager(
        user_repository=user_repository,
        city_repository=city_repository,
        pet_repository=pet_repository,
        max_interest_requests=2,
    )


@pytest.fixture
def adoption_manager(user_repository, pet_repository, adoption_repository):
    return AdoptionManager(
        user_repository=user_repository,
        pet_repository=pet_repository,
        adoption_repository=adoption_repository,
    )


@pytest.fixture
def valid_payload():
    """Adoption request for pet 42 from a first-time adopter."""
    return {
        "fullname": "Ana",
        "age": 30,
        "email": "a@x.com",
        "phoneNumber": "555",
        "address": "Main st",
        "zipCode": 1000,
        "hasPet": False,
        "livingPlace": "house",
        "interestedIn": [42],
    }
