"""
Pet, city and adoption data models.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class City(BaseModel):
    """City where pets are sheltered, looked up by postal code."""

    city_id: int = Field(..., description="Unique city identifier")
    name: str = Field(..., min_length=1, description="City name")
    zip_code: int = Field(..., ge=0, description="Postal code")

    class Config:
        json_schema_extra = {
            "example": {
                "city_id": 1,
                "name": "Tandil",
                "zip_code": 7000
            }
        }


class PetAttribute(BaseModel):
    """Descriptive tag attached to a pet (e.g. "vaccinated", "neutered")."""

    attribute_id: int = Field(..., description="Unique attribute identifier")
    name: str = Field(..., min_length=1, description="Attribute name")


class Pet(BaseModel):
    """Pet available for adoption."""

    # Identifiers
    pet_id: int = Field(..., description="Unique pet identifier")

    # Basic information
    name: str = Field(..., description="Pet name")
    species: str = Field(..., description="Species, e.g. dog or cat")
    sex: str = Field(..., description="Sex")
    age: int = Field(..., ge=0, description="Age in years")

    # Description
    description: str = Field(default="", description="Detailed description")
    url_img: Optional[str] = Field(default=None, description="Photo URL")
    attributes: List[PetAttribute] = Field(
        default_factory=list,
        description="Attribute tags"
    )

    # Location
    city_id: int = Field(..., description="City the pet belongs to")

    # Availability
    available: bool = Field(default=True, description="Still open for adoption")
    interested: int = Field(
        default=0,
        ge=0,
        description="Number of times the pet was requested"
    )
    adoption_id: Optional[int] = Field(
        default=None,
        description="Completed adoption record, if any"
    )

    # Metadata
    version: int = Field(default=0, ge=0, description="Optimistic concurrency counter")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "pet_id": 42,
                "name": "Luna",
                "species": "dog",
                "sex": "female",
                "age": 3,
                "description": "Calm and friendly, good with kids.",
                "city_id": 1,
                "available": True
            }
        }


class Adoption(BaseModel):
    """Completed match between one pet, one user and one city."""

    adoption_id: Optional[int] = Field(default=None, description="Assigned by the store")
    pet_id: int = Field(..., description="Adopted pet")
    user_id: int = Field(..., description="Adopting user")
    city_id: int = Field(..., description="City where the adoption took place")
    adoption_date: datetime = Field(default_factory=datetime.utcnow)
