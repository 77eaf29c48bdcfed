"""
Adopter profile, adoption request payload and operation result models.
"""

from datetime import datetime
from typing import Any, Optional, List

from pydantic import BaseModel, Field, EmailStr, field_validator

from ..errors import ConflictError, RuleViolationError
from ..utils.validators import normalize_email, normalize_zip_code
from .pet_data import Adoption, Pet


class AdoptionRequest(BaseModel):
    """Payload submitted to register interest in adopting pets."""

    fullname: str = Field(..., min_length=1, description="Full name")
    age: int = Field(..., ge=0, description="Age in years")
    email: EmailStr = Field(..., description="Email address")
    phone_number: str = Field(..., alias="phoneNumber", description="Phone number")
    address: str = Field(..., description="Street address")
    zip_code: int = Field(..., alias="zipCode", description="Postal code of the user's city")
    has_pet: bool = Field(..., alias="hasPet", description="Already owns a pet")
    living_place: str = Field(..., alias="livingPlace", description="Type of home")
    interested_in: List[int] = Field(
        ...,
        alias="interestedIn",
        description="Requested pet ids; the first one is the anchor"
    )

    @field_validator("fullname", "phone_number", "address", "living_place")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip surrounding whitespace from free-text fields."""
        return v.strip()

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        """Emails are stored and matched in lowercase."""
        return normalize_email(v)

    @field_validator("zip_code", mode="before")
    @classmethod
    def coerce_zip_code(cls, v: Any) -> int:
        """Accept numeric strings as postal codes."""
        return normalize_zip_code(v)

    @property
    def anchor_pet_id(self) -> Optional[int]:
        """First requested pet id, if any."""
        return self.interested_in[0] if self.interested_in else None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "fullname": "Ana Pérez",
                "age": 30,
                "email": "a@x.com",
                "phoneNumber": "555",
                "address": "Main st",
                "zipCode": 1000,
                "hasPet": False,
                "livingPlace": "house",
                "interestedIn": [42]
            }
        }


class User(BaseModel):
    """Adopter with the set of pets they asked to adopt."""

    user_id: Optional[int] = Field(default=None, description="Assigned by the store")

    # Personal information
    fullname: str = Field(..., min_length=1, description="Full name")
    age: int = Field(..., ge=0, description="Age in years")
    email: str = Field(..., description="Lowercase email address, unique")
    phone_number: str = Field(..., description="Phone number")

    # Location
    address: str = Field(..., description="Street address")
    zip_code: int = Field(..., description="Postal code")
    city_id: Optional[int] = Field(default=None, description="Resolved city")

    # Home
    has_pet: bool = Field(default=False, description="Already owns a pet")
    living_place: str = Field(..., description="Type of home")

    # Interest set
    interested_in: List[Pet] = Field(
        default_factory=list,
        description="Pets the user requested to adopt"
    )

    # Optimistic concurrency counter, bumped by the store on each save
    version: int = Field(default=0, ge=0)

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("interested_in")
    @classmethod
    def unique_interests(cls, v: List[Pet]) -> List[Pet]:
        """Each pet may appear only once in the interest set."""
        ids = [pet.pet_id for pet in v]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate pets in interest set: {ids}")
        return v

    @property
    def interest_ids(self) -> List[int]:
        """Ids of the pets in the interest set."""
        return [pet.pet_id for pet in self.interested_in]

    def has_interest(self, pet_id: int) -> bool:
        """Check whether the user already requested the pet."""
        return pet_id in self.interest_ids

    def add_interest(self, pet: Pet, limit: int) -> None:
        """
        Add a pet to the interest set.

        Args:
            pet: Pet to add
            limit: Maximum size of the interest set after the update

        Raises:
            RuleViolationError: If the set is full or already holds the pet
        """
        if len(self.interested_in) >= limit:
            raise RuleViolationError(
                "Maximum adoption requests reached.",
                email=self.email,
                pet_id=pet.pet_id,
                limit=limit,
                current=self.interest_ids,
            )

        if self.has_interest(pet.pet_id):
            raise RuleViolationError(
                "You are already registered to adopt this pet.",
                email=self.email,
                pet_id=pet.pet_id,
            )

        self.interested_in = self.interested_in + [pet]
        self.updated_at = datetime.utcnow()

    def remove_interest(self, pet_id: int) -> Pet:
        """
        Remove a pet from the interest set.

        Args:
            pet_id: Pet identifier

        Returns:
            The removed pet

        Raises:
            ConflictError: If the pet is not in the interest set
        """
        if not self.has_interest(pet_id):
            raise ConflictError(
                f"The user {self.fullname} does not have a registered pet with ID {pet_id}.",
                email=self.email,
                pet_id=pet_id,
            )

        removed = next(pet for pet in self.interested_in if pet.pet_id == pet_id)
        self.interested_in = [pet for pet in self.interested_in if pet.pet_id != pet_id]
        self.updated_at = datetime.utcnow()
        return removed

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 1,
                "fullname": "Ana Pérez",
                "age": 30,
                "email": "a@x.com",
                "phone_number": "555",
                "address": "Main st",
                "zip_code": 1000,
                "city_id": 1,
                "has_pet": False,
                "living_place": "house",
                "interested_in": []
            }
        }


class OperationResult(BaseModel):
    """Outcome of a successful manager operation."""

    message: str = Field(..., description="Human-readable confirmation")
    user: Optional[User] = Field(default=None, description="Affected user")
    adoption: Optional[Adoption] = Field(default=None, description="Created adoption")
