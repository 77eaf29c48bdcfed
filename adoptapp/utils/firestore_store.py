"""
Firestore-backed implementation of the repository contracts.
"""

import hashlib
import uuid
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..config import settings
from ..errors import DuplicateEmailError, StaleWriteError, StoreError
from ..schemas.pet_data import Adoption, City, Pet
from ..schemas.user_profile import User
from .repositories import (
    AdoptionRepository,
    CityRepository,
    PetRepository,
    UserRepository,
)
from .validators import normalize_email


def _new_id() -> int:
    """Random positive 63-bit identifier for new documents."""
    return uuid.uuid4().int >> 65


def _email_key(email: str) -> str:
    """Document id reserving an email (emails are not valid document paths)."""
    return hashlib.sha256(normalize_email(email).encode("utf-8")).hexdigest()


class FirestoreStore(CityRepository, PetRepository, UserRepository, AdoptionRepository):
    """
    Stores cities, pets, users and adoptions in Firestore collections.

    Documents are keyed by the stringified entity id. Users keep their
    interest set as a list of pet ids. Updates of users and pets are
    conditioned on the document's last update time so concurrent writers
    cannot overwrite each other, and every user email is reserved by a
    document in its own collection so two new users cannot share it.
    """

    def __init__(self, client: Any = None, project_id: Optional[str] = None):
        """
        Initialize the store.

        Args:
            client: Existing firestore.Client; created lazily when omitted
            project_id: GCP project, defaults to settings.gcp_project_id
        """
        self.project_id = project_id or settings.gcp_project_id
        self._firestore_client = client

    @property
    def firestore_client(self):
        """Get or create Firestore client."""
        if self._firestore_client is None:
            from google.cloud import firestore

            self._firestore_client = firestore.Client(project=self.project_id)
        return self._firestore_client

    def _collection(self, name: str):
        return self.firestore_client.collection(name)

    def _query_one(self, collection: str, field: str, value: Any) -> Optional[Any]:
        from google.cloud.firestore_v1.base_query import FieldFilter

        query = self._collection(collection).where(
            filter=FieldFilter(field, "==", value)
        ).limit(1)
        for snapshot in query.stream():
            return snapshot
        return None

    # Cities

    def find_city_by_zip_code(self, zip_code: int) -> Optional[City]:
        snapshot = self._query_one(settings.firestore_collection_cities, "zip_code", zip_code)
        return City(**snapshot.to_dict()) if snapshot else None

    # Pets

    def find_pet_by_id(self, pet_id: int) -> Optional[Pet]:
        doc = self._collection(settings.firestore_collection_pets).document(str(pet_id)).get()
        if doc.exists:
            return Pet(**doc.to_dict())
        return None

    def find_pets_by_ids(self, pet_ids: Iterable[int]) -> List[Pet]:
        pet_ids = list(pet_ids)
        if not pet_ids:
            return []

        collection = self._collection(settings.firestore_collection_pets)
        refs = [collection.document(str(pet_id)) for pet_id in pet_ids]
        found = {}
        for doc in self.firestore_client.get_all(refs):
            if doc.exists:
                pet = Pet(**doc.to_dict())
                found[pet.pet_id] = pet
        return [found[pet_id] for pet_id in pet_ids if pet_id in found]

    def save_pet(self, pet: Pet) -> Pet:
        from google.api_core import exceptions as gcp_exceptions

        doc_ref = self._collection(settings.firestore_collection_pets).document(str(pet.pet_id))
        snapshot = doc_ref.get()
        if not snapshot.exists:
            doc_ref.set(pet.model_dump())
            return pet

        stored_version = snapshot.to_dict().get("version", 0)
        if stored_version != pet.version:
            raise StaleWriteError("pet", pet.pet_id, pet.version, stored_version)

        saved = pet.model_copy(update={"version": pet.version + 1}, deep=True)
        option = self.firestore_client.write_option(last_update_time=snapshot.update_time)
        try:
            doc_ref.update(saved.model_dump(), option=option)
        except gcp_exceptions.FailedPrecondition as e:
            raise StaleWriteError("pet", pet.pet_id, pet.version, stored_version + 1) from e

        logger.info(f"Updated pet {saved.pet_id} in Firestore (version {saved.version})")
        return saved

    # Users

    def _to_user(self, data: Dict[str, Any], with_interests: bool) -> User:
        data = dict(data)
        interest_ids = data.pop("interest_ids", [])
        pets = self.find_pets_by_ids(interest_ids) if with_interests else []
        return User(**data, interested_in=pets)

    def find_user_by_email(self, email: str, with_interests: bool = False) -> Optional[User]:
        snapshot = self._query_one(
            settings.firestore_collection_users, "email", normalize_email(email)
        )
        return self._to_user(snapshot.to_dict(), with_interests) if snapshot else None

    def find_user_by_id(self, user_id: int, with_interests: bool = False) -> Optional[User]:
        doc = self._collection(settings.firestore_collection_users).document(str(user_id)).get()
        if doc.exists:
            return self._to_user(doc.to_dict(), with_interests)
        return None

    def find_all_users(self, with_interests: bool = False) -> List[User]:
        return [
            self._to_user(snapshot.to_dict(), with_interests)
            for snapshot in self._collection(settings.firestore_collection_users).stream()
        ]

    def save_user(self, user: User) -> User:
        from google.api_core import exceptions as gcp_exceptions

        collection = self._collection(settings.firestore_collection_users)

        if user.user_id is None:
            saved = user.model_copy(update={"user_id": _new_id(), "version": 1}, deep=True)
            email_ref = self._collection(settings.firestore_collection_user_emails).document(
                _email_key(saved.email)
            )
            try:
                email_ref.create({"email": saved.email, "user_id": saved.user_id})
            except gcp_exceptions.Conflict as e:
                raise DuplicateEmailError(saved.email) from e

            try:
                collection.document(str(saved.user_id)).create(self._user_record(saved))
            except gcp_exceptions.GoogleAPICallError as e:
                email_ref.delete()
                raise StoreError(f"User {saved.user_id} could not be created") from e
            logger.info(f"Created user {saved.user_id} in Firestore")
            return saved

        doc_ref = collection.document(str(user.user_id))
        snapshot = doc_ref.get()
        if not snapshot.exists:
            raise StoreError(f"User {user.user_id} does not exist")

        stored_version = snapshot.to_dict().get("version", 0)
        if stored_version != user.version:
            raise StaleWriteError("user", user.user_id, user.version, stored_version)

        saved = user.model_copy(update={"version": user.version + 1}, deep=True)
        option = self.firestore_client.write_option(last_update_time=snapshot.update_time)
        try:
            doc_ref.update(self._user_record(saved), option=option)
        except gcp_exceptions.FailedPrecondition as e:
            raise StaleWriteError("user", user.user_id, user.version, stored_version + 1) from e

        logger.info(f"Updated user {saved.user_id} in Firestore (version {saved.version})")
        return saved

    @staticmethod
    def _user_record(user: User) -> Dict[str, Any]:
        record = user.model_dump(exclude={"interested_in"})
        record["interest_ids"] = user.interest_ids
        return record

    def remove_user(self, user: User) -> None:
        doc_ref = self._collection(settings.firestore_collection_users).document(str(user.user_id))
        doc_ref.delete()
        self._collection(settings.firestore_collection_user_emails).document(
            _email_key(user.email)
        ).delete()
        logger.info(f"Removed user {user.user_id} from Firestore")

    # Adoptions

    def save_adoption(self, adoption: Adoption) -> Adoption:
        saved = adoption.model_copy(update={"adoption_id": _new_id()})
        doc_ref = self._collection(settings.firestore_collection_adoptions).document(
            str(saved.adoption_id)
        )
        doc_ref.set(saved.model_dump())
        return saved

    def find_all_adoptions(self) -> List[Adoption]:
        return [
            Adoption(**snapshot.to_dict())
            for snapshot in self._collection(settings.firestore_collection_adoptions).stream()
        ]
