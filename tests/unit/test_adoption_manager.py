"""
Unit tests for Adoption Manager.
"""

import pytest

from adoptapp.errors import ConflictError, NotFoundError, RuleViolationError, StaleWriteError


class TestAdoptionManager:
    """Unit tests for completing adoptions."""

    @pytest.fixture
    def registered(self, request_manager, valid_payload):
        """User Ana interested in pets 42 and 7."""
        valid_payload["interestedIn"] = [42, 7]
        return request_manager.submit_interest(valid_payload).user

    def test_complete_adoption(self, adoption_manager, pet_repository, registered):
        """Test that an adoption consumes the interest and the pet."""
        result = adoption_manager.complete_adoption("a@x.com", 42)

        assert result.message == "Ana adopted Luna."
        assert result.user.interest_ids == [7]
        assert result.adoption.pet_id == 42
        assert result.adoption.user_id == registered.user_id
        assert result.adoption.city_id == 1

        pet = pet_repository.find_pet_by_id(42)
        assert pet.available is False
        assert pet.adoption_id == result.adoption.adoption_id

    def test_list_adoptions(self, adoption_manager, registered):
        adoption_manager.complete_adoption("a@x.com", 42)

        adoptions = adoption_manager.list_adoptions()

        assert [adoption.pet_id for adoption in adoptions] == [42]

    def test_unknown_user(self, adoption_manager):
        with pytest.raises(NotFoundError):
            adoption_manager.complete_adoption("nobody@x.com", 42)

    def test_unknown_pet(self, adoption_manager, registered):
        with pytest.raises(NotFoundError):
            adoption_manager.complete_adoption("a@x.com", 999)

    def test_pet_not_requested(self, adoption_manager, adoption_repository, registered):
        """Test that only requested pets can be adopted."""
        with pytest.raises(ConflictError):
            adoption_manager.complete_adoption("a@x.com", 8)

        assert adoption_repository.find_all_adoptions() == []

    def test_pet_already_adopted(self, request_manager, adoption_manager, valid_payload, registered):
        """Test that a pet cannot be adopted twice."""
        other = dict(valid_payload, email="b@x.com", fullname="Bruno", interestedIn=[42])
        request_manager.submit_interest(other)
        adoption_manager.complete_adoption("a@x.com", 42)

        with pytest.raises(RuleViolationError):
            adoption_manager.complete_adoption("b@x.com", 42)

    def test_concurrent_adoptions_of_same_pet(
        self, request_manager, adoption_manager, adoption_repository,
        pet_repository, user_repository, valid_payload, registered, monkeypatch
    ):
        """Test that two adopters holding the same pet snapshot cannot both win."""
        other = dict(valid_payload, email="b@x.com", fullname="Bruno", interestedIn=[42])
        request_manager.submit_interest(other)
        snapshot = pet_repository.find_pet_by_id(42)

        adoption_manager.complete_adoption("a@x.com", 42)
        monkeypatch.setattr(pet_repository, "find_pet_by_id", lambda pet_id: snapshot.model_copy(deep=True))

        with pytest.raises(ConflictError) as exc_info:
            adoption_manager.complete_adoption("b@x.com", 42)

        assert exc_info.value.context == {"pet_id": 42}
        assert [adoption.pet_id for adoption in adoption_repository.find_all_adoptions()] == [42]
        assert user_repository.find_user_by_email("b@x.com", with_interests=True).interest_ids == [42]

        monkeypatch.undo()
        pet = pet_repository.find_pet_by_id(42)
        assert pet.available is False
        assert pet.adoption_id == adoption_repository.find_all_adoptions()[0].adoption_id

    def test_failed_user_write_releases_pet(
        self, adoption_manager, adoption_repository, pet_repository, user_repository,
        registered, monkeypatch
    ):
        """Test that a pet claimed for a failed adoption becomes available again."""
        def stale_save(user):
            raise StaleWriteError("user", user.user_id, user.version, user.version + 1)

        monkeypatch.setattr(user_repository, "save_user", stale_save)

        with pytest.raises(ConflictError):
            adoption_manager.complete_adoption("a@x.com", 42)

        assert pet_repository.find_pet_by_id(42).available is True
        assert adoption_repository.find_all_adoptions() == []

        monkeypatch.undo()
        result = adoption_manager.complete_adoption("a@x.com", 42)
        assert result.adoption.pet_id == 42
