"""Tests for UserRepository create/get/delete and the delete policies."""

import pytest

from surveylog.database.models import SurveyEventDB, UserDB
from surveylog.database.user_repository import UserRepository, delete_policy_from_env
from surveylog.errors import ConflictError, NotFoundError
from surveylog.models.constants import DeletePolicy


class TestUserRepository:
    """Test UserRepository basic operations."""

    def test_create_user_assigns_id_and_timestamps(self, user_repository):
        user = user_repository.create()

        assert user.id
        assert user.created_at is not None
        assert user.updated_at == user.created_at

    def test_created_user_ids_are_unique(self, user_repository):
        ids = [user_repository.create().id for _ in range(50)]
        assert len(set(ids)) == 50

    def test_get_user(self, user_repository, test_user):
        retrieved = user_repository.get(test_user.id)

        assert retrieved is not None
        assert retrieved.id == test_user.id

    def test_get_nonexistent_user(self, user_repository):
        assert user_repository.get("nonexistent-id") is None
        assert user_repository.exists("nonexistent-id") is False

    def test_delete_user_without_events(self, user_repository, test_user):
        removed = user_repository.delete(test_user.id)

        assert removed == 0
        assert user_repository.get(test_user.id) is None

    def test_delete_nonexistent_user_raises_not_found(self, user_repository):
        with pytest.raises(NotFoundError, match="not found"):
            user_repository.delete("nonexistent-id")


class TestDeletePolicy:
    """Deleting a user that owns survey events."""

    def _record_two(self, event_repository, user_id):
        event_repository.record(user_id, "signup", {"plan": "free"})
        event_repository.record(user_id, "answer", {"q": 1})

    def test_cascade_removes_user_and_events(self, user_repository, event_repository, test_user, db_session):
        self._record_two(event_repository, test_user.id)

        removed = user_repository.delete(test_user.id)

        assert removed == 2
        assert user_repository.get(test_user.id) is None
        assert db_session.query(SurveyEventDB).filter(SurveyEventDB.user_id == test_user.id).count() == 0

    def test_cascade_leaves_other_users_events(self, user_repository, event_repository, test_user):
        other = user_repository.create()
        event_repository.record(other.id, "signup", None)
        self._record_two(event_repository, test_user.id)

        user_repository.delete(test_user.id)

        assert len(event_repository.list_for_user(other.id)) == 1

    def test_restrict_refuses_and_changes_nothing(self, restrict_user_repository, event_repository, test_user):
        self._record_two(event_repository, test_user.id)

        with pytest.raises(ConflictError, match="2 survey events"):
            restrict_user_repository.delete(test_user.id)

        assert restrict_user_repository.get(test_user.id) is not None
        assert restrict_user_repository.count_events(test_user.id) == 2

    def test_restrict_allows_user_without_events(self, restrict_user_repository):
        user = restrict_user_repository.create()

        assert restrict_user_repository.delete(user.id) == 0
        assert restrict_user_repository.get(user.id) is None

    def test_foreign_key_blocks_raw_user_delete(self, event_repository, test_user, db_session):
        """The store itself never cascades; only the repository does."""
        from sqlalchemy.exc import IntegrityError

        event_repository.record(test_user.id, "signup", {})
        user_db = db_session.query(UserDB).filter(UserDB.id == test_user.id).first()
        db_session.delete(user_db)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestDeletePolicyFromEnv:
    def test_default_is_cascade(self, monkeypatch):
        monkeypatch.delenv("USER_DELETE_POLICY", raising=False)
        assert delete_policy_from_env() == DeletePolicy.CASCADE

    def test_restrict_from_env(self, monkeypatch, db_session):
        monkeypatch.setenv("USER_DELETE_POLICY", " Restrict ")
        assert delete_policy_from_env() == DeletePolicy.RESTRICT
        assert UserRepository(db_session).delete_policy == DeletePolicy.RESTRICT

    def test_explicit_policy_wins_over_env(self, monkeypatch, db_session):
        monkeypatch.setenv("USER_DELETE_POLICY", "restrict")
        repo = UserRepository(db_session, delete_policy=DeletePolicy.CASCADE)
        assert repo.delete_policy == DeletePolicy.CASCADE

    def test_unknown_policy_raises(self, monkeypatch):
        monkeypatch.setenv("USER_DELETE_POLICY", "orphan")
        with pytest.raises(ValueError):
            delete_policy_from_env()
