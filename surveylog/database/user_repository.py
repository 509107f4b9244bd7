"""Repository for User database operations."""

import logging
import os
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from surveylog.errors import ConflictError, InternalError, NotFoundError
from surveylog.models.constants import DEFAULT_DELETE_POLICY, DeletePolicy
from surveylog.models.factory import create_user_base
from surveylog.models.user import User
from surveylog.database.models import SurveyEventDB, UserDB

logger = logging.getLogger(__name__)


def delete_policy_from_env() -> DeletePolicy:
    """Read the user delete policy from `USER_DELETE_POLICY` (default: cascade).

    Raises:
        ValueError: if the variable names an unknown policy
    """
    raw = os.getenv("USER_DELETE_POLICY", "").strip().lower()
    if not raw:
        return DEFAULT_DELETE_POLICY
    return DeletePolicy(raw)


class UserRepository:
    """Repository for User database operations.

    Deleting a user that still owns survey events follows ``delete_policy``:
    RESTRICT raises ConflictError and leaves everything in place, CASCADE
    removes the events and the user in the same transaction.
    """

    def __init__(self, db: Session, delete_policy: Optional[DeletePolicy] = None):
        self.db = db
        self.delete_policy = DeletePolicy(delete_policy) if delete_policy else delete_policy_from_env()

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None

    def exists(self, user_id: str) -> bool:
        return self.db.query(UserDB.id).filter(UserDB.id == user_id).first() is not None

    def count_events(self, user_id: str) -> int:
        """Number of survey events owned by the user."""
        return int(
            self.db.query(func.count(SurveyEventDB.id))
            .filter(SurveyEventDB.user_id == user_id)
            .scalar()
        )

    def create(self, user: Optional[User] = None) -> User:
        """Persist a new user.

        Args:
            user: Prepared User; a fresh one (new ID, current timestamps) is built if omitted

        Returns:
            Created User object
        """
        user = user or create_user_base()
        try:
            user_db = UserDB.from_pydantic(user)
            self.db.add(user_db)
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Created user {user.id}")
            return user_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create user {user.id}: {type(e).__name__}: {str(e)}")
            raise InternalError(f"Failed to create user: {type(e).__name__}") from e

    def delete(self, user_id: str) -> int:
        """Hard-delete a user according to the delete policy.

        Returns:
            Number of survey events removed along with the user (0 under RESTRICT)

        Raises:
            NotFoundError: if the user does not exist
            ConflictError: if RESTRICT is in effect and the user owns events
            InternalError: on any other storage failure
        """
        user_db = (
            self.db.query(UserDB)
            .filter(UserDB.id == user_id)
            .with_for_update()
            .first()
        )
        if not user_db:
            raise NotFoundError(f"User {user_id} not found")

        event_count = self.count_events(user_id)
        if event_count and self.delete_policy == DeletePolicy.RESTRICT:
            self.db.rollback()
            logger.info(f"Refused to delete user {user_id}: {event_count} survey events depend on it")
            raise ConflictError(
                f"User {user_id} has {event_count} survey events and the delete policy is restrict"
            )

        try:
            removed = 0
            if self.delete_policy == DeletePolicy.CASCADE:
                removed = (
                    self.db.query(SurveyEventDB)
                    .filter(SurveyEventDB.user_id == user_id)
                    .delete(synchronize_session=False)
                )
            self.db.delete(user_db)
            self.db.commit()
            logger.debug(f"Deleted user {user_id} ({removed} survey events removed)")
            return int(removed)
        except IntegrityError as e:
            # An event was recorded for this user after the count above.
            self.db.rollback()
            logger.warning(f"Delete of user {user_id} blocked by foreign key: {str(e)}")
            raise ConflictError(f"User {user_id} has dependent survey events") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {type(e).__name__}: {str(e)}")
            raise InternalError(f"Failed to delete user: {type(e).__name__}") from e
