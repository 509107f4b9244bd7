"""Repository for SurveyEvent database operations."""

import logging
from datetime import datetime
from typing import Any, List, Optional
from sqlalchemy import asc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from surveylog.errors import InternalError, NotFoundError
from surveylog.models.factory import create_survey_event_base
from surveylog.models.survey_event import SurveyEvent
from surveylog.database.models import SurveyEventDB, UserDB

logger = logging.getLogger(__name__)


class SurveyEventRepository:
    """Repository for SurveyEvent database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _require_user(self, user_id: str) -> None:
        if self.db.query(UserDB.id).filter(UserDB.id == user_id).first() is None:
            raise NotFoundError(f"User {user_id} not found")

    def create(self, event: SurveyEvent) -> SurveyEvent:
        """Persist a prepared survey event.

        Raises:
            NotFoundError: if the owning user does not exist (nothing is written)
            InternalError: on any other storage failure
        """
        self._require_user(event.user_id)
        return self._insert(event)

    def _insert(self, event: SurveyEvent) -> SurveyEvent:
        try:
            event_db = SurveyEventDB.from_pydantic(event)
            self.db.add(event_db)
            self.db.commit()
            self.db.refresh(event_db)
            logger.debug(f"Created survey event {event.id} ({event.event_type}) for user {event.user_id}")
            return event_db.to_pydantic()
        except IntegrityError as e:
            # Owner deleted between the existence check and the insert.
            self.db.rollback()
            logger.warning(f"Survey event {event.id} rejected by foreign key: {str(e)}")
            raise NotFoundError(f"User {event.user_id} not found") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create survey event {event.id}: {type(e).__name__}: {str(e)}")
            raise InternalError(f"Failed to record survey event: {type(e).__name__}") from e

    def record(
        self,
        user_id: str,
        event_type: str,
        payload: Any = None,
        created_at: Optional[datetime] = None,
    ) -> SurveyEvent:
        """Record a new survey event for a user.

        Raises:
            NotFoundError: if the user does not exist
            ValidationError: if event_type is blank or payload is not a JSON value tree
        """
        self._require_user(user_id)
        event = create_survey_event_base(user_id, event_type, payload, created_at=created_at)
        return self._insert(event)

    def get(self, event_id: str) -> Optional[SurveyEvent]:
        """Get survey event by ID."""
        event_db = self.db.query(SurveyEventDB).filter(SurveyEventDB.id == event_id).first()
        return event_db.to_pydantic() if event_db else None

    def list_for_user(self, user_id: str) -> List[SurveyEvent]:
        """Get all survey events for a user sorted by creation date (oldest first).

        Raises:
            NotFoundError: if the user does not exist
        """
        self._require_user(user_id)
        events_db = (
            self.db.query(SurveyEventDB)
            .filter(SurveyEventDB.user_id == user_id)
            .order_by(asc(SurveyEventDB.created_at))
            .all()
        )
        return [event_db.to_pydantic() for event_db in events_db]
