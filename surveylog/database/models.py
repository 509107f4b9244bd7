"""SQLAlchemy database models for surveylog."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey

from surveylog.database.database import Base
from surveylog.models.constants import MAX_EVENT_TYPE_LENGTH


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from surveylog.models.user import User
        return User(
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, user):
        """Create database model from Pydantic model."""
        return cls(
            id=user.id,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class SurveyEventDB(Base):
    """Database model for SurveyEvent."""

    __tablename__ = "survey_events"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # User association. RESTRICT: a user with events cannot be deleted out
    # from under them; the repository decides whether to remove events first.
    user_id = Column(String, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    event_type = Column(String(MAX_EVENT_TYPE_LENGTH), nullable=True)
    payload = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from surveylog.models.survey_event import SurveyEvent
        # Rows are validated on the way in; event_type may still be NULL for
        # rows written outside the repository, so skip re-validation here.
        return SurveyEvent.model_construct(
            id=self.id,
            user_id=self.user_id,
            event_type=self.event_type,
            payload=self.payload,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, event):
        """Create database model from Pydantic model."""
        return cls(
            id=event.id,
            user_id=event.user_id,
            event_type=event.event_type,
            payload=event.payload,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )
