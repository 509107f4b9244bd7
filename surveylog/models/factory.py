"""Creation helpers for surveylog models.

Centralizes identifier and timestamp assignment so every new record gets
the same treatment regardless of which caller builds it.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from surveylog.errors import ValidationError
from surveylog.models.survey_event import SurveyEvent
from surveylog.models.user import User


def new_id() -> str:
    """Return a fresh UUID v4 string identifier."""
    return str(uuid.uuid4())


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def create_user_base(now: Optional[datetime] = None) -> User:
    """Build a new User with a freshly assigned identifier."""
    now = now or datetime.utcnow()
    return User(id=new_id(), created_at=now, updated_at=now)


def create_survey_event_base(
    user_id: str,
    event_type: str,
    payload: Any = None,
    created_at: Optional[datetime] = None,
) -> SurveyEvent:
    """Build a new SurveyEvent for ``user_id``.

    Args:
        user_id: Owning user ID (existence is checked by the repository)
        event_type: Free-form, non-empty label
        payload: JSON value tree (dict/list/str/number/bool/None)
        created_at: Creation time; defaults to now (UTC)

    Returns:
        Unsaved SurveyEvent

    Raises:
        ValidationError: if event_type or payload is malformed
    """
    now = created_at or datetime.utcnow()
    try:
        return SurveyEvent(
            id=new_id(),
            user_id=user_id,
            event_type=event_type,
            payload=payload,
            created_at=now,
            updated_at=now,
        )
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e
