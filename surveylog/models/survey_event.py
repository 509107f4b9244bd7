"""SurveyEvent data model for surveylog."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from surveylog.models.constants import MAX_EVENT_TYPE_LENGTH
from surveylog.models.payload import check_utf8, validate_payload


class SurveyEvent(BaseModel):
    """A timestamped record of something a user did.

    ``event_type`` is an open label rather than an enumeration; ``payload``
    is an arbitrary JSON document stored as-is.
    """

    id: str = Field(..., description="Unique survey event identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this event")
    event_type: str = Field(
        ..., max_length=MAX_EVENT_TYPE_LENGTH, description="Free-form event label, e.g. 'signup'"
    )
    payload: Optional[Any] = Field(None, description="Arbitrary structured event data")
    created_at: datetime = Field(..., description="Event creation timestamp")
    updated_at: datetime = Field(..., description="Event last update timestamp")

    @field_validator("event_type")
    @classmethod
    def _validate_event_type(cls, v):
        if not v or not v.strip():
            raise ValueError("event_type must be a non-empty label")
        check_utf8(v, "event_type")
        return v

    @field_validator("payload")
    @classmethod
    def _validate_payload(cls, v):
        return validate_payload(v)
