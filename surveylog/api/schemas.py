"""Request/response models for the HTTP API."""

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from surveylog.models.survey_event import SurveyEvent
from surveylog.models.user import User


class RecordEventRequest(BaseModel):
    """Request model for recording a survey event.

    Shape checks (non-empty event_type, JSON payload) happen in the storage
    layer so that every caller gets the same rules.
    """
    event_type: str = Field(..., description="Free-form event label, e.g. 'signup'")
    payload: Optional[Any] = Field(None, description="Arbitrary JSON document")


class UserResponse(BaseModel):
    user: User


class SurveyEventResponse(BaseModel):
    survey_event: SurveyEvent


class SurveyEventListResponse(BaseModel):
    """Events for one user, oldest first."""
    survey_events: List[SurveyEvent]
    count: int
