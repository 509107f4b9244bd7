"""Data models for surveylog."""

from surveylog.models.user import User
from surveylog.models.survey_event import SurveyEvent
from surveylog.models.constants import DeletePolicy

__all__ = [
    "User",
    "SurveyEvent",
    "DeletePolicy",
]
