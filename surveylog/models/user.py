"""User data model for surveylog."""

from datetime import datetime
from pydantic import BaseModel, Field


class User(BaseModel):
    """User model for surveylog."""

    id: str = Field(..., description="Unique user identifier (UUID v4)")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")
