"""FastAPI web application for surveylog."""

import logging
from contextlib import asynccontextmanager
from types import MappingProxyType
from typing import Any, Callable, Mapping, NamedTuple, Optional, Tuple
from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from surveylog import __version__
from surveylog.api.schemas import (
    RecordEventRequest,
    SurveyEventListResponse,
    SurveyEventResponse,
    UserResponse,
)
from surveylog.database.database import get_db, init_db
from surveylog.database.survey_event_repository import SurveyEventRepository
from surveylog.database.user_repository import UserRepository
from surveylog.errors import NotFoundError, SurveyLogError
from surveylog.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info(f"surveylog {__version__} started")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="surveylog API",
    description="Users and the survey events they generate",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(SurveyLogError)
async def handle_surveylog_error(request: Request, exc: SurveyLogError) -> JSONResponse:
    """Map domain errors to HTTP responses: 422/404/409 for client errors, 500 otherwise."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


def create_user(db: Session = Depends(get_db)) -> UserResponse:
    """Create a user. No input fields are required."""
    user = UserRepository(db).create()
    logger.info(f"Created user {user.id}")
    return UserResponse(user=user)


def destroy_user(
    user_id: str = Query(..., min_length=1, description="ID of the user to delete"),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a user (hard delete).

    Under the restrict policy a user that still owns survey events is not
    deleted and 409 is returned.
    """
    removed = UserRepository(db).delete(user_id)
    logger.info(f"Deleted user {user_id} ({removed} survey events removed)")
    return Response(status_code=204)


def get_user(user_id: str, db: Session = Depends(get_db)) -> UserResponse:
    user = UserRepository(db).get(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return UserResponse(user=user)


def record_survey_event(
    user_id: str,
    request: RecordEventRequest,
    db: Session = Depends(get_db),
) -> SurveyEventResponse:
    """Record a survey event for a user."""
    event = SurveyEventRepository(db).record(user_id, request.event_type, request.payload)
    logger.info(f"Recorded survey event {event.id} ({event.event_type}) for user {user_id}")
    return SurveyEventResponse(survey_event=event)


def list_survey_events(user_id: str, db: Session = Depends(get_db)) -> SurveyEventListResponse:
    """List a user's survey events, oldest first."""
    events = SurveyEventRepository(db).list_for_user(user_id)
    return SurveyEventListResponse(survey_events=events, count=len(events))


class Route(NamedTuple):
    handler: Callable[..., Any]
    status_code: int = 200
    response_model: Optional[Any] = None


# (method, path) -> handler. Built once at import; read-only afterwards.
ROUTES: Mapping[Tuple[str, str], Route] = MappingProxyType({
    ("GET", "/health"): Route(health),
    ("POST", "/users/create"): Route(create_user, 201, UserResponse),
    ("DELETE", "/users/destroy"): Route(destroy_user, 204),
    ("GET", "/users/{user_id}"): Route(get_user, 200, UserResponse),
    ("POST", "/users/{user_id}/survey_events"): Route(record_survey_event, 201, SurveyEventResponse),
    ("GET", "/users/{user_id}/survey_events"): Route(list_survey_events, 200, SurveyEventListResponse),
})

for (method, path), route in ROUTES.items():
    app.add_api_route(
        path,
        route.handler,
        methods=[method],
        status_code=route.status_code,
        response_model=route.response_model,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
