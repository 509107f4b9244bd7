"""Error taxonomy shared by the storage and API layers."""


class SurveyLogError(Exception):
    """Base class for errors surfaced to callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SurveyLogError):
    """Malformed or missing required input."""

    status_code = 422


class NotFoundError(SurveyLogError):
    """Referenced user does not exist."""

    status_code = 404


class ConflictError(SurveyLogError):
    """Deletion blocked by dependent records."""

    status_code = 409


class InternalError(SurveyLogError):
    """Storage fault or constraint violation not otherwise classified."""

    status_code = 500
