"""surveylog: users and their persisted survey events."""

__version__ = "0.1.0"
