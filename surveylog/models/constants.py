"""Constants for surveylog."""

from enum import Enum


class DeletePolicy(str, Enum):
    """What deleting a user does to the user's survey events."""
    RESTRICT = "restrict"  # refuse while events exist
    CASCADE = "cascade"  # delete events together with the user


DEFAULT_DELETE_POLICY = DeletePolicy.CASCADE

# Upper bound on stored event_type labels (matches the column length)
MAX_EVENT_TYPE_LENGTH = 255

# Deepest array/object nesting accepted in a payload; the response
# serializer gives up well before Python's recursion limit.
MAX_PAYLOAD_DEPTH = 64
