"""Exception types raised by the location services."""
from typing import List, Optional


class LocationError(Exception):
    """Base class for all location service errors."""


class ValidationError(LocationError):
    """Malformed or too-short input, or a failed membership check."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.suggestions = suggestions or []


class UnsafeInputError(ValidationError):
    """Input matched a blocked or injection pattern."""


class RateLimitError(LocationError):
    """Client exceeded its request budget for the current window."""

    def __init__(self, client_id: str, max_requests: int, window_ms: int):
        super().__init__("Rate limit exceeded")
        self.client_id = client_id
        self.max_requests = max_requests
        self.window_ms = window_ms


class FormatError(LocationError):
    """Source data could not be turned into location records."""


class NotInitializedError(LocationError):
    """A query was made before the dataset was loaded."""
