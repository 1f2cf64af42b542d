"""Domain exceptions, raised by the pure core, mapped to HTTP status codes by the API layer."""
from __future__ import annotations


class TrackboardError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(TrackboardError):
    """A required input is missing or malformed."""

    status_code = 400


class InvalidIndex(TrackboardError):
    """A step/topic/problem index is not a non-negative integer."""

    status_code = 400


class NotFound(TrackboardError):
    status_code = 404
