from __future__ import annotations


class StudyTrackError(Exception):
    """Base class for rejected study tracker operations."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StudyTrackError, LookupError):
    kind = "not_found"


class InvalidArgument(StudyTrackError, ValueError):
    kind = "invalid_argument"
