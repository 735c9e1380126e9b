"""Error taxonomy for swipe triage."""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error codes reported in swipe results."""

    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFound"
    ALREADY_PROCESSED = "AlreadyProcessed"
    INVALID_PHOTO = "InvalidPhoto"
    REPOSITORY = "RepositoryError"


class TriageError(Exception):
    """Base exception for expected business failures."""

    code: ErrorCode = ErrorCode.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SwipeValidationError(TriageError):
    """Raised when a swipe command is malformed."""

    code = ErrorCode.VALIDATION


class PhotoNotFoundError(TriageError):
    """Raised when a photo id is unknown."""

    code = ErrorCode.NOT_FOUND


class AlreadyProcessedError(TriageError):
    """Raised when a photo has already left the pending state."""

    code = ErrorCode.ALREADY_PROCESSED


class InvalidPhotoError(TriageError):
    """Raised when a photo record violates its construction invariants."""

    code = ErrorCode.INVALID_PHOTO


class RepositoryError(TriageError):
    """Raised when a storage collaborator fails."""

    code = ErrorCode.REPOSITORY
