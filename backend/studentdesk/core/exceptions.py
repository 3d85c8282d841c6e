# studentdesk/core/exceptions.py
"""
Exceptions raised by the student records data view layer.

- ValidationFailed: a draft failed field checks; raised before any request is sent.
- RequestFailed: the record store could not complete a request (network error,
  non-success status, malformed response).
- NotFoundOnFollowUp: the re-fetch that follows a create/update could not find the record.
"""

from typing import Dict, Optional


class StudentDeskError(Exception):
    """Base class for studentdesk exceptions."""
    pass


class ValidationFailed(StudentDeskError):
    """Raised when a student form fails field validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Validation failed for: {fields}")


class RequestFailed(StudentDeskError):
    """Raised when a record store request fails for any reason."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class NotFoundOnFollowUp(RequestFailed):
    """Raised when the follow-up fetch after a create or update cannot locate the record."""
    pass


class StoreUnavailable(StudentDeskError):
    """Raised by the record store's database layer when MongoDB cannot serve a request."""
    pass
