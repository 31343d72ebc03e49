from typing import Optional


class CampusConnectError(Exception):
    """Base exception for the attendance backend."""


class ValidationError(CampusConnectError):
    """Raised when input data is invalid or violates domain rules."""


class DataServiceError(CampusConnectError):
    """Raised when a call to the hosted data service fails."""


class AttendanceFetchError(DataServiceError):
    """Raised when a read needed for an attendance report fails.

    ``subject_id`` is set when the failure belongs to one subject's
    attendance fetch rather than to the identity or catalog lookup.
    """

    def __init__(self, message: str, *, subject_id: Optional[str] = None):
        super().__init__(message)
        self.subject_id = subject_id
