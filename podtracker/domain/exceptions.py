from __future__ import annotations


class PodTrackerError(Exception):
    """Base class for errors raised by the POD tracker domain."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingRequiredFieldError(PodTrackerError):
    """Raised when a patient payload lacks name, mrn or otDate."""

    def __init__(self, message: str = "name, mrn, and otDate are required", *, fields=()):
        super().__init__(message)
        self.fields = tuple(fields)


class PatientNotFoundError(PodTrackerError):
    """Raised when no patient matches the requested identifier."""

    def __init__(self, message: str = "Patient not found"):
        super().__init__(message)


class PatientStoreError(PodTrackerError):
    """Raised when the patient store fails for a reason other than validation/not-found."""


class DatabaseConnectionError(PodTrackerError):
    """Raised when the database is not configured or cannot be reached."""
