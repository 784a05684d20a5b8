"""
Domain exceptions.

The core raises these; the service layer decides whether they become an
HTTP error or a non-fatal warning in the response.
"""


class TrainingLogError(Exception):
    """Base class for all training log errors."""


class ValidationError(TrainingLogError, ValueError):
    """A record (or setting) failed validation and was not stored."""


class StorageError(TrainingLogError):
    """Reading or writing the local store failed."""


class SyncError(TrainingLogError):
    """The remote service could not be reached or answered unexpectedly."""


class FormatError(SyncError):
    """The remote payload was not the expected JSON envelope."""
