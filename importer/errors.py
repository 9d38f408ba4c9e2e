"""Exceptions raised by the event import pipeline."""


class EventImportError(Exception):
    """Base class for event import errors."""


class AuthorizationError(EventImportError):
    """Caller is not allowed to run the import pipeline."""


class SourceNotFoundError(EventImportError):
    """No registered source matches the requested region."""

    def __init__(self, region_id: str):
        super().__init__(f"No event source matches '{region_id}'")
        self.region_id = region_id


class NothingSelectedError(EventImportError):
    """Commit was called without any selected events."""
