"""Error types raised by the reporting engine and the import job."""
from typing import Optional


class ReportError(Exception):
    """Base error carrying a user-facing message and optional detail."""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.error:
            payload["error"] = self.error
        return payload


class InvalidWindow(ReportError):
    """Missing or non-numeric month/year."""


class InvalidInput(ReportError):
    """Bad pagination parameters."""


class StoreUnavailable(ReportError):
    """The record store query failed or timed out."""


class PartialAggregateFailure(ReportError):
    """One of the combined report's aggregators failed."""


class ImportFailed(ReportError):
    """The feed could not be fetched or decoded."""
