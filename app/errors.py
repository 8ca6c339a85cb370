"""
Error taxonomy shared by the server and the offline client core.
"""


class LeadAppError(Exception):
    """Base class for every error raised by the lead manager."""


class RemoteError(LeadAppError):
    """Transport failure or non-2xx response from the lead API or the Sheets API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LeadNotFoundError(RemoteError):
    def __init__(self, lead_id: str):
        super().__init__(f"Lead not found: {lead_id}", status_code=404)
        self.lead_id = lead_id


class StorageError(LeadAppError):
    """Local durable read/write failure. Never leaves the offline stores."""


class ValidationError(LeadAppError):
    """User input rejected before any state changes (e.g. reminder without a date)."""


class SyncInProgressError(LeadAppError):
    """A mutation was attempted while offline changes are being synced."""


class SheetsConfigError(LeadAppError):
    """Google service account or spreadsheet settings are missing."""
