from __future__ import annotations

"""Error taxonomy for the bulk upload flow.

- ParseError: the file could not be opened or decoded as a spreadsheet
- ValidationError: nothing usable to submit (zero candidate rows)
- RemoteError: the platform rejected the batch or could not be reached

None of these is fatal. The upload session catches them at the boundary of the
user action and turns them into an inline message.
"""

__all__ = [
    "UploadError",
    "ParseError",
    "ValidationError",
    "RemoteError",
]


class UploadError(Exception):
    """Base class for all bulk upload errors."""


class ParseError(UploadError):
    """Raised when a file cannot be read as a spreadsheet."""


class ValidationError(UploadError):
    """Raised when a batch is rejected locally before any network call."""


class RemoteError(UploadError):
    """Raised on a non-2xx response or a transport failure during submission."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
