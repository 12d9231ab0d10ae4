from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the upload error log.

One record per problem met while handling a spreadsheet: a file that could not
be parsed, a batch rejected before submission, a failed submission, or a single
candidate row the platform refused. Records are written as JSON Lines with a
fixed key set.

row is the 1-based position of the candidate in the submitted batch, or -1 for
file-level errors.
"""

__all__ = [
    "ErrorRecord",
    "PARSE_ERROR",
    "VALIDATION_ERROR",
    "REMOTE_ERROR",
    "ROW_REJECTED",
]

PARSE_ERROR = "PARSE_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"
REMOTE_ERROR = "REMOTE_ERROR"
ROW_REJECTED = "ROW_REJECTED"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: spreadsheet file name
        row: 1-based candidate position, -1 for file-level errors
        error_type: classification in UPPER_SNAKE_CASE
        message: user-facing message or the platform's rejection reason
    """
    timestamp: str
    file: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
