from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..client.submission import NO_DATA_MESSAGE, BulkSubmissionClient
from ..errors import ParseError, RemoteError, ValidationError
from ..excel.reader import SheetData, read_spreadsheet
from ..logging.error_log import ErrorLogBuffer
from ..models.candidate import CandidateRecord
from ..models.error_record import (
    PARSE_ERROR,
    REMOTE_ERROR,
    ROW_REJECTED,
    VALIDATION_ERROR,
    ErrorRecord,
)
from ..models.upload_result import UploadResult
from .normalizer import normalize_rows
from .preview import DEFAULT_PREVIEW_LIMIT, Preview, build_preview

"""Upload session: the state owned by one bulk upload front end.

State only changes in response to discrete actions (select a file, confirm the
upload) and the arrival of the platform's answer:

    select_file -> file, preview (or error)
    upload      -> is_uploading=True -> result (or error) -> is_uploading=False

The preview pass and the upload pass each parse the file from scratch; the
upload never reuses the previewed records.
"""

__all__ = [
    "NO_FILE_MESSAGE",
    "PARSE_FAILURE_MESSAGE",
    "UploadState",
    "UploadSession",
]

logger = logging.getLogger(__name__)

NO_FILE_MESSAGE = "Please select a file first."
PARSE_FAILURE_MESSAGE = "Could not parse the Excel file. Please check the format."


@dataclass
class UploadState:
    file: Path | None = None
    preview: Preview | None = None
    result: UploadResult | None = None
    error: str | None = None
    is_uploading: bool = False


class UploadSession:
    """Drives one spreadsheet through preview and submission.

    Args:
        client: submission client for the platform endpoint
        preview_limit: number of records exposed by the preview
        error_log: buffer receiving an ErrorRecord per problem met
        reader: spreadsheet reader (replaceable in tests)
    """

    def __init__(
        self,
        client: BulkSubmissionClient,
        *,
        preview_limit: int = DEFAULT_PREVIEW_LIMIT,
        error_log: ErrorLogBuffer | None = None,
        reader: Callable[[Path], SheetData] = read_spreadsheet,
    ) -> None:
        self.client = client
        self.preview_limit = preview_limit
        self.error_log = error_log
        self._reader = reader
        self.state = UploadState()

    @property
    def can_upload(self) -> bool:
        """Whether the submit action is enabled."""
        return self.state.file is not None and not self.state.is_uploading

    def _record(self, row: int, error_type: str, message: str) -> None:
        if self.error_log is None:
            return
        name = self.state.file.name if self.state.file is not None else ""
        self.error_log.append(ErrorRecord.create(name, row, error_type, message))

    def _load_candidates(self, path: Path) -> list[CandidateRecord]:
        sheet = self._reader(path)
        logger.debug(f"read sheet={sheet.sheet_name} cols={sheet.columns} rows={len(sheet.rows)}")
        return normalize_rows(sheet.rows)

    def select_file(self, path: Path | str) -> UploadState:
        """Select a spreadsheet and build its preview."""
        path = Path(path)
        self.state.file = path
        self.state.error = None
        self.state.result = None
        self.state.preview = None

        try:
            candidates = self._load_candidates(path)
        except ParseError as e:
            logger.error(f"could not parse {path.name}: {e}")
            self.state.error = PARSE_FAILURE_MESSAGE
            self._record(-1, PARSE_ERROR, str(e))
            return self.state

        self.state.preview = build_preview(candidates, self.preview_limit)
        if not candidates:
            self.state.error = NO_DATA_MESSAGE
            self._record(-1, VALIDATION_ERROR, NO_DATA_MESSAGE)
        else:
            logger.info(f"{path.name}: {len(candidates)} candidates read")
        return self.state

    def upload(self) -> UploadResult | None:
        """Re-read the selected file and submit every candidate in one request.

        Returns the platform's UploadResult, or None when the upload did not
        happen or failed (state.error then holds the message).
        """
        if self.state.is_uploading:
            logger.warning("upload already in progress; ignoring repeated request")
            return None
        if self.state.file is None:
            self.state.error = NO_FILE_MESSAGE
            return None

        path = self.state.file
        self.state.is_uploading = True
        self.state.error = None
        try:
            candidates = self._load_candidates(path)
            result = self.client.submit(candidates)
        except ParseError as e:
            logger.error(f"could not parse {path.name}: {e}")
            self.state.error = PARSE_FAILURE_MESSAGE
            self._record(-1, PARSE_ERROR, str(e))
            return None
        except ValidationError as e:
            logger.warning(f"{path.name}: {e}")
            self.state.error = str(e)
            self._record(-1, VALIDATION_ERROR, str(e))
            return None
        except RemoteError as e:
            self.state.error = e.message
            self._record(-1, REMOTE_ERROR, e.message)
            return None
        finally:
            self.state.is_uploading = False

        self.state.result = result
        for i, detail in enumerate(result.results.details, start=1):
            if detail.status == "Failed":
                self._record(i, ROW_REJECTED, detail.reason or "")
        return result
