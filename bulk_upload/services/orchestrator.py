from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..client.submission import BulkSubmissionClient
from ..excel.reader import ACCEPTED_EXTENSIONS
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary
from ..models.upload_result import UploadResult
from .preview import DEFAULT_PREVIEW_LIMIT, render_preview
from .progress import ProgressTracker
from .session import UploadSession
from .summary import render_result, render_summary_line

"""Run orchestration for the bulk upload CLI.

For every input spreadsheet, in order:
1. select the file in a fresh UploadSession (parse, normalize, preview)
2. show the preview and ask for confirmation
3. upload (re-parse, submit) and render the platform's answer
4. log one SUMMARY line

Files are handled one at a time; a file never has more than one upload in flight.
"""

logger = logging.getLogger(__name__)

# confirm(file_path, candidate_count) -> proceed?
ConfirmFn = Callable[[Path, int], bool]


class ProcessingError(Exception):
    """Fatal problem with the run inputs (missing path, unreadable directory)."""


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    result: UploadResult | None = None
    error: str | None = None
    skipped: bool = False  # preview only, or the operator declined

    @property
    def ok(self) -> bool:
        if self.skipped:
            return self.error is None
        return self.result is not None and not self.result.has_failures


@dataclass
class RunResult:
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def uploaded_files(self) -> int:
        return sum(1 for o in self.outcomes if o.result is not None)

    @property
    def failed_files(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)

    @property
    def all_ok(self) -> bool:
        return all(o.ok for o in self.outcomes)


def scan_spreadsheets(directory: Path) -> list[Path]:
    """Spreadsheet files directly inside directory (non-recursive), sorted by name.

    Raises:
        ProcessingError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in ACCEPTED_EXTENSIONS and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def collect_inputs(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into their spreadsheets; plain files are kept as given.

    Explicit files are not filtered by extension: the parser decides whether a
    file is a spreadsheet.
    """
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(scan_spreadsheets(p))
        elif p.exists():
            files.append(p)
        else:
            raise ProcessingError(f"File not found: {p}")
    return files


def process_file(
    path: Path,
    session: UploadSession,
    *,
    confirm: ConfirmFn,
    preview_only: bool = False,
    out: Callable[[str], None] = print,
) -> FileOutcome:
    state = session.select_file(path)
    if state.preview is not None and len(state.preview):
        out(f"FILE: {path.name}")
        out(render_preview(state.preview))
    if state.error is not None:
        logger.error(f"{path.name}: {state.error}")
        log_summary(render_summary_line(path.name, None, state.error))
        return FileOutcome(path=path, error=state.error, skipped=True)

    total = state.preview.total if state.preview is not None else 0
    if preview_only:
        return FileOutcome(path=path, skipped=True)
    if not confirm(path, total):
        logger.info(f"{path.name}: upload cancelled")
        return FileOutcome(path=path, skipped=True)

    result = session.upload()
    if result is None:
        error = session.state.error
        logger.error(f"{path.name}: {error}")
        log_summary(render_summary_line(path.name, None, error))
        return FileOutcome(path=path, error=error)

    out(render_result(result))
    log_summary(render_summary_line(path.name, result))
    return FileOutcome(path=path, result=result)


def process_all(
    files: list[Path],
    client: BulkSubmissionClient,
    *,
    confirm: ConfirmFn,
    preview_only: bool = False,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    error_log: ErrorLogBuffer | None = None,
) -> RunResult:
    """Preview and upload every file, one at a time.

    Args:
        files: spreadsheets to process, in order
        client: submission client shared by all files
        confirm: asked before each upload with the file and its candidate count
        preview_only: show previews without uploading anything
        preview_limit: records shown per preview
        error_log: buffer collecting problems for the JSON Lines error log
    """
    run = RunResult()
    with ProgressTracker(len(files)) as progress:

        def confirm_without_bar(path: Path, count: int) -> bool:
            with progress.paused():
                return confirm(path, count)

        for path in files:
            progress.start_file(path)
            session = UploadSession(client, preview_limit=preview_limit, error_log=error_log)
            outcome = process_file(
                path, session, confirm=confirm_without_bar, preview_only=preview_only, out=progress.write
            )
            run.outcomes.append(outcome)
            progress.finish_file()
    return run
