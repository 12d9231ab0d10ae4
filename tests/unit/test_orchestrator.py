from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bulk_upload.models.upload_result import UploadResult
from bulk_upload.services.orchestrator import (
    FileOutcome,
    ProcessingError,
    RunResult,
    collect_inputs,
    process_all,
    scan_spreadsheets,
)
from conftest import make_workbook, success_body


def test_scan_spreadsheets_filters_and_sorts(temp_workdir: Path):
    data = temp_workdir / "data"
    for name in ["b.xlsx", "a.XLS", "notes.txt", "~$a.xlsx"]:
        (data / name).write_bytes(b"")
    (data / "sub").mkdir()
    (data / "sub" / "c.xlsx").write_bytes(b"")
    assert [p.name for p in scan_spreadsheets(data)] == ["a.XLS", "b.xlsx"]


def test_scan_spreadsheets_errors(temp_workdir: Path):
    with pytest.raises(ProcessingError):
        scan_spreadsheets(temp_workdir / "missing")
    f = temp_workdir / "file.xlsx"
    f.write_bytes(b"")
    with pytest.raises(ProcessingError):
        scan_spreadsheets(f)


def test_collect_inputs_keeps_explicit_files(temp_workdir: Path):
    data = temp_workdir / "data"
    (data / "a.xlsx").write_bytes(b"")
    other = temp_workdir / "upload.bin"
    other.write_bytes(b"")
    assert collect_inputs([other, data]) == [other, data / "a.xlsx"]
    with pytest.raises(ProcessingError):
        collect_inputs([temp_workdir / "missing.xlsx"])


def test_file_outcome_ok():
    ok_result = UploadResult.from_payload({"status": "success", "results": {"successful": 1, "total": 1}})
    assert FileOutcome(Path("a"), result=ok_result).ok
    assert not FileOutcome(Path("a"), result=UploadResult.from_payload(success_body())).ok
    assert not FileOutcome(Path("a"), error="boom").ok
    assert FileOutcome(Path("a"), skipped=True).ok
    assert not FileOutcome(Path("a"), error="no data", skipped=True).ok


def test_process_all_one_request_per_file(temp_workdir: Path):
    files = [
        make_workbook(temp_workdir / "data" / f"{n}.xlsx", {"S": [["Name", "Mobile"], [n, "1"]]})
        for n in ("a", "b")
    ]
    client = MagicMock()
    client.submit.return_value = UploadResult.from_payload(
        {"status": "success", "results": {"successful": 1, "total": 1}}
    )
    confirm = MagicMock(return_value=True)
    run = process_all(files, client, confirm=confirm)

    assert isinstance(run, RunResult)
    assert client.submit.call_count == 2
    assert [c.args for c in confirm.call_args_list] == [(files[0], 1), (files[1], 1)]
    assert run.uploaded_files == 2
    assert run.failed_files == 0
    assert run.all_ok


def test_process_all_preview_only_skips_confirmation(temp_workdir: Path):
    f = make_workbook(temp_workdir / "data" / "a.xlsx", {"S": [["Name", "Mobile"], ["A", "1"]]})
    client = MagicMock()
    confirm = MagicMock(return_value=True)
    run = process_all([f], client, confirm=confirm, preview_only=True)
    confirm.assert_not_called()
    client.submit.assert_not_called()
    assert run.outcomes[0].skipped


def test_confirmation_prompt_runs_with_bar_cleared(temp_workdir: Path):
    files = [
        make_workbook(temp_workdir / "data" / f"{n}.xlsx", {"S": [["Name", "Mobile"], [n, "1"]]})
        for n in ("a", "b")
    ]
    events = []
    pbar = MagicMock()
    pbar.clear.side_effect = lambda: events.append("clear")
    pbar.refresh.side_effect = lambda: events.append("refresh")

    def confirm(path, count):
        events.append(f"confirm {path.name}")
        return False

    with patch("bulk_upload.services.progress.is_tty_enabled", return_value=True), \
         patch("bulk_upload.services.progress.tqdm", return_value=pbar):
        run = process_all(files, MagicMock(), confirm=confirm)

    assert events == ["clear", "confirm a.xlsx", "refresh", "clear", "confirm b.xlsx", "refresh"]
    assert run.all_ok
