# Shared pytest fixtures
from __future__ import annotations

import struct
import tempfile
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pandas as pd
import pytest

from bulk_upload.logging.init import reset_logging


@pytest.fixture(autouse=True)
def fresh_logging():
    # The stdout handler binds sys.stdout at setup; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("BULK_UPLOAD_API_URL", raising=False)
        monkeypatch.delenv("BULK_UPLOAD_TOKEN", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """api:
  base_url: http://crm.test
  endpoint: /api/candidates/bulk-upload
source_directory: ./data
preview_limit: 5
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """Write rows as-is (first row is the header) into one sheet per key."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


def make_xls(path: Path, rows: list[list[str | None]], sheet_name: str = "Sheet1") -> Path:
    """Write a legacy .xls (BIFF8 in an OLE2 container) holding text cells only.

    pandas can no longer write .xls, so the bytes are assembled here: one
    worksheet of LABEL records, stored as a regular (>= 4096 byte) stream.
    """
    def record(code: int, data: bytes = b"") -> bytes:
        return struct.pack("<HH", code, len(data)) + data

    def bof(stream_type: int) -> bytes:
        return record(0x0809, struct.pack("<HHHHII", 0x0600, stream_type, 0x0DBB, 0x07CC, 0, 6))

    name = sheet_name.encode("latin-1")

    def workbook_globals(sheet_offset: int) -> bytes:
        boundsheet = struct.pack("<IBBBB", sheet_offset, 0, 0, len(name), 0) + name
        return bof(0x0005) + record(0x0085, boundsheet) + record(0x000A)

    sheet = bof(0x0010)
    for r, values in enumerate(rows):
        for c, value in enumerate(values):
            if value is None:
                continue
            text = str(value).encode("latin-1")
            sheet += record(0x0204, struct.pack("<HHHHB", r, c, 0, len(text), 0) + text)
    sheet += record(0x000A)

    stream = workbook_globals(len(workbook_globals(0))) + sheet
    n_sectors = max(8, -(-len(stream) // 512))
    stream = stream.ljust(n_sectors * 512, b"\x00")

    # sector 0: FAT, sector 1: directory, sectors 2..: Workbook stream
    fat = [-3, -2] + list(range(3, 2 + n_sectors)) + [-2]
    fat_sector = struct.pack("<128i", *(fat + [-1] * (128 - len(fat))))

    def dir_entry(entry_name: str, etype: int, child: int, start: int, size: int) -> bytes:
        raw = entry_name.encode("utf-16-le") + b"\x00\x00" if entry_name else b""
        return (
            raw.ljust(64, b"\x00")
            + struct.pack("<HBBiii", len(raw), etype, 1, -1, -1, child)
            + b"\x00" * 36
            + struct.pack("<iiI", start, size, 0)
        )

    directory = (
        dir_entry("Root Entry", 5, 1, -2, 0)
        + dir_entry("Workbook", 2, -1, 2, len(stream))
        + dir_entry("", 0, -1, 0, 0) * 2
    )
    header = (
        b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"
        + b"\x00" * 16
        + struct.pack("<HHHHH", 0x003E, 0x0003, 0xFFFE, 9, 6)
        + b"\x00" * 6
        + struct.pack("<9i", 0, 1, 1, 0, 4096, -2, 0, -2, 0)
        + struct.pack("<109i", 0, *([-1] * 108))
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(header + fat_sector + directory + stream)
    return path


@pytest.fixture()
def candidates_xlsx(temp_workdir: Path) -> Path:
    return make_workbook(
        temp_workdir / "data" / "candidates.xlsx",
        {
            "Sheet1": [
                ["CandidateName", "Mobile"],
                ["Alice", "555-0100"],
                ["Bob", None],
                [None, "555-0102"],
            ]
        },
    )


def fake_response(status_code: int = 200, body: Any = None, json_error: bool = False) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if json_error:
        resp.json.side_effect = ValueError("no json body")
    else:
        resp.json.return_value = body
    return resp


def success_body(details: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    details = details if details is not None else [
        {"name": "Alice", "mobileNo": "555-0100", "status": "Success", "id": "a1"},
        {"name": "Bob", "mobileNo": "Unknown", "status": "Failed",
         "reason": "Missing required fields (name or mobile number)"},
        {"name": "Unknown", "mobileNo": "555-0102", "status": "Failed",
         "reason": "Missing required fields (name or mobile number)"},
    ]
    successful = sum(1 for d in details if d["status"] == "Success")
    marked = sum(1 for d in details if d["status"] == "Marked")
    failed = len(details) - successful - marked
    return {
        "status": "success",
        "message": (
            f"{successful} new candidates created, {marked} existing candidates marked, "
            f"and {failed} failed out of {len(details)}."
        ),
        "results": {
            "total": len(details),
            "successful": successful,
            "marked": marked,
            "failed": failed,
            "details": details,
        },
    }
