from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..excel.reader import cell_text
from ..models.candidate import CandidateRecord

"""Field normalizer: raw spreadsheet rows -> CandidateRecord.

Uploaded sheets name the same column in different ways. Each canonical field
is resolved through an ordered list of header aliases; the first alias with a
non-blank value wins. The order is a tie-break policy for sheets that carry
several matching columns and must not be reordered.

Pure functions only: no I/O, safe to call repeatedly on the same rows.
"""

__all__ = [
    "FIELD_ALIASES",
    "aliases_for",
    "normalize_row",
    "normalize_rows",
]

# (canonical field, header alias), evaluated first-match-wins per field
FIELD_ALIASES: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("name", "name"),
    ("name", "CANDIDATE_NAME"),
    ("name", "candidate_name"),
    ("name", "CandidateName"),
    ("mobile_no", "Contact Number"),
    ("mobile_no", "Mobile"),
    ("mobile_no", "mobile"),
    ("mobile_no", "MOBILE"),
    ("mobile_no", "Phone"),
    ("mobile_no", "phone"),
    ("mobile_no", "mobileNo"),
)

CANONICAL_FIELDS = ("name", "mobile_no")


def aliases_for(field: str) -> list[str]:
    """Header aliases for a canonical field, in precedence order."""
    return [alias for canonical, alias in FIELD_ALIASES if canonical == field]


def normalize_row(raw: Mapping[str, Any]) -> CandidateRecord:
    values = {f: "" for f in CANONICAL_FIELDS}
    resolved: set[str] = set()
    for field, alias in FIELD_ALIASES:
        if field in resolved or alias not in raw:
            continue
        text = cell_text(raw[alias])
        if text:
            values[field] = text
            resolved.add(field)
    return CandidateRecord(name=values["name"], mobile_no=values["mobile_no"])


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> list[CandidateRecord]:
    """Normalize every row, preserving order. Never raises on missing aliases."""
    return [normalize_row(r) for r in rows]
