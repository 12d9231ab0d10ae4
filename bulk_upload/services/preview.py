from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..models.candidate import CandidateRecord

"""Preview of normalized candidates shown to the operator before upload.

Only the first few records are exposed. Empty fields are flagged as "Missing"
so the operator can abort before anything is submitted. The preview never
feeds the submission path.
"""

__all__ = [
    "DEFAULT_PREVIEW_LIMIT",
    "MISSING",
    "Preview",
    "PreviewRow",
    "build_preview",
    "render_preview",
]

DEFAULT_PREVIEW_LIMIT = 5
MISSING = "Missing"


@dataclass(frozen=True)
class PreviewRow:
    index: int  # 1-based position in the sheet's candidate list
    record: CandidateRecord

    @property
    def name_missing(self) -> bool:
        return not self.record.name

    @property
    def mobile_missing(self) -> bool:
        return not self.record.mobile_no

    @property
    def has_missing(self) -> bool:
        return self.name_missing or self.mobile_missing


@dataclass(frozen=True)
class Preview:
    rows: list[PreviewRow]
    total: int  # number of normalized records, not just the previewed ones

    @property
    def flagged_rows(self) -> list[int]:
        """1-based indexes of previewed rows with a missing field."""
        return [r.index for r in self.rows if r.has_missing]

    def __len__(self) -> int:
        return len(self.rows)


def build_preview(records: Sequence[CandidateRecord], limit: int = DEFAULT_PREVIEW_LIMIT) -> Preview:
    rows = [PreviewRow(index=i + 1, record=r) for i, r in enumerate(records[:limit])]
    return Preview(rows=rows, total=len(records))


def render_preview(preview: Preview) -> str:
    """Render the preview as a plain text table (Name / Contact Number)."""
    if not preview.rows:
        return "Preview: no entries"
    cells = [
        (
            row.record.name or MISSING,
            row.record.mobile_no or MISSING,
        )
        for row in preview.rows
    ]
    name_w = max(len("Name"), *(len(c[0]) for c in cells))
    mobile_w = max(len("Contact Number"), *(len(c[1]) for c in cells))
    lines = [
        f"Preview (first {len(preview.rows)} entries of {preview.total}):",
        f"  {'Name':<{name_w}}  {'Contact Number':<{mobile_w}}",
        f"  {'-' * name_w}  {'-' * mobile_w}",
    ]
    for name, mobile in cells:
        lines.append(f"  {name:<{name_w}}  {mobile:<{mobile_w}}".rstrip())
    return "\n".join(lines)
