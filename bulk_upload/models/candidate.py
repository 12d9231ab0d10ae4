from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""CandidateRecord model for the bulk upload flow.

A CandidateRecord is the canonical {name, mobileNo} pair produced by the field
normalizer from one spreadsheet row. Both fields default to an empty string.
Uniqueness is not enforced here; duplicates are resolved by the platform.
"""

__all__ = [
    "CandidateRecord",
]


@dataclass(frozen=True)
class CandidateRecord:
    """One candidate after header alias resolution."""
    name: str = ""
    mobile_no: str = ""

    @property
    def missing_fields(self) -> tuple[str, ...]:
        """Canonical field names that are empty, in display order."""
        missing = []
        if not self.name:
            missing.append("name")
        if not self.mobile_no:
            missing.append("mobile_no")
        return tuple(missing)

    def to_payload(self) -> dict[str, Any]:
        """Wire representation expected by the bulk upload endpoint."""
        return {"name": self.name, "mobileNo": self.mobile_no}
