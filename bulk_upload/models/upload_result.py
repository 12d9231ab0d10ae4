from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""UploadResult models for the bulk upload flow.

The platform answers a bulk submission with a single summary:

    {
      "status": "success" | "partial" | "failure",
      "message": "2 new candidates created, 0 existing candidates marked, ...",
      "results": {
        "successful": 2, "failed": 1, "marked": 0, "total": 3,
        "details": [{"name": ..., "mobileNo": ..., "status": "Success", "reason": ...}]
      }
    }

These models are opaque to the client beyond rendering: unknown keys are
ignored and missing counters default to 0.
"""

__all__ = [
    "ResultDetail",
    "UploadResults",
    "UploadResult",
]


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class ResultDetail:
    """Per-candidate outcome reported by the platform."""
    name: str
    mobile_no: str
    status: str  # Success / Marked / Failed
    reason: str | None = None
    id: str | None = None  # platform id of the created or marked candidate

    @property
    def is_success(self) -> bool:
        return self.status == "Success"

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> ResultDetail:
        reason = data.get("reason")
        ident = data.get("id")
        return cls(
            name=_as_str(data.get("name")),
            mobile_no=_as_str(data.get("mobileNo")),
            status=_as_str(data.get("status")),
            reason=None if reason in (None, "") else str(reason),
            id=None if ident is None else str(ident),
        )


@dataclass(frozen=True)
class UploadResults:
    successful: int = 0
    failed: int = 0
    total: int = 0
    marked: int = 0  # existing candidates re-registered to the uploader
    details: list[ResultDetail] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict[str, Any] | None) -> UploadResults:
        data = data or {}
        return cls(
            successful=_as_int(data.get("successful")),
            failed=_as_int(data.get("failed")),
            total=_as_int(data.get("total")),
            marked=_as_int(data.get("marked")),
            details=[
                ResultDetail.from_payload(d)
                for d in data.get("details") or []
                if isinstance(d, dict)
            ],
        )


@dataclass(frozen=True)
class UploadResult:
    """Server-reported outcome summary for one submitted batch."""
    status: str
    results: UploadResults
    message: str | None = None

    @property
    def severity(self) -> str:
        """Notice severity used when rendering the platform message."""
        return "success" if self.status == "success" else "warning"

    @property
    def has_failures(self) -> bool:
        return self.status != "success" or self.results.failed > 0

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> UploadResult:
        message = data.get("message")
        results = data.get("results")
        return cls(
            status=_as_str(data.get("status")),
            results=UploadResults.from_payload(results if isinstance(results, dict) else None),
            message=None if message is None else str(message),
        )
