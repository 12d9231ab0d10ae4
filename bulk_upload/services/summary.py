from __future__ import annotations

from ..models.upload_result import ResultDetail, UploadResult
from .progress import is_tty_enabled

"""Rendering of the platform's UploadResult.

Layout:

    [SUCCESS] 2 new candidates created, 0 existing candidates marked, ...
    Upload Results:
      Successful: 2   Failed: 1   Total: 3
      Name   Mobile      Status   Details
      Alice  555-0100    Success  Added successfully
      Bob    Unknown     Failed   Missing required fields (name or mobile number)

Detail rows are colored by status (green for Success, red otherwise) when
stdout is a terminal.
"""

__all__ = [
    "detail_color",
    "detail_text",
    "render_result",
    "render_summary_line",
]

_ANSI = {
    "green": "\033[32m",
    "red": "\033[31m",
}
_ANSI_RESET = "\033[0m"


def detail_color(status: str) -> str:
    return "green" if status == "Success" else "red"


def detail_text(detail: ResultDetail) -> str:
    """Details column: the rejection reason, or a confirmation for new candidates."""
    if detail.reason:
        return detail.reason
    return "Added successfully" if detail.is_success else ""


def _paint(text: str, color: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"{_ANSI[color]}{text}{_ANSI_RESET}"


def render_result(result: UploadResult, *, color: bool | None = None) -> str:
    """Render counters and the per-candidate table.

    Args:
        result: the platform's answer
        color: force ANSI colors on/off; None follows TTY detection
    """
    use_color = is_tty_enabled() if color is None else color
    counts = result.results
    lines: list[str] = []
    if result.message:
        lines.append(f"[{result.severity.upper()}] {result.message}")
    lines.append("Upload Results:")
    counters = f"  Successful: {counts.successful}   Failed: {counts.failed}   Total: {counts.total}"
    if counts.marked:
        counters += f"   Marked: {counts.marked}"
    lines.append(counters)

    if counts.details:
        header = ("Name", "Mobile", "Status", "Details")
        table = [
            (d.name, d.mobile_no, d.status, detail_text(d)) for d in counts.details
        ]
        widths = [max(len(header[i]), *(len(r[i]) for r in table)) for i in range(3)]
        fmt = "  {:<%d}  {:<%d}  {:<%d}  {}" % tuple(widths)
        lines.append(fmt.format(*header).rstrip())
        for detail, row in zip(counts.details, table, strict=True):
            line = fmt.format(*row).rstrip()
            lines.append(_paint(line, detail_color(detail.status), use_color))
    return "\n".join(lines)


def render_summary_line(file_name: str, result: UploadResult | None, error: str | None = None) -> str:
    """One-line outcome for a file, logged at SUMMARY level (without the label).

    Examples:
        >>> from bulk_upload.models.upload_result import UploadResult, UploadResults
        >>> r = UploadResult(status="success", results=UploadResults(successful=2, failed=1, total=3))
        >>> render_summary_line("candidates.xlsx", r)
        'file=candidates.xlsx status=success successful=2 failed=1 marked=0 total=3'
    """
    if result is None:
        return f"file={file_name} status=error error={error or 'unknown'!r}"
    counts = result.results
    return (
        f"file={file_name} "
        f"status={result.status or 'unknown'} "
        f"successful={counts.successful} "
        f"failed={counts.failed} "
        f"marked={counts.marked} "
        f"total={counts.total}"
    )
