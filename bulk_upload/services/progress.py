from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

A single progress bar counts spreadsheets handled in one CLI run. In non-TTY
environments (CI, piped output) the bar is disabled to avoid ANSI control
sequences in the output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over the files of a run; a no-op when stdout is not a TTY."""

    def __init__(self, total_files: int, *, description: str = "Uploading files") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0

        self.enabled = is_tty_enabled() and total_files > 1
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def write(self, text: str) -> None:
        """Print text without breaking the progress bar."""
        if self.pbar is not None:
            tqdm.write(text)
        else:
            print(text)

    @contextmanager
    def paused(self) -> Iterator[None]:
        """Clear the bar while the terminal is used for something else (a prompt)."""
        if self.pbar is None:
            yield
            return
        self.pbar.clear()
        try:
            yield
        finally:
            self.pbar.refresh()

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
