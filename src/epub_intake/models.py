"""Core enums, constants, and record types for the intake pipeline.

Enums:
    ProcessState -- Per-file processing state. A run moves through
                    start -> extension_check -> extracting -> planning ->
                    folder_ensuring -> moving -> done, or ends early in
                    skipped (not an EPUB) or failed.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

EPUB_EXTENSION = ".epub"

UNKNOWN_TITLE = "Unknown_Title"
UNKNOWN_AUTHOR = "Unknown_Author"


class ProcessState(StrEnum):
    START = "start"
    EXTENSION_CHECK = "extension_check"
    EXTRACTING = "extracting"
    PLANNING = "planning"
    FOLDER_ENSURING = "folder_ensuring"
    MOVING = "moving"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class Metadata:
    """Bibliographic fields read from an e-book. All fields are optional."""

    title: str | None = None
    creator: str | None = None
    author: str | None = None
    series: str | None = None


@dataclass(frozen=True)
class DestinationPlan:
    """Folder and file name (both single path segments) for a book."""

    folder_name: str
    file_name: str


@dataclass
class ProcessResult:
    """Terminal outcome of one file's processing run."""

    source: Path
    state: ProcessState
    destination: Path | None = None
    error: str | None = None
    failed_at: ProcessState | None = None


@dataclass
class SweepResult:
    """Result summary from a startup sweep of the root directory."""

    moved: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0

    def record(self, result: ProcessResult) -> None:
        self.total += 1
        if result.state == ProcessState.DONE:
            self.moved += 1
        elif result.state == ProcessState.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
