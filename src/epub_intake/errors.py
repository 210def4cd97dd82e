"""Exception hierarchy for the intake pipeline."""

from pathlib import Path


class IntakeError(Exception):
    """Base exception for all intake errors."""


class ConfigError(IntakeError):
    """Invalid or missing configuration."""


class FileStageError(IntakeError):
    """A per-file stage failed. The source file is left where it was."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class ExtractionError(FileStageError):
    """The metadata parser failed on a file."""

    def __init__(self, path: Path, cause: str) -> None:
        super().__init__(f"Metadata extraction failed for {path}: {cause}", path)
        self.cause = cause


class ExtractionTimeout(ExtractionError):
    """The metadata parser did not finish within the deadline."""

    def __init__(self, path: Path, timeout: float) -> None:
        super().__init__(path, f"timed out after {timeout:g}s")
        self.timeout = timeout


class DirectoryCreationError(FileStageError):
    """The destination folder could not be created."""


class MoveError(FileStageError):
    """The source file could not be renamed to its destination."""

    def __init__(self, message: str, path: Path, destination: Path) -> None:
        super().__init__(message, path)
        self.destination = destination


class DestinationExistsError(MoveError):
    """Another file already occupies the planned destination."""

    def __init__(self, path: Path, destination: Path) -> None:
        super().__init__(
            f"Destination already exists: {destination}", path, destination
        )


class ListingError(IntakeError):
    """The root directory could not be listed."""

    def __init__(self, path: Path, cause: str) -> None:
        super().__init__(f"Cannot list {path}: {cause}")
        self.path = path
        self.cause = cause
