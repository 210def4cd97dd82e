"""Per-file processing: extension check -> extract -> plan -> move."""

from pathlib import Path

from loguru import logger

from .errors import DirectoryCreationError, ExtractionError, MoveError
from .extract import DEFAULT_TIMEOUT, MetadataReader, extract, read_epub_metadata
from .models import EPUB_EXTENSION, ProcessResult, ProcessState
from .mover import DestinationLocks, ensure_folder, rename_into
from .planner import plan

log = logger.bind(stage="processor")


class FileProcessor:
    """Runs one file through the intake state machine.

    Every failure ends the run in ProcessState.FAILED with the source
    file left at its original path; ProcessResult.failed_at records the
    state the run was in. process() never raises, so one bad file cannot
    disturb the sweep, the watcher, or other runs.
    """

    def __init__(
        self,
        root_dir: Path,
        extraction_timeout: float = DEFAULT_TIMEOUT,
        reader: MetadataReader = read_epub_metadata,
        locks: DestinationLocks | None = None,
        dry_run: bool = False,
    ) -> None:
        self.root_dir = root_dir
        self.extraction_timeout = extraction_timeout
        self.reader = reader
        self.locks = locks if locks is not None else DestinationLocks()
        self.dry_run = dry_run

    async def process(self, path: Path) -> ProcessResult:
        state = ProcessState.START
        try:
            state = ProcessState.EXTENSION_CHECK
            if path.suffix.lower() != EPUB_EXTENSION:
                log.debug(f"Ignoring non-EPUB file: {path.name}")
                return ProcessResult(path, ProcessState.SKIPPED)
            if not path.is_file():
                log.debug(f"Ignoring {path}: no longer a regular file")
                return ProcessResult(path, ProcessState.SKIPPED)

            log.info(f"Processing file: {path}")

            state = ProcessState.EXTRACTING
            metadata = await extract(path, self.extraction_timeout, self.reader)

            state = ProcessState.PLANNING
            destination = plan(metadata)

            dest_dir = self.root_dir / destination.folder_name
            dest_file = dest_dir / destination.file_name
            if self.dry_run:
                log.info(f"[DRY-RUN] Would move {path.name} -> {dest_file}")
                return ProcessResult(path, ProcessState.DONE, destination=dest_file)

            state = ProcessState.FOLDER_ENSURING
            await ensure_folder(dest_dir, path)

            state = ProcessState.MOVING
            await rename_into(path, dest_file, locks=self.locks)
        except (ExtractionError, DirectoryCreationError, MoveError) as e:
            return self._failed(path, state, e)
        except Exception as e:
            log.opt(exception=e).error(
                f"Unhandled error processing {path} during {state.value}: {e}"
            )
            return ProcessResult(
                path, ProcessState.FAILED, error=str(e), failed_at=state
            )

        log.info(f"File successfully moved to: {dest_file}")
        return ProcessResult(path, ProcessState.DONE, destination=dest_file)

    def _failed(
        self, path: Path, state: ProcessState, error: Exception
    ) -> ProcessResult:
        log.error(f"{state.value} failed: {error}")
        return ProcessResult(
            path, ProcessState.FAILED, error=str(error), failed_at=state
        )
