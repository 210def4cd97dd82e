"""One-shot startup sweep of files already sitting in the root directory."""

import asyncio
import os
from pathlib import Path

from loguru import logger

from .errors import ListingError
from .models import SweepResult
from .processor import FileProcessor

log = logger.bind(stage="sweep")


def list_root_files(root_dir: Path) -> list[Path]:
    """Return the regular files directly inside root_dir, sorted by name.

    Subdirectories (and anything inside them) are skipped. Raises
    ListingError if the directory cannot be read.
    """
    log.debug(f"list_root_files(root_dir={root_dir})")
    try:
        with os.scandir(root_dir) as it:
            files = [Path(entry.path) for entry in it if entry.is_file()]
    except OSError as e:
        raise ListingError(root_dir, e.strerror or str(e)) from e
    return sorted(files, key=lambda p: p.name)


async def sweep(processor: FileProcessor, root_dir: Path) -> SweepResult:
    """Process every file in root_dir one at a time, in listing order."""
    files = await asyncio.to_thread(list_root_files, root_dir)
    log.info(f"Sweep: {len(files)} files in {root_dir}")

    result = SweepResult()
    for path in files:
        result.record(await processor.process(path))

    log.debug(
        f"Sweep complete: {result.moved} moved, {result.skipped} skipped, "
        f"{result.failed} failed"
    )
    return result
