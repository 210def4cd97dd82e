"""Move a book into its planned folder under the root directory."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from loguru import logger

from .errors import DestinationExistsError, DirectoryCreationError, MoveError
from .models import DestinationPlan

log = logger.bind(stage="mover")


class DestinationLocks:
    """Per-destination asyncio locks.

    Two runs that resolve to the same destination file take turns at the
    exists-check + rename step, so the second one reliably sees the first
    one's file and is rejected instead of overwriting it. A lock is
    dropped once no run holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: dict[Path, asyncio.Lock] = {}
        self._users: dict[Path, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, destination: Path) -> AsyncIterator[None]:
        lock = self._locks.setdefault(destination, asyncio.Lock())
        self._users[destination] = self._users.get(destination, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[destination] -= 1
            if not self._users[destination]:
                del self._users[destination]
                del self._locks[destination]


async def ensure_folder(folder: Path, source: Path) -> None:
    """Create folder and any missing parents. Existing folders are fine."""
    try:
        await asyncio.to_thread(folder.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(
            f"Cannot create folder {folder}: {e.strerror or e}", source
        ) from e
    log.debug(f"Folder ready: {folder}")


async def move(
    source: Path,
    plan: DestinationPlan,
    root_dir: Path,
    locks: DestinationLocks | None = None,
    dry_run: bool = False,
) -> Path:
    """Rename source to root_dir/folder/file and return the destination.

    Refuses to overwrite: an occupied destination raises
    DestinationExistsError and the source stays put. Returns the planned
    destination without touching anything when dry_run is set.
    """
    dest_dir = root_dir / plan.folder_name
    dest_file = dest_dir / plan.file_name
    log.debug(f"move: {source} -> {dest_file}")

    if dry_run:
        log.info(f"[DRY-RUN] Would move {source.name} -> {dest_file}")
        return dest_file

    await ensure_folder(dest_dir, source)
    return await rename_into(source, dest_file, locks)


async def rename_into(
    source: Path,
    dest_file: Path,
    locks: DestinationLocks | None = None,
) -> Path:
    """Rename source to dest_file, whose folder must already exist.

    Raises DestinationExistsError if dest_file is taken and MoveError if
    the rename itself fails; the source stays put either way.
    """
    locks = locks if locks is not None else DestinationLocks()
    async with locks.hold(dest_file):
        if await asyncio.to_thread(dest_file.exists):
            raise DestinationExistsError(source, dest_file)
        try:
            await asyncio.to_thread(source.rename, dest_file)
        except OSError as e:
            raise MoveError(
                f"Cannot move {source} -> {dest_file}: {e.strerror or e}",
                source,
                dest_file,
            ) from e

    log.info(f"Move {source} -> {dest_file}")
    return dest_file
