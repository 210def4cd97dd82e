"""Directory watch: feed files added to the root directory to the processor.

watchdog delivers events on its observer thread; the handler only hands
paths over to the asyncio loop, where each one becomes a task that waits
for the settle delay and then runs FileProcessor.process.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from watchdog.events import (
    FileCreatedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

if TYPE_CHECKING:
    from .processor import FileProcessor

log = logger.bind(stage="watcher")

DEFAULT_SETTLE_DELAY = 1.0


def is_direct_child(root: Path, path: Path) -> bool:
    """True if path sits directly in root (not in a subdirectory)."""
    try:
        relative = Path(path).relative_to(root)
    except ValueError:
        return False
    return len(relative.parts) == 1


def _event_path(event: FileSystemEvent) -> str | bytes:
    if isinstance(event, FileMovedEvent):
        return event.dest_path
    return event.src_path


class IntakeEventHandler(FileSystemEventHandler):
    """Forwards file-added events for direct children of root."""

    def __init__(self, root: Path, submit, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__()
        self.root = root
        self.submit = submit
        self.loop = loop

    def _handle(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        raw = _event_path(event)
        path = Path(raw.decode() if isinstance(raw, bytes) else raw)
        if not is_direct_child(self.root, path):
            log.debug(f"Ignoring event outside root level: {path}")
            return
        log.info(f"New file detected: {path}")
        self.loop.call_soon_threadsafe(self.submit, path)

    def on_created(self, event: FileCreatedEvent) -> None:
        self._handle(event)

    def on_moved(self, event: FileMovedEvent) -> None:
        # A rename into root counts as an add
        self._handle(event)


class Watcher:
    """Watches root_dir (non-recursively) and schedules processing runs.

    Runs are independent tasks and may interleave; collisions on the same
    destination are resolved by the processor's destination locks.
    """

    def __init__(
        self,
        root_dir: Path,
        processor: FileProcessor,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ) -> None:
        self.root_dir = root_dir
        self.processor = processor
        self.settle_delay = settle_delay
        self.handler: IntakeEventHandler | None = None
        self._observer = None
        self._tasks: set[asyncio.Task] = set()

    def bind(self, loop: asyncio.AbstractEventLoop) -> IntakeEventHandler:
        """Create the event handler that feeds this watcher on loop."""
        self.handler = IntakeEventHandler(self.root_dir, self.submit, loop)
        return self.handler

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        loop = loop or asyncio.get_running_loop()
        handler = self.bind(loop)
        self._observer = Observer()
        self._observer.schedule(handler, str(self.root_dir), recursive=False)
        self._observer.start()
        log.info(f"Watching for new EPUB files in {self.root_dir}...")

    async def stop(self) -> None:
        """Stop the observer, joining its thread off the event loop."""
        if self._observer is None:
            return
        observer, self._observer = self._observer, None
        observer.stop()
        await asyncio.to_thread(observer.join)
        log.info("Watcher stopped")

    def submit(self, path: Path) -> asyncio.Task:
        """Schedule a processing run for path (must be called on the loop)."""
        task = asyncio.get_running_loop().create_task(self._process_later(path))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _process_later(self, path: Path) -> None:
        await asyncio.sleep(self.settle_delay)
        await self.processor.process(path)

    async def drain(self) -> None:
        """Wait for all scheduled runs to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
