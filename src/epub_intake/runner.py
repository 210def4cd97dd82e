"""Intake runner -- startup sweep, then the directory watch."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click
from loguru import logger

from .config import IntakeConfig
from .errors import ListingError
from .extract import MetadataReader, read_epub_metadata
from .models import SweepResult
from .processor import FileProcessor
from .sweep import sweep
from .watcher import Watcher

log = logger.bind(stage="runner")


class IntakeRunner:
    """Runs the intake pipeline for one root directory."""

    def __init__(
        self,
        config: IntakeConfig,
        root_dir: Path,
        reader: MetadataReader = read_epub_metadata,
    ) -> None:
        self.config = config
        self.root_dir = root_dir
        self.processor = FileProcessor(
            root_dir,
            extraction_timeout=config.extraction_timeout,
            reader=reader,
            dry_run=config.dry_run,
        )
        self.watcher = Watcher(root_dir, self.processor, config.settle_delay)

    async def run_sweep(self) -> SweepResult | None:
        """Process pre-existing files. A listing failure is logged, not raised."""
        try:
            result = await sweep(self.processor, self.root_dir)
        except ListingError as e:
            log.error(f"Error reading the directory: {e}")
            return None
        click.echo(
            f"Sweep complete: {result.moved} moved, {result.skipped} skipped, "
            f"{result.failed} failed"
        )
        return result

    async def run(
        self,
        once: bool = False,
        stop: asyncio.Event | None = None,
    ) -> None:
        """Sweep, then watch until stop is set (forever when stop is None)."""
        log.info(f"ROOT_DIR is: {self.root_dir}")
        if self.config.dry_run:
            click.echo("[DRY-RUN] No changes will be made")

        await self.run_sweep()
        if once:
            return

        stop = stop or asyncio.Event()
        self.watcher.start()
        try:
            await stop.wait()
        finally:
            await self.watcher.stop()
            await self.watcher.drain()
