"""Tests for runner.py -- sweep then watch orchestration."""

import asyncio
from unittest.mock import patch

from epub_intake.config import IntakeConfig
from epub_intake.models import Metadata
from epub_intake.runner import IntakeRunner


def _config(**kwargs) -> IntakeConfig:
    return IntakeConfig(_env_file=None, settle_delay=0, **kwargs)


def _reader(path):
    return Metadata(title=path.stem.title(), creator="Some Writer")


class TestRunSweep:
    def test_once_sorts_existing_files(self, tmp_path):
        (tmp_path / "dune.epub").write_bytes(b"")
        runner = IntakeRunner(_config(), tmp_path, reader=_reader)
        with patch.object(runner.watcher, "start") as start:
            asyncio.run(runner.run(once=True))
        start.assert_not_called()
        assert (tmp_path / "Some_Writer" / "Dune_Some_Writer.epub").exists()

    def test_listing_failure_does_not_raise(self, tmp_path):
        runner = IntakeRunner(_config(), tmp_path / "missing", reader=_reader)
        assert asyncio.run(runner.run_sweep()) is None

    def test_dry_run_moves_nothing(self, tmp_path):
        source = tmp_path / "dune.epub"
        source.write_bytes(b"")
        runner = IntakeRunner(_config(dry_run=True), tmp_path, reader=_reader)
        result = asyncio.run(runner.run_sweep())
        assert result.moved == 1
        assert source.exists()


class TestWatchPhase:
    def test_watcher_started_after_sweep_and_stopped(self, tmp_path):
        (tmp_path / "dune.epub").write_bytes(b"")
        runner = IntakeRunner(_config(), tmp_path, reader=_reader)
        calls = []

        def fake_start():
            calls.append(("start", (tmp_path / "Some_Writer").exists()))

        async def scenario():
            stop = asyncio.Event()
            stop.set()
            await runner.run(stop=stop)

        with (
            patch.object(runner.watcher, "start", side_effect=fake_start),
            patch.object(runner.watcher, "stop", side_effect=lambda: calls.append(("stop", None))),
        ):
            asyncio.run(scenario())

        assert calls == [("start", True), ("stop", None)]

    def test_listing_failure_still_watches(self, tmp_path):
        runner = IntakeRunner(_config(), tmp_path / "missing", reader=_reader)

        async def scenario():
            stop = asyncio.Event()
            stop.set()
            await runner.run(stop=stop)

        with (
            patch.object(runner.watcher, "start") as start,
            patch.object(runner.watcher, "stop"),
        ):
            asyncio.run(scenario())
        start.assert_called_once()
