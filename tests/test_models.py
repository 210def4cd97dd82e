"""Tests for models.py -- record types and sweep tallies."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from epub_intake.models import (
    DestinationPlan,
    Metadata,
    ProcessResult,
    ProcessState,
    SweepResult,
)


class TestRecords:
    def test_metadata_defaults_to_none(self):
        m = Metadata()
        assert (m.title, m.creator, m.author, m.series) == (None, None, None, None)

    def test_metadata_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            Metadata(title="Dune").title = "Other"  # type: ignore[misc]

    def test_plan_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DestinationPlan("A", "T_A.epub").folder_name = "B"  # type: ignore[misc]


class TestSweepResult:
    def test_record_tallies(self):
        result = SweepResult()
        for state in (ProcessState.DONE, ProcessState.DONE, ProcessState.SKIPPED, ProcessState.FAILED):
            result.record(ProcessResult(Path("x.epub"), state))
        assert (result.moved, result.skipped, result.failed, result.total) == (2, 1, 1, 4)
