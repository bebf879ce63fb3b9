"""Integration tests for JsonRunStore persistence."""

import os
from pathlib import Path
from unittest.mock import patch
from uuid import uuid4

import pytest

from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.run_outcome import RunOutcome
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.value_objects import CheckStatus, ErrorKind, RunStatus
from mergegate.infrastructure.persistence.json_run_store import JsonRunStore


@pytest.fixture
def store(temp_state_dir: Path) -> JsonRunStore:
    return JsonRunStore(temp_state_dir)


@pytest.fixture
def sample_outcome(push_event: TriggerEvent) -> RunOutcome:
    passed = CheckResult(check_name="test")
    passed.mark_running()
    passed.mark_passed(output_tail="test result: ok")
    errored = CheckResult.errored("msrv", ErrorKind.PROVISIONING, "rustup exited with 1")
    return RunOutcome(
        id=uuid4(),
        event=push_event,
        results={"test": passed, "msrv": errored},
        status=RunStatus.FAILED,
    )


class TestJsonRunStoreSaveLoad:
    async def test_save_and_load(self, store: JsonRunStore, sample_outcome: RunOutcome) -> None:
        await store.save(sample_outcome)
        loaded = await store.load(sample_outcome.id)

        assert loaded is not None
        assert loaded == sample_outcome
        assert loaded.results["msrv"].status == CheckStatus.ERRORED
        assert loaded.results["msrv"].error_kind == ErrorKind.PROVISIONING
        assert list(loaded.results) == ["test", "msrv"]

    async def test_layout(
        self, store: JsonRunStore, sample_outcome: RunOutcome, temp_state_dir: Path
    ) -> None:
        await store.save(sample_outcome)

        outcome_file = temp_state_dir / "runs" / sample_outcome.id.hex / "outcome.json"
        assert outcome_file.exists()
        assert '"status": "failed"' in outcome_file.read_text(encoding="utf-8")

    async def test_load_missing(self, store: JsonRunStore) -> None:
        assert await store.load(uuid4()) is None

    async def test_save_overwrites(self, store: JsonRunStore, sample_outcome: RunOutcome) -> None:
        await store.save(sample_outcome)
        updated = sample_outcome.model_copy(update={"status": RunStatus.PASSED})
        await store.save(updated)

        loaded = await store.load(sample_outcome.id)
        assert loaded is not None
        assert loaded.status == RunStatus.PASSED


class TestJsonRunStoreList:
    async def test_empty(self, store: JsonRunStore) -> None:
        assert await store.list_runs() == []

    async def test_ordered_oldest_first(
        self, store: JsonRunStore, sample_outcome: RunOutcome, temp_state_dir: Path
    ) -> None:
        first = sample_outcome
        second = sample_outcome.model_copy(update={"id": uuid4()})
        await store.save(second)
        await store.save(first)
        # Make the on-disk order unambiguous
        os.utime(temp_state_dir / "runs" / second.id.hex / "outcome.json", (1, 1))

        assert await store.list_runs() == [second.id, first.id]

    async def test_ignores_stray_directories(
        self, store: JsonRunStore, sample_outcome: RunOutcome, temp_state_dir: Path
    ) -> None:
        await store.save(sample_outcome)
        (temp_state_dir / "runs" / "not-a-uuid").mkdir()
        (temp_state_dir / "runs" / "not-a-uuid" / "outcome.json").write_text("{}")
        (temp_state_dir / "runs" / uuid4().hex).mkdir()

        assert await store.list_runs() == [sample_outcome.id]



class TestAtomicWrite:
    async def test_no_temp_files_left(
        self, store: JsonRunStore, sample_outcome: RunOutcome, temp_state_dir: Path
    ) -> None:
        await store.save(sample_outcome)
        await store.save(sample_outcome)

        run_dir = temp_state_dir / "runs" / sample_outcome.id.hex
        assert sorted(p.name for p in run_dir.iterdir()) == [".lock", "outcome.json"]

    async def test_failed_write_keeps_previous_outcome(
        self, store: JsonRunStore, sample_outcome: RunOutcome, temp_state_dir: Path
    ) -> None:
        await store.save(sample_outcome)
        outcome_file = temp_state_dir / "runs" / sample_outcome.id.hex / "outcome.json"
        before = outcome_file.read_text(encoding="utf-8")

        with patch("mergegate.infrastructure.persistence.json_run_store.os.replace") as replace:
            replace.side_effect = OSError("disk full")
            with pytest.raises(OSError):
                await store.save(sample_outcome.model_copy(update={"status": RunStatus.PASSED}))

        assert outcome_file.read_text(encoding="utf-8") == before
        assert not [p for p in outcome_file.parent.iterdir() if p.name.endswith(".tmp")]
