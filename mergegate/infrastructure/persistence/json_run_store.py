from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

import aiofiles
from filelock import FileLock
from loguru import logger

from mergegate.domain.entities.run_outcome import RunOutcome
from mergegate.domain.ports.run_store_port import RunStorePort


class JsonRunStore(RunStorePort):
    """File-based JSON run history.

    Layout: ``<state_dir>/runs/<run-id hex>/outcome.json``.
    """

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir

    def _runs_dir(self) -> Path:
        return self.state_dir / "runs"

    def _run_dir(self, run_id: UUID) -> Path:
        return self._runs_dir() / run_id.hex

    def _lock_path(self, run_id: UUID) -> Path:
        return self._run_dir(run_id) / ".lock"

    async def _read_json(self, path: Path) -> dict[str, Any] | None:
        """Read JSON file, return None if not exists."""
        if not path.exists():
            return None
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
        return json.loads(content)  # type: ignore[no-any-return]

    async def _write_atomic(self, path: Path, content: str) -> None:
        """Write to a sibling temp file, then rename it over path."""
        temp_path = path.with_name(f".{path.name}.{uuid4().hex[:8]}.tmp")
        try:
            async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
                await f.write(content)
            await asyncio.to_thread(os.replace, temp_path, path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("Atomic write completed: {}", path)

    async def save(self, outcome: RunOutcome) -> None:
        """Save a finalized outcome with atomic write under a file lock."""
        run_dir = self._run_dir(outcome.id)
        run_dir.mkdir(parents=True, exist_ok=True)

        lock = FileLock(self._lock_path(outcome.id))
        with lock:
            await self._write_atomic(run_dir / "outcome.json", outcome.model_dump_json(indent=2))
            logger.info("Saved run outcome: {}", outcome.id)

    async def load(self, run_id: UUID) -> RunOutcome | None:
        outcome_path = self._run_dir(run_id) / "outcome.json"
        if not outcome_path.exists():
            logger.debug("Run not found: {}", run_id)
            return None

        lock = FileLock(self._lock_path(run_id))
        with lock:
            data = await self._read_json(outcome_path)
            if data is None:
                return None
            return RunOutcome.model_validate(data)

    async def list_runs(self) -> list[UUID]:
        """List stored run IDs ordered by outcome creation time."""
        runs_dir = self._runs_dir()
        if not runs_dir.exists():
            return []

        found: list[tuple[float, UUID]] = []
        for run_dir in runs_dir.iterdir():
            outcome_path = run_dir / "outcome.json"
            if not (run_dir.is_dir() and outcome_path.exists()):
                continue
            try:
                run_id = UUID(hex=run_dir.name)
            except ValueError:
                logger.warning("Invalid run directory name: {}", run_dir.name)
                continue
            found.append((outcome_path.stat().st_mtime, run_id))
        return [run_id for _, run_id in sorted(found, key=lambda item: item[0])]
