import asyncio
import os
import signal
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass
class ProcessResult:
    returncode: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def output(self) -> str:
        if self.stdout and self.stderr:
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout or self.stderr


def _kill_process_group(proc: asyncio.subprocess.Process) -> None:
    try:
        os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
    except (ProcessLookupError, OSError):
        # Process already terminated
        try:
            proc.kill()
        except ProcessLookupError:
            pass


async def run_process(
    command: str | Sequence[str],
    cwd: Path | str,
    env: dict[str, str] | None = None,
) -> ProcessResult:
    """Run a shell command (str) or an argv list and capture its output.

    The child gets its own process group; if the awaiting task is cancelled
    the whole group is killed before CancelledError propagates.

    Raises OSError when the process cannot be started (missing cwd or
    executable).
    """
    start = datetime.now(UTC)

    if isinstance(command, str):
        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    else:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )

    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        _kill_process_group(proc)
        await proc.wait()
        raise

    duration_ms = int((datetime.now(UTC) - start).total_seconds() * 1000)
    return ProcessResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
        duration_ms=duration_ms,
    )


def output_tail(text: str, limit: int) -> str:
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    return "..." + text[-limit:]
