from pathlib import Path

from loguru import logger

from mergegate.infrastructure.process import run_process

STATE_DIR_NAME = ".mergegate"


async def get_repo_root(path: str | Path = ".") -> Path | None:
    """Get git repository root using 'git rev-parse --show-toplevel'.

    Returns None when path is not inside a git repository.
    """
    path = Path(path).resolve()
    try:
        proc = await run_process(["git", "rev-parse", "--show-toplevel"], cwd=path)
    except OSError as e:
        logger.warning("Cannot run git in {}: {}", path, e)
        return None
    if proc.returncode != 0:
        return None
    return Path(proc.stdout.strip())


async def get_default_state_dir(path: str | Path = ".") -> Path:
    """Return <repo_root>/.mergegate, or ./.mergegate outside a repository."""
    repo_root = await get_repo_root(path)
    if repo_root is None:
        return Path(path).resolve() / STATE_DIR_NAME
    return repo_root / STATE_DIR_NAME


async def resolve_commit(repo: Path, ref: str) -> str | None:
    """Resolve a ref to a full commit SHA, or None if it does not exist."""
    try:
        proc = await run_process(["git", "rev-parse", "--verify", f"{ref}^{{commit}}"], cwd=repo)
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip()
