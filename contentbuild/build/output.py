"""
Build output writing and the output directory lock.
"""

import json
import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from contentbuild.errors import BuildLockError, ContentSourceError


logger = logging.getLogger(__name__)


def lock_path_for(output_dir: Path) -> Path:
    """<output>.lock next to the output directory, so cleaning it keeps the lock."""
    output_dir = Path(output_dir)
    return output_dir.with_name(output_dir.name + ".lock")


def _lock_owner(lock_path: Path) -> Optional[int]:
    """PID recorded in a lock file, or None if it cannot be read yet."""
    try:
        text = lock_path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return int(text) if text.isdigit() else None


def _process_running(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but belongs to another user
        return True
    return True


def _acquire(lock_path: Path) -> int:
    """Create the lock file, replacing it once if its owner has exited."""
    try:
        return os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        owner = _lock_owner(lock_path)
        if owner is None or _process_running(owner):
            raise BuildLockError(str(lock_path))
    logger.warning(f"Removing stale build lock {lock_path} left by process {owner}")
    try:
        lock_path.unlink()
    except FileNotFoundError:
        pass
    try:
        return os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        raise BuildLockError(str(lock_path))


@contextmanager
def output_lock(output_dir: Path) -> Iterator[Path]:
    """Hold the output directory for the duration of a build.

    A lock whose recorded process is no longer running is treated as stale
    and replaced.

    Raises:
        BuildLockError: If another running build holds the lock.
    """
    lock_path = lock_path_for(output_dir)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    fd = _acquire(lock_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(f"{os.getpid()}\n")
        logger.debug(f"Acquired build lock {lock_path}")
        yield lock_path
    finally:
        try:
            lock_path.unlink()
        except FileNotFoundError:
            logger.warning(f"Build lock {lock_path} disappeared before release")


def reset_directory(path: Path) -> None:
    """Delete path if present and recreate it empty."""
    path = Path(path)
    if path.exists():
        logger.debug(f"Removing {path}")
        shutil.rmtree(path)
    path.mkdir(parents=True)


def write_text(path: Path, text: str) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ContentSourceError(f"Cannot write {path}: {e}", path=str(path)) from e


def write_json(path: Path, data: Any) -> None:
    """Two-space indented UTF-8 JSON with a trailing newline."""
    write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
