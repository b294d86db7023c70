"""
Retention Manager - writes transcripts to disk and prunes old ones.

One markdown file per session, overwritten on every write. Pruning is
best-effort cleanup: a missing directory or a failed delete never raises.
"""

import os
import time
from dataclasses import dataclass
from pathlib import Path

import structlog

logger = structlog.get_logger()

TRANSCRIPT_SUFFIX = ".md"
SECONDS_PER_DAY = 24 * 60 * 60

DEFAULT_MAX_COUNT = 20
DEFAULT_MAX_AGE_DAYS = 7


@dataclass
class PruneOptions:
    """Configuration for transcript pruning."""

    max_count: int = DEFAULT_MAX_COUNT
    max_age_days: float = DEFAULT_MAX_AGE_DAYS


def transcript_path(directory: str | os.PathLike | None, session_id: str) -> str | None:
    """Path of a session's transcript inside ``directory``, or None without one."""
    if not directory:
        return None
    return f"{os.fspath(directory)}/{session_id}{TRANSCRIPT_SUFFIX}"


def write_transcript(directory: str | os.PathLike, session_id: str, content: str) -> Path:
    """Write a transcript to disk, creating the directory if needed.

    Filesystem errors propagate to the caller.

    Returns:
        Path of the written file
    """
    dir_path = Path(directory)
    dir_path.mkdir(parents=True, exist_ok=True)

    path = dir_path / f"{session_id}{TRANSCRIPT_SUFFIX}"
    path.write_text(content, encoding="utf-8")

    logger.info("Wrote transcript", session_id=session_id, path=str(path), chars=len(content))
    return path


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def prune_transcripts(
    directory: str | os.PathLike,
    options: PruneOptions | None = None,
    now: float | None = None,
) -> int:
    """Prune old transcript files.

    Keeps the most recent files up to ``max_count`` and removes any file
    older than ``max_age_days``. Either condition alone is enough to remove
    a file.

    Args:
        directory: Directory holding transcripts
        options: Retention limits
        now: Reference time in epoch seconds (defaults to the current time)

    Returns:
        Number of files that matched the removal policy. Deletions that
        fail are still counted.
    """
    options = options or PruneOptions()
    dir_path = Path(directory)

    try:
        entries = os.listdir(dir_path)
    except OSError:
        return 0

    candidates = [dir_path / name for name in entries if name.endswith(TRANSCRIPT_SUFFIX)]
    if not candidates:
        return 0

    with_mtimes = sorted(
        ((path, _mtime(path)) for path in candidates),
        key=lambda item: item[1],
        reverse=True,
    )

    now = time.time() if now is None else now
    cutoff = now - options.max_age_days * SECONDS_PER_DAY
    removed = 0

    for rank, (path, mtime) in enumerate(with_mtimes):
        if rank < options.max_count and mtime >= cutoff:
            continue

        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to delete transcript", path=str(path), error=str(e))
        removed += 1

    if removed:
        logger.info(
            "Pruned transcripts",
            directory=str(dir_path),
            removed=removed,
            kept=len(with_mtimes) - removed,
        )
    return removed
