"""Try-directory candidates and their session-scoped cache.

The base directory is scanned once per session. Filesystem failures degrade
to an empty candidate list so the picker still opens.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """One directory offered by the picker.

    ``score`` is recomputed every frame and is not part of identity.
    """

    basename: str
    path: Path
    created_at: float = 0.0
    modified_at: float = 0.0
    score: float = field(default=0.0, compare=False)


def extract_times(st: os.stat_result) -> tuple[float, float]:
    """Return ``(created_at, modified_at)`` from stat metadata.

    Birth time is used where the platform reports a positive one, otherwise
    the inode change time. ``0.0`` means unknown.
    """
    modified_at = float(st.st_mtime or 0.0)
    created_at = float(getattr(st, "st_birthtime", 0.0) or 0.0)
    if created_at <= 0:
        created_at = float(getattr(st, "st_ctime", 0.0) or 0.0)
    return max(0.0, created_at), max(0.0, modified_at)


def scan_candidates(base_path: Path) -> list[Candidate]:
    """List immediate subdirectories of ``base_path`` sorted by name."""
    try:
        base_path.mkdir(parents=True, exist_ok=True)
        base = base_path.resolve()
        with os.scandir(base) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("cannot list %s: %s", base_path, exc)
        return []

    candidates: list[Candidate] = []
    for entry in entries:
        if entry.name in {".", ".."}:
            continue
        try:
            if not entry.is_dir():
                continue
            st = entry.stat()
        except OSError:
            logger.debug("skipping unreadable entry %s", entry.path, exc_info=True)
            continue
        created_at, modified_at = extract_times(st)
        candidates.append(
            Candidate(
                basename=entry.name,
                path=base / entry.name,
                created_at=created_at,
                modified_at=modified_at,
            )
        )
    logger.debug("loaded %d candidates from %s", len(candidates), base)
    return candidates


class CandidateStore:
    """Load-once cache of candidates for one selector session."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = Path(base_path)
        self._candidates: list[Candidate] | None = None

    def load(self) -> list[Candidate]:
        if self._candidates is None:
            self._candidates = scan_candidates(self.base_path)
        return list(self._candidates)


@dataclass(frozen=True)
class CandidateItem:
    """Virtual-list row backed by an existing directory."""

    candidate: Candidate


@dataclass(frozen=True)
class CreateNewItem:
    """Trailing virtual-list row that creates a new directory."""


CREATE_NEW = CreateNewItem()

ListItem = CandidateItem | CreateNewItem


def virtual_list(candidates: list[Candidate]) -> list[ListItem]:
    """Return ranked candidates followed by the create-new sentinel."""
    items: list[ListItem] = [CandidateItem(c) for c in candidates]
    items.append(CREATE_NEW)
    return items
