"""Flat-file leaderboard of best runs.

File format: one record per line, ``username | <steps> steps | <time> s``,
newline-terminated, no header. Records are ranked by time ascending, ties by
steps ascending, with at most one record per username (case-insensitive).

The file is kept read-only between updates. Updates are read-merge-rewrite
with no locking: concurrent external writers are last-writer-wins.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from ..errors import LeaderboardError
from ..logging_utils import get_logger

logger = get_logger("labyrinth.leaderboard")

__all__ = [
    "LeaderboardRecord",
    "clean_username",
    "parse_line",
    "merge_record",
    "sort_records",
    "format_table",
    "LeaderboardFile",
]


def clean_username(name: str) -> str:
    """Make ``name`` safe for the one-line record format.

    The field separator becomes ``/`` and any run of whitespace (newlines
    included) becomes a single space.
    """
    cleaned = " ".join(name.replace("|", "/").split())
    return cleaned or "anonymous"


@dataclass(frozen=True)
class LeaderboardRecord:
    username: str
    steps: int
    time_seconds: int

    def __post_init__(self):
        object.__setattr__(self, "username", clean_username(self.username))

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.time_seconds, self.steps)

    def beats(self, other: "LeaderboardRecord") -> bool:
        return self.sort_key < other.sort_key

    def to_line(self) -> str:
        return f"{self.username} | {self.steps} steps | {self.time_seconds} s"


def parse_line(line: str) -> LeaderboardRecord:
    """Parse one leaderboard line; raises ValueError when malformed."""
    parts = [p.strip() for p in line.strip().split("|")]
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"expected 3 fields, got {len(parts)}")
    steps_s, steps_unit = (parts[1].split() + [""])[:2]
    time_s, time_unit = (parts[2].split() + [""])[:2]
    if steps_unit != "steps" or time_unit != "s":
        raise ValueError("missing unit")
    steps, secs = int(steps_s), int(time_s)
    if steps < 0 or secs < 0:
        raise ValueError("negative value")
    return LeaderboardRecord(parts[0], steps, secs)


def sort_records(records: List[LeaderboardRecord]) -> List[LeaderboardRecord]:
    return sorted(records, key=lambda r: r.sort_key)


def merge_record(
    records: List[LeaderboardRecord], new: LeaderboardRecord
) -> Tuple[List[LeaderboardRecord], bool]:
    """Merge ``new`` into ``records``.

    An existing record for the same player is replaced only when ``new`` is
    strictly better. Duplicate usernames already present collapse to their
    best record. Returns the sorted records and whether anything changed.
    """
    best: Dict[str, LeaderboardRecord] = {}
    for rec in records:
        k = rec.username.lower()
        if k not in best or rec.beats(best[k]):
            best[k] = rec
    key = new.username.lower()
    existing = best.get(key)
    if existing is not None and not new.beats(existing):
        return sort_records(list(best.values())), False
    best[key] = new
    return sort_records(list(best.values())), True


def format_table(records: List[LeaderboardRecord]) -> List[str]:
    if not records:
        return ["(no records yet)"]
    width = max(len(r.username) for r in records)
    return [
        f"{rank:>3}. {r.username:<{width}}  {r.steps:>5} steps  {r.time_seconds:>5} s"
        for rank, r in enumerate(records, start=1)
    ]


class LeaderboardFile:
    def __init__(self, path) -> None:
        self.path = Path(path)

    def _set_read_only(self, read_only: bool) -> None:
        mode = self.path.stat().st_mode
        if read_only:
            mode &= ~(stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH)
        else:
            mode |= stat.S_IWUSR
        os.chmod(self.path, mode)

    def read(self) -> List[LeaderboardRecord]:
        """Return records in file order; a missing file is created empty."""
        if not self.path.exists():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.touch()
                self._set_read_only(True)
            except OSError as e:
                logger.error(event="leaderboard_io_error", path=str(self.path), error=str(e))
                raise LeaderboardError(self.path, str(e)) from e
            return []
        try:
            data = self.path.read_bytes()
        except OSError as e:
            logger.error(event="leaderboard_io_error", path=str(self.path), error=str(e))
            raise LeaderboardError(self.path, str(e)) from e

        records: List[LeaderboardRecord] = []
        # decoded per line so one undecodable line is skipped like any other bad line
        for lineno, raw in enumerate(data.splitlines(), start=1):
            if not raw.strip():
                continue
            try:
                records.append(parse_line(raw.decode("utf-8")))
            except ValueError as e:
                logger.warn(event="leaderboard_bad_line", path=str(self.path), line=lineno, error=str(e))
                continue
        return records

    def write(self, records: List[LeaderboardRecord]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.path.exists():
                self._set_read_only(False)
            with self.path.open("w", encoding="utf-8") as f:
                for rec in records:
                    f.write(rec.to_line() + "\n")
        except OSError as e:
            logger.error(event="leaderboard_io_error", path=str(self.path), error=str(e))
            raise LeaderboardError(self.path, str(e)) from e
        finally:
            if self.path.exists():
                try:
                    self._set_read_only(True)
                except OSError:
                    logger.warn(event="leaderboard_chmod_failed", path=str(self.path))

    def ranked(self) -> List[LeaderboardRecord]:
        return sort_records(self.read())

    def submit(self, record: LeaderboardRecord) -> bool:
        """Read, merge and rewrite; returns True when the file changed."""
        merged, changed = merge_record(self.read(), record)
        if changed:
            self.write(merged)
        logger.info(
            event="leaderboard_update",
            username=record.username,
            steps=record.steps,
            time=record.time_seconds,
            changed=changed,
        )
        return changed
