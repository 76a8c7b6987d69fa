"""Restrict a snapshot to a subset of its files."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import AbstractSet, Callable, Iterable, List, Optional, Pattern

from .models import DiffState, DiffSummary, FileRecord, Snapshot
from .summary import summarize
from .tree import build_tree


class PatternError(ValueError):
    """Raised when an exclusion pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid regex pattern {pattern!r}: {reason}")
        self.pattern = pattern


def filter_by_paths(
    snapshot: Optional[Snapshot], allowed: AbstractSet[str]
) -> Optional[Snapshot]:
    """Keep only files whose path is in ``allowed``."""
    if snapshot is None:
        return None
    return _retain(snapshot, lambda record: record.path in allowed)


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    compiled: List[Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise PatternError(pattern, str(exc)) from exc
    return compiled


def filter_by_patterns(snapshot: Snapshot, patterns: Iterable[str]) -> Snapshot:
    """Drop files whose path matches any of ``patterns``.

    Every pattern is compiled before any file is examined; one bad pattern
    aborts the whole operation.
    """
    compiled = compile_patterns(patterns)
    return _retain(
        snapshot,
        lambda record: not any(regex.search(record.path) for regex in compiled),
    )


def _retain(snapshot: Snapshot, keep: Callable[[FileRecord], bool]) -> Snapshot:
    files: List[FileRecord] = []
    for record in snapshot.files:
        if keep(record):
            files.append(record.with_id(len(files)))
    tree = build_tree((record.path, record.id) for record in files)
    return Snapshot(
        files=tuple(files),
        tree=tree,
        summary=summarize(files),
        diff_summary=_recount(snapshot.diff_summary, files),
        is_diff_mode=snapshot.is_diff_mode,
    )


def _recount(
    diff_summary: Optional[DiffSummary], files: List[FileRecord]
) -> Optional[DiffSummary]:
    # Line counts follow the retained files; the percentages describe the
    # whole base and current runs and are kept as-is.
    if diff_summary is None:
        return None
    states = [state for record in files for state in record.diff_state or ()]
    return replace(
        diff_summary,
        newly_covered_lines=states.count(DiffState.NEWLY_COVERED),
        newly_uncovered_lines=states.count(DiffState.NEWLY_UNCOVERED),
    )


__all__ = ["PatternError", "compile_patterns", "filter_by_paths", "filter_by_patterns"]
