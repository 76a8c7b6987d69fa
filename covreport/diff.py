"""Line-level comparison of two coverage snapshots.

Lines are compared by position only. If source lines moved between the two
measured revisions, changes are attributed to whatever line now sits at the
old index; no content-based realignment is attempted.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from .models import DiffState, DiffSummary, FileRecord, LineCoverage, Snapshot

_COVERED = LineCoverage.COVERED
_UNCOVERED = LineCoverage.UNCOVERED

# (base, current) -> state; ``None`` stands for a line with no base record.
_TRANSITIONS: Dict[Tuple[Optional[LineCoverage], LineCoverage], DiffState] = {
    (_UNCOVERED, _COVERED): DiffState.NEWLY_COVERED,
    (None, _COVERED): DiffState.NEWLY_COVERED,
    (_COVERED, _UNCOVERED): DiffState.NEWLY_UNCOVERED,
    (None, _UNCOVERED): DiffState.NEWLY_UNCOVERED,
    (_COVERED, _COVERED): DiffState.UNCHANGED_COVERED,
    (_UNCOVERED, _UNCOVERED): DiffState.UNCHANGED_UNCOVERED,
}


def classify_line(base: Optional[LineCoverage], current: LineCoverage) -> DiffState:
    """Return the diff state for one line; unlisted pairs are NO_CHANGE."""
    key = (None if base is None else LineCoverage(base), LineCoverage(current))
    return _TRANSITIONS.get(key, DiffState.NO_CHANGE)


def diff_states(
    base: Optional[Sequence[LineCoverage]], current: Sequence[LineCoverage]
) -> Tuple[DiffState, ...]:
    states = []
    for index, code in enumerate(current):
        previous = base[index] if base is not None and index < len(base) else None
        states.append(classify_line(previous, code))
    return tuple(states)


def compute_diff(base: Snapshot, current: Snapshot) -> Snapshot:
    """Annotate ``current`` with per-line changes relative to ``base``.

    Files that exist only in ``base`` are ignored. The returned snapshot keeps
    the current tree and summary.
    """
    base_by_path = {record.path: record for record in base.files}
    newly_covered = 0
    newly_uncovered = 0
    files = []
    for record in current.files:
        matched: Optional[FileRecord] = base_by_path.get(record.path)
        states = diff_states(matched.coverage if matched else None, record.coverage)
        newly_covered += states.count(DiffState.NEWLY_COVERED)
        newly_uncovered += states.count(DiffState.NEWLY_UNCOVERED)
        files.append(
            FileRecord(
                id=record.id,
                path=record.path,
                lines=record.lines,
                coverage=record.coverage,
                diff_state=states,
            )
        )

    summary = DiffSummary(
        newly_covered_lines=newly_covered,
        newly_uncovered_lines=newly_uncovered,
        delta_percent=current.summary.percent - base.summary.percent,
        base_percent=base.summary.percent,
    )
    return Snapshot(
        files=tuple(files),
        tree=current.tree,
        summary=current.summary,
        diff_summary=summary,
        is_diff_mode=True,
    )


__all__ = ["classify_line", "compute_diff", "diff_states"]
