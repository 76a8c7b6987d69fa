"""Turn a coverage profile and its source tree into a Snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .logging import get_logger
from .manifest import resolve_module_path
from .models import FileRecord, LineCoverage, Snapshot
from .profile import ProfileBlock, read_profile
from .summary import summarize
from .tree import build_tree

_logger = get_logger("parser")


def parse(profile_path: str | Path, src_root: str | Path) -> Snapshot:
    """Parse ``profile_path`` against the sources under ``src_root``.

    Files that cannot be read at either derived location are skipped so one
    stale entry does not block the rest of the report. When two identifiers
    resolve to the same source path, the first in identifier order wins.
    """
    root = Path(src_root)
    profiles = read_profile(profile_path)
    module_path = resolve_module_path(root)
    _logger.debug("Module path %s; %d files in profile", module_path, len(profiles))

    files: List[FileRecord] = []
    seen: Set[str] = set()
    for profile in profiles:
        loaded = _load_source(root, module_path, profile.file_name)
        if loaded is None:
            _logger.debug("Skipping %s: source not readable", profile.file_name)
            continue
        rel_path, lines = loaded
        if rel_path in seen:
            _logger.debug("Skipping %s: %s already reported", profile.file_name, rel_path)
            continue
        seen.add(rel_path)
        coverage = compute_line_coverage(len(lines), profile.blocks)
        files.append(
            FileRecord(
                id=len(files),
                path=rel_path,
                lines=tuple(lines),
                coverage=coverage,
            )
        )

    skipped = len(profiles) - len(files)
    if skipped:
        _logger.info("Skipped %d unreadable or duplicate source files", skipped)
    return snapshot_from_files(files)


def snapshot_from_files(files: Sequence[FileRecord]) -> Snapshot:
    """Assemble a plain (non-diff) snapshot with a fresh tree and summary."""
    records = tuple(files)
    tree = build_tree((record.path, record.id) for record in records)
    return Snapshot(files=records, tree=tree, summary=summarize(records))


def compute_line_coverage(
    line_count: int, blocks: Iterable[ProfileBlock]
) -> Tuple[LineCoverage, ...]:
    """Fold coverage blocks into one classification per source line."""
    coverage = [LineCoverage.NO_STATEMENT] * line_count
    for block in blocks:
        if block.num_stmt <= 0:
            continue
        first = max(block.start_line, 1)
        last = min(block.end_line, line_count)
        for lineno in range(first, last + 1):
            index = lineno - 1
            if block.count > 0:
                coverage[index] = LineCoverage.COVERED
            elif coverage[index] is LineCoverage.NO_STATEMENT:
                coverage[index] = LineCoverage.UNCOVERED
    return tuple(coverage)


def candidate_paths(module_path: str, file_name: str) -> List[str]:
    """Return root-relative paths to try for a profile file identifier."""
    prefix = f"{module_path}/"
    primary = file_name[len(prefix) :] if file_name.startswith(prefix) else file_name
    candidates = [primary]
    # Identifiers with a deeper or different prefix (monorepos): take the
    # fourth segment onward.
    parts = file_name.split("/", 3)
    if len(parts) == 4 and parts[3] not in candidates:
        candidates.append(parts[3])
    return candidates


def read_lines(path: Path) -> List[str]:
    """Read a source file as a list of lines without terminators."""
    with path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
        text = handle.read()
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _load_source(
    root: Path, module_path: str, file_name: str
) -> Optional[Tuple[str, List[str]]]:
    for rel_path in candidate_paths(module_path, file_name):
        try:
            return rel_path, read_lines(root / rel_path)
        except OSError as exc:
            _logger.debug("Cannot read %s: %s", root / rel_path, exc)
    return None


__all__ = ["candidate_paths", "compute_line_coverage", "parse", "read_lines", "snapshot_from_files"]
