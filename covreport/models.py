"""Core data models shared across covreport components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Tuple


class LineCoverage(IntEnum):
    """Per-line coverage classification."""

    NO_STATEMENT = 0
    UNCOVERED = 1
    COVERED = 2


class DiffState(IntEnum):
    """Per-line change classification between two coverage runs."""

    NO_CHANGE = 0
    NEWLY_COVERED = 1
    NEWLY_UNCOVERED = 2
    UNCHANGED_COVERED = 3
    UNCHANGED_UNCOVERED = 4


class NodeType(str, Enum):
    """Kind of entry in the file tree."""

    DIRECTORY = "dir"
    FILE = "file"


@dataclass(frozen=True)
class FileRecord:
    """A single source file with its per-line coverage."""

    id: int
    path: str
    lines: Tuple[str, ...]
    coverage: Tuple[LineCoverage, ...]
    diff_state: Optional[Tuple[DiffState, ...]] = None

    def __post_init__(self) -> None:
        if len(self.lines) != len(self.coverage):
            raise ValueError(
                f"{self.path}: {len(self.lines)} lines but {len(self.coverage)} coverage entries"
            )
        if self.diff_state is not None and len(self.diff_state) != len(self.lines):
            raise ValueError(
                f"{self.path}: {len(self.lines)} lines but {len(self.diff_state)} diff states"
            )

    def with_id(self, new_id: int) -> "FileRecord":
        return replace(self, id=new_id)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "path": self.path,
            "lines": list(self.lines),
            "coverage": [int(code) for code in self.coverage],
        }
        if self.diff_state is not None:
            data["diffState"] = [int(state) for state in self.diff_state]
        return data


@dataclass(frozen=True)
class TreeNode:
    """Directory or file entry in the report tree.

    File nodes refer to their record by index into ``Snapshot.files`` so the
    tree stays acyclic and serialisable.
    """

    name: str
    type: NodeType
    file_id: Optional[int] = None
    children: Tuple["TreeNode", ...] = ()

    @property
    def is_dir(self) -> bool:
        return self.type is NodeType.DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type.value}
        if self.file_id is not None:
            data["fileId"] = self.file_id
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class Summary:
    """Aggregate line coverage statistics."""

    total_lines: int = 0
    covered_lines: int = 0
    percent: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalLines": self.total_lines,
            "coveredLines": self.covered_lines,
            "percent": self.percent,
        }


@dataclass(frozen=True)
class DiffSummary:
    """Coverage changes between a base run and the current run."""

    newly_covered_lines: int
    newly_uncovered_lines: int
    delta_percent: float
    base_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "newlyCoveredLines": self.newly_covered_lines,
            "newlyUncoveredLines": self.newly_uncovered_lines,
            "deltaPercent": self.delta_percent,
            "basePercent": self.base_percent,
        }


def _empty_root() -> TreeNode:
    return TreeNode(name=".", type=NodeType.DIRECTORY)


@dataclass(frozen=True)
class Snapshot:
    """Complete derived report state for one coverage run or diff."""

    files: Tuple[FileRecord, ...] = ()
    tree: TreeNode = field(default_factory=_empty_root)
    summary: Summary = field(default_factory=Summary)
    diff_summary: Optional[DiffSummary] = None
    is_diff_mode: bool = False

    def file_by_path(self, path: str) -> Optional[FileRecord]:
        for record in self.files:
            if record.path == path:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "files": [record.to_dict() for record in self.files],
            "tree": self.tree.to_dict(),
            "summary": self.summary.to_dict(),
        }
        if self.diff_summary is not None:
            data["diffSummary"] = self.diff_summary.to_dict()
        data["isDiffMode"] = self.is_diff_mode
        return data

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


__all__ = [
    "DiffState",
    "DiffSummary",
    "FileRecord",
    "LineCoverage",
    "NodeType",
    "Snapshot",
    "Summary",
    "TreeNode",
]
