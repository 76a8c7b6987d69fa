"""File tree construction for coverage snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .models import NodeType, TreeNode

ROOT_NAME = "."


@dataclass
class _Scratch:
    name: str
    type: NodeType
    file_id: Optional[int] = None
    children: List["_Scratch"] = field(default_factory=list)
    index: Dict[str, "_Scratch"] = field(default_factory=dict)


def build_tree(entries: Iterable[Tuple[str, int]]) -> TreeNode:
    """Build a sorted directory tree from ``(path, file_id)`` pairs.

    Directories sort before files and names ascend within each kind, so the
    result does not depend on input order.
    """
    root = _Scratch(name=ROOT_NAME, type=NodeType.DIRECTORY)
    for path, file_id in entries:
        _insert(root, path.split("/"), file_id)
    return _freeze(root)


def _insert(node: _Scratch, parts: List[str], file_id: int) -> None:
    for position, name in enumerate(parts):
        is_file = position == len(parts) - 1
        child = node.index.get(name)
        if child is None:
            if is_file:
                child = _Scratch(name=name, type=NodeType.FILE, file_id=file_id)
            else:
                child = _Scratch(name=name, type=NodeType.DIRECTORY)
            node.index[name] = child
            node.children.append(child)
        node = child


def _sort_key(node: _Scratch) -> Tuple[int, str]:
    return (0 if node.type is NodeType.DIRECTORY else 1, node.name)


def _freeze(node: _Scratch) -> TreeNode:
    if node.type is NodeType.FILE:
        return TreeNode(name=node.name, type=NodeType.FILE, file_id=node.file_id)
    children = tuple(_freeze(child) for child in sorted(node.children, key=_sort_key))
    return TreeNode(name=node.name, type=NodeType.DIRECTORY, children=children)


def iter_files(node: TreeNode) -> Iterable[TreeNode]:
    """Yield every file leaf under ``node`` in tree order."""
    if node.type is NodeType.FILE:
        yield node
        return
    for child in node.children:
        yield from iter_files(child)


__all__ = ["ROOT_NAME", "build_tree", "iter_files"]
