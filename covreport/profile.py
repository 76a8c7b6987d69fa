"""Reader for block-based coverage profiles (``go test -coverprofile``)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

_MODE_PREFIX = "mode: "
_KNOWN_MODES = {"set", "count", "atomic"}
_BLOCK_RE = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


class ProfileError(RuntimeError):
    """Raised when a coverage profile cannot be parsed."""


@dataclass(frozen=True)
class ProfileBlock:
    """One instrumented source range and its execution count."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def span(self) -> Tuple[int, int, int, int]:
        return (self.start_line, self.start_col, self.end_line, self.end_col)


@dataclass
class FileProfile:
    """Blocks reported for a single file identifier."""

    file_name: str
    mode: str
    blocks: List[ProfileBlock] = field(default_factory=list)


def read_profile(path: str | Path) -> List[FileProfile]:
    """Parse a coverage profile into per-file block lists.

    Files are ordered by identifier, as ``go tool cover`` orders them. Blocks
    repeated for the same range (merged profiles) are folded into one: counts
    are summed, except in ``set`` mode where a block is simply hit or not.
    """
    profile_path = Path(path)
    try:
        text = profile_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProfileError(f"cannot read coverage profile {profile_path}: {exc}") from exc
    return parse_profile_text(text, source=str(profile_path))


def parse_profile_text(text: str, *, source: str = "<profile>") -> List[FileProfile]:
    mode: str | None = None
    profiles: Dict[str, FileProfile] = {}
    positions: Dict[str, Dict[Tuple[int, int, int, int], int]] = {}

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if mode is None:
            mode = _parse_mode(line, source=source, lineno=lineno)
            continue
        if line.startswith(_MODE_PREFIX.rstrip()):
            repeated = _parse_mode(line, source=source, lineno=lineno)
            if repeated != mode:
                raise ProfileError(
                    f"{source}:{lineno}: mode {repeated!r} conflicts with declared mode {mode!r}"
                )
            continue

        file_name, block = _parse_block(line, source=source, lineno=lineno)
        profile = profiles.get(file_name)
        if profile is None:
            profile = profiles[file_name] = FileProfile(file_name=file_name, mode=mode)
            positions[file_name] = {}
        seen = positions[file_name]
        index = seen.get(block.span)
        if index is None:
            seen[block.span] = len(profile.blocks)
            profile.blocks.append(block)
        else:
            profile.blocks[index] = _merge(profile.blocks[index], block, mode)

    return sorted(profiles.values(), key=lambda profile: profile.file_name)


def _parse_mode(line: str, *, source: str, lineno: int) -> str:
    if not line.startswith(_MODE_PREFIX):
        raise ProfileError(f"{source}:{lineno}: bad mode line {line!r}")
    mode = line[len(_MODE_PREFIX) :].strip()
    if mode not in _KNOWN_MODES:
        raise ProfileError(f"{source}:{lineno}: unknown coverage mode {mode!r}")
    return mode


def _parse_block(line: str, *, source: str, lineno: int) -> Tuple[str, ProfileBlock]:
    match = _BLOCK_RE.match(line)
    if match is None:
        raise ProfileError(f"{source}:{lineno}: line {line!r} doesn't match expected format")
    start_line, start_col, end_line, end_col, num_stmt, count = (int(value) for value in match.groups()[1:])
    if end_line < start_line:
        raise ProfileError(f"{source}:{lineno}: block ends before it starts in {line!r}")
    block = ProfileBlock(
        start_line=start_line,
        start_col=start_col,
        end_line=end_line,
        end_col=end_col,
        num_stmt=num_stmt,
        count=count,
    )
    return match.group(1), block


def _merge(existing: ProfileBlock, incoming: ProfileBlock, mode: str) -> ProfileBlock:
    if mode == "set":
        count = max(existing.count, incoming.count)
    else:
        count = existing.count + incoming.count
    return ProfileBlock(
        start_line=existing.start_line,
        start_col=existing.start_col,
        end_line=existing.end_line,
        end_col=existing.end_col,
        num_stmt=existing.num_stmt,
        count=count,
    )


__all__ = ["FileProfile", "ProfileBlock", "ProfileError", "parse_profile_text", "read_profile"]
