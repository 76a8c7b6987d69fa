"""Pipeline orchestration: parse, diff, filter, and write report outputs."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .config import CovReportConfig
from .diff import compute_diff
from .filters import compile_patterns, filter_by_paths, filter_by_patterns
from .git.changes import ChangedFilesResolver
from .logging import get_logger
from .models import Snapshot
from .parser import parse
from .postproc.badges import BadgeThresholds, parse_thresholds, write_badge
from .profile import ProfileError

DEFAULT_PROFILE = "coverage.out"
DEFAULT_OUTPUT = "-"


class EmptyReportError(RuntimeError):
    """Raised when exclusion patterns remove every file from the report."""


class BaseProfileError(ProfileError):
    """Raised when the base profile of a diff run cannot be parsed."""


@dataclass
class ReportOptions:
    """Inputs for a single report run."""

    profile: str = DEFAULT_PROFILE
    src: str = "."
    base: Optional[str] = None
    output: str = DEFAULT_OUTPUT
    ref: Optional[str] = None
    exclude: List[str] = field(default_factory=list)
    badge: Optional[str] = None
    thresholds: Optional[str] = None

    def badge_thresholds(self) -> BadgeThresholds:
        """Parse ``thresholds`` (``RED,YELLOW``); only needed when a badge is written."""
        if self.thresholds is None:
            return BadgeThresholds()
        return parse_thresholds(self.thresholds)

    @classmethod
    def from_config(cls, config: CovReportConfig) -> "ReportOptions":
        """Seed options from .covreport.yml; relative paths resolve against its directory."""
        return cls(
            profile=_from_root(config.root, config.profile) or DEFAULT_PROFILE,
            src=_from_root(config.root, config.src) or ".",
            base=_from_root(config.root, config.base),
            output=(
                _from_root(config.root, config.output)
                if config.output not in (None, "", "-")
                else DEFAULT_OUTPUT
            ),
            ref=config.ref,
            exclude=list(config.exclude),
            badge=_from_root(config.root, config.badge.path),
            thresholds=_thresholds_from_config(config),
        )


@dataclass
class ReportOutcome:
    """Result of a report run."""

    snapshot: Snapshot
    output: str
    badge: Optional[str] = None


class Orchestrator:
    """Coordinates the coverage report pipeline."""

    def __init__(
        self,
        parser: Callable[[str, str], Snapshot] | None = None,
        changed_files: ChangedFilesResolver | None = None,
    ) -> None:
        self._parse = parser or parse
        self.changed_files = changed_files or ChangedFilesResolver()
        self.logger = get_logger("orchestrator")

    def build_snapshot(self, options: ReportOptions) -> Snapshot:
        """Run parsing, diffing, and filtering without writing anything."""
        # Validate patterns before doing any file I/O.
        compile_patterns(options.exclude)

        self.logger.info("Parsing coverage profile %s", options.profile)
        snapshot = self._parse(options.profile, options.src)
        self.logger.debug("Parsed %d files", len(snapshot.files))

        if options.base:
            self.logger.info("Comparing against base profile %s", options.base)
            try:
                base = self._parse(options.base, options.src)
            except ProfileError as exc:
                raise BaseProfileError(str(exc)) from exc
            snapshot = compute_diff(base, snapshot)

        if options.ref:
            changed = self.changed_files.resolve(options.src, options.ref)
            snapshot = filter_by_paths(snapshot, changed)
            self.logger.info(
                "Restricted report to %d files changed in %s", len(snapshot.files), options.ref
            )

        if options.exclude:
            before = len(snapshot.files)
            snapshot = filter_by_patterns(snapshot, options.exclude)
            self.logger.debug("Exclusion patterns removed %d files", before - len(snapshot.files))
            if not snapshot.files:
                self.logger.warning("All files excluded by patterns")
                raise EmptyReportError("all files excluded by patterns")

        return snapshot

    def run(self, options: ReportOptions) -> ReportOutcome:
        """Build the snapshot and write the JSON report and optional badge."""
        thresholds = options.badge_thresholds() if options.badge else None
        snapshot = self.build_snapshot(options)
        self._write_report(snapshot, options.output)
        self.logger.debug("Coverage report written to %s", options.output)

        if options.badge and thresholds is not None:
            write_badge(snapshot.summary.percent, options.badge, thresholds)
            self.logger.debug("Coverage badge written to %s", options.badge)

        return ReportOutcome(snapshot=snapshot, output=options.output, badge=options.badge)

    @staticmethod
    def _write_report(snapshot: Snapshot, output: str) -> None:
        if output in ("", "-"):
            sys.stdout.write(snapshot.to_json())
            sys.stdout.write("\n")
            return
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(snapshot.to_json(indent=2) + "\n", encoding="utf-8")


def _thresholds_from_config(config: CovReportConfig) -> Optional[str]:
    if config.badge.red is None and config.badge.yellow is None:
        return None
    defaults = BadgeThresholds()
    red = config.badge.red if config.badge.red is not None else defaults.red
    yellow = config.badge.yellow if config.badge.yellow is not None else defaults.yellow
    return f"{red},{yellow}"


def _from_root(root: Path, value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str(root / candidate)


__all__ = ["BaseProfileError", "EmptyReportError", "Orchestrator", "ReportOptions", "ReportOutcome"]
