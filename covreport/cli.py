"""CLI entrypoint for covreport."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import TextIO

from .config import ConfigError, load_config
from .filters import PatternError
from .git.changes import GitError
from .logging import configure_logging
from .manifest import ModulePathNotFoundError
from .models import Snapshot
from .orchestrator import BaseProfileError, EmptyReportError, Orchestrator, ReportOptions
from .profile import ProfileError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="covreport",
        description="Build a structured coverage report from a Go coverage profile.",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Coverage profile path (defaults to coverage.out).",
    )
    parser.add_argument(
        "--base",
        default=None,
        help="Base coverage profile to diff against.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JSON file, or - for stdout (default).",
    )
    parser.add_argument(
        "--badge",
        default=None,
        help="Write an SVG coverage badge to this path (- for stdout).",
    )
    parser.add_argument(
        "--badge-threshold",
        default=None,
        metavar="RED,YELLOW",
        help="Badge color thresholds, e.g. 40,70.",
    )
    parser.add_argument(
        "--src",
        default=None,
        help="Source root containing go.mod (defaults to current directory).",
    )
    parser.add_argument(
        "--ref",
        default=None,
        help="Git ref or range; only files changed there are reported.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="REGEX",
        help="Exclude files whose path matches this regex (repeatable).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .covreport.yml (defaults to the source root).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    return parser


def _resolve_options(args: argparse.Namespace) -> ReportOptions:
    config_path = Path(args.config or args.src or ".")
    options = ReportOptions.from_config(load_config(config_path))
    overrides = {
        key: value
        for key, value in (
            ("profile", args.profile),
            ("base", args.base),
            ("output", args.output),
            ("badge", args.badge),
            ("src", args.src),
            ("ref", args.ref),
        )
        if value is not None
    }
    if args.badge_threshold is not None:
        overrides["thresholds"] = args.badge_threshold
    if args.exclude:
        overrides["exclude"] = [*options.exclude, *args.exclude]
    return replace(options, **overrides)


def print_summary(snapshot: Snapshot, stream: TextIO) -> None:
    """Print the one- or two-line coverage summary."""
    summary = snapshot.summary
    if snapshot.is_diff_mode and snapshot.diff_summary is not None:
        diff = snapshot.diff_summary
        print(
            f"Coverage: {summary.percent:.1f}% (Δ{diff.delta_percent:+.1f}% from base)",
            file=stream,
        )
        print(
            f"Changes: +{diff.newly_covered_lines} newly covered, "
            f"-{diff.newly_uncovered_lines} regressions",
            file=stream,
        )
    else:
        print(
            f"Coverage: {summary.percent:.1f}% ({summary.covered_lines}/{summary.total_lines} lines)",
            file=stream,
        )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for covreport."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)

    try:
        options = _resolve_options(args)
        if options.badge:
            options.badge_thresholds()
    except ConfigError as exc:
        parser.exit(1, f"Error loading configuration: {exc}\n")
    except ValueError as exc:
        parser.exit(1, f"Error parsing badge thresholds: {exc}\n")

    orchestrator = Orchestrator()
    try:
        outcome = orchestrator.run(options)
    except ModulePathNotFoundError as exc:
        parser.exit(1, f"Error detecting module path: {exc}\n")
    except BaseProfileError as exc:
        parser.exit(1, f"Error parsing base coverage: {exc}\n")
    except ProfileError as exc:
        parser.exit(1, f"Error parsing coverage: {exc}\n")
    except PatternError as exc:
        parser.exit(1, f"Error applying exclusion patterns: {exc}\n")
    except GitError as exc:
        parser.exit(1, f"Error resolving git changes: {exc}\n")
    except EmptyReportError:
        parser.exit(1, "Warning: all files excluded by patterns\n")
    except OSError as exc:
        parser.exit(1, f"Error writing report: {exc}\n")

    if not args.quiet:
        print(f"Coverage report written to {outcome.output}", file=sys.stderr)
        print_summary(outcome.snapshot, sys.stderr)
        if outcome.badge:
            print(f"Coverage badge written to {outcome.badge}", file=sys.stderr)


if __name__ == "__main__":
    main(sys.argv[1:])
