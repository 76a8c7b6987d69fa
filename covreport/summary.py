"""Aggregate coverage statistics."""

from __future__ import annotations

from typing import Iterable

from .models import FileRecord, LineCoverage, Summary


def summarize(files: Iterable[FileRecord]) -> Summary:
    """Count instrumented and covered lines across ``files``."""
    total = 0
    covered = 0
    for record in files:
        for code in record.coverage:
            if code == LineCoverage.NO_STATEMENT:
                continue
            total += 1
            if code == LineCoverage.COVERED:
                covered += 1
    return Summary(total_lines=total, covered_lines=covered, percent=percent_of(covered, total))


def percent_of(covered: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return covered / total * 100


__all__ = ["percent_of", "summarize"]
