"""SVG coverage badge generation."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment

GREEN = "#4c1"
YELLOW = "#dfb317"
RED = "#e05d44"

_LEFT_WIDTH = 63
_RIGHT_WIDTH = 48
_HEIGHT = 20

_BADGE_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="{{ total_width }}" height="{{ height }}" role="img" aria-label="coverage: {{ label }}">
  <title>coverage: {{ label }}</title>
  <g shape-rendering="crispEdges">
    <rect width="{{ left_width }}" height="{{ height }}" fill="#555"/>
    <rect x="{{ left_width }}" width="{{ right_width }}" height="{{ height }}" fill="{{ color }}"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" text-rendering="geometricPrecision" font-size="11">
    <text aria-hidden="true" x="{{ left_center }}" y="15" fill="#010101" fill-opacity=".3">coverage</text>
    <text x="{{ left_center }}" y="14">coverage</text>
    <text aria-hidden="true" x="{{ right_center }}" y="15" fill="#010101" fill-opacity=".3">{{ label }}</text>
    <text x="{{ right_center }}" y="14">{{ label }}</text>
  </g>
</svg>"""

_environment = Environment(autoescape=True, keep_trailing_newline=False)


@dataclass(frozen=True)
class BadgeThresholds:
    """Upper bounds for the red and yellow badge bands."""

    red: float = 40.0
    yellow: float = 70.0


def parse_thresholds(value: str) -> BadgeThresholds:
    """Parse a ``red,yellow`` threshold pair such as ``40,70``."""
    parts = value.split(",")
    if len(parts) != 2:
        raise ValueError("expected format: red,yellow (e.g., 40,70)")
    try:
        red = float(parts[0].strip())
    except ValueError as exc:
        raise ValueError(f"invalid red threshold: {parts[0].strip()!r}") from exc
    try:
        yellow = float(parts[1].strip())
    except ValueError as exc:
        raise ValueError(f"invalid yellow threshold: {parts[1].strip()!r}") from exc
    if not (0 <= red <= 100 and 0 <= yellow <= 100):
        raise ValueError("thresholds must be between 0 and 100")
    if red >= yellow:
        raise ValueError("red threshold must be less than yellow threshold")
    return BadgeThresholds(red=red, yellow=yellow)


def badge_color(percent: float, thresholds: BadgeThresholds) -> str:
    if percent >= thresholds.yellow:
        return GREEN
    if percent > thresholds.red:
        return YELLOW
    return RED


def render_badge(percent: float, thresholds: BadgeThresholds | None = None) -> str:
    """Return the SVG markup for a coverage badge."""
    thresholds = thresholds or BadgeThresholds()
    clamped = min(max(percent, 0.0), 100.0)
    template = _environment.from_string(_BADGE_TEMPLATE)
    return template.render(
        total_width=_LEFT_WIDTH + _RIGHT_WIDTH,
        height=_HEIGHT,
        left_width=_LEFT_WIDTH,
        right_width=_RIGHT_WIDTH,
        left_center=_LEFT_WIDTH // 2,
        right_center=_LEFT_WIDTH + _RIGHT_WIDTH // 2,
        color=badge_color(clamped, thresholds),
        label=f"{clamped:.1f}%",
    )


def write_badge(
    percent: float, output: str | Path, thresholds: BadgeThresholds | None = None
) -> None:
    """Write the badge to ``output``, or to stdout when it is ``-``."""
    svg = render_badge(percent, thresholds)
    if str(output) == "-":
        sys.stdout.write(svg)
        return
    Path(output).write_text(svg, encoding="utf-8")


__all__ = [
    "BadgeThresholds",
    "badge_color",
    "parse_thresholds",
    "render_badge",
    "write_badge",
]
