"""
Language tally and chart helpers.

aggregate_languages() folds a repository list into {language: repo count}.
The rest of this module turns a tally into pie chart geometry and formats
repository timestamps for display.
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, Iterable, List, Optional

from github_api import RepositorySummary

LanguageTally = Dict[str, int]

COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884d8"]


# -----------------------------
# Aggregation
# -----------------------------
def aggregate_languages(repos: Iterable[RepositorySummary]) -> LanguageTally:
    """Count repositories per primary language; repositories without one are skipped."""
    tally: LanguageTally = {}
    for repo in repos:
        if repo.language:
            tally[repo.language] = tally.get(repo.language, 0) + 1
    return tally


# -----------------------------
# Chart
# -----------------------------
def chart_data(tally: LanguageTally) -> List[Dict[str, Any]]:
    return [{"name": name, "value": value} for name, value in tally.items()]


def _point(cx: float, cy: float, r: float, angle: float) -> str:
    return f"{cx + r * math.cos(angle):.2f},{cy + r * math.sin(angle):.2f}"


def _wedge_path(cx: float, cy: float, r: float, start: float, end: float) -> str:
    if end - start >= 2 * math.pi - 1e-9:
        # An arc cannot start and end on the same point, so draw two halves.
        top = _point(cx, cy, r, -math.pi / 2)
        bottom = _point(cx, cy, r, math.pi / 2)
        return f"M {top} A {r},{r} 0 1,1 {bottom} A {r},{r} 0 1,1 {top} Z"
    large_arc = 1 if end - start > math.pi else 0
    return (
        f"M {cx:.2f},{cy:.2f} L {_point(cx, cy, r, start)} "
        f"A {r},{r} 0 {large_arc},1 {_point(cx, cy, r, end)} Z"
    )


def pie_slices(
    tally: LanguageTally,
    *,
    radius: float = 100.0,
    cx: float = 150.0,
    cy: float = 150.0,
    colors: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """
    One wedge per language, clockwise from 12 o'clock, in tally order.

    Each slice carries name, value, share (0..1), percent, color and an SVG path.
    """
    palette = colors or COLORS
    total = sum(tally.values())
    if total <= 0:
        return []

    slices: List[Dict[str, Any]] = []
    angle = -math.pi / 2
    for index, (name, value) in enumerate(tally.items()):
        share = value / total
        end = angle + share * 2 * math.pi
        slices.append(
            {
                "name": name,
                "value": value,
                "share": share,
                "percent": round(share * 100, 1),
                "color": palette[index % len(palette)],
                "path": _wedge_path(cx, cy, radius, angle, end),
            }
        )
        angle = end
    return slices


# -----------------------------
# Formatting
# -----------------------------
def _dateparse(s: Optional[str]) -> Optional[dt.datetime]:
    if not s:
        return None
    try:
        return dt.datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    """'2024-03-05T10:00:00Z' -> 'Mar 5, 2024'; unparseable input comes back unchanged."""
    parsed = _dateparse(value)
    if parsed is None:
        return value or ""
    return f"{parsed:%b} {parsed.day}, {parsed.year}"
