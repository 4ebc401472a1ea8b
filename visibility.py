"""
visibility.py

Which programs of a channel fall inside a time window, and how much of each.

Fractions are relative to the *window width*, so every row shares the time
scale of the time bar above it; a row with gaps simply covers less than 1.0.
"""

from __future__ import annotations

from typing import Iterable, List

from epg_model import Channel, Program, TimeWindow


def visible_programs(channel: Channel, window: TimeWindow) -> List[Program]:
    lo, hi = window.start_minutes, window.end_minutes
    return [p for p in channel.programs if p.overlaps(lo, hi)]


def visible_fraction(program: Program, window: TimeWindow) -> float:
    """Share of the window covered by *program*; 0.0 if it lies outside."""
    shown = min(program.end, window.end_minutes) - max(program.start, window.start_minutes)
    return max(0, shown) / window.width_minutes


def visible_offset(program: Program, window: TimeWindow) -> float:
    """Left edge of the visible part, as a fraction of the window."""
    left = max(program.start, window.start_minutes) - window.start_minutes
    return min(1.0, max(0, left) / window.width_minutes)


def row_coverage(programs: Iterable[Program], window: TimeWindow) -> float:
    return sum(visible_fraction(p, window) for p in programs)
