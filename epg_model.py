"""
epg_model.py

Plain data types shared by the guide core.

All times are *minutes since midnight*; a guide day is 0 … 1440.
Everything here is immutable – the navigator swaps whole values rather than
patching them in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

# ── Day geometry ────────────────────────────────────────────────────────────
HOURS_PER_DAY   = 24
MINUTES_PER_DAY = HOURS_PER_DAY * 60


# ── Catalog ─────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Program:
    id: str
    title: str
    start: int          # minutes since midnight
    duration: int       # minutes, > 0

    @property
    def end(self) -> int:
        return self.start + self.duration

    def overlaps(self, lo: int, hi: int) -> bool:
        """Half-open test: touching *lo* or *hi* exactly does not count."""
        return self.start < hi and self.end > lo


@dataclass(frozen=True)
class Channel:
    id: str
    name: str
    programs: Tuple[Program, ...] = field(default_factory=tuple)


# ── Session state ───────────────────────────────────────────────────────────
@dataclass(frozen=True)
class TimeWindow:
    start_hour: int
    width_hours: int

    @property
    def end_hour(self) -> int:
        return self.start_hour + self.width_hours

    @property
    def start_minutes(self) -> int:
        return self.start_hour * 60

    @property
    def end_minutes(self) -> int:
        return self.end_hour * 60

    @property
    def width_minutes(self) -> int:
        return self.width_hours * 60

    def contains_minute(self, minute: float) -> bool:
        return self.start_minutes <= minute < self.end_minutes


@dataclass(frozen=True)
class CursorPosition:
    channel_index: int = 0
    program_index: int = 0


@dataclass(frozen=True)
class FocusChange:
    """Sent to navigator subscribers once a transition has settled."""
    channel_index: int
    program_index: int
    start_hour: int
