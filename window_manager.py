"""
window_manager.py

Owns the visible slice of the guide day.

The day is tiled by aligned windows of `width_hours`: with the default of 4
that is 00–04, 04–08 … 20–24.  Paging past either end is absorbed, never
wrapped, and every input is clamped rather than rejected.
"""

from __future__ import annotations

import math

import config
from epg_model import HOURS_PER_DAY, TimeWindow


def align_hour(hour: float, width_hours: int) -> int:
    """Floor *hour* onto the window grid and clamp it into the day."""
    if math.isnan(hour):
        return 0
    hour = max(0, min(HOURS_PER_DAY, hour))
    aligned = int(hour // width_hours) * width_hours
    return max(0, min(HOURS_PER_DAY - width_hours, aligned))


def window_for_minute(minute: float, width_hours: int) -> TimeWindow:
    """The aligned window containing *minute* of the day."""
    return TimeWindow(align_hour(minute / 60, width_hours), width_hours)


class WindowManager:
    def __init__(self, width_hours: int | None = None, start_hour: float = 0) -> None:
        width = int(config.WINDOW_HOURS if width_hours is None else width_hours)
        if width <= 0 or HOURS_PER_DAY % width:
            raise ValueError(f"window width must divide {HOURS_PER_DAY} hours, got {width}")
        self.width_hours = width
        self.start_hour  = align_hour(start_hour, width)

    # ---------------------------------------------------------------- state
    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.start_hour, self.width_hours)

    @property
    def last_start(self) -> int:
        return HOURS_PER_DAY - self.width_hours

    @property
    def slots(self) -> list[int]:
        """Start hour of every window in the day, in order."""
        return list(range(0, HOURS_PER_DAY, self.width_hours))

    # --------------------------------------------------------------- paging
    def page_forward(self) -> bool:
        """Advance one window; False when already on the last one."""
        return self._move_to(min(self.last_start, self.start_hour + self.width_hours))

    def page_backward(self) -> bool:
        """Retreat one window; False when already on the first one."""
        return self._move_to(max(0, self.start_hour - self.width_hours))

    def jump_to(self, hour: float) -> bool:
        if math.isnan(hour):
            return False
        return self._move_to(align_hour(hour, self.width_hours))

    def _move_to(self, hour: int) -> bool:
        if hour == self.start_hour:
            return False
        self.start_hour = hour
        return True
