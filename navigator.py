"""
navigator.py

The guide's cursor state machine.

Session state is three independent pieces:

* the time window  (WindowManager)
* the cursor       (channel index, program index)
* the clock sample (minutes of day, overlay only)

`program_index` always points into the *visible list* of the focused
channel, which is recomputed from scratch after every transition because a
page can change its length (a program straddling a window edge shows up in
both windows).  Every input is total: deltas that would leave the grid are
absorbed by clamping.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence

import config
from epg_model import Channel, CursorPosition, FocusChange, Program, TimeWindow
from layout import GuideView, project
from visibility import visible_programs
from window_manager import WindowManager, window_for_minute

log = logging.getLogger(__name__)

Action   = dict
Listener = Callable[[FocusChange], None]

DIRECTIONS = {
    "up":    (-1, 0),
    "down":  (1, 0),
    "left":  (0, -1),
    "right": (0, 1),
}


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


class GridNavigator:
    def __init__(
        self,
        channels: Sequence[Channel],
        width_hours: int | None = None,
        start_hour: float = 0,
        channel_index: int = 0,
        clock: float | None = None,
    ) -> None:
        self.channels: tuple[Channel, ...] = tuple(channels)
        self.windows  = WindowManager(width_hours, start_hour)
        self.clock: Optional[float] = clock
        self.channel_index = _clamp(channel_index, 0, max(0, len(self.channels) - 1))
        self.program_index = 0
        self._listeners: List[Listener] = []

    # ---------------------------------------------------------------- reads
    @property
    def window(self) -> TimeWindow:
        return self.windows.window

    @property
    def cursor(self) -> CursorPosition:
        return CursorPosition(self.channel_index, self.program_index)

    @property
    def channel(self) -> Optional[Channel]:
        return self.channels[self.channel_index] if self.channels else None

    def visible(self) -> List[Program]:
        chan = self.channel
        return visible_programs(chan, self.window) if chan else []

    @property
    def focused_program(self) -> Optional[Program]:
        vis = self.visible()
        return vis[self.program_index] if vis else None

    def view(self) -> GuideView:
        return project(self.channels, self.window, self.cursor, self.clock)

    # --------------------------------------------------------- subscription
    def subscribe(self, listener: Listener) -> None:
        """*listener* gets a FocusChange after every transition that moved."""
        self._listeners.append(listener)

    def _settle(self, before: tuple[int, int, int]) -> bool:
        self.program_index = _clamp(self.program_index, 0, max(0, len(self.visible()) - 1))
        after = self._state()
        if after == before:
            return False
        change = FocusChange(*after)
        for fn in self._listeners:
            fn(change)
        return True

    def _state(self) -> tuple[int, int, int]:
        return self.channel_index, self.program_index, self.windows.start_hour

    # ------------------------------------------------------------ reducer
    def dispatch(self, action: Action) -> bool:
        """Apply one action dict; True when window or cursor changed."""
        t = action.get("type")
        if t == "navigate":
            delta = DIRECTIONS.get(action.get("direction", ""))
            if delta is None:
                return False
            dy, dx = delta
            return self.move_vertical(dy) if dy else self.move_horizontal(dx)
        if t == "select_window":
            try:
                hour = float(action["hour"])
            except (KeyError, TypeError, ValueError):
                return False
            if not math.isfinite(hour):
                return False
            return self.select_window(hour)
        if t == "jump_now":
            return self.jump_now()
        if t == "clock_tick":
            self.tick(action.get("minutes"))
            return False
        return False

    # -------------------------------------------------------- transitions
    def move_vertical(self, delta: int) -> bool:
        before = self._state()
        if not self.channels:
            return False
        self.channel_index = _clamp(self.channel_index + delta, 0, len(self.channels) - 1)
        if self.channel_index != before[0]:
            self.program_index = 0
        return self._settle(before)

    def move_horizontal(self, delta: int) -> bool:
        before = self._state()
        last   = len(self.visible()) - 1
        target = self.program_index + delta

        if 0 <= target <= last:
            self.program_index = target
        elif delta > 0:
            if self.windows.page_forward():
                log.debug("paged forward to %02d:00", self.windows.start_hour)
                self.program_index = 0
        elif delta < 0:
            if self.windows.page_backward():
                log.debug("paged backward to %02d:00", self.windows.start_hour)
                self.program_index = len(self.visible()) - 1
        return self._settle(before)

    def select_window(self, hour: float) -> bool:
        """Time-bar pick: jump straight to the window holding *hour*."""
        before = self._state()
        if self.windows.jump_to(hour):
            self.program_index = 0
        return self._settle(before)

    def jump_now(self) -> bool:
        """Show the window holding the clock and focus whatever airs now."""
        if self.clock is None:
            return False
        before = self._state()
        target = window_for_minute(self.clock, self.windows.width_hours)
        self.windows.jump_to(target.start_hour)
        vis = self.visible()
        self.program_index = next(
            (i for i, p in enumerate(vis) if p.start <= self.clock < p.end), 0
        )
        return self._settle(before)

    def tick(self, minutes: float | None) -> None:
        """Record a clock sample; window and cursor are left alone."""
        try:
            sample = float(minutes)
        except (TypeError, ValueError):
            log.debug("ignoring clock sample %r", minutes)
            return
        if math.isfinite(sample):
            self.clock = sample


def start_hour_for(clock_minutes: float | None) -> int:
    """Initial window: config.START_HOUR, else the one holding *clock_minutes*."""
    width = config.WINDOW_HOURS
    start = getattr(config, "START_HOUR", None)
    if start is not None:
        return WindowManager(width, start).start_hour
    if clock_minutes is None:
        return 0
    return window_for_minute(clock_minutes, width).start_hour
