"""
layout.py

Projects navigator state onto normalised guide coordinates.

Nothing here touches pygame: a `GuideView` is a frozen snapshot that the
renderer draws and the web remote serialises.  It is rebuilt from scratch on
every settled transition and clock tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from epg_model import HOURS_PER_DAY, Channel, CursorPosition, Program, TimeWindow
from visibility import visible_fraction, visible_offset, visible_programs


# ── Output types ────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Cell:
    program: Program
    fraction: float     # width, share of the window
    offset: float       # left edge, share of the window
    focused: bool = False

    @property
    def width_pct(self) -> float:
        return self.fraction * 100.0

    @property
    def left_pct(self) -> float:
        return self.offset * 100.0


@dataclass(frozen=True)
class Row:
    channel: Channel
    cells: Tuple[Cell, ...]


@dataclass(frozen=True)
class Segment:
    hour: int
    width_hours: int
    active: bool


@dataclass(frozen=True)
class GuideView:
    window: TimeWindow
    cursor: CursorPosition
    rows: Tuple[Row, ...]
    segments: Tuple[Segment, ...]
    now_marker: Optional[float]     # percent of the window, None = off-screen
    clock: Optional[float]          # minutes of day, None = not sampled yet

    @property
    def channel(self) -> Optional[Channel]:
        return self.rows[self.cursor.channel_index].channel if self.rows else None

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return self.rows[self.cursor.channel_index].cells if self.rows else ()

    @property
    def focused_program(self) -> Optional[Program]:
        return next((c.program for c in self.cells if c.focused), None)

    def as_dict(self) -> dict:
        """JSON-ready form of the view (used by the web remote)."""
        chan = self.channel
        return {
            "window": {
                "start_hour":  self.window.start_hour,
                "end_hour":    self.window.end_hour,
                "width_hours": self.window.width_hours,
            },
            "channel_index": self.cursor.channel_index,
            "program_index": self.cursor.program_index,
            "channel": {"id": chan.id, "name": chan.name} if chan else None,
            "programs": [
                {
                    "id":        c.program.id,
                    "title":     c.program.title,
                    "start":     c.program.start,
                    "duration":  c.program.duration,
                    "width_pct": round(c.width_pct, 4),
                    "left_pct":  round(c.left_pct, 4),
                    "focused":   c.focused,
                }
                for c in self.cells
            ],
            "now_marker": None if self.now_marker is None else round(self.now_marker, 4),
            "segments": [{"hour": s.hour, "active": s.active} for s in self.segments],
        }


# ── Projections ─────────────────────────────────────────────────────────────
def project_row(channel: Channel, window: TimeWindow, focused_index: int | None = None) -> Row:
    cells = tuple(
        Cell(p, visible_fraction(p, window), visible_offset(p, window), i == focused_index)
        for i, p in enumerate(visible_programs(channel, window))
    )
    return Row(channel, cells)


def now_marker_position(clock_minutes: float | None, window: TimeWindow) -> float | None:
    """Percent across the window for *clock_minutes*; None when outside 0–100."""
    if clock_minutes is None:
        return None
    pct = (clock_minutes - window.start_minutes) / window.width_minutes * 100.0
    return pct if 0.0 <= pct <= 100.0 else None


def time_bar(window: TimeWindow) -> Tuple[Segment, ...]:
    w = window.width_hours
    return tuple(Segment(h, w, h == window.start_hour) for h in range(0, HOURS_PER_DAY, w))


def project(
    channels: Sequence[Channel],
    window: TimeWindow,
    cursor: CursorPosition,
    clock_minutes: float | None = None,
) -> GuideView:
    rows = tuple(
        project_row(ch, window, cursor.program_index if i == cursor.channel_index else None)
        for i, ch in enumerate(channels)
    )
    return GuideView(
        window=window,
        cursor=cursor,
        rows=rows,
        segments=time_bar(window),
        now_marker=now_marker_position(clock_minutes, window),
        clock=clock_minutes,
    )
