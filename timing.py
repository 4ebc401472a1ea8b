# =========  timing.py  =========
"""
Wall-clock helpers for the guide.
The app samples the clock once a minute; the navigator only ever sees the
resulting minutes-of-day number.
"""

from __future__ import annotations

import datetime

import pygame

import config

# pygame user event fired every CLOCK_TICK_MS by the app's timer
CLOCK_EVENT = pygame.USEREVENT + 1


def minutes_of_day(now: datetime.datetime | None = None) -> float:
    """Fractional minutes since local midnight."""
    now = now or datetime.datetime.now()
    return now.hour * 60 + now.minute + now.second / 60


def fmt_hhmm(minutes: float) -> str:
    m = int(max(0, minutes)) % (24 * 60)
    h, m = divmod(m, 60)
    return f"{h:02d}:{m:02d}"


def start_clock_timer() -> None:
    pygame.time.set_timer(CLOCK_EVENT, getattr(config, "CLOCK_TICK_MS", 60_000))
