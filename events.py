#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so *any* external source can inject
  the same actions (web remote, GPIO, HID, etc.).
"""

from __future__ import annotations
import queue
from pygame.locals import *

from timing import CLOCK_EVENT, minutes_of_day

Action = dict      # alias for readability

_ARROWS = {
    K_UP:    "up",
    K_DOWN:  "down",
    K_LEFT:  "left",
    K_RIGHT: "right",
}

_DIGITS = (K_1, K_2, K_3, K_4, K_5, K_6, K_7, K_8, K_9)


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe

    # ── SDL / keyboard path ────────────────────────────────────────────
    @classmethod
    def handle(cls, event, width_hours: int) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls.translate(event, width_hours)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type":"navigate","direction":"down"})
        """
        cls._fifo.put(action)

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def clear(cls) -> None:
        while cls.poll() is not None:
            pass

    # ── translator ────────────────────────────────────────────────────
    @staticmethod
    def translate(event, width_hours: int) -> Action | None:
        if event.type == QUIT:
            return {"type": "quit"}

        if event.type == CLOCK_EVENT:
            return {"type": "clock_tick", "minutes": minutes_of_day()}

        if event.type == KEYDOWN:
            if event.key in (K_ESCAPE, K_q):
                return {"type": "quit"}
            if event.key in _ARROWS:
                return {"type": "navigate", "direction": _ARROWS[event.key]}
            if event.key in _DIGITS:
                # 1 → first time-bar slot, 2 → second …
                slot = _DIGITS.index(event.key)
                if slot * width_hours < 24:
                    return {"type": "select_window", "hour": slot * width_hours}
                return None
            if event.key == K_n:
                return {"type": "jump_now"}
            if event.key == K_i:
                return {"type": "toggle_info"}
            if event.key == K_f:
                return {"type": "toggle_fullscreen"}

        return None
