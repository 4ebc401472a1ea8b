#!/usr/bin/env python3
"""
app.py – program guide main loop (with EventManager)

One pygame window, one GridNavigator.  Input is dispatched by events.py and
handled one action at a time; the settled GuideView is republished after
every action so the web remote can read it from its own thread.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

import pygame

import config
from epg_model import Channel, FocusChange
from events import EventManager
from guide_renderer import RowScroller, draw_guide
from layout import GuideView
from navigator import GridNavigator, start_hour_for
from timing import minutes_of_day, start_clock_timer

log = logging.getLogger(__name__)

# navigation actions go to the navigator, everything else is ours
_NAV_ACTIONS = {"navigate", "select_window", "jump_now", "clock_tick"}


# ── main application ───────────────────────────────────────────────────────
class GuideApp:
    def __init__(self, channels: Sequence[Channel], start_hour: Optional[float] = None):
        # window ----------------------------------------------------------
        pygame.init()
        pygame.display.set_caption("Program Guide")
        pygame.mouse.set_visible(False)
        self.screen = pygame.display.set_mode(
            (0, 0) if config.FULLSCREEN else config.WINDOWED_SIZE,
            pygame.FULLSCREEN if config.FULLSCREEN else 0,
        )
        self.clock = pygame.time.Clock()

        # core state ------------------------------------------------------
        now = minutes_of_day()
        self.nav = GridNavigator(
            channels,
            width_hours=config.WINDOW_HOURS,
            start_hour=start_hour if start_hour is not None else start_hour_for(now),
            channel_index=getattr(config, "START_CHANNEL", 0),
            clock=now,
        )

        # presentation ----------------------------------------------------
        self.scroller = RowScroller(len(self.nav.channels))
        self.nav.subscribe(self.scroller.on_focus)
        self.scroller.on_focus(FocusChange(*self._focus()))
        self.scroller.current = float(self.scroller.target)
        self.info_expire = 0.0
        self.force_info  = False

        self.view: GuideView = self.nav.view()
        self.running = False
        log.info("guide ready: %d channels, window %02d:00–%02d:00",
                 len(self.nav.channels), self.nav.window.start_hour, self.nav.window.end_hour)

    # ── action handling ---------------------------------------------------
    def apply(self, act: dict) -> None:
        t = act.get("type")
        if t in _NAV_ACTIONS:
            self.nav.dispatch(act)
        elif t == "quit":
            self.running = False
        elif t == "toggle_info":
            self.force_info ^= True
            self.info_expire = time.time() + config.INFO_OVERLAY_DURATION
        elif t == "toggle_fullscreen":
            config.FULLSCREEN ^= True
            self.screen = pygame.display.set_mode(
                (0, 0) if config.FULLSCREEN else config.WINDOWED_SIZE,
                pygame.FULLSCREEN if config.FULLSCREEN else 0)
            pygame.mouse.set_visible(False)
        else:
            log.debug("ignoring action %r", act)

        # republish the settled snapshot (read by web_remote)
        self.view = self.nav.view()

    # ── main loop ---------------------------------------------------------
    def run(self):
        self.running = True
        start_clock_timer()
        while self.running:
            for e in pygame.event.get():
                EventManager.handle(e, self.nav.windows.width_hours)

            # drain external queue (non-blocking)
            while self.running and (act := EventManager.poll()):
                self.apply(act)

            show_info = self.force_info and time.time() < self.info_expire
            if self.force_info and not show_info:
                self.force_info = False

            draw_guide(self.screen, self.view, self.scroller.step(), show_info)
            pygame.display.flip()
            self.clock.tick(config.FPS)

        pygame.quit()

    def _focus(self) -> tuple[int, int, int]:
        return (self.nav.channel_index, self.nav.program_index,
                self.nav.windows.start_hour)
