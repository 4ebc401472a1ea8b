"""
guide_renderer.py

Pygame renderer for the program guide.

Draws a `GuideView` and nothing else: all positions come from the view's
percent coordinates, so the renderer never re-derives guide state.
"""

from __future__ import annotations

import time

import pygame

import config
from epg_model import FocusChange
from layout import GuideView
from timing import fmt_hhmm

pygame.font.init()


# ── helpers ────────────────────────────────────────────────────────────────
def _compute_font_sizes(h: int) -> tuple[int, int, int]:
    return max(12, h // 60), max(16, h // 40), max(22, h // 22)


def _fit(font: pygame.font.Font, text: str, max_w: int) -> str:
    """Trim *text* with an ellipsis until it fits *max_w* pixels."""
    if font.size(text)[0] <= max_w:
        return text
    while text and font.size(text + "…")[0] > max_w:
        text = text[:-1]
    return text + "…" if text else ""


def _panel(surface: pygame.Surface, lines: list[str], font, pos: tuple[int, int]) -> None:
    widest = max(font.size(t)[0] for t in lines)
    pbg = pygame.Surface(
        (widest + 20, len(lines) * (font.get_linesize() + 2) + 10),
        pygame.SRCALPHA,
    )
    pbg.fill(config.PANEL_BG)
    y = 5
    for t in lines:
        pbg.blit(font.render(t, True, config.TEXT_MAIN), (10, y))
        y += font.get_linesize() + 2
    x = min(pos[0], surface.get_width() - pbg.get_width() - 10)
    y = min(pos[1], surface.get_height() - pbg.get_height() - 10)
    surface.blit(pbg, (x, y))


def first_row_for(focused: int, total: int, max_rows: int) -> int:
    """First visible row that keeps *focused* centred where possible."""
    if total <= max_rows:
        return 0
    return max(0, min(total - max_rows, focused - max_rows // 2))


# ── row scrolling ──────────────────────────────────────────────────────────
class RowScroller:
    """
    Eases the channel list toward the focused row.

    Fed by navigator focus notifications; purely cosmetic – nothing here is
    reported back to the navigator.
    """

    def __init__(self, total_rows: int, max_rows: int | None = None):
        self.total    = total_rows
        self.max_rows = max_rows or config.GUIDE_MAX_ROWS
        self.target   = 0
        self.current  = 0.0

    def on_focus(self, change: FocusChange) -> None:
        self.target = first_row_for(change.channel_index, self.total, self.max_rows)

    def step(self, ease: float | None = None) -> float:
        ease = config.SCROLL_EASE if ease is None else ease
        self.current += (self.target - self.current) * ease
        if abs(self.target - self.current) < 0.01:
            self.current = float(self.target)
        return self.current


# ── main entry point ───────────────────────────────────────────────────────
def draw_guide(
    surface: pygame.Surface,
    view: GuideView,
    scroll: float = 0.0,
    show_info: bool = False,
) -> None:
    sw, sh = surface.get_width(), surface.get_height()
    tiny_pt, small_pt, large_pt = _compute_font_sizes(sh)
    FT = pygame.font.SysFont("sans", tiny_pt)
    FS = pygame.font.SysFont("sans", small_pt)
    FL = pygame.font.SysFont("sans", large_pt, bold=True)

    surface.fill(config.BG_COLOR)
    pad     = int(sw * 0.02)
    label_w = int(sw * config.GUIDE_LABEL_W_FRAC)
    area_x  = pad + label_w
    area_w  = sw - pad - area_x
    win     = view.window

    # ── header clock ─────────────────────────────────────────────────────
    clock_txt = time.strftime("%a %d %b   %H:%M")
    surface.blit(FL.render(clock_txt, True, config.TEXT_MAIN), (pad, pad))
    y = pad + FL.get_linesize() + pad // 2

    # ── time bar (one slot per window) ──────────────────────────────────
    bar_h = FS.get_linesize() + 8
    seg_w = (sw - 2 * pad) / max(1, len(view.segments))
    for i, seg in enumerate(view.segments):
        r = pygame.Rect(int(pad + i * seg_w), y, int(seg_w) - 2, bar_h)
        pygame.draw.rect(surface, config.CELL_FOCUS if seg.active else config.CELL_COLOR, r)
        txt = FS.render(f"{seg.hour:02d}:00", True, config.TEXT_MAIN)
        surface.blit(txt, (r.x + (r.w - txt.get_width()) // 2, r.y + 4))
    y += bar_h + pad // 2

    # ── half-hour ticks for the live window ─────────────────────────────
    steps = win.width_hours * 2
    for k in range(steps):
        x = area_x + area_w * k // steps
        surface.blit(FT.render(fmt_hhmm(win.start_minutes + k * 30), True, config.TEXT_MUTED), (x + 3, y))
        pygame.draw.line(surface, config.GRID_LINE, (x, y), (x, sh - pad))
    y += FT.get_linesize() + 4

    # ── channel rows ─────────────────────────────────────────────────────
    max_rows = config.GUIDE_MAX_ROWS
    row_gap  = max(2, sh // 200)
    row_h    = max(1, (sh - pad - y - (max_rows - 1) * row_gap) // max_rows)
    grid_top = y
    first    = int(scroll)
    shift    = (scroll - first) * (row_h + row_gap)

    clip = surface.get_clip()
    surface.set_clip(pygame.Rect(0, grid_top, sw, sh - pad - grid_top))
    for idx in range(first, min(len(view.rows), first + max_rows + 1)):
        row = view.rows[idx]
        cy  = int(grid_top + (idx - first) * (row_h + row_gap) - shift)
        is_cur = idx == view.cursor.channel_index

        lab = pygame.Rect(pad, cy, label_w - 4, row_h)
        pygame.draw.rect(surface, config.CELL_FOCUS if is_cur else config.CELL_COLOR, lab)
        name = _fit(FS, row.channel.name, lab.w - 10)
        surface.blit(FS.render(name, True, config.TEXT_MAIN), (lab.x + 6, lab.y + (row_h - FS.get_height()) // 2))

        for cell in row.cells:
            cx = area_x + int(area_w * cell.offset)
            cw = max(2, int(area_w * cell.fraction) - 2)
            r  = pygame.Rect(cx, cy, cw, row_h)
            pygame.draw.rect(surface, config.CELL_FOCUS if cell.focused else config.CELL_COLOR, r)
            if cell.focused:
                pygame.draw.rect(surface, config.TEXT_MAIN, r, 2)
            title = _fit(FS, cell.program.title, cw - 10)
            if title:
                surface.blit(FS.render(title, True, config.TEXT_MAIN), (r.x + 5, r.y + 4))
            span = _fit(FT, f"{fmt_hhmm(cell.program.start)}–{fmt_hhmm(cell.program.end)}", cw - 10)
            if span and row_h > FS.get_linesize() + FT.get_linesize():
                surface.blit(FT.render(span, True, config.TEXT_MUTED), (r.x + 5, r.y + 4 + FS.get_linesize()))
    surface.set_clip(clip)

    # ── now marker ───────────────────────────────────────────────────────
    if config.SHOW_NOW_MARKER and view.now_marker is not None:
        nx = area_x + int(area_w * view.now_marker / 100.0)
        pygame.draw.line(surface, config.NOW_COLOR, (nx, grid_top - FT.get_linesize() - 4), (nx, sh - pad), 2)

    # ── info panel for the focused program ──────────────────────────────
    prog = view.focused_program
    if show_info and prog is not None:
        lines = [
            prog.title,
            f"{view.channel.name}",
            f"{fmt_hhmm(prog.start)} – {fmt_hhmm(prog.end)}   ({prog.duration} min)",
        ]
        _panel(surface, lines, FS, (sw // 2, sh // 2))
