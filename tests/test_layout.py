"""Tests for the layout projector: cell geometry, now marker, time bar."""

from __future__ import annotations

import json

import pytest

from epg_model import Channel, CursorPosition, Program, TimeWindow
from layout import now_marker_position, project, project_row, time_bar


def _chan(cid: str, *spans: tuple[int, int]) -> Channel:
    return Channel(
        cid, f"Channel {cid}",
        tuple(Program(f"{cid}{i}", f"Show {i}", s, d) for i, (s, d) in enumerate(spans)),
    )


W0 = TimeWindow(0, 4)


@pytest.mark.parametrize(
    "clock, expected",
    [(150, 62.5), (0, 0.0), (240, 100.0), (239.5, pytest.approx(99.7917, abs=1e-4))],
)
def test_now_marker_inside_window(clock, expected):
    assert now_marker_position(clock, W0) == expected


@pytest.mark.parametrize("clock", [None, 241, 600, -1])
def test_now_marker_suppressed_outside_window(clock):
    assert now_marker_position(clock, W0) is None


def test_time_bar_marks_only_the_live_window():
    segs = time_bar(TimeWindow(8, 4))
    assert [s.hour for s in segs] == [0, 4, 8, 12, 16, 20]
    assert [s.active for s in segs] == [False, False, True, False, False, False]
    assert len(time_bar(TimeWindow(0, 6))) == 4


def test_row_cells_use_window_relative_widths():
    row = project_row(_chan("a", (0, 60), (60, 30), (90, 45)), W0, focused_index=1)
    assert [c.width_pct for c in row.cells] == pytest.approx([25.0, 12.5, 18.75])
    assert [c.left_pct for c in row.cells] == pytest.approx([0.0, 25.0, 37.5])
    assert [c.focused for c in row.cells] == [False, True, False]
    assert sum(c.fraction for c in row.cells) == pytest.approx(0.5625)


def test_gapped_row_keeps_true_time_positions():
    row = project_row(_chan("g", (30, 30), (180, 90)), W0)
    assert [c.left_pct for c in row.cells] == pytest.approx([12.5, 75.0])
    assert [c.width_pct for c in row.cells] == pytest.approx([12.5, 25.0])


def test_project_focuses_only_the_current_channel():
    chans = [_chan("a", (0, 120), (120, 120)), _chan("b", (0, 240))]
    view = project(chans, W0, CursorPosition(1, 0), clock_minutes=150)

    assert view.channel.id == "b"
    assert [c.focused for c in view.rows[0].cells] == [False, False]
    assert [c.focused for c in view.cells] == [True]
    assert view.focused_program.id == "b0"
    assert view.now_marker == pytest.approx(62.5)


def test_empty_row_has_no_cells_and_no_focus():
    view = project([_chan("e")], W0, CursorPosition(0, 0))
    assert view.cells == ()
    assert view.focused_program is None


def test_as_dict_is_json_ready():
    chans = [_chan("a", (0, 60), (60, 30), (90, 45))]
    view = project(chans, W0, CursorPosition(0, 2), clock_minutes=600)
    d = json.loads(json.dumps(view.as_dict()))

    assert d["window"] == {"start_hour": 0, "end_hour": 4, "width_hours": 4}
    assert d["channel"] == {"id": "a", "name": "Channel a"}
    assert d["program_index"] == 2
    assert [p["focused"] for p in d["programs"]] == [False, False, True]
    assert d["programs"][2]["width_pct"] == 18.75
    assert d["now_marker"] is None
    assert [s["active"] for s in d["segments"]].count(True) == 1


def test_as_dict_without_channels():
    view = project([], W0, CursorPosition())
    assert view.channel is None
    assert view.as_dict()["channel"] is None
