"""Tests for catalog ingestion, validation policies and the demo guide."""

from __future__ import annotations

import json

import pytest

from catalog import CatalogError, demo_catalog, demo_data, load_catalog, parse_catalog


def _raw(*channels: dict) -> dict:
    return {"channels": list(channels)}


def _ch(cid: str, *spans: tuple[int, int], name: str | None = None) -> dict:
    return {
        "id": cid,
        "name": name or cid.upper(),
        "programs": [
            {"id": f"{cid}{i}", "title": f"Show {i}", "start": s, "duration": d}
            for i, (s, d) in enumerate(spans)
        ],
    }


def test_parse_valid_catalog():
    chans = parse_catalog(_raw(_ch("a", (0, 60), (90, 30)), _ch("b", (0, 1440))))
    assert [c.id for c in chans] == ["a", "b"]
    assert chans[0].name == "A"
    assert [(p.start, p.end) for p in chans[0].programs] == [(0, 60), (90, 120)]


@pytest.mark.parametrize(
    "spans, problem",
    [
        ([(-5, 30)], "start"),
        ([(1440, 10)], "start"),
        ([(0, 0)], "duration"),
        ([(0, -30)], "duration"),
        ([(1400, 60)], "midnight"),
        ([(0, 60), (30, 60)], "overlaps"),
        ([(120, 60), (0, 60)], "overlaps"),
    ],
)
def test_bad_programs_are_rejected(spans, problem):
    with pytest.raises(CatalogError, match=problem):
        parse_catalog(_raw(_ch("a", *spans)), bad_program_policy="reject")


def test_bad_programs_can_be_dropped(caplog):
    raw = _raw(_ch("a", (0, 60), (30, 60), (60, 0), (60, 30)))
    (chan,) = parse_catalog(raw, bad_program_policy="drop")
    assert [p.id for p in chan.programs] == ["a0", "a3"]
    assert "dropping" in caplog.text


def test_duplicate_program_id_is_a_bad_program():
    raw = _ch("a", (0, 60), (60, 60))
    raw["programs"][1]["id"] = "a0"
    with pytest.raises(CatalogError, match="duplicate program id"):
        parse_catalog(_raw(raw), bad_program_policy="reject")


def test_malformed_program_raises():
    raw = _raw({"id": "a", "programs": [{"title": "no times"}]})
    with pytest.raises(CatalogError, match="missing 'start'"):
        parse_catalog(raw, bad_program_policy="reject")


def test_malformed_program_is_dropped_under_drop_policy(caplog):
    raw = _raw({"id": "a", "programs": [
        {"id": "ok", "start": 0, "duration": 60},
        {"id": "bad", "title": "no times"},
        "not a program",
        {"id": "late", "start": "noon", "duration": 30},
    ]})
    (chan,) = parse_catalog(raw, bad_program_policy="drop")
    assert [p.id for p in chan.programs] == ["ok"]
    assert caplog.text.count("dropping") == 3


@pytest.mark.parametrize(
    "start, duration, problem",
    [
        (12.9, 60, "whole minute"),
        (True, 60, "not a number"),
        ("60", 60, "not a number"),
        (None, 60, "not a number"),
        (0, True, "not a number"),
        (0, 59.5, "whole minute"),
    ],
)
def test_times_must_be_whole_minutes(start, duration, problem):
    raw = _raw({"id": "a", "programs": [{"id": "x", "start": start, "duration": duration}]})
    with pytest.raises(CatalogError, match=problem):
        parse_catalog(raw, bad_program_policy="reject")


def test_integral_floats_are_accepted():
    raw = _raw({"id": "a", "programs": [{"id": "x", "start": 60.0, "duration": 30.0}]})
    (chan,) = parse_catalog(raw)
    prog = chan.programs[0]
    assert (prog.start, prog.duration) == (60, 30)
    assert isinstance(prog.start, int)


# -- wrong JSON shapes ------------------------------------------------------

@pytest.mark.parametrize(
    "data, problem",
    [
        ([], "catalog must be an object"),
        ("channels", "catalog must be an object"),
        ({"channels": {"a": 1}}, "must be a list"),
        ({"channels": ["oops"]}, "channel #0: expected an object"),
        ({"channels": [{"id": "a", "programs": {"start": 0}}]}, "must be a list"),
        ({"channels": [{"id": "a", "programs": ["oops"]}]}, "program #0: expected an object"),
    ],
)
def test_wrong_shapes_raise_catalog_error(data, problem):
    with pytest.raises(CatalogError, match=problem):
        parse_catalog(data, bad_program_policy="reject")


def test_top_level_list_file_is_a_catalog_error(tmp_path):
    fp = tmp_path / "catalog.json"
    fp.write_text("[]", encoding="utf-8")
    with pytest.raises(CatalogError, match="must be an object"):
        load_catalog(str(fp))


@pytest.mark.parametrize("policy, ids", [("drop", ["a"]), ("keep", ["a", "empty"])])
def test_empty_channel_policies(policy, ids):
    chans = parse_catalog(_raw(_ch("a", (0, 60)), _ch("empty")), empty_policy=policy)
    assert [c.id for c in chans] == ids


def test_empty_channel_reject_policy():
    with pytest.raises(CatalogError, match="no programs"):
        parse_catalog(_raw(_ch("a", (0, 60)), _ch("empty")), empty_policy="reject")


def test_empty_policy_comes_from_config(monkeypatch):
    import config
    monkeypatch.setattr(config, "EMPTY_CHANNEL_POLICY", "keep")
    assert len(parse_catalog(_raw(_ch("a", (0, 60)), _ch("empty")))) == 2


def test_unknown_policy_is_a_config_error():
    with pytest.raises(ValueError):
        parse_catalog(_raw(_ch("a", (0, 60))), empty_policy="ignore")


def test_duplicate_channel_ids_rejected():
    with pytest.raises(CatalogError, match="duplicate channel"):
        parse_catalog(_raw(_ch("a", (0, 60)), _ch("a", (0, 30))))


def test_no_usable_channels():
    with pytest.raises(CatalogError):
        parse_catalog(_raw(_ch("empty")), empty_policy="drop")
    with pytest.raises(CatalogError):
        parse_catalog({})


def test_load_catalog_from_file(tmp_path):
    fp = tmp_path / "catalog.json"
    fp.write_text(json.dumps(_raw(_ch("a", (0, 60)))), encoding="utf-8")
    (chan,) = load_catalog(str(fp))
    assert chan.programs[0].title == "Show 0"


def test_load_catalog_missing_or_broken(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(str(tmp_path / "nope.json"))
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(str(bad))


def test_demo_catalog_is_deterministic_and_valid():
    a = demo_catalog(6, seed=7)
    b = demo_catalog(6, seed=7)
    assert a == b
    assert len(a) == 6
    for chan in a:
        ends = [p.end for p in chan.programs]
        assert all(p.start >= 0 and p.end <= 1440 for p in chan.programs)
        assert ends == sorted(ends)


def test_demo_has_early_sign_off_and_gaps():
    chans = demo_catalog(5, seed=3)
    assert chans[2].programs[-1].end == 19 * 60
    gappy = chans[3].programs
    assert any(nxt.start > cur.end for cur, nxt in zip(gappy, gappy[1:]))
    full = chans[0].programs
    assert full[0].start == 0 and full[-1].end == 1440


def test_demo_data_is_plain_json():
    json.dumps(demo_data(3, seed=1))
