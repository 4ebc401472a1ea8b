"""
catalog.py

Ingestion boundary for the guide catalog.

Key points
----------
* The navigator trusts its catalog completely, so every check lives here:
  start in [0, 1440), duration > 0, end <= 1440, programs ordered and
  non-overlapping, ids unique.
* Bad input is handled by policy (see config.py):
    EMPTY_CHANNEL_POLICY  drop | keep | reject
    BAD_PROGRAM_POLICY    reject | drop
  `reject` raises CatalogError, `drop` logs and skips the offender.
* Catalog JSON matches what `catalog_builder.py` writes:
    {"channels": [{"id", "name", "programs": [{"id", "title", "start", "duration"}]}]}
"""

from __future__ import annotations

import json
import logging
import os
import random
from typing import Any, Dict, List, Optional, Tuple

import config
from epg_model import MINUTES_PER_DAY, Channel, Program

log = logging.getLogger(__name__)

EMPTY_POLICIES = ("drop", "keep", "reject")
BAD_POLICIES   = ("reject", "drop")


class CatalogError(ValueError):
    """The catalog cannot be turned into a navigable guide."""


# ── Validation ──────────────────────────────────────────────────────────────
def _program_problem(p: Program, prev: Optional[Program]) -> Optional[str]:
    if not 0 <= p.start < MINUTES_PER_DAY:
        return f"start {p.start} outside 0..{MINUTES_PER_DAY - 1}"
    if p.duration <= 0:
        return f"non-positive duration {p.duration}"
    if p.end > MINUTES_PER_DAY:
        return f"ends after midnight ({p.end})"
    if prev is not None and p.start < prev.end:
        return f"overlaps or precedes {prev.id!r} (ends {prev.end})"
    return None


def _whole_minutes(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogError(f"{name} {value!r} is not a number")
    if isinstance(value, float) and not value.is_integer():
        raise CatalogError(f"{name} {value!r} is not a whole minute")
    return int(value)


def _parse_program(raw: Any, idx: int) -> Program:
    if not isinstance(raw, dict):
        raise CatalogError(f"program #{idx}: expected an object, got {type(raw).__name__}")
    for key in ("start", "duration"):
        if key not in raw:
            raise CatalogError(f"program #{idx}: missing {key!r}")
    return Program(
        id=str(raw.get("id", idx)),
        title=str(raw.get("title", "")),
        start=_whole_minutes(raw["start"], "start"),
        duration=_whole_minutes(raw["duration"], "duration"),
    )


def _reject_or_drop(msg: str, bad_policy: str) -> None:
    if bad_policy == "reject":
        raise CatalogError(msg)
    log.warning("dropping %s", msg)


def _parse_channel(raw: Any, idx: int, bad_policy: str) -> Channel:
    if not isinstance(raw, dict):
        raise CatalogError(f"channel #{idx}: expected an object, got {type(raw).__name__}")
    ch_id   = str(raw.get("id", idx))
    entries = raw.get("programs") or []
    if not isinstance(entries, list):
        raise CatalogError(f"channel {ch_id!r}: 'programs' must be a list")

    kept: List[Program] = []
    seen: set[str] = set()
    for n, entry in enumerate(entries):
        try:
            prog = _parse_program(entry, n)
        except CatalogError as e:
            _reject_or_drop(f"channel {ch_id!r} {e}", bad_policy)
            continue

        problem = _program_problem(prog, kept[-1] if kept else None)
        if problem is None and prog.id in seen:
            problem = "duplicate program id"
        if problem is None:
            kept.append(prog)
            seen.add(prog.id)
            continue
        _reject_or_drop(f"channel {ch_id!r} program {prog.id!r}: {problem}", bad_policy)

    return Channel(id=ch_id, name=str(raw.get("name", ch_id)), programs=tuple(kept))


def parse_catalog(
    data: Any,
    empty_policy: str | None = None,
    bad_program_policy: str | None = None,
) -> Tuple[Channel, ...]:
    empty_policy       = empty_policy or config.EMPTY_CHANNEL_POLICY
    bad_program_policy = bad_program_policy or config.BAD_PROGRAM_POLICY
    if empty_policy not in EMPTY_POLICIES:
        raise ValueError(f"unknown empty-channel policy {empty_policy!r}")
    if bad_program_policy not in BAD_POLICIES:
        raise ValueError(f"unknown bad-program policy {bad_program_policy!r}")
    if not isinstance(data, dict):
        raise CatalogError(f"catalog must be an object, got {type(data).__name__}")
    raw_channels = data.get("channels") or []
    if not isinstance(raw_channels, list):
        raise CatalogError("'channels' must be a list")

    channels: List[Channel] = []
    ids: set[str] = set()
    for idx, raw in enumerate(raw_channels):
        chan = _parse_channel(raw, idx, bad_program_policy)
        if chan.id in ids:
            raise CatalogError(f"duplicate channel id {chan.id!r}")
        ids.add(chan.id)

        if not chan.programs:
            if empty_policy == "reject":
                raise CatalogError(f"channel {chan.id!r} has no programs")
            if empty_policy == "drop":
                log.warning("dropping empty channel %r", chan.id)
                continue
        channels.append(chan)

    if not channels:
        raise CatalogError("catalog contains no usable channels")
    log.info("catalog: %d channels, %d programs",
             len(channels), sum(len(c.programs) for c in channels))
    return tuple(channels)


def load_catalog(path: str | None = None, **policies: str) -> Tuple[Channel, ...]:
    path = path or config.CATALOG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"cannot read catalog {path}: {e}") from e
    log.info("loading catalog from %s", os.path.abspath(path))
    return parse_catalog(data, **policies)


# ── Demo data ───────────────────────────────────────────────────────────────
_DEMO_TITLES = [
    "Morning News", "Cartoon Block", "Cooking Live", "Nature Hour",
    "Sitcom Rerun", "Game Show", "Talk Tonight", "Movie Matinee",
    "Weather Watch", "Sports Desk", "Documentary", "Late Movie",
    "Music Videos", "Science Now", "Classic Drama", "Infomercial",
]
_DEMO_LENGTHS = (15, 30, 30, 45, 60, 60, 90, 120)


def demo_data(channel_count: int | None = None, seed: int | None = None) -> Dict[str, Any]:
    """
    Deterministic mock guide as raw catalog JSON.

    Channel 2 signs off early in the evening and channel 3 has dead air
    between programs, so the empty-window and gapped-row paths get exercised.
    """
    count = channel_count if channel_count is not None else config.DEMO_CHANNELS
    rng   = random.Random(config.DEMO_SEED if seed is None else seed)
    channels = []

    for c in range(count):
        sign_off = 19 * 60 if c == 2 else MINUTES_PER_DAY
        gappy    = c == 3
        programs, t, n = [], 0, 0
        while t < sign_off:
            dur = min(rng.choice(_DEMO_LENGTHS), sign_off - t)
            programs.append({
                "id":       f"c{c}p{n}",
                "title":    rng.choice(_DEMO_TITLES),
                "start":    t,
                "duration": dur,
            })
            t += dur + (rng.choice((0, 15, 30)) if gappy else 0)
            n += 1
        channels.append({"id": f"ch{c + 1}", "name": f"Channel {c + 1}", "programs": programs})

    return {"channels": channels}


def demo_catalog(channel_count: int | None = None, seed: int | None = None) -> Tuple[Channel, ...]:
    return parse_catalog(demo_data(channel_count, seed))
