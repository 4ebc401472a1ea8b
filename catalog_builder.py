"""
catalog_builder.py  – one-shot guide catalog creator

Scans chan_<n> folders, probes every video once with PyAV and lays the files
end to end from midnight.  The result is a catalog JSON that catalog.py can
load; anything that would run past midnight is cut off.
"""
from __future__ import annotations

import json
import logging
import math
import os
import pathlib
import re
import time
import typing as _t

import av  # PyAV – thin FFmpeg bindings

import config
from catalog import CatalogError
from epg_model import MINUTES_PER_DAY

log = logging.getLogger(__name__)

_VIDEO_EXT = (".mp4", ".mkv", ".avi", ".mov", ".webm")
_CHAN_RE   = re.compile(r"(?i)chan[_\-]?0*(\d+)")

Probe = _t.Callable[[str], float]


# ---------- natural sort --------------------------------------------------
def _nat_key(s: str) -> list[_t.Union[int, str]]:
    return [int(t) if t.isdigit() else t.lower()
            for t in re.split(r"(\d+)", s)]


# ---------- probe ---------------------------------------------------------
def probe_seconds(fp: str) -> float:
    """Clip length in seconds; 0.0 when the file can't be read."""
    try:
        with av.open(fp) as c:
            vs = next((s for s in c.streams if s.type == "video"), None)
            if vs is not None and vs.duration and vs.time_base:
                return float(vs.duration * vs.time_base)
            if c.duration:
                return c.duration / av.time_base
    except Exception as e:
        log.warning("probe failed for %s: %s", fp, e)
    return 0.0


def _title(fp: str) -> str:
    stem = pathlib.Path(fp).stem
    return re.sub(r"[_\.]+", " ", stem).strip() or stem


# ---------- builder -------------------------------------------------------
def channel_record(num: int, files: list[str], probe: Probe = probe_seconds) -> dict:
    """Catalog entry for one channel; programs are whole minutes, min. 1."""
    programs, t = [], 0
    for fp in files:
        secs = probe(fp)
        if secs <= 0:
            log.warning("skipping unreadable file: %s", fp)
            continue
        if t >= MINUTES_PER_DAY:
            break
        dur = min(max(1, math.ceil(secs / 60)), MINUTES_PER_DAY - t)
        programs.append({
            "id":       f"{num}-{len(programs)}",
            "title":    _title(fp),
            "start":    t,
            "duration": dur,
            "path":     fp,
        })
        t += dur
    return {"id": f"chan_{num}", "name": f"CH {num:02d}", "programs": programs}


def build_catalog(movies_path: str | None = None,
                  out_path: str | None = None,
                  probe: Probe = probe_seconds) -> dict:
    movies_path = movies_path or config.MOVIES_PATH
    out_path    = out_path or config.CATALOG_PATH

    if not os.path.isdir(movies_path):
        raise CatalogError(f"movies folder {movies_path} does not exist")
    log.info("scanning movie folders under %s …", movies_path)
    dir_map = {
        int(m.group(1)): os.path.join(movies_path, d)
        for d in os.listdir(movies_path)
        if (m := _CHAN_RE.search(d)) and os.path.isdir(os.path.join(movies_path, d))
    }

    channels = []
    for num, full_dir in sorted(dir_map.items()):
        vids = [f for f in os.listdir(full_dir) if f.lower().endswith(_VIDEO_EXT)]
        vids.sort(key=_nat_key)
        rec = channel_record(num, [os.path.join(full_dir, v) for v in vids], probe)
        if rec["programs"]:
            channels.append(rec)
        else:
            log.warning("no playable files in %s", full_dir)

    data = {"generated": time.time(), "channels": channels}
    pathlib.Path(out_path).write_text(json.dumps(data, indent=2), encoding="utf-8")
    log.info("catalog written → %s (%d channels)", out_path, len(channels))
    return data


# -------------------------------------------------------------------------
if __name__ == "__main__":
    import argparse
    ap = argparse.ArgumentParser(description="Build a guide catalog from chan_<n> folders")
    ap.add_argument("root", nargs="?", default=config.MOVIES_PATH,
                    help="root movie folder (default: ./movies)")
    ap.add_argument("-o", "--out", default=config.CATALOG_PATH,
                    help="catalog JSON to write")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")
    build_catalog(args.root, args.out)
