#!/usr/bin/env python3
"""
web_remote.py  –  web remote + guide snapshot + diagnostics

Endpoints
---------
/               → HTML page with remote buttons, guide state and diagnostics
/guide          → JSON of the current GuideView (window, focus, cells, now marker)
/diag, /data    → JSON object of diagnostic metrics
/action?cmd=…   → inject navigation (up, down, left, right, now, window&hour=H,
                  info, quit)
/log            → contents of the runtime log (if present)

The server thread only *posts* actions; the navigator is driven exclusively
by the app's main loop.
"""

from __future__ import annotations
import http.server
import json
import logging
import math
import os
import platform
import socketserver
import threading
import time
import traceback
import urllib.parse
from typing import TYPE_CHECKING, Any

import psutil

import config
from events import EventManager

if TYPE_CHECKING:                       # avoid circular import at runtime
    from app import GuideApp

log = logging.getLogger(__name__)

# ── diagnostics refresh cadence ───────────────────────────────────────────
_last_diag_time = 0.0
_diag_interval  = getattr(config, "DIAG_REFRESH_INTERVAL", 1.0)

# ── global diagnostic store ───────────────────────────────────────────────
monitor_data: dict[str, Any] = {
    "cpu_percent":       0.0,
    "mem_used":          "0 MB",
    "mem_total":         "0 MB",
    "script_uptime":     "0d 00:00:00",
    "machine_uptime":    "0d 00:00:00",
    "load_avg":          "",
    "last_http_crash":   "",
    "python_version":    platform.python_version(),
}

_script_start = time.monotonic()
_boot_time    = psutil.boot_time()

# simple commands → action dicts
_SIMPLE_CMDS: dict[str, dict] = {
    "up":    {"type": "navigate", "direction": "up"},
    "down":  {"type": "navigate", "direction": "down"},
    "left":  {"type": "navigate", "direction": "left"},
    "right": {"type": "navigate", "direction": "right"},
    "now":   {"type": "jump_now"},
    "info":  {"type": "toggle_info"},
    "quit":  {"type": "quit"},
}


# ── helpers ────────────────────────────────────────────────────────────────
def _fmt_duration(secs: float) -> str:
    d, rem = divmod(int(secs), 86400)
    h, rem = divmod(rem, 3600)
    m, s   = divmod(rem, 60)
    return f"{d}d {h:02}:{m:02}:{s:02}"


def _maybe_update_diagnostics() -> None:
    global _last_diag_time
    now = time.monotonic()
    if now - _last_diag_time >= _diag_interval:
        _last_diag_time = now
        _update_diagnostics()


def _update_diagnostics() -> None:
    """Refresh CPU, memory, uptime and load in `monitor_data`."""
    monitor_data["cpu_percent"] = psutil.cpu_percent()
    vm = psutil.virtual_memory()
    monitor_data["mem_used"]  = f"{vm.used // 1024**2} MB"
    monitor_data["mem_total"] = f"{vm.total // 1024**2} MB"
    now = time.monotonic()
    monitor_data["script_uptime"]  = _fmt_duration(now - _script_start)
    monitor_data["machine_uptime"] = _fmt_duration(time.time() - _boot_time)
    try:
        la = os.getloadavg()
        monitor_data["load_avg"] = ", ".join(f"{x:.2f}" for x in la)
    except (AttributeError, OSError):
        monitor_data["load_avg"] = "N/A"


def parse_action(query: str) -> dict | None:
    """Map an /action query string onto an action dict (None = bad request)."""
    qs  = urllib.parse.parse_qs(query)
    cmd = qs.get("cmd", [""])[0]

    if cmd in _SIMPLE_CMDS:
        return dict(_SIMPLE_CMDS[cmd])
    if cmd == "window":
        try:
            hour = float(qs.get("hour", [""])[0])
        except ValueError:
            return None
        if not math.isfinite(hour):
            return None
        return {"type": "select_window", "hour": hour}
    return None


# ── reusable threaded HTTP server ──────────────────────────────────────────
class ReusableTCPServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads      = True
    allow_reuse_address = True


# ── request handler ────────────────────────────────────────────────────────
class RemoteHandler(http.server.BaseHTTPRequestHandler):
    def log_message(self, fmt, *args):
        log.debug("%s " + fmt, self.address_string(), *args)

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        path, qs = parsed.path, parsed.query

        if path == "/":
            return self._serve_html()
        if path == "/guide":
            return self._serve_json(self.server.app.view.as_dict())   # type: ignore
        if path in ("/diag", "/data"):
            _maybe_update_diagnostics()
            return self._serve_json(monitor_data)
        if path == "/log":
            return self._serve_log()
        if path == "/action":
            return self._serve_action(qs)

        self.send_error(404, "Not found")

    # ── helpers for each route ───────────────────────────────────────────
    def _serve_html(self):
        b = HTML_PAGE.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(b)))
        self.end_headers()
        self.wfile.write(b)

    def _serve_json(self, obj: Any):
        b = json.dumps(obj).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(b)))
        self.end_headers()
        self.wfile.write(b)

    def _serve_log(self):
        try:
            with open(config.LOG_FILE, "rb") as f:
                data = f.read()
        except OSError:
            return self.send_error(404, "Log file not found")
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _serve_action(self, query: str):
        act = parse_action(query)
        if act is None:
            return self.send_error(400, "Unknown cmd")
        EventManager.post(act)
        self.send_response(204)
        self.end_headers()


# ── simple HTML UI ─────────────────────────────────────────────────────────
HTML_PAGE = """
<!doctype html><html><head><meta charset="utf-8">
<title>Guide Remote &amp; Diagnostics</title>
<style>
 body{background:#0a1f3f;color:#e9f2ff;font-family:monospace;padding:1em;}
 a.button{display:inline-block;margin:4px;padding:6px 12px;border:1px solid #68a8c3;
          text-decoration:none;color:#e9f2ff;}
 pre{margin:0.5em 0;font-family:monospace;}
</style></head><body>
<h2>Program Guide Remote</h2>
<a class="button" href="#" onclick="act('up')">▲</a>
<a class="button" href="#" onclick="act('down')">▼</a>
<a class="button" href="#" onclick="act('left')">◀</a>
<a class="button" href="#" onclick="act('right')">▶</a>
<a class="button" href="#" onclick="act('now')">Now</a>
<a class="button" href="#" onclick="act('info')">Info</a>
<a class="button" href="#" onclick="act('quit')">Quit</a>
<a class="button" href="/log">View log</a>
<div id="slots"></div>

<div><h3>Guide</h3><pre id="guide"></pre></div>
<div><h3>Diagnostics</h3><pre id="diag"></pre></div>

<script>
 function act(q){ fetch('/action?cmd=' + q); return false; }
 function pad(n){ return String(n).padStart(2,'0'); }
 function hhmm(m){ return pad(Math.floor(m/60)) + ':' + pad(m%60); }
 async function refreshUI(){
   try {
     let g = await (await fetch('/guide')).json();
     document.getElementById('slots').innerHTML = g.segments.map(s =>
       `<a class="button" href="#" onclick="act('window&hour=${s.hour}')">` +
       (s.active ? '[' : '') + pad(s.hour) + ':00' + (s.active ? ']' : '') + '</a>').join('');
     let txt = `${g.channel ? g.channel.name : '-'}  ` +
               `${pad(g.window.start_hour)}:00–${pad(g.window.end_hour)}:00` +
               (g.now_marker === null ? '' : `  now @ ${g.now_marker.toFixed(1)}%`) + '\\n';
     for (let p of g.programs){
       txt += (p.focused ? '> ' : '  ') + hhmm(p.start) + ' ' + p.title +
              '  (' + p.width_pct.toFixed(1) + '%)\\n';
     }
     document.getElementById('guide').textContent = txt;
     let dg = await (await fetch('/diag')).json();
     let d = '';
     for (let [k,v] of Object.entries(dg)){ d += k.padEnd(20,' ') + v + '\\n'; }
     document.getElementById('diag').textContent = d;
   } catch(e){
     console.error(e);
   }
 }
 setInterval(refreshUI, 500);
 refreshUI();
</script>
</body></html>
"""


# ── server bootstrap with auto-restart ────────────────────────────────────
def start(app: "GuideApp", port: int | None = None):
    port = port or getattr(config, "WEB_PORT", 8080)

    def _serve_loop():
        while True:
            try:
                with ReusableTCPServer(("", port), RemoteHandler) as httpd:
                    httpd.app = app
                    httpd.serve_forever()
            except Exception:
                monitor_data["last_http_crash"] = traceback.format_exc()
                log.exception("web remote crashed; restarting")
                time.sleep(1)

    threading.Thread(target=_serve_loop, daemon=True).start()
    log.info("🌐 Web remote & diagnostics listening on port %d", port)
