# config.py
"""
Configuration settings for the program guide.
"""
import os

FPS   = 30

# ── Guide geometry ─────────────────────────────────────────────────────────

# Width of the visible time window in hours. Must divide 24.
WINDOW_HOURS = 4

# Initial window: None means "the window containing the current time"
START_HOUR = None

# Starting channel row
START_CHANNEL = 0

# How often the clock overlay is refreshed (ms); never moves the window
CLOCK_TICK_MS = 60_000

# ── Catalog ────────────────────────────────────────────────────────────────

# JSON catalog written by catalog_builder.py (or by hand)
CATALOG_PATH = os.environ.get("EPG_CATALOG", "catalog.json")

# Folder of chan_<n> sub-folders used by catalog_builder.py
MOVIES_PATH = "movies"

# Channels with no programs: "drop" | "keep" | "reject"
EMPTY_CHANNEL_POLICY = "drop"

# Programs with bad times / overlaps: "reject" | "drop"
BAD_PROGRAM_POLICY = "reject"

# Demo catalog used when no catalog file exists
DEMO_CHANNELS = 12
DEMO_SEED     = 1978

# ── Display settings ───────────────────────────────────────────────────────

FULLSCREEN = True
WINDOWED_SIZE = (1280, 720)

# Channel rows drawn at once; the rest scroll
GUIDE_MAX_ROWS = 8

# Fraction of the screen width used by the channel-name column
GUIDE_LABEL_W_FRAC = 0.18

# Per-frame easing factor for row scrolling (1.0 = jump)
SCROLL_EASE = 0.25

SHOW_NOW_MARKER = True

# Seconds the info panel stays up after "i"
INFO_OVERLAY_DURATION = 8.0

# ── Colours ────────────────────────────────────────────────────────────────

BG_COLOR      = (10, 31, 63)
TEXT_MAIN     = (233, 242, 255)
TEXT_MUTED    = (184, 198, 230)
CELL_COLOR    = (27, 52, 92)
CELL_FOCUS    = (104, 168, 195)
GRID_LINE     = (43, 71, 111)
NOW_COLOR     = (255, 80, 80)
PANEL_BG      = (0, 0, 0, 180)

# ── Web remote / logging ───────────────────────────────────────────────────

WEB_ENABLED = True
WEB_PORT = int(os.environ.get("EPG_WEB_PORT", "8080"))
DIAG_REFRESH_INTERVAL = 1.0

LOG_FILE  = os.environ.get("EPG_LOG_FILE", "runtime.log")
LOG_LEVEL = os.environ.get("EPG_LOG_LEVEL", "INFO")
