# cycle_overlay/config.py

import os
from pathlib import Path

# ---------- Directory Configuration ----------
ROOT_DIR = Path(__file__).parent.parent  # Go up one level from cycle_overlay/ to project root

# Log directories
LOGS_DIR = ROOT_DIR / "logs"
TEST_LOGS_DIR = LOGS_DIR / "test"

# Output files
OUTPUT_JSON = ROOT_DIR / "live_overlay.json"
SIMULATED_LOG_FILE = ROOT_DIR / "simulated_Prospect.log"

# Game log location under %LOCALAPPDATA%
GAME_LOG_RELATIVE_PATH = Path("Prospect") / "Saved" / "Logs" / "Prospect.log"

# ---------- Timing Configuration ----------
UPDATE_INTERVAL = 0.5  # How often to update JSON output
TERMINAL_INTERVAL = 1.0  # How often to redraw the terminal snapshot
FILE_CHECK_INTERVAL = 0.1  # Pause at end of file before reading again
SIMULATION_SPEED = 0.05  # Seconds between simulated log lines
SIMULATION_CHUNK_SIZE = 1  # How many log lines to write at once

# ---------- Log Line Format ----------
LINE_PATTERN = r"\[(\d{4}\.\d{2}\.\d{2}-\d{2}\.\d{2}\.\d{2}:\d{3})\]\[.{3}\](\w*): (.*)"
TIME_FORMAT = "%Y.%m.%d-%H.%M.%S:%f"

# ---------- Game Configuration ----------
CHALLENGE_TIMESTAMP_CORRECTION = 5  # Seconds subtracted from the handshake timestamp
SERVER_LIFETIME_HOURS = 6
SERVER_DEATH_WARNING_MS = 2_700_000  # 45 minutes left, countdown turns red

# Timed event lifetimes (seconds)
EVAC_SHIP_LIFETIME = 86
METEORS_LIFETIME = 45
PLAYER_EVENT_LIFETIME = 15

# Alerts: (frequency Hz, duration ms)
HIGH_TONE = (2000, 250)
LOW_TONE = (400, 150)
ALERT_MAX_AGE = 60  # Older events never beep (log catch-up)

# ---------- Overlay Colors ----------
LIGHT_GRAY_COLOR = (192, 192, 192)
GREEN_COLOR = (0, 255, 0)
ORANGE_COLOR = (255, 128, 0)
MORNING_COLOR = (0x00, 0xCC, 0xFF)
DAY_COLOR = (0xFF, 0xFF, 0x00)
EVENING_COLOR = (0xFF, 0xEF, 0xD5)
NIGHT_COLOR = (0xFF, 0x00, 0x99)
SERVER_ALIVE_COLOR = (0x99, 0x66, 0x66)
SERVER_DYING_COLOR = (255, 0, 0)

# ---------- Server Configuration ----------
WEB_SERVER_PORT = 5000
WEB_SERVER_HOST = "127.0.0.1"

# ---------- Logging Configuration ----------
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# ---------- Create Required Directories ----------
def ensure_directories():
    """Create all required directories if they don't exist."""
    directories = [
        LOGS_DIR,
        TEST_LOGS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)

# ---------- Log Path ----------
def get_log_path(argv=None):
    """Return the game log to follow: an explicit path argument wins over %LOCALAPPDATA%."""
    if argv:
        return Path(argv[0]).expanduser()
    local_app_data = os.environ.get("LOCALAPPDATA")
    if not local_app_data:
        return None
    return Path(local_app_data) / GAME_LOG_RELATIVE_PATH
