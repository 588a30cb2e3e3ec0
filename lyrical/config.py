"""Config & Constants"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (one level up from lyrical/)
_ROOT = Path(__file__).parent.parent
load_dotenv(_ROOT / ".env")

# ─── Paths ────────────────────────────────────────────────────────────────────
ROOT_DIR = _ROOT
OUTPUT_DIR = ROOT_DIR / os.getenv("OUTPUT_DIR", "output")
CACHE_DIR = ROOT_DIR / os.getenv("CACHE_DIR", "results")
ERRORS_LOG = OUTPUT_DIR / "errors.log"
BUNDLE_FILE = OUTPUT_DIR / "lyrics_bundle.json"

# ─── Recognition (AudD) ───────────────────────────────────────────────────────
AUDD_API_URL = os.getenv("AUDD_API_URL", "https://api.audd.io/")
AUDD_API_TOKEN = os.getenv("AUDD_API_TOKEN", "")
AUDD_TIMEOUT = int(os.getenv("AUDD_TIMEOUT", "30"))
AUDD_RETURN = os.getenv("AUDD_RETURN", "timecode,apple_music,spotify,deezer,napster,lyrics")

# ─── Lyrics service ───────────────────────────────────────────────────────────
LYRICS_PORT = int(os.getenv("LYRICS_PORT", "3000"))
LYRICS_SERVICE_URL = os.getenv("LYRICS_SERVICE_URL", f"http://localhost:{LYRICS_PORT}").rstrip("/")
LYRICS_TIMEOUT = int(os.getenv("LYRICS_TIMEOUT", "60"))
SEARCH_TIMEOUT = int(os.getenv("SEARCH_TIMEOUT", "45"))   # per syncedlyrics subprocess

# ─── Recording ────────────────────────────────────────────────────────────────
RECORDING_DURATION = float(os.getenv("RECORDING_DURATION", "8"))   # seconds of listening
RECORDER_BIN = os.getenv("RECORDER_BIN", "rec")                    # SoX
RECORDING_RATE = int(os.getenv("RECORDING_RATE", "44100"))

# ─── Sync engine ──────────────────────────────────────────────────────────────
TICK_INTERVAL = float(os.getenv("TICK_INTERVAL", "0.25"))
LYRICS_WINDOW = int(os.getenv("LYRICS_WINDOW", "7"))       # lines shown around the current one
END_LINGER = float(os.getenv("END_LINGER", "8"))           # seconds to keep the last line up
UNTIMED_DURATION = float(os.getenv("UNTIMED_DURATION", "300"))  # how long to show untimed lyrics

APP_VERSION = "0.1.0"

# ─── Dev mode ─────────────────────────────────────────────────────────────────
DEV_MODE = os.getenv("DEV_MODE", "1").strip() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
