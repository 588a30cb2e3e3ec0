"""Song recognition via the AudD API."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx

from .config import AUDD_API_URL, AUDD_API_TOKEN, AUDD_RETURN, AUDD_TIMEOUT
from .timecode import parse_timecode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionResult:
    title: str
    artist: str
    timecode: Optional[str] = None
    lyrics: Any = None                 # raw AudD "lyrics" field: str, dict or None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def offset_seconds(self) -> float:
        return parse_timecode(self.timecode) if self.timecode else 0.0

    @property
    def search_query(self) -> str:
        return f"{self.title} {self.artist}".strip()

    @classmethod
    def from_api(cls, data: dict) -> "RecognitionResult":
        timecode = data.get("timecode")
        return cls(
            title=str(data.get("title") or "").strip(),
            artist=str(data.get("artist") or "").strip(),
            timecode=str(timecode) if timecode else None,
            lyrics=data.get("lyrics"),
            raw=data,
        )


async def recognize(
    audio_path: Path,
    api_token: str = AUDD_API_TOKEN,
    client: Optional[httpx.AsyncClient] = None,
) -> tuple[Optional[RecognitionResult], str]:
    """
    POST the recorded sample to AudD.
    Returns (result, error_message). (None, "") means "not recognized".
    """
    try:
        audio_bytes = audio_path.read_bytes()
    except OSError as e:
        return None, f"Failed to read recording: {e}"

    form = {"api_token": api_token, "return": AUDD_RETURN}
    files = {"file": (audio_path.name, audio_bytes, "audio/wav")}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=AUDD_TIMEOUT) as own_client:
                r = await own_client.post(AUDD_API_URL, data=form, files=files)
        else:
            r = await client.post(AUDD_API_URL, data=form, files=files)

        if r.status_code != 200:
            return None, f"AudD HTTP {r.status_code}: {r.text[:200]}"
        data = r.json()
    except httpx.TimeoutException:
        return None, f"AudD timed out after {AUDD_TIMEOUT}s"
    except httpx.HTTPError as e:
        return None, f"AudD HTTP error: {e}"
    except ValueError as e:
        return None, f"AudD returned invalid JSON: {e}"

    if not isinstance(data, dict):
        return None, "AudD returned an unexpected payload"

    if data.get("status") == "error":
        err = data.get("error") or {}
        return None, f"AudD error {err.get('error_code', '?')}: {err.get('error_message', 'unknown')}"

    result = data.get("result")
    if not result:
        logger.info("AudD did not recognize the sample")
        return None, ""

    recognized = RecognitionResult.from_api(result)
    logger.info("Recognized %r by %r at %s", recognized.title, recognized.artist, recognized.timecode)
    return recognized, ""


def extract_lyrics_text(lyrics: Any) -> str:
    """Best-effort text out of AudD's embedded lyrics field.

    The field is sometimes a plain string and sometimes an object whose
    shape varies; this guesses which part is the lyrics. Returns "" when
    there is nothing usable.
    """
    if not lyrics:
        return ""
    if isinstance(lyrics, str):
        return lyrics
    if not isinstance(lyrics, dict):
        return ""

    text = lyrics.get("text")
    if isinstance(text, str) and text.strip():
        return text

    if lyrics.get("trackingURL"):
        return f"Lyrics available via: {lyrics['trackingURL']}"

    candidates = [v for v in lyrics.values() if isinstance(v, str) and len(v) > 50]
    if candidates:
        return max(candidates, key=len)

    lines = ["Lyrics metadata:"]
    for key, value in lyrics.items():
        if value is None or key == "instrumental":
            continue
        shown = "[Object]" if isinstance(value, (dict, list)) else str(value)[:100]
        lines.append(f"{key}: {shown}")
    return "\n".join(lines) if len(lines) > 1 else ""
