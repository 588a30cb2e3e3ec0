"""Timecode codec — textual timecodes to seconds and back.

Malformed input never raises: an unreadable timecode is "unknown" and maps
to 0 seconds, an unreadable LRC tag maps to "no timestamp".
"""
import math
import re
from typing import NamedTuple, Optional

PLACEHOLDER = "--:--"

# [mm:ss] or [mm:ss.xx] at the very start of a line
_LRC_TAG = re.compile(r"^\[(\d+):(\d{1,2}(?:\.\d+)?)\]")

# MM:SS[.f] or HH:MM:SS[.f], unsigned digits only
_TIMECODE = re.compile(r"(?:(\d+):)?(\d+):(\d+(?:\.\d+)?)", re.ASCII)


class LrcTag(NamedTuple):
    timestamp_seconds: Optional[float]
    remainder_text: str


def parse_timecode(text: Optional[str]) -> float:
    """'MM:SS[.f]' or 'HH:MM:SS[.f]' → seconds. Returns 0.0 when unreadable."""
    if not text or not isinstance(text, str):
        return 0.0

    match = _TIMECODE.fullmatch(text.strip())
    if not match:
        return 0.0

    hours, minutes, seconds = match.groups()
    try:
        total = int(hours or 0) * 3600 + int(minutes) * 60 + float(seconds)
    except OverflowError:
        return 0.0
    if not math.isfinite(total):
        return 0.0
    return total


def format_timecode(seconds: Optional[float]) -> str:
    """Seconds → zero-padded 'MM:SS'. None/NaN/inf give '--:--'."""
    if seconds is None:
        return PLACEHOLDER
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return PLACEHOLDER
    if not math.isfinite(value):
        return PLACEHOLDER

    value = max(0.0, value)
    minutes = int(value // 60)
    secs = int(value % 60)
    return f"{minutes:02d}:{secs:02d}"


def parse_lrc_tag(line: str) -> LrcTag:
    """Split a leading [mm:ss.xx] tag off a lyric line."""
    stripped = line.strip()
    match = _LRC_TAG.match(stripped)
    if not match:
        return LrcTag(None, stripped)

    minutes, seconds = match.groups()
    timestamp = int(minutes) * 60 + float(seconds)
    return LrcTag(timestamp, stripped[match.end():].strip())
