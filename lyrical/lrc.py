"""LRC parser — raw lyrics text (plain or LRC-tagged) into an ordered track."""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .timecode import parse_lrc_tag

# Whole-line ID tags: [ar:Artist], [ti:Title], [offset:+250] ...
_ID_TAG = re.compile(r"^\[(ar|ti|al|au|by|re|ve|length|offset|#):(.*)\]$", re.IGNORECASE)


@dataclass(frozen=True)
class LyricLine:
    text: str
    timestamp_seconds: Optional[float] = None

    @property
    def is_timed(self) -> bool:
        return self.timestamp_seconds is not None


@dataclass(frozen=True)
class LyricTrack:
    lines: tuple[LyricLine, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # read-only copy of the caller's tags
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> LyricLine:
        return self.lines[index]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def has_timestamps(self) -> bool:
        return any(line.is_timed for line in self.lines)

    @property
    def last_timestamp(self) -> Optional[float]:
        stamps = [ln.timestamp_seconds for ln in self.lines if ln.is_timed]
        return max(stamps) if stamps else None


EMPTY_TRACK = LyricTrack()


def parse_lyrics(raw_text: Optional[str]) -> LyricTrack:
    """Parse lyrics text into a LyricTrack.

    Blank lines are dropped, every other line keeps its position. A line
    without a leading [mm:ss.xx] tag becomes an untimed LyricLine. ID tags
    like [ar:...] go into ``metadata``; a numeric [offset:ms] shifts all
    timestamps (positive = lyrics earlier).
    """
    if not raw_text:
        return EMPTY_TRACK

    metadata: dict[str, str] = {}
    parsed: list[tuple[Optional[float], str]] = []

    for line in raw_text.splitlines():
        t = line.strip()
        if not t:
            continue

        id_match = _ID_TAG.match(t)
        if id_match:
            metadata[id_match.group(1).lower()] = id_match.group(2).strip()
            continue

        parsed.append(parse_lrc_tag(t))

    shift = _offset_seconds(metadata.get("offset"))
    lines = tuple(
        LyricLine(
            text=text,
            timestamp_seconds=None if ts is None else max(0.0, ts - shift),
        )
        for ts, text in parsed
    )
    return LyricTrack(lines=lines, metadata=metadata)


def _offset_seconds(value: Optional[str]) -> float:
    if not value:
        return 0.0
    try:
        return int(value.strip()) / 1000
    except ValueError:
        return 0.0
