"""Playback clock — estimated song position from a fixed anchor.

The app never plays the song, so position is extrapolated from the moment
tracking started and the offset the recognition service reported. The
position is recomputed from the anchor on every call; nothing accumulates
between ticks.
"""
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PlaybackAnchor:
    reference_wall_clock: float       # clock() reading when tracking started
    reference_offset_seconds: float   # song position at that moment

    @classmethod
    def start(cls, offset_seconds: float = 0.0, clock: Callable[[], float] = time.monotonic) -> "PlaybackAnchor":
        return cls(reference_wall_clock=clock(), reference_offset_seconds=float(offset_seconds))


def elapsed_seconds(anchor: PlaybackAnchor, now: float) -> float:
    return anchor.reference_offset_seconds + (now - anchor.reference_wall_clock)
