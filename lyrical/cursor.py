"""Lyric cursor — which line is current at a given song position."""
from typing import Optional

from .lrc import LyricTrack

NO_LINE = -1


def find_current_index(t: float, track: LyricTrack) -> int:
    """Index of the last timed line whose timestamp is <= t, or -1.

    Untimed lines are skipped: they are never the target and never move
    the cursor.
    """
    current = NO_LINE
    for i, line in enumerate(track.lines):
        if line.timestamp_seconds is not None and line.timestamp_seconds <= t:
            current = i
    return current


class LyricCursor:
    """Recomputes the index every update; only reports it when it changes.

    ``index`` is None while unanchored (no track attached).
    """

    def __init__(self, track: Optional[LyricTrack] = None):
        self.track = track
        self.index: Optional[int] = None

    def attach(self, track: LyricTrack):
        self.track = track
        self.index = None

    def detach(self):
        self.track = None
        self.index = None

    def update(self, t: float) -> Optional[int]:
        """Return the new index if it differs from the last reported one."""
        if self.track is None:
            return None
        new_index = find_current_index(t, self.track)
        if new_index == self.index:
            return None
        self.index = new_index
        return new_index
