"""Sync session — drives the lyric cursor from the playback clock.

Owns the anchor, the cursor and the single tick task. Listeners get
``(event, data)`` calls:

    line_changed  {index, text, timecode, elapsed}   only when the index moves
    position      {index, timecode, elapsed}         every tick

Listeners run synchronously inside the tick, so nothing from a previous
session is left queued once ``start()`` returns.
"""
import asyncio
import logging
import time
from typing import Callable, Optional

from .clock import PlaybackAnchor, elapsed_seconds
from .config import TICK_INTERVAL
from .cursor import LyricCursor, NO_LINE
from .lrc import LyricTrack
from .timecode import format_timecode

logger = logging.getLogger(__name__)

Listener = Callable[[str, dict], None]


class SyncSession:
    def __init__(self, interval: float = TICK_INTERVAL, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self._listeners: list[Listener] = []

        self._anchor: Optional[PlaybackAnchor] = None
        self._cursor = LyricCursor()
        self._tick_task: Optional[asyncio.Task] = None
        self._generation = 0

    # ── Listeners ────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self, track: LyricTrack, start_offset_seconds: float = 0.0):
        """Begin tracking ``track`` from ``start_offset_seconds``.

        Stops any running session first and emits the initial state before
        returning. Needs a running event loop.
        """
        loop = asyncio.get_running_loop()
        self.stop()

        self._generation += 1
        generation = self._generation
        self._anchor = PlaybackAnchor.start(start_offset_seconds, clock=self._clock)
        self._cursor.attach(track)
        logger.info(
            "Sync session %d started: %d lines, offset %.2fs",
            generation, len(track), start_offset_seconds,
        )

        self._evaluate(generation)
        if generation != self._generation:
            return
        self._tick_task = loop.create_task(self._tick_loop(generation))

    def stop(self):
        """Cancel the tick task. Safe to call when already stopped."""
        self._generation += 1
        task = self._tick_task
        self._tick_task = None
        if task and not task.done():
            task.cancel()
        if self._anchor is not None:
            logger.info("Sync session stopped")
        self._anchor = None
        self._cursor.detach()

    async def close(self):
        """Stop and wait for the tick task to unwind."""
        task = self._tick_task
        self.stop()
        if task:
            try:
                await task
            except asyncio.CancelledError:
                pass

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._tick_task is not None and not self._tick_task.done()

    @property
    def anchor(self) -> Optional[PlaybackAnchor]:
        return self._anchor

    @property
    def track(self) -> Optional[LyricTrack]:
        return self._cursor.track

    @property
    def current_index(self) -> Optional[int]:
        return self._cursor.index

    def elapsed(self) -> Optional[float]:
        if self._anchor is None:
            return None
        return elapsed_seconds(self._anchor, self._clock())

    # ── Tick ─────────────────────────────────────────────────────────────────

    async def _tick_loop(self, generation: int):
        while generation == self._generation:
            await asyncio.sleep(self.interval)
            self._evaluate(generation)

    def _evaluate(self, generation: int):
        if generation != self._generation or self._anchor is None:
            return

        elapsed = elapsed_seconds(self._anchor, self._clock())
        timecode = format_timecode(elapsed)

        changed = self._cursor.update(elapsed)
        if changed is not None:
            text = self._cursor.track[changed].text if changed != NO_LINE else ""
            self._emit(generation, "line_changed", {
                "index": changed,
                "text": text,
                "timecode": timecode,
                "elapsed": round(elapsed, 2),
            })
            if generation != self._generation:
                return

        self._emit(generation, "position", {
            "index": self._cursor.index,
            "timecode": timecode,
            "elapsed": round(elapsed, 2),
        })

    def _emit(self, generation: int, event: str, data: dict):
        for listener in list(self._listeners):
            # a listener restarted or stopped the session: the rest is stale
            if generation != self._generation:
                break
            try:
                listener(event, data)
            except Exception:
                logger.exception("Sync listener failed on %s", event)
