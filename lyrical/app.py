"""App controller — listen, identify, fetch lyrics, run the sync session.

Everything upstream of the session (recording, recognition, lyrics fetch)
is awaited here; the session only starts once a track is in hand.
"""
import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from rich.live import Live

from .config import END_LINGER, UNTIMED_DURATION
from .errors import format_error
from .lrc import LyricTrack, parse_lyrics
from .lyrics_client import fetch_lyrics
from .recognition import RecognitionResult, extract_lyrics_text, recognize
from .recorder import record_sample
from .session import SyncSession
from .ui import (
    LyricsView,
    console,
    print_no_lyrics,
    print_not_recognized,
    print_song,
)

logger = logging.getLogger(__name__)


class LyricsApp:
    def __init__(self, session: Optional[SyncSession] = None):
        self.session = session or SyncSession()

    # ── Upstream ─────────────────────────────────────────────────────────────

    async def capture(self) -> Optional[Path]:
        with console.status("  [blue]Listening...[/blue]", spinner="dots"):
            path, err = await record_sample()
        if err:
            console.print(f"\n[red]{format_error('record', raw=err)}[/red]")
            return None
        return path

    async def identify(self, audio_path: Path) -> Optional[RecognitionResult]:
        with console.status("  [blue]Identifying song...[/blue]", spinner="dots"):
            result, err = await recognize(audio_path)
        if err:
            console.print(f"\n[red]{format_error('recognize', str(audio_path), raw=err)}[/red]")
            return None
        if result is None:
            print_not_recognized()
            return None
        return result

    async def load_track(self, result: RecognitionResult) -> Optional[LyricTrack]:
        """Fetch and parse lyrics. None means the fetch failed outright.

        A fetch failure or "not found" falls back to the lyrics AudD embedded
        in its response; an empty track means no lyrics anywhere.
        """
        query = result.search_query
        with console.status("  [blue]Fetching lyrics...[/blue]", spinner="dots"):
            text, err = await fetch_lyrics(query)

        embedded = extract_lyrics_text(result.lyrics)
        if err:
            console.print(f"\n[red]{format_error('fetch_lyrics', query, raw=err)}[/red]")
            if not embedded:
                return None
            console.print("  [dim]Using the lyrics that came with the recognition result.[/dim]")

        if not text:
            text = embedded
        return parse_lyrics(text)

    # ── Session ──────────────────────────────────────────────────────────────

    async def follow(self, track: LyricTrack, offset_seconds: float, title: str = "Lyrics"):
        """Render the track live until it ends or the user hits Ctrl+C."""
        if not track.has_timestamps:
            console.print("  [dim]These lyrics have no timestamps; showing them without highlighting.[/dim]")
        view = LyricsView(track, title=title)
        done = asyncio.Event()
        end_at = _end_time(track, offset_seconds)

        def _watch_end(event: str, data: dict):
            if event == "position" and data["elapsed"] >= end_at:
                done.set()

        self.session.subscribe(view)
        self.session.subscribe(_watch_end)
        try:
            with Live(view.render(), console=console, refresh_per_second=8) as live:
                view.live = live
                self.session.start(track, offset_seconds)
                await done.wait()
        finally:
            view.live = None
            await self.session.close()
            self.session.unsubscribe(view)
            self.session.unsubscribe(_watch_end)

    # ── Flows ────────────────────────────────────────────────────────────────

    async def listen(self, audio_file: Optional[Path] = None, offset: Optional[float] = None) -> int:
        """Full flow. Returns a process exit code."""
        if audio_file is None:
            sample_started = time.monotonic()
            recording = await self.capture()
            if recording is None:
                return 1
            try:
                result = await self.identify(recording)
            finally:
                recording.unlink(missing_ok=True)
        else:
            sample_started = None
            result = await self.identify(audio_file)

        if result is None:
            return 1
        print_song(result)

        track = await self.load_track(result)
        if track is None:
            return 1
        if track.is_empty:
            print_no_lyrics()
            return 0

        if offset is None:
            offset = result.offset_seconds
            # The song kept going while we recorded and waited on the network
            if sample_started is not None:
                offset += time.monotonic() - sample_started

        title = f"{result.title} - {result.artist}" if result.artist else result.title
        await self.follow(track, offset, title=title or "Lyrics")
        return 0

    async def play_file(self, lrc_path: Path, offset: float = 0.0) -> int:
        """Follow a local .lrc file without recognition."""
        try:
            text = lrc_path.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Can't read {lrc_path}: {e}[/red]")
            return 1

        track = parse_lyrics(text)
        if track.is_empty:
            print_no_lyrics()
            return 0

        title = track.metadata.get("ti") or lrc_path.stem
        await self.follow(track, offset, title=title)
        return 0


def _end_time(track: LyricTrack, offset_seconds: float) -> float:
    """Song position at which following stops."""
    if not track.has_timestamps:
        return offset_seconds + UNTIMED_DURATION
    return max(track.last_timestamp, offset_seconds) + END_LINGER
