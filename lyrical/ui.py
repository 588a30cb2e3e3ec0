"""UI display helpers — header, song panel, live lyrics view."""
from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .config import APP_VERSION, LYRICS_WINDOW
from .cursor import NO_LINE
from .lrc import LyricTrack
from .recognition import RecognitionResult
from .timecode import PLACEHOLDER

console = Console()


def print_header():
    console.print(
        f"\n  [bold cyan]🎶  Lyrical Glasses[/bold cyan]"
        f"  [dim]v{APP_VERSION}[/dim]"
    )


def print_song(result: RecognitionResult):
    """Panel with title, artist and the reported position in track."""
    name = result.title or "Unknown title"
    if result.artist:
        name += f" - {result.artist}"

    lines = [f"  [bold]{name}[/bold]"]
    if result.timecode:
        lines.append(f"  [dim]Position in track: {result.timecode}[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title="[bold green]🎵[/bold green] Recognized",
        border_style="green",
        expand=False,
        padding=(0, 1),
    ))


def print_not_recognized():
    console.print("  [yellow]Not recognized.[/yellow] [dim]Try again closer to the speaker.[/dim]")


def print_no_lyrics():
    console.print("  [italic dim]No lyrics available for this song[/italic dim]")


def _window_bounds(total: int, index: int, window: int) -> tuple[int, int]:
    if total <= window:
        return 0, total
    center = max(index, 0)
    start = max(0, center - window // 2)
    end = min(total, start + window)
    return max(0, end - window), end


def render_lyrics(
    track: LyricTrack,
    index: int = NO_LINE,
    timecode: str = PLACEHOLDER,
    window: int = LYRICS_WINDOW,
    title: str = "Lyrics",
) -> Panel:
    """Window of lines around the current one.

    Lines before ``index`` are dimmed, the current line is highlighted and
    everything after it is shown normally. Untimed lines follow the same
    rule by position.
    """
    start, end = _window_bounds(len(track), index, window)

    rows: list[Text] = []
    for i in range(start, end):
        text = track[i].text or "♪"
        if i == index:
            rows.append(Text(f"▶ {text}", style="bold yellow"))
        elif i < index:
            rows.append(Text(f"  {text}", style="dim"))
        else:
            rows.append(Text(f"  {text}"))

    if not rows:
        rows.append(Text("  No lyrics available for this song", style="italic dim"))

    return Panel(
        Group(*rows),
        title=f"[bold]{title}[/bold]",
        subtitle=f"[cyan]{timecode}[/cyan]",
        border_style="cyan",
        padding=(0, 1),
    )


class LyricsView:
    """Session listener that keeps a rich Live display in step with the cursor."""

    def __init__(self, track: LyricTrack, title: str = "Lyrics", window: int = LYRICS_WINDOW):
        self.track = track
        self.title = title
        self.window = window
        self.index = NO_LINE
        self.timecode = PLACEHOLDER
        self.elapsed: Optional[float] = None
        self.live = None

    def __call__(self, event: str, data: dict):
        if event == "line_changed":
            self.index = data["index"]
        elif event == "position":
            self.timecode = data["timecode"]
            self.elapsed = data.get("elapsed")
        if self.live is not None:
            self.live.update(self.render())

    def render(self) -> Panel:
        return render_lyrics(self.track, self.index, self.timecode, self.window, self.title)
