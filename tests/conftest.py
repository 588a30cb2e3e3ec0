"""Shared fixtures."""
import pytest

from lyrical import config
from lyrical.lrc import parse_lyrics


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_output(tmp_path, monkeypatch):
    """Keep errors.log and bundles out of the project tree."""
    out = tmp_path / "output"
    monkeypatch.setattr(config, "OUTPUT_DIR", out)
    monkeypatch.setattr(config, "ERRORS_LOG", out / "errors.log")
    monkeypatch.setattr(config, "BUNDLE_FILE", out / "lyrics_bundle.json")
    monkeypatch.setattr(config, "CACHE_DIR", tmp_path / "results")
    return out


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def abc_track():
    return parse_lyrics("[00:00.00]a\n[00:02.00]b\n[00:05.00]c\n")


class Recorder:
    """Session listener that keeps every (event, data) pair."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def __call__(self, event: str, data: dict):
        self.events.append((event, data))

    def of(self, kind: str) -> list[dict]:
        return [data for event, data in self.events if event == kind]

    def clear(self):
        self.events.clear()


@pytest.fixture
def recorder():
    return Recorder()
