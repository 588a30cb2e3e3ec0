"""
Unit tests for the LRC parser.
"""

import pytest

from lyrical.lrc import EMPTY_TRACK, LyricLine, LyricTrack, parse_lyrics


SAMPLE_LRC = """\
[ti:Some Song]
[ar:Some Artist]
[00:01.00]First line

[00:04.50]Second line
An untimed aside
[00:09.00]Third line
"""


class TestParseLyrics:

    def test_timed_lines_in_order(self):
        track = parse_lyrics(SAMPLE_LRC)
        assert [ln.text for ln in track.lines] == [
            "First line", "Second line", "An untimed aside", "Third line",
        ]
        assert [ln.timestamp_seconds for ln in track.lines] == [1.0, 4.5, None, 9.0]

    def test_id_tags_become_metadata(self):
        track = parse_lyrics(SAMPLE_LRC)
        assert track.metadata == {"ti": "Some Song", "ar": "Some Artist"}

    def test_blank_lines_dropped(self):
        track = parse_lyrics("\n\n   \nhello\n\t\nworld\n")
        assert [ln.text for ln in track.lines] == ["hello", "world"]

    def test_plain_text_is_untimed(self):
        track = parse_lyrics("just words\nmore words")
        assert len(track) == 2
        assert not track.has_timestamps
        assert all(not ln.is_timed for ln in track.lines)

    @pytest.mark.parametrize("raw", ["", None, "\n\n", "   "])
    def test_empty_input_gives_empty_track(self, raw):
        track = parse_lyrics(raw)
        assert track.is_empty
        assert len(track) == 0

    def test_windows_line_endings(self):
        track = parse_lyrics("[00:01.00]a\r\n[00:02.00]b\r\n")
        assert [ln.text for ln in track.lines] == ["a", "b"]

    def test_offset_tag_shifts_timestamps(self):
        track = parse_lyrics("[offset:+500]\n[00:01.00]a\n[00:00.20]b\n")
        assert track[0].timestamp_seconds == pytest.approx(0.5)
        assert track[1].timestamp_seconds == 0.0
        assert track.metadata["offset"] == "+500"

    def test_negative_offset_delays(self):
        track = parse_lyrics("[offset:-1000]\n[00:01.00]a\n")
        assert track[0].timestamp_seconds == pytest.approx(2.0)

    def test_bad_offset_ignored(self):
        track = parse_lyrics("[offset:soon]\n[00:01.00]a\n")
        assert track[0].timestamp_seconds == pytest.approx(1.0)

    def test_section_markers_kept_as_text(self):
        track = parse_lyrics("[Chorus]\n[00:03.00]la la")
        assert track[0] == LyricLine("[Chorus]", None)

    def test_empty_tagged_line_kept(self):
        track = parse_lyrics("[00:01.00]a\n[00:03.00]\n[00:05.00]b")
        assert len(track) == 3
        assert track[1].text == ""


class TestLyricTrack:

    def test_immutable(self):
        track = parse_lyrics("[00:01.00]a")
        with pytest.raises(AttributeError):
            track.lines = ()
        assert isinstance(track.lines, tuple)

    def test_last_timestamp(self):
        assert parse_lyrics(SAMPLE_LRC).last_timestamp == 9.0
        assert parse_lyrics("no stamps").last_timestamp is None

    def test_equality_ignores_metadata(self):
        a = LyricTrack(lines=(LyricLine("x", 1.0),), metadata={"ti": "A"})
        b = LyricTrack(lines=(LyricLine("x", 1.0),))
        assert a == b

    def test_metadata_is_read_only(self):
        track = parse_lyrics("[ti:Song]\n[00:01.00]x")
        with pytest.raises(TypeError):
            track.metadata["ti"] = "Other"

    def test_metadata_copied_from_caller(self):
        tags = {"ti": "A"}
        track = LyricTrack(lines=(), metadata=tags)
        tags["ti"] = "B"
        assert track.metadata["ti"] == "A"

    def test_empty_parses_share_nothing_mutable(self):
        first, second = parse_lyrics(""), parse_lyrics(None)
        assert first.is_empty and second.is_empty
        with pytest.raises(TypeError):
            first.metadata["ar"] = "leak"
        assert dict(second.metadata) == {}
        assert dict(EMPTY_TRACK.metadata) == {}
