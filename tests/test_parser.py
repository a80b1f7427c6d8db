"""Tests for hkanno.parser module."""

from __future__ import annotations

import math

from hkanno.model import NULL_STR, Annotation
from hkanno.parser import (
    InvalidTime,
    find_invalid_times,
    parse_document,
    parse_header_comments,
    parse_tracks,
)


class TestParseTracks:
    def test_parses_multiple_tracks(self, two_track_text: str) -> None:
        tracks = parse_tracks(two_track_text)

        assert [t.name for t in tracks] == ["Track1", "Track2"]
        assert [len(t.annotations) for t in tracks] == [2, 1]
        assert tracks[0].annotations == [
            Annotation(time=0.1, text="MCO_DodgeOpen"),
            Annotation(time=0.4, text="MCO_DodgeClose"),
        ]
        assert tracks[1].annotations == [Annotation(time=0.9, text="MCO_Recovery")]

    def test_accepts_line_sequence(self, two_track_text: str) -> None:
        assert parse_tracks(two_track_text.split("\n")) == parse_tracks(two_track_text)

    def test_null_text_then_literal_text(self) -> None:
        text = f"""
trackName: Track1
# numAnnotations: 2
0.000000    {NULL_STR}
0.500000   EventName
"""
        tracks = parse_tracks(text)
        assert len(tracks) == 1
        assert tracks[0].annotations[0].text is None
        assert tracks[0].annotations[1].text == "EventName"

    def test_flexible_spacing_in_header(self) -> None:
        text = """
trackName                        :                Hi
# numAnnotations: 1
0.123456 SomeEvent
"""
        tracks = parse_tracks(text)
        assert tracks[0].name == "Hi"
        assert tracks[0].annotations[0].text == "SomeEvent"

    def test_orphan_annotations_collected_into_one_unnamed_track(self) -> None:
        text = """
0.111111 OrphanEvent
0.222222 SecondOrphan
trackName: Named
0.3 Owned
"""
        tracks = parse_tracks(text)
        assert len(tracks) == 2
        assert tracks[0].name is None
        assert [a.text for a in tracks[0].annotations] == ["OrphanEvent", "SecondOrphan"]
        assert tracks[1].name == "Named"

    def test_ignores_comments_and_blank_lines(self) -> None:
        text = """

# Some comment
trackName: TrackA

# numAnnotations: 2

0.100000 Event1
0.200000 Event2

# End of track
"""
        tracks = parse_tracks(text)
        assert len(tracks) == 1
        assert tracks[0].name == "TrackA"
        assert len(tracks[0].annotations) == 2

    def test_tabs_and_spaces(self) -> None:
        text = """
trackName:\tSpacedTrack
# numAnnotations: 2
0.111111\t\tEvent  A
0.222222      EventB
"""
        tracks = parse_tracks(text)
        assert tracks[0].name == "SpacedTrack"
        assert tracks[0].annotations[0].text == "Event  A"
        assert tracks[0].annotations[1].text == "EventB"

    def test_zero_annotation_tracks_kept(self) -> None:
        text = """
trackName: EmptyTrack
# numAnnotations: 0
trackName: AlsoEmpty

trackName: Last
"""
        tracks = parse_tracks(text)
        assert [t.name for t in tracks] == ["EmptyTrack", "AlsoEmpty", "Last"]
        assert all(t.annotations == [] for t in tracks)

    def test_mixed_case_header(self) -> None:
        tracks = parse_tracks("TRACKNAME: MixedCase\n0.1 EventX\n")
        assert tracks[0].name == "MixedCase"
        assert tracks[0].annotations[0].text == "EventX"

    def test_null_track_name(self) -> None:
        assert parse_tracks(f"trackName: {NULL_STR}\n")[0].name is None

    def test_empty_input(self) -> None:
        assert parse_tracks("") == []
        assert parse_tracks("\n# only a comment\n") == []

    def test_malformed_time_propagates_as_nan(self) -> None:
        tracks = parse_tracks("trackName: A\nsoon Event\n")
        assert math.isnan(tracks[0].annotations[0].time)
        assert tracks[0].annotations[0].text == "Event"


class TestFindInvalidTimes:
    def test_reports_each_malformed_line(self) -> None:
        text = "trackName: A\n0.1 Ok\nsoon Event\n1.x Other\n"
        assert find_invalid_times(text) == [
            InvalidTime(line_number=3, token="soon", text="Event"),
            InvalidTime(line_number=4, token="1.x", text="Other"),
        ]

    def test_valid_document(self, two_track_text: str) -> None:
        assert find_invalid_times(two_track_text) == []


class TestParseHeaderComments:
    def test_reads_document_header(self, two_track_text: str) -> None:
        assert parse_header_comments(two_track_text) == {
            "num_original_frames": 38,
            "duration": 1.5,
            "num_annotation_tracks": 2,
        }

    def test_stops_at_first_track(self) -> None:
        text = "trackName: A\n# duration: 9\n"
        assert parse_header_comments(text) == {}

    def test_skips_unparseable_values(self) -> None:
        assert parse_header_comments("# numOriginalFrames: lots\n") == {}


class TestParseDocument:
    def test_metadata_from_header_comments(self, two_track_text: str) -> None:
        hkanno = parse_document(two_track_text, ptr="#0003")
        assert hkanno.ptr == "#0003"
        assert hkanno.num_original_frames == 38
        assert hkanno.duration == 1.5
        assert len(hkanno.tracks) == 2

    def test_explicit_metadata_wins(self, two_track_text: str) -> None:
        hkanno = parse_document(two_track_text, num_original_frames=10, duration=0.5)
        assert hkanno.num_original_frames == 10
        assert hkanno.duration == 0.5

    def test_defaults_without_header(self) -> None:
        hkanno = parse_document("0.1 A\n")
        assert hkanno.num_original_frames == 0
        assert hkanno.duration == 0.0
