"""
hkanno.parser - hkanno text to document model.

Single forward pass over the lines with one track of lookback state.
Parsing never raises: malformed times become nan and are reported
separately by find_invalid_times().
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from hkanno.lines import (
    AnnotationLine,
    CommentLine,
    HeaderLine,
    classify_line,
    split_lines,
)
from hkanno.model import Annotation, AnnotationTrack, Hkanno

HEADER_COMMENT_PATTERN = re.compile(
    r"^(numOriginalFrames|duration|numAnnotationTracks)\s*:\s*(\S+)$"
)


@dataclass(frozen=True)
class InvalidTime:
    """An annotation line whose time token is not a number."""

    line_number: int
    token: str
    text: str | None


def _as_lines(text: str | Iterable[str]) -> list[str]:
    if isinstance(text, str):
        return split_lines(text)
    return list(text)


def parse_tracks(text: str | Iterable[str]) -> list[AnnotationTrack]:
    """Parse hkanno text into annotation tracks.

    Args:
        text: Full document text, or its lines

    Returns:
        Tracks in file order (possibly empty)
    """
    tracks: list[AnnotationTrack] = []
    current: AnnotationTrack | None = None

    for raw in _as_lines(text):
        line = classify_line(raw)

        if isinstance(line, HeaderLine):
            if current is not None:
                tracks.append(current)
            current = AnnotationTrack(name=line.name)
            continue

        if not isinstance(line, AnnotationLine):
            continue

        if current is None:
            # Annotations before any trackName go to one unnamed track
            current = AnnotationTrack(name=None)
        current.annotations.append(Annotation(time=line.time, text=line.text))

    if current is not None:
        tracks.append(current)

    return tracks


def find_invalid_times(text: str | Iterable[str]) -> list[InvalidTime]:
    """Report every annotation line whose time token does not parse.

    Args:
        text: Full document text, or its lines

    Returns:
        One entry per malformed annotation line, 1-based line numbers
    """
    invalid = []
    for i, raw in enumerate(_as_lines(text), 1):
        line = classify_line(raw)
        if isinstance(line, AnnotationLine) and not line.time_valid:
            invalid.append(InvalidTime(line_number=i, token=line.time_token, text=line.text))
    return invalid


def parse_header_comments(text: str | Iterable[str]) -> dict[str, Any]:
    """Read the document header comments written by the serializer.

    Only comments before the first track header count. Values that do not
    parse are skipped.

    Returns:
        Dict with any of 'num_original_frames', 'duration', 'num_annotation_tracks'
    """
    fields: dict[str, Any] = {}
    for raw in _as_lines(text):
        line = classify_line(raw)
        if isinstance(line, HeaderLine):
            break
        if not isinstance(line, CommentLine):
            continue

        match = HEADER_COMMENT_PATTERN.match(line.body)
        if not match:
            continue
        key, value = match.groups()
        try:
            if key == "numOriginalFrames":
                fields["num_original_frames"] = int(value)
            elif key == "duration":
                fields["duration"] = float(value)
            else:
                fields["num_annotation_tracks"] = int(value)
        except ValueError:
            continue
    return fields


def parse_document(
    text: str,
    ptr: str = "",
    num_original_frames: int | None = None,
    duration: float | None = None,
) -> Hkanno:
    """Build a full Hkanno document from text.

    Metadata not passed in is taken from the header comments, falling back
    to 0 frames and 0.0 seconds.

    Args:
        text: hkanno text
        ptr: XML index of the animation object
        num_original_frames: Frame count, if known
        duration: Duration in seconds, if known

    Returns:
        Parsed document
    """
    header = parse_header_comments(text) if num_original_frames is None or duration is None else {}
    if num_original_frames is None:
        num_original_frames = max(0, header.get("num_original_frames", 0))
    if duration is None:
        duration = max(0.0, header.get("duration", 0.0))

    return Hkanno(
        ptr=ptr,
        num_original_frames=num_original_frames,
        duration=duration,
        tracks=parse_tracks(text),
    )
