"""
hkanno.serializer - Document model to canonical hkanno text.

Output layout:

    # numOriginalFrames: 38
    # duration: 1.5
    # numAnnotationTracks: 1

    trackName: Track1
    # numAnnotations: 1
    0.100000 MCO_DodgeOpen
"""

from __future__ import annotations

from hkanno.model import AnnotationTrack, Hkanno, encode_nullable


def format_time(seconds: float) -> str:
    """Format an annotation time with exactly six decimals."""
    return f"{seconds:.6f}"


def format_number(value: float) -> str:
    """Format a float in its shortest form, dropping a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def track_to_lines(track: AnnotationTrack) -> list[str]:
    """Render one track block (without the separating blank line)."""
    # trackName is written even when the track has no annotations
    lines = [
        f"trackName: {encode_nullable(track.name)}",
        f"# numAnnotations: {len(track.annotations)}",
    ]
    for ann in track.annotations:
        lines.append(f"{format_time(ann.time)} {encode_nullable(ann.text)}")
    return lines


def hkanno_to_text(hkanno: Hkanno) -> str:
    """Convert a Hkanno document to editable text.

    Args:
        hkanno: Document to serialize

    Returns:
        Canonical hkanno text, lines joined with LF
    """
    lines = [
        f"# numOriginalFrames: {hkanno.num_original_frames}",
        f"# duration: {format_number(hkanno.duration)}",
        f"# numAnnotationTracks: {len(hkanno.tracks)}",
    ]

    for track in hkanno.tracks:
        lines.append("")
        lines.extend(track_to_lines(track))

    return "\n".join(lines)
