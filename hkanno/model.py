"""
hkanno.model - Annotation document model.

Pydantic models for the hkaAnnotationTrack data carried by an animation
file, plus the sentinel used to spell a null string in text form.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# `hkStringPtr`/`hkCString` null representation in hkx XML
NULL_STR = "␀"


def decode_nullable(value: str) -> str | None:
    """Decode a name/text field, mapping the sentinel to None.

    Args:
        value: Raw field value

    Returns:
        Trimmed value, or None if the trimmed value is the sentinel
    """
    trimmed = value.strip()
    if trimmed == NULL_STR:
        return None
    return trimmed


def encode_nullable(value: str | None) -> str:
    """Encode a name/text field, mapping None to the sentinel."""
    if value is None:
        return NULL_STR
    return value.strip()


class Annotation(BaseModel):
    """A single timed annotation, e.g. ``0.100000 MCO_DodgeOpen``."""

    time: float
    text: str | None = None


class AnnotationTrack(BaseModel):
    """Named (or unnamed) ordered group of annotations."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, alias="track_name")
    annotations: list[Annotation] = Field(default_factory=list)


class Hkanno(BaseModel):
    """Annotation document root for one animation."""

    model_config = ConfigDict(populate_by_name=True)

    # XML index e.g. `#0003`
    ptr: str = ""
    num_original_frames: int = Field(default=0, ge=0)
    duration: float = Field(default=0.0, ge=0.0)
    tracks: list[AnnotationTrack] = Field(default_factory=list, alias="annotation_tracks")

    @property
    def annotation_count(self) -> int:
        return sum(len(track.annotations) for track in self.tracks)

    def to_wire(self) -> dict:
        """Dump using the field names the backend expects."""
        return self.model_dump(by_alias=True)
