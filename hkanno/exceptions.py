"""
hkanno.exceptions - Custom exception classes.

All hkanno-specific exceptions inherit from HkannoError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hkanno.parser import InvalidTime


class HkannoError(Exception):
    """Base exception for all hkanno errors."""

    pass


class ConfigError(HkannoError):
    """Configuration loading or validation error."""

    pass


class UnsupportedFileError(HkannoError):
    """File extension is not an animation file the editor can open."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Unsupported file (expected .hkx or .xml): {path}")


class BackendError(HkannoError):
    """Load/save/preview collaborator error."""

    pass


class LoadError(BackendError):
    """Failed to load hkanno from a file."""

    pass


class SaveError(BackendError):
    """Failed to save hkanno to a file."""

    pass


class PreviewError(BackendError):
    """Failed to produce the XML preview."""

    pass


class InvalidTimeError(HkannoError):
    """Annotation lines carry time values that are not numbers."""

    def __init__(self, invalid: list[InvalidTime]) -> None:
        self.invalid = invalid
        lines = ", ".join(str(i.line_number) for i in invalid)
        super().__init__(f"Invalid annotation time on line(s): {lines}")
