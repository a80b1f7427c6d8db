"""
hkanno.sync - Cursor sync from the hkanno text view to the XML preview.

One-directional: a cursor move on the text side reveals the matching line
on the preview side. The maps are rebuilt only once a preview for the
newest edit has arrived; previews that finish after a newer request was
started are dropped.
"""

from __future__ import annotations

from typing import Protocol

from hkanno.correlate import HEADER, TIME, LineMaps, build_line_maps
from hkanno.lines import classify_line, is_header, is_time_bearing
from hkanno.logging import logger


class SecondaryView(Protocol):
    """The read-only preview editor being driven."""

    def reveal_line(self, line_number: int) -> None: ...

    def set_cursor(self, line_number: int, column: int) -> None: ...


class SyncController:
    """Drives a SecondaryView from cursor moves in the hkanno text."""

    def __init__(self, secondary_view: SecondaryView | None = None, strict: bool = True) -> None:
        self.secondary_view = secondary_view
        self.strict = strict
        self.maps = LineMaps()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def register_secondary(self, view: SecondaryView | None) -> None:
        self.secondary_view = view

    def update_baseline(self, primary_text: str, secondary_text: str) -> LineMaps:
        """Rebuild both maps from the current texts."""
        self.maps = build_line_maps(primary_text, secondary_text, strict=self.strict)
        return self.maps

    def begin_preview(self) -> int:
        """Start a preview request; returns its generation."""
        self._generation += 1
        return self._generation

    def complete_preview(self, generation: int, primary_text: str, secondary_text: str) -> bool:
        """Accept a finished preview if it is the newest one requested.

        Args:
            generation: Value returned by begin_preview() for this request
            primary_text: hkanno text the preview was generated from
            secondary_text: Preview XML

        Returns:
            True if the maps were rebuilt, False if the preview was stale
        """
        if generation != self._generation:
            logger.debug(
                "Discarding stale preview (generation %d, latest %d)",
                generation,
                self._generation,
            )
            return False
        self.update_baseline(primary_text, secondary_text)
        return True

    def target_for(self, line_number: int, line_text: str) -> int | None:
        """Preview line matching a text line, or None if it has no match."""
        line = classify_line(line_text)
        if is_header(line):
            return self.maps.lookup(HEADER, line_number)
        if is_time_bearing(line):
            return self.maps.lookup(TIME, line_number)
        return None

    def on_cursor_moved(self, line_number: int, line_text: str) -> int | None:
        """Handle a cursor move in the hkanno text.

        Args:
            line_number: 1-based line the cursor is on
            line_text: Content of that line

        Returns:
            Preview line that was revealed, or None
        """
        target = self.target_for(line_number, line_text)
        if target is None or self.secondary_view is None:
            return None

        self.secondary_view.reveal_line(target)
        self.secondary_view.set_cursor(target, 1)
        return target
