"""
hkanno.session - One open annotation document.

A session owns the editable text for one animation file. The text is the
source of truth: it is re-parsed into a fresh Hkanno before every save and
preview, and the document as first loaded is kept for revert.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from hkanno.backend import HkannoBackend, OutFormat
from hkanno.config import EditorConfig
from hkanno.exceptions import (
    InvalidTimeError,
    LoadError,
    PreviewError,
    SaveError,
    UnsupportedFileError,
)
from hkanno.lines import split_lines
from hkanno.logging import logger
from hkanno.model import Hkanno
from hkanno.parser import find_invalid_times, parse_tracks
from hkanno.serializer import hkanno_to_text
from hkanno.sync import SyncController

SUPPORTED_EXTENSIONS = {".hkx", ".xml"}


def infer_format_from_path(path: str, default: OutFormat = "xml") -> OutFormat:
    """Pick the output format matching the input file extension."""
    suffix = Path(path).suffix.lower()
    if suffix == ".xml":
        return "xml"
    if suffix == ".hkx":
        return "amd64"
    return default


def infer_output_path(input_path: str, suffix: str = ".modified") -> str:
    """Default output path: ``<base><suffix><ext>`` next to the input."""
    path = Path(input_path)
    if not path.suffix:
        return input_path + suffix
    return str(path.with_name(f"{path.stem}{suffix}{path.suffix}"))


def change_extension(output_path: str, format: OutFormat) -> str:
    """Swap the output extension to match a format."""
    ext = ".xml" if format == "xml" else ".hkx"
    path = Path(output_path)
    if not path.suffix:
        return output_path + ext
    return str(path.with_suffix(ext))


class CursorPosition(BaseModel):
    line_number: int = Field(ge=1)
    column: int = Field(default=1, ge=1)


@dataclass(frozen=True)
class PreviewRequest:
    """An in-flight preview: the text it was built from and its generation."""

    generation: int
    text: str
    hkanno: Hkanno


class DocumentSession(BaseModel):
    """Editor state for one open .hkx/.xml file."""

    id: str
    input_path: str
    output_path: str
    format: OutFormat = "xml"
    # XML index e.g. `#0003`
    ptr: str = ""
    num_original_frames: int = 0
    duration: float = 0.0
    text: str = ""
    # document as first loaded, used on revert
    original: Hkanno
    dirty: bool = False
    cursor: CursorPosition | None = None
    preview_text: str = ""
    error: str | None = None

    def to_hkanno(self) -> Hkanno:
        """Parse the current text into a fresh document."""
        return Hkanno(
            ptr=self.ptr,
            num_original_frames=self.num_original_frames,
            duration=self.duration,
            tracks=parse_tracks(self.text),
        )

    def edit(self, text: str) -> None:
        self.text = text
        self.dirty = True

    def revert(self) -> None:
        self.text = hkanno_to_text(self.original)
        self.dirty = False

    def set_format(self, format: OutFormat) -> None:
        self.format = format
        self.output_path = change_extension(self.output_path, format)

    def check_times(self, time_policy: str) -> None:
        """Raise InvalidTimeError under the strict policy if any time is malformed."""
        if time_policy != "strict":
            return
        invalid = find_invalid_times(self.text)
        if invalid:
            raise InvalidTimeError(invalid)

    def save(self, backend: HkannoBackend, time_policy: str = "lenient") -> Hkanno:
        """Write the current text through the backend.

        Args:
            backend: Native save collaborator
            time_policy: "strict" refuses to save malformed times

        Returns:
            The document that was saved

        Raises:
            InvalidTimeError: Malformed times under the strict policy
            SaveError: If the backend failed; the session stays dirty
        """
        self.check_times(time_policy)
        hkanno = self.to_hkanno()
        try:
            backend.save(self.input_path, self.output_path, self.format, hkanno)
        except Exception as e:
            logger.error("Save failed for %s: %s", self.output_path, e)
            raise SaveError(f"Save failed: {e}") from e

        self.dirty = False
        self.original = hkanno
        logger.info("Saved %s", self.output_path)
        return hkanno

    def start_preview(self, controller: SyncController) -> PreviewRequest:
        """Snapshot the text for a preview request."""
        return PreviewRequest(
            generation=controller.begin_preview(),
            text=self.text,
            hkanno=self.to_hkanno(),
        )

    def finish_preview(self, request: PreviewRequest, controller: SyncController, xml: str) -> bool:
        """Apply a finished preview unless a newer one was requested."""
        if not controller.complete_preview(request.generation, request.text, xml):
            return False
        self.preview_text = xml
        self.error = None
        return True

    def fail_preview(self, request: PreviewRequest, controller: SyncController, error: Exception) -> None:
        """Record a preview failure as the document error state."""
        logger.warning("Preview failed for %s: %s", self.input_path, error)
        if request.generation != controller.generation:
            return
        self.error = str(error)
        self.preview_text = ""

    def refresh_preview(
        self,
        backend: HkannoBackend,
        controller: SyncController,
        time_policy: str = "lenient",
    ) -> bool:
        """Regenerate the preview XML and rebuild the line maps.

        Returns:
            True if the preview was applied
        """
        request = self.start_preview(controller)
        try:
            self.check_times(time_policy)
            xml = backend.preview(self.input_path, request.hkanno)
        except InvalidTimeError as e:
            self.fail_preview(request, controller, e)
            return False
        except Exception as e:
            self.fail_preview(request, controller, PreviewError(str(e)))
            return False
        return self.finish_preview(request, controller, xml)

    def move_cursor(self, line_number: int, column: int, controller: SyncController) -> int | None:
        """Store the cursor and sync the preview to it.

        Returns:
            Preview line revealed, or None
        """
        self.cursor = CursorPosition(line_number=line_number, column=column)
        lines = split_lines(self.text)
        if not 1 <= line_number <= len(lines):
            return None
        return controller.on_cursor_moved(line_number, lines[line_number - 1])


def open_session(
    path: str,
    backend: HkannoBackend,
    config: EditorConfig | None = None,
) -> DocumentSession:
    """Load an animation file into a new session.

    Args:
        path: .hkx or .xml file
        backend: Native load collaborator
        config: Editor config (defaults if None)

    Returns:
        New session with the serialized document as its text

    Raises:
        UnsupportedFileError: If the extension is not .hkx or .xml
        LoadError: If the backend failed to load the file
    """
    config = config or EditorConfig()
    if Path(path).suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(path)

    try:
        hkanno = backend.load(path)
    except Exception as e:
        logger.error("Failed to load %s: %s", path, e)
        if isinstance(e, LoadError):
            raise
        raise LoadError(f"Failed to load: {path} {e}") from e

    return DocumentSession(
        id=path,
        input_path=path,
        output_path=infer_output_path(path, config.output_suffix),
        format=infer_format_from_path(path, config.default_format),
        ptr=hkanno.ptr,
        num_original_frames=hkanno.num_original_frames,
        duration=hkanno.duration,
        text=hkanno_to_text(hkanno),
        original=hkanno,
    )

