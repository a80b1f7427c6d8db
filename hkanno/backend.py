"""
hkanno.backend - Load/save/preview collaborator boundary.

The native backend that reads and writes .hkx/.xml files lives outside this
package; HkannoBackend is its contract. MarkupRenderer renders the hkx XML
view of a document in-process with Jinja2, which is enough to drive the
preview pane and the line correlator without that backend.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Protocol

from jinja2 import Environment, FileSystemLoader, select_autoescape

from hkanno.exceptions import BackendError
from hkanno.model import Hkanno, encode_nullable
from hkanno.serializer import format_time

OutFormat = Literal["amd64", "win32", "xml"]
OUT_FORMATS: tuple[str, ...] = ("amd64", "win32", "xml")


class HkannoBackend(Protocol):
    """Native load/save/preview operations."""

    def load(self, path: str) -> Hkanno:
        """Load a .hkx or .xml file as Hkanno."""
        ...

    def save(self, input_path: str, output_path: str, format: OutFormat, hkanno: Hkanno) -> None:
        """Write input_path updated with hkanno to output_path in format."""
        ...

    def preview(self, path: str, hkanno: Hkanno) -> str:
        """Return the XML of path updated with hkanno."""
        ...


class MarkupRenderer:
    """Jinja2-based hkx XML renderer for annotation documents."""

    def __init__(self, template_dir: Path | None = None, template_name: str = "annotations.xml"):
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"

        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self.template_name = template_name

    def context(self, hkanno: Hkanno) -> dict[str, Any]:
        """Template data with times formatted and nulls spelled as the sentinel."""
        return {
            "ptr": hkanno.ptr or "#0001",
            "num_original_frames": hkanno.num_original_frames,
            "duration": format_time(hkanno.duration),
            "tracks": [
                {
                    "name": encode_nullable(track.name),
                    "annotations": [
                        {"time": format_time(ann.time), "text": encode_nullable(ann.text)}
                        for ann in track.annotations
                    ],
                }
                for track in hkanno.tracks
            ],
        }

    def render(self, hkanno: Hkanno) -> str:
        """Render a document to hkx XML.

        Args:
            hkanno: Document to render

        Returns:
            XML text, one hkparam per line
        """
        template = self.env.get_template(self.template_name)
        return template.render(**self.context(hkanno))


class RenderingBackend:
    """Preview-only backend built on MarkupRenderer."""

    def __init__(self, renderer: MarkupRenderer | None = None) -> None:
        self.renderer = renderer or MarkupRenderer()

    def load(self, path: str) -> Hkanno:
        raise BackendError(f"Loading animation files needs the native backend: {path}")

    def save(self, input_path: str, output_path: str, format: OutFormat, hkanno: Hkanno) -> None:
        raise BackendError(f"Saving animation files needs the native backend: {output_path}")

    def preview(self, path: str, hkanno: Hkanno) -> str:
        return self.renderer.render(hkanno)
