"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from hkanno.backend import MarkupRenderer
from hkanno.model import Annotation, AnnotationTrack, Hkanno


@pytest.fixture
def two_track_text() -> str:
    """Return hkanno text with two tracks, as written by the serializer."""
    return """
# numOriginalFrames: 38
# duration: 1.5
# numAnnotationTracks: 2

trackName: Track1
# numAnnotations: 2
0.100000 MCO_DodgeOpen
0.400000 MCO_DodgeClose

trackName: Track2
# numAnnotations: 1
0.900000 MCO_Recovery
"""


@pytest.fixture
def sample_hkanno() -> Hkanno:
    """Return a document with a named, an unnamed and an empty track."""
    return Hkanno(
        ptr="#0003",
        num_original_frames=38,
        duration=1.5,
        tracks=[
            AnnotationTrack(
                name="Track1",
                annotations=[
                    Annotation(time=0.1, text="MCO_DodgeOpen"),
                    Annotation(time=0.4, text=None),
                ],
            ),
            AnnotationTrack(name=None, annotations=[Annotation(time=0.9, text="Event  A")]),
            AnnotationTrack(name="Empty", annotations=[]),
        ],
    )


@pytest.fixture
def renderer() -> MarkupRenderer:
    return MarkupRenderer()


class FakeView:
    """Records the calls a preview editor would receive."""

    def __init__(self) -> None:
        self.revealed: list[int] = []
        self.cursor: tuple[int, int] | None = None

    def reveal_line(self, line_number: int) -> None:
        self.revealed.append(line_number)

    def set_cursor(self, line_number: int, column: int) -> None:
        self.cursor = (line_number, column)


@pytest.fixture
def fake_view() -> FakeView:
    return FakeView()


class FakeBackend:
    """In-memory stand-in for the native load/save/preview backend."""

    def __init__(self, documents: dict[str, Hkanno] | None = None) -> None:
        self.documents = documents or {}
        self.saved: list[tuple[str, str, str, Hkanno]] = []
        self.fail_save = False
        self.fail_preview = False
        self.renderer = MarkupRenderer()

    def load(self, path: str) -> Hkanno:
        if path not in self.documents:
            raise OSError(f"No such file: {path}")
        return self.documents[path]

    def save(self, input_path: str, output_path: str, format: str, hkanno: Hkanno) -> None:
        if self.fail_save:
            raise OSError("disk full")
        self.saved.append((input_path, output_path, format, hkanno))

    def preview(self, path: str, hkanno: Hkanno) -> str:
        if self.fail_preview:
            raise RuntimeError("preview crashed")
        return self.renderer.render(hkanno)


@pytest.fixture
def fake_backend(sample_hkanno: Hkanno) -> FakeBackend:
    return FakeBackend({"/anims/dodge.hkx": sample_hkanno, "/anims/dodge.xml": sample_hkanno})


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    """Create a directory holding an hkanno.yaml."""
    config_dir = tmp_path / "workspace"
    config_dir.mkdir()
    config = {"default_format": "amd64", "time_policy": "strict"}
    with open(config_dir / "hkanno.yaml", "w") as f:
        yaml.dump(config, f)
    return config_dir
