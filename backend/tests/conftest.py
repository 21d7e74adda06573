"""Shared pytest fixtures for SplitFrame tests."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from backend.app.analysis import FaceDetector, NullFaceDetector, PhotoLoader
from backend.app.models import DividerSpec, FocalPoint, OutputFormat, Photo
from backend.app.session import CompositionSession

SMALL_FORMATS = (
    OutputFormat(label="wide", width=200, height=100, suffix="wide"),
    OutputFormat(label="std", width=200, height=150, suffix="std"),
)
SMALL_DIVIDER = DividerSpec(width=4, color=(255, 255, 255))


def png_bytes(image: Image.Image) -> bytes:
    """Encode a PIL image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_photo(image: Image.Image, name: str = "test.png") -> Photo:
    """Build a Photo the same way uploads do."""
    return PhotoLoader().load_bytes(png_bytes(image), name=name)


def checkerboard(size: int = 150) -> Image.Image:
    """1px black/white checkerboard: maximal Laplacian response."""
    y, x = np.indices((size, size))
    arr = (((x + y) % 2) * 255).astype(np.uint8)
    return Image.fromarray(np.stack([arr] * 3, axis=2), mode="RGB")


def gradient(width: int, height: int) -> Image.Image:
    """Horizontal+vertical gradient so every crop looks different."""
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    r = np.tile(xs, (height, 1))
    g = np.tile(ys[:, None], (1, width))
    b = np.full((height, width), 128, dtype=np.float32)
    return Image.fromarray(np.stack([r, g, b], axis=2).astype(np.uint8), mode="RGB")


class RecordingFaceDetector(FaceDetector):
    """Returns a fixed focal point and counts calls."""

    available = True

    def __init__(self, focal: FocalPoint | None = None) -> None:
        self.focal = focal or FocalPoint(0.5, 0.3, True)
        self.calls = 0

    def detect(self, photo: Photo) -> FocalPoint:
        self.calls += 1
        return self.focal


@pytest.fixture
def red_photo() -> Photo:
    return make_photo(Image.new("RGB", (300, 200), (255, 0, 0)), "red.png")


@pytest.fixture
def blue_photo() -> Photo:
    return make_photo(Image.new("RGB", (200, 300), (0, 0, 255)), "blue.png")


@pytest.fixture
def gradient_photo() -> Photo:
    return make_photo(gradient(320, 240), "gradient.png")


@pytest.fixture
def sharp_photo() -> Photo:
    return make_photo(checkerboard(), "sharp.png")


@pytest.fixture
def flat_photo() -> Photo:
    return make_photo(Image.new("RGB", (150, 150), (90, 90, 90)), "flat.png")


@pytest.fixture
def session() -> CompositionSession:
    """Session with face detection disabled."""
    return CompositionSession(face_detector=NullFaceDetector())


@pytest.fixture
def small_session() -> CompositionSession:
    """Session rendering into small formats so tests stay fast."""
    return CompositionSession(
        face_detector=NullFaceDetector(), formats=SMALL_FORMATS, divider=SMALL_DIVIDER
    )
