"""Data structures for SplitFrame."""

from __future__ import annotations

import math
from dataclasses import dataclass

from PIL import Image as PILImage

from .config import Config
from .enums import QualityWarning


@dataclass(frozen=True, eq=False)
class Photo:
    """A loaded photo. ``image`` is None when the bytes could not be decoded."""
    name: str
    data: bytes
    width: int
    height: int
    image: PILImage.Image | None = None

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def decoded(self) -> bool:
        return self.image is not None


@dataclass(frozen=True)
class FocalPoint:
    """Normalized subject location within a photo."""
    x: float = 0.5
    y: float = 0.5
    found: bool = False


@dataclass(frozen=True)
class QualityReport:
    """Advisory quality signals for one photo."""
    too_small: bool = False
    blur_score: float = math.inf

    @property
    def is_blurry(self) -> bool:
        return self.blur_score < Config.BLUR_THRESHOLD

    @property
    def warning(self) -> QualityWarning | None:
        if self.too_small:
            return QualityWarning.LOW_RESOLUTION
        if self.is_blurry:
            return QualityWarning.MAY_LOOK_SOFT
        return None


@dataclass(frozen=True)
class Layout:
    """A horizontal split of ``panel_count`` panels."""
    id: str
    name: str
    panel_count: int


@dataclass(frozen=True)
class OutputFormat:
    """A fixed export canvas."""
    label: str
    width: int
    height: int
    suffix: str

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class DividerSpec:
    """Gap between panels, painted as the canvas background."""
    width: int
    color: tuple[int, int, int]


@dataclass(frozen=True)
class Adjustment:
    """User pan/zoom layered on top of auto-framing for one panel of one format."""
    pan_x: float = 0.0
    pan_y: float = 0.0
    scale: float = 1.0


@dataclass(frozen=True)
class PanelRect:
    """Panel rectangle inside a format canvas."""
    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class PanelPlacement:
    """Where a scaled photo is drawn, relative to its panel's top-left corner."""
    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class Slot:
    """A fully analyzed upload slot."""
    photo: Photo
    focal: FocalPoint
    quality: QualityReport

    @property
    def warning(self) -> QualityWarning | None:
        return self.quality.warning

    @property
    def face_found(self) -> bool:
        return self.focal.found
