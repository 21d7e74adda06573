"""Main SplitFrame session: slots, analysis and composition."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, TypeVar

from PIL import Image

from .analysis import FaceDetector, PhotoLoader, QualityAnalyzer, create_face_detector
from .composition import CompositionState, DragController, resolve_target_y
from .config import Config
from .constants import DIVIDER, LAYOUTS_BY_ID, OUTPUT_FORMATS
from .exceptions import CompositionError, ValidationError
from .models import (
    Adjustment,
    DividerSpec,
    FocalPoint,
    Layout,
    OutputFormat,
    Photo,
    QualityReport,
    Slot,
)
from .validators import validate_index

logger = logging.getLogger("splitframe.session")

T = TypeVar("T")


class CompositionSession:
    """Orchestrates one user's split composite from upload to export."""

    def __init__(
        self,
        face_detector: FaceDetector | None = None,
        formats: Sequence[OutputFormat] = OUTPUT_FORMATS,
        divider: DividerSpec = DIVIDER,
    ) -> None:
        self.loader = PhotoLoader()
        self.quality = QualityAnalyzer()
        self.face_detector = face_detector or create_face_detector()
        self.state = CompositionState(formats, divider)
        self.drag = DragController(self.state)

        self.layout: Layout | None = None
        self.slots: dict[int, Slot] = {}

    @property
    def formats(self) -> tuple[OutputFormat, ...]:
        return self.state.formats

    @property
    def panel_count(self) -> int:
        return self.layout.panel_count if self.layout else 0

    @property
    def composed(self) -> bool:
        return self.state.initialized

    # -- Layout and slots -------------------------------------------------

    def select_layout(self, layout_id: str) -> Layout:
        """Make a layout active.

        Switching to a layout with a different panel count clears every slot,
        since slot positions no longer mean the same thing.

        Raises:
            ValidationError: If the layout id is unknown.
        """
        layout = LAYOUTS_BY_ID.get(layout_id)
        if layout is None:
            raise ValidationError(
                f"Unknown layout '{layout_id}'. Allowed: {', '.join(LAYOUTS_BY_ID)}"
            )

        if self.layout and self.layout.panel_count != layout.panel_count:
            self.slots.clear()
        self.layout = layout
        self._invalidate()
        logger.info("Selected layout %s", layout.id)
        return layout

    def load_photo(
        self,
        index: int,
        source: str | bytes,
        name: str | None = None,
        focal: FocalPoint | None = None,
    ) -> Slot:
        """Load a file path or raw bytes into a slot and analyze it.

        Args:
            index: Slot index within the active layout.
            source: File path or encoded image bytes.
            name: Display name for byte sources.
            focal: Focal point supplied by the caller; skips face detection.

        Returns:
            The new slot.

        Raises:
            ValidationError: If no layout is selected, the index is out of
                range, or the file path is invalid.
            ParseError: If the file cannot be read.
        """
        self._require_layout()
        validate_index(index, self.panel_count)

        if isinstance(source, bytes | bytearray):
            photo = self.loader.load_bytes(bytes(source), name=name or f"photo-{index + 1}")
        else:
            photo = self.loader.load_file(source)
        return self.set_photo(index, photo, focal)

    def set_photo(self, index: int, photo: Photo, focal: FocalPoint | None = None) -> Slot:
        """Analyze an already-loaded photo and put it in a slot.

        The slot is replaced only after every analysis has settled.
        """
        self._require_layout()
        validate_index(index, self.panel_count)

        slot = self._analyze(photo, focal)
        self._invalidate()
        self.slots[index] = slot
        logger.info(
            "Slot %d: %s (face=%s, warning=%s)",
            index, photo.name, slot.face_found, slot.warning.value if slot.warning else None,
        )
        return slot

    def paste_photo(self, source: str | bytes, name: str | None = None) -> Slot:
        """Load into the first empty slot, or the last slot if all are full."""
        self._require_layout()
        return self.load_photo(self.next_slot(), source, name=name)

    def next_slot(self) -> int:
        for i in range(self.panel_count):
            if i not in self.slots:
                return i
        return self.panel_count - 1

    def remove_photo(self, index: int) -> None:
        self._require_layout()
        validate_index(index, self.panel_count)
        self.slots.pop(index, None)
        self._invalidate()

    def missing_slots(self) -> list[int]:
        return [i for i in range(self.panel_count) if i not in self.slots]

    def can_compose(self) -> bool:
        return self.layout is not None and not self.missing_slots()

    def slot_summary(self) -> list[dict[str, Any]]:
        """Per-slot display data for upload badges."""
        summary: list[dict[str, Any]] = []
        for i in range(self.panel_count):
            slot = self.slots.get(i)
            summary.append(
                {
                    "slot": i,
                    "loaded": slot is not None,
                    "name": slot.photo.name if slot else None,
                    "size": slot.photo.size if slot else None,
                    "face_found": slot.face_found if slot else False,
                    "warning": slot.warning.value if slot and slot.warning else None,
                    "blur_score": slot.quality.blur_score if slot else None,
                }
            )
        return summary

    def reset_all(self) -> None:
        """Forget the layout, every photo and the composition."""
        self.layout = None
        self.slots.clear()
        self._invalidate()

    # -- Composition ------------------------------------------------------

    def compose(self) -> list[Image.Image]:
        """Build a fresh composition and render every format.

        Raises:
            CompositionError: If no layout is selected or a slot is empty.
        """
        if self.layout is None:
            raise CompositionError("Select a layout before composing")
        missing = self.missing_slots()
        if missing:
            raise CompositionError(
                f"{self.layout.name} requires {self.panel_count} photos; "
                f"missing slot(s) {', '.join(str(i + 1) for i in missing)}"
            )

        slots = [self.slots[i] for i in range(self.panel_count)]
        focal_points = [s.focal for s in slots]
        target_y = resolve_target_y(focal_points)

        self.drag.end()
        self.state.initialize([s.photo for s in slots], focal_points, target_y)
        return self.state.render_all()

    def surface(self, format_index: int) -> Image.Image | None:
        return self.state.surface(format_index)

    def adjustment(self, format_index: int, panel_index: int) -> Adjustment:
        return self.state.adjustment(format_index, panel_index)

    def set_zoom(self, format_index: int, panel_index: int, scale: float) -> Image.Image:
        return self.state.set_zoom(format_index, panel_index, scale)

    def set_pan(
        self, format_index: int, panel_index: int, pan_x: float, pan_y: float
    ) -> Image.Image:
        return self.state.set_pan(format_index, panel_index, pan_x, pan_y)

    def reset_panel(self, format_index: int, panel_index: int) -> Image.Image:
        return self.state.reset_panel(format_index, panel_index)

    # -- Internals --------------------------------------------------------

    def _analyze(self, photo: Photo, focal: FocalPoint | None) -> Slot:
        """Run dimension, sharpness and face checks concurrently.

        Every check has a bounded wait and resolves to its fail-open default
        on timeout or error.
        """
        pool = ThreadPoolExecutor(
            max_workers=Config.ANALYSIS_WORKERS, thread_name_prefix="splitframe-analysis"
        )
        try:
            too_small_f = pool.submit(self.quality.check_dimensions, photo)
            blur_f = pool.submit(self.quality.measure_sharpness, photo)
            focal_f = pool.submit(self.face_detector.detect, photo) if focal is None else None

            futures = [f for f in (too_small_f, blur_f, focal_f) if f is not None]
            wait(futures, timeout=Config.ANALYSIS_TIMEOUT)

            too_small = _settle(too_small_f, False, "dimension check", photo.name)
            blur_score = _settle(blur_f, math.inf, "sharpness check", photo.name)
            if focal_f is not None:
                focal = _settle(focal_f, FocalPoint(), "face detection", photo.name)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        return Slot(
            photo=photo,
            focal=focal,
            quality=QualityReport(too_small=too_small, blur_score=blur_score),
        )

    def _invalidate(self) -> None:
        """Discard the composition before any slot change takes effect."""
        self.drag.end()
        self.state.clear()

    def _require_layout(self) -> None:
        if self.layout is None:
            raise ValidationError("Select a layout first")


def _settle(future: Future[T], default: T, what: str, name: str) -> T:
    """Result of a finished future, or ``default`` if it failed or timed out."""
    if not future.done():
        logger.warning("%s timed out for %s, using default", what, name)
        return default
    error = future.exception()
    if error is not None:
        logger.warning("%s failed for %s, using default: %s", what, name, error)
        return default
    return future.result()
