"""Rasterizes a strip of panels into one output format."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PIL import Image

from ..constants import DIVIDER
from ..models import (
    Adjustment,
    DividerSpec,
    FocalPoint,
    OutputFormat,
    PanelPlacement,
    PanelRect,
    Photo,
)
from .geometry import layout_panel, panel_rects
from .resize import high_quality_resize

logger = logging.getLogger("splitframe.composition")


class CompositionEngine:
    """Paint photos side by side into a format canvas.

    The canvas is filled with the divider color first, so integer rounding
    of slot widths never leaves a visible gap; each photo is then drawn
    clipped to its own panel.
    """

    def __init__(self, divider: DividerSpec = DIVIDER) -> None:
        self.divider = divider

    def render(
        self,
        fmt: OutputFormat,
        photos: Sequence[Photo],
        focal_points: Sequence[FocalPoint],
        target_y: float,
        adjustments: Sequence[Adjustment],
    ) -> Image.Image:
        """Render one output format.

        Args:
            fmt: Output format to render.
            photos: One photo per panel, left to right.
            focal_points: One focal point per panel.
            target_y: Shared alignment line.
            adjustments: This format's adjustment per panel.

        Returns:
            RGB image at exactly ``fmt.size``.
        """
        canvas = Image.new("RGB", fmt.size, self.divider.color)
        rects = panel_rects(fmt.size, len(photos), self.divider.width)

        for rect, photo, focal, adj in zip(rects, photos, focal_points, adjustments):
            if photo.image is None or rect.width <= 0 or rect.height <= 0:
                continue
            placement = layout_panel(rect.size, photo.size, focal, target_y, adj)
            self.draw_panel(canvas, photo.image, rect, placement)

        return canvas

    def draw_panel(
        self,
        canvas: Image.Image,
        image: Image.Image,
        rect: PanelRect,
        placement: PanelPlacement,
    ) -> None:
        """Draw ``image`` at ``placement`` inside ``rect``, clipped to the panel."""
        scale_x = placement.draw_width / image.width
        scale_y = placement.draw_height / image.height

        # Panel area expressed in source pixels
        box = (
            -placement.offset_x / scale_x,
            -placement.offset_y / scale_y,
            (rect.width - placement.offset_x) / scale_x,
            (rect.height - placement.offset_y) / scale_y,
        )
        box = (
            max(0.0, box[0]),
            max(0.0, box[1]),
            min(float(image.width), box[2]),
            min(float(image.height), box[3]),
        )
        if box[2] <= box[0] or box[3] <= box[1]:
            logger.debug("Panel at x=%d has nothing to draw", rect.x)
            return

        panel = high_quality_resize(image, rect.size, box=box)
        canvas.paste(panel.convert("RGB"), (rect.x, rect.y))
