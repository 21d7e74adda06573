"""Per-format adjustment state and render orchestration."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from PIL import Image

from ..constants import DIVIDER, OUTPUT_FORMATS
from ..exceptions import CompositionError
from ..models import (
    Adjustment,
    DividerSpec,
    FocalPoint,
    OutputFormat,
    PanelPlacement,
    PanelRect,
    Photo,
)
from ..validators import validate_index, validate_zoom
from .engine import CompositionEngine
from .geometry import layout_panel, panel_index_at, panel_rects

logger = logging.getLogger("splitframe.composition.state")


class AdjustmentGrid:
    """Adjustments indexed by (format, panel).

    Cells hold immutable ``Adjustment`` values and are replaced whole, so a
    reader always sees the latest complete write for its exact key.
    """

    def __init__(self, format_count: int, panel_count: int) -> None:
        self.format_count = format_count
        self.panel_count = panel_count
        self._cells: list[list[Adjustment]] = [
            [Adjustment() for _ in range(panel_count)] for _ in range(format_count)
        ]

    def get(self, format_index: int, panel_index: int) -> Adjustment:
        self._check(format_index, panel_index)
        return self._cells[format_index][panel_index]

    def set(self, format_index: int, panel_index: int, adjustment: Adjustment) -> None:
        self._check(format_index, panel_index)
        self._cells[format_index][panel_index] = adjustment

    def row(self, format_index: int) -> tuple[Adjustment, ...]:
        validate_index(format_index, self.format_count, "Format")
        return tuple(self._cells[format_index])

    def _check(self, format_index: int, panel_index: int) -> None:
        validate_index(format_index, self.format_count, "Format")
        validate_index(panel_index, self.panel_count, "Panel")


class CompositionState:
    """Owns the composition of one session across every output format.

    Each format keeps its own adjustments and its own last-rendered surface.
    Changing a format's adjustment re-renders that format only; the others
    are never read or written.
    """

    def __init__(
        self,
        formats: Sequence[OutputFormat] = OUTPUT_FORMATS,
        divider: DividerSpec = DIVIDER,
        engine: CompositionEngine | None = None,
    ) -> None:
        self.formats = tuple(formats)
        self.divider = divider
        self.engine = engine or CompositionEngine(divider)

        self.target_y = 0.5
        self._grid: AdjustmentGrid | None = None
        self._photos: tuple[Photo, ...] = ()
        self._focal_points: tuple[FocalPoint, ...] = ()
        self._surfaces: list[Image.Image | None] = []

    @property
    def initialized(self) -> bool:
        return self._grid is not None

    @property
    def panel_count(self) -> int:
        return len(self._photos)

    def initialize(
        self,
        photos: Sequence[Photo],
        focal_points: Sequence[FocalPoint | None],
        target_y: float,
    ) -> None:
        """Start a new composition with default adjustments everywhere.

        Any previous adjustments and surfaces are discarded in one step,
        before anything can be rendered.
        """
        if not photos:
            raise CompositionError("Cannot compose without photos")
        if len(focal_points) != len(photos):
            raise CompositionError(
                f"Got {len(focal_points)} focal points for {len(photos)} photos"
            )

        grid = AdjustmentGrid(len(self.formats), len(photos))
        focals = tuple(fp or FocalPoint() for fp in focal_points)
        (
            self._grid,
            self._photos,
            self._focal_points,
            self.target_y,
            self._surfaces,
        ) = (grid, tuple(photos), focals, target_y, [None] * len(self.formats))
        logger.info(
            "Initialized composition: %d panels x %d formats, target_y=%.3f",
            len(photos), len(self.formats), target_y,
        )

    def clear(self) -> None:
        """Drop the composition; state returns to uninitialized."""
        self._grid, self._photos, self._focal_points, self._surfaces = None, (), (), []
        self.target_y = 0.5

    def render_format(self, format_index: int) -> Image.Image:
        """Render one format from its own adjustments and store the result."""
        grid = self._require_grid()
        validate_index(format_index, len(self.formats), "Format")

        surface = self.engine.render(
            self.formats[format_index],
            self._photos,
            self._focal_points,
            self.target_y,
            grid.row(format_index),
        )
        self._surfaces[format_index] = surface
        return surface

    def render_all(self) -> list[Image.Image]:
        return [self.render_format(i) for i in range(len(self.formats))]

    def surface(self, format_index: int) -> Image.Image | None:
        """Last rendered surface of a format, or None if not rendered yet."""
        self._require_grid()
        validate_index(format_index, len(self.formats), "Format")
        return self._surfaces[format_index]

    def adjustment(self, format_index: int, panel_index: int) -> Adjustment:
        return self._require_grid().get(format_index, panel_index)

    def adjustments(self, format_index: int) -> tuple[Adjustment, ...]:
        return self._require_grid().row(format_index)

    def set_pan(
        self, format_index: int, panel_index: int, pan_x: float, pan_y: float
    ) -> Image.Image:
        """Store a pan as given (no clamping) and re-render that format."""
        grid = self._require_grid()
        current = grid.get(format_index, panel_index)
        grid.set(format_index, panel_index, replace(current, pan_x=float(pan_x), pan_y=float(pan_y)))
        return self.render_format(format_index)

    def set_zoom(self, format_index: int, panel_index: int, scale: float) -> Image.Image:
        """Set a panel's zoom and re-render that format.

        Zooming re-centres the panel on its focal point, so pan resets to 0.

        Raises:
            ValidationError: If scale is outside the zoom range.
        """
        validate_zoom(scale)
        grid = self._require_grid()
        grid.set(format_index, panel_index, Adjustment(scale=float(scale)))
        return self.render_format(format_index)

    def reset_panel(self, format_index: int, panel_index: int) -> Image.Image:
        """Restore a panel's default adjustment and re-render that format."""
        grid = self._require_grid()
        grid.set(format_index, panel_index, Adjustment())
        return self.render_format(format_index)

    def placement(self, format_index: int, panel_index: int) -> PanelPlacement:
        """Draw parameters the next render will use for one panel."""
        adj = self.adjustment(format_index, panel_index)
        rect = self.panel_rects(format_index)[panel_index]
        photo = self._photos[panel_index]
        return layout_panel(
            rect.size, photo.size, self._focal_points[panel_index], self.target_y, adj
        )

    def panel_rects(self, format_index: int) -> list[PanelRect]:
        validate_index(format_index, len(self.formats), "Format")
        return panel_rects(self.formats[format_index].size, self.panel_count, self.divider.width)

    def panel_index_at(self, format_index: int, canvas_x: float) -> int | None:
        """Hit-test a canvas x coordinate against this format's panels."""
        self._require_grid()
        validate_index(format_index, len(self.formats), "Format")
        return panel_index_at(
            canvas_x, self.formats[format_index].width, self.panel_count, self.divider.width
        )

    def _require_grid(self) -> AdjustmentGrid:
        if self._grid is None:
            raise CompositionError("No composition yet. Call initialize() first.")
        return self._grid
