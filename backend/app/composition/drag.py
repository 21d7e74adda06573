"""Drag-to-reposition interaction for composed panels."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..enums import DragState
from ..validators import validate_index
from .state import CompositionState

logger = logging.getLogger("splitframe.composition.drag")


@dataclass(frozen=True)
class DragContext:
    """What a drag captured when it started."""
    format_index: int
    panel_index: int
    start_x: float
    start_y: float
    start_pan_x: float
    start_pan_y: float
    ratio: float  # canvas pixels per display pixel


class DragController:
    """Translate pointer movement on a displayed canvas into panel pan.

    Pointer coordinates are in display space, relative to the displayed
    canvas's left edge for ``begin``; ``update`` must use the same origin.
    At most one drag is active; ``end`` always returns to idle.

    The Gradio front end has no pointer-move events, so it edits pan through
    sliders instead; this controller serves front ends that do, and the
    session ends any active drag whenever the composition is discarded.
    """

    def __init__(self, state: CompositionState) -> None:
        self.composition = state
        self._context: DragContext | None = None

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self._context is None else DragState.DRAGGING

    @property
    def context(self) -> DragContext | None:
        return self._context

    def begin(
        self,
        format_index: int,
        display_x: float,
        display_y: float,
        displayed_width: float,
    ) -> bool:
        """Press on a displayed canvas.

        Returns:
            True if a drag started; False if already dragging, nothing is
            composed, or the press landed on a divider or outside every panel.
        """
        if self._context is not None or not self.composition.initialized:
            return False
        if displayed_width <= 0:
            return False

        validate_index(format_index, len(self.composition.formats), "Format")
        fmt = self.composition.formats[format_index]
        ratio = fmt.width / displayed_width
        panel_index = self.composition.panel_index_at(format_index, display_x * ratio)
        if panel_index is None:
            return False

        adj = self.composition.adjustment(format_index, panel_index)
        self._context = DragContext(
            format_index=format_index,
            panel_index=panel_index,
            start_x=display_x,
            start_y=display_y,
            start_pan_x=adj.pan_x,
            start_pan_y=adj.pan_y,
            ratio=ratio,
        )
        logger.debug("Drag start: format %d panel %d", format_index, panel_index)
        return True

    def update(self, display_x: float, display_y: float) -> bool:
        """Pointer moved. Writes the new pan and re-renders the dragged format only."""
        ctx = self._context
        if ctx is None:
            return False

        pan_x = ctx.start_pan_x + (display_x - ctx.start_x) * ctx.ratio
        pan_y = ctx.start_pan_y + (display_y - ctx.start_y) * ctx.ratio
        self.composition.set_pan(ctx.format_index, ctx.panel_index, pan_x, pan_y)
        return True

    def end(self) -> bool:
        """Pointer released. Returns True if a drag was active."""
        if self._context is None:
            return False
        self._context = None
        return True
