"""Composition engine for SplitFrame."""

from .drag import DragContext, DragController
from .engine import CompositionEngine
from .focal import resolve_target_y
from .geometry import base_scale, layout_panel, panel_index_at, panel_rects, slot_width
from .state import AdjustmentGrid, CompositionState

__all__ = [
    "AdjustmentGrid",
    "CompositionEngine",
    "CompositionState",
    "DragContext",
    "DragController",
    "base_scale",
    "layout_panel",
    "panel_index_at",
    "panel_rects",
    "resolve_target_y",
    "slot_width",
]
