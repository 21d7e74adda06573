"""Enumerations for SplitFrame."""

from __future__ import annotations

from enum import Enum


class QualityWarning(Enum):
    """Advisory quality tags shown on a loaded photo."""
    LOW_RESOLUTION = "low resolution"
    MAY_LOOK_SOFT = "may look soft"


class DragState(Enum):
    """States of the drag-to-reposition interaction."""
    IDLE = "idle"
    DRAGGING = "dragging"
