"""Shared vertical alignment across panels."""

from __future__ import annotations

from collections.abc import Sequence

from ..config import Config
from ..models import FocalPoint


def resolve_target_y(focal_points: Sequence[FocalPoint | None]) -> float:
    """Average the focal heights of every panel into one alignment line.

    Missing points count as 0.5. The mean is clamped to
    ``[Config.TARGET_Y_MIN, Config.TARGET_Y_MAX]`` so subjects detected near a
    frame edge do not drag every panel into an extreme crop.
    """
    if not focal_points:
        return 0.5

    # Sorted so every permutation sums to the same float
    ys = sorted(0.5 if fp is None else fp.y for fp in focal_points)
    mean = sum(ys) / len(ys)
    return max(Config.TARGET_Y_MIN, min(Config.TARGET_Y_MAX, mean))
