"""Input validation for SplitFrame."""

from __future__ import annotations

from pathlib import Path

from .config import Config
from .constants import SUPPORTED_EXTENSIONS
from .exceptions import ValidationError


def validate_file_path(path: str) -> None:
    """Validate input file exists and has supported extension.

    Args:
        path: Path to the input file.

    Raises:
        ValidationError: If file doesn't exist or format is unsupported.
    """
    p = Path(path)
    if not p.exists():
        raise ValidationError(f"File not found: {path}")
    if p.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValidationError(
            f"Unsupported format '{p.suffix}'. Allowed: {', '.join(SUPPORTED_EXTENSIONS)}"
        )


def validate_index(index: int, count: int, what: str = "Slot") -> None:
    """Validate a zero-based slot, panel or format index.

    Raises:
        ValidationError: If the index is not an int in ``[0, count)``.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValidationError(f"{what} index must be an integer, got {type(index).__name__}")
    if not 0 <= index < count:
        raise ValidationError(f"{what} index {index} out of range (0-{count - 1})")


def validate_zoom(scale: float) -> None:
    """Validate a zoom multiplier.

    Raises:
        ValidationError: If scale is not a number within the zoom range.
    """
    if isinstance(scale, bool) or not isinstance(scale, int | float):
        raise ValidationError(f"Zoom must be a number, got {type(scale).__name__}")
    if not Config.MIN_ZOOM <= scale <= Config.MAX_ZOOM:
        raise ValidationError(
            f"Zoom must be between {Config.MIN_ZOOM} and {Config.MAX_ZOOM}, got {scale}"
        )
