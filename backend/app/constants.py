"""Shared constants for SplitFrame."""

from __future__ import annotations

from .models import DividerSpec, Layout, OutputFormat

# Split choices; each one renders into every output format
LAYOUTS = (
    Layout(id="2-way", name="2-Way Split", panel_count=2),
    Layout(id="3-way", name="3-Way Split", panel_count=3),
)

# Both formats are always generated
OUTPUT_FORMATS = (
    OutputFormat(label="2×1", width=2000, height=1000, suffix="2x1"),
    OutputFormat(label="4×3", width=2000, height=1500, suffix="4x3"),
)

DIVIDER = DividerSpec(width=12, color=(255, 255, 255))

# Supported file extensions
SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".tif", ".tiff")

LAYOUTS_BY_ID = {layout.id: layout for layout in LAYOUTS}
