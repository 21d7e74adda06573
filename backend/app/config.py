"""Global configuration for SplitFrame."""

from __future__ import annotations

from PIL import Image


class Config:
    """Global configuration."""

    # Quality checks
    MIN_LONG_EDGE = 1500  # Photos whose longer side is below this are flagged
    BLUR_SAMPLE_SIZE = 150  # Square side used for Laplacian variance
    BLUR_THRESHOLD = 100.0  # Laplacian variance below this "may look soft"
    BLUR_SAMPLE_RESAMPLE = Image.Resampling.BILINEAR

    # Face detection
    FACE_CASCADE = "haarcascade_frontalface_default.xml"
    FACE_DETECT_MAX_SIDE = 1024  # Downscale before detection
    FACE_SCALE_FACTOR = 1.1
    FACE_MIN_NEIGHBORS = 5
    FACE_MIN_SIZE = 30

    # Analysis scheduling
    ANALYSIS_WORKERS = 3
    ANALYSIS_TIMEOUT = 10.0  # Seconds before an analysis falls back to its default

    # Shared alignment line
    TARGET_Y_MIN = 0.25
    TARGET_Y_MAX = 0.65

    # Zoom
    MIN_ZOOM = 1.0
    MAX_ZOOM = 3.0
    ZOOM_STEP = 0.05

    # Quality
    RESIZE_QUALITY = Image.Resampling.LANCZOS
    GAMMA = 2.2
    JPEG_QUALITY = 92
