"""Advisory photo quality checks."""

from __future__ import annotations

import logging
import math

import numpy as np

from ..config import Config
from ..models import Photo, QualityReport

logger = logging.getLogger("splitframe.analysis.quality")


class QualityAnalyzer:
    """Flag photos that are too small or look soft.

    Both checks fail open: a photo that cannot be measured is reported as
    large enough and sharp. Results are informational and never block
    composition.
    """

    def check_dimensions(self, photo: Photo) -> bool:
        """Return True if the photo's longer side is below ``Config.MIN_LONG_EDGE``.

        Unknown (0x0) dimensions return False.
        """
        if photo.width <= 0 or photo.height <= 0:
            return False
        return max(photo.width, photo.height) < Config.MIN_LONG_EDGE

    def measure_sharpness(self, photo: Photo) -> float:
        """Laplacian variance of a small luminance thumbnail.

        Sharp photos score high; blurry or heavily compressed ones score low.
        Returns ``math.inf`` when the photo cannot be measured.
        """
        if photo.image is None:
            return math.inf

        size = Config.BLUR_SAMPLE_SIZE
        try:
            sample = photo.image.convert("RGB").resize(
                (size, size), Config.BLUR_SAMPLE_RESAMPLE
            )
        except Exception as e:
            logger.warning("Sharpness check failed for %s: %s", photo.name, e)
            return math.inf

        rgb = np.asarray(sample, dtype=np.float64)
        gray = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
        return laplacian_variance(gray)

    def analyze(self, photo: Photo) -> QualityReport:
        return QualityReport(
            too_small=self.check_dimensions(photo),
            blur_score=self.measure_sharpness(photo),
        )


def laplacian_variance(gray: np.ndarray) -> float:
    """Population variance of the 4-neighbour Laplacian over interior pixels."""
    if gray.shape[0] < 3 or gray.shape[1] < 3:
        return math.inf

    lap = (
        4 * gray[1:-1, 1:-1]
        - gray[1:-1, :-2]
        - gray[1:-1, 2:]
        - gray[:-2, 1:-1]
        - gray[2:, 1:-1]
    )
    return float(lap.var())
