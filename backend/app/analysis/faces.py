"""Face detection capability used to pick each photo's focal point."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod

import cv2
import numpy as np
from PIL import Image

from ..config import Config
from ..models import FocalPoint, Photo

logger = logging.getLogger("splitframe.analysis.faces")


class FaceDetector(ABC):
    """Locate the main subject of a photo.

    Implementations never raise: anything that goes wrong resolves to the
    centred, not-found ``FocalPoint()``.
    """

    available: bool = False

    @abstractmethod
    def detect(self, photo: Photo) -> FocalPoint:
        """Return the normalized centre of the largest face, or the default."""
        ...


class NullFaceDetector(FaceDetector):
    """Used when no detector can be loaded in this environment."""

    def detect(self, photo: Photo) -> FocalPoint:
        return FocalPoint()


class CascadeFaceDetector(FaceDetector):
    """OpenCV Haar-cascade frontal face detector."""

    available = True

    def __init__(self, cascade: cv2.CascadeClassifier) -> None:
        self._cascade = cascade

    def detect(self, photo: Photo) -> FocalPoint:
        if photo.image is None or photo.width <= 0 or photo.height <= 0:
            return FocalPoint()

        image = photo.image
        scale = 1.0
        longest = max(image.size)
        if longest > Config.FACE_DETECT_MAX_SIDE:
            scale = Config.FACE_DETECT_MAX_SIDE / longest
            image = image.resize(
                (max(1, round(image.width * scale)), max(1, round(image.height * scale))),
                Image.Resampling.BILINEAR,
            )

        try:
            gray = cv2.cvtColor(np.asarray(image.convert("RGB")), cv2.COLOR_RGB2GRAY)
            faces = self._cascade.detectMultiScale(
                gray,
                scaleFactor=Config.FACE_SCALE_FACTOR,
                minNeighbors=Config.FACE_MIN_NEIGHBORS,
                minSize=(Config.FACE_MIN_SIZE, Config.FACE_MIN_SIZE),
            )
        except cv2.error as e:
            logger.warning("Face detection failed for %s: %s", photo.name, e)
            return FocalPoint()

        if len(faces) == 0:
            return FocalPoint()

        x, y, w, h = max(faces, key=lambda f: int(f[2]) * int(f[3]))
        width, height = image.size
        focal = FocalPoint(
            x=_unit((x + w / 2) / width),
            y=_unit((y + h / 2) / height),
            found=True,
        )
        logger.debug("Face in %s at (%.3f, %.3f)", photo.name, focal.x, focal.y)
        return focal


def create_face_detector() -> FaceDetector:
    """Pick the detector for this environment. Call once at startup."""
    data = getattr(cv2, "data", None)
    classifier = getattr(cv2, "CascadeClassifier", None)
    if data is None or classifier is None:
        logger.info("OpenCV cascade support not available. Face alignment disabled.")
        return NullFaceDetector()

    try:
        cascade = classifier(os.path.join(data.haarcascades, Config.FACE_CASCADE))
    except (AttributeError, cv2.error) as e:
        logger.info("Face cascade could not be created (%s). Face alignment disabled.", e)
        return NullFaceDetector()
    if cascade.empty():
        logger.info("Face cascade could not be loaded. Face alignment disabled.")
        return NullFaceDetector()
    return CascadeFaceDetector(cascade)


def _unit(v: float) -> float:
    return float(max(0.0, min(1.0, v)))
