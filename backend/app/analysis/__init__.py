"""Per-photo analysis for SplitFrame."""

from .faces import CascadeFaceDetector, FaceDetector, NullFaceDetector, create_face_detector
from .loader import PhotoLoader
from .quality import QualityAnalyzer, laplacian_variance

__all__ = [
    "CascadeFaceDetector",
    "FaceDetector",
    "NullFaceDetector",
    "PhotoLoader",
    "QualityAnalyzer",
    "create_face_detector",
    "laplacian_variance",
]
