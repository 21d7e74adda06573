"""Photo loading for SplitFrame."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, ImageOps

from ..exceptions import ParseError
from ..models import Photo
from ..validators import validate_file_path

logger = logging.getLogger("splitframe.analysis.loader")


class PhotoLoader:
    """Turn files or raw bytes into immutable Photo objects.

    Decoding is fail-open: bytes that Pillow cannot read still produce a
    Photo, with 0x0 dimensions and no raster, so the slot stays usable and
    every downstream analysis falls back to its default.
    """

    def load_file(self, file_path: str) -> Photo:
        """Read and decode a photo from disk.

        Args:
            file_path: Path to the image file.

        Returns:
            The loaded Photo.

        Raises:
            ValidationError: If the path is missing or has an unsupported extension.
            ParseError: If the file cannot be read.
        """
        validate_file_path(file_path)
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise ParseError(f"Failed to read '{file_path}': {e}") from e
        return self.load_bytes(data, name=Path(file_path).name)

    def load_bytes(self, data: bytes, name: str = "photo") -> Photo:
        """Decode a photo from raw bytes. Never raises for bad pixel data."""
        image = self._decode(data, name)
        if image is None:
            return Photo(name=name, data=data, width=0, height=0, image=None)

        w, h = image.size
        logger.info("Loaded photo %s: %dx%d", name, w, h)
        return Photo(name=name, data=data, width=w, height=h, image=image)

    @staticmethod
    def _decode(data: bytes, name: str) -> Image.Image | None:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img = ImageOps.exif_transpose(img)
                return _flatten(img)
        except Exception as e:
            logger.warning("Could not decode %s, using defaults: %s", name, e)
            return None


def _flatten(img: Image.Image) -> Image.Image:
    """Convert to RGB, compositing any transparency onto white."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        base = Image.new("RGB", rgba.size, (255, 255, 255))
        base.paste(rgba, (0, 0), rgba)
        return base
    return img.convert("RGB")
