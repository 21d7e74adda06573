"""Encoding and packaging of rendered composites."""

from __future__ import annotations

import io
import logging
import re
import zipfile

from PIL import Image

from .config import Config
from .exceptions import CompositionError
from .models import Layout, OutputFormat
from .session import CompositionSession

logger = logging.getLogger("splitframe.export")


def export_filename(layout: Layout, fmt: OutputFormat) -> str:
    """File name for one format, e.g. ``composite-2-way-split-2x1.jpg``."""
    slug = re.sub(r"\s+", "-", f"{layout.name}-{fmt.suffix}".lower())
    return f"composite-{slug}.jpg"


def encode_jpeg(image: Image.Image, quality: int = Config.JPEG_QUALITY) -> bytes:
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def export_jpegs(session: CompositionSession) -> dict[str, bytes]:
    """Encode every format's current surface as JPEG.

    Formats not rendered since the last change are rendered first.

    Raises:
        CompositionError: If the session has not been composed.
    """
    if not session.composed or session.layout is None:
        raise CompositionError("Nothing to export. Compose first.")

    files: dict[str, bytes] = {}
    for i, fmt in enumerate(session.formats):
        surface = session.surface(i)
        if surface is None:
            surface = session.state.render_format(i)
        files[export_filename(session.layout, fmt)] = encode_jpeg(surface)
        logger.info("Exported %s (%dx%d)", fmt.label, fmt.width, fmt.height)
    return files


def export_zip(session: CompositionSession) -> bytes:
    """Bundle every format's JPEG into one ZIP archive."""
    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for filename, data in export_jpegs(session).items():
            zf.writestr(filename, data)
    return zip_buffer.getvalue()
