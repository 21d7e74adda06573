"""Panel geometry: strip slots, cover-fit scaling and focal positioning."""

from __future__ import annotations

from ..models import Adjustment, FocalPoint, PanelPlacement, PanelRect


def slot_width(canvas_width: int, panel_count: int, divider_width: int) -> int:
    """Width of every panel in a strip of ``panel_count`` panels."""
    if panel_count <= 0:
        return 0
    return (canvas_width - divider_width * (panel_count - 1)) // panel_count


def panel_rects(
    canvas_size: tuple[int, int], panel_count: int, divider_width: int
) -> list[PanelRect]:
    """Panel rectangles from left to right, each as tall as the canvas."""
    canvas_w, canvas_h = canvas_size
    slot_w = slot_width(canvas_w, panel_count, divider_width)
    return [
        PanelRect(x=i * (slot_w + divider_width), y=0, width=slot_w, height=canvas_h)
        for i in range(panel_count)
    ]


def panel_index_at(
    canvas_x: float, canvas_width: int, panel_count: int, divider_width: int
) -> int | None:
    """Index of the panel under ``canvas_x``, or None on a divider or outside."""
    slot_w = slot_width(canvas_width, panel_count, divider_width)
    cursor = 0
    for i in range(panel_count):
        if i > 0:
            cursor += divider_width
        if cursor <= canvas_x < cursor + slot_w:
            return i
        cursor += slot_w
    return None


def base_scale(panel_size: tuple[int, int], image_size: tuple[int, int]) -> float:
    """Smallest scale at which the image fully covers the panel."""
    panel_w, panel_h = panel_size
    image_w, image_h = image_size
    return max(panel_w / image_w, panel_h / image_h)


def layout_panel(
    panel_size: tuple[int, int],
    image_size: tuple[int, int],
    focal: FocalPoint,
    target_y: float,
    adjustment: Adjustment,
) -> PanelPlacement:
    """Compute where to draw a photo inside its panel.

    The photo is cover-fit, zoomed by ``adjustment.scale``, then positioned so
    the focal point sits at the panel's horizontal centre and at ``target_y``
    of its height. User pan is added to that position and the sum is clamped
    to ``[panel - drawn, 0]`` on each axis, so pan saturates instead of ever
    uncovering the panel.

    Args:
        panel_size: Panel (width, height) in canvas pixels.
        image_size: Source photo (width, height).
        focal: Normalized subject location in the photo.
        target_y: Shared alignment line as a fraction of panel height.
        adjustment: User pan/zoom for this panel.

    Returns:
        PanelPlacement with offsets relative to the panel's top-left corner.
    """
    panel_w, panel_h = panel_size
    image_w, image_h = image_size

    if image_w <= 0 or image_h <= 0:
        return PanelPlacement(
            draw_width=float(panel_w), draw_height=float(panel_h), offset_x=0.0, offset_y=0.0
        )

    scale = base_scale(panel_size, image_size) * adjustment.scale
    draw_w = image_w * scale
    draw_h = image_h * scale

    # Auto-position from focal point
    offset_x = 0.5 * panel_w - focal.x * draw_w
    offset_y = target_y * panel_h - focal.y * draw_h

    offset_x = _clamp(offset_x + adjustment.pan_x, panel_w - draw_w, 0.0)
    offset_y = _clamp(offset_y + adjustment.pan_y, panel_h - draw_h, 0.0)

    return PanelPlacement(
        draw_width=draw_w, draw_height=draw_h, offset_x=offset_x, offset_y=offset_y
    )


def _clamp(v: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, v))
