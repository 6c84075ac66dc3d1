import math
from typing import Optional

from blurguard.models.detection import Detection, PixelRegion

NORMALIZED_SCALE = 1000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_pixel_region(detection: Detection, image_width: int, image_height: int) -> Optional[PixelRegion]:
    """
    Maps a normalized [ymin, xmin, ymax, xmax] box onto pixel space.
    The origin is clamped into the image and the size to the remaining space;
    returns None when nothing of positive area is left.
    """
    if image_width <= 0 or image_height <= 0:
        return None

    ymin, xmin, ymax, xmax = detection.box_2d
    scaled = (
        xmin / NORMALIZED_SCALE * image_width,
        ymin / NORMALIZED_SCALE * image_height,
        (xmax - xmin) / NORMALIZED_SCALE * image_width,
        (ymax - ymin) / NORMALIZED_SCALE * image_height,
    )
    if not all(math.isfinite(v) for v in scaled):
        return None
    x, y, w, h = (round_half_up(v) for v in scaled)

    # Clamp to image bounds
    x = max(0, min(x, image_width - 1))
    y = max(0, min(y, image_height - 1))
    w = min(w, image_width - x)
    h = min(h, image_height - y)

    if w <= 0 or h <= 0:
        return None

    return PixelRegion(x=x, y=y, width=w, height=h)


def to_preview_box(detection: Detection, index: int) -> dict:
    """Overlay geometry in CSS percentages for a detection preview."""
    ymin, xmin, ymax, xmax = detection.box_2d
    return {
        "left": f"{xmin / 10:g}%",
        "top": f"{ymin / 10:g}%",
        "width": f"{(xmax - xmin) / 10:g}%",
        "height": f"{(ymax - ymin) / 10:g}%",
        "label": detection.display_label,
        "num": index + 1,
        "index": index,
    }
