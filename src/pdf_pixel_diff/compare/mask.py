"""Rectangle masks that blank out regions of a page before diffing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

import numpy as np


class MaskColor(str, Enum):
    BLACK = "black"
    TRANSPARENT = "transparent"


MASK_ALPHA = {
    MaskColor.BLACK: 255,
    MaskColor.TRANSPARENT: 0,
}
DEFAULT_MASK_ALPHA = 255


@dataclass(frozen=True)
class Mask:
    """A rectangle in page pixel coordinates.

    ``page_number`` 0 applies the mask to every page. Coordinates may lie
    outside the image; they are clamped when the mask is applied.
    """

    page_number: int
    x0: float
    y0: float
    x1: float
    y1: float
    color: MaskColor | str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Mask":
        """Build a mask from a JSON-style dict (camelCase or snake_case keys)."""
        page_number = data.get("pageNumber", data.get("page_number", 0))
        return cls(
            page_number=int(page_number),
            x0=float(data["x0"]),
            y0=float(data["y0"]),
            x1=float(data["x1"]),
            y1=float(data["y1"]),
            color=data.get("color"),
        )

    def applies_to(self, page: int) -> bool:
        return self.page_number == 0 or self.page_number == page


def mask_alpha(color: MaskColor | str | None) -> int:
    """Map a mask color to the alpha written into masked pixels.

    Unknown or missing colors fall back to opaque black.
    """
    try:
        return MASK_ALPHA[MaskColor(color)]
    except ValueError:
        return DEFAULT_MASK_ALPHA


def _clamp(value: float, high: int, rounding) -> int:
    return int(rounding(max(0.0, min(float(high), float(value)))))


def clamp_rect(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    width: int,
    height: int,
) -> tuple[int, int, int, int]:
    """Clamp a rectangle to image bounds.

    Coordinates are clamped to the image, then the top-left corner is floored
    and the bottom-right corner rounded up, so partially covered pixels are
    included and infinite coordinates land on the edge. A NaN coordinate
    yields an empty rectangle.
    """
    if any(math.isnan(v) for v in (x0, y0, x1, y1)):
        return (0, 0, 0, 0)
    return (
        _clamp(x0, width, math.floor),
        _clamp(y0, height, math.floor),
        _clamp(x1, width, math.ceil),
        _clamp(y1, height, math.ceil),
    )


def apply_rect_mask(
    baseline: np.ndarray,
    actual: np.ndarray,
    width: int,
    height: int,
    rect: tuple[float, float, float, float],
    color: MaskColor | str | None = None,
) -> None:
    """Zero the RGB samples inside ``rect`` in both images, in place.

    Both images receive the same alpha so the masked area never registers
    as a difference. Empty or inverted rectangles are a no-op.
    """
    x0, y0, x1, y1 = clamp_rect(*rect, width=width, height=height)
    if x0 >= x1 or y0 >= y1:
        return

    fill = (0, 0, 0, mask_alpha(color))
    baseline[y0:y1, x0:x1] = fill
    actual[y0:y1, x0:x1] = fill


def apply_masks_for_page(
    page: int,
    baseline: np.ndarray,
    actual: np.ndarray,
    width: int,
    height: int,
    masks: Iterable[Mask],
) -> int:
    """Apply every mask targeting ``page`` in order; later masks win on overlap.

    Returns:
        Number of masks applied.
    """
    applied = 0
    for mask in masks:
        if not mask.applies_to(page):
            continue
        apply_rect_mask(
            baseline,
            actual,
            width,
            height,
            (mask.x0, mask.y0, mask.x1, mask.y1),
            mask.color,
        )
        applied += 1
    return applied
