"""Three-panel composite images for manual diff review."""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from pdf_pixel_diff.errors import CompositionError

PANEL_GAP = 10
BACKGROUND = (0, 0, 0)

# Label box, measured from the top-right corner of each panel
LABEL_SIZE = (120, 30)
LABEL_RIGHT_OFFSET = 130
LABEL_TOP_OFFSET = 10
LABEL_FONT_SIZE = 20
LABEL_COLOR = (0, 0, 0, 255)

PANEL_LABELS = ("Baseline", "Actual", "Difference")


def build_label(text: str) -> Image.Image:
    """Render ``text`` onto a small transparent RGBA overlay."""
    label = Image.new("RGBA", LABEL_SIZE, (0, 0, 0, 0))
    draw = ImageDraw.Draw(label)
    font = ImageFont.load_default(size=LABEL_FONT_SIZE)
    draw.text((0, 4), text, fill=LABEL_COLOR, font=font)
    return label


def _to_image(panel: np.ndarray | Image.Image) -> Image.Image:
    if isinstance(panel, Image.Image):
        return panel.convert("RGBA")
    return Image.fromarray(np.ascontiguousarray(panel, dtype=np.uint8))


def combine_images(
    baseline: np.ndarray | Image.Image,
    actual: np.ndarray | Image.Image,
    difference: np.ndarray | Image.Image,
    width: int,
    height: int,
    gap: int = PANEL_GAP,
) -> Image.Image:
    """Place baseline, actual and difference side by side with labels.

    Args:
        baseline: Baseline page (RGBA array or image).
        actual: Actual page (RGBA array or image).
        difference: Diff visualization of the same size.
        width: Page width in pixels.
        height: Page height in pixels.
        gap: Gap between panels in pixels.

    Returns:
        RGB image of size ``(3 * width + 2 * gap, height)`` on a black background.

    Raises:
        CompositionError: If any label or the canvas cannot be built.
    """
    try:
        labels = [build_label(text) for text in PANEL_LABELS]
        panels = [_to_image(p) for p in (baseline, actual, difference)]

        combined = Image.new("RGB", (width * 3 + gap * 2, height), BACKGROUND)

        for index, (panel, label) in enumerate(zip(panels, labels)):
            left = index * (width + gap)
            combined.paste(panel, (left, 0), panel)
            label_left = left + width - LABEL_RIGHT_OFFSET
            combined.paste(label, (label_left, LABEL_TOP_OFFSET), label)
    except Exception as exc:
        raise CompositionError("Failed to create the combined image!") from exc

    return combined
