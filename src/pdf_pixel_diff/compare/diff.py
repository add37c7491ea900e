"""Pixel-level comparison of a single baseline/actual page pair."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image
from pixelmatch import pixelmatch

from pdf_pixel_diff.errors import (
    CompositionError,
    DimensionMismatchError,
    ImageDecodeError,
    PixelDiffError,
)

from .composite import combine_images
from .mask import Mask, apply_masks_for_page

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.1
DEFAULT_INCLUDE_AA = False

ImageSource = Union[str, Path, bytes, Image.Image]


@dataclass
class CompareOptions:
    """Settings shared by the page comparator and the batch orchestrator.

    Attributes:
        threshold: Per-pixel color sensitivity on a 0-1 scale.
        include_aa: Count anti-aliased edge pixels as differences.
        combine_images: Write a labeled baseline | actual | difference image
            instead of the bare diff.
        excluded_pages: 1-based page numbers to skip.
        masks: Rectangles to blank out before diffing.
    """

    threshold: float = DEFAULT_THRESHOLD
    include_aa: bool = DEFAULT_INCLUDE_AA
    combine_images: bool = False
    excluded_pages: list[int] = field(default_factory=list)
    masks: list[Mask] = field(default_factory=list)


@dataclass
class PageOutcome:
    page: int
    equal: bool
    diff_pixels: int
    diff_image_path: Path | None = None

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "equal": self.equal,
            "diff_pixels": self.diff_pixels,
            "diff_image_path": str(self.diff_image_path) if self.diff_image_path else None,
        }


def load_rgba(source: ImageSource, page: int | None = None) -> np.ndarray:
    """Decode an image source into an ``(height, width, 4)`` uint8 array.

    Raises:
        ImageDecodeError: If the source cannot be read or decoded.
    """
    try:
        if isinstance(source, Image.Image):
            return np.array(source.convert("RGBA"), dtype=np.uint8)
        if isinstance(source, bytes):
            source = io.BytesIO(source)
        with Image.open(source) as img:
            return np.array(img.convert("RGBA"), dtype=np.uint8)
    except Exception as exc:
        where = f" for page {page}" if page is not None else ""
        raise ImageDecodeError(f"Failed to decode image{where}: {exc}", page) from exc


def _save_png(image: Image.Image, output_path: Path, page: int) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(output_path, format="PNG")
    except OSError as exc:
        raise PixelDiffError(
            f"Failed to write diff image for page {page}: {output_path}", page
        ) from exc


def compare_page_images(
    page: int,
    baseline: ImageSource,
    actual: ImageSource,
    diff_image_path: Path,
    options: CompareOptions | None = None,
) -> PageOutcome:
    """Compare one baseline/actual page pair.

    Masks for this page are applied to both images before diffing. When the
    pages differ, the diff visualization (or the combined three-panel image
    in ``combine_images`` mode) is written to ``diff_image_path``; equal pages
    write nothing.

    Args:
        page: 1-based page number, used to select masks and in errors.
        baseline: Baseline image path, bytes or PIL image.
        actual: Actual image path, bytes or PIL image.
        diff_image_path: Where to write the diff image if the pages differ.
        options: Comparison settings.

    Returns:
        PageOutcome for the page.

    Raises:
        ImageDecodeError: If either image cannot be decoded.
        DimensionMismatchError: If the images differ in size.
        CompositionError: If the combined image cannot be built.
    """
    options = options or CompareOptions()
    diff_image_path = Path(diff_image_path)

    baseline_raw = load_rgba(baseline, page)
    actual_raw = load_rgba(actual, page)

    if baseline_raw.shape != actual_raw.shape:
        b_height, b_width = baseline_raw.shape[:2]
        a_height, a_width = actual_raw.shape[:2]
        raise DimensionMismatchError(
            f"Images for page {page} must have the same dimensions:\n"
            f"  baseline={b_width}x{b_height}\n"
            f"  actual={a_width}x{a_height}",
            page,
        )

    height, width = baseline_raw.shape[:2]

    if options.masks:
        applied = apply_masks_for_page(
            page, baseline_raw, actual_raw, width, height, options.masks
        )
        if applied:
            logger.debug("Page %d: applied %d mask(s)", page, applied)

    if np.array_equal(baseline_raw, actual_raw):
        logger.debug("Page %d: equal", page)
        return PageOutcome(page=page, equal=True, diff_pixels=0)

    diff_buffer = [0] * (width * height * 4)
    diff_pixels = pixelmatch(
        baseline_raw.tobytes(),
        actual_raw.tobytes(),
        width,
        height,
        output=diff_buffer,
        threshold=options.threshold,
        includeAA=options.include_aa,
    )

    if diff_pixels == 0:
        logger.debug("Page %d: equal", page)
        return PageOutcome(page=page, equal=True, diff_pixels=0)

    logger.debug("Page %d: %d differing pixel(s)", page, diff_pixels)
    diff_raw = np.array(diff_buffer, dtype=np.uint8).reshape(height, width, 4)

    if options.combine_images:
        try:
            output = combine_images(baseline_raw, actual_raw, diff_raw, width, height)
        except CompositionError as exc:
            raise CompositionError(f"{exc} (page {page})", page) from exc
    else:
        output = Image.fromarray(diff_raw)

    _save_png(output, diff_image_path, page)

    return PageOutcome(
        page=page,
        equal=False,
        diff_pixels=diff_pixels,
        diff_image_path=diff_image_path,
    )
