"""Page masking, pixel comparison and diff composition."""

from .batch import (
    CompareResult,
    compare_all_page_images,
    diff_image_name,
)
from .composite import combine_images, PANEL_GAP
from .diff import (
    CompareOptions,
    PageOutcome,
    compare_page_images,
    load_rgba,
    DEFAULT_THRESHOLD,
    DEFAULT_INCLUDE_AA,
)
from .mask import (
    Mask,
    MaskColor,
    apply_masks_for_page,
    apply_rect_mask,
    clamp_rect,
    mask_alpha,
)
from .report import write_result_json

__all__ = [
    # Batch
    "CompareResult",
    "compare_all_page_images",
    "diff_image_name",
    # Composite
    "combine_images",
    "PANEL_GAP",
    # Diff
    "CompareOptions",
    "PageOutcome",
    "compare_page_images",
    "load_rgba",
    "DEFAULT_THRESHOLD",
    "DEFAULT_INCLUDE_AA",
    # Mask
    "Mask",
    "MaskColor",
    "apply_masks_for_page",
    "apply_rect_mask",
    "clamp_rect",
    "mask_alpha",
    # Report
    "write_result_json",
]
