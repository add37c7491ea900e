"""Page-by-page comparison of two directories of rendered pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pdf_pixel_diff.directory import list_files
from pdf_pixel_diff.errors import PageNotFoundError

from .diff import CompareOptions, PageOutcome, compare_page_images

logger = logging.getLogger(__name__)

MESSAGE_SAME = "Documents are the same"
MESSAGE_DIFFERENT = "Documents are different"


@dataclass
class CompareResult:
    passed: bool = True
    message: str = MESSAGE_SAME
    excluded_pages: list[int] = field(default_factory=list)
    different_pages: list[int] = field(default_factory=list)
    pages: list[PageOutcome] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "message": self.message,
            "excluded_pages": list(self.excluded_pages),
            "different_pages": list(self.different_pages),
            "pages": [outcome.to_dict() for outcome in self.pages],
        }


def page_count_message(baseline_total_pages: int, actual_total_pages: int) -> str:
    return (
        f"{MESSAGE_DIFFERENT}: baseline {baseline_total_pages} pages, "
        f"actual {actual_total_pages} pages"
    )


def diff_image_name(page: int, pages_to_check: int) -> str:
    """Build the diff file name, zero-padded to the width of ``pages_to_check``.

    >>> diff_image_name(7, 125)
    'difference-007.png'
    """
    digits = len(str(abs(pages_to_check)))
    return f"difference-{page:0{digits}d}.png"


def compare_all_page_images(
    baseline_total_pages: int,
    actual_total_pages: int,
    baseline_dir: Path,
    actual_dir: Path,
    difference_dir: Path,
    options: CompareOptions | None = None,
) -> CompareResult:
    """Compare the pages common to both documents and build a verdict.

    The N-th file of each directory listing is page N. Excluded pages are
    skipped entirely. Pages are compared one at a time, in order.

    Args:
        baseline_total_pages: Page count of the baseline document.
        actual_total_pages: Page count of the actual document.
        baseline_dir: Directory with one baseline image per page.
        actual_dir: Directory with one actual image per page.
        difference_dir: Directory receiving diff images.
        options: Comparison settings.

    Returns:
        CompareResult. A page-count mismatch fails the result even when every
        common page matches, and its message takes precedence.

    Raises:
        PageNotFoundError: If a directory holds fewer images than expected.
        PixelDiffError: Propagated unchanged from the page comparator.
    """
    options = options or CompareOptions()
    baseline_dir = Path(baseline_dir)
    actual_dir = Path(actual_dir)
    difference_dir = Path(difference_dir)

    result = CompareResult(excluded_pages=list(options.excluded_pages))
    excluded = set(options.excluded_pages)

    pages_to_check = min(baseline_total_pages, actual_total_pages)

    baseline_images = list_files(baseline_dir)
    actual_images = list_files(actual_dir)

    for page in range(1, pages_to_check + 1):
        if page in excluded:
            logger.debug("Page %d: excluded", page)
            continue

        if page > len(baseline_images) or page > len(actual_images):
            raise PageNotFoundError(
                f"Image {page} not found in baseline or actual directory", page
            )

        outcome = compare_page_images(
            page,
            baseline_dir / baseline_images[page - 1],
            actual_dir / actual_images[page - 1],
            difference_dir / diff_image_name(page, pages_to_check),
            options,
        )
        result.pages.append(outcome)

        if not outcome.equal:
            result.different_pages.append(page)

    if result.different_pages:
        result.passed = False
        result.message = MESSAGE_DIFFERENT

    if baseline_total_pages != actual_total_pages:
        result.passed = False
        result.message = page_count_message(baseline_total_pages, actual_total_pages)

    return result
