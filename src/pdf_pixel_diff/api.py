"""Top-level document comparison entry point."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from pdf_pixel_diff.compare import (
    CompareOptions,
    CompareResult,
    compare_all_page_images,
    write_result_json,
)
from pdf_pixel_diff.compare.report import RESULT_FILENAME
from pdf_pixel_diff.directory import (
    DocumentSource,
    add_prefix_to_path,
    create_result_directories,
    default_results_dir,
    validate_source,
)
from pdf_pixel_diff.render import DEFAULT_DPI, PdfRenderer

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to compare the files"


@dataclass
class RenderOptions:
    dpi: int = DEFAULT_DPI


@dataclass
class Options:
    """Options for :func:`compare_files`.

    Attributes:
        result_dir: Where baseline/actual/difference folders are created.
            Defaults to ./pdf-pixel-diff.
        render: Rasterization settings, used when no renderer is passed.
        compare: Comparison settings.
        write_report: Write result.json into ``result_dir`` after comparing.
    """

    result_dir: Path | str | None = None
    render: RenderOptions = field(default_factory=RenderOptions)
    compare: CompareOptions = field(default_factory=CompareOptions)
    write_report: bool = True


@dataclass
class CompareFilesResult(CompareResult):
    error: Exception | None = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["error"] = str(self.error) if self.error is not None else None
        return data


def _source_label(source: DocumentSource) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return str(source)


def _page_count_task(dpi: int, source: DocumentSource, name: str) -> int:
    """Worker for counting pages in a separate process.

    This is a module-level function so it can be pickled for ProcessPoolExecutor.
    """
    return PdfRenderer(dpi=dpi).page_count(source, name)


def _render_task(dpi: int, source: DocumentSource, out_prefix: Path) -> int:
    """Worker for rendering a document in a separate process."""
    return PdfRenderer(dpi=dpi).render(source, out_prefix)


def _run_pair(executor: ProcessPoolExecutor, fn, baseline_args: tuple, actual_args: tuple):
    baseline_future = executor.submit(fn, *baseline_args)
    actual_future = executor.submit(fn, *actual_args)
    return baseline_future.result(), actual_future.result()


def compare_files(
    baseline_file: DocumentSource,
    actual_file: DocumentSource,
    options: Options | None = None,
    renderer: PdfRenderer | None = None,
) -> CompareFilesResult:
    """Render two PDFs page by page and compare them.

    This function never raises. Any failure is returned as a result with
    ``passed=False`` and the original exception in ``error``.

    Args:
        baseline_file: Baseline PDF path or bytes.
        actual_file: Actual PDF path or bytes.
        options: Result directory, rendering and comparison settings.
        renderer: Renderer to reuse. Created from ``options.render`` if None.

    Returns:
        CompareFilesResult with the verdict and per-page outcomes.
    """
    options = options or Options()

    try:
        validate_source(baseline_file)
        validate_source(actual_file)

        if renderer is None:
            renderer = PdfRenderer(dpi=options.render.dpi)

        result_dir = (
            Path(options.result_dir) if options.result_dir is not None else default_results_dir()
        )

        # PyMuPDF is not thread safe; each document gets its own process
        with ProcessPoolExecutor(max_workers=2) as executor:
            baseline_total_pages, actual_total_pages = _run_pair(
                executor,
                _page_count_task,
                (renderer.dpi, baseline_file, "baseline"),
                (renderer.dpi, actual_file, "actual"),
            )
            logger.debug(
                "Page counts: baseline=%d actual=%d", baseline_total_pages, actual_total_pages
            )

            dirs = create_result_directories(result_dir)

            _run_pair(
                executor,
                _render_task,
                (renderer.dpi, baseline_file, add_prefix_to_path(dirs.baseline)),
                (renderer.dpi, actual_file, add_prefix_to_path(dirs.actual)),
            )

        result = compare_all_page_images(
            baseline_total_pages,
            actual_total_pages,
            dirs.baseline,
            dirs.actual,
            dirs.difference,
            options.compare,
        )

        if options.write_report:
            write_result_json(
                result,
                result_dir / RESULT_FILENAME,
                extra={
                    "baseline": _source_label(baseline_file),
                    "actual": _source_label(actual_file),
                    "baseline_pages": baseline_total_pages,
                    "actual_pages": actual_total_pages,
                },
            )

        return CompareFilesResult(
            passed=result.passed,
            message=result.message,
            excluded_pages=result.excluded_pages,
            different_pages=result.different_pages,
            pages=result.pages,
        )
    except Exception as exc:
        logger.debug("Comparison failed: %s", exc, exc_info=True)
        return CompareFilesResult(
            passed=False,
            message=FAILURE_MESSAGE,
            excluded_pages=list(options.compare.excluded_pages),
            different_pages=[],
            error=exc,
        )
