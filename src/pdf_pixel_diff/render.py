"""PDF page counting and rasterization."""

import logging
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF

from pdf_pixel_diff.errors import RenderError, RenderInitError

logger = logging.getLogger(__name__)

DPI_MIN = 72
DPI_MAX = 600
DEFAULT_DPI = 150

DocumentSource = Union[str, Path, bytes]


def open_document(source: DocumentSource) -> fitz.Document:
    """Open a PDF from a path or an in-memory buffer."""
    if isinstance(source, (bytes, bytearray)):
        return fitz.open(stream=bytes(source), filetype="pdf")
    return fitz.open(Path(source))


class PdfRenderer:
    """Renders PDF documents to one PNG per page.

    Create one renderer and reuse it for every comparison in a process.

    Args:
        dpi: Rasterization resolution (72-600).

    Raises:
        RenderInitError: If the configuration is unusable.
    """

    def __init__(self, dpi: int = DEFAULT_DPI) -> None:
        if dpi < DPI_MIN or dpi > DPI_MAX:
            raise RenderInitError(
                f"DPI must be between {DPI_MIN} and {DPI_MAX}, got {dpi}"
            )
        self.dpi = dpi

    def page_count(self, source: DocumentSource, name: str) -> int:
        """Get the number of pages in a document.

        Args:
            source: PDF path or bytes.
            name: Label used in error messages (e.g. "baseline").

        Raises:
            RenderError: If the document cannot be opened or has no pages.
        """
        try:
            doc = open_document(source)
        except Exception as exc:
            raise RenderError(f"Failed to get info for {name} PDF file") from exc

        try:
            total_pages = doc.page_count
        finally:
            doc.close()

        if total_pages <= 0:
            raise RenderError(f"Unable to determine PDF page count for {name} PDF file")

        return total_pages

    def render(self, source: DocumentSource, out_prefix: Path) -> int:
        """Rasterize every page to ``<out_prefix>-<n>.png``.

        ``n`` is zero-padded to the digit width of the page count, so a
        sorted directory listing is in page order.

        Returns:
            Number of pages rendered.

        Raises:
            RenderError: If the document cannot be opened or a page fails.
        """
        out_prefix = Path(out_prefix)
        try:
            doc = open_document(source)
        except Exception as exc:
            raise RenderError(f"Failed to open PDF for rendering: {exc}") from exc

        out_prefix.parent.mkdir(parents=True, exist_ok=True)
        page_count = doc.page_count
        digits = len(str(page_count))
        idx = 0

        try:
            for idx, page in enumerate(doc, start=1):
                pix = page.get_pixmap(dpi=self.dpi, alpha=False)
                pix.save(out_prefix.parent / f"{out_prefix.name}-{idx:0{digits}d}.png")
        except Exception as exc:
            raise RenderError(f"Failed to rasterize page {idx}: {exc}", idx) from exc
        finally:
            doc.close()

        logger.debug("Rendered %d page(s) to %s at %d DPI", page_count, out_prefix.parent, self.dpi)
        return page_count
