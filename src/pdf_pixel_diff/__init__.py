"""Page-by-page visual regression testing for PDF documents."""

__version__ = "0.1.0"

from .api import CompareFilesResult, Options, RenderOptions, compare_files
from .compare import CompareOptions, CompareResult, Mask, MaskColor
from .render import PdfRenderer

__all__ = [
    "__version__",
    "compare_files",
    "CompareFilesResult",
    "Options",
    "RenderOptions",
    "CompareOptions",
    "CompareResult",
    "Mask",
    "MaskColor",
    "PdfRenderer",
]
