"""Result directory management."""

import shutil
from pathlib import Path
from typing import NamedTuple, Union

from pdf_pixel_diff.errors import SourceNotFoundError

# Results folder in current working directory
DEFAULT_RESULTS_DIRNAME = "pdf-pixel-diff"

RESULT_FOLDERS = ("baseline", "actual", "difference")

DocumentSource = Union[str, Path, bytes]


class ResultDirectories(NamedTuple):
    baseline: Path
    actual: Path
    difference: Path


def default_results_dir() -> Path:
    return Path.cwd() / DEFAULT_RESULTS_DIRNAME


def validate_source(source: DocumentSource) -> None:
    """Check that a document source exists.

    In-memory sources are always accepted.

    Raises:
        SourceNotFoundError: If ``source`` is a path that does not exist.
    """
    if isinstance(source, (bytes, bytearray)):
        return
    if not Path(source).exists():
        raise SourceNotFoundError(f"File {source} does not exist")


def _empty_directory(directory: Path) -> None:
    for entry in directory.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def prepare_directory(results_dir: Path, folder: str) -> Path:
    """Create ``results_dir/folder`` if needed and remove anything inside it."""
    directory = results_dir / folder
    directory.mkdir(parents=True, exist_ok=True)
    _empty_directory(directory)
    return directory


def create_result_directories(results_dir: Path | str | None = None) -> ResultDirectories:
    """Create empty baseline, actual and difference directories.

    Args:
        results_dir: Parent directory. Defaults to ./pdf-pixel-diff.

    Returns:
        ResultDirectories with the three paths.
    """
    root = Path(results_dir) if results_dir is not None else default_results_dir()
    return ResultDirectories(*(prepare_directory(root, folder) for folder in RESULT_FOLDERS))


def add_prefix_to_path(directory: Path) -> Path:
    """Return a file prefix inside ``directory`` named after the directory.

    ``results/baseline`` -> ``results/baseline/baseline``
    """
    directory = Path(directory)
    return directory / directory.name


def list_files(directory: Path) -> list[str]:
    """List file names in a directory, sorted so that page order is preserved."""
    return sorted(entry.name for entry in Path(directory).iterdir() if entry.is_file())
