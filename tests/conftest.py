from pathlib import Path

import pytest
from PIL import Image

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


def save_image(path: Path, size=(24, 16), color=WHITE) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path)
    return path


def write_pages(directory: Path, colors, size=(24, 16), prefix="page") -> Path:
    """Write one PNG per color, named so that sorted order is page order."""
    directory.mkdir(parents=True, exist_ok=True)
    for idx, color in enumerate(colors, start=1):
        save_image(directory / f"{prefix}-{idx:03d}.png", size=size, color=color)
    return directory


@pytest.fixture
def page_dirs(tmp_path):
    baseline = tmp_path / "baseline"
    actual = tmp_path / "actual"
    difference = tmp_path / "difference"
    difference.mkdir()
    return baseline, actual, difference
