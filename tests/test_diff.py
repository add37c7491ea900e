import math

import numpy as np
import pytest
from PIL import Image

from pdf_pixel_diff.compare import CompareOptions, Mask, compare_page_images, load_rgba
import pdf_pixel_diff.compare.diff as diff_module
from pdf_pixel_diff.errors import CompositionError, DimensionMismatchError, ImageDecodeError

from conftest import BLACK, RED, WHITE, save_image


def _page_with_box(path, box_color, size=(24, 16), box=(4, 4, 10, 8)):
    img = Image.new("RGBA", size, WHITE)
    img.paste(box_color, box)
    img.save(path)
    return path


def test_identical_images_are_equal_and_write_nothing(tmp_path):
    baseline = save_image(tmp_path / "b.png")
    actual = save_image(tmp_path / "a.png")
    diff_path = tmp_path / "out" / "difference-1.png"

    outcome = compare_page_images(1, baseline, actual, diff_path)

    assert outcome.equal
    assert outcome.diff_pixels == 0
    assert outcome.diff_image_path is None
    assert not diff_path.exists()


def test_different_images_write_plain_diff(tmp_path):
    baseline = save_image(tmp_path / "b.png", color=WHITE)
    actual = save_image(tmp_path / "a.png", color=BLACK)
    diff_path = tmp_path / "difference-1.png"

    outcome = compare_page_images(1, baseline, actual, diff_path)

    assert not outcome.equal
    assert outcome.diff_pixels == 24 * 16
    assert outcome.diff_image_path == diff_path
    with Image.open(diff_path) as img:
        assert img.size == (24, 16)


def test_combined_image_has_three_panels(tmp_path):
    baseline = save_image(tmp_path / "b.png", color=WHITE)
    actual = save_image(tmp_path / "a.png", color=RED)
    diff_path = tmp_path / "difference-1.png"

    outcome = compare_page_images(
        1, baseline, actual, diff_path, CompareOptions(combine_images=True)
    )

    assert not outcome.equal
    with Image.open(diff_path) as img:
        assert img.size == (3 * 24 + 20, 16)


@pytest.mark.parametrize("color", ["black", "transparent", None])
def test_differences_inside_mask_are_ignored(tmp_path, color):
    baseline = _page_with_box(tmp_path / "b.png", BLACK)
    actual = _page_with_box(tmp_path / "a.png", RED)
    diff_path = tmp_path / "difference-1.png"
    options = CompareOptions(masks=[Mask(page_number=1, x0=3.5, y0=3.5, x1=10, y1=8, color=color)])

    outcome = compare_page_images(1, baseline, actual, diff_path, options)

    assert outcome.equal
    assert not diff_path.exists()


def test_mask_for_another_page_is_not_applied(tmp_path):
    baseline = _page_with_box(tmp_path / "b.png", BLACK)
    actual = _page_with_box(tmp_path / "a.png", RED)
    options = CompareOptions(masks=[Mask(page_number=2, x0=0, y0=0, x1=24, y1=16)])

    outcome = compare_page_images(1, baseline, actual, tmp_path / "d.png", options)

    assert not outcome.equal


def test_dimension_mismatch_fails_fast(tmp_path):
    baseline = save_image(tmp_path / "b.png", size=(24, 16))
    actual = save_image(tmp_path / "a.png", size=(24, 17))
    diff_path = tmp_path / "difference-3.png"

    with pytest.raises(DimensionMismatchError) as excinfo:
        compare_page_images(3, baseline, actual, diff_path)

    assert excinfo.value.page == 3
    assert "baseline=24x16" in str(excinfo.value)
    assert "actual=24x17" in str(excinfo.value)
    assert not diff_path.exists()


def test_undecodable_image_raises_with_page(tmp_path):
    baseline = save_image(tmp_path / "b.png")
    broken = tmp_path / "a.png"
    broken.write_bytes(b"not a png")

    with pytest.raises(ImageDecodeError) as excinfo:
        compare_page_images(2, baseline, broken, tmp_path / "d.png")

    assert excinfo.value.page == 2


def test_load_rgba_accepts_bytes_and_images(tmp_path):
    path = save_image(tmp_path / "b.png", size=(5, 3), color=RED)

    from_bytes = load_rgba(path.read_bytes())
    from_image = load_rgba(Image.new("RGB", (5, 3), (255, 0, 0)))

    assert from_bytes.shape == (3, 5, 4)
    assert np.array_equal(from_bytes, from_image)


def test_unbounded_mask_covers_whole_page(tmp_path):
    baseline = save_image(tmp_path / "b.png", color=WHITE)
    actual = save_image(tmp_path / "a.png", color=BLACK)
    options = CompareOptions(
        masks=[Mask(page_number=0, x0=-math.inf, y0=-math.inf, x1=math.inf, y1=math.inf)]
    )

    outcome = compare_page_images(1, baseline, actual, tmp_path / "d.png", options)

    assert outcome.equal


def test_identical_pages_skip_pixelmatch(tmp_path, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("pixelmatch should not run for identical pages")

    monkeypatch.setattr(diff_module, "pixelmatch", fail)
    baseline = _page_with_box(tmp_path / "b.png", BLACK)
    actual = _page_with_box(tmp_path / "a.png", BLACK)

    outcome = compare_page_images(1, baseline, actual, tmp_path / "d.png")

    assert outcome.equal
    assert outcome.diff_pixels == 0


def test_composition_failure_writes_nothing(tmp_path, monkeypatch):
    def broken_combine(*args, **kwargs):
        raise CompositionError("Failed to create the combined image!")

    monkeypatch.setattr(diff_module, "combine_images", broken_combine)
    baseline = save_image(tmp_path / "b.png", color=WHITE)
    actual = save_image(tmp_path / "a.png", color=RED)
    diff_path = tmp_path / "out" / "difference-4.png"

    with pytest.raises(CompositionError) as excinfo:
        compare_page_images(4, baseline, actual, diff_path, CompareOptions(combine_images=True))

    assert excinfo.value.page == 4
    assert not diff_path.exists()
