import json

import pytest
import typer
from typer.testing import CliRunner

from pdf_pixel_diff import __version__
from pdf_pixel_diff.config import CONFIG_ENV_VAR
from pdf_pixel_diff.main import app, load_masks_file, parse_mask

from conftest import BLACK, WHITE, write_pages

runner = CliRunner()


@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "home"))


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_parse_mask():
    mask = parse_mask("2:1,2,30.5,40")
    assert (mask.page_number, mask.x0, mask.y0, mask.x1, mask.y1) == (2, 1, 2, 30.5, 40)
    assert mask.color is None
    assert parse_mask("0:0,0,1,1:transparent").color == "transparent"


@pytest.mark.parametrize("spec", ["1,2,3,4", "1:1,2,3", "x:1,2,3,4", "1:1,2,3,4:black:extra"])
def test_parse_mask_rejects_bad_specs(spec):
    with pytest.raises(typer.BadParameter):
        parse_mask(spec)


def test_load_masks_file(tmp_path):
    path = tmp_path / "masks.json"
    path.write_text(json.dumps([{"pageNumber": 1, "x0": 0, "y0": 0, "x1": 5, "y1": 5, "color": "black"}]))

    masks = load_masks_file(path)

    assert len(masks) == 1
    assert masks[0].page_number == 1


def test_images_command_reports_differences(tmp_path):
    baseline = write_pages(tmp_path / "b", [WHITE, WHITE, WHITE])
    actual = write_pages(tmp_path / "a", [WHITE, BLACK, WHITE])
    out = tmp_path / "out"

    result = runner.invoke(app, ["images", str(baseline), str(actual), str(out)])

    assert result.exit_code == 1
    assert "Documents are different" in result.output
    assert (out / "difference-2.png").exists()


def test_images_command_with_exclusion_passes(tmp_path):
    baseline = write_pages(tmp_path / "b", [WHITE, WHITE])
    actual = write_pages(tmp_path / "a", [WHITE, BLACK])

    result = runner.invoke(
        app, ["images", str(baseline), str(actual), str(tmp_path / "out"), "--exclude-page", "2"]
    )

    assert result.exit_code == 0
    assert "Documents are the same" in result.output


def test_images_command_with_mask_passes(tmp_path):
    baseline = write_pages(tmp_path / "b", [WHITE, WHITE])
    actual = write_pages(tmp_path / "a", [WHITE, BLACK])

    result = runner.invoke(
        app,
        ["images", str(baseline), str(actual), str(tmp_path / "out"), "--mask", "2:0,0,100,100"],
    )

    assert result.exit_code == 0


def test_images_command_missing_directory(tmp_path):
    result = runner.invoke(app, ["images", str(tmp_path / "nope"), str(tmp_path), str(tmp_path / "out")])
    assert result.exit_code == 1


def test_config_set_and_show():
    result = runner.invoke(app, ["config", "set", "threshold", "0.3"])
    assert result.exit_code == 0

    shown = runner.invoke(app, ["config"])
    assert shown.exit_code == 0
    assert "0.3" in shown.output


def test_config_set_unknown_key():
    result = runner.invoke(app, ["config", "set", "colour", "red"])
    assert result.exit_code == 1


def test_compare_command_missing_file_fails(tmp_path):
    result = runner.invoke(
        app,
        [
            "compare",
            str(tmp_path / "missing.pdf"),
            str(tmp_path / "missing2.pdf"),
            "--result-dir",
            str(tmp_path / "results"),
        ],
    )
    assert result.exit_code == 1
    assert "Failed to compare the files" in result.output
