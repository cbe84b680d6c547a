from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from mandelbrot_raster import RenderConfig
from mandelbrot_raster.cli import main as cli


@pytest.fixture
def small_config(monkeypatch):
    config = RenderConfig(width=40, height=30, max_iterations=20, density=2.0, dpi=300)
    monkeypatch.setattr(cli, "DEFAULT_CONFIG", config)
    return config


def test_default_configuration():
    assert cli.DEFAULT_OUTPUT == Path("figures") / "mandelbrot.png"
    config = cli.DEFAULT_CONFIG
    assert (config.width, config.height, config.max_iterations) == (800, 600, 100)
    assert (config.density, config.dpi) == (2.0, 300)
    assert (config.scaled_width, config.scaled_height) == (1600, 1200)


def test_writes_image_into_existing_directory(tmp_path, monkeypatch, small_config):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "figures").mkdir()

    result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 0, result.output
    with Image.open(tmp_path / "figures" / "mandelbrot.png") as img:
        assert img.size == (80, 60)
        assert img.info["dpi"] == pytest.approx((300, 300), abs=0.01)


def test_missing_directory_exits_nonzero(tmp_path, monkeypatch, small_config):
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli.main, ["--quiet"])

    assert result.exit_code == 1
    assert not (tmp_path / "figures").exists()


def test_version_flag():
    result = CliRunner().invoke(cli.main, ["--version"])

    assert result.exit_code == 0
    assert "mandelbrot-raster v1.0.0" in result.output
