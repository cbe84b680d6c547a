import os

import numpy as np
import pytest
from PIL import Image

from mandelbrot_raster.core.exceptions import ImageExportError, InvalidArgumentError
from mandelbrot_raster.rendering.image_output import ImageExporter, RenderMetadata


@pytest.fixture
def exporter():
    return ImageExporter()


@pytest.fixture
def gradient():
    levels = np.linspace(0, 255, 40).astype(np.uint8)
    row = np.repeat(levels[np.newaxis, :, np.newaxis], 3, axis=2)
    return np.repeat(row, 30, axis=0)


@pytest.fixture
def metadata():
    return RenderMetadata(
        bounds=(-2.0, 1.0, -1.2, 1.2),
        resolution=(40, 30),
        max_iterations=100,
        density=1.0,
        dpi=300.0,
        render_time_seconds=0.5,
    )


def test_png_has_pixels_and_dpi(exporter, gradient, tmp_path):
    path = tmp_path / "out.png"

    exporter.save_image(gradient, path, dpi=300)

    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.mode == "RGB"
        assert img.size == (40, 30)
        assert img.info["dpi"] == pytest.approx((300, 300), abs=0.01)
        np.testing.assert_array_equal(np.asarray(img), gradient)


@pytest.mark.parametrize("suffix", [".png", ".tiff", ".jpg"])
def test_metadata_round_trips_through_file(exporter, gradient, metadata, tmp_path, suffix):
    path = tmp_path / f"out{suffix}"

    exporter.save_image(gradient, path, dpi=150, metadata=metadata)

    assert exporter.extract_metadata_from_image(path) == metadata
    info = exporter.get_image_info(path)
    assert info["dimensions"] == (40, 30)
    assert info["dpi"] == pytest.approx((150, 150), abs=0.05)
    assert info["has_render_metadata"]


def test_missing_directory_raises_export_error(exporter, gradient, tmp_path):
    path = tmp_path / "missing" / "out.png"

    with pytest.raises(ImageExportError) as excinfo:
        exporter.save_image(gradient, path)

    assert isinstance(excinfo.value, OSError)
    assert not path.exists()


def test_unsupported_suffix_is_rejected(exporter, gradient, tmp_path):
    with pytest.raises(InvalidArgumentError):
        exporter.save_image(gradient, tmp_path / "out.bmp")


def test_non_rgb_array_is_rejected(exporter, tmp_path):
    with pytest.raises(InvalidArgumentError):
        exporter.save_image(np.zeros((4, 4), dtype=np.uint8), tmp_path / "out.png")


@pytest.mark.parametrize("dpi", [0, -72, float("nan")])
def test_invalid_dpi_is_rejected(exporter, gradient, tmp_path, dpi):
    with pytest.raises(InvalidArgumentError):
        exporter.save_image(gradient, tmp_path / "out.png", dpi=dpi)
    assert not (tmp_path / "out.png").exists()


def test_float_arrays_are_quantized(exporter, tmp_path):
    image = np.full((3, 3, 3), 0.5)
    path = tmp_path / "half.png"

    exporter.save_image(image, path)

    with Image.open(path) as img:
        assert img.getpixel((1, 1)) == (128, 128, 128)


def test_encoder_failure_becomes_export_error(exporter, gradient, tmp_path, monkeypatch):
    def failing_save(self, fp, format=None, **params):
        raise OSError("disk full")

    monkeypatch.setattr(Image.Image, "save", failing_save)

    with pytest.raises(ImageExportError, match="disk full"):
        exporter.save_image(gradient, tmp_path / "out.png")


def test_metadata_json_round_trip(metadata):
    restored = RenderMetadata.from_json(metadata.to_json())
    assert restored == metadata
    assert isinstance(restored.bounds, tuple)


def test_unencodable_dpi_becomes_export_error(exporter, gradient, tmp_path):
    path = tmp_path / "out.png"

    with pytest.raises(ImageExportError):
        exporter.save_image(gradient, path, dpi=1e9)

    assert not path.exists()


def test_encoder_value_error_removes_partial_file(exporter, gradient, tmp_path, monkeypatch):
    def failing_save(self, fp, format=None, **params):
        fp.write(b"partial")
        raise ValueError("bad parameter")

    monkeypatch.setattr(Image.Image, "save", failing_save)
    path = tmp_path / "out.tiff"

    with pytest.raises(ImageExportError, match="bad parameter"):
        exporter.save_image(gradient, path)

    assert not path.exists()


def test_unwritable_directory_raises_export_error(exporter, gradient, tmp_path, monkeypatch):
    monkeypatch.setattr(os, "access", lambda path, mode: False)
    path = tmp_path / "out.png"

    with pytest.raises(ImageExportError, match="not writable"):
        exporter.save_image(gradient, path)

    assert not path.exists()
