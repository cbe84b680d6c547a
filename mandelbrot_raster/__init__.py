"""
Grayscale Mandelbrot set rasterizer.

This library computes escape-time iteration counts over a region of the
complex plane, maps them to gray levels, fills the image in parallel by rows
and writes it as an image file with DPI metadata.

Example usage:
    >>> from mandelbrot_raster import save_mandelbrot_image
    >>> save_mandelbrot_image("mandelbrot.png", width=800, height=600,
    ...                       max_iter=100, density=2.0, dpi=300)
"""

__version__ = "1.0.0"

from mandelbrot_raster.core.exceptions import (
    MandelbrotError,
    InvalidArgumentError,
    InvalidDimensionError,
    ImageExportError,
)
from mandelbrot_raster.core.math_functions import ComplexPlane, escape_count, escape_counts
from mandelbrot_raster.rendering.coloring import ColorRGB, normalize, escape_count_to_color, colorize
from mandelbrot_raster.rendering.image_output import ImageExporter, RenderMetadata
from mandelbrot_raster.acceleration.threaded import RowRenderer, render_mandelbrot

# Main API classes
from mandelbrot_raster.api import MandelbrotRenderer, RenderConfig, save_mandelbrot_image

__all__ = [
    "MandelbrotRenderer",
    "RenderConfig",
    "save_mandelbrot_image",
    "render_mandelbrot",
    "RowRenderer",
    "ComplexPlane",
    "escape_count",
    "escape_counts",
    "ColorRGB",
    "normalize",
    "escape_count_to_color",
    "colorize",
    "ImageExporter",
    "RenderMetadata",
    "MandelbrotError",
    "InvalidArgumentError",
    "InvalidDimensionError",
    "ImageExportError",
]
