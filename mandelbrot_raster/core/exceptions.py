"""
Exception hierarchy for Mandelbrot rendering and export.

Argument problems are detected before any pixel is computed; export problems
surface when the image is written to disk.
"""


class MandelbrotError(Exception):
    """Base class for all rendering and export errors."""


class InvalidArgumentError(MandelbrotError, ValueError):
    """A render or export parameter is out of range or of the wrong type."""


class InvalidDimensionError(InvalidArgumentError):
    """Width or height of 1, for which the pixel-to-plane mapping is undefined."""


class ImageExportError(MandelbrotError, OSError):
    """The output image could not be written."""
