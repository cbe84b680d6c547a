"""
Core mathematical functions for Mandelbrot iteration.

This module provides the escape-time evaluator, in scalar and vectorized
form, and the mapping from pixel coordinates onto a rectangular region of
the complex plane.
"""

import math
import numbers
import logging
from typing import Tuple

import numpy as np

from .exceptions import InvalidArgumentError, InvalidDimensionError

logger = logging.getLogger(__name__)

ESCAPE_RADIUS = 2.0


def check_positive_int(name: str, value) -> int:
    """Return ``value`` as an int, raising InvalidArgumentError unless it is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}")
    return int(value)


def check_positive_float(name: str, value) -> float:
    """Return ``value`` as a float, raising InvalidArgumentError unless it is finite and positive."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{name} must be finite and positive, got {value}")
    return value


def escape_count(c: complex, max_iter: int) -> int:
    """
    Count iterations of z = z^2 + c before |z| exceeds the escape radius.

    Args:
        c: Point of the complex plane to test
        max_iter: Iteration budget

    Returns:
        Number of iterations performed; ``max_iter`` if the orbit never escaped
    """
    c = complex(c)
    z = 0j
    count = 0
    while abs(z) <= ESCAPE_RADIUS and count < max_iter:
        z = z * z + c
        count += 1
    return count


def escape_counts(c: np.ndarray, max_iter: int) -> np.ndarray:
    """
    Vectorized escape_count over an array of points.

    Every element gets exactly the count escape_count would return for it.

    Args:
        c: Complex array of points
        max_iter: Iteration budget

    Returns:
        int32 array of escape counts with the shape of ``c``
    """
    c = np.asarray(c, dtype=np.complex128)
    z = np.zeros_like(c)
    counts = np.zeros(c.shape, dtype=np.int32)
    active = np.ones(c.shape, dtype=bool)

    for _ in range(max_iter):
        active &= np.abs(z) <= ESCAPE_RADIUS
        if not np.any(active):
            break
        z_active = z[active]
        z[active] = z_active * z_active + c[active]
        counts[active] += 1

    return counts


class ComplexPlane:
    """Represents a complex plane region with coordinate mapping utilities."""

    def __init__(self, xmin: float, xmax: float, ymin: float, ymax: float,
                 width: int, height: int):
        """
        Initialize complex plane bounds and resolution.

        Pixel (0, 0) maps to (xmin, ymin) and pixel (height-1, width-1) to
        (xmax, ymax), both corners inclusive.

        Args:
            xmin, xmax: Real axis bounds
            ymin, ymax: Imaginary axis bounds
            width, height: Image resolution in pixels
        """
        self.width = check_positive_int("width", width)
        self.height = check_positive_int("height", height)
        if self.width == 1 or self.height == 1:
            raise InvalidDimensionError(
                f"Cannot map a {self.width}x{self.height} grid onto the plane: "
                "width and height must both be at least 2"
            )

        bounds = (xmin, xmax, ymin, ymax)
        if not all(isinstance(b, numbers.Real) and math.isfinite(b) for b in bounds):
            raise InvalidArgumentError(f"Plane bounds must be finite real numbers, got {bounds}")
        if xmin >= xmax or ymin >= ymax:
            raise InvalidArgumentError("Invalid bounds: min values must be less than max values")

        self.xmin = float(xmin)
        self.xmax = float(xmax)
        self.ymin = float(ymin)
        self.ymax = float(ymax)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.xmin, self.xmax, self.ymin, self.ymax)

    def pixel_to_complex(self, px: int, py: int) -> complex:
        """Convert pixel column ``px`` and row ``py`` to a complex number."""
        real = self.xmin + px / (self.width - 1) * (self.xmax - self.xmin)
        imag = self.ymin + py / (self.height - 1) * (self.ymax - self.ymin)
        return complex(real, imag)

    def real_axis(self) -> np.ndarray:
        """Real coordinate of every column."""
        px = np.arange(self.width, dtype=np.float64)
        return self.xmin + px / (self.width - 1) * (self.xmax - self.xmin)

    def imag_axis(self) -> np.ndarray:
        """Imaginary coordinate of every row."""
        py = np.arange(self.height, dtype=np.float64)
        return self.ymin + py / (self.height - 1) * (self.ymax - self.ymin)

    def band_coordinates(self, y_start: int, y_end: int) -> np.ndarray:
        """
        Create the complex coordinates of rows ``y_start`` to ``y_end`` (exclusive).

        Returns:
            Complex array of shape (y_end - y_start, width)
        """
        imag = self.imag_axis()[y_start:y_end]
        coords = np.empty((imag.shape[0], self.width), dtype=np.complex128)
        coords.real = self.real_axis()[np.newaxis, :]
        coords.imag = imag[:, np.newaxis]
        return coords

    def row_coordinates(self, y: int) -> np.ndarray:
        """Complex coordinates of a single row."""
        return self.band_coordinates(y, y + 1)[0]

    def __repr__(self) -> str:
        return (f"ComplexPlane(xmin={self.xmin}, xmax={self.xmax}, ymin={self.ymin}, "
                f"ymax={self.ymax}, width={self.width}, height={self.height})")
