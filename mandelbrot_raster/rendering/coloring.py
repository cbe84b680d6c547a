"""
Grayscale coloring of escape counts.

Escape counts are normalized by the iteration budget and written to all three
channels. Points that never escaped are black.
"""

import numpy as np
from typing import Tuple
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

CHANNEL_LEVELS = 255


@dataclass(frozen=True)
class ColorRGB:
    """RGB color representation."""
    r: float
    g: float
    b: float

    def __post_init__(self):
        """Validate RGB values."""
        for component in [self.r, self.g, self.b]:
            if not 0 <= component <= 1:
                raise ValueError("RGB components must be between 0 and 1")

    def to_tuple(self) -> Tuple[float, float, float]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_uint8_tuple(self) -> Tuple[int, int, int]:
        """Convert to 8-bit RGB tuple, rounding to the nearest level."""
        return tuple(int(round(c * CHANNEL_LEVELS)) for c in self.to_tuple())

    @classmethod
    def gray(cls, value: float) -> 'ColorRGB':
        return cls(value, value, value)


def normalize(iterations: int, max_iter: int) -> float:
    """
    Normalize an escape count to the 0-1 range.

    Args:
        iterations: Escape count
        max_iter: Iteration budget the count was computed with

    Returns:
        0.0 for points inside the set, otherwise iterations / max_iter
    """
    if iterations == max_iter:
        return 0.0
    return iterations / max_iter


def escape_count_to_color(iterations: int, max_iter: int) -> ColorRGB:
    """Gray color for an escape count."""
    return ColorRGB.gray(normalize(iterations, max_iter))


def colorize(counts: np.ndarray, max_iter: int) -> np.ndarray:
    """
    Map an array of escape counts to 8-bit gray RGB pixels.

    Produces the same levels as escape_count_to_color(...).to_uint8_tuple()
    for every element.

    Args:
        counts: Integer array of escape counts
        max_iter: Iteration budget

    Returns:
        uint8 array with shape ``counts.shape + (3,)``
    """
    counts = np.asarray(counts)
    inside = counts == max_iter
    with np.errstate(divide='ignore', invalid='ignore'):
        values = np.where(inside, 0.0, counts / max_iter)
    levels = np.rint(values * CHANNEL_LEVELS).astype(np.uint8)
    return np.repeat(levels[..., np.newaxis], 3, axis=-1)
