"""
Thread-pool backend for parallel Mandelbrot rendering.

The image is split into horizontal bands of rows. Each band is computed by a
worker thread and written into its own slice of a pre-allocated buffer, so
workers never share mutable state and need no locking.
"""

import numpy as np
from typing import List, Optional
import logging
import os
import time
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor

from ..core.math_functions import ComplexPlane, escape_counts, check_positive_int
from ..rendering.coloring import colorize

logger = logging.getLogger(__name__)

DEFAULT_BAND_HEIGHT = 16


@dataclass(frozen=True)
class RowBand:
    """A contiguous range of image rows processed by one task."""
    band_id: int
    y_start: int
    y_end: int

    @property
    def height(self) -> int:
        return self.y_end - self.y_start


def create_row_bands(height: int, band_height: int = DEFAULT_BAND_HEIGHT) -> List[RowBand]:
    """
    Split ``height`` rows into consecutive, disjoint bands.

    Args:
        height: Total image height
        band_height: Rows per band; the last band may be shorter

    Returns:
        List of RowBand objects covering every row exactly once
    """
    height = check_positive_int("height", height)
    band_height = check_positive_int("band_height", band_height)

    bands = []
    for band_id, y in enumerate(range(0, height, band_height)):
        bands.append(RowBand(band_id=band_id, y_start=y, y_end=min(y + band_height, height)))

    logger.debug(f"Created {len(bands)} row bands of up to {band_height} rows")
    return bands


def render_band(plane: ComplexPlane, band: RowBand, max_iter: int, out: np.ndarray) -> None:
    """
    Compute one band and write its pixels into ``out``.

    Args:
        plane: Complex plane specification
        band: Rows to compute
        max_iter: Iteration budget
        out: Writable view of the buffer rows belonging to ``band``
    """
    logger.debug(f"Band {band.band_id}: rows {band.y_start}-{band.y_end - 1}")
    coords = plane.band_coordinates(band.y_start, band.y_end)
    out[...] = colorize(escape_counts(coords, max_iter), max_iter)


class RowRenderer:
    """Row-band parallel renderer backed by a thread pool."""

    def __init__(self, num_workers: Optional[int] = None, band_height: int = DEFAULT_BAND_HEIGHT):
        """
        Initialize row renderer.

        Args:
            num_workers: Number of worker threads (None for CPU count, 1 for
                sequential rendering in the calling thread)
            band_height: Rows per task
        """
        if num_workers is None:
            num_workers = os.cpu_count() or 1
        self.num_workers = check_positive_int("num_workers", num_workers)
        self.band_height = check_positive_int("band_height", band_height)

    def render(self, plane: ComplexPlane, max_iter: int) -> np.ndarray:
        """
        Render the plane into a gray RGB buffer.

        Args:
            plane: Complex plane specification
            max_iter: Iteration budget

        Returns:
            Read-only uint8 array of shape (height, width, 3)
        """
        max_iter = check_positive_int("max_iter", max_iter)
        start_time = time.time()

        buffer = np.zeros((plane.height, plane.width, 3), dtype=np.uint8)
        bands = create_row_bands(plane.height, self.band_height)

        if self.num_workers == 1:
            for band in bands:
                render_band(plane, band, max_iter, buffer[band.y_start:band.y_end])
        else:
            logger.debug(f"Rendering {len(bands)} bands with {self.num_workers} threads")
            with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                futures = [
                    executor.submit(render_band, plane, band, max_iter,
                                    buffer[band.y_start:band.y_end])
                    for band in bands
                ]
                for future in futures:
                    future.result()

        buffer.flags.writeable = False

        logger.info(f"Rendered {plane.width}x{plane.height} at max_iter={max_iter} "
                    f"in {time.time() - start_time:.2f}s ({self.num_workers} workers)")
        return buffer


def render_mandelbrot(x_min: float, x_max: float, y_min: float, y_max: float,
                      width: int, height: int, max_iter: int,
                      num_workers: Optional[int] = None,
                      band_height: int = DEFAULT_BAND_HEIGHT) -> np.ndarray:
    """
    Render the Mandelbrot set over a region of the complex plane.

    Row y of the result corresponds to imaginary part
    ``y_min + y/(height-1) * (y_max - y_min)``, column x to real part
    ``x_min + x/(width-1) * (x_max - x_min)``.

    Returns:
        Read-only uint8 array of shape (height, width, 3)
    """
    plane = ComplexPlane(x_min, x_max, y_min, y_max, width, height)
    renderer = RowRenderer(num_workers=num_workers, band_height=band_height)
    return renderer.render(plane, max_iter)
