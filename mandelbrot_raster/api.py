"""
Main API classes for Mandelbrot rendering.

This module ties the escape-time renderer and the image exporter together:
a validated RenderConfig goes in, a rendered buffer or an image file comes out.
"""

import math
import numbers
import numpy as np
from typing import Optional, Tuple, Union
from dataclasses import dataclass, replace
from pathlib import Path
import logging
import time

from .core.exceptions import InvalidArgumentError, InvalidDimensionError
from .core.math_functions import ComplexPlane, check_positive_int, check_positive_float
from .acceleration.threaded import RowRenderer, DEFAULT_BAND_HEIGHT
from .rendering.image_output import ImageExporter, RenderMetadata

logger = logging.getLogger(__name__)

DEFAULT_BOUNDS = (-2.0, 1.0, -1.2, 1.2)


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for a single Mandelbrot render."""

    bounds: Tuple[float, float, float, float] = DEFAULT_BOUNDS  # xmin, xmax, ymin, ymax

    # Base image size, scaled by density
    width: int = 800
    height: int = 600
    density: float = 1.0

    max_iterations: int = 300
    dpi: float = 300

    # Performance
    num_workers: Optional[int] = None
    band_height: int = DEFAULT_BAND_HEIGHT

    @property
    def scaled_width(self) -> int:
        return int(self.width * self.density)

    @property
    def scaled_height(self) -> int:
        return int(self.height * self.density)

    def validate(self):
        """Validate configuration parameters."""
        check_positive_int("width", self.width)
        check_positive_int("height", self.height)
        check_positive_int("max_iterations", self.max_iterations)
        check_positive_float("density", self.density)
        check_positive_float("dpi", self.dpi)
        check_positive_int("band_height", self.band_height)
        if self.num_workers is not None:
            check_positive_int("num_workers", self.num_workers)

        if len(self.bounds) != 4:
            raise InvalidArgumentError("bounds must be (xmin, xmax, ymin, ymax)")
        if not all(isinstance(b, numbers.Real) and math.isfinite(b) for b in self.bounds):
            raise InvalidArgumentError(f"bounds must be finite real numbers, got {self.bounds}")
        xmin, xmax, ymin, ymax = self.bounds
        if xmin >= xmax or ymin >= ymax:
            raise InvalidArgumentError("Invalid bounds: min values must be less than max")

        scaled = (self.scaled_width, self.scaled_height)
        if min(scaled) < 1:
            raise InvalidArgumentError(
                f"Scaled image size {scaled[0]}x{scaled[1]} is empty "
                f"(base {self.width}x{self.height}, density {self.density})"
            )
        if min(scaled) == 1:
            raise InvalidDimensionError(
                f"Scaled image size {scaled[0]}x{scaled[1]} has a single row or column"
            )

    def plane(self) -> ComplexPlane:
        """Complex plane covering ``bounds`` at the scaled resolution."""
        return ComplexPlane(*self.bounds, self.scaled_width, self.scaled_height)


class MandelbrotRenderer:
    """Main Mandelbrot rendering engine."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()

        self.row_renderer = RowRenderer(self.config.num_workers, self.config.band_height)
        self.image_exporter = ImageExporter()

        logger.debug(f"MandelbrotRenderer initialized: {self.config.scaled_width}x"
                     f"{self.config.scaled_height}, max_iterations={self.config.max_iterations}")

    def render(self) -> np.ndarray:
        """
        Render the configured region.

        Returns:
            Read-only uint8 RGB array of shape (scaled_height, scaled_width, 3)
        """
        return self.row_renderer.render(self.config.plane(), self.config.max_iterations)

    def export(self, output_path: Union[str, Path]) -> RenderMetadata:
        """
        Render and write the image to ``output_path``.

        The destination is checked before rendering, so a missing directory
        fails fast without computing anything.

        Returns:
            Metadata embedded in the written file
        """
        output_path = Path(output_path)
        self.image_exporter.check_destination(output_path)

        start_time = time.time()
        logger.info(f"Starting render: {self.config.scaled_width}x{self.config.scaled_height} "
                    f"-> {output_path}")
        rgb_image = self.render()
        render_time = time.time() - start_time

        metadata = RenderMetadata(
            bounds=self.config.bounds,
            resolution=(self.config.scaled_width, self.config.scaled_height),
            max_iterations=self.config.max_iterations,
            density=float(self.config.density),
            dpi=float(self.config.dpi),
            render_time_seconds=render_time,
        )
        self.image_exporter.save_image(rgb_image, output_path, dpi=self.config.dpi, metadata=metadata)

        logger.info(f"Render complete: {time.time() - start_time:.2f}s")
        return metadata

    def update_config(self, **kwargs) -> RenderConfig:
        """Replace configuration fields and revalidate."""
        try:
            config = replace(self.config, **kwargs)
        except TypeError as e:
            raise InvalidArgumentError(f"Unknown configuration parameter: {e}") from e
        config.validate()

        self.config = config
        self.row_renderer = RowRenderer(config.num_workers, config.band_height)
        return config


def save_mandelbrot_image(path: Union[str, Path], width: int = 800, height: int = 600,
                          max_iter: int = 300, density: float = 1.0, dpi: float = 300,
                          num_workers: Optional[int] = None) -> RenderMetadata:
    """
    Render the standard view (-2.0, 1.0) x (-1.2, 1.2) and save it.

    Args:
        path: Output file; its parent directory must already exist
        width, height: Base image size in pixels
        max_iter: Maximum iterations per pixel
        density: Scale factor applied to width and height
        dpi: Resolution metadata written to the file
        num_workers: Worker threads (None for CPU count)

    Returns:
        Metadata of the written image
    """
    config = RenderConfig(
        bounds=DEFAULT_BOUNDS,
        width=width,
        height=height,
        density=density,
        max_iterations=max_iter,
        dpi=dpi,
        num_workers=num_workers,
    )
    return MandelbrotRenderer(config).export(path)
