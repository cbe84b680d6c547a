"""
Image export and format handling for Mandelbrot rendering.

This module writes rendered RGB buffers to PNG, TIFF or JPEG files with
resolution (DPI) metadata and an embedded JSON description of the render.
"""

import numpy as np
from typing import Dict, Any, Optional, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict
import errno
import json
import logging
import os
import struct
from datetime import datetime

from PIL import Image, PngImagePlugin, TiffImagePlugin

from .. import __version__
from ..core.exceptions import ImageExportError, InvalidArgumentError
from ..core.math_functions import check_positive_float

logger = logging.getLogger(__name__)

METADATA_KEY = "MandelbrotMetadata"


@dataclass
class RenderMetadata:
    """Metadata for Mandelbrot renders."""

    bounds: Tuple[float, float, float, float]  # xmin, xmax, ymin, ymax
    resolution: Tuple[int, int]  # width, height
    max_iterations: int
    density: float
    dpi: float

    render_time_seconds: float = 0.0

    timestamp: str = ""
    software_version: str = __version__

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()
        self.bounds = tuple(self.bounds)
        self.resolution = tuple(self.resolution)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


class ImageExporter:
    """Image export with resolution and render metadata."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.tiff': self._save_tiff,
            '.tif': self._save_tiff,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
        }

    def check_destination(self, filepath: Path) -> None:
        """
        Verify that ``filepath`` can be written without creating directories.

        Raises:
            InvalidArgumentError: unsupported file suffix
            ImageExportError: parent directory missing or not writable
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()
        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise InvalidArgumentError(f"Unsupported format '{suffix}'. Supported: {supported}")

        parent = filepath.parent
        if not parent.is_dir():
            raise ImageExportError(errno.ENOENT, "Output directory does not exist", str(parent))
        if not os.access(parent, os.W_OK):
            raise ImageExportError(errno.EACCES, "Output directory is not writable", str(parent))

    def save_image(self, image_array: np.ndarray, filepath: Path, dpi: float = 300,
                   metadata: Optional[RenderMetadata] = None) -> None:
        """
        Save RGB image array to file with DPI and render metadata.

        Args:
            image_array: RGB image array (height, width, 3), uint8 or floats in 0-1
            filepath: Output file path; its suffix selects the format
            dpi: Horizontal and vertical resolution to embed
            metadata: Render metadata to embed
        """
        filepath = Path(filepath)
        dpi = check_positive_float("dpi", dpi)
        self.check_destination(filepath)

        image_array = self._prepare_image_array(image_array)
        pil_image = Image.fromarray(image_array)
        save_method = self.supported_formats[filepath.suffix.lower()]

        opened = False
        try:
            with open(filepath, 'wb') as fh:
                opened = True
                save_method(pil_image, fh, dpi, metadata)
        except (OSError, ValueError, struct.error) as e:
            if opened:
                filepath.unlink(missing_ok=True)
            reason = getattr(e, 'strerror', None) or e
            raise ImageExportError(getattr(e, 'errno', None), f"Could not write image: {reason}",
                                   str(filepath)) from e

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]}, {dpi:g} dpi)")

    def _prepare_image_array(self, image_array: np.ndarray) -> np.ndarray:
        """Prepare and validate image array for export."""
        image_array = np.asarray(image_array)
        if image_array.ndim != 3 or image_array.shape[2] != 3:
            raise InvalidArgumentError(f"Expected RGB image array (H, W, 3), got {image_array.shape}")

        if image_array.dtype != np.uint8:
            if np.issubdtype(image_array.dtype, np.floating):
                image_array = np.rint(np.clip(image_array, 0.0, 1.0) * 255).astype(np.uint8)
            else:
                image_array = np.clip(image_array, 0, 255).astype(np.uint8)

        return np.ascontiguousarray(image_array)

    def _save_png(self, pil_image: Image.Image, fh, dpi: float,
                  metadata: Optional[RenderMetadata]) -> None:
        """Save as PNG with text chunks."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Title", "Mandelbrot set")
            pnginfo.add_text("Software", f"mandelbrot-raster v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text(METADATA_KEY, metadata.to_json())

        pil_image.save(fh, "PNG", pnginfo=pnginfo, dpi=(dpi, dpi))

    def _save_tiff(self, pil_image: Image.Image, fh, dpi: float,
                   metadata: Optional[RenderMetadata]) -> None:
        """Save as LZW-compressed TIFF, metadata in the ImageDescription tag."""
        save_kwargs = {'compression': 'tiff_lzw', 'dpi': (dpi, dpi)}

        if metadata:
            save_kwargs['description'] = metadata.to_json()
            save_kwargs['software'] = f"mandelbrot-raster v{metadata.software_version}"

        pil_image.save(fh, "TIFF", **save_kwargs)

    def _save_jpeg(self, pil_image: Image.Image, fh, dpi: float,
                   metadata: Optional[RenderMetadata]) -> None:
        """Save as JPEG, metadata in the COM segment."""
        save_kwargs = {'quality': 95, 'dpi': (dpi, dpi)}

        if metadata:
            save_kwargs['comment'] = metadata.to_json()

        pil_image.save(fh, "JPEG", **save_kwargs)

    def extract_metadata_from_image(self, filepath: Path) -> Optional[RenderMetadata]:
        """
        Extract render metadata from a saved image.

        Args:
            filepath: Path to image file

        Returns:
            Extracted metadata or None
        """
        with Image.open(filepath) as img:
            text = getattr(img, 'text', None) or {}
            if METADATA_KEY in text:
                return RenderMetadata.from_json(text[METADATA_KEY])

            if hasattr(img, 'tag_v2') and TiffImagePlugin.IMAGEDESCRIPTION in img.tag_v2:
                return RenderMetadata.from_json(img.tag_v2[TiffImagePlugin.IMAGEDESCRIPTION])

            comment = img.info.get('comment')
            if comment:
                if isinstance(comment, bytes):
                    comment = comment.decode('utf-8')
                return RenderMetadata.from_json(comment)

        return None

    def get_image_info(self, filepath: Path) -> Dict[str, Any]:
        """
        Get information about an image file.

        Args:
            filepath: Path to image file

        Returns:
            Dictionary with image information
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Image file not found: {filepath}")

        with Image.open(filepath) as img:
            info = {
                'filepath': str(filepath),
                'size_bytes': filepath.stat().st_size,
                'format': img.format,
                'dimensions': img.size,
                'mode': img.mode,
                'dpi': img.info.get('dpi'),
            }

        metadata = self.extract_metadata_from_image(filepath)
        info['has_render_metadata'] = metadata is not None
        info['render_metadata'] = metadata.to_dict() if metadata else None
        return info
