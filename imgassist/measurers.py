"""Image measurers for imgassist.

This module contains implementations of the ImageMeasurer protocol, which
report the native pixel size of a source image.

Key classes:
- PillowMeasurer: Reads image headers with Pillow.
- IdentifyMeasurer: Runs ImageMagick ``identify``.
- CachingMeasurer: Memoizes another measurer for the length of a build.
"""

from __future__ import annotations

import subprocess
import threading

from PIL import Image

from .errors import MeasureError
from .executable_utils import imagemagick_command
from .protocols import ImageMeasurer


def _checked_dims(path: str, width: int, height: int) -> tuple[int, int]:
    if width <= 0 or height <= 0:
        raise MeasureError(path, f"invalid dimensions {width}x{height}")
    return width, height


class PillowMeasurer:
    """Measures images with Pillow.

    Only the image header is decoded, so measuring is cheap even for large
    files.
    """

    def measure(self, path: str) -> tuple[int, int]:
        """Return (width, height) of the image at ``path``."""
        try:
            with Image.open(path) as img:
                width, height = img.size
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise MeasureError(path, str(exc)) from exc
        return _checked_dims(path, width, height)


class IdentifyMeasurer:
    """Measures images with ImageMagick's ``identify`` tool."""

    FORMAT = "%w %h"

    def measure(self, path: str) -> tuple[int, int]:
        """Return (width, height) of the image at ``path``.

        Raises:
            MeasureError: If ImageMagick is missing, exits with an error, or
                prints anything other than two positive integers.
        """
        command = imagemagick_command("identify")
        if command is None:
            raise MeasureError(path, "ImageMagick identify not found in PATH")

        try:
            result = subprocess.run(
                [*command, "-format", self.FORMAT, path],
                capture_output=True,
                text=True,
            )
        except (OSError, ValueError) as exc:
            raise MeasureError(path, str(exc)) from exc
        if result.returncode != 0:
            raise MeasureError(path, result.stderr.strip() or "identify failed")

        words = result.stdout.split()
        if len(words) != 2 or not all(word.isdigit() for word in words):
            raise MeasureError(path, f"Unknown identify format: {words!r}")
        return _checked_dims(path, int(words[0]), int(words[1]))


class CachingMeasurer:
    """Caches measurements per path for the duration of one build.

    Failures are not cached; they abort the document anyway.

    Attributes:
        inner: The measurer doing the actual work.
    """

    def __init__(self, inner: ImageMeasurer):
        self.inner = inner
        self._cache: dict[str, tuple[int, int]] = {}
        self._lock = threading.Lock()

    def measure(self, path: str) -> tuple[int, int]:
        with self._lock:
            cached = self._cache.get(path)
        if cached is not None:
            return cached
        dims = self.inner.measure(path)
        with self._lock:
            self._cache.setdefault(path, dims)
        return dims


MEASURERS = {
    "pillow": PillowMeasurer,
    "imagemagick": IdentifyMeasurer,
}


def create_measurer(backend: str = "pillow", cache: bool = True) -> ImageMeasurer:
    """Create a measurer for the named backend.

    Args:
        backend: 'pillow' or 'imagemagick'.
        cache: Whether to wrap the measurer in a CachingMeasurer.

    Returns:
        An ImageMeasurer implementation.

    Raises:
        ValueError: If the backend is unknown.
    """
    try:
        measurer: ImageMeasurer = MEASURERS[backend]()
    except KeyError:
        raise ValueError(f"Unknown image backend: {backend}") from None
    return CachingMeasurer(measurer) if cache else measurer
