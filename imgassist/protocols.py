"""Protocol definitions for imgassist.

This module defines the interfaces of the two external image services the
compiler depends on. The compiler only talks to these abstractions, so image
backends (Pillow, ImageMagick, test doubles) are interchangeable.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageMeasurer(Protocol):
    """Protocol for reading the native size of an image file."""

    @abstractmethod
    def measure(self, path: str) -> tuple[int, int]:
        """Return the native size of an image.

        Args:
            path: Path to the image file, passed through literally.

        Returns:
            Tuple of (width, height), both positive.

        Raises:
            MeasureError: If the file is unreadable or not a decodable image.
        """
        ...


@runtime_checkable
class ImageResizer(Protocol):
    """Protocol for writing a resized copy of an image file."""

    @abstractmethod
    def resize(self, source: str, geometry: str, dest: str) -> None:
        """Write a resized copy of ``source`` to ``dest``.

        Args:
            source: Path to the source image.
            geometry: Target box as ``WxH``, ``Wx`` or ``xH``. The aspect
                ratio of the source is preserved.
            dest: Path to write. Its extension selects the output format.

        Raises:
            ResizeError: If the source is unreadable or dest cannot be written.
        """
        ...
