"""Thumbnail generation for imgassist.

Thumbnails live next to their source image under a name derived from the
source path and the requested size, so the thumbnail directory doubles as a
cache shared by every document in a build.

Key classes:
- PillowResizer: Resizes images with Pillow.
- ConvertResizer: Resizes images with ImageMagick ``convert``.
- ThumbnailMaterializer: Derives thumbnail names and generates missing files.

Key functions:
- thumbnail_filename: Derive the thumbnail URL for a source URL.
"""

from __future__ import annotations

import os
import posixpath
import subprocess
import threading
import uuid
from pathlib import Path

from PIL import Image

from .dimensions import DimensionSpec, compute_dims, dims_tag, geometry, parse_geometry
from .errors import DimensionError, ResizeError
from .executable_utils import imagemagick_command
from .protocols import ImageResizer
from .utils import resolve_path

THUMB_MARKER = "hakyllthumb_"

_JPEG_EXTENSIONS = {".jpg", ".jpeg"}


def thumbnail_filename(url: str, requested: DimensionSpec) -> str:
    """Derive the thumbnail URL for a source image and a requested size.

    The marker and size tag are inserted between the file stem and its
    extension; the tag encodes the requested size, not the computed one.

    Args:
        url: Source image URL.
        requested: Requested dimensions (never ``Unknown``).

    Returns:
        The thumbnail URL.

    Raises:
        InvariantError: If ``requested`` is ``Unknown``.

    Examples:
        >>> thumbnail_filename("pic.jpg", WidthOnly(50))
        'pic.hakyllthumb_w50.jpg'

        >>> thumbnail_filename("images/pic.png", Both(40, 30))
        'images/pic.hakyllthumb_40_30.png'
    """
    stem, ext = posixpath.splitext(url)
    dot = "." if ext else ""
    return f"{stem}{dot}{THUMB_MARKER}{dims_tag(requested)}{ext}"


class PillowResizer:
    """Resizes images with Pillow, fitting them inside the geometry box."""

    def resize(self, source: str, geometry: str, dest: str) -> None:
        """Write a resized copy of ``source`` to ``dest``."""
        try:
            box = parse_geometry(geometry)
            with Image.open(source) as img:
                size = compute_dims(box, img.size)
                resized = img.resize(size, Image.Resampling.LANCZOS)
            if (
                os.path.splitext(dest)[1].lower() in _JPEG_EXTENSIONS
                and resized.mode not in ("RGB", "L")
            ):
                resized = resized.convert("RGB")
            resized.save(dest)
        except (OSError, ValueError, DimensionError, Image.DecompressionBombError) as exc:
            raise ResizeError(source, dest, str(exc)) from exc


class ConvertResizer:
    """Resizes images with ImageMagick's ``convert`` tool."""

    def resize(self, source: str, geometry: str, dest: str) -> None:
        """Write a resized copy of ``source`` to ``dest``."""
        command = imagemagick_command("convert")
        if command is None:
            raise ResizeError(source, dest, "ImageMagick convert not found in PATH")

        try:
            result = subprocess.run(
                [*command, source, "-geometry", geometry, dest],
                capture_output=True,
                text=True,
            )
        except (OSError, ValueError) as exc:
            raise ResizeError(source, dest, str(exc)) from exc
        if result.returncode != 0:
            raise ResizeError(source, dest, result.stderr.strip() or "convert failed")


RESIZERS = {
    "pillow": PillowResizer,
    "imagemagick": ConvertResizer,
}


def create_resizer(backend: str = "pillow") -> ImageResizer:
    """Create a resizer for the named backend.

    Raises:
        ValueError: If the backend is unknown.
    """
    try:
        return RESIZERS[backend]()
    except KeyError:
        raise ValueError(f"Unknown image backend: {backend}") from None


class ThumbnailMaterializer:
    """Generates thumbnails on demand, reusing files that already exist.

    New thumbnails are written to a temporary sibling and moved into place
    with ``os.replace``, so a reader never sees a partially written file and
    concurrent writers of the same thumbnail converge on one complete copy.

    Attributes:
        resizer: Backend used to write resized images.
        root: Optional directory that URLs are relative to.
        generated: Number of thumbnails written.
        reused: Number of thumbnails found on disk.
    """

    def __init__(self, resizer: ImageResizer, root: Path | None = None):
        self.resizer = resizer
        self.root = root
        self.generated = 0
        self.reused = 0
        self._lock = threading.Lock()

    def materialize(self, url: str, requested: DimensionSpec) -> str:
        """Ensure the thumbnail for ``url`` at ``requested`` size exists.

        Args:
            url: Source image URL as written in the directive.
            requested: Requested dimensions (never ``Unknown``).

        Returns:
            The thumbnail URL.

        Raises:
            ResizeError: If the thumbnail could not be written.
            InvariantError: If ``requested`` is ``Unknown``.
        """
        thumb_url = thumbnail_filename(url, requested)
        dest = resolve_path(thumb_url, self.root)
        if os.path.exists(dest):
            with self._lock:
                self.reused += 1
            return thumb_url

        self._write(resolve_path(url, self.root), geometry(requested), dest)
        with self._lock:
            self.generated += 1
        return thumb_url

    def _write(self, source: str, geom: str, dest: str) -> None:
        base, ext = os.path.splitext(dest)
        tmp = f"{base}.{uuid.uuid4().hex}.tmp{ext}"
        try:
            self.resizer.resize(source, geom, tmp)
            os.replace(tmp, dest)
        except ResizeError as exc:
            raise ResizeError(source, dest, exc.reason) from exc
        except OSError as exc:
            raise ResizeError(source, dest, str(exc)) from exc
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
