"""Utility functions for imgassist.

Functions:
    resolve_path: Map a directive URL onto the filesystem.
"""

from __future__ import annotations

from pathlib import Path


def resolve_path(url: str, root: Path | None) -> str:
    """Return the filesystem path for a URL written in a directive.

    Without a root the URL is used literally, relative to the working
    directory. With a root, the URL is joined onto it; a leading slash is
    treated as root-relative rather than absolute.

    Args:
        url: Image URL from a directive or a derived thumbnail URL.
        root: Optional directory URLs are relative to.

    Returns:
        Path string suitable for the image backends.

    Examples:
        >>> resolve_path("images/pic.jpg", None)
        'images/pic.jpg'

        >>> resolve_path("/images/pic.jpg", Path("site"))
        'site/images/pic.jpg'
    """
    if root is None:
        return url
    return str(root / url.lstrip("/"))
