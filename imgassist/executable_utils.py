"""Executable discovery utilities for imgassist.

The ImageMagick backends need either the classic standalone tools
(``identify``, ``convert``) or the ImageMagick 7 ``magick`` driver, which
takes the tool name as its first argument.

Functions:
    find_executable: Locate an executable in PATH.
    imagemagick_command: Build the argv prefix for an ImageMagick tool.
"""

from __future__ import annotations

import shutil


def find_executable(name: str) -> str | None:
    """Find an executable in PATH.

    Args:
        name: Name of the executable to find (e.g., 'identify').

    Returns:
        Full path to the executable if found, None otherwise.
    """
    return shutil.which(name)


def imagemagick_command(tool: str) -> list[str] | None:
    """Return the command prefix that runs an ImageMagick tool.

    Prefers the ``magick`` driver, then the standalone tool.

    Args:
        tool: ImageMagick tool name ('identify' or 'convert').

    Returns:
        Argument list prefix, or None if ImageMagick is not installed.

    Examples:
        >>> imagemagick_command('identify')  # ImageMagick 7
        ['/usr/bin/magick', 'identify']

        >>> imagemagick_command('convert')  # ImageMagick 6
        ['/usr/bin/convert']
    """
    magick = find_executable("magick")
    if magick:
        return [magick, tool]
    standalone = find_executable(tool)
    if standalone:
        return [standalone]
    return None
