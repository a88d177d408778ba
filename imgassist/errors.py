"""Error types for imgassist.

Input errors (a malformed directive, an unreadable image, a failed resize)
derive from ImageRefError and abort the document being compiled.
InvariantError signals an internal defect, such as a pipeline stage running
out of order, and is kept outside that hierarchy so callers can tell the two
apart.
"""

from __future__ import annotations


class ImageRefError(Exception):
    """Base class for errors caused by document or image input."""


class DirectiveError(ImageRefError):
    """Error raised when an ``[img_assist|...]`` directive is malformed.

    Attributes:
        directive: The raw directive body that failed to parse.
        field: The offending field name, if the error concerns one field.
    """

    def __init__(self, message: str, directive: str, field: str | None = None):
        self.directive = directive
        self.field = field
        super().__init__(message)


class MeasureError(ImageRefError):
    """Error raised when the native size of an image cannot be read.

    Attributes:
        path: The image path that was measured.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot measure image '{path}': {reason}")


class ResizeError(ImageRefError):
    """Error raised when a thumbnail cannot be generated.

    Attributes:
        source: Source image path.
        dest: Thumbnail path that was being written.
    """

    def __init__(self, source: str, dest: str, reason: str):
        self.source = source
        self.dest = dest
        self.reason = reason
        super().__init__(f"Cannot resize '{source}' to '{dest}': {reason}")


class DimensionError(ImageRefError):
    """Error raised when dimensions cannot be scaled (e.g. a zero-sized source)."""


class InvariantError(RuntimeError):
    """Internal defect: a pipeline stage received data it should never see."""
