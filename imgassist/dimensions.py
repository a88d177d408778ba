"""Dimension specs and aspect-ratio arithmetic for imgassist.

A directive may ask for a width, a height, both, or neither. These cases are
modelled as a small family of frozen dataclasses so every stage that consumes
them has to handle each case explicitly.

Key functions:
    round_half_up: Exact integer division rounded to nearest, ties up.
    compute_dims: Final rendered size for a requested spec and a source size.
    backfill: Replace an unknown request with the native size.
    dims_tag: Filename tag for a spec ("40_30", "w40", "h30").
    geometry: ImageMagick-style geometry string for a spec.
    parse_geometry: Inverse of geometry.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import DimensionError, InvariantError

_GEOMETRY_RE = re.compile(r"^(?P<w>\d*)x(?P<h>\d*)$", re.ASCII)


@dataclass(frozen=True)
class Unknown:
    """No size was requested."""


@dataclass(frozen=True)
class WidthOnly:
    """Only a width was requested."""

    width: int


@dataclass(frozen=True)
class HeightOnly:
    """Only a height was requested."""

    height: int


@dataclass(frozen=True)
class Both:
    """Both width and height were requested."""

    width: int
    height: int


DimensionSpec = Unknown | WidthOnly | HeightOnly | Both

UNKNOWN = Unknown()


def from_fields(width: int | None, height: int | None) -> DimensionSpec:
    """Build a DimensionSpec from optional width and height values."""
    if width is not None and height is not None:
        return Both(width, height)
    if width is not None:
        return WidthOnly(width)
    if height is not None:
        return HeightOnly(height)
    return UNKNOWN


def round_half_up(numerator: int, denominator: int) -> int:
    """Divide two non-negative integers, rounding to nearest with ties going up.

    Integer arithmetic keeps the result exact, so ``16.5`` becomes ``17`` and
    ``2.5`` becomes ``3`` (unlike the built-in ``round``).

    Examples:
        >>> round_half_up(33 * 50, 100)
        17
        >>> round_half_up(5, 2)
        3
    """
    return (2 * numerator + denominator) // (2 * denominator)


def _scale(value: int, target: int, reference: int) -> int:
    # value * target / reference
    return round_half_up(value * target, reference)


def compute_dims(requested: DimensionSpec, source: tuple[int, int]) -> tuple[int, int]:
    """Compute the rendered size of an image, preserving its aspect ratio.

    Args:
        requested: The requested dimensions. Must not be ``Unknown``; callers
            back-fill unknown requests with the native size first.
        source: Native (width, height) of the source image.

    Returns:
        The (width, height) to render at. With ``Both`` requested the result
        never exceeds either requested bound.

    Raises:
        DimensionError: If either source dimension is not positive.
        InvariantError: If ``requested`` is ``Unknown``.
    """
    src_w, src_h = source
    if src_w <= 0 or src_h <= 0:
        raise DimensionError(
            f"Cannot scale an image with source dimensions {src_w}x{src_h}"
        )

    if isinstance(requested, Both):
        return (
            min(requested.width, _scale(src_w, requested.height, src_h)),
            min(requested.height, _scale(src_h, requested.width, src_w)),
        )
    if isinstance(requested, WidthOnly):
        return requested.width, _scale(src_h, requested.width, src_w)
    if isinstance(requested, HeightOnly):
        return _scale(src_w, requested.height, src_h), requested.height
    raise InvariantError(
        "compute_dims: requested dimensions must be back-filled before scaling"
    )


def backfill(requested: DimensionSpec, source: tuple[int, int]) -> DimensionSpec:
    """Return ``Both(source)`` for an unknown request, the request otherwise."""
    if isinstance(requested, Unknown):
        return Both(*source)
    return requested


def dims_tag(spec: DimensionSpec) -> str:
    """Return the filename tag encoding a requested size.

    Raises:
        InvariantError: If ``spec`` is ``Unknown``.
    """
    if isinstance(spec, Both):
        return f"{spec.width}_{spec.height}"
    if isinstance(spec, WidthOnly):
        return f"w{spec.width}"
    if isinstance(spec, HeightOnly):
        return f"h{spec.height}"
    raise InvariantError("Dimensions should be known by this point")


def geometry(spec: DimensionSpec) -> str:
    """Return the ImageMagick geometry string for a requested size.

    Raises:
        InvariantError: If ``spec`` is ``Unknown``.
    """
    if isinstance(spec, Both):
        return f"{spec.width}x{spec.height}"
    if isinstance(spec, WidthOnly):
        return f"{spec.width}x"
    if isinstance(spec, HeightOnly):
        return f"x{spec.height}"
    raise InvariantError("Thumbnail dimensions are fully unknown")


def parse_geometry(text: str) -> DimensionSpec:
    """Parse a geometry string produced by :func:`geometry`.

    Raises:
        ValueError: If the text is not a ``WxH``, ``Wx`` or ``xH`` geometry.
    """
    match = _GEOMETRY_RE.match(text.strip())
    if not match or not (match.group("w") or match.group("h")):
        raise ValueError(f"Invalid geometry: {text!r}")
    width = int(match.group("w")) if match.group("w") else None
    height = int(match.group("h")) if match.group("h") else None
    return from_fields(width, height)
