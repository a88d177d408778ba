"""Directive parsing for imgassist.

This module splits a document body into literal text chunks and image chunks.
Image chunks come from inline directives of the form::

    [img_assist|url=images/pic.jpg|title=A picture|align=left|width=200|link=1]

Key classes:
- Align: Alignment of a rendered image.
- TextChunk: Literal text emitted verbatim.
- ImageChunk: One image directive and its resolution state.

Key functions:
- parse_document: Split a body into an ordered list of chunks.
- parse_directive: Parse the body of a single directive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .dimensions import UNKNOWN, DimensionSpec, from_fields
from .errors import DirectiveError

DIRECTIVE_OPEN = "[img_assist|"
DIRECTIVE_CLOSE = "]"

_POSITIVE_INT_RE = re.compile(r"\d+", re.ASCII)


class Align(Enum):
    """Alignment of an image; the value doubles as the CSS class suffix."""

    LEFT = "left"
    RIGHT = "right"
    INLINE = "inline"


@dataclass(frozen=True)
class TextChunk:
    """A literal span of the document.

    Attributes:
        text: The text, emitted unchanged.
    """

    text: str


@dataclass(frozen=True)
class ImageChunk:
    """An image directive moving through the compile stages.

    Attributes:
        url: Source image path as written in the directive.
        title: Caption and alt text.
        align: Image alignment.
        is_link: Whether the image links to the original file.
        requested: Requested dimensions; back-filled once the source is measured.
        source_dims: Native (width, height), None until measured.
        rendered_dims: Final (width, height), None until computed.
        thumbnail: URL of the materialized thumbnail, None when the original
            image is shown at its native size.
    """

    url: str
    title: str = ""
    align: Align = Align.INLINE
    is_link: bool = False
    requested: DimensionSpec = UNKNOWN
    source_dims: tuple[int, int] | None = None
    rendered_dims: tuple[int, int] | None = None
    thumbnail: str | None = None


Chunk = TextChunk | ImageChunk


def parse_document(text: str) -> list[Chunk]:
    """Split a document body into text and image chunks.

    The result always starts with a TextChunk (possibly empty) and alternates
    image and text chunks after that.

    Args:
        text: The raw document body.

    Returns:
        Ordered list of chunks.

    Raises:
        DirectiveError: If any directive is malformed.
    """
    head, *segments = text.split(DIRECTIVE_OPEN)
    chunks: list[Chunk] = [TextChunk(head)]
    for segment in segments:
        body, sep, rest = segment.partition(DIRECTIVE_CLOSE)
        if not sep:
            raise DirectiveError(
                f"Unterminated image directive: `{DIRECTIVE_OPEN}{body}`", body
            )
        chunks.append(parse_directive(body))
        chunks.append(TextChunk(rest))
    return chunks


def parse_fields(body: str) -> dict[str, str]:
    """Parse ``key=value`` fields separated by ``|``.

    A field without ``=`` maps to an empty value. Empty keys are dropped and
    later duplicates override earlier ones.
    """
    fields: dict[str, str] = {}
    for field in body.split("|"):
        key, _, value = field.partition("=")
        if key:
            fields[key] = value
    return fields


def parse_directive(body: str) -> ImageChunk:
    """Parse the body of an ``[img_assist|...]`` directive.

    Args:
        body: Directive text between the opening delimiter and the closing ``]``.

    Returns:
        An ImageChunk with no source or rendered dimensions yet.

    Raises:
        DirectiveError: If ``url`` is missing, ``align`` is unknown, or
            ``width``/``height`` is not a positive integer.
    """
    fields = parse_fields(body)
    if "url" not in fields:
        raise DirectiveError(
            f"No url in image directive: `{body}`", body, field="url"
        )
    return ImageChunk(
        url=fields["url"],
        title=fields.get("title", ""),
        align=_parse_align(fields.get("align"), body),
        is_link="link" in fields,
        requested=from_fields(
            _parse_size(fields, "width", body),
            _parse_size(fields, "height", body),
        ),
    )


def _parse_align(value: str | None, body: str) -> Align:
    if value is None:
        return Align.INLINE
    try:
        return Align(value)
    except ValueError:
        raise DirectiveError(
            f"Unknown image alignment: {value}", body, field="align"
        ) from None


def _parse_size(fields: dict[str, str], key: str, body: str) -> int | None:
    value = fields.get(key)
    if value is None:
        return None
    stripped = value.strip()
    if not _POSITIVE_INT_RE.fullmatch(stripped) or int(stripped) == 0:
        raise DirectiveError(
            f"Invalid {key} in image directive: {value!r} is not a positive integer",
            body,
            field=key,
        )
    return int(stripped)
