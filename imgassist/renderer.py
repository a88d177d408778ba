"""Markup rendering for imgassist.

This module turns resolved chunks back into document text. Text chunks pass
through untouched; image chunks are rendered with a small autoescaped Jinja2
template.

Key functions:
- render_chunk: Render one chunk.
- render_document: Render and concatenate a list of chunks.
"""

from __future__ import annotations

from collections.abc import Iterable

from jinja2 import Environment

from .directives import Chunk, ImageChunk, TextChunk
from .errors import InvariantError

IMAGE_TEMPLATE = """
<div class="img-wrap img-wrap-{{ align }}">
    {% if href %}<a href="{{ href }}">{% endif %}
    <img src="{{ src }}" width="{{ width }}" height="{{ height }}" alt="{{ title }}" title="{{ title }}" /><br/>
    <strong>{{ title }}</strong>
    {% if href %}</a>{% endif %}
</div>
"""

_env = Environment(autoescape=True, keep_trailing_newline=True)
_image_template = _env.from_string(IMAGE_TEMPLATE)


def render_image(chunk: ImageChunk) -> str:
    """Render an image chunk as an HTML fragment.

    Linked images show the thumbnail (when one was generated) and link to the
    original; other images show the original URL. Either way the width and
    height attributes carry the rendered dimensions.

    Raises:
        InvariantError: If the chunk has no rendered dimensions.
    """
    if chunk.rendered_dims is None:
        raise InvariantError(
            f"Image '{chunk.url}' reached the renderer without rendered dimensions"
        )
    width, height = chunk.rendered_dims
    if chunk.is_link:
        src, href = chunk.thumbnail or chunk.url, chunk.url
    else:
        src, href = chunk.url, None
    return _image_template.render(
        align=chunk.align.value,
        src=src,
        href=href,
        width=width,
        height=height,
        title=chunk.title,
    )


def render_chunk(chunk: Chunk) -> str:
    """Render a single chunk."""
    if isinstance(chunk, TextChunk):
        return chunk.text
    return render_image(chunk)


def render_document(chunks: Iterable[Chunk]) -> str:
    """Render chunks in order and join them into one body."""
    return "".join(render_chunk(chunk) for chunk in chunks)
