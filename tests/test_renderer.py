import pytest

from imgassist.dimensions import WidthOnly
from imgassist.directives import Align, ImageChunk, TextChunk
from imgassist.errors import InvariantError
from imgassist.renderer import render_chunk, render_document, render_image


def make_chunk(**overrides):
    fields = {
        "url": "pic.jpg",
        "title": "A picture",
        "align": Align.LEFT,
        "requested": WidthOnly(50),
        "source_dims": (100, 40),
        "rendered_dims": (50, 20),
        "thumbnail": "pic.hakyllthumb_w50.jpg",
    }
    fields.update(overrides)
    return ImageChunk(**fields)


def test_unlinked_image_uses_original_url():
    html = render_image(make_chunk())
    assert '<div class="img-wrap img-wrap-left">' in html
    assert '<img src="pic.jpg" width="50" height="20" alt="A picture" title="A picture" /><br/>' in html
    assert "<strong>A picture</strong>" in html
    assert "<a " not in html
    assert html.startswith("\n")
    assert html.endswith("</div>\n")


def test_linked_image_uses_thumbnail_and_links_original():
    html = render_image(make_chunk(is_link=True, align=Align.RIGHT))
    assert '<div class="img-wrap img-wrap-right">' in html
    assert '<a href="pic.jpg">' in html
    assert 'src="pic.hakyllthumb_w50.jpg"' in html
    assert "</a>" in html


def test_linked_image_without_thumbnail_uses_original():
    html = render_image(make_chunk(is_link=True, thumbnail=None, align=Align.INLINE))
    assert 'img-wrap-inline' in html
    assert 'src="pic.jpg"' in html
    assert '<a href="pic.jpg">' in html


def test_title_is_escaped():
    html = render_image(make_chunk(title='Tom & "Jerry"'))
    assert "Tom &amp; &#34;Jerry&#34;" in html


def test_missing_rendered_dims_is_an_invariant_violation():
    with pytest.raises(InvariantError):
        render_image(make_chunk(rendered_dims=None))


def test_render_document_preserves_order():
    chunks = [TextChunk("A "), make_chunk(), TextChunk("B")]
    out = render_document(chunks)
    assert out.startswith("A \n<div")
    assert out.endswith("</div>\nB")
    assert render_chunk(TextChunk("x")) == "x"
