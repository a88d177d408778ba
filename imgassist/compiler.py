"""Image reference compiler for imgassist.

This module wires the stages together: each document body is parsed into
chunks, every image chunk is measured, sized and (when needed) backed by a
thumbnail, and the chunks are rendered back into one body.

Key class:
- ImageRefsCompiler: Compiles ``[img_assist|...]`` directives in a body.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from .dimensions import backfill, compute_dims
from .directives import Chunk, ImageChunk, TextChunk, parse_document
from .protocols import ImageMeasurer
from .renderer import render_document
from .thumbnails import ThumbnailMaterializer
from .utils import resolve_path


class ImageRefsCompiler:
    """Compiles image directives in document bodies.

    A compile is all-or-nothing: the first error raised by any stage
    propagates and no output is produced for the document.

    Attributes:
        measurer: Service reporting native image sizes.
        materializer: Service producing thumbnails.
        root: Optional directory that directive URLs are relative to.
        workers: Number of image chunks resolved concurrently.
    """

    def __init__(
        self,
        measurer: ImageMeasurer,
        materializer: ThumbnailMaterializer,
        root: Path | None = None,
        workers: int = 1,
    ):
        """Initialize the compiler.

        Args:
            measurer: Image measurer used for every directive.
            materializer: Thumbnail materializer, shared across documents.
            root: Optional directory that directive URLs are relative to.
            workers: Maximum number of image chunks resolved in parallel.
        """
        self.measurer = measurer
        self.materializer = materializer
        self.root = root
        self.workers = max(1, workers)

    def compile(self, body: str) -> str:
        """Replace every image directive in ``body`` with markup.

        Args:
            body: Raw document body.

        Returns:
            The transformed body. Text outside directives is unchanged.

        Raises:
            ImageRefError: If a directive is malformed or an image cannot be
                measured or resized.
        """
        chunks = parse_document(body)
        return render_document(self.resolve_all(chunks))

    def resolve_all(self, chunks: list[Chunk]) -> list[Chunk]:
        """Resolve every chunk, returning them in input order."""
        if self.workers == 1 or sum(isinstance(c, ImageChunk) for c in chunks) < 2:
            return [self.resolve(chunk) for chunk in chunks]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(self.resolve, chunks))

    def resolve(self, chunk: Chunk) -> Chunk:
        """Measure, size and materialize a single chunk."""
        if isinstance(chunk, TextChunk):
            return chunk
        measured = self.measure(chunk)
        sized = replace(
            measured,
            rendered_dims=compute_dims(measured.requested, measured.source_dims),
        )
        if sized.rendered_dims == sized.source_dims:
            return sized
        return replace(
            sized,
            thumbnail=self.materializer.materialize(sized.url, sized.requested),
        )

    def measure(self, chunk: ImageChunk) -> ImageChunk:
        """Attach the native size, back-filling an unknown requested size."""
        source = tuple(self.measurer.measure(resolve_path(chunk.url, self.root)))
        return replace(
            chunk,
            source_dims=source,
            requested=backfill(chunk.requested, source),
        )
