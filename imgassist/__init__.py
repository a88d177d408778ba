"""imgassist inline image-reference compiler.

This package compiles ``[img_assist|...]`` directives embedded in text documents
into HTML image markup. Each directive is parsed, measured against the real
source image, scaled with aspect-ratio-preserving arithmetic, optionally backed
by a cached thumbnail on disk, and rendered back into the document body.

The main entry points are ``ImageRefsCompiler`` for compiling one body and the
CLI module, which provides commands for compiling single files and building
whole content directories.

Architecture:
- directives: Parses a body into text and image chunks.
- dimensions: Dimension specs and the aspect-ratio calculator.
- measurers: Reads native image sizes (Pillow or ImageMagick).
- thumbnails: Derives thumbnail names and materializes resized copies.
- renderer: Turns resolved chunks back into markup.
- compiler: Wires the stages together for one document.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
