"""Command-line interface for imgassist.

This module defines the CLI commands using the Click framework.

Commands:
- compile: Compile the image directives of a single file.
- build: Compile every content file of the project in the current directory.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__

_BACKENDS = click.Choice(["pillow", "imagemagick"])


@click.group()
@click.version_option(version=__version__, prog_name="imgassist")
def cli():
    """Inline image reference compiler."""


@cli.command(name="compile")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the result to this file instead of stdout",
)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory that image URLs are relative to (default: working directory)",
)
@click.option("--backend", type=_BACKENDS, default="pillow", show_default=True)
@click.option("--workers", type=int, default=1, show_default=True)
def compile_command(
    source: Path,
    output: Path | None,
    root: Path | None,
    backend: str,
    workers: int,
):
    """Compile the image directives in SOURCE."""
    from .build import create_compiler
    from .errors import ImageRefError

    compiler = create_compiler(root, backend=backend, workers=workers)
    try:
        compiled = compiler.compile(source.read_text(encoding="utf-8"))
    except ImageRefError as exc:
        raise click.ClickException(f"{source}: {exc}") from None

    if output is None:
        click.echo(compiled, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(compiled, encoding="utf-8")
    click.echo(f"Wrote {output}", err=True)


@cli.command()
@click.option(
    "--backend",
    type=_BACKENDS,
    required=False,
    help="Image backend (overrides imgassist.yaml)",
)
@click.option(
    "--workers",
    type=int,
    required=False,
    help="Images resolved in parallel per document (overrides imgassist.yaml)",
)
def build(backend: str | None, workers: int | None):
    """Compile every content file into the output directory."""
    project_root = Path.cwd()
    from .build import build_documents

    try:
        result = build_documents(project_root, backend=backend, workers=workers)
    except (FileNotFoundError, ValueError) as exc:
        raise click.ClickException(str(exc)) from None

    for failure in result.failures:
        rel_path = failure.source_path.relative_to(project_root)
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {failure.message}", fg="white"), err=True)

    click.echo(
        f"Built {len(result.documents)} documents into {result.output_dir} "
        f"({result.generated} thumbnails generated, {result.reused} reused)"
    )
    if not result.ok:
        raise SystemExit(1)


def main():
    """Entry point for the CLI application."""
    cli()
