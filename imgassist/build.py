"""Content building for imgassist.

This module runs the image reference compiler over a whole content
directory. Configuration comes from ``imgassist.yaml`` at the project root.

Key functions:
- build_documents: Compile every content file into the output directory.
- load_config: Load configuration from imgassist.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .compiler import ImageRefsCompiler
from .errors import ImageRefError
from .measurers import create_measurer
from .thumbnails import ThumbnailMaterializer, create_resizer


class BuildError(Exception):
    """Error compiling one content file.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


DEFAULT_CONFIG = {
    "content_dir": "text",
    "output_dir": "output",
    "pattern": "*.md",
    "image_root": ".",
    "backend": "pillow",
    "workers": 4,
}


@dataclass
class BuildResult:
    """Result of a build.

    Attributes:
        documents: Output paths of documents compiled successfully.
        failures: One BuildError per document that failed.
        output_dir: Directory the documents were written to.
        generated: Number of thumbnails generated.
        reused: Number of existing thumbnails reused.
        config: Configuration the build ran with, after CLI overrides.
    """

    documents: list[Path]
    failures: list[BuildError]
    output_dir: Path
    generated: int = 0
    reused: int = 0
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Return True if every document compiled."""
        return not self.failures


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from imgassist.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / "imgassist.yaml"
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


def create_compiler(
    image_root: Path | None,
    backend: str = "pillow",
    workers: int = 1,
) -> ImageRefsCompiler:
    """Create a compiler with the named image backend.

    Raises:
        ValueError: If the backend is unknown.
    """
    materializer = ThumbnailMaterializer(create_resizer(backend), root=image_root)
    return ImageRefsCompiler(
        create_measurer(backend),
        materializer,
        root=image_root,
        workers=workers,
    )


def build_documents(
    project_root: Path,
    backend: str | None = None,
    workers: int | None = None,
) -> BuildResult:
    """Compile every content file of a project.

    A failing document is recorded in the result and does not stop the
    others. The thumbnail cache is shared by all documents of the build.

    Args:
        project_root: Root directory of the project.
        backend: Optional image backend overriding the config.
        workers: Optional worker count overriding the config.

    Returns:
        BuildResult describing written documents and failures.

    Raises:
        FileNotFoundError: If the content directory does not exist.
    """
    config = load_config(project_root)
    if backend is not None:
        config["backend"] = backend
    if workers is not None:
        config["workers"] = workers

    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")
    output_dir = project_root / config["output_dir"]
    output_dir.mkdir(parents=True, exist_ok=True)

    compiler = create_compiler(
        project_root / config["image_root"],
        backend=str(config["backend"]),
        workers=int(config["workers"]),
    )

    documents: list[Path] = []
    failures: list[BuildError] = []
    for path in sorted(content_dir.rglob(config["pattern"])):
        if path.is_dir():
            continue
        try:
            compiled = compiler.compile(path.read_text(encoding="utf-8"))
        except ImageRefError as exc:
            failures.append(BuildError(path, str(exc), exc))
            continue
        except UnicodeDecodeError as exc:
            failures.append(BuildError(path, f"Not valid UTF-8: {exc.reason}", exc))
            continue
        except OSError as exc:
            failures.append(BuildError(path, f"Cannot read file: {exc}", exc))
            continue
        target = output_dir / path.relative_to(content_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(compiled, encoding="utf-8")
        documents.append(target)

    return BuildResult(
        documents=documents,
        failures=failures,
        output_dir=output_dir,
        generated=compiler.materializer.generated,
        reused=compiler.materializer.reused,
        config=config,
    )
