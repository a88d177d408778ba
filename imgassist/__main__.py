"""Entry point for the imgassist CLI.

This module serves as the main entry point when running the imgassist package
directly with ``python -m imgassist``.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
