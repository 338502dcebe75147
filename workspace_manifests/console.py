"""Terminal output helpers.

Only the pipeline and CLI print; the synthesis core returns warnings as
values instead.
"""

from __future__ import annotations

import sys


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a generate run in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    """Print an indented progress line."""
    print(f"  {msg}")


def warn(msg: str) -> None:
    """Print a warning to stderr without stopping the run."""
    print(f"WARNING: {msg}", file=sys.stderr)
