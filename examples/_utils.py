"""Shared helpers for the runnable examples."""

from __future__ import annotations

from pathlib import Path

EXAMPLES_DIR = Path(__file__).resolve().parent


def definitions(name: str) -> tuple[Path, Path]:
    """Return the step and hook definition files of example *name*."""
    root = EXAMPLES_DIR / name
    return root / "steps.py", root / "hooks.py"
