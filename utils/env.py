from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, TypeVar

from dotenv import load_dotenv

"""Environment helper utilities.

Automatically loads a `.env` file from the project root so that deployment
settings (e.g., ``CRON_SECRET``) defined there become available via
``os.getenv``.  Uses `python-dotenv`, which is listed in `pyproject.toml`
dependencies.
"""

__all__ = ["load_project_dotenv", "get_env"]

T = TypeVar("T")


def _find_project_root(start: Path | None = None) -> Path:
    """Traverse upwards until we find a directory that contains `pyproject.toml`."""
    current = start or Path(__file__).resolve().parent
    for _ in range(10):  # safety break
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return Path(__file__).resolve().parent


def load_project_dotenv() -> None:
    """Load environment variables from the project-level `.env` if present."""
    project_root = _find_project_root()
    dotenv_path = project_root / ".env"
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path, override=False)


def get_env(name: str, cast: Callable[[str], T], default: T | None = None) -> T | None:
    """Read ``name`` from the environment and convert it with ``cast``.

    Empty values count as unset. A value that ``cast`` rejects raises
    ``ValueError`` naming the variable, so a typo in `.env` fails loudly at
    startup instead of silently falling back to the default.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid value for environment variable {name}: {raw!r}") from e
