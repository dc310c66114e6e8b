"""Shared configuration helpers."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


def load_env_file(path: str | os.PathLike[str] = ".env") -> None:
    """Load a .env file into the environment if it exists."""
    env_path = Path(path)
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


__all__ = ["load_env_file"]
