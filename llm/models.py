"""Common data models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class MessageEntry:
    """Intermediate message representation parsed from YAML."""

    role: str
    content: str
    images: List[str] = field(default_factory=list)


__all__ = ["MessageEntry"]
