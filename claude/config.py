"""Claude configuration objects."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from llm.exceptions import LLMConfigError

DEFAULT_BASE_URL = "https://api.anthropic.com/v1/"
DEFAULT_API_VERSION = "2023-06-01"


@dataclass(slots=True)
class ClaudeAPIConfig:
    """Runtime configuration for the Anthropic Messages API."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    default_model: Optional[str] = None
    default_max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise LLMConfigError("API key 不能为空")

    def __repr__(self) -> str:
        return (
            f"ClaudeAPIConfig(api_key='***', base_url={self.base_url!r}, api_version={self.api_version!r}, "
            f"default_model={self.default_model!r}, default_max_tokens={self.default_max_tokens!r}, "
            f"request_timeout={self.request_timeout!r})"
        )

    @classmethod
    def from_env(cls) -> "ClaudeAPIConfig":
        def require(key: str) -> str:
            value = os.environ.get(key)
            if not value or not value.strip():
                raise LLMConfigError(f"缺少环境变量: {key}")
            return value.strip()

        def optional(key: str) -> Optional[str]:
            value = os.environ.get(key)
            if value is None or not value.strip():
                return None
            return value.strip()

        def number(key: str, kind):
            raw = optional(key)
            if raw is None:
                return None
            try:
                return kind(raw)
            except ValueError as exc:
                raise LLMConfigError(f"环境变量 {key} 不是合法数字: {raw}") from exc

        return cls(
            api_key=require("ANTHROPIC_API_KEY"),
            base_url=optional("ANTHROPIC_BASE_URL") or DEFAULT_BASE_URL,
            default_model=optional("ANTHROPIC_MODEL"),
            default_max_tokens=number("ANTHROPIC_MAX_TOKENS", int),
            request_timeout=number("ANTHROPIC_TIMEOUT", float),
        )


__all__ = ["ClaudeAPIConfig", "DEFAULT_BASE_URL", "DEFAULT_API_VERSION"]
