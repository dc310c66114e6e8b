"""MessageRequest 构建器。"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from llm.exceptions import LLMConfigError, LLMValidationError
from llm.models import MessageEntry

from .config import ClaudeAPIConfig
from .models import ContentBlock, ImageSource, Message, MessageRequest

logger = logging.getLogger(__name__)


class MessageRequestBuilder:
    """把解析后的 YAML 结构转换为 MessageRequest。"""

    def __init__(self, config: ClaudeAPIConfig):
        self._config = config

    def build(self, parsed: Dict[str, Any]) -> MessageRequest:
        gen = dict(parsed.get("generation", {}))

        model = gen.pop("model", None)
        if model is None:
            model = self._config.default_model
        if model is None:
            raise LLMConfigError("未提供模型")
        if not isinstance(model, str) or not model.strip():
            raise LLMValidationError("model 必须为非空字符串")
        max_tokens = gen.pop("max_tokens", None)
        if max_tokens is None:
            max_tokens = self._config.default_max_tokens
        if max_tokens is None:
            raise LLMConfigError("未提供 max_tokens")
        if not isinstance(max_tokens, int) or isinstance(max_tokens, bool) or max_tokens <= 0:
            raise LLMValidationError("max_tokens 必须为正整数")

        entries: List[MessageEntry] = parsed["messages"]
        system = self._join_system(entries)
        messages = [self._build_message(e) for e in entries if e.role != "system"]

        return MessageRequest(model=model, messages=messages, max_tokens=max_tokens, system=system, **gen)

    @staticmethod
    def _join_system(entries: List[MessageEntry]) -> Optional[str]:
        parts = [e.content for e in entries if e.role == "system" and e.content]
        return "\n\n".join(parts) if parts else None

    def _build_message(self, entry: MessageEntry) -> Message:
        if not entry.images:
            return Message(role=entry.role, content=entry.content)

        # 图片在前，文本在后
        blocks = [ContentBlock.from_image(self._load_image(path)) for path in entry.images]
        if entry.content:
            blocks.append(ContentBlock.from_text(entry.content))
        return Message(role=entry.role, content=blocks)

    @staticmethod
    def _load_image(path: str) -> ImageSource:
        source = ImageSource.from_file(path)
        logger.info("本地图片已编码为 base64: %s (%d 字符)", path, len(source.data))
        return source


__all__ = ["MessageRequestBuilder"]
