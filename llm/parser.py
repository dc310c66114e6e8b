"""YAML request parser."""
from __future__ import annotations

from typing import Any, Dict, List

from .exceptions import LLMValidationError
from .models import MessageEntry

try:
    import yaml
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError("需要 PyYAML: pip install pyyaml") from exc


class YAMLRequestParser:
    """Parser converting YAML prompts into internal message entries."""

    REQUIRED = ("user",)
    MESSAGE_ROLES = {"system", "user", "assistant"}
    GENERATION_KEYS = {
        "model",
        "max_tokens",
        "temperature",
        "top_k",
        "top_p",
        "stop_sequences",
        "stream",
        "metadata",
        "tool_choice",
    }

    @staticmethod
    def parse(raw: str) -> Dict[str, Any]:
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise LLMValidationError(f"YAML 解析失败: {exc}") from exc

        if not isinstance(data, dict) or "messages" not in data:
            raise LLMValidationError("YAML 顶层必须包含 'messages'")

        result: Dict[str, Any] = {"messages": YAMLRequestParser._normalize_messages(data["messages"])}

        generation = data.get("generation")
        if generation is not None:
            result["generation"] = YAMLRequestParser._parse_generation(generation)
        return result

    @staticmethod
    def _parse_generation(raw: Any) -> Dict[str, Any]:
        if not isinstance(raw, dict):
            raise LLMValidationError("generation 必须为字典")
        unknown = set(raw) - YAMLRequestParser.GENERATION_KEYS
        if unknown:
            raise LLMValidationError(f"generation 不支持的字段: {', '.join(sorted(unknown))}")
        stops = raw.get("stop_sequences")
        if stops is not None and (not isinstance(stops, list) or not all(isinstance(s, str) for s in stops)):
            raise LLMValidationError("stop_sequences 必须为字符串列表")
        return dict(raw)

    @staticmethod
    def _normalize_messages(raw_msgs: Any) -> List[MessageEntry]:
        if not isinstance(raw_msgs, list):
            raise LLMValidationError("messages 必须是列表")

        entries = [YAMLRequestParser._extract_role_content(item) for item in raw_msgs]
        if not any(entry.role == "user" for entry in entries):
            raise LLMValidationError(f"缺少必填字段: {', '.join(YAMLRequestParser.REQUIRED)}")
        return entries

    @staticmethod
    def _extract_role_content(item: Any) -> MessageEntry:
        if not isinstance(item, dict):
            raise LLMValidationError("messages 列表项必须为对象")

        if "images" in item:
            images = item["images"]
            if not isinstance(images, list) or not all(isinstance(x, str) for x in images):
                raise LLMValidationError("images 列表必须全是字符串路径")
            content = item.get("user", "")
            if not isinstance(content, str):
                raise LLMValidationError("user 内容必须为字符串")
            if set(item) - {"user", "images"}:
                raise LLMValidationError("images 只能用于 user 消息")
            return MessageEntry(role="user", content=content.strip(), images=list(images))

        if "role" in item and "content" in item:
            role = YAMLRequestParser._normalize_role(item["role"])
            content = item["content"]
        elif len(item) == 1:
            raw_role, content = next(iter(item.items()))
            role = YAMLRequestParser._normalize_role(raw_role)
        else:
            raise LLMValidationError("messages 列表项需包含 role/content、单键角色或 images")

        if not isinstance(content, str):
            raise LLMValidationError("消息内容必须为字符串")
        stripped = content.strip()
        if role in ("user", "assistant") and not stripped:
            raise LLMValidationError(f"{role} 必须为非空字符串")
        return MessageEntry(role=role, content=stripped)

    @staticmethod
    def _normalize_role(raw_role: Any) -> str:
        token = str(raw_role).strip()
        if "." in token:
            prefix, suffix = token.split(".", 1)
            if prefix.strip().isdigit():
                token = suffix.strip()
        role = token.lower()
        if role not in YAMLRequestParser.MESSAGE_ROLES:
            raise LLMValidationError("messages 仅支持 system/user/assistant 角色")
        return role


__all__ = ["YAMLRequestParser"]
