"""Messages API data models."""
from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from llm.exceptions import LLMDecodingError, LLMValidationError

ROLES = ("user", "assistant")


def _require(data: Dict[str, Any], key: str, kind, where: str) -> Any:
    if key not in data:
        raise LLMDecodingError(f"{where} 缺少必填字段: {key}")
    value = data[key]
    # bool 是 int 的子类
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise LLMDecodingError(f"{where}.{key} 类型错误: {type(value).__name__}")
    return value


def _optional(data: Dict[str, Any], key: str, kind, where: str) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, kind):
        raise LLMDecodingError(f"{where}.{key} 类型错误: {type(value).__name__}")
    return value


@dataclass(slots=True)
class ImageSource:
    """Inline image payload."""

    media_type: str
    data: str
    type: str = "base64"

    @classmethod
    def from_file(cls, path: str | Path) -> "ImageSource":
        """Read a local image and encode it as base64."""
        image_path = Path(path)
        if not image_path.is_file():
            raise LLMValidationError(f"图片文件不存在: {path}")
        mime_type, _ = mimetypes.guess_type(str(image_path))
        if not mime_type or not mime_type.startswith("image/"):
            mime_type = "image/jpeg"
        encoded = base64.b64encode(image_path.read_bytes()).decode("utf-8")
        return cls(media_type=mime_type, data=encoded)

    def to_payload(self) -> Dict[str, Any]:
        return {"type": self.type, "media_type": self.media_type, "data": self.data}

    @classmethod
    def from_payload(cls, data: Any) -> "ImageSource":
        if not isinstance(data, dict):
            raise LLMDecodingError("source 必须为对象")
        return cls(
            type=_require(data, "type", str, "source"),
            media_type=_require(data, "media_type", str, "source"),
            data=_require(data, "data", str, "source"),
        )


@dataclass(slots=True)
class ContentBlock:
    """One typed unit of message content."""

    type: str
    text: Optional[str] = None
    source: Optional[ImageSource] = None

    def __post_init__(self) -> None:
        if self.text is not None and self.source is not None:
            raise LLMValidationError(f"{self.type} 块不能同时包含 text 和 source")
        if self.type == "text" and self.text is None:
            raise LLMValidationError("text 块缺少 text")
        if self.type == "image" and self.source is None:
            raise LLMValidationError("image 块缺少 source")

    @classmethod
    def from_text(cls, text: str) -> "ContentBlock":
        return cls(type="text", text=text)

    @classmethod
    def from_image(cls, source: ImageSource) -> "ContentBlock":
        return cls(type="image", source=source)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        if self.text is not None:
            payload["text"] = self.text
        if self.source is not None:
            payload["source"] = self.source.to_payload()
        return payload

    @classmethod
    def from_payload(cls, data: Any) -> "ContentBlock":
        if not isinstance(data, dict):
            raise LLMDecodingError("content 项必须为对象")
        source = data.get("source")
        try:
            return cls(
                type=_require(data, "type", str, "content"),
                text=_optional(data, "text", str, "content"),
                source=ImageSource.from_payload(source) if source is not None else None,
            )
        except LLMValidationError as e:
            raise LLMDecodingError(str(e)) from e


@dataclass(slots=True)
class Message:
    """One role-tagged conversation turn."""

    role: str
    content: Union[str, List[ContentBlock]]

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise LLMValidationError(f"不支持的消息角色: {self.role}")

    def to_payload(self) -> Dict[str, Any]:
        if isinstance(self.content, str):
            return {"role": self.role, "content": self.content}
        return {"role": self.role, "content": [block.to_payload() for block in self.content]}

    @classmethod
    def from_payload(cls, data: Any) -> "Message":
        if not isinstance(data, dict):
            raise LLMDecodingError("message 必须为对象")
        role = _require(data, "role", str, "message")
        content = _require(data, "content", (str, list), "message")
        if isinstance(content, list):
            content = [ContentBlock.from_payload(block) for block in content]
        try:
            return cls(role=role, content=content)
        except LLMValidationError as e:
            raise LLMDecodingError(str(e)) from e


@dataclass(slots=True)
class MessageRequest:
    """Request body for ``POST /v1/messages``."""

    model: str
    messages: List[Message]
    max_tokens: int
    temperature: Optional[float] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None
    stop_sequences: Optional[List[str]] = None
    stream: Optional[bool] = None
    system: Optional[str] = None
    tool_choice: Any = None
    metadata: Any = None

    OPTIONAL_FIELDS = (
        "temperature",
        "top_k",
        "top_p",
        "stop_sequences",
        "stream",
        "system",
        "tool_choice",
        "metadata",
    )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_payload() for m in self.messages],
            "max_tokens": self.max_tokens,
        }
        for name in self.OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        return payload

    @classmethod
    def from_payload(cls, data: Any) -> "MessageRequest":
        if not isinstance(data, dict):
            raise LLMDecodingError("请求必须为 JSON 对象")
        where = "request"
        return cls(
            model=_require(data, "model", str, where),
            messages=[Message.from_payload(m) for m in _require(data, "messages", list, where)],
            max_tokens=_require(data, "max_tokens", int, where),
            **{name: data[name] for name in cls.OPTIONAL_FIELDS if name in data},
        )


@dataclass(slots=True)
class Usage:
    """Token accounting returned with each response."""

    input_tokens: int
    output_tokens: int

    def to_payload(self) -> Dict[str, Any]:
        return {"input_tokens": self.input_tokens, "output_tokens": self.output_tokens}

    @classmethod
    def from_payload(cls, data: Any) -> "Usage":
        if not isinstance(data, dict):
            raise LLMDecodingError("usage 必须为对象")
        return cls(
            input_tokens=_require(data, "input_tokens", int, "usage"),
            output_tokens=_require(data, "output_tokens", int, "usage"),
        )


@dataclass(slots=True)
class MessageResponse:
    """Decoded reply from ``POST /v1/messages``."""

    id: str
    type: str
    role: str
    content: List[ContentBlock]
    model: str
    stop_reason: Optional[str]
    usage: Usage
    stop_sequence: Optional[str] = None

    def text(self) -> str:
        return extract_text(self.content)

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "id": self.id,
            "type": self.type,
            "role": self.role,
            "content": [block.to_payload() for block in self.content],
            "model": self.model,
            "stop_reason": self.stop_reason,
            "usage": self.usage.to_payload(),
        }
        if self.stop_sequence is not None:
            payload["stop_sequence"] = self.stop_sequence
        return payload

    @classmethod
    def from_payload(cls, data: Any) -> "MessageResponse":
        """Strictly decode a response dict; raise instead of filling gaps."""
        if not isinstance(data, dict):
            raise LLMDecodingError("响应必须为 JSON 对象")
        where = "response"
        content = _require(data, "content", list, where)
        if "stop_reason" not in data:
            raise LLMDecodingError(f"{where} 缺少必填字段: stop_reason")
        return cls(
            id=_require(data, "id", str, where),
            type=_require(data, "type", str, where),
            role=_require(data, "role", str, where),
            content=[ContentBlock.from_payload(block) for block in content],
            model=_require(data, "model", str, where),
            stop_reason=_optional(data, "stop_reason", str, where),
            usage=Usage.from_payload(_require(data, "usage", dict, where)),
            stop_sequence=_optional(data, "stop_sequence", str, where),
        )


def extract_text(blocks: Iterable[ContentBlock]) -> str:
    """Join the text of every text block, in order, with single spaces."""
    return " ".join(block.text or "" for block in blocks if block.type == "text")


__all__ = [
    "ImageSource",
    "ContentBlock",
    "Message",
    "MessageRequest",
    "Usage",
    "MessageResponse",
    "extract_text",
]
