"""Messages API 服务。"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Union

from llm.exceptions import LLMDecodingError
from llm.parser import YAMLRequestParser

from .builder import MessageRequestBuilder
from .client import ClaudeClient
from .models import MessageRequest, MessageResponse

logger = logging.getLogger(__name__)


class MessageService:
    """基于 ClaudeClient 的类型化 /messages 封装。"""

    PATH = "messages"

    def __init__(self, client: ClaudeClient):
        self._client = client
        self._builder = MessageRequestBuilder(client.config)

    def send(self, request: MessageRequest) -> MessageResponse:
        """
        发送一次对话请求。

        Raises:
            LLMEncodingError: 请求体无法序列化
            LLMTransportError: 网络错误或非 200 响应
            LLMDecodingError: 响应结构不符合预期
        """
        start = time.time()
        raw = self._client.execute("POST", self.PATH, request)
        response = self.decode(raw)
        logger.info(
            "完成 id=%s model=%s 耗时=%.2fs input_tokens=%d output_tokens=%d",
            response.id,
            response.model,
            time.time() - start,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return response

    @staticmethod
    def decode(raw: bytes) -> MessageResponse:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise LLMDecodingError(f"响应不是合法 JSON: {e}") from e
        return MessageResponse.from_payload(data)

    def invoke_from_yaml(self, yaml_prompt: str, *, dry_run: bool = False) -> Union[MessageResponse, Dict[str, Any]]:
        """从 YAML 提示构建请求；dry_run 时只返回请求体。"""
        parsed = YAMLRequestParser.parse(yaml_prompt)
        request = self._builder.build(parsed)
        if dry_run:
            return request.to_payload()
        return self.send(request)


__all__ = ["MessageService"]
