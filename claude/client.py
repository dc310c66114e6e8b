"""Claude HTTP 传输客户端。"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

import requests

from llm.exceptions import (
    LLMConfigError,
    LLMDecodingError,
    LLMEncodingError,
    LLMHTTPError,
    LLMTransportError,
    LLMValidationError,
)

from .config import ClaudeAPIConfig
from .observer import RequestObserver, redact_headers

logger = logging.getLogger(__name__)


class ClaudeClient:
    """Anthropic API 传输客户端，每次调用只发送一次请求。"""
    # 异常类作为类属性，方便外部通过 ClaudeClient.ConfigError 访问
    ConfigError = LLMConfigError
    ValidationError = LLMValidationError
    EncodingError = LLMEncodingError
    TransportError = LLMTransportError
    HTTPError = LLMHTTPError
    DecodingError = LLMDecodingError

    def __init__(
        self,
        config: Union[ClaudeAPIConfig, str, None],
        *,
        observer: Optional[RequestObserver] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        初始化客户端。

        Args:
            config: 运行配置，或直接传入 API key
            observer: 可选的请求观察者（默认不记录请求内容）
            session: 可选的 requests.Session（测试时注入）

        Raises:
            LLMConfigError: API key 为空或缺失
        """
        if config is None:
            raise LLMConfigError("缺少 API key")
        if isinstance(config, str):
            config = ClaudeAPIConfig(api_key=config)
        self._config = config
        self._observer = observer
        self._session = session or requests.Session()

    @classmethod
    def from_env(cls, *, observer: Optional[RequestObserver] = None) -> "ClaudeClient":
        """从环境变量创建客户端。"""
        return cls(ClaudeAPIConfig.from_env(), observer=observer)

    @property
    def config(self) -> ClaudeAPIConfig:
        return self._config

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._config.api_key,
            "anthropic-version": self._config.api_version,
        }

    def _build_url(self, path: str) -> str:
        return self._config.base_url.rstrip("/") + "/" + path.lstrip("/")

    @staticmethod
    def _encode(body: Any) -> bytes:
        payload = body.to_payload() if hasattr(body, "to_payload") else body
        try:
            return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise LLMEncodingError(f"请求体序列化失败: {e}") from e

    def execute(self, method: str, path: str, body: Any) -> bytes:
        """
        发送一次 HTTP 请求并返回原始响应体。

        Args:
            method: HTTP 方法
            path: 相对 base_url 的路径，如 "messages"
            body: 请求体（带 to_payload() 的对象或可 JSON 序列化的值）

        Returns:
            响应体字节

        Raises:
            LLMEncodingError: 请求体无法序列化
            LLMTransportError: 网络错误
            LLMHTTPError: 响应状态码不是 200
        """
        url = self._build_url(path)
        data = self._encode(body)
        headers = self._get_headers()

        if self._observer is not None:
            self._observer.on_request(method, url, redact_headers(headers), data)

        logger.debug("请求 %s %s (%d 字节)", method, url, len(data))
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self._config.request_timeout,
            )
            content = response.content
        except requests.RequestException as e:
            error_msg = f"{e.__class__.__name__}: {str(e)}"
            logger.error("传输错误 %s %s: %s", method, url, error_msg)
            raise LLMTransportError(error_msg) from e

        if self._observer is not None:
            self._observer.on_response(response.status_code, content)

        if response.status_code != 200:
            body_text = content.decode("utf-8", errors="replace")
            logger.error("API 错误 %s %s: status=%d", method, url, response.status_code)
            raise LLMHTTPError(response.status_code, body_text)

        return content

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


__all__ = ["ClaudeClient"]
