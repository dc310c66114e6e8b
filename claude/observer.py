"""Optional request/response observers for the transport client."""
from __future__ import annotations

import logging
from typing import Mapping, Optional

SECRET_HEADERS = {"x-api-key", "authorization"}
_BODY_PREVIEW = 2000


def redact_headers(headers: Mapping[str, str]) -> dict:
    """Return a copy of ``headers`` with credential values masked."""
    return {k: ("***" if k.lower() in SECRET_HEADERS else v) for k, v in headers.items()}


def _preview(body: bytes) -> str:
    text = body.decode("utf-8", errors="replace")
    if len(text) > _BODY_PREVIEW:
        return f"{text[:_BODY_PREVIEW]}...({len(text)} 字符)"
    return text


class RequestObserver:
    """No-op observer; subclass and override the hooks you need."""

    def on_request(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> None:
        pass

    def on_response(self, status_code: int, body: bytes) -> None:
        pass


class LoggingObserver(RequestObserver):
    """Log each exchange through ``logging``.

    Bodies can carry user content, so they are only written when
    ``log_bodies`` is set, and are truncated even then. ``headers`` passed
    in by the client are already redacted.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, *, level: int = logging.INFO, log_bodies: bool = False):
        self._logger = logger or logging.getLogger(__name__)
        self._level = level
        self._log_bodies = log_bodies

    def on_request(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> None:
        self._logger.log(self._level, "发送请求 %s %s headers=%s", method, url, dict(headers))
        if self._log_bodies:
            self._logger.log(self._level, "请求体: %s", _preview(body))

    def on_response(self, status_code: int, body: bytes) -> None:
        self._logger.log(self._level, "收到响应 status=%d (%d 字节)", status_code, len(body))
        if self._log_bodies:
            self._logger.log(self._level, "响应体: %s", _preview(body))


__all__ = ["RequestObserver", "LoggingObserver", "redact_headers"]
