"""Anthropic Messages API integration built on shared llm toolkit."""
import logging

from llm.config import load_env_file
from llm.exceptions import (
    LLMConfigError,
    LLMDecodingError,
    LLMEncodingError,
    LLMHTTPError,
    LLMTransportError,
    LLMValidationError,
)
from llm.parser import YAMLRequestParser

from .builder import MessageRequestBuilder
from .client import ClaudeClient
from .config import ClaudeAPIConfig
from .messages import MessageService
from .models import ContentBlock, ImageSource, Message, MessageRequest, MessageResponse, Usage, extract_text
from .observer import LoggingObserver, RequestObserver, redact_headers

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    # 客户端
    "ClaudeClient",
    "MessageService",
    "MessageRequestBuilder",
    # 配置
    "ClaudeAPIConfig",
    "load_env_file",
    # 数据模型
    "Message",
    "ContentBlock",
    "ImageSource",
    "MessageRequest",
    "MessageResponse",
    "Usage",
    "extract_text",
    # 观察者
    "RequestObserver",
    "LoggingObserver",
    "redact_headers",
    # 异常
    "LLMConfigError",
    "LLMValidationError",
    "LLMEncodingError",
    "LLMTransportError",
    "LLMHTTPError",
    "LLMDecodingError",
    # 可选导出
    "YAMLRequestParser",
]

__version__ = "0.1.0"
