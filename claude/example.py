"""极简示例：发送一段三轮对话并打印回复文本。"""
from __future__ import annotations

import logging
import sys

from llm.config import load_env_file
from llm.exceptions import LLMConfigError, LLMDecodingError, LLMTransportError, LLMValidationError

from .client import ClaudeClient
from .messages import MessageService
from .models import Message, MessageRequest, extract_text

logger = logging.getLogger(__name__)


def build_demo_request() -> MessageRequest:
    return MessageRequest(
        model="claude-1.3",
        messages=[
            Message(role="user", content="Hello there."),
            Message(role="assistant", content="Hi, I'm Claude. How can I help you?"),
            Message(role="user", content="Can you explain LLMs in plain English?"),
        ],
        max_tokens=100,
        temperature=0.7,
    )


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    load_env_file()

    try:
        client = ClaudeClient.from_env()
    except LLMConfigError as e:
        logger.critical("创建客户端失败: %s", e)
        return 1

    with client:
        try:
            response = MessageService(client).send(build_demo_request())
        except (LLMValidationError, LLMTransportError, LLMDecodingError) as e:
            logger.critical("发送消息失败: %s", e)
            return 1

    print("Response:", extract_text(response.content))
    return 0


if __name__ == "__main__":
    sys.exit(main())
