"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from claude.client import ClaudeClient
from claude.config import ClaudeAPIConfig

OK_BODY = (
    '{"id":"msg_1","type":"message","role":"assistant","content":[{"type":"text","text":"Hi"}],'
    '"model":"claude-1.3","stop_reason":"end_turn","usage":{"input_tokens":5,"output_tokens":2}}'
)


def make_response(status_code: int = 200, body: str | bytes = OK_BODY) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = body.encode('utf-8') if isinstance(body, str) else body
    return resp


def make_session(status_code: int = 200, body: str | bytes = OK_BODY) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(status_code, body)
    return session


def sent_json(session: MagicMock) -> dict:
    return json.loads(session.request.call_args.kwargs['data'])


@pytest.fixture
def config():
    return ClaudeAPIConfig(api_key='sk-test-key', default_model='claude-1.3', default_max_tokens=64)


@pytest.fixture
def session():
    return make_session()


@pytest.fixture
def client(config, session):
    return ClaudeClient(config, session=session)
