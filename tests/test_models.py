"""Tests for the Messages API data model."""

from __future__ import annotations

import base64
import json

import pytest

from claude.models import (
    ContentBlock,
    ImageSource,
    Message,
    MessageRequest,
    MessageResponse,
    extract_text,
)
from llm.exceptions import LLMDecodingError, LLMValidationError
from tests.conftest import OK_BODY


class TestMessageRequest:
    def test_minimal_payload_has_only_required_fields(self):
        req = MessageRequest(model='claude-1.3', messages=[Message(role='user', content='hi')], max_tokens=10)

        assert req.to_payload() == {
            'model': 'claude-1.3',
            'messages': [{'role': 'user', 'content': 'hi'}],
            'max_tokens': 10,
        }

    def test_set_optional_fields_survive_wire_round_trip(self):
        req = MessageRequest(
            model='claude-1.3',
            messages=[
                Message(role='user', content='hi'),
                Message(role='assistant', content='ok'),
                Message(
                    role='user',
                    content=[
                        ContentBlock.from_image(ImageSource(media_type='image/png', data='AAAA')),
                        ContentBlock.from_text('and this?'),
                    ],
                ),
            ],
            max_tokens=10,
            temperature=0.0,
            top_k=5,
            top_p=0.25,
            stop_sequences=['\n\nHuman:'],
            stream=False,
            system='be brief',
            tool_choice={'type': 'auto'},
            metadata={'user_id': 'u1'},
        )

        wire = json.loads(json.dumps(req.to_payload()))

        assert wire['top_p'] == 0.25
        assert wire['messages'][2]['content'][0]['source']['data'] == 'AAAA'
        assert wire['temperature'] == 0.0
        assert wire['stream'] is False
        assert MessageRequest.from_payload(wire) == req

    def test_block_content_is_serialized_as_list(self):
        source = ImageSource(media_type='image/png', data='AAAA')
        msg = Message(role='user', content=[ContentBlock.from_image(source), ContentBlock.from_text('what is this?')])

        assert msg.to_payload() == {
            'role': 'user',
            'content': [
                {'type': 'image', 'source': {'type': 'base64', 'media_type': 'image/png', 'data': 'AAAA'}},
                {'type': 'text', 'text': 'what is this?'},
            ],
        }

    def test_unset_fields_never_serialized(self):
        req = MessageRequest(model='m', messages=[Message(role='user', content='hi')], max_tokens=1, top_p=0.5)

        assert set(req.to_payload()) == {'model', 'messages', 'max_tokens', 'top_p'}

    @pytest.mark.parametrize(
        'data',
        [
            {'messages': [], 'max_tokens': 1},
            {'model': 'm', 'max_tokens': 1},
            {'model': 'm', 'messages': [], 'max_tokens': '1'},
            {'model': 'm', 'messages': [{'content': 'hi'}], 'max_tokens': 1},
            {'model': 'm', 'messages': [{'role': 'user'}], 'max_tokens': 1},
            {'model': 'm', 'messages': [{'role': 'system', 'content': 'x'}], 'max_tokens': 1},
            {'model': 'm', 'messages': [{'role': 'user', 'content': [{'type': 'text'}]}], 'max_tokens': 1},
            ['not', 'a', 'dict'],
        ],
    )
    def test_malformed_payload_is_decoding_error(self, data):
        with pytest.raises(LLMDecodingError):
            MessageRequest.from_payload(data)

    def test_invalid_role_rejected(self):
        with pytest.raises(LLMValidationError):
            Message(role='system', content='nope')


class TestContentBlock:
    def test_both_payload_fields_rejected(self):
        source = ImageSource(media_type='image/png', data='AA')

        with pytest.raises(LLMValidationError):
            ContentBlock(type='text', text='a', source=source)

    def test_text_block_requires_text(self):
        with pytest.raises(LLMValidationError):
            ContentBlock(type='text')

    def test_image_block_requires_source(self):
        with pytest.raises(LLMValidationError):
            ContentBlock(type='image', text='caption')

    def test_other_kinds_may_carry_no_payload(self):
        assert ContentBlock(type='tool_use').to_payload() == {'type': 'tool_use'}

    def test_decoding_invalid_block_is_decoding_error(self):
        with pytest.raises(LLMDecodingError):
            ContentBlock.from_payload({'type': 'image', 'text': 'no source'})


class TestImageSource:
    def test_from_file_encodes_and_guesses_type(self, tmp_path):
        path = tmp_path / 'pic.png'
        path.write_bytes(b'\x89PNG')

        source = ImageSource.from_file(path)

        assert source.media_type == 'image/png'
        assert base64.b64decode(source.data) == b'\x89PNG'

    def test_missing_file(self, tmp_path):
        with pytest.raises(LLMValidationError):
            ImageSource.from_file(tmp_path / 'missing.png')


class TestMessageResponse:
    def test_decodes_reply(self):
        resp = MessageResponse.from_payload(json.loads(OK_BODY))

        assert resp.content[0].text == 'Hi'
        assert resp.usage.output_tokens == 2
        assert resp.stop_sequence is None

    def test_missing_id_fails(self):
        data = json.loads(OK_BODY)
        del data['id']

        with pytest.raises(LLMDecodingError, match='id'):
            MessageResponse.from_payload(data)

    def test_wrong_usage_type_fails(self):
        data = json.loads(OK_BODY)
        data['usage']['output_tokens'] = '2'

        with pytest.raises(LLMDecodingError):
            MessageResponse.from_payload(data)

    def test_non_object_fails(self):
        with pytest.raises(LLMDecodingError):
            MessageResponse.from_payload(['not', 'a', 'dict'])

    def test_image_block_decoded(self):
        data = json.loads(OK_BODY)
        data['content'].append({'type': 'image', 'source': {'type': 'base64', 'media_type': 'image/png', 'data': 'AA'}})

        resp = MessageResponse.from_payload(data)

        assert resp.content[1].source.media_type == 'image/png'


class TestExtractText:
    def test_only_text_blocks_in_order(self):
        blocks = [
            ContentBlock.from_text('Hello'),
            ContentBlock.from_image(ImageSource(media_type='image/png', data='AA')),
            ContentBlock.from_text('world'),
        ]

        assert extract_text(blocks) == 'Hello world'

    def test_empty(self):
        assert extract_text([]) == ''
