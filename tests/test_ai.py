"""
Tests for the AI assistant client and endpoints.
The OpenAI SDK is mocked, nothing goes over the network.
"""

from types import SimpleNamespace
from unittest.mock import patch, MagicMock

import pytest
from openai import OpenAIError

from backend.ai_client import (
    AIClient, CompletionError, FALLBACK_REPLIES, EMPTY_REPLY, SYSTEM_PROMPT, normalize_messages,
)
from backend.docs_loader import DocsLoader


def completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def mock_openai():
    with patch('backend.ai_client.OpenAI') as mock_cls:
        create = mock_cls.return_value.chat.completions.create
        create.return_value = completion("print('hello')")
        yield mock_cls


@pytest.fixture
def ai_client():
    return AIClient(api_key='test-key', model='test-model', docs_loader=DocsLoader(),
                    docs_paths=['api-reference', 'events', 'packets'])


class TestNormalizeMessages:
    """Chat history validation."""

    def test_keeps_role_and_content_only(self):
        messages = [{'role': 'user', 'content': 'hi', 'timestamp': '2024-01-01'}]
        assert normalize_messages(messages) == [{'role': 'user', 'content': 'hi'}]

    @pytest.mark.parametrize("messages", [
        "hi",
        [{'role': 'tool', 'content': 'x'}],
        [{'role': 'user', 'content': 5}],
        ['hi'],
    ])
    def test_rejects_malformed_history(self, messages):
        with pytest.raises(ValueError):
            normalize_messages(messages)


class TestAIClient:
    """AIClient against a mocked SDK."""

    def test_missing_api_key(self):
        client = AIClient(api_key='', model='m')

        with pytest.raises(CompletionError, match='not configured'):
            client.generate_reply([{'role': 'user', 'content': 'hi'}])

    def test_generate_reply(self, mock_openai, ai_client):
        reply = ai_client.generate_reply([{'role': 'user', 'content': 'write a hello script'}])

        assert reply == "print('hello')"
        kwargs = mock_openai.return_value.chat.completions.create.call_args.kwargs
        assert kwargs['model'] == 'test-model'
        assert kwargs['messages'][0] == {'role': 'system', 'content': SYSTEM_PROMPT}
        assert kwargs['messages'][1] == {'role': 'user', 'content': 'write a hello script'}

    def test_docs_context_added_to_system_prompt(self, mock_openai, ai_client):
        ai_client.generate_reply([{'role': 'user', 'content': 'hi'}], context='growtopia-lua-growsoft')

        system = mock_openai.return_value.chat.completions.create.call_args.kwargs['messages'][0]['content']
        assert system.startswith(SYSTEM_PROMPT)
        assert '\n\nRelevant Documentation:\n## Growsoft Lua API Reference' in system
        assert '## Events System' in system

    def test_empty_reply(self, mock_openai, ai_client):
        mock_openai.return_value.chat.completions.create.return_value = completion(None)
        assert ai_client.generate_reply([{'role': 'user', 'content': 'hi'}]) == EMPTY_REPLY

    def test_sdk_error_becomes_completion_error(self, mock_openai, ai_client):
        mock_openai.return_value.chat.completions.create.side_effect = OpenAIError('quota exceeded')

        with pytest.raises(CompletionError, match='quota exceeded'):
            ai_client.generate_reply([{'role': 'user', 'content': 'hi'}])

    def test_generate_content(self, mock_openai, ai_client):
        result = ai_client.generate_content('fix my script', context='Be brief.')

        assert result == {'success': True, 'content': "print('hello')"}
        messages = mock_openai.return_value.chat.completions.create.call_args.kwargs['messages']
        assert messages[0] == {'role': 'system', 'content': 'Be brief.'}

    def test_generate_content_reports_failure(self):
        result = AIClient(api_key=None, model='m').generate_content('hi')

        assert result == {'success': False, 'content': '', 'error': 'OpenAI API key not configured'}


class TestChatEndpoint:
    """POST /api/ai"""

    def test_fallback_without_api_key(self, client):
        response = client.post('/api/ai', json={'messages': [{'role': 'user', 'content': 'hi'}]})

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['fallback'] is True
        assert data['reply'] in FALLBACK_REPLIES

    def test_reply(self, app, client, mock_openai):
        app.config['OPENAI_API_KEY'] = 'test-key'

        response = client.post('/api/ai', json={
            'messages': [{'role': 'user', 'content': 'hi'}],
            'context': 'growtopia-lua-growsoft',
        })

        assert response.get_json() == {'success': True, 'reply': "print('hello')"}
        mock_openai.assert_called_once_with(api_key='test-key', base_url=None)

    def test_provider_error_falls_back(self, app, client, mock_openai):
        app.config['OPENAI_API_KEY'] = 'test-key'
        mock_openai.return_value.chat.completions.create.side_effect = OpenAIError('down')

        data = client.post('/api/ai', json={'messages': [{'role': 'user', 'content': 'hi'}]}).get_json()

        assert data['fallback'] is True
        assert data['reply'] in FALLBACK_REPLIES

    def test_missing_messages(self, client):
        assert client.post('/api/ai', json={}).status_code == 400

    def test_bad_role(self, client):
        response = client.post('/api/ai', json={'messages': [{'role': 'robot', 'content': 'hi'}]})
        assert response.status_code == 400


class TestGenerateEndpoint:
    """POST /api/ai/generate"""

    def test_generate(self, app, client, mock_openai):
        app.config['OPENAI_API_KEY'] = 'test-key'

        response = client.post('/api/ai/generate', json={'prompt': 'hello world script'})

        assert response.status_code == 200
        assert response.get_json()['content'] == "print('hello')"

    def test_unavailable(self, client):
        response = client.post('/api/ai/generate', json={'prompt': 'hello'})

        assert response.status_code == 503
        assert response.get_json()['success'] is False

    def test_missing_prompt(self, client):
        assert client.post('/api/ai/generate', json={'prompt': '  '}).status_code == 400
