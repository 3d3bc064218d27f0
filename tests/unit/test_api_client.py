"""
Unit tests for OpenAIClient.

The HTTP session is mocked; no network access.
"""

from unittest.mock import MagicMock

import pytest
import requests

from mediaparser.infrastructure.ai.api_client import OpenAIClient


def _response(status_code=200, json_data=None, text=''):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


class TestOpenAIClient:
    """Test suite for OpenAIClient."""

    @pytest.fixture
    def session(self):
        return MagicMock(spec=requests.Session)

    @pytest.fixture
    def client(self, session):
        return OpenAIClient(timeout=30, session=session)

    def _call(self, client, **kwargs):
        return client.call(
            base_url='https://api.example.com/v1/',
            api_key='sk-test',
            model='test-model',
            messages=[{'role': 'user', 'content': 'hi'}],
            **kwargs
        )

    def test_success(self, client, session):
        session.post.return_value = _response(json_data={
            'choices': [{'message': {'content': '  {"title": "X"}  '}}]
        })

        response = self._call(client, extra_params={'top_p': 0.5})

        assert response.success is True
        assert response.content == '{"title": "X"}'

        args, kwargs = session.post.call_args
        assert args[0] == 'https://api.example.com/v1/chat/completions'
        assert kwargs['headers']['Authorization'] == 'Bearer sk-test'
        assert kwargs['json']['model'] == 'test-model'
        assert kwargs['json']['top_p'] == 0.5
        assert kwargs['timeout'] == 30

    def test_response_format_included(self, client, session):
        session.post.return_value = _response(json_data={
            'choices': [{'message': {'content': '{}'}}]
        })

        self._call(client, response_format={'type': 'json_object'})

        assert session.post.call_args.kwargs['json']['response_format'] == {
            'type': 'json_object'
        }

    @pytest.mark.parametrize('exc', [
        requests.Timeout('slow'),
        requests.ConnectionError('refused'),
        requests.RequestException('boom'),
    ])
    def test_transport_errors(self, client, session, exc):
        session.post.side_effect = exc

        response = self._call(client)

        assert response.success is False
        assert response.error_code is None
        assert response.error_message

    def test_http_error_message_extracted(self, client, session):
        session.post.return_value = _response(
            status_code=401,
            json_data={'error': {'message': 'Invalid API key'}}
        )

        response = self._call(client)

        assert response.success is False
        assert response.error_code == 401
        assert response.error_message == 'Invalid API key'

    def test_http_error_non_json_body(self, client, session):
        session.post.return_value = _response(
            status_code=502, json_data=ValueError('no json'), text='Bad Gateway'
        )

        response = self._call(client)

        assert response.error_code == 502
        assert response.error_message == 'Bad Gateway'

    def test_unexpected_structure(self, client, session):
        session.post.return_value = _response(json_data={'choices': []})

        response = self._call(client)

        assert response.success is False
        assert 'Unexpected response structure' in response.error_message
