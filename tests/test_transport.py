"""Tests for the shared request envelope in core/transport.py"""

import pytest
import requests

from core.errors import DecodeError, ProtocolError, TransportError
from core.transport import (
    CLOUD_URL,
    USER_AGENT,
    client_params,
    create_headers,
    decode_json_string,
    post_request,
    validate_envelope,
)


class TestClientParams:
    """Test client-identity query parameters."""

    def test_without_token(self):
        params = client_params('term-1')
        assert params == {
            'appName': 'Kasa_Android',
            'termID': 'term-1',
            'appVer': '1.4.4.607',
            'ospf': 'Android+6.0.1',
            'netType': 'wifi',
            'locale': 'en_US',
        }

    def test_with_token(self):
        params = client_params('term-1', 'abc123')
        assert params['token'] == 'abc123'


class TestHeaders:
    """Test HTTP header construction."""

    def test_default_headers(self):
        headers = create_headers()
        assert headers['Content-Type'] == 'application/json'
        assert headers['User-Agent'] == USER_AGENT
        assert 'cache-control' not in headers

    def test_extra_headers(self):
        headers = create_headers({'cache-control': 'no-cache'})
        assert headers['cache-control'] == 'no-cache'
        assert headers['User-Agent'] == USER_AGENT


class TestDecodeJsonString:
    """Test decoding JSON embedded in a decoded value."""

    def test_decodes_object(self):
        assert decode_json_string('{"a": {"b": 1}}') == {'a': {'b': 1}}

    def test_rejects_non_string(self):
        with pytest.raises(DecodeError):
            decode_json_string({'a': 1})

    def test_rejects_invalid_json(self):
        with pytest.raises(DecodeError):
            decode_json_string('{"a": ')


class TestValidateEnvelope:
    """Test response envelope checks."""

    def test_returns_result(self):
        assert validate_envelope({'error_code': 0, 'result': {'token': 'x'}}) == {'token': 'x'}

    def test_missing_error_code_is_success(self):
        assert validate_envelope({'result': [1]}) == [1]

    def test_null_error_code_is_success(self):
        assert validate_envelope({'error_code': None, 'result': {'a': 1}}) == {'a': 1}

    def test_nonzero_error_code(self):
        with pytest.raises(ProtocolError) as excinfo:
            validate_envelope({'error_code': -20601, 'msg': 'Incorrect email or password'})
        assert excinfo.value.error_code == -20601
        assert str(excinfo.value) == 'Incorrect email or password'

    def test_nonzero_error_code_without_message(self):
        with pytest.raises(ProtocolError, match='-20651'):
            validate_envelope({'error_code': -20651})

    def test_non_object_envelope(self):
        with pytest.raises(DecodeError):
            validate_envelope(['not', 'an', 'envelope'])


class TestPostRequest:
    """Test the generic POST helper."""

    def test_posts_json_with_params_and_headers(self, mock_http, json_response):
        mock_http.post.return_value = json_response({'error_code': 0, 'result': {'ok': True}})
        params = client_params('term-1', 'abc123')

        result = post_request(mock_http, f"{CLOUD_URL}/", {'method': 'getDeviceList'}, params)

        assert result == {'ok': True}
        mock_http.post.assert_called_once()
        args, kwargs = mock_http.post.call_args
        assert args[0] == f"{CLOUD_URL}/"
        assert kwargs['json'] == {'method': 'getDeviceList'}
        assert kwargs['params'] == params
        assert kwargs['headers']['User-Agent'] == USER_AGENT

    def test_transport_error(self, mock_http):
        mock_http.post.side_effect = requests.exceptions.ConnectionError("no route")
        with pytest.raises(TransportError, match="no route"):
            post_request(mock_http, CLOUD_URL, {'method': 'login'}, {})

    def test_non_json_body(self, mock_http, json_response):
        response = json_response(None, status_code=502)
        response.json.side_effect = ValueError("Expecting value")
        mock_http.post.return_value = response
        with pytest.raises(DecodeError, match="502"):
            post_request(mock_http, CLOUD_URL, {'method': 'login'}, {})

    def test_error_code_wins_over_http_status(self, mock_http, json_response):
        """A decodable error envelope is reported even with a non-2xx status."""
        mock_http.post.return_value = json_response(
            {'error_code': -20571, 'msg': 'Device is offline'}, status_code=500
        )
        with pytest.raises(ProtocolError, match='Device is offline'):
            post_request(mock_http, CLOUD_URL, {'method': 'passthrough'}, {})
