"""Request envelope shared by the cloud session and device clients.

All traffic to the TP-Link cloud is a JSON POST carrying a fixed set of
client-identity query parameters. The reply is an envelope of the form
``{"error_code": int, "msg": str, "result": ...}``.
"""

import json
import logging
from typing import Any

import requests

from core.errors import DecodeError, ProtocolError, TransportError

_LOGGER = logging.getLogger(__name__)

CLOUD_URL = 'https://wap.tplinkcloud.com'

APP_NAME = 'Kasa_Android'
APP_VERSION = '1.4.4.607'
OS_PLATFORM = 'Android+6.0.1'
NETWORK_TYPE = 'wifi'
LOCALE = 'en_US'

USER_AGENT = 'Dalvik/2.1.0 (Linux; U; Android 6.0.1; A0001 Build/M4B30X)'


def create_headers(extra: dict[str, str] | None = None) -> dict[str, str]:
    """Create HTTP headers for cloud requests.

    Args:
        extra: Additional headers (e.g. cache-control for device requests)

    Returns:
        Dictionary of HTTP headers
    """
    headers = {
        'Content-Type': 'application/json',
        'User-Agent': USER_AGENT,
    }
    if extra:
        headers.update(extra)
    return headers


def client_params(term_id: str, token: str = '') -> dict[str, str]:
    """Build the client-identity query parameters.

    Args:
        term_id: Terminal identifier of the current login
        token: Bearer token, omitted from the parameters while empty

    Returns:
        Dictionary of query parameters
    """
    params = {
        'appName': APP_NAME,
        'termID': term_id,
        'appVer': APP_VERSION,
        'ospf': OS_PLATFORM,
        'netType': NETWORK_TYPE,
        'locale': LOCALE,
    }
    if token:
        params['token'] = token
    return params


def decode_json_string(value: Any) -> Any:
    """Decode a JSON document embedded as a string in an already-decoded value.

    Raises:
        DecodeError: If value is not a string or not valid JSON
    """
    if not isinstance(value, str):
        raise DecodeError(f"Expected a JSON string, got {type(value).__name__}")
    try:
        return json.loads(value)
    except ValueError as e:
        raise DecodeError(f"Invalid embedded JSON: {e}") from e


def validate_envelope(data: Any) -> Any:
    """Check a decoded response envelope and return its ``result``.

    Raises:
        DecodeError: If the envelope is not an object
        ProtocolError: If error_code is nonzero
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a response object, got {type(data).__name__}")

    error_code = data.get('error_code') or 0
    if error_code != 0:
        raise ProtocolError(error_code, data.get('msg'))

    return data.get('result')


def post_request(http: requests.Session, url: str, body: dict, params: dict[str, str],
                 extra_headers: dict[str, str] | None = None) -> Any:
    """POST a JSON body to the cloud and unwrap the response envelope.

    The HTTP status is not checked on its own: the gateway reports failures
    through ``error_code``, which wins whenever the body decodes.

    Args:
        http: Shared requests session
        url: Cloud endpoint (fixed cloud URL or a device's gateway URL)
        body: Outer JSON request body
        params: Query parameters from client_params()
        extra_headers: Additional headers

    Returns:
        The envelope's ``result`` value

    Raises:
        TransportError: If the request could not be completed
        DecodeError: If the body is not a JSON envelope
        ProtocolError: If the gateway reported an error code
    """
    _LOGGER.debug("POST %s method=%s", url, body.get('method'))
    try:
        response = http.post(url, params=params, json=body, headers=create_headers(extra_headers))
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request to {url} failed: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError(f"Invalid JSON response (HTTP {response.status_code}): {e}") from e

    return validate_envelope(data)
