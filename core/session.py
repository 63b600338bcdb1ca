"""Kasa cloud session: login and device enumeration.

A session is created by ``login()`` and holds the terminal identifier and
bearer token for the lifetime of the process. Tokens are never refreshed;
once the gateway rejects one, calls fail with a ProtocolError.
"""

import logging
import uuid

import requests

from core.device import Device, KasaBulb
from core.errors import DecodeError, KasaError
from core.transport import APP_NAME, CLOUD_URL, client_params, post_request
from models.types import DeviceInfo, LoginResult
from models.utils import from_json_dict

_LOGGER = logging.getLogger(__name__)


class KasaSession:
    """Manages an authenticated connection to the TP-Link Kasa cloud."""

    def __init__(self, http: requests.Session | None = None, term_id: str | None = None,
                 token: str = ''):
        """Initialise KasaSession.

        Args:
            http: Shared requests session (created if not provided)
            term_id: Terminal identifier (a fresh UUID4 if not provided)
            token: Bearer token, empty until authenticated
        """
        self.http = http if http is not None else requests.Session()
        self.term_id = term_id or str(uuid.uuid4())
        self.token = token
        self.account: LoginResult | None = None
        self.devices: list[Device] = []

    def _request(self, body: dict):
        return post_request(self.http, f"{CLOUD_URL}/", body, client_params(self.term_id, self.token))

    def authenticate(self, username: str, password: str) -> LoginResult:
        """Log in with cloud account credentials and store the returned token.

        Raises:
            ProtocolError: If the gateway rejected the credentials
            TransportError, DecodeError: On network or response errors
        """
        body = {
            'method': 'login',
            'url': CLOUD_URL,
            'params': {
                'appType': APP_NAME,
                'cloudUserName': username,
                'cloudPassword': password,
                'terminalUUID': self.term_id,
            },
        }
        _LOGGER.debug("Logging in to Kasa cloud (termID %s)", self.term_id)
        result = from_json_dict(LoginResult, self._request(body))
        if not result.token:
            raise DecodeError("Login response did not include a token")

        self.account = result
        self.token = result.token
        _LOGGER.debug("Logged in as account %s", result.account_id)
        return result

    def list_devices(self) -> list[Device]:
        """Fetch the account's device list and sync each device.

        A device whose initial sync fails is kept with the state from its
        discovery record.

        Raises:
            DecodeError: If the device list is missing or malformed
            ProtocolError, TransportError: If the request failed
        """
        result = self._request({'method': 'getDeviceList'})
        if not isinstance(result, dict) or not isinstance(result.get('deviceList'), list):
            raise DecodeError("Device list response has no deviceList")

        infos = [from_json_dict(DeviceInfo, record) for record in result['deviceList']]

        devices: list[Device] = []
        for info in infos:
            device = KasaBulb(self.http, self.term_id, self.token, info)
            try:
                device.sync_state()
            except KasaError as e:
                _LOGGER.warning("Could not sync device %s (%s): %s", info.alias, info.device_id, e)
            devices.append(device)

        self.devices = devices
        _LOGGER.debug("Found %d device(s)", len(devices))
        return devices

    def find_device(self, alias: str) -> Device | None:
        """Find a device by exact alias in the last enumerated list."""
        for device in self.devices:
            if device.alias == alias:
                return device
        return None


def login(username: str, password: str, http: requests.Session | None = None) -> KasaSession:
    """Authenticate against the Kasa cloud with a fresh terminal identifier.

    Args:
        username: Cloud account email
        password: Cloud account password
        http: Shared requests session (created if not provided)

    Returns:
        Authenticated KasaSession

    Raises:
        ProtocolError: If the gateway rejected the credentials
        TransportError, DecodeError: On network or response errors
    """
    session = KasaSession(http=http)
    session.authenticate(username, password)
    return session
