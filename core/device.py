"""Smart bulb client speaking the cloud passthrough protocol.

Device commands are not sent to the bulb directly. The command is serialised
to JSON and carried as a string inside a ``passthrough`` request to the
device's gateway URL; the gateway relays the bulb's reply back as a JSON
string in ``result.responseData``, so replies are decoded twice.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import replace

import requests

from core.errors import DecodeError, ProtocolError, ValidationError
from core.transport import client_params, decode_json_string, post_request
from models.types import DeviceInfo, PreferredState, SysInfo
from models.utils import from_json_dict

_LOGGER = logging.getLogger(__name__)

LIGHTING_SERVICE = 'smartlife.iot.smartbulb.lightingservice'
TRANSITION_LIGHT_STATE = 'transition_light_state'

GET_SYSINFO_COMMAND = {'system': {'get_sysinfo': {}}}


def transition_command(brightness: int, on_off: int) -> dict:
    """Build a lighting-service transition command."""
    return {
        LIGHTING_SERVICE: {
            TRANSITION_LIGHT_STATE: {
                'brightness': brightness,
                'on_off': on_off,
            }
        }
    }


def unwrap_passthrough_result(result) -> dict:
    """Extract the device reply from a passthrough ``result``.

    The reply normally arrives as a JSON string in ``responseData``. Some
    gateway responses carry the object directly, and some carry no
    ``responseData`` at all, in which case the result map is the reply.

    Raises:
        DecodeError: If neither shape yields an object
    """
    if not isinstance(result, dict):
        raise DecodeError(f"Expected a passthrough result object, got {type(result).__name__}")

    response_data = result.get('responseData')
    if isinstance(response_data, str) and response_data:
        data = decode_json_string(response_data)
    elif isinstance(response_data, dict):
        data = response_data
    else:
        return result

    if not isinstance(data, dict):
        raise DecodeError(f"Expected a device reply object, got {type(data).__name__}")
    return data


def check_module_reply(reply: dict, module: str, method: str) -> dict:
    """Return ``reply[module][method]``, raising if the device reported an error."""
    try:
        section = reply[module][method]
    except (KeyError, TypeError) as e:
        raise DecodeError(f"Reply is missing {module}.{method}") from e
    if not isinstance(section, dict):
        raise DecodeError(f"Expected an object at {module}.{method}")

    err_code = section.get('err_code', 0)
    if err_code:
        raise ProtocolError(err_code, section.get('err_msg'))
    return section


class Device(ABC):
    """Contract for a cloud-controlled device."""

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def alias(self) -> str: ...

    @property
    @abstractmethod
    def brightness(self) -> int: ...

    @property
    @abstractmethod
    def preferred_states(self) -> list[PreferredState]: ...

    @abstractmethod
    def is_connected(self) -> bool: ...

    @abstractmethod
    def turn_on(self) -> None: ...

    @abstractmethod
    def turn_off(self) -> None: ...

    @abstractmethod
    def set_preferred_state(self, index: int) -> None: ...

    @abstractmethod
    def system_info(self) -> SysInfo: ...

    @abstractmethod
    def sync_state(self) -> None: ...

    def is_disconnected(self) -> bool:
        return not self.is_connected()

    def human_name(self) -> str:
        """Display name with power state and brightness, e.g. ``Lamp [ON 80%]``."""
        status = 'ON' if self.is_connected() else 'OFF'
        return f"{self.alias} [{status} {self.brightness}%]"


class KasaBulb(Device):
    """A Kasa smart bulb reached through the cloud gateway."""

    def __init__(self, http: requests.Session, term_id: str, token: str, info: DeviceInfo):
        """Initialise KasaBulb.

        Args:
            http: Shared requests session owned by the KasaSession
            term_id: Terminal identifier of the login
            token: Bearer token of the login
            info: Discovery record from getDeviceList
        """
        self.http = http
        self.params = client_params(term_id, token)
        self.info = info
        self._brightness = 0
        self._preferred_states: list[PreferredState] = []

    def __repr__(self) -> str:
        return f"<KasaBulb {self.info.device_id} {self.info.alias!r}>"

    @property
    def id(self) -> str:
        return self.info.device_id

    @property
    def alias(self) -> str:
        return self.info.alias

    @property
    def name(self) -> str:
        return self.info.device_name

    @property
    def mac(self) -> str:
        return self.info.device_mac

    @property
    def model(self) -> str:
        return self.info.device_model

    @property
    def type(self) -> str:
        return self.info.device_type

    @property
    def role(self) -> str:
        return self.info.role

    @property
    def firmware_version(self) -> str:
        return self.info.fw_ver

    @property
    def app_server_url(self) -> str:
        return self.info.app_server_url

    @property
    def status(self) -> int:
        return self.info.status

    @property
    def brightness(self) -> int:
        return self._brightness

    @property
    def preferred_states(self) -> list[PreferredState]:
        return self._preferred_states

    def is_connected(self) -> bool:
        return self.info.status == 1

    def is_disconnected(self) -> bool:
        return self.info.status == 0

    def passthrough(self, command: dict) -> dict:
        """Send a device command through the gateway and return the device reply.

        Args:
            command: Device command, e.g. {"system": {"get_sysinfo": {}}}

        Returns:
            Decoded device reply

        Raises:
            TransportError, ProtocolError, DecodeError
        """
        body = {
            'method': 'passthrough',
            'params': {
                'deviceId': self.id,
                'requestData': json.dumps(command),
            },
        }
        _LOGGER.debug("Passthrough to %s: %s", self.id, body['params']['requestData'])
        result = post_request(self.http, self.app_server_url, body, self.params,
                              extra_headers={'cache-control': 'no-cache'})
        return unwrap_passthrough_result(result)

    def system_info(self) -> SysInfo:
        """Fetch the bulb's system info."""
        reply = self.passthrough(GET_SYSINFO_COMMAND)
        section = check_module_reply(reply, 'system', 'get_sysinfo')
        return from_json_dict(SysInfo, section)

    def sync_state(self) -> None:
        """Refresh alias, power state, brightness and presets from the bulb.

        Nothing is updated unless the system info was fetched and decoded.
        """
        sys_info = self.system_info()
        self.info = replace(
            self.info,
            alias=sys_info.alias,
            status=sys_info.light_state.on_off,
            device_id=sys_info.device_id,
            device_mac=sys_info.mic_mac,
            device_name=sys_info.description,
            device_type=sys_info.mic_type,
            device_model=sys_info.model,
        )
        self._brightness = sys_info.light_state.brightness
        self._preferred_states = list(sys_info.preferred_state)

    def _transition(self, brightness: int, on_off: int) -> None:
        reply = self.passthrough(transition_command(brightness, on_off))
        if LIGHTING_SERVICE in reply:
            check_module_reply(reply, LIGHTING_SERVICE, TRANSITION_LIGHT_STATE)
        self.sync_state()

    def turn_on(self) -> None:
        self._transition(100, 1)

    def turn_off(self) -> None:
        self._transition(100, 0)

    def set_preferred_state(self, index: int) -> None:
        """Apply the preferred state at ``index`` and switch the bulb on.

        Raises:
            ValidationError: If index is outside the preferred state list
        """
        if index < 0 or index >= len(self._preferred_states):
            raise ValidationError(
                f"Invalid preferred state index {index} "
                f"(device has {len(self._preferred_states)} preferred states)"
            )
        state = self._preferred_states[index]
        self._transition(state.brightness, 1)
