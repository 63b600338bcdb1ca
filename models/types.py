"""Type definitions for Kasa Control.

Dataclasses for the records exchanged with the TP-Link cloud. Field names are
snake_case; where the wire key differs it is given in the ``json`` metadata
entry, which ``models.utils.from_json_dict`` uses when decoding.
"""

from dataclasses import dataclass, field


def wire(key: str, default=None, **kwargs):
    """Declare a dataclass field whose JSON key differs from its name."""
    if 'default_factory' in kwargs:
        return field(metadata={'json': key}, **kwargs)
    return field(default=default, metadata={'json': key}, **kwargs)


@dataclass
class Credential:
    """Cloud account username/password pair."""
    username: str = ''
    password: str = ''


@dataclass
class LoginResult:
    """The ``result`` object of a successful login."""
    account_id: str = wire('accountId', '')
    reg_time: str = wire('regTime', '')
    email: str = ''
    token: str = ''


@dataclass
class DeviceInfo:
    """A raw device record from ``getDeviceList``."""
    fw_ver: str = wire('fwVer', '')
    alias: str = ''
    status: int = 0
    role: str = ''
    device_id: str = wire('deviceId', '')
    device_mac: str = wire('deviceMac', '')
    device_name: str = wire('deviceName', '')
    device_type: str = wire('deviceType', '')
    device_model: str = wire('deviceModel', '')
    app_server_url: str = wire('appServerUrl', '')


@dataclass(frozen=True)
class PreferredState:
    """A named lighting preset stored on the bulb."""
    index: int = 0
    brightness: int = 0
    color_temp: int = 0
    hue: int = 0
    saturation: int = 0
    mode: str = ''


@dataclass
class LightState:
    """Current light state as reported in the system info."""
    on_off: int = 0
    brightness: int = 0
    color_temp: int = 0
    hue: int = 0
    saturation: int = 0
    mode: str = ''


@dataclass
class CtrlProtocol:
    name: str = ''
    version: str = ''


@dataclass
class SysInfo:
    """Decoded ``system.get_sysinfo`` reply of a smart bulb."""
    active_mode: str = ''
    alias: str = ''
    ctrl_protocols: CtrlProtocol | None = None
    description: str = ''
    dev_state: str = ''
    device_id: str = wire('deviceId', '')
    disco_ver: str = ''
    err_code: int = 0
    heapsize: int = 0
    hw_id: str = wire('hwId', '')
    hw_ver: str = ''
    is_color: int = 0
    is_dimmable: int = 0
    is_factory: bool = False
    is_variable_color_temp: int = 0
    light_state: LightState = field(default_factory=LightState)
    mic_mac: str = ''
    mic_type: str = ''
    model: str = ''
    oem_id: str = wire('oemId', '')
    preferred_state: list[PreferredState] = field(default_factory=list)
    rssi: int = 0
    sw_ver: str = ''
