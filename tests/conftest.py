"""Pytest configuration and fixtures for Kasa control tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def json_response():
    """Factory for a mock requests.Response whose .json() returns payload."""
    def make(payload, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        return response
    return make


@pytest.fixture
def sysinfo():
    """A get_sysinfo payload from an LB130 bulb that is on at 80%."""
    return {
        'sw_ver': '1.8.6 Build 180809 Rel.091659',
        'hw_ver': '1.0',
        'model': 'LB130(EU)',
        'description': 'Smart Wi-Fi LED Bulb with Color Changing',
        'alias': 'Lamp',
        'mic_type': 'IOT.SMARTBULB',
        'dev_state': 'normal',
        'mic_mac': '50C7BF000001',
        'deviceId': '8012ABCDEF',
        'oemId': 'OEM01',
        'hwId': 'HW01',
        'is_factory': False,
        'disco_ver': '1.0',
        'ctrl_protocols': {'name': 'Linkie', 'version': '1.0'},
        'light_state': {
            'on_off': 1,
            'mode': 'normal',
            'hue': 0,
            'saturation': 0,
            'color_temp': 2700,
            'brightness': 80,
        },
        'is_dimmable': 1,
        'is_color': 1,
        'is_variable_color_temp': 1,
        'preferred_state': [
            {'index': 0, 'hue': 0, 'saturation': 0, 'color_temp': 2700, 'brightness': 50},
            {'index': 1, 'hue': 0, 'saturation': 75, 'color_temp': 0, 'brightness': 100},
            {'index': 2, 'hue': 120, 'saturation': 75, 'color_temp': 0, 'brightness': 20},
        ],
        'rssi': -52,
        'active_mode': 'none',
        'heapsize': 302452,
        'err_code': 0,
    }


@pytest.fixture
def sysinfo_envelope(sysinfo):
    """Factory for a passthrough envelope carrying sysinfo as responseData."""
    def make(**light_state):
        info = dict(sysinfo, light_state=dict(sysinfo['light_state'], **light_state))
        reply = {'system': {'get_sysinfo': info}}
        return {'error_code': 0, 'result': {'responseData': json.dumps(reply)}}
    return make


@pytest.fixture
def device_record():
    """A getDeviceList record for the bulb in the sysinfo fixture."""
    return {
        'fwVer': '1.8.6 Build 180809 Rel.091659',
        'alias': 'Lamp',
        'status': 1,
        'role': 0,
        'deviceId': '8012ABCDEF',
        'deviceMac': '50C7BF000001',
        'deviceName': 'Smart Wi-Fi LED Bulb with Color Changing',
        'deviceType': 'IOT.SMARTBULB',
        'deviceModel': 'LB130(EU)',
        'appServerUrl': 'https://eu-wap.tplinkcloud.com',
        'deviceHwVer': '1.0',
        'isSameRegion': True,
    }


@pytest.fixture
def mock_http():
    """A stand-in for the shared requests.Session."""
    return MagicMock()
