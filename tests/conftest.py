"""Pytest configuration and fixtures for Hue control tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.session import BridgeSession
from models.types import BridgeIdentity


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def identity():
    """Bridge advertised at 10.0.0.5:443."""
    return BridgeIdentity(
        addresses=('10.0.0.5', '10.0.0.6'),
        instance_name='Hue Bridge - 1A2B3C',
        port=443,
        txt_records=('bridgeid=001788fffe1a2b3c', 'modelid=BSB002'),
    )


@pytest.fixture
def light_record():
    """A fully populated v1 light record."""
    return {
        'state': {
            'on': True,
            'bri': 200,
            'hue': 8418,
            'sat': 140,
            'effect': 'none',
            'xy': [0.4573, 0.41],
            'ct': 366,
            'alert': 'select',
            'colormode': 'ct',
            'mode': 'homeautomation',
            'reachable': True,
        },
        'swupdate': {'state': 'noupdates', 'lastinstall': '2024-11-02T10:15:03'},
        'type': 'Extended color light',
        'name': 'Lamp',
        'modelid': 'LCT016',
        'manufacturername': 'Signify Netherlands B.V.',
        'productname': 'Hue color lamp',
        'capabilities': {
            'certified': True,
            'control': {
                'mindimlevel': 1000,
                'maxlumen': 800,
                'colorgamuttype': 'C',
                'colorgamut': [[0.6915, 0.3083], [0.17, 0.7], [0.1532, 0.0475]],
                'ct': {'min': 153, 'max': 500},
            },
            'streaming': {'renderer': True, 'proxy': True},
        },
        'config': {
            'archetype': 'sultanbulb',
            'function': 'mixed',
            'direction': 'omnidirectional',
            'startup': {'mode': 'safety', 'configured': True},
        },
        'uniqueid': '00:17:88:01:03:4b:2c:7d-0b',
        'swversion': '1.104.2',
        'swconfigid': '2A5D8B6E',
        'productid': 'Philips-LCT016-1-A19ECLv5',
    }


@pytest.fixture
def make_response():
    """Return a factory for fake requests responses."""
    def _make(data, status_code=200):
        response = MagicMock()
        response.ok = status_code < 400
        response.status_code = status_code
        response.json.return_value = data
        response.text = json.dumps(data)
        return response
    return _make


@pytest.fixture
def transport():
    """Mock requests.Session used as the bridge transport."""
    return MagicMock()


@pytest.fixture
def session(identity, transport):
    """BridgeSession for credential 'abc123' with a mocked transport."""
    return BridgeSession(identity, 'abc123', transport)


@pytest.fixture
def one_light_session(session, make_response):
    """Session whose inventory holds the single light 'Lamp'."""
    session.transport.request.return_value = make_response(
        {'1': {'name': 'Lamp', 'state': {'on': False, 'bri': 254, 'reachable': True}}}
    )
    session.fetch_lights()
    session.transport.request.reset_mock()
    return session
