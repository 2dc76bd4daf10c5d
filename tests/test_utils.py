"""Tests for utility functions in models/utils.py"""

import click
import pytest
from unittest.mock import patch

from core.errors import DiscoveryNotFoundError
from models.types import BridgeIdentity, Light, LightState
from models.utils import bridge_errors, format_light, get_session, similarity_score


class TestBridgeErrors:
    """Tests for bridge_errors function."""

    def test_all_success(self):
        result = [{'success': {'/lights/1/state/on': True}}]
        assert bridge_errors(result) == []

    def test_mixed(self):
        result = [
            {'success': {'/lights/1/state/on': True}},
            {'error': {'type': 7, 'address': '/lights/1/state/hue',
                       'description': 'invalid value'}},
        ]
        assert bridge_errors(result) == ['/lights/1/state/hue: invalid value']

    def test_error_without_address(self):
        assert bridge_errors([{'error': {'description': 'oops'}}]) == ['oops']

    def test_not_a_list(self):
        assert bridge_errors({'on': True}) == []
        assert bridge_errors(None) == []


class TestFormatLight:
    """Tests for format_light function."""

    def test_on_with_brightness(self):
        light = Light(name='Lamp', state=LightState(on=True, bri=200, reachable=True))
        assert format_light(0, light) == "    0  Lamp: ON, bri 200"

    def test_off(self):
        light = Light(name='Lamp', state=LightState(on=False, bri=200))
        assert format_light(3, light) == "    3  Lamp: OFF"

    def test_unreachable(self):
        light = Light(name='Porch', state=LightState(on=False, reachable=False))
        assert format_light(1, light).endswith("(unreachable)")


class TestGetSession:
    """Tests for get_session helper."""

    @patch('core.config.load_auth', return_value=None)
    def test_missing_credential_exits(self, mock_auth):
        """No credential means a non-zero exit before any discovery."""
        with patch('core.discovery.discover_bridge') as mock_discover:
            with pytest.raises(click.exceptions.Exit) as exc_info:
                get_session()

        assert exc_info.value.exit_code == 1
        mock_discover.assert_not_called()

    @patch('core.config.load_auth')
    @patch('core.discovery.discover_bridge', side_effect=DiscoveryNotFoundError('none'))
    def test_discovery_failure_exits(self, mock_discover, mock_auth):
        mock_auth.return_value = {'api_token': 'abc123', 'trust_policy': 'skip-validation',
                                  'cert_fingerprint': None}

        with pytest.raises(click.exceptions.Exit):
            get_session(timeout=1)

    @patch('core.config.load_auth')
    def test_bad_trust_policy_exits(self, mock_auth):
        mock_auth.return_value = {'api_token': 'abc123', 'trust_policy': 'trust-everyone',
                                  'cert_fingerprint': None}

        with pytest.raises(click.exceptions.Exit):
            get_session(bridge_ip='10.0.0.5')

    @patch('core.config.load_auth')
    @patch('core.session.create_transport')
    def test_manual_bridge_ip(self, mock_transport, mock_auth, make_response):
        mock_auth.return_value = {'api_token': 'abc123', 'trust_policy': 'skip-validation',
                                  'cert_fingerprint': None}
        mock_transport.return_value.request.return_value = make_response(
            {'1': {'name': 'Lamp', 'state': {'on': True}}}
        )

        session = get_session(bridge_ip='10.0.0.7')

        assert session.identity == BridgeIdentity.manual('10.0.0.7')
        assert [light.name for light in session.lights] == ['Lamp']


class TestSimilarityScore:
    """Tests for similarity_score function."""

    def test_exact(self):
        assert similarity_score('lights', 'LIGHTS') == 100

    def test_prefix(self):
        assert similarity_score('light', 'lights') == 80

    def test_substring(self):
        assert similarity_score('ight', 'lights') == 60

    def test_transposed(self):
        assert similarity_score('ligths', 'lights') > 0

    def test_no_match(self):
        assert similarity_score('xyz', 'power') == 0
