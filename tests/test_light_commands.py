"""Tests for index-addressed light commands in core/light_commands.py"""

import pytest

from core.errors import InvalidIndexError, TransportError
from core.light_commands import state_path, set_power, apply_state
from models.types import DesiredState, Light, LightState


def sent_request(session):
    """Return (method, url, payload) of the single request the session made."""
    session.transport.request.assert_called_once()
    args, kwargs = session.transport.request.call_args
    return args[0], args[1], kwargs['json']


@pytest.fixture
def three_light_session(session):
    session.inventory.replace([
        Light(name=name, state=LightState(on=False)) for name in ('One', 'Two', 'Three')
    ])
    return session


class TestStatePath:
    """Test translation from inventory index to bridge light ID."""

    @pytest.mark.parametrize('index', [0, 1, 2])
    def test_valid_indices(self, three_light_session, index):
        assert state_path(three_light_session, index) == f"lights/{index + 1}/state"

    @pytest.mark.parametrize('index', [-1, 3, 100])
    def test_out_of_range(self, three_light_session, index):
        with pytest.raises(InvalidIndexError):
            state_path(three_light_session, index)

    def test_empty_inventory(self, session):
        with pytest.raises(InvalidIndexError):
            state_path(session, 0)

    @pytest.mark.parametrize('index', [True, '0', 1.0, None])
    def test_non_integer(self, three_light_session, index):
        with pytest.raises(InvalidIndexError):
            state_path(three_light_session, index)


class TestSetPower:
    """Test the power command against a one-light inventory."""

    def test_turn_on(self, one_light_session, make_response):
        """set_power(0, True) PUTs {"on": true} to light 1."""
        response = make_response([{'success': {'/lights/1/state/on': True}}])
        one_light_session.transport.request.return_value = response

        result = set_power(one_light_session, 0, True)

        assert result is response
        method, url, payload = sent_request(one_light_session)
        assert method == 'PUT'
        assert url == 'https://10.0.0.5:443/api/abc123/lights/1/state'
        assert payload == {'on': True}

    def test_turn_off(self, one_light_session, make_response):
        one_light_session.transport.request.return_value = make_response([])

        set_power(one_light_session, 0, False)

        _, _, payload = sent_request(one_light_session)
        assert payload == {'on': False}

    def test_index_past_end(self, one_light_session):
        """Index 1 does not exist in a one-element inventory."""
        with pytest.raises(InvalidIndexError):
            set_power(one_light_session, 1, True)

        one_light_session.transport.request.assert_not_called()

    def test_negative_index(self, one_light_session):
        with pytest.raises(InvalidIndexError):
            set_power(one_light_session, -1, True)


class TestApplyState:
    """Test partial state updates."""

    def test_brightness_only(self, three_light_session, make_response):
        """Only the bri field is transmitted when only brightness is set."""
        three_light_session.transport.request.return_value = make_response([])

        apply_state(three_light_session, 2, DesiredState(bri=128))

        method, url, payload = sent_request(three_light_session)
        assert method == 'PUT'
        assert url.endswith('/lights/3/state')
        assert payload == {'bri': 128}

    def test_several_fields_one_request(self, three_light_session, make_response):
        three_light_session.transport.request.return_value = make_response([])

        apply_state(three_light_session, 0, DesiredState(on=True, hue=46920, sat=254, alert='select'))

        _, _, payload = sent_request(three_light_session)
        assert payload == {'on': True, 'hue': 46920, 'sat': 254, 'alert': 'select'}

    def test_partial_rejection_returned_raw(self, three_light_session, make_response):
        """Per-field bridge errors are not interpreted; the response is returned."""
        response = make_response([
            {'success': {'/lights/1/state/on': True}},
            {'error': {'type': 7, 'address': '/lights/1/state/effect',
                       'description': 'invalid value, sparkle, for parameter, effect'}},
        ])
        three_light_session.transport.request.return_value = response

        result = apply_state(three_light_session, 0, DesiredState(on=True, effect='sparkle'))

        assert result is response

    def test_out_of_range(self, three_light_session):
        with pytest.raises(InvalidIndexError):
            apply_state(three_light_session, 3, DesiredState(on=True))

    def test_transport_failure(self, three_light_session, make_response):
        three_light_session.transport.request.return_value = make_response([], status_code=500)

        with pytest.raises(TransportError):
            apply_state(three_light_session, 0, DesiredState(on=True))


class TestEndToEnd:
    """Fetch from a mock bridge at 10.0.0.5:443, then toggle a light."""

    def test_fetch_then_power(self, session, make_response):
        session.transport.request.return_value = make_response({
            '1': {'name': 'Lamp', 'state': {'on': False, 'bri': 254, 'hue': 8418, 'sat': 140,
                                            'reachable': True}}
        })
        lights = session.fetch_lights()
        assert len(lights) == 1

        session.transport.request.reset_mock()
        session.transport.request.return_value = make_response(
            [{'success': {'/lights/1/state/on': True}}]
        )
        session.set_power(0, True)

        method, url, payload = sent_request(session)
        assert (method, url, payload) == (
            'PUT', 'https://10.0.0.5:443/api/abc123/lights/1/state', {'on': True}
        )

        with pytest.raises(InvalidIndexError):
            session.set_power(1, True)
