"""Error types raised by the discovery, session and light command layers.

Every failure is raised as a subclass of HueError so callers can catch the
whole family at once, or a specific kind to tell "bridge unreachable" apart
from "bad index" or "bridge rejected the payload".
"""


class HueError(Exception):
    """Base class for all Hue control errors."""


class DiscoveryInitError(HueError):
    """The mDNS resolver could not be started (socket or multicast setup failed)."""


class DiscoveryNotFoundError(HueError):
    """No bridge advertisement was seen before the browse ended."""


class InvalidCredentialError(HueError):
    """The bridge credential is missing or empty."""


class TransportError(HueError):
    """Connection, timeout, TLS or HTTP status failure talking to the bridge.

    Attributes:
        response: The HTTP response when the bridge answered with an error
            status, None for connection-level failures
    """

    def __init__(self, message: str, response=None):
        super().__init__(message)
        self.response = response


class DecodeError(HueError):
    """The bridge response body was not the expected JSON."""


class BridgeResponseError(DecodeError):
    """The bridge answered with its error array instead of the requested resource.

    Attributes:
        errors: List of error dicts as sent by the bridge
            (each with 'type', 'address' and 'description')
    """

    def __init__(self, errors: list[dict]):
        descriptions = [e.get('description', 'unknown error') for e in errors]
        super().__init__('; '.join(descriptions) or 'bridge returned an error')
        self.errors = errors


class InvalidIndexError(HueError):
    """A light index is outside the cached inventory."""
