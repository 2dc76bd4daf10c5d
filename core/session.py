"""BridgeSession class for talking to a discovered Hue Bridge.

This module contains the session that owns the bridge identity, the
credential and the HTTP transport, and issues authenticated requests
against the bridge's v1 API.
"""

import logging
from enum import Enum

import requests
from requests.adapters import HTTPAdapter
from requests.packages.urllib3.exceptions import InsecureRequestWarning

from core.config import REQUEST_TIMEOUT
from core.errors import (
    InvalidCredentialError,
    TransportError,
    DecodeError,
    BridgeResponseError,
)
from core.inventory import LightInventory
from core.light_commands import set_power, apply_state
from models.types import BridgeIdentity, DesiredState, Light

logger = logging.getLogger(__name__)


class TrustPolicy(Enum):
    """How the bridge's TLS certificate is validated.

    Bridges serve a self-signed certificate, so the default skips
    validation. Once the certificate is known, pin its fingerprint instead.
    """
    SKIP_VALIDATION = 'skip-validation'
    PIN_CERTIFICATE = 'pin-certificate'
    SYSTEM_TRUST_STORE = 'system-trust-store'


class FingerprintAdapter(HTTPAdapter):
    """Transport adapter that only accepts a certificate with a known fingerprint."""

    def __init__(self, fingerprint: str, **kwargs):
        self.fingerprint = fingerprint.replace(':', '').lower()
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs['assert_fingerprint'] = self.fingerprint
        super().init_poolmanager(*args, **kwargs)


def create_transport(trust: TrustPolicy, fingerprint: str | None = None) -> requests.Session:
    """Create the requests session used for every call to one bridge.

    Args:
        trust: Certificate validation policy
        fingerprint: SHA-256 certificate fingerprint, required for PIN_CERTIFICATE

    Raises:
        ValueError: If PIN_CERTIFICATE is requested without a fingerprint
    """
    session = requests.Session()
    session.headers['Content-Type'] = 'application/json'

    if trust is TrustPolicy.SYSTEM_TRUST_STORE:
        session.verify = True
        return session

    if trust is TrustPolicy.PIN_CERTIFICATE:
        if not fingerprint:
            raise ValueError("pin-certificate trust policy requires a certificate fingerprint")
        session.mount('https://', FingerprintAdapter(fingerprint))

    # Self-signed bridge certificate; the chain is not checked
    session.verify = False
    requests.packages.urllib3.disable_warnings(InsecureRequestWarning)
    return session


class BridgeSession:
    """Authenticated connection to one bridge.

    A session is bound to a single BridgeIdentity. Every request goes to the
    first advertised address; the other addresses are never tried. If the
    bridge moves, discover it again and establish a new session.
    """

    def __init__(self, identity: BridgeIdentity, credential: str,
                 transport: requests.Session, timeout: float = REQUEST_TIMEOUT):
        self.identity = identity
        self.credential = credential
        self.transport = transport
        self.timeout = timeout
        self.inventory = LightInventory()

    @classmethod
    def establish(cls, identity: BridgeIdentity, credential: str | None,
                  trust: TrustPolicy = TrustPolicy.SKIP_VALIDATION,
                  fingerprint: str | None = None,
                  timeout: float = REQUEST_TIMEOUT) -> 'BridgeSession':
        """Create a session for a discovered bridge.

        The credential is checked before any transport is built, so a missing
        credential fails without touching the network.

        Raises:
            InvalidCredentialError: If the credential is missing or blank
        """
        if not credential or not credential.strip():
            raise InvalidCredentialError("Bridge credential is missing or empty")
        transport = create_transport(trust, fingerprint)
        logger.debug("Session established for %s:%d (trust=%s)",
                     identity.host, identity.port, trust.value)
        return cls(identity, credential.strip(), transport, timeout)

    @property
    def base_url(self) -> str:
        return f"https://{self.identity.host}:{self.identity.port}/api/{self.credential}"

    @property
    def lights(self) -> tuple[Light, ...]:
        return self.inventory.snapshot()

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def request(self, method: str, path: str, payload: dict | None = None) -> requests.Response:
        """Make a request to the bridge API.

        Args:
            method: HTTP method
            path: Resource path below /api/{credential}/, e.g. 'lights/1/state'
            payload: JSON body, or None for no body

        Returns:
            The raw response, for status codes below 400

        Raises:
            TransportError: On connection, timeout or TLS failure, or an error status
        """
        url = f"{self.base_url}/{path}"
        logger.debug("%s https://%s:%d/api/<credential>/%s",
                     method, self.identity.host, self.identity.port, path)
        try:
            response = self.transport.request(method, url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise TransportError(
                f"{method} {path} returned HTTP {response.status_code}",
                response=response,
            )
        return response

    def fetch_lights(self) -> tuple[Light, ...]:
        """Fetch all lights and replace the cached inventory.

        Lights are ordered by their numeric bridge ID, so inventory index i
        is the light with the (i+1)-th lowest ID. If the fetch fails the
        previous inventory is kept unchanged.

        Raises:
            TransportError: If the bridge cannot be reached
            DecodeError: If the body is not a lights mapping
        """
        response = self.request('GET', 'lights')
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Lights response is not valid JSON: {e}") from e

        if isinstance(data, list):
            errors = [item['error'] for item in data
                      if isinstance(item, dict) and isinstance(item.get('error'), dict)]
            if errors:
                raise BridgeResponseError(errors)
        if not isinstance(data, dict):
            raise DecodeError(f"Expected lights mapping, got {type(data).__name__}")

        try:
            lights = [Light.from_dict(data[key], bridge_id=key)
                      for key in sorted(data, key=_bridge_id_sort_key)]
        except (ValueError, TypeError, AttributeError) as e:
            raise DecodeError(f"Malformed light record: {e}") from e

        self.inventory.replace(lights)
        logger.info("Fetched %d lights from %s", len(lights), self.identity.host)
        return self.inventory.snapshot()

    def set_power(self, index: int, on: bool) -> requests.Response:
        """Turn the light at an inventory index on or off."""
        return set_power(self, index, on)

    def apply_state(self, index: int, desired: DesiredState) -> requests.Response:
        """Send a partial state update to the light at an inventory index."""
        return apply_state(self, index, desired)


def _bridge_id_sort_key(key: str) -> tuple:
    """Numeric IDs first in numeric order, anything else after them."""
    return (0, int(key), '') if key.isdigit() else (1, 0, key)
