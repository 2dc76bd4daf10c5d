"""Light commands addressed by inventory index.

Commands take a zero-based index into the session's last-fetched light
inventory and translate it to the bridge's one-based light ID. The index is
checked against the cached inventory only; if lights were removed on the
bridge since the last fetch, a command may still reach the wrong light or
none at all.

Responses are returned as-is. The bridge reports success or failure per
field in its response array, and interpreting that is up to the caller.
"""

import logging
from typing import TYPE_CHECKING

import requests

from core.errors import InvalidIndexError
from models.types import DesiredState

if TYPE_CHECKING:
    from core.session import BridgeSession

logger = logging.getLogger(__name__)


def state_path(session: 'BridgeSession', index: int) -> str:
    """Return the bridge state path for an inventory index.

    Args:
        session: Session whose inventory the index refers to
        index: Zero-based inventory index

    Returns:
        Path of the form 'lights/{index+1}/state'

    Raises:
        InvalidIndexError: If index is not an int or falls outside the inventory
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidIndexError(f"Light index must be an integer, got {index!r}")

    light_id = index + 1
    count = len(session.inventory)
    if index < 0 or light_id > count:
        raise InvalidIndexError(
            f"Light index {index} out of range (inventory has {count} lights)"
        )
    return f"lights/{light_id}/state"


def apply_state(session: 'BridgeSession', index: int, desired: DesiredState) -> requests.Response:
    """PUT a partial state to one light.

    Only the fields set on desired are sent, as a single JSON object. The
    bridge may accept some fields and reject others.

    Raises:
        InvalidIndexError: If the index is outside the cached inventory
        TransportError: If the request fails
    """
    path = state_path(session, index)
    payload = desired.to_payload()
    logger.debug("Applying %s to %s", payload, path)
    return session.request('PUT', path, payload)


def set_power(session: 'BridgeSession', index: int, on: bool) -> requests.Response:
    """Turn one light on or off, leaving every other field alone."""
    return apply_state(session, index, DesiredState(on=on))
