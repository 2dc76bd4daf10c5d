"""Utility functions for Hue Control.

This module contains helper functions used across the CLI:
- get_session: Discover the bridge and open a session with fetched lights
- report_state_result: Print the bridge's per-field result for a state change
- bridge_errors: Extract error descriptions from a bridge result array
- format_light: One-line summary of a light for listings
- similarity_score: Fuzzy string matching for command typo suggestions
"""

import logging

import click
import requests

from models.types import BridgeIdentity, Light

logger = logging.getLogger(__name__)


def bridge_errors(result) -> list[str]:
    """Extract error descriptions from a bridge result array.

    The v1 API answers state changes with a list of single-key objects,
    either {"success": {...}} or {"error": {"type": ..., "address": ...,
    "description": ...}}, one per field.

    Args:
        result: Decoded JSON response body

    Returns:
        List of error descriptions, empty if every field succeeded
    """
    if not isinstance(result, list):
        return []
    errors = []
    for item in result:
        if isinstance(item, dict) and isinstance(item.get('error'), dict):
            error = item['error']
            address = error.get('address')
            description = error.get('description', 'unknown error')
            errors.append(f"{address}: {description}" if address else description)
    return errors


def report_state_result(response: requests.Response, success_message: str) -> bool:
    """Echo the outcome of a state PUT.

    Returns:
        True if the bridge accepted every field, False otherwise
    """
    try:
        result = response.json()
    except ValueError:
        click.secho(f"✗ Bridge returned a non-JSON response: {response.text[:200]}", fg='red')
        return False

    errors = bridge_errors(result)
    if errors:
        click.secho("✗ Bridge rejected part of the change:", fg='red')
        for error in errors:
            click.echo(f"  • {error}")
        return False

    click.secho(f"✓ {success_message}", fg='green')
    return True


def format_light(index: int, light: Light) -> str:
    """Format a light as a single listing line."""
    state = light.state
    status = "ON" if state.on else "OFF"
    brightness = f", bri {state.bri}" if state.on and state.bri is not None else ""
    unreachable = " (unreachable)" if state.reachable is False else ""
    return f"  {index:>3}  {light.name}: {status}{brightness}{unreachable}"


def get_session(bridge_ip: str | None = None, timeout: float | None = None):
    """Discover the bridge, open a session and fetch its lights.

    This helper reduces boilerplate in commands that talk to the bridge.
    Errors are printed and turned into a non-zero exit.

    Args:
        bridge_ip: Skip discovery and use this address on port 443
        timeout: Discovery timeout in seconds

    Returns:
        A BridgeSession with a populated inventory
    """
    # Import here to keep models free of import cycles with core
    from core.config import load_auth, DISCOVERY_TIMEOUT
    from core.discovery import discover_bridge
    from core.errors import HueError, InvalidCredentialError
    from core.session import BridgeSession, TrustPolicy

    try:
        auth = load_auth()
        if not auth:
            raise InvalidCredentialError(
                "No bridge credential found. Set HUE_USERNAME or run 'configure'."
            )

        trust = TrustPolicy(auth['trust_policy'])

        if bridge_ip:
            identity = BridgeIdentity.manual(bridge_ip)
        else:
            click.echo("Searching for Hue Bridge...")
            identity = discover_bridge(timeout=timeout or DISCOVERY_TIMEOUT)

        session = BridgeSession.establish(
            identity,
            auth['api_token'],
            trust=trust,
            fingerprint=auth['cert_fingerprint'],
        )
        session.fetch_lights()
        return session

    except HueError as e:
        logger.debug("Session setup failed", exc_info=True)
        click.secho(f"✗ {type(e).__name__}: {e}", fg='red', err=True)
        raise click.exceptions.Exit(1)
    except ValueError as e:
        click.secho(f"✗ Invalid configuration: {e}", fg='red', err=True)
        raise click.exceptions.Exit(1)


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0
