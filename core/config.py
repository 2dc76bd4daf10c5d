"""Configuration management and 1Password integration.

This module handles:
- Constants for discovery and request timeouts
- Loading/saving the user config file
- Credential lookup (environment, 1Password, user config file)
- Trust policy settings for the bridge's self-signed certificate
"""

import json
import logging
import os
import subprocess
from pathlib import Path

from models.types import AuthCredentials

logger = logging.getLogger(__name__)

# User configuration file location
USER_CONFIG_FILE = Path.home() / '.hue_control' / 'config.json'

# Bridge advertisement and request defaults
SERVICE_TYPE = '_hue._tcp'
SERVICE_DOMAIN = 'local.'
DISCOVERY_TIMEOUT = 10.0
REQUEST_TIMEOUT = 5

CREDENTIAL_ENV_VAR = 'HUE_USERNAME'


def is_op_available() -> bool:
    """Check if 1Password CLI is available."""
    try:
        result = subprocess.run(['op', '--version'],
                              capture_output=True,
                              timeout=2)
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False


def load_user_config() -> dict:
    """Load the user config file.

    Returns:
        Parsed config dict, or an empty dict if the file is missing or unreadable
    """
    if not USER_CONFIG_FILE.exists():
        return {}
    try:
        with open(USER_CONFIG_FILE, 'r') as f:
            config = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Failed to load config from %s: %s", USER_CONFIG_FILE, e)
        return {}
    return config if isinstance(config, dict) else {}


def save_user_config(api_token: str, trust_policy: str | None = None,
                     cert_fingerprint: str | None = None):
    """Save the credential and trust settings to the user config file.

    Existing keys are preserved. The file is created with 600 permissions
    (user read/write only).

    Args:
        api_token: Bridge-issued username
        trust_policy: Trust policy name, see core.session.TrustPolicy
        cert_fingerprint: SHA-256 fingerprint used when pinning the certificate
    """
    USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    config = load_user_config()
    config['api_token'] = api_token
    if trust_policy is not None:
        config['trust_policy'] = trust_policy
    if cert_fingerprint is not None:
        config['cert_fingerprint'] = cert_fingerprint

    with open(USER_CONFIG_FILE, 'w') as f:
        json.dump(config, f, indent=2)

    os.chmod(USER_CONFIG_FILE, 0o600)


def load_from_1password() -> str | None:
    """Load the API token from a 1Password vault.

    Reads vault and item names from environment variables:
    - HUE_1PASSWORD_VAULT (default: "Private")
    - HUE_1PASSWORD_ITEM (default: "Hue")

    Returns:
        The "API-token" field of the item, or None if not available
    """
    if not is_op_available():
        return None

    vault = os.getenv('HUE_1PASSWORD_VAULT', 'Private')
    item = os.getenv('HUE_1PASSWORD_ITEM', 'Hue')

    try:
        result = subprocess.run(
            ['op', 'item', 'get', item,
             '--vault', vault,
             '--fields', 'API-token',
             '--reveal'],
            capture_output=True,
            text=True,
            timeout=10
        )
    except subprocess.TimeoutExpired as e:
        logger.warning("Failed to load from 1Password: %s", e)
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def get_credential() -> tuple[str | None, str]:
    """Get the bridge credential using priority system.

    Priority order:
    1. HUE_USERNAME environment variable
    2. 1Password (if available and configured)
    3. Local config file (~/.hue_control/config.json)

    Returns:
        Tuple of (credential, source description). The credential is None
        when no source has one.
    """
    token = os.getenv(CREDENTIAL_ENV_VAR, '').strip()
    if token:
        return token, f'environment (${CREDENTIAL_ENV_VAR})'

    token = load_from_1password()
    if token:
        return token, '1Password'

    token = load_user_config().get('api_token')
    if isinstance(token, str) and token.strip():
        return token.strip(), str(USER_CONFIG_FILE)

    return None, 'not found'


def get_trust_settings() -> tuple[str, str | None]:
    """Get the trust policy name and certificate fingerprint.

    Environment variables HUE_TRUST_POLICY and HUE_CERT_FINGERPRINT take
    priority over the user config file.

    Returns:
        Tuple of (policy name, fingerprint or None). The policy defaults to
        'skip-validation'.
    """
    config = load_user_config()
    policy = os.getenv('HUE_TRUST_POLICY') or config.get('trust_policy') or 'skip-validation'
    fingerprint = os.getenv('HUE_CERT_FINGERPRINT') or config.get('cert_fingerprint')
    return policy, fingerprint


def load_auth() -> AuthCredentials | None:
    """Load everything needed to open a session in one dict.

    Returns:
        Dict with 'api_token', 'trust_policy' and 'cert_fingerprint', or
        None when no credential is configured
    """
    token, _ = get_credential()
    if not token:
        return None
    policy, fingerprint = get_trust_settings()
    return {
        'api_token': token,
        'trust_policy': policy,
        'cert_fingerprint': fingerprint,
    }
