"""
Configuration for the SwitchBot client
Credentials come from arguments or the environment; the API URL may also be
stored per working directory in a .switchbot file
"""

import os
import json
import logging
from typing import Optional, Dict, Tuple

from .client import DEFAULT_API_URL
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SWITCHBOT_CONFIG_FILE = '.switchbot'

ENV_TOKEN = 'SWITCHBOT_TOKEN'
ENV_SECRET = 'SWITCHBOT_SECRET'
ENV_API_URL = 'SWITCHBOT_API_URL'


def get_config_path() -> str:
    """Get path to the config file in current directory"""
    return os.path.join(os.getcwd(), SWITCHBOT_CONFIG_FILE)


def _load_config() -> Dict:
    """Load config from file, return empty dict if missing or unreadable"""
    config_path = get_config_path()

    if not os.path.exists(config_path):
        return {}

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
        return {}

    return config if isinstance(config, dict) else {}


def _save_config(config: Dict):
    """Save config to file"""
    config_path = get_config_path()
    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)


def save_api_url(api_url: str):
    """
    Save API URL to the local config file

    Args:
        api_url: API URL to save
    """
    config = _load_config()
    config['api_url'] = api_url
    _save_config(config)


def get_api_url() -> Optional[str]:
    """
    Get API URL from the local config file

    Returns:
        API URL if found, None otherwise
    """
    return _load_config().get('api_url')


def clear_api_url():
    """Remove API URL from the local config file"""
    config = _load_config()
    if 'api_url' in config:
        del config['api_url']
        _save_config(config)


def resolve_api_url(api_url: Optional[str] = None) -> str:
    """
    Pick the API URL.

    Priority: explicit argument > SWITCHBOT_API_URL > .switchbot file > default
    """
    if api_url:
        return api_url

    env_api_url = os.environ.get(ENV_API_URL)
    if env_api_url:
        return env_api_url

    return get_api_url() or DEFAULT_API_URL


def resolve_credentials(
    token: Optional[str] = None,
    secret: Optional[str] = None
) -> Tuple[str, str]:
    """
    Pick token and secret from arguments, falling back to SWITCHBOT_TOKEN and
    SWITCHBOT_SECRET. Credentials are never read from or written to disk.

    Raises:
        ConfigurationError: If either value cannot be found
    """
    token = token or os.environ.get(ENV_TOKEN)
    secret = secret or os.environ.get(ENV_SECRET)

    if not token:
        raise ConfigurationError(f"No token given. Use --token or set {ENV_TOKEN}")
    if not secret:
        raise ConfigurationError(f"No secret given. Use --secret or set {ENV_SECRET}")

    return token, secret
