"""
SwitchBot Client Library
Provides signed access to the SwitchBot cloud API v1.1: device listing, device status and device commands
"""

from .client import SwitchBotClient, DEFAULT_API_URL
from .async_client import AsyncSwitchBotClient
from .callbacks import CallbackClient
from .signing import compute_auth_headers, sign
from .errors import SwitchBotError, ConfigurationError, TransportError, RemoteError

__all__ = [
    'SwitchBotClient',
    'AsyncSwitchBotClient',
    'CallbackClient',
    'DEFAULT_API_URL',
    'compute_auth_headers',
    'sign',
    'SwitchBotError',
    'ConfigurationError',
    'TransportError',
    'RemoteError'
]
