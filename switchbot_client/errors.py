"""
Exceptions raised by the SwitchBot client
"""

from typing import Any, Optional


class SwitchBotError(Exception):
    """Base class for every error raised by this package"""


class ConfigurationError(SwitchBotError):
    """Raised when the client is built without a token or secret"""


class TransportError(SwitchBotError):
    """
    The request never produced an HTTP response (connection refused, DNS,
    timeout, aborted connection). The transport exception is kept as __cause__.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class RemoteError(SwitchBotError):
    """
    The API answered with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response
        body: Parsed JSON payload, or the raw text when it is not JSON
        message: The envelope "message" field when the API sent one
        url: Requested URL
    """

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        message: Optional[str] = None,
        url: Optional[str] = None
    ):
        self.status_code = status_code
        self.body = body
        self.message = message
        self.url = url
        detail = message or (body if isinstance(body, str) else None) or "Unknown error"
        super().__init__(f"SwitchBot API error (HTTP {status_code}): {detail}")
