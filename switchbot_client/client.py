"""
SwitchBot API client (blocking)
List devices, read device status and send device commands over the v1.1 API
"""

import logging
import requests
from typing import Any, Dict, Optional

from .errors import ConfigurationError, RemoteError, TransportError
from .signing import compute_auth_headers

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.switch-bot.com'
API_VERSION = 'v1.1'

# Envelope statusCode for a successful call
STATUS_SUCCESS = 100


def devices_path() -> str:
    return f"/{API_VERSION}/devices"


def device_status_path(device_id: str) -> str:
    return f"/{API_VERSION}/devices/{device_id}/status"


def device_commands_path(device_id: str) -> str:
    return f"/{API_VERSION}/devices/{device_id}/commands"


def check_credentials(token: Optional[str], secret: Optional[str]):
    """Raise ConfigurationError if either credential is missing or empty"""
    if not token:
        raise ConfigurationError("SwitchBot token is required")
    if not secret:
        raise ConfigurationError("SwitchBot secret is required")


def check_device_id(device_id: str):
    if not device_id:
        raise ValueError("device_id must be a non-empty string")


def command_payload(command: str, parameter: Any) -> Dict[str, Any]:
    """JSON body for POST /devices/{id}/commands"""
    return {
        "command": command,
        "parameter": parameter,
        "commandType": "command"
    }


def extract_body(payload: Any, url: str) -> Any:
    """
    Return the "body" field of a response envelope.

    The envelope looks like {"statusCode": 100, "body": {...}, "message": "success"}.
    A statusCode other than 100 is logged but the body is still returned as-is.
    """
    if not isinstance(payload, dict):
        return None

    status_code = payload.get("statusCode")
    if status_code is not None and status_code != STATUS_SUCCESS:
        logger.warning(
            "SwitchBot API returned statusCode %s for %s: %s",
            status_code, url, payload.get("message")
        )
    return payload.get("body")


def remote_error(status_code: int, text: str, payload: Any, url: str) -> RemoteError:
    """Build a RemoteError from a non-2xx response"""
    if payload is None:
        return RemoteError(status_code, body=text, url=url)

    message = payload.get("message") if isinstance(payload, dict) else None
    return RemoteError(status_code, body=payload, message=message, url=url)


class SwitchBotClient:
    """
    Blocking client for the SwitchBot cloud API.

    One requests.Session is created per client and reused for every call.
    Each call is signed with a freshly computed header set.

    Args:
        token: Account token from the SwitchBot app
        secret: Account secret key from the SwitchBot app
        api_url: Base URL of the API (default: https://api.switch-bot.com)
        timeout: Optional request timeout in seconds, forwarded to requests
        session: Optional pre-built session; the client will not close it

    Raises:
        ConfigurationError: If token or secret is empty
    """

    def __init__(
        self,
        token: str,
        secret: str,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        check_credentials(token, secret)
        self._token = token
        self._secret = secret
        self.api_url = (api_url or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout

        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.headers.update({"Authorization": self._token})
        self._session = session

    @property
    def token(self) -> str:
        return self._token

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Close the underlying session if this client created it"""
        if self._owns_session:
            self._session.close()

    def auth_headers(self) -> Dict[str, str]:
        """Fresh sign / nonce / t headers for one request"""
        return compute_auth_headers(self._token, self._secret)

    def list_devices(self) -> Any:
        """
        Get the device list.

        Returns:
            The "body" of the response, typically
            {"deviceList": [...], "infraredRemoteList": [...]}

        Raises:
            RemoteError: On a non-2xx response
            TransportError: If the API could not be reached
        """
        return self._request("GET", devices_path())

    def get_device_status(self, device_id: str) -> Any:
        """
        Get the status of a device.

        Args:
            device_id: Device ID as returned by list_devices

        Returns:
            The "body" of the response
        """
        check_device_id(device_id)
        return self._request("GET", device_status_path(device_id))

    def set_device_status(self, device_id: str, command: str, parameter: Any = "default") -> Any:
        """
        Send a command to a device.

        Args:
            device_id: Device ID as returned by list_devices
            command: Command name, e.g. "turnOn"
            parameter: Command parameter (default: "default")

        Returns:
            The "body" of the response
        """
        check_device_id(device_id)
        return self._request(
            "POST",
            device_commands_path(device_id),
            json_data=command_payload(command, parameter)
        )

    def _request(self, method: str, path: str, json_data: Optional[dict] = None) -> Any:
        url = f"{self.api_url}{path}"
        headers = self.auth_headers()
        if not self._owns_session:
            # A caller's session must not keep the token after we are done
            headers["Authorization"] = self._token
        if json_data is not None:
            headers["Content-Type"] = "application/json"

        logger.debug("%s %s", method, path)
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                json=json_data,
                timeout=self.timeout,
                allow_redirects=False
            )
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"Failed to connect to SwitchBot API: {e}", url=url) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not 200 <= response.status_code < 300:
            logger.warning("%s %s returned HTTP %s", method, url, response.status_code)
            raise remote_error(response.status_code, response.text, payload, url)

        return extract_body(payload, url)
