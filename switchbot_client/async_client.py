"""
SwitchBot API client (asyncio)
Same operations as SwitchBotClient, awaited over an httpx.AsyncClient
"""

import logging
import httpx
from typing import Any, Dict, Optional

from .client import (
    DEFAULT_API_URL,
    check_credentials,
    check_device_id,
    command_payload,
    device_commands_path,
    device_status_path,
    devices_path,
    extract_body,
    remote_error,
)
from .errors import TransportError
from .signing import compute_auth_headers

logger = logging.getLogger(__name__)


class AsyncSwitchBotClient:
    """
    Awaitable client for the SwitchBot cloud API.

    Usage:
        async with AsyncSwitchBotClient(token, secret) as client:
            devices = await client.list_devices()

    Args:
        token: Account token
        secret: Account secret key
        api_url: Base URL of the API
        timeout: Optional timeout in seconds; httpx defaults apply when omitted
        http_client: Optional pre-built httpx.AsyncClient; the client will not close it
    """

    def __init__(
        self,
        token: str,
        secret: str,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        check_credentials(token, secret)
        self._token = token
        self._secret = secret
        self.api_url = (api_url or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout

        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(headers={"Authorization": self._token})
        self._http_client = http_client

    @property
    def token(self) -> str:
        return self._token

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        """Close the underlying httpx client if this client created it"""
        if self._owns_client:
            await self._http_client.aclose()

    def auth_headers(self) -> Dict[str, str]:
        return compute_auth_headers(self._token, self._secret)

    async def list_devices(self) -> Any:
        """Get the device list; returns the response "body" """
        return await self._request("GET", devices_path())

    async def get_device_status(self, device_id: str) -> Any:
        """Get the status of a device; returns the response "body" """
        check_device_id(device_id)
        return await self._request("GET", device_status_path(device_id))

    async def set_device_status(self, device_id: str, command: str, parameter: Any = "default") -> Any:
        """Send a command to a device; returns the response "body" """
        check_device_id(device_id)
        return await self._request(
            "POST",
            device_commands_path(device_id),
            json_data=command_payload(command, parameter)
        )

    async def _request(self, method: str, path: str, json_data: Optional[dict] = None) -> Any:
        url = f"{self.api_url}{path}"
        headers = self.auth_headers()
        if not self._owns_client:
            # A caller's client must not keep the token after we are done
            headers["Authorization"] = self._token
        if json_data is not None:
            headers["Content-Type"] = "application/json"

        kwargs = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        logger.debug("%s %s", method, path)
        try:
            response = await self._http_client.request(
                method,
                url,
                headers=headers,
                json=json_data,
                follow_redirects=False,
                **kwargs
            )
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"Failed to connect to SwitchBot API: {e}", url=url) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            logger.warning("%s %s returned HTTP %s", method, url, response.status_code)
            raise remote_error(response.status_code, response.text, payload, url)

        return extract_body(payload, url)
