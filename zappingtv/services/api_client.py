"""Zapping API client for device activation, play tokens and the channel catalog"""

import logging
import uuid
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import ApiConfig, get_config
from .models import (
    Channel,
    ChannelListResponse,
    CheckLinkedResponse,
    GetCodeResponse,
    PlayTokenResponse,
)

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class ZappingAPIError(Exception):
    """Error talking to the Zapping API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ActivationError(ZappingAPIError):
    """The activation code was not linked to an account."""


class ZappingAPIClient:
    """
    Zapping API client.

    Every call is a form-encoded POST identified by a per-client device
    UUID. Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        device_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            config: API settings (defaults to the loaded configuration)
            device_id: Device UUID sent with activation calls (random if omitted)
            transport: Custom httpx transport, mainly for tests
        """
        self.config = config or get_config().api
        self.endpoints = self.config.endpoints
        self.device_id = device_id or str(uuid.uuid4())
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                headers={
                    "User-Agent": self.config.user_agent,
                    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
                },
                timeout=httpx.Timeout(self.config.timeout),
                verify=self.config.verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._http_client

    async def _post(
        self,
        url: str,
        data: dict[str, str],
        model: type[ResponseModel],
        action: str,
    ) -> ResponseModel:
        """POST a form and validate the JSON response against ``model``."""
        client = await self._ensure_client()

        try:
            response = await client.post(url, data=data)
            logger.debug(f"{action}: HTTP {response.status_code}")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_detail(e.response)
            logger.error(f"{action} failed - HTTP {status}: {detail}")
            raise ZappingAPIError(f"{action} failed - HTTP {status}: {detail}", status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"{action} failed - network error: {e}")
            raise ZappingAPIError(f"Network error: could not connect to {url}") from e

        try:
            payload: Any = response.json()
        except ValueError as e:
            logger.error(f"{action} returned invalid JSON")
            raise ZappingAPIError(f"{action} returned an invalid response") from e

        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.error(f"{action} returned unexpected data: {e}")
            raise ZappingAPIError(f"{action} returned unexpected data") from e

    async def get_activation_code(self) -> str:
        """Request a code the user enters on the activation page."""
        logger.info(f"Requesting activation code for device {self.device_id}")
        result = await self._post(
            self.endpoints.activation_get_code,
            {"uuid": self.device_id, "acquisition": "Android TV"},
            GetCodeResponse,
            "Get activation code",
        )
        logger.info(f"Activation code received: {result.data.code}")
        return result.data.code

    async def check_code_linked(self, code: str) -> str:
        """
        Check whether ``code`` was activated and return the device token.

        Raises:
            ActivationError: The code is not linked or no token came back
        """
        logger.info(f"Checking if code {code} is linked")
        result = await self._post(
            self.endpoints.activation_check_linked,
            {"code": code},
            CheckLinkedResponse,
            "Check activation code",
        )

        if result.status is not True:
            logger.error(f"Code linking failed. Status: {result.status}")
            raise ActivationError(
                f"Code linking failed: API returned status '{result.status}'. "
                "Make sure you activated the code on the website."
            )
        if result.data is None or not result.data.data:
            logger.error("No token received in response")
            raise ActivationError("No token received from server")

        logger.info("Code successfully linked, token received")
        return result.data.data

    async def get_play_token(self, token: str) -> str:
        """Exchange the device token for a short-lived play token."""
        result = await self._post(
            self.endpoints.play_token_login,
            {"token": token, "uuid": self.device_id},
            PlayTokenResponse,
            "Play token login",
        )
        return result.data.play_token

    async def send_heartbeat(self, play_token: str) -> None:
        """Keep the playback session identified by ``play_token`` alive."""
        client = await self._ensure_client()
        url = self.endpoints.heartbeat
        try:
            response = await client.post(
                url,
                data={"playtoken": play_token, "uuid": self.device_id, "deviceInfo": "{}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ZappingAPIError(f"Heartbeat failed - HTTP {status}", status_code=status) from e
        except httpx.RequestError as e:
            raise ZappingAPIError(f"Network error: could not connect to {url}") from e

    async def get_channel_list(self, token: str) -> list[Channel]:
        """Fetch the channel catalog, sorted by channel number."""
        result = await self._post(
            self.endpoints.channel_list,
            {"quality": "auto", "hevc": "0", "is3g": "0", "token": token},
            ChannelListResponse,
            "Get channel list",
        )
        channels = sorted(result.data.values(), key=lambda channel: channel.number)
        logger.info(f"Loaded {len(channels)} channels")
        return channels


def _error_detail(response: httpx.Response) -> str:
    """Server-provided error message, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or "Unknown server error"
