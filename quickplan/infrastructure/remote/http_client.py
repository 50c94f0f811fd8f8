"""
HTTP client for the QuickPlan backend.

Wraps httpx.AsyncClient and maps every exchange onto the envelope rules:
a 2xx answer is parsed into ApiResponse[T], a non-2xx answer raises
HttpStatusError, and a request without any answer raises TransportError.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from quickplan.core.config import Settings
from quickplan.core.exceptions import ApiError, HttpStatusError, TransportError
from quickplan.core.logger import setup_logger
from quickplan.models.api import ApiResponse

logger = setup_logger(__name__)

T = TypeVar("T")


def bearer(token: str) -> dict[str, str]:
    """Authorization header for an access token."""
    return {"Authorization": f"Bearer {token}"}


class ApiHttpClient:
    """Thin JSON client bound to the backend base URL."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if transport is None and settings.HTTP_MAX_RETRIES:
            transport = httpx.AsyncHTTPTransport(retries=settings.HTTP_MAX_RETRIES)
        self._client = httpx.AsyncClient(
            base_url=settings.API_BASE_URL,
            timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        data_type: Any = None,
        *,
        json: Optional[BaseModel] = None,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse[Any]:
        """
        Perform one request and parse the envelope.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            data_type: Type of the envelope's data field (None: any payload is accepted and left unparsed)
            json: Request body model (serialized with wire aliases)
            params: Query parameters
            headers: Extra headers

        Returns:
            Parsed envelope (success may still be False)

        Raises:
            HttpStatusError: Non-2xx status
            TransportError: No response received
            ApiError: 2xx body that is not a valid envelope
        """
        body = json.model_dump(mode="json", by_alias=True, exclude_none=True) if json is not None else None
        try:
            response = await self._client.request(method, path, json=body, params=params, headers=headers)
        except httpx.TransportError as e:
            logger.error(f"{method} {path} got no response: {e!r}")
            raise TransportError(f"Network error: {e}") from e

        if not response.is_success:
            raise HttpStatusError(
                self._failure_message(response),
                status_code=response.status_code,
            )

        envelope_type = ApiResponse[Any if data_type is None else data_type]
        try:
            return envelope_type.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise ApiError(
                f"Malformed response from {path}",
                status_code=response.status_code,
                details=str(e),
            ) from e

    @staticmethod
    def _failure_message(response: httpx.Response) -> str:
        """Server message if the body is an envelope, otherwise a generic one."""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return f"operation failed: HTTP {response.status_code}"
