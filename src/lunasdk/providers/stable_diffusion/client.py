"""Async HTTP client for Stability-style image generation APIs.

The client posts JSON to ``/v1/generation/image-to-image`` and
``/v1/generation/text-to-image`` and normalizes the response shapes seen in
the wild into a flat list of image strings:

- Stability: ``{"artifacts": [{"base64": "..."}]}``
- Generic: ``{"images": ["..."]}``
- OpenAI-style: ``{"data": [{"b64_json": "..."} | {"url": "..."}]}``

Each string is base64 image data (possibly a ``data:`` URL) or an http URL.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from lunasdk.core.errors import ProviderAPIError
from lunasdk.providers.utils import combine_headers

logger = logging.getLogger(__name__)


class _Artifact(BaseModel):
    model_config = ConfigDict(extra="ignore")

    base64: str


class _DataItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    b64_json: str | None = None
    url: str | None = None


@dataclass
class ClientResponse:
    """Normalized outcome of one generation request."""

    success: bool
    images: list[str] = field(default_factory=list)
    error: str | None = None


def parse_generation_response(data: Any) -> ClientResponse:
    """Normalize a provider JSON body into a :class:`ClientResponse`.

    Bodies that are not one of the known shapes, or whose items fail
    validation, give an unsuccessful response instead of raising.
    """
    if not isinstance(data, dict):
        return ClientResponse(success=False, error="Unknown response format")

    try:
        if isinstance(data.get("artifacts"), list):
            artifacts = [_Artifact.model_validate(a) for a in data["artifacts"]]
            return ClientResponse(success=True, images=[a.base64 for a in artifacts])

        if isinstance(data.get("images"), list):
            return ClientResponse(success=True, images=[str(i) for i in data["images"]])

        if isinstance(data.get("data"), list):
            items = [_DataItem.model_validate(item) for item in data["data"]]
            return ClientResponse(success=True, images=[i.b64_json or i.url or "" for i in items])
    except ValidationError as e:
        logger.warning(f"Stable Diffusion response failed validation: {e}")
        return ClientResponse(
            success=False, error=f"Invalid response format: {e.error_count()} invalid field(s)"
        )

    return ClientResponse(success=False, error="Unknown response format")


class StableDiffusionClient:
    """Async client for a Stability-style REST API.

    Args:
        api_key: Bearer credential.
        base_url: API root, ``https://api.stability.ai`` by default.
        headers: Headers added to every request.
        http_client: Shared ``httpx.AsyncClient``; a client is opened per
            request when omitted.
        timeout: Per-request timeout in seconds.
    """

    provider = "stable-diffusion"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.stability.ai",
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._headers = headers or {}
        self._http_client = http_client
        self._timeout = timeout

    async def _post(
        self, path: str, body: dict[str, Any], headers: dict[str, str] | None
    ) -> ClientResponse:
        url = f"{self._base_url}{path}"
        request_headers = combine_headers(
            {"Content-Type": "application/json", "Authorization": f"Bearer {self._api_key}"},
            self._headers,
            headers,
        )
        payload = {key: value for key, value in body.items() if value is not None}

        if self._http_client is not None:
            response = await self._http_client.post(url, json=payload, headers=request_headers)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload, headers=request_headers)

        if response.is_error:
            raise ProviderAPIError(self.provider, response.status_code, response.text)
        return parse_generation_response(response.json())

    async def generate_image2image(
        self, request: dict[str, Any], headers: dict[str, str] | None = None
    ) -> ClientResponse:
        """POST an image-to-image request.

        Raises:
            ProviderAPIError: On a non-success HTTP status.
            httpx.HTTPError: On transport failures.
            ValueError: If a success response body is not JSON.
        """
        image = request.get("image") or ""
        logger.info(
            f"Stable Diffusion image-to-image request: {self._base_url} "
            f"(model={request.get('model')}, image=[base64 image {len(image)} chars])"
        )
        return await self._post("/v1/generation/image-to-image", request, headers)

    async def text_to_image(
        self, request: dict[str, Any], headers: dict[str, str] | None = None
    ) -> ClientResponse:
        """POST a text-to-image request. Same error behavior as ``generate_image2image``."""
        logger.info(
            f"Stable Diffusion text-to-image request: {self._base_url} "
            f"(model={request.get('model')})"
        )
        return await self._post("/v1/generation/text-to-image", request, headers)
