"""Stable Diffusion image-to-image and text-to-image models.

Unlike the Replicate model, these models report provider failures as
``"other"`` warnings with no images instead of raising: a missing API key, an
HTTP error, a transport error, an unrecognized or non-JSON response body and
undecodable image data all come back as an empty :class:`ModelCallResult`
carrying the reason. Only an abort propagates as an exception.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from lunasdk.core.errors import ProviderAPIError
from lunasdk.core.image_models import Image2ImageModel, Text2ImageModel
from lunasdk.core.types import (
    CallWarning,
    Image2ImageCallOptions,
    ModelCallResult,
    Text2ImageCallOptions,
)
from lunasdk.providers.utils import (
    await_with_abort,
    convert_base64_to_bytes,
    convert_bytes_to_base64,
)

from .client import ClientResponse, StableDiffusionClient
from .settings import (
    StableDiffusionImage2ImageSettings,
    StableDiffusionModelId,
    StableDiffusionText2ImageSettings,
)

logger = logging.getLogger(__name__)

PROVIDER_OPTIONS_KEY = "stable-diffusion"


@dataclass
class StableDiffusionModelConfig:
    """Connection details handed to a model by :func:`create_stable_diffusion`."""

    api_key: str
    provider: str = "stable-diffusion"
    base_url: str = "https://api.stability.ai"
    headers: dict[str, str] = field(default_factory=dict)
    http_client: httpx.AsyncClient | None = None
    timeout: float = 120.0


def encode_input_image(image: str | bytes) -> str:
    """Prepare an input image for the JSON request body.

    Bytes become base64; plain base64 text gets a ``data:image/png;base64,``
    prefix; ``data:`` URLs and http(s) URLs are sent as they are.
    """
    if isinstance(image, (bytes, bytearray)):
        return convert_bytes_to_base64(bytes(image))
    if image.startswith("data:") or image.startswith("http"):
        return image
    return f"data:image/png;base64,{image}"


def decode_output_images(images: list[str]) -> list[str | bytes]:
    """Decode returned base64 images to bytes; http URLs stay strings."""
    decoded: list[str | bytes] = []
    for image in images:
        if image.startswith("http"):
            decoded.append(image)
        else:
            decoded.append(convert_base64_to_bytes(image))
    return decoded


class _StableDiffusionModelMixin:
    """Request plumbing shared by both Stable Diffusion model types."""

    _config: StableDiffusionModelConfig
    model_id: str

    @property
    def provider(self) -> str:
        return self._config.provider

    @property
    def max_images_per_call(self) -> int:
        return self.settings.max_images_per_call or 1

    def _client(self) -> StableDiffusionClient:
        return StableDiffusionClient(
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            headers=self._config.headers,
            http_client=self._config.http_client,
            timeout=self._config.timeout,
        )

    async def _call(
        self,
        send: Callable[[StableDiffusionClient, dict[str, str] | None], Awaitable[ClientResponse]],
        headers: dict[str, str] | None,
        abort_signal: asyncio.Event | None,
    ) -> ModelCallResult:
        warnings: list[CallWarning] = []

        if not self._config.api_key:
            warnings.append(
                CallWarning(type="other", message="Stable Diffusion API key is not set")
            )
            return ModelCallResult(images=[], warnings=warnings)

        # ValueError covers a non-JSON success body
        try:
            result: ClientResponse = await await_with_abort(
                send(self._client(), headers), abort_signal
            )
        except (ProviderAPIError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Stable Diffusion image generation failed: {e}", exc_info=True)
            warnings.append(CallWarning(type="other", message=str(e)))
            return ModelCallResult(images=[], warnings=warnings)

        if not result.success:
            warnings.append(
                CallWarning(type="other", message=result.error or "Image generation failed")
            )
            return ModelCallResult(images=[], warnings=warnings)

        if not result.images:
            warnings.append(CallWarning(type="other", message="No images generated"))
            return ModelCallResult(images=[], warnings=warnings)

        try:
            images = decode_output_images(result.images)
        except ValueError as e:
            logger.error(f"Stable Diffusion returned undecodable image data: {e}", exc_info=True)
            warnings.append(CallWarning(type="other", message=f"Invalid image data: {e}"))
            return ModelCallResult(images=[], warnings=warnings)

        return ModelCallResult(images=images, warnings=warnings)


class StableDiffusionImage2ImageModel(_StableDiffusionModelMixin, Image2ImageModel):
    """Image-to-image generation against a Stability-style API.

    Unset call options fall back to the model settings
    (strength 0.8, 20 steps, guidance 7.5, 512x512 by default).
    """

    def __init__(
        self,
        model_id: StableDiffusionModelId,
        settings: StableDiffusionImage2ImageSettings,
        config: StableDiffusionModelConfig,
    ) -> None:
        super().__init__(model_id)
        self.settings = settings
        self._config = config

    def build_request(self, options: Image2ImageCallOptions) -> dict[str, Any]:
        s = self.settings
        request: dict[str, Any] = {
            "model": self.model_id,
            "prompt": options.prompt,
            "image": encode_input_image(options.image),
            "negative_prompt": options.negative_prompt,
            "num_images": options.n,
            "strength": options.strength if options.strength is not None else s.default_strength,
            "num_inference_steps": options.steps if options.steps is not None else s.default_steps,
            "guidance_scale": (
                options.guidance_scale
                if options.guidance_scale is not None
                else s.default_guidance_scale
            ),
            "seed": options.seed,
            "width": options.size.width if options.size else s.default_size.width,
            "height": options.size.height if options.size else s.default_size.height,
        }
        request.update(options.provider_options.get(PROVIDER_OPTIONS_KEY, {}))
        return request

    async def do_generate(self, options: Image2ImageCallOptions) -> ModelCallResult:
        request = self.build_request(options)
        return await self._call(
            lambda client, headers: client.generate_image2image(request, headers=headers),
            options.headers,
            options.abort_signal,
        )


class StableDiffusionText2ImageModel(_StableDiffusionModelMixin, Text2ImageModel):
    """Text-to-image generation against a Stability-style API.

    ``aspect_ratio`` and ``output_format`` have no field in this request
    format; they are ignored with an ``"unsupported-setting"`` warning.
    """

    def __init__(
        self,
        model_id: StableDiffusionModelId,
        settings: StableDiffusionText2ImageSettings,
        config: StableDiffusionModelConfig,
    ) -> None:
        super().__init__(model_id)
        self.settings = settings
        self._config = config

    def build_request(self, options: Text2ImageCallOptions) -> dict[str, Any]:
        s = self.settings
        request: dict[str, Any] = {
            "model": self.model_id,
            "prompt": options.prompt,
            "negative_prompt": options.negative_prompt,
            "num_images": options.n,
            "num_inference_steps": options.steps if options.steps is not None else s.default_steps,
            "guidance_scale": (
                options.guidance_scale
                if options.guidance_scale is not None
                else s.default_guidance_scale
            ),
            "seed": options.seed,
            "width": options.size.width if options.size else s.default_size.width,
            "height": options.size.height if options.size else s.default_size.height,
        }
        request.update(options.provider_options.get(PROVIDER_OPTIONS_KEY, {}))
        return request

    async def do_generate(self, options: Text2ImageCallOptions) -> ModelCallResult:
        unsupported = [
            CallWarning(
                type="unsupported-setting",
                message=f"{name} is not supported by this model and was ignored",
                setting=name,
            )
            for name, value in (
                ("aspect_ratio", options.aspect_ratio),
                ("output_format", options.output_format),
            )
            if value is not None
        ]

        request = self.build_request(options)
        result = await self._call(
            lambda client, headers: client.text_to_image(request, headers=headers),
            options.headers,
            options.abort_signal,
        )
        result.warnings[:0] = unsupported
        return result
