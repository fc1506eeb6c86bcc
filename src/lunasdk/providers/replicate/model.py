"""Replicate text-to-image model."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from lunasdk.core.image_models import Text2ImageModel
from lunasdk.core.types import CallWarning, ModelCallResult, Text2ImageCallOptions

from .client import ReplicateClient
from .errors import extract_image_urls
from .settings import ReplicateModelId, ReplicateText2ImageSettings

logger = logging.getLogger(__name__)

PROVIDER_OPTIONS_KEY = "replicate"


@dataclass
class ReplicateModelConfig:
    """Connection details handed to a model by :func:`create_replicate`."""

    api_token: str
    provider: str = "replicate"
    base_url: str = "https://api.replicate.com"
    headers: dict[str, str] = field(default_factory=dict)
    http_client: httpx.AsyncClient | None = None
    timeout: float = 120.0
    poll_interval: float = 1.0
    wait_seconds: int = 60
    max_wait_seconds: float = 600.0


class ReplicateText2ImageModel(Text2ImageModel):
    """Text-to-image generation through a Replicate hosted model.

    Each ``do_generate`` call runs one prediction with ``num_outputs=n``.
    Replicate returns hosted output URLs, so the generated images are
    URL-backed.

    Examples
    --------
        >>> model = replicate.text_to_image(
        ...     "black-forest-labs/flux-dev",
        ...     ReplicateText2ImageSettings(output_format="jpg", max_images_per_call=1),
        ... )
        >>> result = await generate_text2image(model=model, prompt="harvest moon", n=4)
    """

    def __init__(
        self,
        model_id: ReplicateModelId,
        settings: ReplicateText2ImageSettings,
        config: ReplicateModelConfig,
    ) -> None:
        super().__init__(model_id)
        self.settings = settings
        self._config = config
        self._client = ReplicateClient(
            api_token=config.api_token,
            base_url=config.base_url,
            headers=config.headers,
            http_client=config.http_client,
            timeout=config.timeout,
            poll_interval=config.poll_interval,
            wait_seconds=config.wait_seconds,
            max_wait=config.max_wait_seconds,
        )

    @property
    def provider(self) -> str:
        return self._config.provider

    @property
    def max_images_per_call(self) -> int:
        return self.settings.max_images_per_call or 1

    def build_input(self, options: Text2ImageCallOptions) -> dict[str, Any]:
        """Translate call options into the prediction ``input`` object.

        Call options win over model settings, unset values are left out, and
        ``provider_options["replicate"]`` is merged last so it can set any
        model-specific input field.
        """
        s = self.settings
        size = options.size or s.size

        safety_checker = s.safety_checker
        values: dict[str, Any] = {
            "prompt": options.prompt,
            "negative_prompt": options.negative_prompt,
            "num_outputs": options.n,
            "seed": options.seed if options.seed is not None else s.seed,
            "num_inference_steps": options.steps if options.steps is not None else s.steps,
            "guidance_scale": (
                options.guidance_scale if options.guidance_scale is not None else s.guidance_scale
            ),
            "aspect_ratio": options.aspect_ratio or s.aspect_ratio,
            "output_format": options.output_format or s.output_format,
            "width": size.width if size else None,
            "height": size.height if size else None,
            "disable_safety_checker": (not safety_checker) if safety_checker is not None else None,
        }
        payload = {key: value for key, value in values.items() if value is not None}
        payload.update(options.provider_options.get(PROVIDER_OPTIONS_KEY, {}))
        return payload

    async def do_generate(self, options: Text2ImageCallOptions) -> ModelCallResult:
        payload = self.build_input(options)
        logger.debug(f"Replicate prediction for {self.model_id}: {len(payload)} input field(s)")

        output = await self._client.run(
            self.model_id,
            payload,
            version=self.settings.version,
            headers=options.headers,
            abort_signal=options.abort_signal,
        )

        warnings: list[CallWarning] = []
        images = extract_image_urls(output)
        if not images:
            warnings.append(CallWarning(type="other", message="No images returned"))

        return ModelCallResult(images=list(images), warnings=warnings)
