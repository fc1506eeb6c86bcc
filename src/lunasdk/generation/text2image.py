"""Batched text-to-image generation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from lunasdk.core.image_models import Text2ImageModel
from lunasdk.core.types import (
    ImageSize,
    ModelCallResult,
    OutputFormat,
    ProviderOptions,
    Text2ImageCallOptions,
)

from .batching import dispatch_batched
from .result import GenerationResult

logger = logging.getLogger(__name__)


async def generate_text2image(
    *,
    model: Text2ImageModel,
    prompt: str,
    negative_prompt: str | None = None,
    n: int = 1,
    seed: int | None = None,
    steps: int | None = None,
    guidance_scale: float | None = None,
    size: ImageSize | None = None,
    aspect_ratio: str | None = None,
    output_format: OutputFormat | None = None,
    provider_options: ProviderOptions | None = None,
    abort_signal: asyncio.Event | None = None,
    headers: dict[str, str] | None = None,
) -> GenerationResult:
    """Generate ``n`` images from a text prompt.

    The request is split into ``ceil(n / model.max_images_per_call)`` provider
    calls that run concurrently. Every call receives the same prompt, seed,
    sampling settings, headers and abort signal; only the per-call image count
    differs.

    Args:
        model: Text-to-image model to call.
        prompt: Text prompt.
        negative_prompt: Elements to steer away from.
        n: Number of images to generate.
        seed: Random seed, passed unchanged to every call.
        steps: Number of inference steps.
        guidance_scale: Prompt adherence.
        size: Output dimensions.
        aspect_ratio: Output aspect ratio such as ``"16:9"``.
        output_format: ``"jpg"``, ``"png"`` or ``"webp"``.
        provider_options: Provider-specific options keyed by provider name.
        abort_signal: Setting this event aborts all in-flight calls.
        headers: Extra HTTP headers for every provider request.

    Returns:
        Images and warnings of all calls, in call order.

    Raises:
        Exception: The first provider failure, unchanged. No partial result
            is returned.

    Example:
        >>> model = replicate.text_to_image("black-forest-labs/flux-dev")
        >>> result = await generate_text2image(model=model, prompt="a full moon", n=4)
        >>> result.image.url
    """
    options = Text2ImageCallOptions(
        prompt=prompt,
        negative_prompt=negative_prompt,
        seed=seed,
        steps=steps,
        guidance_scale=guidance_scale,
        size=size,
        aspect_ratio=aspect_ratio,
        output_format=output_format,
        provider_options=provider_options if provider_options is not None else {},
        headers=headers,
        abort_signal=abort_signal,
    )
    logger.info(f"Text-to-image request: {n} image(s) with {model!r}")

    async def do_call(call_image_count: int) -> ModelCallResult:
        return await model.do_generate(replace(options, n=call_image_count))

    return await dispatch_batched(n, model.max_images_per_call, do_call)
