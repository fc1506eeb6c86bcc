"""Batched image-to-image generation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from lunasdk.core.image_models import Image2ImageModel
from lunasdk.core.types import Image2ImageCallOptions, ImageSize, ModelCallResult, ProviderOptions

from .batching import dispatch_batched
from .result import GenerationResult

logger = logging.getLogger(__name__)


async def generate_image2image(
    *,
    model: Image2ImageModel,
    prompt: str,
    image: str | bytes,
    negative_prompt: str | None = None,
    n: int = 1,
    strength: float | None = None,
    steps: int | None = None,
    guidance_scale: float | None = None,
    seed: int | None = None,
    size: ImageSize | None = None,
    provider_options: ProviderOptions | None = None,
    abort_signal: asyncio.Event | None = None,
    headers: dict[str, str] | None = None,
) -> GenerationResult:
    """Transform ``image`` into ``n`` new images guided by ``prompt``.

    Splitting, concurrency and result ordering are the same as
    :func:`~lunasdk.generation.text2image.generate_text2image`; the input
    image is sent unchanged with every call.

    Args:
        model: Image-to-image model to call.
        prompt: Text prompt describing the transformation.
        image: Input image as base64 text, URL or raw bytes.
        negative_prompt: Elements to steer away from.
        n: Number of images to generate.
        strength: How far the output may drift from the input (0.0-1.0).
        steps: Number of inference steps.
        guidance_scale: Prompt adherence.
        seed: Random seed, passed unchanged to every call.
        size: Output dimensions.
        provider_options: Provider-specific options keyed by provider name.
        abort_signal: Setting this event aborts all in-flight calls.
        headers: Extra HTTP headers for every provider request.

    Returns:
        Images and warnings of all calls, in call order.

    Raises:
        Exception: The first provider failure, unchanged.
    """
    options = Image2ImageCallOptions(
        prompt=prompt,
        image=image,
        negative_prompt=negative_prompt,
        strength=strength,
        steps=steps,
        guidance_scale=guidance_scale,
        seed=seed,
        size=size,
        provider_options=provider_options if provider_options is not None else {},
        headers=headers,
        abort_signal=abort_signal,
    )
    logger.info(f"Image-to-image request: {n} image(s) with {model!r}")

    async def do_call(call_image_count: int) -> ModelCallResult:
        return await model.do_generate(replace(options, n=call_image_count))

    return await dispatch_batched(n, model.max_images_per_call, do_call)
