"""Batched generation dispatch shared by text-to-image and image-to-image.

A request for ``n`` images is split into the smallest number of provider calls
that respects the model's ``max_images_per_call``:

    n=7, max=3  ->  [3, 3, 1]
    n=6, max=3  ->  [3, 3]      (an even split keeps a full last batch)
    n=1, max=None -> [1]        (an undeclared cap means one image per call)

All calls run concurrently via ``asyncio.gather``. Results are collected by
call position, not completion order, so the merged image list is always call 0
images, then call 1 images, and so on. The first failing call fails the whole
request; sibling calls are not cancelled here and nothing is retried.

The number of images actually returned is not checked against ``n``.
Providers are allowed to under-deliver, and callers see exactly what came back.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable

from lunasdk.core.types import CallWarning, ModelCallResult

from .result import GeneratedImage, GenerationResult

logger = logging.getLogger(__name__)


def split_call_image_counts(n: int, max_images_per_call: int | None) -> list[int]:
    """Return the number of images each provider call should request.

    Args:
        n: Total images requested. Not validated.
        max_images_per_call: Per-call cap declared by the model; ``None`` means 1.

    Returns:
        One entry per call. Every entry but the last equals the cap; the last
        is the remainder, or the full cap when ``n`` divides evenly.
    """
    max_per_call = max_images_per_call or 1
    call_count = math.ceil(n / max_per_call)

    counts = []
    for i in range(call_count):
        if i < call_count - 1:
            counts.append(max_per_call)
        else:
            remainder = n % max_per_call
            counts.append(remainder if remainder != 0 else max_per_call)
    return counts


async def dispatch_batched(
    n: int,
    max_images_per_call: int | None,
    do_call: Callable[[int], Awaitable[ModelCallResult]],
) -> GenerationResult:
    """Fan a request out over provider calls and merge the results in call order.

    Args:
        n: Total images requested.
        max_images_per_call: Per-call cap declared by the model.
        do_call: Issues one provider call for the given image count. Every
            other parameter is bound by the caller and identical across calls.

    Returns:
        The merged :class:`GenerationResult`.

    Raises:
        Exception: Whatever the first failing provider call raised, unchanged.
    """
    call_image_counts = split_call_image_counts(n, max_images_per_call)
    logger.debug(
        f"Dispatching {len(call_image_counts)} provider call(s) for {n} image(s): "
        f"{call_image_counts}"
    )

    results: list[ModelCallResult] = await asyncio.gather(
        *(do_call(count) for count in call_image_counts)
    )

    images: list[GeneratedImage] = []
    warnings: list[CallWarning] = []
    for result in results:
        images.extend(GeneratedImage.from_provider_output(image) for image in result.images)
        warnings.extend(result.warnings)

    if len(images) != n:
        logger.debug(f"Providers returned {len(images)} image(s) for a request of {n}")
    for warning in warnings:
        logger.warning(f"Provider warning ({warning.type}): {warning.message}")

    return GenerationResult(images=images, warnings=warnings)
