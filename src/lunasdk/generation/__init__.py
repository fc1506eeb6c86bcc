"""Batched image generation entry points.

- :func:`generate_text2image` / :func:`generate_image2image` split a request
  for ``n`` images across provider calls and merge the results in order.
- :class:`GenerationResult` / :class:`GeneratedImage` hold the merged output.
"""

from lunasdk.generation.batching import dispatch_batched, split_call_image_counts
from lunasdk.generation.image2image import generate_image2image
from lunasdk.generation.result import GeneratedImage, GenerationResult, GenerationWarning
from lunasdk.generation.text2image import generate_text2image

__all__ = [
    "GeneratedImage",
    "GenerationResult",
    "GenerationWarning",
    "dispatch_batched",
    "generate_image2image",
    "generate_text2image",
    "split_call_image_counts",
]
