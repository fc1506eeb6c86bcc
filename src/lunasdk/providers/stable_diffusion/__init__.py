"""Stable Diffusion provider: Stability-style REST image generation."""

from lunasdk.providers.stable_diffusion.client import (
    ClientResponse,
    StableDiffusionClient,
    parse_generation_response,
)
from lunasdk.providers.stable_diffusion.model import (
    StableDiffusionImage2ImageModel,
    StableDiffusionModelConfig,
    StableDiffusionText2ImageModel,
)
from lunasdk.providers.stable_diffusion.provider import (
    StableDiffusionProvider,
    create_stable_diffusion,
    stable_diffusion,
)
from lunasdk.providers.stable_diffusion.settings import (
    StableDiffusionImage2ImageSettings,
    StableDiffusionImageSize,
    StableDiffusionModelId,
    StableDiffusionText2ImageSettings,
)

__all__ = [
    "ClientResponse",
    "StableDiffusionClient",
    "StableDiffusionImage2ImageModel",
    "StableDiffusionImage2ImageSettings",
    "StableDiffusionImageSize",
    "StableDiffusionModelConfig",
    "StableDiffusionModelId",
    "StableDiffusionProvider",
    "StableDiffusionText2ImageModel",
    "StableDiffusionText2ImageSettings",
    "create_stable_diffusion",
    "parse_generation_response",
    "stable_diffusion",
]
