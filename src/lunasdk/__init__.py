"""lunasdk - batched text-to-image and image-to-image generation over hosted providers."""

__version__ = "0.3.0"

from lunasdk.core import (
    CallWarning,
    GenerationAbortedError,
    Image2ImageModel,
    ImageSize,
    LoadSettingError,
    LunaSDKConfig,
    LunaSDKError,
    ProviderAPIError,
    Text2ImageModel,
    config,
    configure_logging,
    provider_registry,
)
from lunasdk.generation import (
    GeneratedImage,
    GenerationResult,
    generate_image2image,
    generate_text2image,
)

# Importing the providers package registers them with provider_registry
from lunasdk.providers.replicate import create_replicate, replicate
from lunasdk.providers.stable_diffusion import create_stable_diffusion, stable_diffusion

__all__ = [
    "CallWarning",
    "GeneratedImage",
    "GenerationAbortedError",
    "GenerationResult",
    "Image2ImageModel",
    "ImageSize",
    "LoadSettingError",
    "LunaSDKConfig",
    "LunaSDKError",
    "ProviderAPIError",
    "Text2ImageModel",
    "config",
    "configure_logging",
    "create_replicate",
    "create_stable_diffusion",
    "generate_image2image",
    "generate_text2image",
    "provider_registry",
    "replicate",
    "stable_diffusion",
]
