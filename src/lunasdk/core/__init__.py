"""Core building blocks of lunasdk.

- **LunaSDKConfig / config**: Pydantic Settings configuration (LUNASDK_* env vars)
- **Text2ImageModel / Image2ImageModel**: abstract provider models
- **provider_registry**: resolves ``"provider:model-id"`` references to models
- **Call option and warning types**: shared by all providers
- **Errors**: the lunasdk exception hierarchy

Architecture Overview
---------------------
1. **Configuration Layer** (config.py): credentials, endpoints and timeouts.
2. **Model Layer** (image_models.py, types.py): the interface every provider
   model implements, plus the registry used to discover providers.
3. **Provider Layer** (``lunasdk.providers``): Replicate and Stable Diffusion
   implementations of that interface.
4. **Generation Layer** (``lunasdk.generation``): batched fan-out over any model.
"""

from lunasdk.core.config import LunaSDKConfig, config, configure_logging
from lunasdk.core.errors import (
    GenerationAbortedError,
    LoadSettingError,
    LunaSDKError,
    ProviderAPIError,
)
from lunasdk.core.image_models import (
    Image2ImageModel,
    ImageModelBase,
    ProviderRegistry,
    Text2ImageModel,
    provider_registry,
)
from lunasdk.core.types import (
    CallWarning,
    Image2ImageCallOptions,
    ImageSize,
    JSONValue,
    ModelCallResult,
    ProviderOptions,
    Text2ImageCallOptions,
)

__all__ = [
    "CallWarning",
    "GenerationAbortedError",
    "Image2ImageCallOptions",
    "Image2ImageModel",
    "ImageModelBase",
    "ImageSize",
    "JSONValue",
    "LoadSettingError",
    "LunaSDKConfig",
    "LunaSDKError",
    "ModelCallResult",
    "ProviderAPIError",
    "ProviderOptions",
    "ProviderRegistry",
    "Text2ImageCallOptions",
    "Text2ImageModel",
    "config",
    "configure_logging",
    "provider_registry",
]
