"""Base classes and registry for provider image models.

This module provides the foundation for supporting multiple hosted image
generation backends in lunasdk. Each backend (Replicate, Stable Diffusion, ...)
exposes one model class per generation mode that implements a common interface,
so the batched generation functions can drive any of them the same way.

Model Types
-----------
- **text-to-image**: generate images from a text prompt (``Text2ImageModel``)
- **image-to-image**: transform an input image guided by a prompt
  (``Image2ImageModel``)

Every model declares ``max_images_per_call``. The generation functions split a
request for ``n`` images into as many ``do_generate`` calls as that cap
requires, so a model only ever sees requests it can serve in one call.

Usage Example
-------------
Resolving models through the registry:

    >>> import lunasdk.providers  # registers the built-in providers
    >>> from lunasdk.core.image_models import provider_registry
    >>>
    >>> provider_registry.list_available()
    ['replicate', 'stable-diffusion']
    >>>
    >>> model = provider_registry.text2image("replicate:black-forest-labs/flux-dev")
    >>> model.provider, model.model_id
    ('replicate', 'black-forest-labs/flux-dev')

Writing a custom model:

    >>> class EchoModel(Text2ImageModel):
    ...     provider = "echo"
    ...
    ...     async def do_generate(self, options):
    ...         return ModelCallResult(images=[b"..."] * options.n)

See Also
--------
- lunasdk.generation.text2image: batched text-to-image entry point
- lunasdk.generation.image2image: batched image-to-image entry point
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Literal

from .types import Image2ImageCallOptions, ModelCallResult, Text2ImageCallOptions

logger = logging.getLogger(__name__)


class ImageModelBase(ABC):
    """Common attributes of every provider image model.

    Attributes
    ----------
    specification_version : str
        Version of the model interface implemented ("v1")
    provider : str
        Provider name, e.g. "replicate"
    model_id : str
        Provider-specific model identifier
    max_images_per_call : int | None
        Maximum images one ``do_generate`` call may return. ``None`` is
        treated as 1 by the generation functions.
    """

    specification_version: Literal["v1"] = "v1"
    provider: str = "unknown"
    model_type: Literal["text-to-image", "image-to-image"] = "text-to-image"

    def __init__(self, model_id: str) -> None:
        self.model_id = model_id

    @property
    def max_images_per_call(self) -> int | None:
        return None

    def get_model_info(self) -> dict[str, Any]:
        """Get information about this model.

        Returns
        -------
        dict[str, Any]
            Dictionary containing model metadata
        """
        return {
            "provider": self.provider,
            "model_id": self.model_id,
            "model_type": self.model_type,
            "specification_version": self.specification_version,
            "max_images_per_call": self.max_images_per_call,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider!r}, model_id={self.model_id!r})"


class Text2ImageModel(ImageModelBase):
    """Abstract base class for text-to-image provider models."""

    model_type = "text-to-image"

    @abstractmethod
    async def do_generate(self, options: Text2ImageCallOptions) -> ModelCallResult:
        """Run one provider call for ``options.n`` images.

        Raises
        ------
        Exception
            Any provider failure. The batched generation functions propagate
            it to the caller unchanged.
        """


class Image2ImageModel(ImageModelBase):
    """Abstract base class for image-to-image provider models."""

    model_type = "image-to-image"

    @abstractmethod
    async def do_generate(self, options: Image2ImageCallOptions) -> ModelCallResult:
        """Run one provider call transforming ``options.image`` into ``options.n`` images."""


ProviderFactory = Callable[[], Any]


class ProviderRegistry:
    """Registry mapping provider names to provider factories.

    Factories are called lazily, the first time a model of that provider is
    requested, so credentials are only resolved for providers actually used.

    Usage
    -----
        >>> provider_registry.register("replicate", create_replicate)
        >>> model = provider_registry.text2image("replicate:black-forest-labs/flux-dev")

    Notes
    -----
    - Model references are ``"<provider>:<model id>"`` and are split on the
      first colon only, so Replicate ``owner/name:version`` ids survive intact.
    - The registry is global and shared across the application.
    """

    def __init__(self) -> None:
        self._factories: dict[str, ProviderFactory] = {}
        self._providers: dict[str, Any] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a provider factory under ``name``.

        Re-registering a name replaces the previous factory and drops any
        provider instance it had created.
        """
        if name in self._factories:
            logger.warning(f"Image provider '{name}' is already registered, overwriting")

        self._factories[name] = factory
        self._providers.pop(name, None)
        logger.info(f"Registered image provider: {name}")

    def get(self, name: str) -> Any:
        """Return the provider instance for ``name``, creating it on first use.

        Raises
        ------
        KeyError
            If no provider with that name is registered
        """
        if name not in self._factories:
            available = ", ".join(self.list_available())
            raise KeyError(f"Image provider '{name}' not found. Available providers: {available}")

        if name not in self._providers:
            self._providers[name] = self._factories[name]()
            logger.info(f"Instantiated image provider: {name}")
        return self._providers[name]

    def list_available(self) -> list[str]:
        return list(self._factories.keys())

    def text2image(self, model_ref: str, settings: Any = None) -> Text2ImageModel:
        """Create a text-to-image model from a ``"provider:model-id"`` reference."""
        provider, model_id = self._split_ref(model_ref)
        factory = getattr(self.get(provider), "text_to_image", None)
        if factory is None:
            raise ValueError(f"Image provider '{provider}' does not support text-to-image")
        return factory(model_id, settings)

    def image2image(self, model_ref: str, settings: Any = None) -> Image2ImageModel:
        """Create an image-to-image model from a ``"provider:model-id"`` reference."""
        provider, model_id = self._split_ref(model_ref)
        factory = getattr(self.get(provider), "image2image", None)
        if factory is None:
            raise ValueError(f"Image provider '{provider}' does not support image-to-image")
        return factory(model_id, settings)

    @staticmethod
    def _split_ref(model_ref: str) -> tuple[str, str]:
        provider, sep, model_id = model_ref.partition(":")
        if not sep or not provider or not model_id:
            raise ValueError(
                f"Invalid model reference '{model_ref}', expected '<provider>:<model id>'"
            )
        return provider, model_id


# Global provider registry instance
provider_registry = ProviderRegistry()
