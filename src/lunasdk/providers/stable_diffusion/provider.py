"""Stable Diffusion provider factory."""

from __future__ import annotations

import logging

import httpx

from lunasdk.core.config import LunaSDKConfig
from lunasdk.core.config import config as default_config
from lunasdk.providers.utils import load_setting

from .model import (
    StableDiffusionImage2ImageModel,
    StableDiffusionModelConfig,
    StableDiffusionText2ImageModel,
)
from .settings import (
    StableDiffusionImage2ImageSettings,
    StableDiffusionModelId,
    StableDiffusionText2ImageSettings,
)

logger = logging.getLogger(__name__)


class StableDiffusionProvider:
    """Creates Stable Diffusion models sharing one set of connection details."""

    name = "stable-diffusion"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        config: LunaSDKConfig | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._headers = dict(headers or {})
        self._http_client = http_client
        self._config = config

    def _model_config(self) -> StableDiffusionModelConfig:
        cfg = self._config or default_config
        return StableDiffusionModelConfig(
            api_key=load_setting(
                self._api_key,
                config_value=cfg.stable_diffusion_api_key,
                setting_name="api_key",
                environment_variable_name="STABLE_DIFFUSION_API_KEY",
                description="Stable Diffusion API key",
            ),
            provider=self.name,
            base_url=self._base_url or cfg.stable_diffusion_base_url,
            headers=dict(self._headers),
            http_client=self._http_client,
            timeout=cfg.request_timeout,
        )

    def image2image(
        self,
        model_id: StableDiffusionModelId,
        settings: StableDiffusionImage2ImageSettings | None = None,
    ) -> StableDiffusionImage2ImageModel:
        """Create an image-to-image model.

        Raises:
            LoadSettingError: If no API key is configured.
        """
        model = StableDiffusionImage2ImageModel(
            model_id, settings or StableDiffusionImage2ImageSettings(), self._model_config()
        )
        logger.info(f"Created Stable Diffusion image-to-image model: {model_id}")
        return model

    def text_to_image(
        self,
        model_id: StableDiffusionModelId,
        settings: StableDiffusionText2ImageSettings | None = None,
    ) -> StableDiffusionText2ImageModel:
        """Create a text-to-image model.

        Raises:
            LoadSettingError: If no API key is configured.
        """
        model = StableDiffusionText2ImageModel(
            model_id, settings or StableDiffusionText2ImageSettings(), self._model_config()
        )
        logger.info(f"Created Stable Diffusion text-to-image model: {model_id}")
        return model

    text2image = text_to_image


def create_stable_diffusion(
    api_key: str | None = None,
    base_url: str | None = None,
    headers: dict[str, str] | None = None,
    http_client: httpx.AsyncClient | None = None,
    config: LunaSDKConfig | None = None,
) -> StableDiffusionProvider:
    """Create a Stable Diffusion provider.

    Args:
        api_key: API key; defaults to ``config.stable_diffusion_api_key``
            (``LUNASDK_STABLE_DIFFUSION_API_KEY`` or ``STABLE_DIFFUSION_API_KEY``).
        base_url: API root; defaults to ``config.stable_diffusion_base_url``.
        headers: Headers added to every request.
        http_client: Shared ``httpx.AsyncClient`` for connection pooling.
        config: Configuration to read defaults from; the global config when omitted.
    """
    return StableDiffusionProvider(
        api_key=api_key,
        base_url=base_url,
        headers=headers,
        http_client=http_client,
        config=config,
    )


# Default instance for easy usage
stable_diffusion = create_stable_diffusion()
