"""Replicate provider factory."""

from __future__ import annotations

import logging

import httpx

from lunasdk.core.config import LunaSDKConfig
from lunasdk.core.config import config as default_config
from lunasdk.providers.utils import load_setting

from .model import ReplicateModelConfig, ReplicateText2ImageModel
from .settings import ReplicateModelId, ReplicateText2ImageSettings

logger = logging.getLogger(__name__)


class ReplicateProvider:
    """Creates Replicate models sharing one set of connection details.

    The API token is resolved each time a model is created, so a provider
    built at import time picks up credentials configured later.
    """

    name = "replicate"

    def __init__(
        self,
        api_token: str | None = None,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        config: LunaSDKConfig | None = None,
    ) -> None:
        self._api_token = api_token
        self._base_url = base_url
        self._headers = dict(headers or {})
        self._http_client = http_client
        self._config = config

    def _load_api_token(self, cfg: LunaSDKConfig) -> str:
        return load_setting(
            self._api_token,
            config_value=cfg.replicate_api_token,
            setting_name="api_token",
            environment_variable_name="REPLICATE_API_TOKEN",
            description="Replicate API token",
        )

    def text_to_image(
        self,
        model_id: ReplicateModelId,
        settings: ReplicateText2ImageSettings | None = None,
    ) -> ReplicateText2ImageModel:
        """Create a text-to-image model for Replicate.

        Raises:
            LoadSettingError: If no API token is configured.
        """
        cfg = self._config or default_config
        model = ReplicateText2ImageModel(
            model_id,
            settings or ReplicateText2ImageSettings(),
            ReplicateModelConfig(
                api_token=self._load_api_token(cfg),
                provider=self.name,
                base_url=self._base_url or cfg.replicate_base_url,
                headers=dict(self._headers),
                http_client=self._http_client,
                timeout=cfg.request_timeout,
                poll_interval=cfg.replicate_poll_interval,
                wait_seconds=cfg.replicate_wait_seconds,
                max_wait_seconds=cfg.replicate_max_wait_seconds,
            ),
        )
        logger.info(f"Created Replicate text-to-image model: {model_id}")
        return model

    # Alias for text_to_image for convenience.
    text2image = text_to_image


def create_replicate(
    api_token: str | None = None,
    base_url: str | None = None,
    headers: dict[str, str] | None = None,
    http_client: httpx.AsyncClient | None = None,
    config: LunaSDKConfig | None = None,
) -> ReplicateProvider:
    """Create a Replicate provider.

    Args:
        api_token: API token; defaults to ``config.replicate_api_token``
            (``LUNASDK_REPLICATE_API_TOKEN`` or ``REPLICATE_API_TOKEN``).
        base_url: API root; defaults to ``config.replicate_base_url``.
        headers: Headers added to every request.
        http_client: Shared ``httpx.AsyncClient`` for connection pooling.
        config: Configuration to read defaults from; the global config when omitted.
    """
    return ReplicateProvider(
        api_token=api_token,
        base_url=base_url,
        headers=headers,
        http_client=http_client,
        config=config,
    )


# Default instance for easy usage
replicate = create_replicate()
