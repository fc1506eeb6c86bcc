"""Configuration management for lunasdk.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the LUNASDK_ prefix,
allowing provider credentials and endpoints to change without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Keyword arguments passed to ``LunaSDKConfig(...)``
2. Environment variables (LUNASDK_* prefix)
3. .env file in the working directory
4. Default values defined in LunaSDKConfig

The provider credentials also accept the unprefixed variable names used by the
upstream provider SDKs, so an existing ``REPLICATE_API_TOKEN`` keeps working.

Example .env file:
    LUNASDK_REPLICATE_API_TOKEN=r8_xxx
    LUNASDK_STABLE_DIFFUSION_API_KEY=sk-xxx
    LUNASDK_REQUEST_TIMEOUT=120
    LUNASDK_LOG_LEVEL=DEBUG

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Provider factories fall back to it whenever no explicit credentials or
``config`` argument are given.

Usage Example
-------------
    from lunasdk.core.config import config

    print(config.replicate_base_url)
    print(config.request_timeout)
"""

import logging
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LunaSDKConfig(BaseSettings):
    """Main configuration for lunasdk.

    Attributes
    ----------
    Replicate:
        replicate_api_token : str | None
            API token sent as a Bearer credential
        replicate_base_url : str
            Root URL of the Replicate HTTP API
        replicate_poll_interval : float
            Seconds between prediction status polls
        replicate_wait_seconds : int
            Seconds the API may block on prediction creation (``Prefer: wait``)
        replicate_max_wait_seconds : float
            Seconds to poll a prediction before cancelling it

    Stable Diffusion:
        stable_diffusion_api_key : str | None
            API key sent as a Bearer credential
        stable_diffusion_base_url : str
            Root URL of the Stability-style generation API

    HTTP:
        request_timeout : float
            Timeout in seconds for a single HTTP request

    Logging:
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Level applied by ``lunasdk.configure_logging()``

    Examples
    --------
    Create a custom configuration for tests:

        >>> cfg = LunaSDKConfig(replicate_api_token="r8_test", _env_file=None)
        >>> cfg.replicate_base_url
        'https://api.replicate.com'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LUNASDK_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Replicate
    replicate_api_token: str | None = Field(
        default=None,
        description="Replicate API token",
        validation_alias=AliasChoices("LUNASDK_REPLICATE_API_TOKEN", "REPLICATE_API_TOKEN"),
    )
    replicate_base_url: str = Field(
        default="https://api.replicate.com",
        description="Replicate API base URL",
    )
    replicate_poll_interval: float = Field(
        default=1.0,
        description="Seconds between prediction status polls",
        gt=0,
    )
    replicate_wait_seconds: int = Field(
        default=60,
        description="Seconds to block on prediction creation (Prefer: wait)",
        ge=1,
        le=60,
    )
    replicate_max_wait_seconds: float = Field(
        default=600.0,
        description="Seconds to poll a prediction before cancelling it",
        gt=0,
    )

    # Stable Diffusion
    stable_diffusion_api_key: str | None = Field(
        default=None,
        description="Stable Diffusion API key",
        validation_alias=AliasChoices(
            "LUNASDK_STABLE_DIFFUSION_API_KEY", "STABLE_DIFFUSION_API_KEY"
        ),
    )
    stable_diffusion_base_url: str = Field(
        default="https://api.stability.ai",
        description="Stable Diffusion API base URL",
    )

    # HTTP
    request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for a single provider HTTP request",
        gt=0,
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level applied by configure_logging()",
    )


# Global configuration instance, loaded from LUNASDK_* environment variables and .env.
config = LunaSDKConfig()


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the ``lunasdk`` logger.

    Args:
        level: Log level name; defaults to ``config.log_level``.
    """
    logger = logging.getLogger("lunasdk")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level or config.log_level)
