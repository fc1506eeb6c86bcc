"""Tests for lunasdk.core.config: configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the LUNASDK_ prefix.
- Unprefixed provider credential aliases.
- Pydantic validation constraints (wait seconds range, log level literals).
- configure_logging().
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from lunasdk.core.config import LunaSDKConfig, configure_logging


@pytest.mark.usefixtures("clean_env")
class TestConfigDefaults:
    """Verify that LunaSDKConfig provides sensible defaults."""

    def test_no_credentials_by_default(self):
        cfg = LunaSDKConfig(_env_file=None)
        assert cfg.replicate_api_token is None
        assert cfg.stable_diffusion_api_key is None

    def test_default_base_urls(self):
        cfg = LunaSDKConfig(_env_file=None)
        assert cfg.replicate_base_url == "https://api.replicate.com"
        assert cfg.stable_diffusion_base_url == "https://api.stability.ai"

    def test_default_timing(self):
        cfg = LunaSDKConfig(_env_file=None)
        assert cfg.request_timeout == 120.0
        assert cfg.replicate_poll_interval == 1.0
        assert cfg.replicate_wait_seconds == 60
        assert cfg.replicate_max_wait_seconds == 600.0

    def test_default_log_level(self):
        assert LunaSDKConfig(_env_file=None).log_level == "INFO"


@pytest.mark.usefixtures("clean_env")
class TestConfigEnvironment:
    """Verify environment variable loading."""

    def test_prefixed_token(self, monkeypatch):
        monkeypatch.setenv("LUNASDK_REPLICATE_API_TOKEN", "r8_prefixed")
        assert LunaSDKConfig(_env_file=None).replicate_api_token == "r8_prefixed"

    def test_unprefixed_token_alias(self, monkeypatch):
        monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_plain")
        assert LunaSDKConfig(_env_file=None).replicate_api_token == "r8_plain"

    def test_unprefixed_stable_diffusion_key(self, monkeypatch):
        monkeypatch.setenv("STABLE_DIFFUSION_API_KEY", "sk-plain")
        assert LunaSDKConfig(_env_file=None).stable_diffusion_api_key == "sk-plain"

    def test_timeout_override(self, monkeypatch):
        monkeypatch.setenv("LUNASDK_REQUEST_TIMEOUT", "30")
        assert LunaSDKConfig(_env_file=None).request_timeout == 30.0

    def test_max_wait_override(self, monkeypatch):
        monkeypatch.setenv("LUNASDK_REPLICATE_MAX_WAIT_SECONDS", "90")
        assert LunaSDKConfig(_env_file=None).replicate_max_wait_seconds == 90.0

    def test_env_file(self, temp_dir):
        env_file = temp_dir / ".env"
        env_file.write_text("LUNASDK_STABLE_DIFFUSION_BASE_URL=http://localhost:7860\n")

        cfg = LunaSDKConfig(_env_file=env_file)
        assert cfg.stable_diffusion_base_url == "http://localhost:7860"

    def test_keyword_arguments_by_field_name(self):
        cfg = LunaSDKConfig(replicate_api_token="r8_kw", _env_file=None)
        assert cfg.replicate_api_token == "r8_kw"


class TestConfigValidation:
    """Verify Pydantic validation constraints."""

    def test_wait_seconds_upper_bound(self):
        with pytest.raises(ValidationError):
            LunaSDKConfig(replicate_wait_seconds=61, _env_file=None)

    def test_wait_seconds_lower_bound(self):
        with pytest.raises(ValidationError):
            LunaSDKConfig(replicate_wait_seconds=0, _env_file=None)

    def test_max_wait_must_be_positive(self):
        with pytest.raises(ValidationError):
            LunaSDKConfig(replicate_max_wait_seconds=0, _env_file=None)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            LunaSDKConfig(request_timeout=0, _env_file=None)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LunaSDKConfig(log_level="TRACE", _env_file=None)


class TestConfigureLogging:
    """Verify the lunasdk logger setup helper."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger("lunasdk")
        level, handlers = logger.level, list(logger.handlers)
        yield
        logger.setLevel(level)
        logger.handlers = handlers

    def test_sets_level(self):
        configure_logging("DEBUG")
        assert logging.getLogger("lunasdk").level == logging.DEBUG

    def test_handler_added_once(self):
        configure_logging("INFO")
        count = len(logging.getLogger("lunasdk").handlers)
        configure_logging("WARNING")
        assert len(logging.getLogger("lunasdk").handlers) == count >= 1
