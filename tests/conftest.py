"""Shared pytest fixtures for lunasdk tests."""

import asyncio
import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from lunasdk.core.config import LunaSDKConfig
from lunasdk.core.image_models import Image2ImageModel, Text2ImageModel
from lunasdk.core.types import CallWarning, ModelCallResult


class _FakeModelBehaviour:
    """Scripted provider behaviour shared by the fake models.

    Every call records its options, sleeps for the configured delay, then
    either raises or returns ``options.n`` images named ``img-<call>-<i>``.
    Calls are numbered in the order ``do_generate`` is entered, which is the
    dispatch order because ``asyncio.gather`` starts its tasks in order.
    """

    provider = "fake"

    def __init__(
        self,
        max_images_per_call: int | None = None,
        delays: dict[int, float] | None = None,
        fail_on_call: int | None = None,
        warn: bool = False,
        images_per_call: int | None = None,
    ):
        super().__init__("fake-model")
        self._max_images_per_call = max_images_per_call
        self.delays = delays or {}
        self.fail_on_call = fail_on_call
        self.warn = warn
        self.images_per_call = images_per_call
        self.calls: list = []
        self.completed: list[int] = []

    @property
    def max_images_per_call(self) -> int | None:
        return self._max_images_per_call

    async def do_generate(self, options) -> ModelCallResult:
        index = len(self.calls)
        self.calls.append(options)
        await asyncio.sleep(self.delays.get(index, 0))

        if index == self.fail_on_call:
            raise RuntimeError(f"call {index} failed")

        count = options.n if self.images_per_call is None else self.images_per_call
        warnings = [CallWarning(type="other", message=f"warning from call {index}")] if self.warn else []
        self.completed.append(index)
        return ModelCallResult(images=[f"img-{index}-{i}" for i in range(count)], warnings=warnings)


class FakeText2ImageModel(_FakeModelBehaviour, Text2ImageModel):
    """In-memory text-to-image model."""


class FakeImage2ImageModel(_FakeModelBehaviour, Image2ImageModel):
    """In-memory image-to-image model."""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> LunaSDKConfig:
    """Create a configuration with test credentials and fast polling.

    The .env file is ignored so a developer's local credentials never leak
    into tests.

    Returns:
        LunaSDKConfig instance for testing
    """
    return LunaSDKConfig(
        replicate_api_token="r8_test",
        stable_diffusion_api_key="sk-test",
        replicate_poll_interval=0.01,
        request_timeout=5.0,
        _env_file=None,
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every credential environment variable lunasdk reads."""
    for name in (
        "LUNASDK_REPLICATE_API_TOKEN",
        "REPLICATE_API_TOKEN",
        "LUNASDK_STABLE_DIFFUSION_API_KEY",
        "STABLE_DIFFUSION_API_KEY",
        "LUNASDK_REQUEST_TIMEOUT",
        "LUNASDK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image.

    Returns:
        Encoded 8x4 red PNG
    """
    buffer = io.BytesIO()
    Image.new("RGB", (8, 4), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_text2image_model():
    """Factory for scripted text-to-image models."""
    return FakeText2ImageModel


@pytest.fixture
def fake_image2image_model():
    """Factory for scripted image-to-image models."""
    return FakeImage2ImageModel
