"""Tests for lunasdk.providers.utils: settings, encoding and abort helpers."""

from __future__ import annotations

import asyncio

import pytest

from lunasdk.core.errors import GenerationAbortedError, LoadSettingError
from lunasdk.providers.utils import (
    await_with_abort,
    combine_headers,
    convert_base64_to_bytes,
    convert_bytes_to_base64,
    load_setting,
    strip_data_url_prefix,
)


class TestLoadSetting:
    """Verify setting resolution order."""

    def _load(self, value, config_value):
        return load_setting(
            value,
            config_value=config_value,
            setting_name="api_token",
            environment_variable_name="REPLICATE_API_TOKEN",
            description="Replicate API token",
        )

    def test_explicit_value_wins(self):
        assert self._load("explicit", "from-config") == "explicit"

    def test_config_value_fallback(self):
        assert self._load(None, "from-config") == "from-config"

    def test_empty_values_are_missing(self):
        with pytest.raises(LoadSettingError):
            self._load("", "")

    def test_error_names_parameter_and_variable(self):
        with pytest.raises(LoadSettingError) as exc_info:
            self._load(None, None)

        message = str(exc_info.value)
        assert "Replicate API token is missing" in message
        assert "'api_token'" in message
        assert "REPLICATE_API_TOKEN" in message
        assert exc_info.value.environment_variable_name == "REPLICATE_API_TOKEN"


class TestEncoding:
    """Verify base64 helpers."""

    def test_bytes_to_base64(self):
        assert convert_bytes_to_base64(b"abc") == "YWJj"

    def test_base64_to_bytes(self):
        assert convert_base64_to_bytes("YWJj") == b"abc"

    def test_base64_to_bytes_strips_data_url(self):
        assert convert_base64_to_bytes("data:image/webp;base64,YWJj") == b"abc"

    def test_strip_leaves_plain_text(self):
        assert strip_data_url_prefix("YWJj") == "YWJj"


class TestCombineHeaders:
    def test_later_values_win(self):
        assert combine_headers({"A": "1", "B": "1"}, None, {"B": "2"}) == {"A": "1", "B": "2"}

    def test_no_headers(self):
        assert combine_headers() == {}


class TestAwaitWithAbort:
    """Verify racing a provider call against the abort signal."""

    @pytest.mark.asyncio
    async def test_without_signal(self):
        async def call():
            return "done"

        assert await await_with_abort(call(), None) == "done"

    @pytest.mark.asyncio
    async def test_finishes_before_abort(self):
        async def call():
            return 42

        assert await await_with_abort(call(), asyncio.Event()) == 42

    @pytest.mark.asyncio
    async def test_signal_already_set(self):
        started = False

        async def call():
            nonlocal started
            started = True

        abort = asyncio.Event()
        abort.set()

        with pytest.raises(GenerationAbortedError):
            await await_with_abort(call(), abort)
        assert not started

    @pytest.mark.asyncio
    async def test_abort_during_call_cancels_it(self):
        cancelled = False

        async def call():
            nonlocal cancelled
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled = True
                raise

        abort = asyncio.Event()
        asyncio.get_running_loop().call_later(0.02, abort.set)

        with pytest.raises(GenerationAbortedError):
            await await_with_abort(call(), abort)
        assert cancelled

    @pytest.mark.asyncio
    async def test_call_error_propagates(self):
        async def call():
            raise ConnectionError("reset")

        with pytest.raises(ConnectionError, match="reset"):
            await await_with_abort(call(), asyncio.Event())
