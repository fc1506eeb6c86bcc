"""Helpers shared by the bundled provider implementations."""

from __future__ import annotations

import asyncio
import base64
import logging
import re
from collections.abc import Awaitable
from typing import TypeVar

from lunasdk.core.errors import GenerationAbortedError, LoadSettingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DATA_URL_PREFIX = re.compile(r"^data:image/[^;]+;base64,")


def load_setting(
    setting_value: str | None,
    *,
    config_value: str | None,
    setting_name: str,
    environment_variable_name: str,
    description: str,
) -> str:
    """Resolve a required setting from an explicit value or the loaded config.

    Args:
        setting_value: Value passed directly by the caller, wins when set.
        config_value: Value from :class:`~lunasdk.core.config.LunaSDKConfig`,
            which already reflects the environment.
        setting_name: Parameter name, used in the error message.
        environment_variable_name: Environment variable, used in the error message.
        description: Human readable name of the setting.

    Raises:
        LoadSettingError: If neither source provides a non-empty value.
    """
    if setting_value:
        return setting_value
    if config_value:
        return config_value
    raise LoadSettingError(setting_name, environment_variable_name, description)


def convert_bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def convert_base64_to_bytes(data: str) -> bytes:
    """Decode base64 text, tolerating a ``data:image/...;base64,`` prefix."""
    return base64.b64decode(strip_data_url_prefix(data))


def strip_data_url_prefix(data: str) -> str:
    return _DATA_URL_PREFIX.sub("", data)


def combine_headers(*headers: dict[str, str] | None) -> dict[str, str]:
    """Merge header dicts left to right, later values win."""
    merged: dict[str, str] = {}
    for h in headers:
        if h:
            merged.update(h)
    return merged


async def await_with_abort(awaitable: Awaitable[T], abort_signal: asyncio.Event | None) -> T:
    """Await ``awaitable`` unless ``abort_signal`` is set first.

    The awaitable runs as its own task. If the abort signal fires before it
    finishes, the task is cancelled and :class:`GenerationAbortedError` is
    raised. Without a signal this is a plain ``await``.

    Raises:
        GenerationAbortedError: If the signal is set before or during the call.
    """
    if abort_signal is None:
        return await awaitable

    if abort_signal.is_set():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise GenerationAbortedError("Generation was aborted before the provider call started")

    call = asyncio.ensure_future(awaitable)
    aborted = asyncio.ensure_future(abort_signal.wait())
    try:
        await asyncio.wait({call, aborted}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        call.cancel()
        raise
    finally:
        if not aborted.done():
            aborted.cancel()

    if call.done():
        return call.result()

    call.cancel()
    try:
        await call
    except asyncio.CancelledError:
        pass
    logger.info("Provider call aborted by abort signal")
    raise GenerationAbortedError("Generation was aborted")
