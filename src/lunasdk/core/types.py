"""Shared value types for provider model calls.

These dataclasses describe one provider invocation: the options going in
(``Text2ImageCallOptions`` / ``Image2ImageCallOptions``) and the raw payload
coming back (``ModelCallResult``). They are created per request and never
mutated after construction.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Literal, Union

JSONValue = Union[None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]]

# Options bag keyed by provider name; each provider reads only its own entry.
ProviderOptions = dict[str, dict[str, JSONValue]]

OutputFormat = Literal["jpg", "png", "webp"]

WarningType = Literal["unsupported-setting", "other"]


@dataclass(frozen=True)
class ImageSize:
    """Output image dimensions in pixels."""

    width: int
    height: int


@dataclass(frozen=True)
class CallWarning:
    """Non-fatal diagnostic emitted by a provider for one call.

    Attributes:
        type: ``"unsupported-setting"`` when a parameter was ignored by the
            provider, ``"other"`` for anything else.
        message: Human-readable description.
        setting: Name of the ignored parameter, for ``"unsupported-setting"``.
    """

    type: WarningType
    message: str
    setting: str | None = None


@dataclass(frozen=True)
class Text2ImageCallOptions:
    """Options for a single text-to-image provider call."""

    prompt: str
    n: int = 1
    negative_prompt: str | None = None
    seed: int | None = None
    steps: int | None = None
    guidance_scale: float | None = None
    size: ImageSize | None = None
    aspect_ratio: str | None = None
    output_format: OutputFormat | None = None
    provider_options: ProviderOptions = field(default_factory=dict)
    headers: dict[str, str] | None = None
    abort_signal: asyncio.Event | None = None


@dataclass(frozen=True)
class Image2ImageCallOptions:
    """Options for a single image-to-image provider call.

    ``image`` is a base64 string, a URL, or raw bytes.
    """

    prompt: str
    image: str | bytes
    n: int = 1
    negative_prompt: str | None = None
    strength: float | None = None
    seed: int | None = None
    steps: int | None = None
    guidance_scale: float | None = None
    size: ImageSize | None = None
    provider_options: ProviderOptions = field(default_factory=dict)
    headers: dict[str, str] | None = None
    abort_signal: asyncio.Event | None = None


@dataclass
class ModelCallResult:
    """Raw output of one provider call: encoded images or URLs, plus warnings."""

    images: list[str | bytes] = field(default_factory=list)
    warnings: list[CallWarning] = field(default_factory=list)
