"""Per-model settings for Stable Diffusion models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# e.g. "stable-diffusion-xl-base-1.0", "stable-diffusion-v1-5", or a custom deployment id.
StableDiffusionModelId = str


class StableDiffusionImageSize(BaseModel):
    width: int = Field(default=512, gt=0)
    height: int = Field(default=512, gt=0)


class StableDiffusionImage2ImageSettings(BaseModel):
    """Model-level defaults for Stable Diffusion generation.

    Attributes:
        max_images_per_call: Maximum images per API call. Default: 1.
        default_strength: Transformation strength, 0.0-1.0. Default: 0.8.
        default_steps: Inference steps. Default: 20.
        default_guidance_scale: Guidance scale. Default: 7.5.
        default_size: Output size. Default: 512x512.
        schedulers: Schedulers/samplers the deployment offers.
    """

    model_config = ConfigDict(frozen=True)

    max_images_per_call: int | None = Field(default=None, ge=1)
    default_strength: float = Field(default=0.8, ge=0.0, le=1.0)
    default_steps: int = Field(default=20, ge=1)
    default_guidance_scale: float = Field(default=7.5)
    default_size: StableDiffusionImageSize = Field(default_factory=StableDiffusionImageSize)
    schedulers: list[str] = Field(default_factory=list)


class StableDiffusionText2ImageSettings(BaseModel):
    """Model-level defaults for Stable Diffusion text-to-image generation."""

    model_config = ConfigDict(frozen=True)

    max_images_per_call: int | None = Field(default=None, ge=1)
    default_steps: int = Field(default=20, ge=1)
    default_guidance_scale: float = Field(default=7.5)
    default_size: StableDiffusionImageSize = Field(default_factory=StableDiffusionImageSize)
