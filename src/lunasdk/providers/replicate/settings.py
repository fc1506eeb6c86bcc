"""Per-model settings for Replicate text-to-image models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lunasdk.core.types import OutputFormat

# Any "owner/name" or "owner/name:version" reference accepted by Replicate.
ReplicateModelId = str


class ReplicateImageSize(BaseModel):
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class ReplicateText2ImageSettings(BaseModel):
    """Model-level defaults for a Replicate text-to-image model.

    Call options given to ``generate_text2image`` take precedence over these
    values; settings only fill what the call leaves unset.

    Attributes:
        max_images_per_call: Maximum images per prediction. Most Replicate
            image models return one image per prediction, so ``None`` means 1.
        output_format: Default output format (``jpg``, ``png``, ``webp``).
        aspect_ratio: Default aspect ratio such as ``"1:1"``.
        steps: Default number of inference steps.
        guidance_scale: Default guidance scale.
        seed: Default random seed.
        size: Default output dimensions.
        safety_checker: ``False`` sends ``disable_safety_checker=True``.
        version: Pin a specific model version id.
    """

    model_config = ConfigDict(frozen=True)

    max_images_per_call: int | None = Field(default=None, ge=1)
    output_format: OutputFormat | None = None
    aspect_ratio: str | None = None
    steps: int | None = Field(default=None, ge=1)
    guidance_scale: float | None = None
    seed: int | None = None
    size: ReplicateImageSize | None = None
    safety_checker: bool | None = None
    version: str | None = None
