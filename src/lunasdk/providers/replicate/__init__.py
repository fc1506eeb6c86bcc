"""Replicate provider: hosted text-to-image models via the predictions API."""

from lunasdk.providers.replicate.client import Prediction, ReplicateClient
from lunasdk.providers.replicate.errors import (
    ReplicatePredictionError,
    ReplicatePredictionTimeoutError,
    extract_image_urls,
    handle_replicate_error,
)
from lunasdk.providers.replicate.model import ReplicateModelConfig, ReplicateText2ImageModel
from lunasdk.providers.replicate.provider import ReplicateProvider, create_replicate, replicate
from lunasdk.providers.replicate.settings import (
    ReplicateImageSize,
    ReplicateModelId,
    ReplicateText2ImageSettings,
)

__all__ = [
    "Prediction",
    "ReplicateClient",
    "ReplicateImageSize",
    "ReplicateModelConfig",
    "ReplicateModelId",
    "ReplicatePredictionError",
    "ReplicatePredictionTimeoutError",
    "ReplicateProvider",
    "ReplicateText2ImageModel",
    "ReplicateText2ImageSettings",
    "create_replicate",
    "extract_image_urls",
    "handle_replicate_error",
    "replicate",
]
