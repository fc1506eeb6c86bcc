"""Replicate error types and output helpers."""

from __future__ import annotations

from typing import Any

from lunasdk.core.errors import LunaSDKError, ProviderAPIError

_URL_FIELDS = ("image", "result", "output", "file", "images")

_STATUS_MESSAGES = {
    401: "API authentication failed, please check the API token",
    422: "The input parameters are not valid for this model",
    429: "Too many API requests, please try again later",
    500: "Internal server error, please try again later",
}


class ReplicatePredictionError(LunaSDKError):
    """A prediction reached a ``failed`` or ``canceled`` state.

    Attributes:
        prediction_id: Replicate prediction id.
        status: Terminal status reported by Replicate.
        error: Error text reported by the model, if any.
    """

    def __init__(self, prediction_id: str, status: str, error: Any = None) -> None:
        self.prediction_id = prediction_id
        self.status = status
        self.error = error
        super().__init__(f"Prediction {prediction_id} {status}: {error or 'no error details'}")


class ReplicatePredictionTimeoutError(ReplicatePredictionError):
    """A prediction was still running when the client stopped polling it.

    Attributes:
        max_wait: Seconds the client polled before giving up.
    """

    def __init__(self, prediction_id: str, status: str, max_wait: float) -> None:
        self.max_wait = max_wait
        super().__init__(prediction_id, status, f"not finished after {max_wait:g}s")


def handle_replicate_error(error: BaseException) -> str:
    """Convert a Replicate failure into a message safe to show to end users."""
    if isinstance(error, ProviderAPIError) and error.status_code in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[error.status_code]

    message = str(error)
    if message:
        for status, text in _STATUS_MESSAGES.items():
            if str(status) in message:
                return text

    return "Replicate API call failed, please try again later"


def _http_strings(items: list[Any]) -> list[str]:
    return [item for item in items if isinstance(item, str) and item.startswith("http")]


def extract_image_urls(output: Any) -> list[str]:
    """Extract image URLs from a prediction ``output`` value.

    Handles the shapes Replicate image models produce: a list of URLs, a single
    URL string, an object with a ``url`` field, or an object holding the URL(s)
    under one of ``image``, ``result``, ``output``, ``file`` or ``images``.

    Returns:
        The http(s) URLs found, in output order. Empty when nothing matches.
    """
    if isinstance(output, list):
        return _http_strings(output)

    if isinstance(output, dict):
        if isinstance(output.get("url"), str):
            return [output["url"]]

        for field in _URL_FIELDS:
            value = output.get(field)
            if not value:
                continue
            if isinstance(value, str) and value.startswith("http"):
                return [value]
            if isinstance(value, list):
                return _http_strings(value)

    if isinstance(output, str) and output.startswith("http"):
        return [output]

    return []
