"""Async HTTP client for the Replicate predictions API.

Only the endpoints the image models need are wrapped:

- ``POST /v1/models/{owner}/{name}/predictions``: ``create`` on the latest version
- ``POST /v1/predictions``: ``create`` on a pinned version
- ``GET /v1/predictions/{id}``: ``get`` and polling
- ``POST /v1/predictions/{id}/cancel``: ``cancel``

Creation sends ``Prefer: wait=<seconds>`` so fast models usually finish within
the first request; slower ones are polled until they reach a terminal state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from lunasdk.core.errors import GenerationAbortedError, ProviderAPIError
from lunasdk.providers.utils import await_with_abort, combine_headers

from .errors import ReplicatePredictionError, ReplicatePredictionTimeoutError

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})


class Prediction(BaseModel):
    """Subset of the Replicate prediction object used by lunasdk."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str
    output: Any = None
    error: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class ReplicateClient:
    """Thin async wrapper around the Replicate HTTP API.

    Args:
        api_token: Replicate API token.
        base_url: API root, ``https://api.replicate.com`` by default.
        headers: Headers added to every request.
        http_client: Shared ``httpx.AsyncClient``. When omitted a client is
            opened per request.
        timeout: Per-request timeout in seconds.
        poll_interval: Seconds between status polls.
        wait_seconds: Value of the ``Prefer: wait`` header on creation.
        max_wait: Seconds ``wait`` polls before giving up on a prediction.
    """

    provider = "replicate"

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api.replicate.com",
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
        poll_interval: float = 1.0,
        wait_seconds: int = 60,
        max_wait: float = 600.0,
    ) -> None:
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._headers = headers or {}
        self._http_client = http_client
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._wait_seconds = wait_seconds
        self._max_wait = max_wait

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        request_headers = combine_headers(
            {"Authorization": f"Bearer {self._api_token}", "Content-Type": "application/json"},
            self._headers,
            headers,
        )

        if self._http_client is not None:
            response = await self._http_client.request(
                method, url, json=json, headers=request_headers
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(method, url, json=json, headers=request_headers)

        if response.is_error:
            raise ProviderAPIError(self.provider, response.status_code, response.text)
        return response.json()

    async def create(
        self,
        model: str,
        input: dict[str, Any],
        *,
        version: str | None = None,
        webhook: str | None = None,
        webhook_events_filter: list[str] | None = None,
        headers: dict[str, str] | None = None,
        wait_seconds: int | None = None,
    ) -> Prediction:
        """Create a prediction for ``model`` (``owner/name`` or ``owner/name:version``).

        ``wait_seconds`` overrides the client's ``Prefer: wait`` value for this call.
        """
        model_name, _, model_version = model.partition(":")
        version = version or model_version or None

        body: dict[str, Any] = {"input": input}
        if webhook:
            body["webhook"] = webhook
        if webhook_events_filter:
            body["webhook_events_filter"] = webhook_events_filter

        if version:
            body["version"] = version
            path = "/v1/predictions"
        else:
            path = f"/v1/models/{model_name}/predictions"

        prefer = f"wait={wait_seconds or self._wait_seconds}"
        data = await self._request(
            "POST", path, json=body, headers=combine_headers({"Prefer": prefer}, headers)
        )
        prediction = Prediction.model_validate(data)
        logger.debug(f"Created prediction {prediction.id} for {model} ({prediction.status})")
        return prediction

    async def get(self, prediction_id: str, headers: dict[str, str] | None = None) -> Prediction:
        data = await self._request("GET", f"/v1/predictions/{prediction_id}", headers=headers)
        return Prediction.model_validate(data)

    async def cancel(self, prediction_id: str, headers: dict[str, str] | None = None) -> Prediction:
        data = await self._request(
            "POST", f"/v1/predictions/{prediction_id}/cancel", headers=headers
        )
        logger.info(f"Cancelled prediction {prediction_id}")
        return Prediction.model_validate(data)

    async def wait(
        self, prediction: Prediction, headers: dict[str, str] | None = None
    ) -> Prediction:
        """Poll until ``prediction`` reaches a terminal status.

        Raises:
            ReplicatePredictionTimeoutError: If the prediction is still running
                after ``max_wait`` seconds.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._max_wait
        while not prediction.is_terminal:
            if loop.time() >= deadline:
                raise ReplicatePredictionTimeoutError(
                    prediction.id, prediction.status, self._max_wait
                )
            await asyncio.sleep(self._poll_interval)
            prediction = await self.get(prediction.id, headers=headers)
        return prediction

    async def _cancel_quietly(self, prediction_id: str, headers: dict[str, str] | None) -> None:
        try:
            await self.cancel(prediction_id, headers=headers)
        except (ProviderAPIError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to cancel prediction {prediction_id}: {e}", exc_info=True)

    async def _create_or_abort(
        self,
        model: str,
        input: dict[str, Any],
        version: str | None,
        headers: dict[str, str] | None,
        abort_signal: asyncio.Event | None,
    ) -> Prediction:
        if abort_signal is None:
            return await self.create(model, input, version=version, headers=headers)

        if abort_signal.is_set():
            raise GenerationAbortedError("Generation was aborted before the provider call started")

        # Prefer: wait=1 while an abort signal is attached
        creating = asyncio.ensure_future(
            self.create(model, input, version=version, headers=headers, wait_seconds=1)
        )
        try:
            return await await_with_abort(asyncio.shield(creating), abort_signal)
        except GenerationAbortedError:
            try:
                prediction = await creating
            except (ProviderAPIError, httpx.HTTPError, ValueError) as e:
                logger.error(f"Prediction creation failed after abort: {e}", exc_info=True)
                raise GenerationAbortedError("Generation was aborted") from e
            if not prediction.is_terminal:
                await self._cancel_quietly(prediction.id, headers)
            raise
        except asyncio.CancelledError:
            creating.cancel()
            raise

    async def run(
        self,
        model: str,
        input: dict[str, Any],
        *,
        version: str | None = None,
        headers: dict[str, str] | None = None,
        abort_signal: asyncio.Event | None = None,
    ) -> Any:
        """Create a prediction, wait for it and return its ``output``.

        An abort that lands while the prediction is being created waits for
        the creation response and then cancels the new prediction, so no
        prediction keeps running after the abort error is raised.

        Raises:
            ProviderAPIError: On any non-success HTTP response.
            ReplicatePredictionError: If the prediction fails or is cancelled.
            ReplicatePredictionTimeoutError: If the prediction does not finish
                within ``max_wait`` seconds; it is cancelled first.
            GenerationAbortedError: If ``abort_signal`` is set; an already
                created prediction is cancelled first.
        """
        prediction = await self._create_or_abort(model, input, version, headers, abort_signal)
        try:
            prediction = await await_with_abort(
                self.wait(prediction, headers=headers), abort_signal
            )
        except (GenerationAbortedError, ReplicatePredictionTimeoutError):
            await self._cancel_quietly(prediction.id, headers)
            raise

        if prediction.status != "succeeded":
            raise ReplicatePredictionError(prediction.id, prediction.status, prediction.error)
        return prediction.output
