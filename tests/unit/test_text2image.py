"""Tests for lunasdk.generation.text2image: the batched text-to-image entry point.

All tests run against scripted in-memory models from conftest.py, so no
provider is contacted.
"""

from __future__ import annotations

import asyncio

import pytest

from lunasdk.core.errors import GenerationAbortedError
from lunasdk.core.image_models import Text2ImageModel
from lunasdk.core.types import ImageSize, ModelCallResult
from lunasdk.generation import generate_text2image
from lunasdk.providers.utils import await_with_abort


class TestCallSplitting:
    """Verify the number of provider calls and their image counts."""

    @pytest.mark.asyncio
    async def test_seven_images_with_cap_three(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=3)

        result = await generate_text2image(model=model, prompt="moonrise", n=7)

        assert [call.n for call in model.calls] == [3, 3, 1]
        assert len(result.images) == 7

    @pytest.mark.asyncio
    async def test_six_images_with_cap_three(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=3)

        await generate_text2image(model=model, prompt="moonrise", n=6)

        assert [call.n for call in model.calls] == [3, 3]

    @pytest.mark.asyncio
    async def test_default_n_with_undeclared_cap(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=None)

        result = await generate_text2image(model=model, prompt="moonrise")

        assert [call.n for call in model.calls] == [1]
        assert len(result.images) == 1

    @pytest.mark.asyncio
    async def test_cap_one_issues_one_call_per_image(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=1)

        await generate_text2image(model=model, prompt="moonrise", n=4)

        assert [call.n for call in model.calls] == [1, 1, 1, 1]


class TestOrdering:
    """Verify that output order follows call order, not completion order."""

    @pytest.mark.asyncio
    async def test_images_follow_call_order(self, fake_text2image_model):
        # call 0 finishes last, call 2 finishes first
        model = fake_text2image_model(max_images_per_call=2, delays={0: 0.06, 1: 0.03, 2: 0.0})

        result = await generate_text2image(model=model, prompt="moonrise", n=5)

        assert model.completed == [2, 1, 0]
        assert [img.base64 for img in result.images] == [
            "img-0-0",
            "img-0-1",
            "img-1-0",
            "img-1-1",
            "img-2-0",
        ]
        assert result.image.base64 == "img-0-0"

    @pytest.mark.asyncio
    async def test_warnings_follow_call_order(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=1, delays={0: 0.05}, warn=True)

        result = await generate_text2image(model=model, prompt="moonrise", n=3)

        assert [w.message for w in result.warnings] == [
            "warning from call 0",
            "warning from call 1",
            "warning from call 2",
        ]


class TestFailure:
    """Verify all-or-nothing failure semantics."""

    @pytest.mark.asyncio
    async def test_any_failure_rejects_the_request(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=1, fail_on_call=1)

        with pytest.raises(RuntimeError, match="call 1 failed"):
            await generate_text2image(model=model, prompt="moonrise", n=3)

    @pytest.mark.asyncio
    async def test_error_is_not_wrapped(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=2, fail_on_call=0)

        with pytest.raises(RuntimeError) as exc_info:
            await generate_text2image(model=model, prompt="moonrise", n=2)

        assert type(exc_info.value) is RuntimeError


class TestPassThrough:
    """Verify parameters reach every call unchanged."""

    @pytest.mark.asyncio
    async def test_parameters_are_identical_across_calls(self, fake_text2image_model):
        model = fake_text2image_model(max_images_per_call=2)
        abort = asyncio.Event()
        headers = {"X-Request-Id": "abc"}
        options = {"fake": {"style": "watercolor"}}

        await generate_text2image(
            model=model,
            prompt="a lunar eclipse",
            negative_prompt="blurry",
            n=5,
            seed=42,
            steps=30,
            guidance_scale=6.5,
            size=ImageSize(width=768, height=512),
            aspect_ratio="3:2",
            output_format="png",
            provider_options=options,
            abort_signal=abort,
            headers=headers,
        )

        assert len(model.calls) == 3
        for call in model.calls:
            assert call.prompt == "a lunar eclipse"
            assert call.negative_prompt == "blurry"
            assert call.seed == 42
            assert call.steps == 30
            assert call.guidance_scale == 6.5
            assert call.size == ImageSize(width=768, height=512)
            assert call.aspect_ratio == "3:2"
            assert call.output_format == "png"
            assert call.provider_options == options
            assert call.abort_signal is abort
            assert call.headers == headers

    @pytest.mark.asyncio
    async def test_provider_options_default_to_empty_dict(self, fake_text2image_model):
        model = fake_text2image_model()

        await generate_text2image(model=model, prompt="moonrise")

        assert model.calls[0].provider_options == {}


class _SlowModel(Text2ImageModel):
    provider = "slow"

    async def do_generate(self, options):
        await await_with_abort(asyncio.sleep(10), options.abort_signal)
        return ModelCallResult(images=["never"] * options.n)


class TestAbort:
    """Verify the shared abort signal reaches every call."""

    @pytest.mark.asyncio
    async def test_abort_rejects_the_request(self):
        abort = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, abort.set)

        with pytest.raises(GenerationAbortedError):
            await generate_text2image(
                model=_SlowModel("slow-model"), prompt="moonrise", n=3, abort_signal=abort
            )

    @pytest.mark.asyncio
    async def test_abort_set_before_the_request(self):
        abort = asyncio.Event()
        abort.set()

        with pytest.raises(GenerationAbortedError):
            await generate_text2image(model=_SlowModel("slow-model"), prompt="moonrise", abort_signal=abort)
