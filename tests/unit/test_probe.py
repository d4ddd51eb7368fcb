"""Unit tests for the AVIF capability probe."""

import pytest

from imgconv.core.constants import AVIF_PROBE_SAMPLE
from imgconv.core.probe import probe_avif_support
from imgconv.models.files import FileInput


def _failing_decoder(data: bytes):
    raise OSError("cannot identify image file")


def _passing_decoder(data: bytes):
    return object()


class TestProbeAvifSupport:
    @pytest.mark.asyncio
    async def test_unsupported_leaves_accept_untouched(self):
        inputs = [FileInput(name="a", accept="image/png")]

        supported = await probe_avif_support(inputs, decoder=_failing_decoder)

        assert supported is False
        assert inputs[0].accept == "image/png"

    @pytest.mark.asyncio
    async def test_supported_widens_every_input(self):
        inputs = [
            FileInput(name="a", accept="image/png"),
            FileInput(name="b", accept="image/jpeg, image/webp"),
        ]

        supported = await probe_avif_support(inputs, decoder=_passing_decoder)

        assert supported is True
        assert inputs[0].accept == "image/png, image/avif"
        assert inputs[1].accept == "image/jpeg, image/webp, image/avif"

    @pytest.mark.asyncio
    async def test_empty_accept_keeps_default_formats(self):
        inputs = [FileInput(name="a")]

        await probe_avif_support(inputs, decoder=_passing_decoder)

        assert inputs[0].accept == (
            "image/gif, image/jpeg, image/png, image/webp, image/avif"
        )

    @pytest.mark.asyncio
    async def test_avif_is_not_added_twice(self):
        inputs = [FileInput(name="a", accept="image/png, image/avif")]

        await probe_avif_support(inputs, decoder=_passing_decoder)

        assert inputs[0].accept == "image/png, image/avif"

    @pytest.mark.asyncio
    async def test_decoder_receives_embedded_sample(self):
        received = []

        await probe_avif_support([], decoder=received.append)

        assert received == [AVIF_PROBE_SAMPLE]

    @pytest.mark.asyncio
    async def test_default_decoder_never_raises(self):
        result = await probe_avif_support([FileInput(name="a", accept="image/png")])
        assert isinstance(result, bool)
