"""Tests for RequestPacer."""

from unittest.mock import AsyncMock, patch

import pytest

from search_eval.clients.rate_limiter import RequestPacer


class TestRequestPacer:
    @pytest.mark.asyncio
    async def test_first_call_not_delayed(self) -> None:
        pacer = RequestPacer(delay_seconds=1.0)

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            await pacer.wait()
            sleep.assert_not_awaited()

            await pacer.wait()
            await pacer.wait()

        assert sleep.await_count == 2
        assert pacer.calls == 3

    @pytest.mark.asyncio
    async def test_reset(self) -> None:
        pacer = RequestPacer(delay_seconds=1.0)

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            await pacer.wait()
            pacer.reset()
            await pacer.wait()

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_delay_never_sleeps(self) -> None:
        pacer = RequestPacer(delay_seconds=0)

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            for _ in range(3):
                await pacer.wait()

        sleep.assert_not_awaited()
