"""Unit tests for the request timeout context."""

import asyncio

import pytest

from tech_radar.application.services import current_timeout, request_timeout


class TestRequestTimeout:
    """Tests for request_timeout() and current_timeout()."""

    def test_default_when_unset(self) -> None:
        assert current_timeout(3.0) == 3.0

    def test_block_overrides_default(self) -> None:
        with request_timeout(0.5):
            assert current_timeout(3.0) == 0.5

        assert current_timeout(3.0) == 3.0

    def test_none_keeps_default(self) -> None:
        with request_timeout(None):
            assert current_timeout(3.0) == 3.0

    def test_nested_blocks_restore(self) -> None:
        with request_timeout(2.0):
            with request_timeout(1.0):
                assert current_timeout(9.0) == 1.0
            assert current_timeout(9.0) == 2.0

    @pytest.mark.parametrize("seconds", [0, -1.0])
    def test_non_positive_rejected(self, seconds: float) -> None:
        with pytest.raises(ValueError, match="positive"):
            with request_timeout(seconds):
                pass

    async def test_tasks_see_their_own_timeout(self) -> None:
        async def observe(seconds: float) -> float:
            with request_timeout(seconds):
                await asyncio.sleep(0)
                return current_timeout(10.0)

        assert await asyncio.gather(observe(1.0), observe(2.0)) == [1.0, 2.0]
