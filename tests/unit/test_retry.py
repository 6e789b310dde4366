"""Unit tests for async retry decorator with exponential backoff."""

import pytest

from po_intake.pipeline.utils import retry as retry_module
from po_intake.pipeline.utils.retry import retry_on_db_error


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    recorded = []

    async def fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr(retry_module.asyncio, "sleep", fake_sleep)
    return recorded


class TestRetryOnDbError:
    @pytest.mark.asyncio
    async def test_immediate_success_no_retry(self, sleeps):
        @retry_on_db_error(max_retries=3)
        async def succeeds():
            return "ok"

        assert await succeeds() == "ok"
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, sleeps):
        calls = 0

        @retry_on_db_error(max_retries=3, initial_backoff=0.2, backoff_multiplier=2)
        async def flaky():
            nonlocal calls
            calls += 1
            if calls < 3:
                raise ConnectionError("reset")
            return calls

        assert await flaky() == 3
        assert sleeps == [0.2, 0.4]

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self, sleeps):
        @retry_on_db_error(max_retries=2)
        async def always_fails():
            raise ConnectionError("down")

        with pytest.raises(ConnectionError, match="down"):
            await always_fails()
        assert len(sleeps) == 1

    @pytest.mark.asyncio
    async def test_non_transient_error_not_retried(self, sleeps):
        calls = 0

        @retry_on_db_error(max_retries=3, retry_on=(ConnectionError,))
        async def bad_query():
            nonlocal calls
            calls += 1
            raise ValueError("syntax error")

        with pytest.raises(ValueError):
            await bad_query()
        assert calls == 1
        assert sleeps == []
