import pytest

from whalepools.services.rate_limiter import RateLimiter
from whalepools.services.retry import RetryingFetcher
from whalepools.services.trade_source import PermanentFetchError, TransientNetworkError


def flaky(failures, result="ok"):
    """Operation that raises the given exceptions in turn, then returns ``result``."""
    calls = {"n": 0}

    async def operation():
        calls["n"] += 1
        if failures:
            raise failures.pop(0)
        return result

    return operation, calls


@pytest.mark.asyncio
async def test_two_timeouts_then_success(sleep):
    operation, calls = flaky([TransientNetworkError("timeout"), TransientNetworkError("timeout")])
    fetcher = RetryingFetcher(max_retries=3, base_delay=5.0, sleep=sleep)

    assert await fetcher.run(operation, "op") == "ok"
    assert calls["n"] == 3
    assert sleep.delays == [5.0, 10.0]


@pytest.mark.asyncio
async def test_non_retryable_error_fails_immediately(sleep):
    operation, calls = flaky([PermanentFetchError("bad request", status_code=400)])
    fetcher = RetryingFetcher(sleep=sleep)

    with pytest.raises(PermanentFetchError):
        await fetcher.run(operation, "op")
    assert calls["n"] == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_unexpected_exception_is_not_retried(sleep):
    operation, calls = flaky([KeyError("attributes")])
    fetcher = RetryingFetcher(sleep=sleep)

    with pytest.raises(KeyError):
        await fetcher.run(operation, "op")
    assert calls["n"] == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(sleep):
    errors = [TransientNetworkError("rate-limited", status_code=429) for _ in range(10)]
    operation, calls = flaky(errors)
    fetcher = RetryingFetcher(max_retries=3, base_delay=5.0, sleep=sleep)

    with pytest.raises(TransientNetworkError) as excinfo:
        await fetcher.run(operation, "op")
    assert excinfo.value.reason == "rate-limited"
    assert calls["n"] == 4
    assert sleep.delays == [5.0, 10.0, 20.0]


@pytest.mark.asyncio
async def test_rate_limiter_pauses_for_fixed_delay(sleep):
    limiter = RateLimiter(delay=2.0, sleep=sleep)
    await limiter.pause()
    await limiter.pause()

    assert sleep.delays == [2.0, 2.0]
    assert limiter.pauses == 2
