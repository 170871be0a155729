"""Unit tests for the retry combinator."""

import pytest

from showcase_scraper.scraper.exceptions import RequestTimeoutError, ScraperError
from showcase_scraper.scraper.retry import RetryResult, with_retry


class FlakyOperation:
    """Fails a fixed number of times, then returns a value."""

    def __init__(self, failures: int, error: Exception = None, value: str = "ok"):
        self.failures = failures
        self.error = error or ScraperError("boom")
        self.value = value
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.value


class TestWithRetry:
    """Test retry budget semantics."""

    @pytest.mark.asyncio
    async def test_first_attempt_success(self):
        operation = FlakyOperation(failures=0)

        result = await with_retry(operation, max_retries=3, retry_delay=0)

        assert result.ok
        assert result.value == "ok"
        assert result.attempts == 1
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_succeeds_after_max_retries_failures(self):
        operation = FlakyOperation(failures=3)

        result = await with_retry(operation, max_retries=3, retry_delay=0)

        assert result.ok
        assert result.value == "ok"
        assert result.attempts == 4

    @pytest.mark.asyncio
    async def test_exhaustion_returns_last_failure(self):
        operation = FlakyOperation(failures=4)

        result = await with_retry(operation, max_retries=3, retry_delay=0)

        assert not result.ok
        assert result.value is None
        assert isinstance(result.error, ScraperError)
        assert result.attempts == 4
        assert operation.calls == 4

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt_without_delay(self, sleep_recorder):
        operation = FlakyOperation(failures=1)

        result = await with_retry(operation, max_retries=0, retry_delay=5.0)

        assert not result.ok
        assert operation.calls == 1
        assert sleep_recorder.delays == []

    @pytest.mark.asyncio
    async def test_sleeps_between_attempts_only(self, sleep_recorder):
        operation = FlakyOperation(failures=5)

        await with_retry(operation, max_retries=2, retry_delay=1.5)

        # 3 attempts -> 2 pauses, none after the final attempt
        assert sleep_recorder.delays == [1.5, 1.5]

    @pytest.mark.asyncio
    async def test_non_retryable_error_propagates(self):
        operation = FlakyOperation(failures=1, error=KeyError("bug"))

        with pytest.raises(KeyError):
            await with_retry(operation, max_retries=3, retry_delay=0, retry_on=(ScraperError,))

        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_reason_uses_error_message(self):
        operation = FlakyOperation(failures=10, error=RequestTimeoutError("https://x.test", 10))

        result = await with_retry(operation, max_retries=1, retry_delay=0)

        assert result.reason == "Request timed out after 10s"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_retries, retry_delay", [(-1, 0), (1, -0.5)])
    async def test_invalid_budget_rejected(self, max_retries, retry_delay):
        with pytest.raises(ValueError):
            await with_retry(FlakyOperation(0), max_retries=max_retries, retry_delay=retry_delay)


class TestRetryResult:
    """Test RetryResult helpers."""

    def test_reason_empty_on_success(self):
        assert RetryResult(value="x").reason == ""

    def test_reason_falls_back_to_exception_type(self):
        assert RetryResult(error=ValueError(), attempts=1).reason == "ValueError"
