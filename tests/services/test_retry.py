"""Unit tests for src/services/retry.py"""

import random
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from src.core.exceptions import (
    PersistenceError,
    PersistenceUnavailableError,
    RetryExhaustedError,
)
from src.services.retry import RetryPolicy, is_retryable


@pytest.fixture
def sleep() -> Mock:
    return Mock()


@pytest.fixture
def policy(sleep: Mock) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=4, base_delay=0.5, jitter=0.0, sleep=sleep, rng=random.Random(0)
    )


@pytest.mark.parametrize(
    "error, expected",
    [
        (PersistenceUnavailableError(), True),
        (PersistenceError("quota", code="resource-exhausted"), True),
        (PersistenceError("nope", code="permission-denied"), False),
        (OperationalError("SELECT 1", {}, Exception("database is locked")), True),
        (RuntimeError("Service Unavailable"), True),
        (RuntimeError("boom"), False),
        (PersistenceError("not found", code="not-found"), False),
    ],
)
def test_is_retryable(error: Exception, expected: bool) -> None:
    assert is_retryable(error) is expected


def test_success_first_time(policy: RetryPolicy, sleep: Mock) -> None:
    fn = Mock(return_value=3)
    assert policy.call(fn, "player_one") == 3
    fn.assert_called_once_with("player_one")
    sleep.assert_not_called()


def test_retry_then_succeed(policy: RetryPolicy, sleep: Mock) -> None:
    fn = Mock(side_effect=[PersistenceUnavailableError(), PersistenceUnavailableError(), "ok"])
    assert policy.call(fn) == "ok"
    assert fn.call_count == 3
    # base delay doubles every attempt
    assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0]


def test_retries_exhausted(policy: RetryPolicy, sleep: Mock) -> None:
    last_error = PersistenceUnavailableError("still down")
    fn = Mock(side_effect=[PersistenceUnavailableError()] * 3 + [last_error])

    with pytest.raises(RetryExhaustedError) as exc_info:
        policy.call(fn)

    assert fn.call_count == 4
    assert exc_info.value.attempts == 4
    assert exc_info.value.__cause__ is last_error
    # no sleep after the final attempt
    assert sleep.call_count == 3


def test_non_retryable_error_propagates(policy: RetryPolicy, sleep: Mock) -> None:
    fn = Mock(side_effect=ValueError("bad record"))
    with pytest.raises(ValueError):
        policy.call(fn)
    fn.assert_called_once()
    sleep.assert_not_called()


def test_delay_is_capped_and_jittered() -> None:
    policy = RetryPolicy(base_delay=1.0, max_delay=4.0, jitter=0.5, rng=random.Random(3))
    for attempt in range(8):
        delay = policy.delay(attempt)
        backoff = min(2**attempt, 4.0)
        assert backoff <= delay <= backoff + 0.5
