from __future__ import annotations

import dataclasses

import pytest
from coola.equality import objects_are_equal

from saasrest.backoff import ConstantBackoff, ExponentialBackoff
from saasrest.core.config import (
    DEFAULT_BACKOFF_EXPONENT,
    DEFAULT_IDEMPOTENCY_MARKERS,
    DEFAULT_MAX_CONNECTIONS_PER_HOST,
    DEFAULT_MAX_IDLE_CONNECTIONS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    ClientConfig,
    RetryPolicy,
)

#################################
#     Tests for RetryPolicy     #
#################################


def test_retry_policy_defaults() -> None:
    policy = RetryPolicy()
    assert policy.max_retries == DEFAULT_MAX_RETRIES
    assert policy.base_delay == DEFAULT_RETRY_DELAY
    assert policy.backoff_exponent == DEFAULT_BACKOFF_EXPONENT
    assert policy.max_delay is None
    assert policy.max_attempts == 4


def test_retry_policy_default_delays() -> None:
    """Test the 5s, 10s, 20s schedule of the default policy."""
    policy = RetryPolicy()
    assert [policy.delay(attempt) for attempt in (1, 2, 3)] == [5.0, 10.0, 20.0]


def test_retry_policy_delay_with_max_delay() -> None:
    policy = RetryPolicy(base_delay=5.0, backoff_exponent=2.0, max_delay=12.0)
    assert [policy.delay(attempt) for attempt in (1, 2, 3)] == [5.0, 10.0, 12.0]


def test_retry_policy_long_schedule_with_max_delay() -> None:
    policy = RetryPolicy(max_retries=2000, max_delay=60.0)
    delays = [policy.delay(attempt) for attempt in range(1, policy.max_retries + 1)]
    assert delays[:5] == [5.0, 10.0, 20.0, 40.0, 60.0]
    assert max(delays) == 60.0


def test_retry_policy_strategy_is_exponential() -> None:
    strategy = RetryPolicy(base_delay=1.0, backoff_exponent=3.0).strategy
    assert isinstance(strategy, ExponentialBackoff)
    assert strategy.base_delay == 1.0
    assert strategy.exponent == 3.0


def test_retry_policy_custom_strategy() -> None:
    policy = RetryPolicy(backoff_strategy=ConstantBackoff(delay=1.5))
    assert [policy.delay(attempt) for attempt in (1, 2, 3)] == [1.5, 1.5, 1.5]


def test_retry_policy_zero_retries_single_attempt() -> None:
    assert RetryPolicy(max_retries=0).max_attempts == 1


def test_retry_policy_is_frozen() -> None:
    policy = RetryPolicy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.max_retries = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"max_retries": -1}, r"max_retries must be >= 0"),
        ({"base_delay": -1.0}, r"base_delay must be >= 0"),
        ({"backoff_exponent": -1.0}, r"backoff_exponent must be >= 0"),
        ({"max_delay": 0.0}, r"max_delay must be > 0"),
    ],
)
def test_retry_policy_invalid(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        RetryPolicy(**kwargs)


def test_retry_policy_with_defaults() -> None:
    policy = RetryPolicy(max_retries=0, base_delay=0.0, backoff_exponent=0.0).with_defaults()
    assert policy == RetryPolicy(
        max_retries=DEFAULT_MAX_RETRIES,
        base_delay=DEFAULT_RETRY_DELAY,
        backoff_exponent=DEFAULT_BACKOFF_EXPONENT,
    )


def test_retry_policy_with_defaults_keeps_values() -> None:
    policy = RetryPolicy(max_retries=2, base_delay=1.0, backoff_exponent=1.5)
    assert policy.with_defaults() == policy


##################################
#     Tests for ClientConfig     #
##################################


def test_client_config_defaults() -> None:
    config = ClientConfig()
    assert config.base_url == ""
    assert config.headers == {}
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.retry_policy == RetryPolicy()
    assert config.max_idle_connections == DEFAULT_MAX_IDLE_CONNECTIONS
    assert config.max_connections_per_host == DEFAULT_MAX_CONNECTIONS_PER_HOST
    assert config.verify_ssl
    assert config.idempotency_markers == DEFAULT_IDEMPOTENCY_MARKERS
    assert config.on_request is None
    assert config.on_retry is None
    assert config.on_success is None
    assert config.on_failure is None


def test_client_config_zero_values_take_defaults() -> None:
    """Test that zero-valued fields are replaced by their default."""
    config = ClientConfig(
        timeout=0,
        retry_policy=RetryPolicy(max_retries=0, base_delay=0.0, backoff_exponent=0.0),
        max_idle_connections=0,
        max_connections_per_host=0,
    )
    assert config.timeout == 30.0
    assert config.retry_policy.max_retries == 3
    assert config.retry_policy.base_delay == 5.0
    assert config.retry_policy.backoff_exponent == 2.0
    assert config.max_idle_connections == 100
    assert config.max_connections_per_host == 100


def test_client_config_custom_values() -> None:
    config = ClientConfig(
        base_url="https://splunk.example.com:8089",
        headers={"Authorization": "Bearer token"},
        timeout=10.0,
        retry_policy=RetryPolicy(max_retries=2, base_delay=1.0, backoff_exponent=3.0),
        verify_ssl=False,
        idempotency_markers=["duplicate"],
    )
    assert config.base_url == "https://splunk.example.com:8089"
    assert config.headers == {"Authorization": "Bearer token"}
    assert config.timeout == 10.0
    assert config.retry_policy.delay(2) == 3.0
    assert not config.verify_ssl
    assert config.idempotency_markers == ("duplicate",)


def test_client_config_headers_are_copied_and_read_only() -> None:
    headers = {"Authorization": "Bearer token"}
    config = ClientConfig(headers=headers)
    headers["Authorization"] = "changed"
    assert config.headers["Authorization"] == "Bearer token"
    with pytest.raises(TypeError):
        config.headers["X-New"] = "value"  # type: ignore[index]


def test_client_config_is_frozen() -> None:
    config = ClientConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.timeout = 5.0  # type: ignore[misc]


def test_client_config_invalid_timeout() -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        ClientConfig(timeout=-1.0)


def test_client_config_invalid_pool() -> None:
    with pytest.raises(ValueError, match=r"max_idle_connections must be >= 0"):
        ClientConfig(max_idle_connections=-1)


def test_client_config_merge() -> None:
    config = ClientConfig(base_url="https://api.example.com", timeout=10.0)
    merged = config.merge(timeout=20.0, verify_ssl=False)
    assert merged.timeout == 20.0
    assert not merged.verify_ssl
    assert merged.base_url == "https://api.example.com"
    assert config.timeout == 10.0
    assert config.verify_ssl


def test_client_config_merge_ignores_none() -> None:
    config = ClientConfig(timeout=10.0)
    assert config.merge(timeout=None, base_url=None) == config


def test_client_config_merge_revalidates() -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        ClientConfig().merge(timeout=-5.0)


def test_client_config_to_dict() -> None:
    config = ClientConfig(base_url="https://api.example.com", headers={"X-App": "provisioner"})
    assert objects_are_equal(
        config.to_dict(),
        {
            "base_url": "https://api.example.com",
            "headers": {"X-App": "provisioner"},
            "timeout": 30.0,
            "max_retries": 3,
            "retry_delay": 5.0,
            "backoff_exponent": 2.0,
            "max_idle_connections": 100,
            "max_connections_per_host": 100,
            "verify_ssl": True,
            "idempotency_markers": ("already in use", "already exists"),
        },
    )
