from __future__ import annotations

import pytest

from saasrest.core.config import ClientConfig
from saasrest.core.env import load_config, parse_bool

################################
#     Tests for parse_bool     #
################################


@pytest.mark.parametrize("value", ["1", "true", "True", "YES", " on ", "t", "y"])
def test_parse_bool_true(value: str) -> None:
    assert parse_bool(value)


@pytest.mark.parametrize("value", ["0", "false", "FALSE", "no", "off", "f", "n"])
def test_parse_bool_false(value: str) -> None:
    assert not parse_bool(value)


def test_parse_bool_invalid() -> None:
    with pytest.raises(ValueError, match=r"invalid boolean value: 'maybe'"):
        parse_bool("maybe")


#################################
#     Tests for load_config     #
#################################


def test_load_config_empty_environment() -> None:
    assert load_config(environ={}) == ClientConfig()


def test_load_config_reads_variables() -> None:
    config = load_config(
        "SPLUNK_",
        {
            "SPLUNK_URL": "https://splunk.example.com:8089",
            "SPLUNK_REQUEST_TIMEOUT": "12.5",
            "SPLUNK_MAX_RETRIES": "5",
            "SPLUNK_RETRY_DELAY": "1",
            "SPLUNK_BACKOFF_EXPONENT": "1.5",
            "SPLUNK_SKIP_SSL_VERIFY": "true",
        },
    )
    assert config.base_url == "https://splunk.example.com:8089"
    assert config.timeout == 12.5
    assert config.retry_policy.max_retries == 5
    assert config.retry_policy.base_delay == 1.0
    assert config.retry_policy.backoff_exponent == 1.5
    assert not config.verify_ssl


def test_load_config_default_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAASREST_URL", "https://api.example.com")
    monkeypatch.setenv("SAASREST_MAX_RETRIES", "7")
    config = load_config()
    assert config.base_url == "https://api.example.com"
    assert config.retry_policy.max_retries == 7


def test_load_config_zero_and_empty_values_take_defaults() -> None:
    config = load_config(
        environ={
            "SAASREST_REQUEST_TIMEOUT": "0",
            "SAASREST_MAX_RETRIES": "",
            "SAASREST_RETRY_DELAY": "  ",
        }
    )
    assert config.timeout == 30.0
    assert config.retry_policy.max_retries == 3
    assert config.retry_policy.base_delay == 5.0


def test_load_config_overrides_win() -> None:
    config = load_config(
        environ={"SAASREST_URL": "https://env.example.com"},
        base_url="https://override.example.com",
        headers={"Authorization": "Bearer token"},
    )
    assert config.base_url == "https://override.example.com"
    assert config.headers == {"Authorization": "Bearer token"}


def test_load_config_invalid_number() -> None:
    with pytest.raises(ValueError, match=r"invalid value for SAASREST_MAX_RETRIES: 'three'"):
        load_config(environ={"SAASREST_MAX_RETRIES": "three"})


def test_load_config_invalid_bool() -> None:
    with pytest.raises(ValueError, match=r"invalid value for SAASREST_SKIP_SSL_VERIFY"):
        load_config(environ={"SAASREST_SKIP_SSL_VERIFY": "maybe"})


def test_load_config_negative_value_rejected() -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        load_config(environ={"SAASREST_REQUEST_TIMEOUT": "-1"})
