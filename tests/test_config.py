"""Tests for DownloadConfig loading and validation."""

import pytest

from split_get.config import DownloadConfig
from split_get.errors import ConfigError


def test_defaults():
    config = DownloadConfig()
    assert config.port == 80
    assert config.num_workers == 4
    assert config.max_chunk_size is None
    assert config.user_agent is None
    config.validate()


def test_from_env(monkeypatch):
    monkeypatch.setenv("SPLITGET_PORT", "8080")
    monkeypatch.setenv("SPLITGET_WORKERS", "16")
    monkeypatch.setenv("SPLITGET_CHUNK_SIZE", "65536")
    monkeypatch.setenv("SPLITGET_READ_TIMEOUT", "2.5")
    monkeypatch.setenv("SPLITGET_USER_AGENT", "split-get/1.0")

    config = DownloadConfig.from_env()

    assert config.port == 8080
    assert config.num_workers == 16
    assert config.max_chunk_size == 65536
    assert config.read_timeout == 2.5
    assert config.user_agent == "split-get/1.0"
    assert config.max_retries == 3


def test_from_env_unparsable(monkeypatch):
    monkeypatch.setenv("SPLITGET_WORKERS", "many")
    with pytest.raises(ConfigError):
        DownloadConfig.from_env()


@pytest.mark.parametrize("changes", [
    {"port": 0},
    {"port": 70000},
    {"num_workers": 0},
    {"max_chunk_size": 0},
    {"max_retries": 0},
    {"retry_backoff": -1},
    {"read_timeout": 0},
    {"initial_buffer_size": 0},
])
def test_validate_rejects(changes):
    with pytest.raises(ConfigError):
        DownloadConfig(**changes).validate()
