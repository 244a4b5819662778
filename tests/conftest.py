"""
pytest configuration for SplitGet tests.

Adds the project root to the Python path so the package imports without
installation, and provides shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

from split_get.config import DownloadConfig  # noqa: E402


@pytest.fixture
def fast_config():
    """Config with no retry delay and short timeouts."""
    return DownloadConfig(max_retries=3, retry_backoff=0, connect_timeout=5, read_timeout=5)


@pytest.fixture
def payload():
    """Deterministic non-repeating test payload."""
    return bytes((i * 7 + i // 251) % 256 for i in range(10_000))
