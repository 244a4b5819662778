# split_get/config.py
"""Download configuration, from defaults, environment variables, or CLI flags."""

import os
from dataclasses import dataclass
from typing import Optional

from split_get.errors import ConfigError

DEFAULT_PORT = 80


@dataclass
class DownloadConfig:
    """Settings threaded through the client and the download engine.

    Load from environment using DownloadConfig.from_env().
    All timing values in seconds.
    """

    port: int = DEFAULT_PORT
    num_workers: int = 4
    max_chunk_size: Optional[int] = None  # None = one chunk per worker

    # Retry policy (attempts per chunk, including the first)
    max_retries: int = 3
    retry_backoff: float = 0.5
    max_backoff: float = 30.0

    # Transport
    connect_timeout: float = 30.0
    read_timeout: float = 30.0
    initial_buffer_size: int = 1024
    read_size: int = 8192
    user_agent: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DownloadConfig":
        """Load configuration from environment variables.

        Optional environment variables (with defaults):
            SPLITGET_PORT: 80
            SPLITGET_WORKERS: 4
            SPLITGET_CHUNK_SIZE: unset (one chunk per worker)
            SPLITGET_MAX_RETRIES: 3
            SPLITGET_RETRY_BACKOFF: 0.5
            SPLITGET_MAX_BACKOFF: 30
            SPLITGET_CONNECT_TIMEOUT: 30
            SPLITGET_READ_TIMEOUT: 30
            SPLITGET_BUFFER_SIZE: 1024
            SPLITGET_READ_SIZE: 8192
            SPLITGET_USER_AGENT: unset (no User-Agent header)

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range
        """
        try:
            chunk_size = os.getenv("SPLITGET_CHUNK_SIZE")
            config = cls(
                port=int(os.getenv("SPLITGET_PORT", str(DEFAULT_PORT))),
                num_workers=int(os.getenv("SPLITGET_WORKERS", "4")),
                max_chunk_size=int(chunk_size) if chunk_size else None,
                max_retries=int(os.getenv("SPLITGET_MAX_RETRIES", "3")),
                retry_backoff=float(os.getenv("SPLITGET_RETRY_BACKOFF", "0.5")),
                max_backoff=float(os.getenv("SPLITGET_MAX_BACKOFF", "30")),
                connect_timeout=float(os.getenv("SPLITGET_CONNECT_TIMEOUT", "30")),
                read_timeout=float(os.getenv("SPLITGET_READ_TIMEOUT", "30")),
                initial_buffer_size=int(os.getenv("SPLITGET_BUFFER_SIZE", "1024")),
                read_size=int(os.getenv("SPLITGET_READ_SIZE", "8192")),
                user_agent=os.getenv("SPLITGET_USER_AGENT") or None,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid SPLITGET_* environment variable: {e}") from e
        config.validate()
        return config

    def validate(self):
        """Raise ConfigError for values the downloader cannot work with."""
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535, got {self.port}")
        if self.num_workers <= 0:
            raise ConfigError(f"num_workers must be positive, got {self.num_workers}")
        if self.max_chunk_size is not None and self.max_chunk_size <= 0:
            raise ConfigError(f"max_chunk_size must be positive, got {self.max_chunk_size}")
        if self.max_retries < 1:
            raise ConfigError(f"max_retries must be at least 1, got {self.max_retries}")
        if self.retry_backoff < 0 or self.max_backoff < 0:
            raise ConfigError("retry backoff values cannot be negative")
        for name in ("connect_timeout", "read_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("initial_buffer_size", "read_size"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
