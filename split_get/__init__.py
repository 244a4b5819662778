"""SplitGet - parallel range-aware HTTP/1.0 downloader."""

from split_get.config import DownloadConfig
from split_get.engine import DownloadEngine, download

__version__ = "1.0.0"

__all__ = ["DownloadConfig", "DownloadEngine", "download", "__version__"]
