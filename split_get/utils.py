# split_get/utils.py
"""
Shared helper functions for formatting and parsing CLI values.
"""
import posixpath
import re

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([KMGT]?)i?B?\s*$", re.IGNORECASE)
_SIZE_UNITS = {'': 1, 'K': 1024, 'M': 1024 ** 2, 'G': 1024 ** 3, 'T': 1024 ** 4}


def format_bytes(size) -> str:
    """Converts bytes into a human-readable format (KB, MB, GB)."""
    if not isinstance(size, (int, float)):
        return "0 B"
    power = 1024
    n = 0
    power_labels = {0: '', 1: 'K', 2: 'M', 3: 'G', 4: 'T'}
    while size > power and n < len(power_labels) - 1:
        size /= power
        n += 1
    return f"{size:.2f} {power_labels[n]}B"


def parse_size(text: str) -> int:
    """Parses sizes like '4096', '512K', '4M' or '1GiB' into bytes."""
    match = _SIZE_PATTERN.match(text)
    if not match:
        raise ValueError(f"Invalid size: '{text}'")
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[unit.upper()]


def get_default_filename(url: str) -> str:
    """Extracts a filename from the path part of a host/path URL."""
    _, sep, path = url.partition("/")
    if not sep:
        return "download.dat"
    filename = posixpath.basename(path.split("?", 1)[0])
    return filename if filename else "download.dat"
