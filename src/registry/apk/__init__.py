"""APKINDEX repository package.

This package provides access to Alpine-format package repositories:
- fetch.py: opening remote (HTTP/HTTPS) or local index references
- index.py: decoding APKINDEX.tar.gz archives into package records
- FetchError and DecodeError are re-exported from common.errors

Public API is preserved at registry.apk without shims.
"""

from common.errors import DecodeError, FetchError  # noqa: F401
from .fetch import Scheme, build_headers, open_index, parse_scheme  # noqa: F401
from .index import parse_apkindex, read_index  # noqa: F401

__all__ = [
    "DecodeError",
    "FetchError",
    "Scheme",
    "build_headers",
    "open_index",
    "parse_scheme",
    "parse_apkindex",
    "read_index",
]
