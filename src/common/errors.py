"""Errors raised while retrieving and decoding APKINDEX archives.

Kept in common so the HTTP helpers can raise them without importing the
registry package."""


class FetchError(Exception):
    """Raised when an index reference cannot be opened or downloaded."""

    def __init__(self, ref: str, reason: str):
        super().__init__(f"failed to fetch APKINDEX {ref}: {reason}")
        self.ref = ref
        self.reason = reason


class DecodeError(Exception):
    """Raised when an index archive is not a readable APKINDEX."""

    def __init__(self, ref: str, reason: str):
        super().__init__(f"failed to read APKINDEX archive {ref}: {reason}")
        self.ref = ref
        self.reason = reason
