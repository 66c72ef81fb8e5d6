"""Shared fixtures: real APKINDEX.tar.gz archives built in memory."""

import gzip
import io
import tarfile

import pytest

# 2024-08-08 10:00:00 UTC
BUILD_TIME = 1723111200


def apkindex_text(packages):
    """Render package dicts (APKINDEX single-letter keys) as index text."""
    blocks = []
    for pkg in packages:
        fields = {"C": "Q1abcdefghijklmnopqrstuvwxyz0=", "A": "x86_64", "t": str(BUILD_TIME)}
        fields.update(pkg)
        blocks.append("".join(f"{k}:{v}\n" for k, v in fields.items()))
    return "\n".join(blocks) + "\n"


def _tar(members, eof=True):
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.USTAR_FORMAT) as tar:
        for name, data in members:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mtime = BUILD_TIME
            tar.addfile(info, io.BytesIO(data))
    raw = buf.getvalue()
    if eof:
        return raw
    # apk signature segments stop right after the last member, without the
    # end-of-archive blocks.
    size = 0
    for _, data in members:
        size += 512 + -(-len(data) // 512) * 512
    return raw[:size]


def build_archive(packages, signed=False, member="APKINDEX"):
    """Bytes of an APKINDEX.tar.gz holding packages."""
    index = _tar([
        ("DESCRIPTION", b"test-repository"),
        (member, apkindex_text(packages).encode("utf-8")),
    ])
    body = gzip.compress(index)
    if signed:
        signature = _tar([(".SIGN.RSA.test.rsa.pub", b"\x01" * 256)], eof=False)
        body = gzip.compress(signature) + body
    return body


PYTHON_PACKAGES = [
    {"P": "python-3.12", "V": "3.12.4-r0", "o": "python-3.12"},
    {"P": "python-3.12-base", "V": "3.12.4-r0", "o": "python-3.12"},
    {"P": "python-3.12-dev", "V": "3.12.4-r0", "o": "python-3.12"},
    {"P": "python-3.13", "V": "3.13.0-r0", "o": "python-3.13"},
    {"P": "python-3.13-base", "V": "3.13.0-r0", "o": "python-3.13"},
    {"P": "python-3.13", "V": "3.13.0-r1", "o": "python-3.13"},
    {"P": "python-3.13-base", "V": "3.13.0-r1", "o": "python-3.13"},
    {"P": "python-3.13-dev", "V": "3.13.0-r1", "o": "python-3.13"},
    {"P": "ruby-3.2", "V": "3.2.4-r2", "o": "ruby-3.2"},
]


@pytest.fixture
def python_packages():
    return [dict(p) for p in PYTHON_PACKAGES]


@pytest.fixture
def apkindex_file(tmp_path):
    """Factory writing an archive to tmp_path and returning its path."""

    def _make(packages, name="APKINDEX.tar.gz", signed=False):
        path = tmp_path / name
        path.write_bytes(build_archive(packages, signed=signed))
        return str(path)

    return _make


@pytest.fixture
def archive_bytes():
    """Factory returning archive bytes, for mocked HTTP responses."""
    return build_archive


@pytest.fixture
def index_text():
    """Factory returning the plain APKINDEX text for packages."""
    return apkindex_text
