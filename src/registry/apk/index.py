"""APKINDEX archive decoding.

An APKINDEX.tar.gz is one or more concatenated gzip streams (an optional
signature segment followed by the index segment) holding a tar archive with
an ``APKINDEX`` member. That member is plain text: one block per package,
blocks separated by blank lines, each line ``K:value``.
"""
from __future__ import annotations

import gzip
import logging
import tarfile
import zlib
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List

from constants import Constants
from common.errors import DecodeError
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.apk_version import is_valid
from versioning.models import EPOCH, PackageRecord

logger = logging.getLogger(__name__)


def read_index(stream: BinaryIO, ref: str, repository: str = "") -> List[PackageRecord]:
    """Decode an APKINDEX.tar.gz byte stream into package records.

    Args:
        stream: Binary stream positioned at the start of the archive.
        ref: Index reference, used in error messages.
        repository: Label stored on every record.

    Returns:
        list: Records in index order.

    Raises:
        DecodeError: If the archive is corrupt or has no APKINDEX member.
    """
    with Timer() as t:
        try:
            with gzip.GzipFile(fileobj=stream) as gz:
                with tarfile.open(fileobj=gz, mode="r|") as tar:
                    content = None
                    for member in tar:
                        if member.isfile() and member.name == Constants.APKINDEX_MEMBER:
                            fh = tar.extractfile(member)
                            content = fh.read() if fh is not None else b""
                            break
        except (OSError, EOFError, tarfile.TarError, zlib.error) as exc:
            raise DecodeError(ref, str(exc)) from exc

        if content is None:
            raise DecodeError(ref, f"no {Constants.APKINDEX_MEMBER} member in archive")
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(ref, str(exc)) from exc

        records = parse_apkindex(text, repository)

    if is_debug_enabled(logger):
        logger.debug(
            "Decoded APKINDEX",
            extra=extra_context(
                event="parse",
                component="apkindex",
                action="read_index",
                count=len(records),
                duration_ms=t.duration_ms(),
                repository=repository,
            ),
        )
    return records


def parse_apkindex(text: str, repository: str = "") -> List[PackageRecord]:
    """Parse the text of an APKINDEX member.

    Blocks without a name or a version are skipped.
    """
    records: List[PackageRecord] = []
    for block in text.split("\n\n"):
        fields: Dict[str, str] = {}
        for line in block.splitlines():
            if len(line) < 2 or line[1] != ":":
                continue
            fields[line[0]] = line[2:].strip()
        if not fields:
            continue
        name = fields.get("P")
        version = fields.get("V")
        if not name or not version:
            logger.debug("Skipping APKINDEX block without name or version: %r", fields)
            continue
        if not is_valid(version):
            logger.debug("%s has an unparsable version %r; it sorts lowest", name, version)
        records.append(
            PackageRecord(
                name=name,
                version=version,
                origin=fields.get("o", ""),
                build_time=_build_time(fields.get("t")),
                repository=repository,
                arch=fields.get("A", ""),
                description=fields.get("T", ""),
                license=fields.get("L", ""),
                maintainer=fields.get("m", ""),
                commit=fields.get("c", ""),
                size=_int(fields.get("S")),
                installed_size=_int(fields.get("I")),
                depends=tuple(fields.get("D", "").split()),
                provides=tuple(fields.get("p", "").split()),
            )
        )
    return records


def _build_time(value) -> datetime:
    if not value:
        return EPOCH
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.warning("Couldn't parse build time %r, using epoch.", value)
        return EPOCH


def _int(value) -> int:
    try:
        return int(value) if value else 0
    except ValueError:
        return 0
