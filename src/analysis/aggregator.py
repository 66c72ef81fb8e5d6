"""Aggregation of matching package records across repositories.

Worker threads, one per index, call PackageInfoOutput.add_package_meta for
every decoded record. The result map is only touched under a single lock
while workers run; once the driver has joined every worker the object is
owned by one thread, which sorts, trims and renders it.
"""
from __future__ import annotations

import logging
import threading
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

from analysis.query import Query, match_queries
from common.logging_utils import extra_context, is_debug_enabled
from versioning.apk_version import compare_versions, version_key
from versioning.models import (
    PackageRecord,
    PackageRecordSet,
    PackageVersionEntry,
    SubPackageEntry,
)

logger = logging.getLogger(__name__)


class Classification(Enum):
    """How a record relates to the active query set."""
    PRIMARY = "primary"
    SUBPACKAGE = "subpackage"
    NONE = "none"


def classify(queries: Sequence[Query], record: PackageRecord) -> Classification:
    """Classify a record; a direct name match always wins over an origin match."""
    if match_queries(queries, record.name):
        return Classification.PRIMARY
    if record.origin and match_queries(queries, record.origin):
        return Classification.SUBPACKAGE
    return Classification.NONE


class PackageInfoOutput:
    """Thread-safe map of package name to its collected versions and sub-packages."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result: Dict[str, PackageRecordSet] = {}

    @property
    def results(self) -> Mapping[str, PackageRecordSet]:
        """Read-only view of the collected data."""
        return MappingProxyType(self._result)

    def __len__(self) -> int:
        return len(self._result)

    def add_package_meta(
        self, queries: Sequence[Query], record: PackageRecord, repository: str
    ) -> Classification:
        """Merge one record into the result map.

        A record whose name matches the queries is added as a version of that
        name. Otherwise, if its origin matches, it is added as a sub-package of
        the origin. Anything else is ignored.

        Args:
            queries: Non-empty query set.
            record: Decoded index entry.
            repository: Label of the index the record came from.

        Returns:
            Classification: The classification applied to the record.
        """
        kind = classify(queries, record)
        if kind is Classification.NONE:
            return kind

        if kind is Classification.PRIMARY:
            entry = PackageVersionEntry(
                version=record.version,
                origin=record.origin,
                repository=repository,
                build_time=record.build_time,
            )
            with self._lock:
                pkg = self._result.get(record.name)
                if pkg is None:
                    pkg = self._result[record.name] = PackageRecordSet()
                pkg.versions.append(entry)
        else:
            sub = SubPackageEntry(
                name=record.name,
                version=record.version,
                origin=record.origin,
                repository=repository,
                build_time=record.build_time,
            )
            with self._lock:
                pkg = self._result.get(record.origin)
                if pkg is None:
                    pkg = self._result[record.origin] = PackageRecordSet()
                pkg.subpackages.append(sub)

        if is_debug_enabled(logger):
            logger.debug(
                "Record matched",
                extra=extra_context(
                    event="match",
                    component="aggregator",
                    outcome=kind.value,
                    target=record.name,
                    repository=repository,
                ),
            )
        return kind

    def sort(self) -> None:
        """Sort versions ascending, and sub-packages by name then version.

        Equal versions are ordered by repository label, so the result does not
        depend on which worker finished first.

        Must only be called after every worker has finished.
        """
        for pkg in self._result.values():
            if len(pkg.versions) > 1:
                pkg.versions.sort(key=lambda v: (version_key(v.version), v.repository))
            if len(pkg.subpackages) > 1:
                pkg.subpackages.sort(
                    key=lambda s: (s.name, version_key(s.version), s.repository)
                )

    def trim_latest(self) -> None:
        """Reduce every package to its latest version.

        Expects sort() to have run. Sub-packages are kept only when they were
        built at the same version in the same repository as the retained
        parent version. A package known only as an origin keeps the latest
        entry of each of its sub-packages.
        """
        for pkg in self._result.values():
            if pkg.versions:
                latest = pkg.versions[-1]
                pkg.versions = [latest]
                pkg.subpackages = [
                    s for s in pkg.subpackages
                    if s.version == latest.version and s.repository == latest.repository
                ]
            elif pkg.subpackages:
                pkg.subpackages = _latest_per_name(pkg.subpackages)

    def to_dict(self) -> Dict[str, dict]:
        """Plain-data view keyed by package name in ascending order."""
        return {name: self._result[name].to_dict() for name in sorted(self._result)}


def _latest_per_name(subpackages: List[SubPackageEntry]) -> List[SubPackageEntry]:
    latest: Dict[str, SubPackageEntry] = {}
    for s in subpackages:
        current = latest.get(s.name)
        if current is None or compare_versions(s.version, current.version) >= 0:
            latest[s.name] = s
    return [latest[name] for name in sorted(latest)]
