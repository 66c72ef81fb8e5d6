"""Data models for package records and aggregated version information."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Tuple

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class PackageRecord:
    """One package entry decoded from an APKINDEX."""
    name: str
    version: str
    origin: str = ""
    build_time: datetime = EPOCH
    repository: str = ""
    arch: str = ""
    description: str = ""
    license: str = ""
    maintainer: str = ""
    commit: str = ""
    size: int = 0
    installed_size: int = 0
    depends: Tuple[str, ...] = ()
    provides: Tuple[str, ...] = ()


@dataclass
class PackageVersionEntry:
    """A single observed version of a package in one repository."""
    version: str
    origin: str
    repository: str
    build_time: datetime

    def to_dict(self) -> dict:
        return {
            "BuildTime": format_build_time(self.build_time),
            "Origin": self.origin,
            "Repository": self.repository,
            "Version": self.version,
        }


@dataclass
class SubPackageEntry(PackageVersionEntry):
    """A version of a package built from another (origin) package."""
    name: str = ""

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["name"] = self.name
        return data


@dataclass
class PackageRecordSet:
    """Everything collected for one package name."""
    versions: List[PackageVersionEntry] = field(default_factory=list)
    subpackages: List[SubPackageEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "versions": [v.to_dict() for v in self.versions],
            "subpackages": [s.to_dict() for s in self.subpackages],
        }


def format_build_time(value: datetime) -> str:
    """Render a timestamp as RFC 3339, using 'Z' for UTC."""
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_build_time(text: str) -> datetime:
    """Inverse of format_build_time."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
