"""Rendering of aggregated package information as text or JSON."""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

import humanize

from analysis.aggregator import PackageInfoOutput
from constants import Constants, ExitCodes
from versioning.models import PackageRecord

logger = logging.getLogger(__name__)


def format_relative(build_time: datetime, now: Optional[datetime] = None) -> str:
    """Human relative rendering of a build time, e.g. "3 days ago"."""
    now = now or datetime.now(timezone.utc)
    return humanize.naturaltime(now - build_time)


def format_absolute(build_time: datetime) -> str:
    """Absolute rendering of a build time, e.g. "2024-08-08 10:00:00 +0000 UTC"."""
    return build_time.strftime("%Y-%m-%d %H:%M:%S %z %Z")


def _parent_suffix(origin: str, show_parent: bool) -> str:
    return Constants.PARENT_INFO_PREFIX + origin if show_parent else ""


def format_record_line(
    record: PackageRecord, show_parent: bool = False, now: Optional[datetime] = None
) -> str:
    """One line for a raw index record, used when no query was given."""
    return (
        f"{record.name} version {record.version} "
        f"({format_relative(record.build_time, now)} - {format_absolute(record.build_time)}) "
        f"in {record.repository} repository{_parent_suffix(record.origin, show_parent)}"
    )


def render_json(result: PackageInfoOutput) -> str:
    """Serialize the result map as an indented JSON document."""
    return json.dumps(result.to_dict(), indent=2)


def render_text(
    result: PackageInfoOutput,
    show_parent: bool = False,
    show_sub: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """Human readable listing, one section per package name in ascending order."""
    now = now or datetime.now(timezone.utc)
    lines = []
    results = result.results
    for name in sorted(results):
        pkg = results[name]
        lines.append(f"The versions of package {name} are:")
        for v in pkg.versions:
            lines.append(
                f"\t{v.version} ({format_relative(v.build_time, now)} - {format_absolute(v.build_time)}) "
                f"in {v.repository} repository{_parent_suffix(v.origin, show_parent)}"
            )
        if show_sub and pkg.subpackages:
            lines.append("\tSub packages:")
            for s in pkg.subpackages:
                lines.append(
                    f"\t{s.name} {s.version} ({format_relative(s.build_time, now)} - "
                    f"{format_absolute(s.build_time)}) in {s.repository} repository"
                )
    return "".join(line + "\n" for line in lines)


def print_results(
    result: PackageInfoOutput,
    out: TextIO,
    all_versions: bool = False,
    as_json: bool = False,
    show_parent: bool = False,
    show_sub: bool = False,
    now: Optional[datetime] = None,
) -> None:
    """Trim (unless all_versions) and write the result to out.

    Expects result.sort() to have run.
    """
    if not all_versions:
        result.trim_latest()

    if as_json:
        try:
            out.write(render_json(result) + "\n")
        except (TypeError, ValueError) as e:
            logger.error("Error marshalling JSON: %s", e)
            sys.exit(ExitCodes.FILE_ERROR.value)
        return

    out.write(render_text(result, show_parent=show_parent, show_sub=show_sub, now=now))
