"""Fan-out of index downloads and fan-in of matching records.

Every configured index is fetched, decoded and classified by its own worker
thread. Workers only share the PackageInfoOutput, whose merge method takes
the lock per record. Sorting and printing start after every worker has
finished, whether it succeeded or not.
"""
from __future__ import annotations

import logging
import os
import sys
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence, TextIO

from analysis.aggregator import Classification, PackageInfoOutput
from analysis.query import Query
from cli_config import IndexSource, RunConfig
from common.errors import DecodeError, FetchError
from common.http_client import build_session
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from export import format_record_line, print_results
from registry.apk import open_index, read_index
from versioning.models import PackageRecord

logger = logging.getLogger(__name__)


def process_source(
    source: IndexSource,
    queries: Sequence[Query],
    result: PackageInfoOutput,
    config: RunConfig,
) -> List[PackageRecord]:
    """Fetch and decode one index, merging matches into result.

    Returns:
        list: The decoded records when queries is empty (nothing is merged
        then), otherwise an empty list.

    Raises:
        FetchError: If the index cannot be retrieved.
        DecodeError: If the archive is malformed.
    """
    with Timer() as t:
        records = _load_records(source, config)

        if not queries:
            return records

        matched = 0
        for record in records:
            if result.add_package_meta(queries, record, source.name) is not Classification.NONE:
                matched += 1

    logger.info("%s: %d of %d records matched", source.name, matched, len(records))
    if is_debug_enabled(logger):
        logger.debug(
            "Index processed",
            extra=extra_context(
                event="function_exit",
                component="runner",
                action="process_source",
                repository=source.name,
                count=len(records),
                duration_ms=t.duration_ms(),
            ),
        )
    return []


def _load_records(source: IndexSource, config: RunConfig) -> List[PackageRecord]:
    """Open and decode one index; malformed references become FetchError."""
    try:
        with build_session(config.user_agent) as session:
            with open_index(
                source.url,
                auth_token=config.auth_token,
                public=source.public,
                session=session,
                timeout=config.timeout,
                context=source.name,
            ) as stream:
                return read_index(stream, safe_url(source.url), source.name)
    except (FetchError, DecodeError):
        raise
    except (ValueError, OSError) as e:
        raise FetchError(safe_url(source.url), str(e)) from e


def _max_workers(config: RunConfig) -> int:
    limit = config.max_workers or os.cpu_count() or 1
    return max(1, min(limit, len(config.sources)))


def execute(
    queries: Sequence[Query],
    config: RunConfig,
    all_versions: bool = False,
    show_parent: bool = False,
    show_sub: bool = False,
    as_json: bool = False,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    now: Optional[datetime] = None,
) -> List[Exception]:
    """Query every configured index and write the report to out.

    With no queries, every record of every index is printed in index order
    and nothing is aggregated.

    Returns:
        list: Per-index failures. Output is written even when this is non-empty.
    """
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    result = PackageInfoOutput()
    errors: List[Exception] = []

    if not config.sources:
        logger.warning("No package indices configured.")
    else:
        with ThreadPoolExecutor(
            max_workers=_max_workers(config), thread_name_prefix="apkindex"
        ) as pool:
            futures: List[Future] = [
                pool.submit(process_source, source, queries, result, config)
                for source in config.sources
            ]
            for source, future in zip(config.sources, futures):
                try:
                    records = future.result()
                except (FetchError, DecodeError) as e:
                    logger.error("%s: %s", source.name, e)
                    errors.append(e)
                    continue
                for record in records:
                    out.write(format_record_line(record, show_parent, now) + "\n")

    if errors:
        err.write("Encountered errors: " + "; ".join(str(e) for e in errors) + "\n")

    if queries:
        result.sort()
        print_results(
            result,
            out,
            all_versions=all_versions,
            as_json=as_json,
            show_parent=show_parent,
            show_sub=show_sub,
            now=now,
        )
    return errors
