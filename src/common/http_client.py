"""Shared HTTP helpers used by the index fetcher.

Encapsulates common request/timeout error handling so callers get a
FetchError instead of a raw requests exception. A failing download must
never take the whole process down because sibling sources keep running.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from common.errors import FetchError

logger = logging.getLogger(__name__)


def build_session(user_agent: str = Constants.USER_AGENT) -> requests.Session:
    """Create a session carrying the project User-Agent.

    Proxy settings come from the environment (requests honours
    HTTPS_PROXY/NO_PROXY by default).
    """
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


def safe_get(
    url: str,
    *,
    context: str,
    session: Optional[requests.Session] = None,
    timeout: float = Constants.REQUEST_TIMEOUT,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "wolfi").
        session: Optional session; a module-level ``requests.get`` is used otherwise.
        timeout: Overall request timeout in seconds.
        **kwargs: Passed through to ``get``.

    Returns:
        requests.Response: A response with a 2xx status.

    Raises:
        FetchError: On timeout, connection failure or non-2xx status.
    """
    safe_target = safe_url(url)
    getter = session.get if session is not None else requests.get
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = getter(url, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            logger.error("%s request timed out after %s seconds", context, timeout)
            raise FetchError(safe_target, f"timed out after {timeout} seconds") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise FetchError(safe_target, str(exc)) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )

    if not 200 <= res.status_code < 300:
        res.close()
        logger.error("%s returned HTTP status %s", context, res.status_code)
        raise FetchError(safe_target, f"HTTP status {res.status_code}")
    return res
