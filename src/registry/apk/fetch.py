"""Opening APKINDEX references: remote URLs or local files."""
from __future__ import annotations

import base64
import io
import logging
from contextlib import contextmanager
from enum import Enum
from typing import BinaryIO, Iterator, Optional

import requests

from constants import Constants
from common.http_client import safe_get
from common.errors import FetchError
from common.logging_utils import safe_url

logger = logging.getLogger(__name__)


class Scheme(Enum):
    """Reference kinds understood by open_index."""
    HTTPS = "https"
    HTTP = "http"
    FILE = "file"


def parse_scheme(ref: str) -> Scheme:
    """Work out how to open ref.

    References without ``://`` are local paths.

    Raises:
        FetchError: For any other ``scheme://`` prefix.
    """
    if "://" not in ref:
        return Scheme.FILE
    prefix = ref.split("://", 1)[0].lower()
    for scheme in Scheme:
        if prefix == scheme.value:
            return scheme
    raise FetchError(safe_url(ref), f"unknown ref scheme {prefix!r}")


def build_headers(auth_token: Optional[str], public: bool) -> dict:
    """Request headers for an index download.

    The Authorization header is only attached for non-public repositories.
    """
    headers = {"Accept": Constants.ACCEPT_HEADER}
    if auth_token and not public:
        credentials = f"{Constants.HTTP_AUTH_USER}:{auth_token}".encode("utf-8")
        headers["Authorization"] = "Basic " + base64.b64encode(credentials).decode("ascii")
    return headers


@contextmanager
def open_index(
    ref: str,
    *,
    auth_token: Optional[str] = None,
    public: bool = True,
    session: Optional[requests.Session] = None,
    timeout: float = Constants.REQUEST_TIMEOUT,
    context: str = "apkindex",
) -> Iterator[BinaryIO]:
    """Yield a binary stream with the archive behind ref.

    Remote archives are read fully into memory so that a broken connection
    surfaces here as a FetchError rather than later as a decode failure.

    Raises:
        FetchError: If the reference cannot be opened or downloaded.
    """
    scheme = parse_scheme(ref)
    if scheme in (Scheme.HTTPS, Scheme.HTTP):
        res = safe_get(
            ref,
            context=context,
            session=session,
            timeout=timeout,
            headers=build_headers(auth_token, public),
        )
        try:
            body = res.content
        except requests.RequestException as exc:
            raise FetchError(safe_url(ref), str(exc)) from exc
        finally:
            res.close()
        logger.info("Downloaded %s (%d bytes)", safe_url(ref), len(body))
        yield io.BytesIO(body)
        return

    path = ref[len("file://"):] if ref.lower().startswith("file://") else ref
    try:
        fh = open(path, "rb")  # pylint: disable=consider-using-with
    except OSError as exc:
        raise FetchError(path, exc.strerror or str(exc)) from exc
    except ValueError as exc:
        # embedded NUL bytes and similar
        raise FetchError(path, str(exc)) from exc
    with fh:
        yield fh
