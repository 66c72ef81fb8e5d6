"""Ordering of Alpine (apk) package version strings.

An apk version looks like ``<digits>{.<digits>}[letter]{_suffix[N]}[~hash][-rN]``,
for example ``3.13.0-r1``, ``1.2.3a_rc2-r0`` or ``2024.01.05_git20240105-r3``.
Pre-release suffixes (``_alpha``, ``_beta``, ``_pre``, ``_rc``) sort before the
bare version, post-release suffixes (``_cvs``, ``_svn``, ``_git``, ``_hg``,
``_p``) after it.

Numeric components after the first one that start with ``0`` compare as digit
strings and below any component without a leading zero, so ``1.010 < 1.09``
and ``1.01 < 1.1``.

Strings that do not follow the format are still orderable: they compare equal
to each other and lower than every valid version, so a stable sort keeps their
input order.
"""
from __future__ import annotations

import functools
import re
from typing import Tuple

_VERSION_RE = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+)*)"
    r"(?P<letter>[a-z]?)"
    r"(?P<suffixes>(?:_(?:alpha|beta|pre|rc|cvs|svn|git|hg|p)\d*)*)"
    r"(?:~(?P<hash>[0-9a-f]+))?"
    r"(?:-r(?P<revision>\d+))?$"
)
_SUFFIX_RE = re.compile(r"_(alpha|beta|pre|rc|cvs|svn|git|hg|p)(\d*)")

SUFFIX_RANK = {
    "alpha": -4,
    "beta": -3,
    "pre": -2,
    "rc": -1,
    "cvs": 1,
    "svn": 2,
    "git": 3,
    "hg": 4,
    "p": 5,
}
# Terminates every suffix list so "1.0_rc1" < "1.0" < "1.0_p1".
_NO_SUFFIX = (0, 0)


def _component_key(digits: str) -> Tuple:
    if digits.startswith("0"):
        return (0, digits)
    return (1, int(digits))


@functools.lru_cache(maxsize=65536)
def version_key(version: str) -> Tuple:
    """Return a sort key for an apk version string."""
    m = _VERSION_RE.match(version.strip()) if version else None
    if m is None:
        return (0,)
    first, *rest = m.group("numbers").split(".")
    numbers = ((1, int(first)),) + tuple(_component_key(n) for n in rest)
    letter = m.group("letter")
    suffixes = tuple(
        (SUFFIX_RANK[name], int(num) if num else 0)
        for name, num in _SUFFIX_RE.findall(m.group("suffixes"))
    ) + (_NO_SUFFIX,)
    revision = int(m.group("revision") or 0)
    return (1, numbers, letter, suffixes, revision, m.group("hash") or "")


def is_valid(version: str) -> bool:
    """Return True when version follows the apk version format."""
    return version_key(version) != (0,)


def compare_versions(a: str, b: str) -> int:
    """Three-way comparison: -1 if a < b, 0 if equal, 1 if a > b."""
    ka, kb = version_key(a), version_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0

