"""Package name queries: exact names or regular expressions."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Pattern, Sequence, Union


class InvalidPatternError(ValueError):
    """Raised when a --regex query is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"failed to parse regexp from input query {pattern}: {reason}")
        self.pattern = pattern


@dataclass(frozen=True)
class ExactQuery:
    """Matches one package name exactly."""
    name: str

    def match(self, ref: str) -> bool:
        return ref == self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PatternQuery:
    """Matches names containing a regular expression match anywhere."""
    regex: Pattern[str]

    @classmethod
    def compile(cls, pattern: str) -> "PatternQuery":
        try:
            return cls(re.compile(pattern))
        except re.error as exc:
            raise InvalidPatternError(pattern, str(exc)) from exc

    def match(self, ref: str) -> bool:
        return self.regex.search(ref) is not None

    def __str__(self) -> str:
        return self.regex.pattern


Query = Union[ExactQuery, PatternQuery]


def build_queries(raw: Iterable[str], regex: bool = False) -> List[Query]:
    """Build a query set from CLI arguments, all in the same mode.

    Raises:
        InvalidPatternError: when regex is set and any argument fails to compile.
    """
    if regex:
        return [PatternQuery.compile(r) for r in raw]
    return [ExactQuery(r) for r in raw]


def match_queries(queries: Sequence[Query], ref: str) -> bool:
    """Return True if any query matches ref."""
    return any(q.match(ref) for q in queries)
