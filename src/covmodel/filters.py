"""Inclusion filters for assemblies, classes, and files.

Patterns are configured as ``+pattern`` (include) or ``-pattern`` (exclude)
strings where ``*`` matches any sequence of characters.  Matching is
case-insensitive.  Each filter compiles its patterns once and is immutable,
so one instance can be shared by any number of worker threads.
"""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

INCLUDE_PREFIX = "+"
EXCLUDE_PREFIX = "-"


class InclusionFilter(Protocol):
    """Decides whether a named element is included in the coverage model."""

    def is_included(self, name: str) -> bool:
        """Return True if *name* should be kept."""
        ...

    def has_custom_rules(self) -> bool:
        """Return True if any rule was configured."""
        ...


def _compile(pattern: str) -> re.Pattern[str]:
    # fnmatch treats [] as character classes; only * is a wildcard here
    escaped = pattern.replace("[", "[[]").replace("?", "[?]")
    return re.compile(fnmatch.translate(escaped), re.IGNORECASE)


def _compile_all(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    return tuple(_compile(p) for p in patterns if p)


@dataclass(frozen=True)
class AllowAllFilter:
    """Filter without rules: every name is included."""

    def is_included(self, name: str) -> bool:
        return True

    def has_custom_rules(self) -> bool:
        return False


@dataclass(frozen=True)
class IncludeListFilter:
    """Includes names matching any include pattern and no exclude pattern."""

    include: tuple[re.Pattern[str], ...]
    exclude: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def from_patterns(
        cls, include: Iterable[str], exclude: Iterable[str] = ()
    ) -> IncludeListFilter:
        return cls(include=_compile_all(include), exclude=_compile_all(exclude))

    def is_included(self, name: str) -> bool:
        if not any(p.match(name) for p in self.include):
            return False
        return not any(p.match(name) for p in self.exclude)

    def has_custom_rules(self) -> bool:
        return True


@dataclass(frozen=True)
class ExcludeListFilter:
    """Includes every name that matches none of the exclude patterns."""

    exclude: tuple[re.Pattern[str], ...]

    @classmethod
    def from_patterns(cls, exclude: Iterable[str]) -> ExcludeListFilter:
        return cls(exclude=_compile_all(exclude))

    def is_included(self, name: str) -> bool:
        return not any(p.match(name) for p in self.exclude)

    def has_custom_rules(self) -> bool:
        return True


def create_filter(patterns: Iterable[str]) -> InclusionFilter:
    """Build an InclusionFilter from ``+pattern``/``-pattern`` strings.

    Raises:
        ValueError: If a pattern has no ``+``/``-`` prefix or an empty body.
    """
    include: list[str] = []
    exclude: list[str] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        prefix, body = pattern[0], pattern[1:]
        if prefix not in {INCLUDE_PREFIX, EXCLUDE_PREFIX} or not body:
            raise ValueError(
                f"Invalid filter pattern {raw!r}: expected '+pattern' or '-pattern'"
            )
        (include if prefix == INCLUDE_PREFIX else exclude).append(body)

    if include:
        return IncludeListFilter.from_patterns(include, exclude)
    if exclude:
        return ExcludeListFilter.from_patterns(exclude)
    return AllowAllFilter()
