"""Raw per-method records extracted from an mprof report."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_DIGITS_RE = re.compile(r"[0-9]+")


class MalformedRecordError(ValueError):
    """A record is missing a required attribute or carries a non-numeric value."""


def parse_non_negative_int(value: str | None, attribute: str, context: str) -> int:
    """Parse a culture-invariant, arbitrary-width non-negative integer.

    Only ASCII digits are accepted; signs, whitespace, and separators are
    rejected. Python integers are unbounded, so counters wider than a
    machine word are kept exactly.
    """
    if value is None:
        raise MalformedRecordError(f"{context}: missing '{attribute}' attribute")
    if not _DIGITS_RE.fullmatch(value):
        raise MalformedRecordError(f"{context}: '{attribute}' is not a number: {value!r}")
    return int(value)


@dataclass(frozen=True)
class Statement:
    """One ``(line, visit count)`` observation."""

    line: int
    visits: int

    @property
    def is_visited(self) -> bool:
        return self.visits > 0


@dataclass(frozen=True)
class RawRecord:
    """One ``<method>`` entry of the report with its statements."""

    assembly: str
    class_name: str
    file_path: str
    method: str
    statements: tuple[Statement, ...] = ()


class RecordSet:
    """Read-only collection of raw records, queryable by attribute equality.

    Safe to share between threads: nothing mutates it after construction.
    """

    def __init__(
        self,
        records: Iterable[RawRecord] = (),
        declared_assemblies: Iterable[str] = (),
    ) -> None:
        self._records: tuple[RawRecord, ...] = tuple(records)
        self._declared_assemblies: tuple[str, ...] = tuple(declared_assemblies)

    def __iter__(self) -> Iterator[RawRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def assembly_names(self) -> list[str]:
        """Return distinct assembly names in first-seen order.

        Declared ``<assembly>`` names are included even without records.
        """
        names = [*self._declared_assemblies, *(r.assembly for r in self._records)]
        return list(dict.fromkeys(names))

    def select(
        self,
        *,
        assembly: str | None = None,
        class_name: str | None = None,
        file_path: str | None = None,
    ) -> RecordSet:
        """Return the records whose given attributes equal the given values (ordinal)."""
        return RecordSet(
            r
            for r in self._records
            if (assembly is None or r.assembly == assembly)
            and (class_name is None or r.class_name == class_name)
            and (file_path is None or r.file_path == file_path)
        )

    def class_names(self) -> list[str]:
        """Return distinct class names in first-seen order."""
        return list(dict.fromkeys(r.class_name for r in self._records))

    def file_paths(self) -> list[str]:
        """Return distinct non-empty file paths in first-seen order."""
        return list(dict.fromkeys(r.file_path for r in self._records if r.file_path))

    def distinct(self) -> list[RawRecord]:
        """Return the records with identical entries collapsed, order preserved."""
        return list(dict.fromkeys(self._records))
