"""Coverage model: assemblies, classes, files, and code elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

NO_DATA = -1
"""Sentinel stored in ``CodeFile.coverage`` for lines without any observation."""


class LineVisitStatus(Enum):
    """Visit status of a single source line."""

    NOT_COVERED = "not_covered"
    COVERED = "covered"


class CodeElementType(Enum):
    """Kind of a code element."""

    METHOD = "method"
    PROPERTY = "property"


def calculate_percentage(covered: int, total: int) -> float | None:
    """Return ``covered / total`` as a percentage truncated to one decimal place."""
    if total == 0:
        return None
    return (1000 * covered // total) / 10


@dataclass(frozen=True)
class CodeElement:
    """A method or property and the line range it spans."""

    name: str
    """Display name (properties without their ``get_``/``set_`` prefix)."""

    type: CodeElementType
    """Whether this is a method or a property."""

    first_line: int
    """First line of the element's own statements."""

    last_line: int
    """Last line of the element's own statements."""

    coverage_quota: float | None
    """Percentage of covered lines within the range, or None without data."""


@dataclass
class CodeFile:
    """Per-line coverage state for one source file."""

    path: str
    """Source file path as recorded in the report."""

    coverage: list[int] = field(default_factory=list)
    """Line-indexed hit state: ``-1`` no data, ``0`` not hit, ``1`` hit."""

    line_status: list[LineVisitStatus] = field(default_factory=list)
    """Line-indexed visit status, parallel to ``coverage``."""

    code_elements: list[CodeElement] = field(default_factory=list)
    """Methods and properties found in this file."""

    def add_code_element(self, element: CodeElement) -> None:
        self.code_elements.append(element)

    def coverage_quota(self, first_line: int, last_line: int) -> float | None:
        """Return the covered percentage of data-bearing lines in ``[first_line, last_line]``.

        Lines outside the recorded range count as lines without data.
        Returns None when no line in the range carries data.
        """
        coverable = 0
        covered = 0
        for line in range(max(first_line, 0), min(last_line, len(self.coverage) - 1) + 1):
            if self.coverage[line] == NO_DATA:
                continue
            coverable += 1
            if self.line_status[line] is LineVisitStatus.COVERED:
                covered += 1
        return calculate_percentage(covered, coverable)

    @property
    def coverable_lines(self) -> int:
        """Number of lines with data."""
        return sum(1 for hits in self.coverage if hits != NO_DATA)

    @property
    def covered_lines(self) -> int:
        """Number of lines with data that are marked covered."""
        return sum(
            1
            for hits, status in zip(self.coverage, self.line_status, strict=True)
            if hits != NO_DATA and status is LineVisitStatus.COVERED
        )

    @property
    def total_code_elements(self) -> int:
        return len(self.code_elements)

    @property
    def covered_code_elements(self) -> int:
        return sum(
            1
            for element in self.code_elements
            if element.coverage_quota is not None and element.coverage_quota > 0
        )


@dataclass(eq=False)
class Class:
    """A class and the source files it spans."""

    name: str
    """Class name as recorded in the report."""

    assembly: Assembly = field(repr=False)
    """Owning assembly (back-reference)."""

    files: list[CodeFile] = field(default_factory=list)
    """Source files of this class."""

    def add_file(self, code_file: CodeFile) -> None:
        self.files.append(code_file)

    @property
    def coverable_lines(self) -> int:
        return sum(f.coverable_lines for f in self.files)

    @property
    def covered_lines(self) -> int:
        return sum(f.covered_lines for f in self.files)

    @property
    def line_coverage(self) -> float | None:
        """Line coverage percentage, or None when no line carries data."""
        return calculate_percentage(self.covered_lines, self.coverable_lines)


@dataclass(eq=False)
class Assembly:
    """An assembly and its classes, ordered by name once built."""

    name: str
    """Assembly name (unique within a model)."""

    classes: list[Class] = field(default_factory=list)
    """Classes of this assembly."""

    def add_class(self, cls: Class) -> None:
        self.classes.append(cls)

    @property
    def coverable_lines(self) -> int:
        return sum(c.coverable_lines for c in self.classes)

    @property
    def covered_lines(self) -> int:
        return sum(c.covered_lines for c in self.classes)

    @property
    def line_coverage(self) -> float | None:
        return calculate_percentage(self.covered_lines, self.coverable_lines)


@dataclass
class CoverageModel:
    """The complete coverage model produced from one report.

    Assemblies are ordered by name. The model is read-only once returned
    by the builder.
    """

    assemblies: list[Assembly] = field(default_factory=list)
    """Assemblies ordered by name."""

    parser_name: str = "MProfParser"
    """Name of the parser that produced this model."""

    supports_branch_coverage: bool = False
    """Whether branch data is present (never for mprof reports)."""

    @property
    def coverable_lines(self) -> int:
        return sum(a.coverable_lines for a in self.assemblies)

    @property
    def covered_lines(self) -> int:
        return sum(a.covered_lines for a in self.assemblies)

    @property
    def line_coverage(self) -> float | None:
        """Overall line coverage percentage across all assemblies."""
        return calculate_percentage(self.covered_lines, self.coverable_lines)

    def find_assembly(self, name: str) -> Assembly | None:
        """Return the assembly called *name*, if present."""
        for assembly in self.assemblies:
            if assembly.name == name:
                return assembly
        return None
