"""mprof coverage adapter for Mono projects.

mprof (``mono --profile=coverage``) writes an XML report with one
``<method>`` element per instrumented method.  Each method names its
assembly, class, and source file and owns ``<statement>`` children with the
line number and visit counter of every sequence point:

    <coverage>
      <assembly name="MyApp" filename="MyApp.exe"/>
      <method assembly="MyApp" class="MyApp.Calculator" name="Add"
              filename="/src/Calculator.cs">
        <statement line="12" counter="3"/>
      </method>
    </coverage>

This adapter reads those elements into a RecordSet and builds the
CoverageModel from it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree
from defusedxml.ElementTree import ParseError as DefusedParseError

from covmodel.adapters.coverage.records import (
    MalformedRecordError,
    RawRecord,
    RecordSet,
    Statement,
    parse_non_negative_int,
)
from covmodel.aggregation.model_builder import CoverageModelBuilder, InvalidReportError
from covmodel.filters import AllowAllFilter

if TYPE_CHECKING:
    import threading
    from pathlib import Path
    from xml.etree.ElementTree import Element as XmlElement

    from covmodel.filters import InclusionFilter
    from covmodel.models.coverage import CoverageModel

logger = logging.getLogger(__name__)

_DEFAULT_MAX_WORKERS = 4


class ReportParseError(ValueError):
    """The report file could not be read or is not well-formed XML."""


def _local_name(elem: XmlElement) -> str:
    return elem.tag.split("}")[-1] if "}" in elem.tag else elem.tag


def _required_attr(elem: XmlElement, key: str, context: str) -> str:
    value = elem.get(key)
    if value is None:
        raise MalformedRecordError(f"{context}: missing '{key}' attribute")
    return value


def _read_method(method_elem: XmlElement, index: int) -> RawRecord:
    context = f"method #{index}"
    assembly = _required_attr(method_elem, "assembly", context)
    class_name = _required_attr(method_elem, "class", context)
    file_path = _required_attr(method_elem, "filename", context)
    name = _required_attr(method_elem, "name", context)

    context = f"method {class_name}.{name}"
    statements = tuple(
        Statement(
            line=parse_non_negative_int(child.get("line"), "line", context),
            visits=parse_non_negative_int(child.get("counter"), "counter", context),
        )
        for child in method_elem
        if _local_name(child) == "statement"
    )
    return RawRecord(
        assembly=assembly,
        class_name=class_name,
        file_path=file_path,
        method=name,
        statements=statements,
    )


def read_records(root: XmlElement | None) -> RecordSet:
    """Extract all ``<method>`` records from a parsed mprof report.

    Raises:
        InvalidReportError: If *root* is None.
        MalformedRecordError: If any record lacks an attribute or has a
            non-numeric line/counter value.
    """
    if root is None:
        raise InvalidReportError("report must not be None")

    records: list[RawRecord] = []
    declared: list[str] = []
    for elem in root.iter():
        tag = _local_name(elem)
        if tag == "method":
            records.append(_read_method(elem, len(records)))
        elif tag == "assembly":
            declared.append(_required_attr(elem, "name", f"assembly #{len(declared)}"))

    logger.debug("Read %d method records from report", len(records))
    return RecordSet(records, declared_assemblies=declared)


class MProfAdapter:
    """Parses mprof XML reports into a CoverageModel.

    The three filters apply independently at the assembly, class, and file
    level.  Omitted filters include everything.
    """

    def __init__(
        self,
        assembly_filter: InclusionFilter | None = None,
        class_filter: InclusionFilter | None = None,
        file_filter: InclusionFilter | None = None,
        *,
        max_workers: int = _DEFAULT_MAX_WORKERS,
        parallel_assemblies: bool = False,
    ) -> None:
        self.assembly_filter = assembly_filter or AllowAllFilter()
        self.class_filter = class_filter or AllowAllFilter()
        self.file_filter = file_filter or AllowAllFilter()
        self.max_workers = max_workers
        self.parallel_assemblies = parallel_assemblies

    @property
    def name(self) -> str:
        return "mprof"

    def parse_report(
        self,
        root: XmlElement | None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> CoverageModel:
        """Build the coverage model from a parsed report element."""
        records = read_records(root)
        builder = CoverageModelBuilder(
            self.assembly_filter,
            self.class_filter,
            self.file_filter,
            max_workers=self.max_workers,
            parallel_assemblies=self.parallel_assemblies,
        )
        return builder.build(records, cancel_event=cancel_event)

    def parse_coverage_file(
        self,
        coverage_file: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> CoverageModel:
        """Parse an mprof XML report file into a CoverageModel.

        Raises:
            ReportParseError: If the file cannot be read or parsed as XML.
        """
        try:
            tree = ElementTree.parse(coverage_file)
        except (DefusedParseError, DefusedXmlException, OSError) as e:
            raise ReportParseError(f"Failed to parse mprof report {coverage_file}: {e}") from e
        return self.parse_report(tree.getroot(), cancel_event=cancel_event)
