"""Root builder: turns a RecordSet into the complete CoverageModel."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from covmodel.aggregation.assembly_builder import AssemblyBuilder, raise_if_cancelled
from covmodel.filters import AllowAllFilter
from covmodel.models.coverage import CoverageModel

if TYPE_CHECKING:
    import threading

    from covmodel.adapters.coverage.records import RecordSet
    from covmodel.filters import InclusionFilter
    from covmodel.models.coverage import Assembly

logger = logging.getLogger(__name__)

_DEFAULT_MAX_WORKERS = 4


class InvalidReportError(ValueError):
    """The report input is missing."""


class CoverageModelBuilder:
    """Builds the coverage model from raw records.

    Assemblies pass through *assembly_filter*; classes and files are
    filtered by the AssemblyBuilder and ClassBuilder.  The three filters
    never interact.

    With ``parallel_assemblies`` the assemblies are built on their own
    pool, each with a private class pool.  Otherwise assemblies are built
    one after the other and share a single class pool.
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
        self.assembly_builder = AssemblyBuilder(
            class_filter or AllowAllFilter(),
            file_filter or AllowAllFilter(),
            max_workers=max_workers,
        )
        self.max_workers = max_workers
        self.parallel_assemblies = parallel_assemblies

    def assembly_names(self, records: RecordSet) -> list[str]:
        """Return the sorted names of the assemblies that pass the filter."""
        return sorted(
            name for name in records.assembly_names() if self.assembly_filter.is_included(name)
        )

    def build(
        self,
        records: RecordSet | None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> CoverageModel:
        """Build the model.  Nothing is returned unless every assembly completed.

        Raises:
            InvalidReportError: If *records* is None.
            BuildCancelledError: If *cancel_event* is set before completion.
        """
        if records is None:
            raise InvalidReportError("records must not be None")

        names = self.assembly_names(records)
        if self.parallel_assemblies:
            assemblies = self._build_parallel(records, names, cancel_event)
        else:
            assemblies = self._build_sequential(records, names, cancel_event)

        model = CoverageModel(assemblies=sorted(assemblies, key=lambda a: a.name))
        logger.info(
            "Built coverage model: %d assemblies, %d classes",
            len(model.assemblies),
            sum(len(a.classes) for a in model.assemblies),
        )
        return model

    def _build_sequential(
        self,
        records: RecordSet,
        names: list[str],
        cancel_event: threading.Event | None,
    ) -> list[Assembly]:
        assemblies: list[Assembly] = []
        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="covmodel-class",
        ) as pool:
            for name in names:
                raise_if_cancelled(cancel_event)
                assemblies.append(
                    self.assembly_builder.build(
                        records, name, executor=pool, cancel_event=cancel_event
                    )
                )
        return assemblies

    def _build_parallel(
        self,
        records: RecordSet,
        names: list[str],
        cancel_event: threading.Event | None,
    ) -> list[Assembly]:
        def build_one(name: str) -> Assembly:
            raise_if_cancelled(cancel_event)
            return self.assembly_builder.build(records, name, cancel_event=cancel_event)

        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="covmodel-assembly",
        ) as pool:
            futures = [pool.submit(build_one, name) for name in names]
            try:
                return [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise


def build_coverage_model(
    records: RecordSet | None,
    assembly_filter: InclusionFilter | None = None,
    class_filter: InclusionFilter | None = None,
    file_filter: InclusionFilter | None = None,
    *,
    max_workers: int = _DEFAULT_MAX_WORKERS,
    cancel_event: threading.Event | None = None,
) -> CoverageModel:
    """Build a CoverageModel from *records* with the given filters."""
    builder = CoverageModelBuilder(
        assembly_filter,
        class_filter,
        file_filter,
        max_workers=max_workers,
    )
    return builder.build(records, cancel_event=cancel_event)
