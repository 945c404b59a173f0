"""Construction of one assembly by building its classes in parallel."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from covmodel.aggregation.class_builder import ClassBuilder
from covmodel.models.coverage import Assembly

if TYPE_CHECKING:
    import threading
    from concurrent.futures import Executor

    from covmodel.adapters.coverage.records import RecordSet
    from covmodel.filters import InclusionFilter
    from covmodel.models.coverage import Class

logger = logging.getLogger(__name__)

_DEFAULT_MAX_WORKERS = 4

# Compiler-generated containers for anonymous types and iterator state
_SYNTHETIC_CLASS_NAME = "`1"
_SYNTHETIC_CLASS_MARKER = ".`1c__"


class BuildCancelledError(RuntimeError):
    """The model build was cancelled before it completed."""


def raise_if_cancelled(cancel_event: threading.Event | None) -> None:
    """Raise BuildCancelledError when *cancel_event* is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise BuildCancelledError("coverage model build was cancelled")


def is_synthetic_class(name: str) -> bool:
    """Return True for compiler-generated container classes."""
    return name == _SYNTHETIC_CLASS_NAME or _SYNTHETIC_CLASS_MARKER in name


class AssemblyBuilder:
    """Builds an Assembly with all of its surviving classes.

    Classes are built concurrently on a bounded thread pool.  Each worker
    returns a finished Class; the classes are attached in name order after
    all workers have joined, so the result never depends on scheduling.
    """

    def __init__(
        self,
        class_filter: InclusionFilter,
        file_filter: InclusionFilter,
        *,
        max_workers: int = _DEFAULT_MAX_WORKERS,
    ) -> None:
        self.class_filter = class_filter
        self.class_builder = ClassBuilder(file_filter)
        self.max_workers = max_workers

    def class_names(self, records: RecordSet, assembly_name: str) -> list[str]:
        """Return the sorted names of the classes to build for *assembly_name*."""
        names = records.select(assembly=assembly_name).class_names()
        return sorted(
            name
            for name in names
            if not is_synthetic_class(name) and self.class_filter.is_included(name)
        )

    def build(
        self,
        records: RecordSet,
        assembly_name: str,
        *,
        executor: Executor | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Assembly:
        """Build the assembly called *assembly_name*.

        Uses *executor* when given, otherwise a private pool of
        ``max_workers`` threads.  Errors raised by a worker propagate.

        Raises:
            BuildCancelledError: If *cancel_event* is set while building.
        """
        logger.debug("Current assembly: %s", assembly_name)
        assembly = Assembly(name=assembly_name)
        assembly_records = records.select(assembly=assembly_name)
        class_names = self.class_names(assembly_records, assembly_name)

        if executor is None:
            with ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="covmodel-class",
            ) as pool:
                classes = self._build_classes(
                    pool, assembly_records, assembly, class_names, cancel_event
                )
        else:
            classes = self._build_classes(
                executor, assembly_records, assembly, class_names, cancel_event
            )

        for cls in sorted(classes, key=lambda c: c.name):
            assembly.add_class(cls)
        return assembly

    def _build_classes(
        self,
        executor: Executor,
        records: RecordSet,
        assembly: Assembly,
        class_names: list[str],
        cancel_event: threading.Event | None,
    ) -> list[Class]:
        futures = [
            executor.submit(self._build_class, records, assembly, name, cancel_event)
            for name in class_names
        ]
        try:
            results = [future.result() for future in futures]
        except BaseException:
            for future in futures:
                future.cancel()
            raise
        return [cls for cls in results if cls is not None]

    def _build_class(
        self,
        records: RecordSet,
        assembly: Assembly,
        class_name: str,
        cancel_event: threading.Event | None,
    ) -> Class | None:
        raise_if_cancelled(cancel_event)
        return self.class_builder.build(records, assembly, class_name)
