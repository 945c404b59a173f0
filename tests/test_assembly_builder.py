"""Tests for covmodel.aggregation.assembly_builder."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from covmodel.adapters.coverage.records import RawRecord, RecordSet, Statement
from covmodel.aggregation.assembly_builder import (
    AssemblyBuilder,
    BuildCancelledError,
    is_synthetic_class,
    raise_if_cancelled,
)
from covmodel.aggregation.class_builder import ClassBuilder
from covmodel.filters import AllowAllFilter, create_filter


def _record(class_name: str, assembly: str = "App", file_path: str = "") -> RawRecord:
    return RawRecord(
        assembly=assembly,
        class_name=class_name,
        file_path=file_path or f"{class_name}.cs",
        method="Run",
        statements=(Statement(line=1, visits=1),),
    )


def _builder(max_workers: int = 4) -> AssemblyBuilder:
    return AssemblyBuilder(AllowAllFilter(), AllowAllFilter(), max_workers=max_workers)


class TestIsSyntheticClass:
    def test_exact_backtick_one(self) -> None:
        assert is_synthetic_class("`1") is True

    def test_closure_container(self) -> None:
        assert is_synthetic_class("App.Program.`1c__AnonStorey0") is True

    def test_regular_class(self) -> None:
        assert is_synthetic_class("App.Program") is False

    def test_generic_class(self) -> None:
        assert is_synthetic_class("App.List`1") is False


class TestClassNames:
    def test_sorted_and_distinct(self) -> None:
        records = RecordSet([_record("Zeta"), _record("Alpha"), _record("Zeta")])
        assert _builder().class_names(records, "App") == ["Alpha", "Zeta"]

    def test_synthetic_classes_excluded(self) -> None:
        records = RecordSet([_record("`1"), _record("App.`1c__Storey"), _record("App.Real")])
        assert _builder().class_names(records, "App") == ["App.Real"]

    def test_class_filter_applied(self) -> None:
        records = RecordSet([_record("App.Tests.CalcTests"), _record("App.Calc")])
        builder = AssemblyBuilder(create_filter(["-*.Tests.*"]), AllowAllFilter())
        assert builder.class_names(records, "App") == ["App.Calc"]

    def test_other_assembly_ignored(self) -> None:
        records = RecordSet([_record("App.Calc"), _record("Lib.Util", assembly="Lib")])
        assert _builder().class_names(records, "App") == ["App.Calc"]


class TestBuild:
    def test_classes_attached_in_name_order(self) -> None:
        names = [f"App.C{i:02d}" for i in range(30)]
        records = RecordSet([_record(name) for name in reversed(names)])
        assembly = _builder(max_workers=8).build(records, "App")
        assert [c.name for c in assembly.classes] == names
        assert all(c.assembly is assembly for c in assembly.classes)

    def test_order_independent_of_completion_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        original_build = ClassBuilder.build

        def slow_for_early_names(self, records, assembly, class_name):  # type: ignore[no-untyped-def]
            # Earlier names finish last
            time.sleep(0.02 if class_name < "App.M" else 0.0)
            return original_build(self, records, assembly, class_name)

        monkeypatch.setattr(ClassBuilder, "build", slow_for_early_names)
        records = RecordSet([_record(name) for name in ["App.Z", "App.A", "App.B", "App.Y"]])
        assembly = _builder(max_workers=4).build(records, "App")
        assert [c.name for c in assembly.classes] == ["App.A", "App.B", "App.Y", "App.Z"]

    def test_omitted_classes_not_attached(self) -> None:
        records = RecordSet(
            [_record("App.Calc", file_path="Calc.cs"), _record("App.Gen", file_path="Gen.g.cs")]
        )
        builder = AssemblyBuilder(AllowAllFilter(), create_filter(["-*.g.cs"]))
        assembly = builder.build(records, "App")
        assert [c.name for c in assembly.classes] == ["App.Calc"]

    def test_uses_given_executor(self) -> None:
        records = RecordSet([_record("App.A"), _record("App.B")])
        with ThreadPoolExecutor(max_workers=2) as pool:
            assembly = _builder().build(records, "App", executor=pool)
        assert [c.name for c in assembly.classes] == ["App.A", "App.B"]

    def test_empty_assembly(self) -> None:
        assembly = _builder().build(RecordSet(), "Empty")
        assert assembly.name == "Empty"
        assert assembly.classes == []

    def test_worker_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def boom(self, records, assembly, class_name):  # type: ignore[no-untyped-def]
            raise RuntimeError(f"cannot build {class_name}")

        monkeypatch.setattr(ClassBuilder, "build", boom)
        with pytest.raises(RuntimeError, match="cannot build"):
            _builder().build(RecordSet([_record("App.A")]), "App")


class TestCancellation:
    def test_cancelled_before_start(self) -> None:
        event = threading.Event()
        event.set()
        with pytest.raises(BuildCancelledError):
            _builder().build(RecordSet([_record("App.A")]), "App", cancel_event=event)

    def test_unset_event_builds_normally(self) -> None:
        event = threading.Event()
        assembly = _builder().build(RecordSet([_record("App.A")]), "App", cancel_event=event)
        assert len(assembly.classes) == 1

    def test_raise_if_cancelled_none(self) -> None:
        raise_if_cancelled(None)
