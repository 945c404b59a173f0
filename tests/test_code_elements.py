"""Tests for covmodel.aggregation.elements."""

from __future__ import annotations

import pytest

from covmodel.adapters.coverage.records import RawRecord, Statement
from covmodel.aggregation.elements import extract_code_elements, is_generated_method
from covmodel.aggregation.line_merger import merge_line_coverage
from covmodel.models.coverage import CodeElementType, CodeFile


def _record(method: str, *statements: tuple[int, int]) -> RawRecord:
    return RawRecord(
        assembly="App",
        class_name="App.Order",
        file_path="Order.cs",
        method=method,
        statements=tuple(Statement(line=line, visits=visits) for line, visits in statements),
    )


def _code_file(records: list[RawRecord]) -> CodeFile:
    coverage, line_status = merge_line_coverage(records)
    code_file = CodeFile(path="Order.cs", coverage=coverage, line_status=line_status)
    extract_code_elements(code_file, records)
    return code_file


class TestIsGeneratedMethod:
    @pytest.mark.parametrize(
        "name",
        ["<Main>b__0", "<GetEnumerator>d__1", "<>m__0", "Outer<Run>c__Iterator0"],
    )
    def test_generated_names(self, name: str) -> None:
        assert is_generated_method(name) is True

    @pytest.mark.parametrize("name", ["Main", "get_Total", "Run__Fast", "<Main>"])
    def test_regular_names(self, name: str) -> None:
        assert is_generated_method(name) is False


class TestExtractCodeElements:
    def test_method_element(self) -> None:
        code_file = _code_file([_record("Submit", (10, 1), (11, 1), (12, 0))])
        assert len(code_file.code_elements) == 1
        element = code_file.code_elements[0]
        assert element.name == "Submit"
        assert element.type is CodeElementType.METHOD
        assert element.first_line == 10
        assert element.last_line == 12
        assert element.coverage_quota == 66.6

    def test_getter_becomes_property(self) -> None:
        code_file = _code_file([_record("get_Total", (5, 1))])
        element = code_file.code_elements[0]
        assert element.name == "Total"
        assert element.type is CodeElementType.PROPERTY
        assert element.coverage_quota == 100.0

    def test_setter_prefix_is_case_insensitive(self) -> None:
        code_file = _code_file([_record("SET_Total", (6, 0))])
        element = code_file.code_elements[0]
        assert element.name == "Total"
        assert element.type is CodeElementType.PROPERTY
        assert element.coverage_quota == 0.0

    def test_generated_method_is_skipped(self) -> None:
        code_file = _code_file([_record("<Submit>b__0", (20, 1)), _record("Submit", (10, 1))])
        assert [e.name for e in code_file.code_elements] == ["Submit"]

    def test_method_without_statements_is_skipped(self) -> None:
        code_file = _code_file([_record("Empty"), _record("Submit", (10, 1))])
        assert [e.name for e in code_file.code_elements] == ["Submit"]

    def test_range_uses_own_statements(self) -> None:
        records = [_record("Small", (4, 1)), _record("Large", (1, 0), (30, 1))]
        code_file = _code_file(records)
        small, large = code_file.code_elements
        assert (small.first_line, small.last_line) == (4, 4)
        assert (large.first_line, large.last_line) == (1, 30)

    def test_quota_counts_other_methods_lines_in_range(self) -> None:
        records = [_record("Outer", (1, 0), (5, 0)), _record("Inner", (3, 1))]
        code_file = _code_file(records)
        outer = code_file.code_elements[0]
        assert outer.coverage_quota == 33.3

    def test_identical_ranges_are_not_merged(self) -> None:
        records = [_record("get_Name", (7, 1)), _record("set_Name", (7, 1))]
        code_file = _code_file(records)
        assert len(code_file.code_elements) == 2
        assert all(e.name == "Name" for e in code_file.code_elements)

    def test_quota_is_none_without_data_in_range(self) -> None:
        code_file = CodeFile(path="Order.cs")
        extract_code_elements(code_file, [_record("Ghost", (3, 1))])
        assert code_file.code_elements[0].coverage_quota is None
