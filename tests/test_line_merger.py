"""Tests for covmodel.aggregation.line_merger."""

from __future__ import annotations

import itertools

from covmodel.adapters.coverage.records import RawRecord, Statement
from covmodel.aggregation.line_merger import merge_line_coverage
from covmodel.models.coverage import NO_DATA, LineVisitStatus


def _record(method: str, *statements: tuple[int, int]) -> RawRecord:
    return RawRecord(
        assembly="App",
        class_name="App.Calculator",
        file_path="Calculator.cs",
        method=method,
        statements=tuple(Statement(line=line, visits=visits) for line, visits in statements),
    )


class TestEmptyInput:
    def test_no_records(self) -> None:
        coverage, line_status = merge_line_coverage([])
        assert coverage == []
        assert line_status == []

    def test_records_without_statements(self) -> None:
        coverage, line_status = merge_line_coverage([_record("Add"), _record("Sub")])
        assert len(coverage) == 0
        assert len(line_status) == 0


class TestMerge:
    def test_array_length_is_max_line_plus_one(self) -> None:
        coverage, line_status = merge_line_coverage([_record("Add", (3, 1), (7, 0))])
        assert len(coverage) == 8
        assert len(line_status) == 8

    def test_lines_without_data_keep_sentinel(self) -> None:
        coverage, line_status = merge_line_coverage([_record("Add", (3, 1), (7, 0))])
        assert coverage[0] == NO_DATA
        assert coverage[5] == NO_DATA
        assert line_status[5] is LineVisitStatus.NOT_COVERED

    def test_unvisited_line_is_zero_not_sentinel(self) -> None:
        coverage, line_status = merge_line_coverage([_record("Add", (7, 0))])
        assert coverage[7] == 0
        assert coverage[7] != NO_DATA
        assert line_status[7] is LineVisitStatus.NOT_COVERED

    def test_visited_line_is_covered(self) -> None:
        coverage, line_status = merge_line_coverage([_record("Add", (3, 42))])
        assert coverage[3] == 1
        assert line_status[3] is LineVisitStatus.COVERED

    def test_hit_count_saturates_at_one(self) -> None:
        records = [_record("Add", (4, 2)), _record("AddChecked", (4, 9))]
        coverage, line_status = merge_line_coverage(records)
        assert coverage[4] == 1
        assert line_status[4] is LineVisitStatus.COVERED

    def test_zero_hit_after_hit_does_not_revert(self) -> None:
        records = [_record("Add", (4, 5)), _record("Other", (4, 0))]
        coverage, line_status = merge_line_coverage(records)
        assert coverage[4] == 1
        assert line_status[4] is LineVisitStatus.COVERED

    def test_huge_counter_counts_as_hit(self) -> None:
        coverage, line_status = merge_line_coverage([_record("Add", (2, 2**80))])
        assert coverage[2] == 1
        assert line_status[2] is LineVisitStatus.COVERED

    def test_statements_from_one_record_on_same_line(self) -> None:
        coverage, line_status = merge_line_coverage(
            [_record("Main", (10, 0), (12, 5), (10, 3))]
        )
        assert len(coverage) == 13
        assert coverage[10] == 1
        assert coverage[12] == 1
        assert coverage[11] == NO_DATA
        assert all(c == NO_DATA for c in coverage[:10])
        assert line_status[10] is LineVisitStatus.COVERED
        assert line_status[12] is LineVisitStatus.COVERED


class TestOrderIndependence:
    def test_every_permutation_gives_same_result(self) -> None:
        records = [
            _record("A", (5, 0)),
            _record("B", (5, 3)),
            _record("C", (5, 0), (8, 0)),
            _record("D", (8, 1)),
            _record("E", (2, 0)),
        ]
        expected = merge_line_coverage(records)

        for permutation in itertools.permutations(records):
            assert merge_line_coverage(permutation) == expected

        coverage, line_status = expected
        assert coverage[2] == 0
        assert coverage[5] == 1
        assert coverage[8] == 1
        assert line_status[2] is LineVisitStatus.NOT_COVERED
        assert line_status[5] is LineVisitStatus.COVERED
        assert line_status[8] is LineVisitStatus.COVERED
