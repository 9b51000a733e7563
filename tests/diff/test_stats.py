"""Tests for change statistics."""

from __future__ import annotations

import pytest

from apidiff.diff.models import ChangeKind, ChangeRecord, DiffResult
from apidiff.diff.stats import KindCounts, StatisticsAccumulator
from apidiff.model.identifiers import Identifier, Scope


class TestKindCounts:
    """Per-kind counters and derived figures."""

    def test_total_and_changed_total(self) -> None:
        counts = KindCounts(added=1, removed=2, changed=3, deprecated=1, unchanged=4)
        assert counts.total == 11
        assert counts.changed_total == 4

    @pytest.mark.parametrize(
        ("counts", "expected"),
        [
            (KindCounts(), 0.0),
            (KindCounts(unchanged=10), 0.0),
            (KindCounts(added=1), 100.0),
            (KindCounts(removed=1, unchanged=1), 100.0 * 1 / 3),
            (KindCounts(changed=1, unchanged=3), 100.0 * 2 / 8),
        ],
    )
    def test_percent_changed(self, counts: KindCounts, expected: float) -> None:
        assert counts.percent_changed == pytest.approx(expected)

    def test_to_dict_rounds_percentage(self) -> None:
        data = KindCounts(removed=1, unchanged=1).to_dict()
        assert data["percent_changed"] == 33.33
        assert data["total"] == 2


class TestStatisticsAccumulator:
    """Tallying records by parent scope and level."""

    def test_records_tallied_under_parent(self) -> None:
        acc = StatisticsAccumulator()
        pkg = Identifier("p")
        acc.open_scope(pkg)
        acc.add(ChangeRecord(pkg.child("A"), ChangeKind.ADDED))
        acc.add(ChangeRecord(pkg.child("B"), ChangeKind.UNCHANGED))
        acc.add(ChangeRecord(pkg, ChangeKind.CHANGED, container_only=True))

        summary = acc.summary()

        assert summary.for_scope(pkg).counts == KindCounts(added=1, unchanged=1)
        assert summary.root.counts == KindCounts(changed=1)
        assert summary.by_level[Scope.TYPE].total == 2
        assert summary.totals.total == 3

    def test_open_scope_without_children_counts_zero(self) -> None:
        acc = StatisticsAccumulator()
        acc.open_scope(Identifier("p", "Empty"))
        assert acc.summary().for_scope(Identifier("p", "Empty")).subtotal == 0

    def test_unknown_scope_is_empty(self) -> None:
        summary = StatisticsAccumulator().summary()
        assert summary.for_scope(Identifier("nope")).counts == KindCounts()

    def test_merge_adds_counts(self) -> None:
        left, right = StatisticsAccumulator(), StatisticsAccumulator()
        left.add(ChangeRecord(Identifier("a"), ChangeKind.ADDED))
        right.add(ChangeRecord(Identifier("b"), ChangeKind.ADDED))
        right.add(ChangeRecord(Identifier("b", "T"), ChangeKind.ADDED))

        left.merge(right)
        summary = left.summary()

        assert summary.root.counts.added == 2
        assert summary.for_scope(Identifier("b")).counts.added == 1
        assert summary.totals.added == 3


class TestWidgetsStatistics:
    """Statistics of the widgets fixture comparison."""

    def test_root_counts_packages(self, widgets_diff: DiffResult) -> None:
        assert widgets_diff.statistics.root.counts == KindCounts(
            added=1, removed=1, changed=1, unchanged=1
        )

    def test_package_counts_types(self, widgets_diff: DiffResult) -> None:
        stats = widgets_diff.statistics.for_scope(Identifier("com.example"))
        assert stats.counts == KindCounts(added=1, removed=1, changed=1, unchanged=1)

    def test_type_counts_members(self, widgets_diff: DiffResult) -> None:
        stats = widgets_diff.statistics.for_scope(Identifier("com.example", "Widget"))
        assert stats.counts == KindCounts(
            added=1, removed=1, changed=2, deprecated=1, unchanged=1
        )
        assert stats.subtotal == 6

    def test_level_totals(self, widgets_diff: DiffResult) -> None:
        by_level = widgets_diff.statistics.by_level
        assert by_level[Scope.PACKAGE].total == 4
        assert by_level[Scope.TYPE] == KindCounts(added=2, removed=2, changed=1, unchanged=2)
        assert by_level[Scope.MEMBER] == KindCounts(
            added=3, removed=3, changed=2, deprecated=1, unchanged=3
        )
        assert widgets_diff.statistics.totals.total == 23

    def test_every_scope_sums_to_its_child_count(self, widgets_diff: DiffResult) -> None:
        stats = widgets_diff.statistics
        for record in widgets_diff.iter_records():
            if record.scope is Scope.MEMBER:
                continue
            assert stats.for_scope(record.identifier).subtotal == len(record.children)
        assert stats.root.subtotal == len(widgets_diff.packages)

    def test_to_dict_keys_scopes_by_name(self, widgets_diff: DiffResult) -> None:
        data = widgets_diff.statistics.to_dict()
        assert data["scopes"]["com.example.Widget"]["deprecated"] == 1
        assert data["by_level"]["member"]["total"] == 12
