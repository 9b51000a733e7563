"""Change statistics tallied while the differ walks.

Counts are kept per scope over its *direct* children: the root scope counts
package records, a package counts its type records, a type counts its
member records. So for every scope the per-kind counts sum to its
subtotal. Level totals (package/type/member) and grand totals are kept
alongside.

The accumulator is additive only. Parallel walks give each branch its own
accumulator and ``merge()`` them once at the end.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from apidiff.diff.models import ChangeKind, ChangeRecord
from apidiff.model.identifiers import Identifier, Scope

_CHANGE_LIKE = (ChangeKind.CHANGED, ChangeKind.DEPRECATED, ChangeKind.UNDEPRECATED)


@dataclass(frozen=True, slots=True)
class KindCounts:
    """Number of records of each change kind."""

    added: int = 0
    removed: int = 0
    changed: int = 0
    deprecated: int = 0
    undeprecated: int = 0
    unchanged: int = 0

    @classmethod
    def from_counter(cls, counter: Mapping[ChangeKind, int]) -> KindCounts:
        return cls(**{kind.value: counter.get(kind, 0) for kind in ChangeKind})

    def get(self, kind: ChangeKind) -> int:
        return int(getattr(self, kind.value))

    @property
    def total(self) -> int:
        return sum(self.get(kind) for kind in ChangeKind)

    @property
    def changed_total(self) -> int:
        """Changed, deprecated and undeprecated together."""
        return sum(self.get(kind) for kind in _CHANGE_LIKE)

    @property
    def percent_changed(self) -> float:
        """Share of declarations touched, as a percentage.

        ``100 * (added + removed + 2 * changed) / (old_count + new_count)``
        where a changed declaration is counted once in each snapshot.
        """
        old_count = self.total - self.added
        new_count = self.total - self.removed
        denominator = old_count + new_count
        if denominator == 0:
            return 0.0
        numerator = self.added + self.removed + 2 * self.changed_total
        return 100.0 * numerator / denominator

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {kind.value: self.get(kind) for kind in ChangeKind}
        data["total"] = self.total
        data["percent_changed"] = round(self.percent_changed, 2)
        return data


@dataclass(frozen=True, slots=True)
class ScopeStatistics:
    """Counts over the direct children of one scope (None is the root)."""

    identifier: Identifier | None
    counts: KindCounts

    @property
    def subtotal(self) -> int:
        return self.counts.total


@dataclass(frozen=True)
class StatisticsSummary:
    root: ScopeStatistics
    totals: KindCounts
    by_level: Mapping[Scope, KindCounts]
    scopes: Mapping[Identifier, ScopeStatistics] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def for_scope(self, identifier: Identifier | None) -> ScopeStatistics:
        """Statistics for a scope; members and unknown scopes count nothing."""
        if identifier is None:
            return self.root
        return self.scopes.get(identifier, ScopeStatistics(identifier, KindCounts()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "totals": self.totals.to_dict(),
            "by_level": {level.value: counts.to_dict() for level, counts in self.by_level.items()},
            "root": self.root.counts.to_dict(),
            "scopes": {str(ident): s.counts.to_dict() for ident, s in self.scopes.items()},
        }


class StatisticsAccumulator:
    """Running tallies fed one record at a time."""

    def __init__(self) -> None:
        self._scopes: dict[Identifier | None, Counter[ChangeKind]] = {None: Counter()}
        self._levels: dict[Scope, Counter[ChangeKind]] = {level: Counter() for level in Scope}

    def open_scope(self, identifier: Identifier) -> None:
        """Register a package or type so it appears even with no children."""
        self._scopes.setdefault(identifier, Counter())

    def add(self, record: ChangeRecord) -> None:
        """Tally a record under its parent scope and its level."""
        parent = record.identifier.parent
        self._scopes.setdefault(parent, Counter())[record.kind] += 1
        self._levels[record.scope][record.kind] += 1

    def merge(self, other: StatisticsAccumulator) -> None:
        for ident, counter in other._scopes.items():
            self._scopes.setdefault(ident, Counter()).update(counter)
        for level, counter in other._levels.items():
            self._levels[level].update(counter)

    def summary(self) -> StatisticsSummary:
        by_level = {level: KindCounts.from_counter(c) for level, c in self._levels.items()}
        totals: Counter[ChangeKind] = Counter()
        for counter in self._levels.values():
            totals.update(counter)
        scopes = {
            ident: ScopeStatistics(ident, KindCounts.from_counter(counter))
            for ident, counter in self._scopes.items()
            if ident is not None
        }
        return StatisticsSummary(
            root=ScopeStatistics(None, KindCounts.from_counter(self._scopes[None])),
            totals=KindCounts.from_counter(totals),
            by_level=MappingProxyType(by_level),
            scopes=MappingProxyType(scopes),
        )
