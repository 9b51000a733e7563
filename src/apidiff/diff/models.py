"""Data models for API diff results.

All models are frozen dataclasses; a DiffResult is handed to the renderer
as an immutable value and the engine keeps no reference to it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from apidiff.model.identifiers import Identifier, Scope
from apidiff.model.models import Declaration

if TYPE_CHECKING:
    from apidiff.config.models import ReportConfig
    from apidiff.diff.stats import StatisticsSummary


class ChangeKind(str, Enum):
    """Classification of one declaration across the two snapshots."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    DEPRECATED = "deprecated"
    UNDEPRECATED = "undeprecated"
    UNCHANGED = "unchanged"


class Severity(str, Enum):
    """Compatibility impact of a change record."""

    BREAKING = "breaking"
    NON_BREAKING = "non_breaking"


# Sub-difference fields outside the compiled signature: docs, deprecation
# text and parameter names
DOC_FIELDS = frozenset({"documentation", "deprecation_text", "parameter_names"})


@dataclass(frozen=True, slots=True)
class SubDifference:
    """One differing field of a declaration present in both snapshots."""

    field: str
    old: Any
    new: Any
    breaking: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "old": _jsonable(self.old),
            "new": _jsonable(self.new),
            "breaking": self.breaking,
        }


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """Classified outcome for one identifier, with nested child records.

    ``container_only`` marks a package or type whose own declaration is
    identical but whose kind was raised to CHANGED by a changed descendant.
    """

    identifier: Identifier
    kind: ChangeKind
    differences: tuple[SubDifference, ...] = ()
    old: Declaration | None = None
    new: Declaration | None = None
    children: tuple[ChangeRecord, ...] = ()
    container_only: bool = False
    severity: Severity = Severity.NON_BREAKING

    @property
    def scope(self) -> Scope:
        return self.identifier.scope

    @property
    def has_changes(self) -> bool:
        return self.kind is not ChangeKind.UNCHANGED

    @property
    def has_nested_changes(self) -> bool:
        return any(c.has_changes for c in self.children)

    def difference(self, field: str) -> SubDifference | None:
        for d in self.differences:
            if d.field == field:
                return d
        return None

    def iter_records(self) -> Iterator[ChangeRecord]:
        """This record and all descendants, depth-first in walk order."""
        yield self
        for child in self.children:
            yield from child.iter_records()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "identifier": str(self.identifier),
            "scope": self.scope.value,
            "kind": self.kind.value,
            "severity": self.severity.value,
        }
        if self.container_only:
            data["container_only"] = True
        if self.differences:
            data["differences"] = [d.to_dict() for d in self.differences]
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Renderer-facing switches carried on the result.

    They select what a renderer shows; the records themselves always
    carry the full classification.
    """

    verbose: bool = False
    stats: bool = True
    doc_changes: bool = True
    incompatible_only: bool = False

    @classmethod
    def from_config(cls, config: ReportConfig) -> ReportOptions:
        return cls(
            verbose=config.verbose,
            stats=config.stats,
            doc_changes=config.doc_changes,
            incompatible_only=config.incompatible_only,
        )

    def shows(self, record: ChangeRecord) -> bool:
        """Whether a renderer should list this record."""
        if self.incompatible_only:
            return record.severity is Severity.BREAKING
        if record.kind is ChangeKind.UNCHANGED:
            return self.verbose
        if record.kind is ChangeKind.CHANGED and not record.container_only:
            return bool(self.visible_differences(record)) or record.has_nested_changes
        return True

    def visible_differences(self, record: ChangeRecord) -> tuple[SubDifference, ...]:
        diffs = record.differences
        if not self.doc_changes or self.incompatible_only:
            diffs = tuple(d for d in diffs if d.field not in DOC_FIELDS)
        if self.incompatible_only:
            diffs = tuple(d for d in diffs if d.breaking)
        return diffs


@dataclass(frozen=True)
class DiffResult:
    """Final diff result: package records, statistics and report options."""

    old_name: str
    new_name: str
    packages: tuple[ChangeRecord, ...]
    statistics: StatisticsSummary
    options: ReportOptions = ReportOptions()

    def iter_records(self) -> Iterator[ChangeRecord]:
        for pkg in self.packages:
            yield from pkg.iter_records()

    def find(self, identifier: Identifier) -> ChangeRecord | None:
        for record in self.iter_records():
            if record.identifier == identifier:
                return record
        return None

    def records_of_kind(self, kind: ChangeKind) -> list[ChangeRecord]:
        return [r for r in self.iter_records() if r.kind is kind and not r.container_only]

    @property
    def has_changes(self) -> bool:
        return any(p.has_changes for p in self.packages)

    @property
    def summary(self) -> str:
        """Human-readable summary of leaf-level changes."""
        counts: dict[str, int] = {}
        for r in self.iter_records():
            if r.has_changes and not r.container_only:
                counts[r.kind.value] = counts.get(r.kind.value, 0) + 1
        if not counts:
            return "No changes detected"
        parts = [f"{count} {kind}" for kind, count in sorted(counts.items())]
        return ", ".join(parts)

    @property
    def breaking_summary(self) -> str | None:
        """Summary of incompatible changes, or None if none."""
        breaking = [
            r
            for r in self.iter_records()
            if r.severity is Severity.BREAKING and r.has_changes and not r.container_only
        ]
        if not breaking:
            return None

        n = len(breaking)
        names = ", ".join(str(r.identifier) for r in breaking[:5])
        suffix = f" (and {n - 5} more)" if n > 5 else ""
        return f"{n} breaking change{'s' if n != 1 else ''}: {names}{suffix}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "old": self.old_name,
            "new": self.new_name,
            "summary": self.summary,
            "breaking_summary": self.breaking_summary,
            "options": {
                "verbose": self.options.verbose,
                "stats": self.options.stats,
                "doc_changes": self.options.doc_changes,
                "incompatible_only": self.options.incompatible_only,
            },
            "packages": [p.to_dict() for p in self.packages],
            "statistics": self.statistics.to_dict(),
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value
