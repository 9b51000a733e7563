"""Classify matched declarations into change records.

Walks the correspondence table top-down, depth-first: packages by name,
types by name, members by (kind, name, signature). Each identifier gets
one ChangeRecord, classified in this order:

1. absent in new            -> removed
2. absent in old            -> added
3. present in both, compare every tracked field:
   - deprecation turned on  -> deprecated
   - deprecation turned off -> undeprecated
   - any other difference   -> changed
   - nothing differs        -> unchanged

Deprecation is orthogonal to the other fields: a declaration that is
newly deprecated *and* otherwise changed is ``deprecated`` and carries the
other sub-differences alongside the ``deprecated`` one.

Children of an added or removed container are added or removed with it.
A container whose own declaration is unchanged but that has any changed
descendant is raised to ``changed`` with ``container_only`` set.
"""

from __future__ import annotations

import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import structlog

from apidiff.core.errors import InternalError
from apidiff.diff.matcher import CorrespondenceTable, Match
from apidiff.diff.models import (
    ChangeKind,
    ChangeRecord,
    DiffResult,
    ReportOptions,
    Severity,
    SubDifference,
)
from apidiff.diff.stats import StatisticsAccumulator
from apidiff.model.identifiers import Identifier, Scope
from apidiff.model.models import (
    APIModel,
    Declaration,
    MemberNode,
    Modifiers,
    PackageNode,
    TypeNode,
)

log = structlog.get_logger(__name__)

_VISIBILITY_RANK = {"private": 0, "package": 1, "protected": 2, "public": 3}

# (sub-difference field, Modifiers attribute)
_MODIFIER_FIELDS = (
    ("visibility", "visibility"),
    ("static", "is_static"),
    ("final", "is_final"),
    ("abstract", "is_abstract"),
    ("native", "is_native"),
    ("synchronized", "is_synchronized"),
    ("transient", "is_transient"),
    ("volatile", "is_volatile"),
)


class Differ:
    """Produce a DiffResult from two snapshots and their correspondence table.

    With ``max_workers > 1`` top-level packages are diffed on a thread
    pool, each branch tallying into its own accumulator; branches are
    merged in package order so the result equals the sequential walk.
    """

    def __init__(self, old: APIModel, new: APIModel, max_workers: int = 1) -> None:
        self.old = old
        self.new = new
        self.max_workers = max_workers

    def diff(
        self,
        table: CorrespondenceTable,
        options: ReportOptions | None = None,
    ) -> DiffResult:
        roots = table.roots()
        if self.max_workers > 1 and len(roots) > 1:
            with ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="apidiff-differ",
            ) as executor:
                # Workers start with an empty context; carry the run ID over
                futures = [
                    executor.submit(contextvars.copy_context().run, self._diff_branch, pid, table)
                    for pid in roots
                ]
                branches = [f.result() for f in futures]
        else:
            branches = [self._diff_branch(pid, table) for pid in roots]

        stats = StatisticsAccumulator()
        for _record, branch_stats in branches:
            stats.merge(branch_stats)

        return DiffResult(
            old_name=self.old.name,
            new_name=self.new.name,
            packages=tuple(record for record, _stats in branches),
            statistics=stats.summary(),
            options=options or ReportOptions(),
        )

    def _diff_branch(
        self, pid: Identifier, table: CorrespondenceTable
    ) -> tuple[ChangeRecord, StatisticsAccumulator]:
        stats = StatisticsAccumulator()
        record = self._walk(pid, table, stats)
        log.debug("package_diffed", package=str(pid), kind=record.kind.value)
        return record, stats

    def _walk(
        self,
        identifier: Identifier,
        table: CorrespondenceTable,
        stats: StatisticsAccumulator,
    ) -> ChangeRecord:
        if identifier.scope is not Scope.MEMBER:
            stats.open_scope(identifier)
        children = tuple(self._walk(child, table, stats) for child in table.children(identifier))

        match = table[identifier]
        kind, differences = self.classify(match)
        container_only = False
        if kind is ChangeKind.UNCHANGED and any(c.has_changes for c in children):
            kind = ChangeKind.CHANGED
            container_only = True

        record = ChangeRecord(
            identifier=identifier,
            kind=kind,
            differences=differences,
            old=match.old,
            new=match.new,
            children=children,
            container_only=container_only,
            severity=_severity(kind, differences, children),
        )
        stats.add(record)
        return record

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, match: Match) -> tuple[ChangeKind, tuple[SubDifference, ...]]:
        """Classify one match on its own declaration, ignoring descendants."""
        old, new = match.old, match.new
        if new is None:
            return ChangeKind.REMOVED, ()
        if old is None:
            return ChangeKind.ADDED, ()

        differences = self._compare(match.identifier, old, new)
        deprecation = next((d for d in differences if d.field == "deprecated"), None)
        if deprecation is not None:
            kind = ChangeKind.DEPRECATED if deprecation.new else ChangeKind.UNDEPRECATED
            return kind, differences
        if differences:
            return ChangeKind.CHANGED, differences
        return ChangeKind.UNCHANGED, ()

    def _compare(
        self, identifier: Identifier, old: Declaration, new: Declaration
    ) -> tuple[SubDifference, ...]:
        diffs: list[SubDifference] = []
        if isinstance(old, TypeNode) and isinstance(new, TypeNode):
            diffs.extend(self._compare_types(identifier, old, new))
            diffs.extend(_compare_modifiers(old.modifiers, new.modifiers))
        elif isinstance(old, MemberNode) and isinstance(new, MemberNode):
            diffs.extend(_compare_members(old, new))
            diffs.extend(_compare_modifiers(old.modifiers, new.modifiers))
        elif not (isinstance(old, PackageNode) and isinstance(new, PackageNode)):
            # Same identifier, different node types: impossible for valid models
            raise InternalError.unexpected(
                "mismatched declarations", identifier=str(identifier)
            )
        if _doc_changed(old.doc, new.doc):
            diffs.append(SubDifference("documentation", old.doc, new.doc))
        return tuple(diffs)

    def _compare_types(
        self, identifier: Identifier, old: TypeNode, new: TypeNode
    ) -> list[SubDifference]:
        diffs: list[SubDifference] = []
        if old.kind is not new.kind:
            diffs.append(SubDifference("kind", old.kind.value, new.kind.value, breaking=True))
        if old.superclass != new.superclass:
            self._note_unresolved(identifier, old.superclass, new.superclass)
            diffs.append(SubDifference("superclass", old.superclass, new.superclass, breaking=True))
        old_ifaces, new_ifaces = sorted(old.interfaces), sorted(new.interfaces)
        if old_ifaces != new_ifaces:
            for ref in set(new_ifaces) - set(old_ifaces):
                self._note_unresolved(identifier, None, ref)
            removed_any = bool(set(old_ifaces) - set(new_ifaces))
            diffs.append(
                SubDifference(
                    "interfaces", tuple(old_ifaces), tuple(new_ifaces), breaking=removed_any
                )
            )
        return diffs

    def _note_unresolved(
        self, identifier: Identifier, old_ref: str | None, new_ref: str | None
    ) -> None:
        """Log changed supertype references that neither snapshot defines.

        The change is still reported; resolution only affects the log.
        """
        for ref in (old_ref, new_ref):
            if ref and self.old.find_type(ref) is None and self.new.find_type(ref) is None:
                log.debug("unresolved_reference", type=str(identifier), reference=ref)


def _compare_members(old: MemberNode, new: MemberNode) -> list[SubDifference]:
    diffs: list[SubDifference] = []
    if old.return_type != new.return_type:
        diffs.append(SubDifference("return_type", old.return_type, new.return_type, breaking=True))
    if old.field_type != new.field_type:
        diffs.append(SubDifference("type", old.field_type, new.field_type, breaking=True))
    if old.value != new.value:
        diffs.append(SubDifference("value", old.value, new.value))
    old_names = tuple(p.name for p in old.params)
    new_names = tuple(p.name for p in new.params)
    if old_names != new_names:
        diffs.append(SubDifference("parameter_names", old_names, new_names))
    old_exc, new_exc = sorted(old.exceptions), sorted(new.exceptions)
    if old_exc != new_exc:
        diffs.append(SubDifference("exceptions", tuple(old_exc), tuple(new_exc), breaking=True))
    if old.inherited_from != new.inherited_from:
        diffs.append(SubDifference("inherited_from", old.inherited_from, new.inherited_from))
    return diffs


def _compare_modifiers(old: Modifiers, new: Modifiers) -> list[SubDifference]:
    diffs: list[SubDifference] = []
    for name, attr in _MODIFIER_FIELDS:
        before, after = getattr(old, attr), getattr(new, attr)
        if before != after:
            breaking = _modifier_breaking(name, before, after)
            diffs.append(SubDifference(name, before, after, breaking=breaking))
    if old.deprecated != new.deprecated:
        diffs.append(SubDifference("deprecated", old.deprecated, new.deprecated))
    elif old.deprecated and old.deprecation_text != new.deprecation_text:
        diffs.append(SubDifference("deprecation_text", old.deprecation_text, new.deprecation_text))
    return diffs


def _modifier_breaking(name: str, before: Any, after: Any) -> bool:
    if name == "visibility":
        return _VISIBILITY_RANK.get(after, 0) < _VISIBILITY_RANK.get(before, 0)
    if name in ("final", "abstract"):
        return bool(after)
    return name == "static"


def _doc_changed(old: str | None, new: str | None) -> bool:
    """Compare documentation text ignoring whitespace differences."""
    return _normalize_doc(old) != _normalize_doc(new)


def _normalize_doc(doc: str | None) -> str:
    return " ".join(doc.split()) if doc else ""


def _severity(
    kind: ChangeKind,
    differences: tuple[SubDifference, ...],
    children: tuple[ChangeRecord, ...],
) -> Severity:
    if kind is ChangeKind.REMOVED:
        return Severity.BREAKING
    if kind is ChangeKind.ADDED:
        return Severity.NON_BREAKING
    if any(d.breaking for d in differences):
        return Severity.BREAKING
    if any(c.severity is Severity.BREAKING for c in children):
        return Severity.BREAKING
    return Severity.NON_BREAKING
