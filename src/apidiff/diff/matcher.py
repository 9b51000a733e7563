"""Pair declarations across two snapshots by identifier.

Matching is exact identifier equality at package, type and member
granularity. There is no rename detection: a renamed declaration shows up
as one removal plus one addition, and a method whose parameter types
change is a different overload (removed + added), never a changed one.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from apidiff.model.identifiers import Identifier
from apidiff.model.models import APIModel, Declaration, MemberNode, PackageNode, TypeNode


class MatchStatus(str, Enum):
    OLD_ONLY = "old_only"
    NEW_ONLY = "new_only"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class Match:
    """The old and new declaration sharing one identifier."""

    identifier: Identifier
    old: Declaration | None
    new: Declaration | None

    @property
    def status(self) -> MatchStatus:
        if self.new is None:
            return MatchStatus.OLD_ONLY
        if self.old is None:
            return MatchStatus.NEW_ONLY
        return MatchStatus.BOTH


@dataclass(frozen=True)
class CorrespondenceTable:
    """Every identifier of either snapshot, with walk-ordered children.

    Iteration yields identifiers depth-first in walk order: packages by
    name, types by name, members by (kind, name, signature).
    """

    entries: Mapping[Identifier, Match]
    tree: Mapping[Identifier | None, tuple[Identifier, ...]]

    def __getitem__(self, identifier: Identifier) -> Match:
        return self.entries[identifier]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Identifier]:
        for pid in self.roots():
            yield from self._walk(pid)

    def _walk(self, identifier: Identifier) -> Iterator[Identifier]:
        yield identifier
        for child in self.children(identifier):
            yield from self._walk(child)

    def roots(self) -> tuple[Identifier, ...]:
        return self.tree.get(None, ())

    def children(self, identifier: Identifier) -> tuple[Identifier, ...]:
        return self.tree.get(identifier, ())

    def status(self, identifier: Identifier) -> MatchStatus:
        return self.entries[identifier].status

    def with_status(self, status: MatchStatus) -> list[Identifier]:
        return [ident for ident in self if self.entries[ident].status is status]


def match_models(old: APIModel, new: APIModel) -> CorrespondenceTable:
    """Build the correspondence table for two snapshots."""
    entries: dict[Identifier, Match] = {}
    tree: dict[Identifier | None, tuple[Identifier, ...]] = {}

    old_pkgs = {p.name: p for p in old.packages}
    new_pkgs = {p.name: p for p in new.packages}

    roots = []
    for name in sorted(old_pkgs.keys() | new_pkgs.keys()):
        pid = Identifier(name)
        old_pkg, new_pkg = old_pkgs.get(name), new_pkgs.get(name)
        entries[pid] = Match(pid, old_pkg, new_pkg)
        tree[pid] = _match_types(pid, old_pkg, new_pkg, entries, tree)
        roots.append(pid)
    tree[None] = tuple(roots)

    return CorrespondenceTable(entries=MappingProxyType(entries), tree=MappingProxyType(tree))


def _match_types(
    pid: Identifier,
    old_pkg: PackageNode | None,
    new_pkg: PackageNode | None,
    entries: dict[Identifier, Match],
    tree: dict[Identifier | None, tuple[Identifier, ...]],
) -> tuple[Identifier, ...]:
    old_types = {t.name: t for t in old_pkg.types} if old_pkg else {}
    new_types = {t.name: t for t in new_pkg.types} if new_pkg else {}

    children = []
    for name in sorted(old_types.keys() | new_types.keys()):
        tid = pid.child(name)
        old_type, new_type = old_types.get(name), new_types.get(name)
        entries[tid] = Match(tid, old_type, new_type)
        tree[tid] = _match_members(tid, old_type, new_type, entries)
        children.append(tid)
    return tuple(children)


def _match_members(
    tid: Identifier,
    old_type: TypeNode | None,
    new_type: TypeNode | None,
    entries: dict[Identifier, Match],
) -> tuple[Identifier, ...]:
    old_members = {m.key: m for m in old_type.members} if old_type else {}
    new_members = {m.key: m for m in new_type.members} if new_type else {}

    def sort_key(key: str) -> tuple[int, str, str]:
        member: MemberNode = new_members.get(key) or old_members[key]
        return member.sort_key

    children = []
    for key in sorted(old_members.keys() | new_members.keys(), key=sort_key):
        mid = tid.child(key)
        entries[mid] = Match(mid, old_members.get(key), new_members.get(key))
        children.append(mid)
    return tuple(children)
