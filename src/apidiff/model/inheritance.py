"""Expand each type with the members it inherits.

Walks superclass and interface references that resolve within the same
snapshot and copies non-private methods and fields into the subtype,
tagged with the supertype they came from. Methods overridden locally (same
name and parameter types) and fields hidden locally (same name) are not
copied. References that do not resolve are skipped; the snapshot simply
does not know what they contribute.
"""

from __future__ import annotations

import structlog

from apidiff.model.identifiers import qualify
from apidiff.model.models import APIModel, MemberKind, MemberNode, PackageNode, TypeNode

log = structlog.get_logger(__name__)

_INHERITABLE = (MemberKind.METHOD, MemberKind.FIELD)


def with_inherited_members(model: APIModel) -> APIModel:
    """Return a copy of ``model`` whose types also list inherited members."""
    packages = []
    added = 0
    for pkg in model.packages:
        types = []
        for typ in pkg.types:
            inherited = _collect_inherited(model, typ, qualify(pkg.name, typ.name))
            added += len(inherited)
            types.append(_with_members(typ, typ.members + tuple(inherited)))
        packages.append(PackageNode(name=pkg.name, types=tuple(types), doc=pkg.doc))

    log.debug("inherited_members_added", api=model.name, members=added)
    return APIModel(name=model.name, packages=tuple(packages))


def _collect_inherited(model: APIModel, typ: TypeNode, qualified: str) -> list[MemberNode]:
    present = {m.key for m in typ.members}
    visited = {qualified}
    inherited: list[MemberNode] = []

    def visit(ref: str) -> None:
        if ref in visited:
            return
        visited.add(ref)
        parent = model.find_type(ref)
        if parent is None:
            return
        for m in parent.members:
            if m.kind not in _INHERITABLE or m.inherited_from is not None:
                continue
            if m.modifiers.visibility == "private" or m.key in present:
                continue
            present.add(m.key)
            inherited.append(m.inherited(ref))
        for supertype in _supertypes(parent):
            visit(supertype)

    for supertype in _supertypes(typ):
        visit(supertype)
    return inherited


def _supertypes(typ: TypeNode) -> list[str]:
    refs = [typ.superclass] if typ.superclass else []
    refs.extend(typ.interfaces)
    return refs


def _with_members(typ: TypeNode, members: tuple[MemberNode, ...]) -> TypeNode:
    return TypeNode(
        name=typ.name,
        kind=typ.kind,
        modifiers=typ.modifiers,
        superclass=typ.superclass,
        interfaces=typ.interfaces,
        members=members,
        doc=typ.doc,
    )
