"""Immutable in-memory model of one API snapshot.

Packages hold types, types hold members. All nodes are frozen dataclasses
with tuple children. Supertype references are stored as qualified-name
strings and resolved through the owning ``APIModel``'s lookup tables, so
the tree never holds cross-links between nodes.

``APIModel`` validates on construction: duplicate identifiers and
structurally impossible nodes raise ``MalformedModelError``. Visibility
filtering is the snapshot source's job and is not re-checked here.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from apidiff.core.errors import MalformedModelError, UnresolvedReferenceError
from apidiff.model.identifiers import Identifier, member_key, param_signature, qualify

VISIBILITIES = ("public", "protected", "package", "private")


class TypeKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"


class MemberKind(str, Enum):
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    FIELD = "field"

    @property
    def sort_order(self) -> int:
        return _MEMBER_ORDER[self]


_MEMBER_ORDER = {MemberKind.CONSTRUCTOR: 0, MemberKind.METHOD: 1, MemberKind.FIELD: 2}


@dataclass(frozen=True, slots=True)
class Modifiers:
    """Modifiers common to types and members.

    Not every flag applies to every declaration (``transient`` only means
    something on fields); inapplicable flags stay False.
    """

    visibility: str = "public"
    is_static: bool = False
    is_final: bool = False
    is_abstract: bool = False
    is_native: bool = False
    is_synchronized: bool = False
    is_transient: bool = False
    is_volatile: bool = False
    deprecated: bool = False
    deprecation_text: str | None = None  # opaque, only meaningful when deprecated


@dataclass(frozen=True, slots=True)
class Param:
    name: str
    type: str


@dataclass(frozen=True, slots=True)
class MemberNode:
    """A constructor, method or field.

    ``return_type`` is set for methods, ``field_type`` and ``value`` for
    fields. ``exceptions`` keeps declaration order; comparisons treat it
    as a set.
    """

    kind: MemberKind
    name: str
    params: tuple[Param, ...] = ()
    return_type: str | None = None
    field_type: str | None = None
    value: str | None = None
    modifiers: Modifiers = field(default_factory=Modifiers)
    exceptions: tuple[str, ...] = ()
    inherited_from: str | None = None
    doc: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MemberKind(self.kind))
        object.__setattr__(self, "params", tuple(self.params))
        object.__setattr__(self, "exceptions", tuple(self.exceptions))

    @property
    def param_types(self) -> tuple[str, ...]:
        return tuple(p.type for p in self.params)

    @property
    def signature(self) -> str:
        """Parameter signature, empty for fields and no-arg callables."""
        return param_signature(self.param_types)

    @property
    def key(self) -> str:
        return member_key(self.kind.value, self.name, self.param_types)

    @property
    def sort_key(self) -> tuple[int, str, str]:
        return (self.kind.sort_order, self.name, self.signature)

    def inherited(self, from_type: str) -> MemberNode:
        """Copy of this member as seen through a subtype."""
        return replace(self, inherited_from=from_type)


@dataclass(frozen=True, slots=True)
class TypeNode:
    """A class, interface, enum or annotation type.

    ``name`` is relative to the package; nested types use dotted names
    (``Map.Entry``). ``superclass`` and ``interfaces`` are qualified names.
    """

    name: str
    kind: TypeKind = TypeKind.CLASS
    modifiers: Modifiers = field(default_factory=Modifiers)
    superclass: str | None = None
    interfaces: tuple[str, ...] = ()
    members: tuple[MemberNode, ...] = ()
    doc: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TypeKind(self.kind))
        object.__setattr__(self, "interfaces", tuple(self.interfaces))
        object.__setattr__(self, "members", tuple(self.members))

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE


@dataclass(frozen=True, slots=True)
class PackageNode:
    name: str
    types: tuple[TypeNode, ...] = ()
    doc: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))


Declaration = PackageNode | TypeNode | MemberNode


@dataclass(frozen=True, slots=True)
class APIModel:
    """One API snapshot with an identifier-keyed lookup table.

    Identity key for matching across snapshots is ``Identifier``; see
    ``apidiff.model.identifiers`` for the key format.
    """

    name: str
    packages: tuple[PackageNode, ...] = ()
    _index: Mapping[Identifier, Declaration] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _types: Mapping[str, TypeNode] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "packages", tuple(self.packages))
        index: dict[Identifier, Declaration] = {}
        types: dict[str, TypeNode] = {}

        for pkg in self.packages:
            if not pkg.name:
                raise MalformedModelError.invalid_structure(
                    "package without a name", model=self.name
                )
            pid = Identifier(pkg.name)
            self._register(index, pid, pkg)
            for typ in pkg.types:
                if not typ.name:
                    raise MalformedModelError.invalid_structure(
                        "type without a name", model=self.name, package=pkg.name
                    )
                tid = pid.child(typ.name)
                _check_visibility(typ.modifiers, str(tid), self.name)
                self._register(index, tid, typ)
                types.setdefault(qualify(pkg.name, typ.name), typ)
                for member in typ.members:
                    _check_member(member, tid, self.name)
                    self._register(index, tid.child(member.key), member)

        object.__setattr__(self, "_index", MappingProxyType(index))
        object.__setattr__(self, "_types", MappingProxyType(types))

    def _register(
        self, index: dict[Identifier, Declaration], ident: Identifier, node: Declaration
    ) -> None:
        if ident in index:
            raise MalformedModelError.identifier_collision(str(ident), self.name)
        index[ident] = node

    def __contains__(self, ident: object) -> bool:
        return ident in self._index

    def __len__(self) -> int:
        return len(self._index)

    def get(self, ident: Identifier) -> Declaration | None:
        return self._index.get(ident)

    def identifiers(self) -> Iterator[Identifier]:
        """Identifiers in declaration order."""
        return iter(self._index)

    def package(self, name: str) -> PackageNode | None:
        node = self._index.get(Identifier(name))
        return node if isinstance(node, PackageNode) else None

    def find_type(self, qualified_name: str) -> TypeNode | None:
        return self._types.get(qualified_name)

    def resolve_type(self, qualified_name: str) -> TypeNode:
        """Look up a supertype reference.

        Raises:
            UnresolvedReferenceError: If no type in this snapshot has that name.
        """
        typ = self._types.get(qualified_name)
        if typ is None:
            raise UnresolvedReferenceError.dangling(qualified_name, self.name)
        return typ

    def iter_types(self) -> Iterator[tuple[PackageNode, TypeNode]]:
        for pkg in self.packages:
            for typ in pkg.types:
                yield pkg, typ


def _check_member(member: MemberNode, type_id: Identifier, model: str) -> None:
    if not member.name:
        raise MalformedModelError.invalid_structure(
            "member without a name", model=model, type=str(type_id)
        )
    if member.kind is MemberKind.FIELD and member.params:
        raise MalformedModelError.invalid_structure(
            "field with parameters", model=model, member=f"{type_id}#{member.name}"
        )
    if member.kind is not MemberKind.FIELD and (member.field_type or member.value):
        raise MalformedModelError.invalid_structure(
            "callable with a field type or value",
            model=model,
            member=f"{type_id}#{member.key}",
        )
    _check_visibility(member.modifiers, f"{type_id}#{member.key}", model)


def _check_visibility(modifiers: Modifiers, declaration: str, model: str) -> None:
    if modifiers.visibility not in VISIBILITIES:
        raise MalformedModelError.invalid_structure(
            f"unknown visibility '{modifiers.visibility}'",
            model=model,
            declaration=declaration,
        )
