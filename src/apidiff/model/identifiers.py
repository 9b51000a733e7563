"""Qualified identifiers used as the matching key across snapshots.

An identifier has up to three parts:

    package                      java.util
    package + type               java.util / Map.Entry
    package + type + member      java.util / HashMap / put(K, V)

Member keys:
- methods:      ``name(T1, T2)``
- constructors: ``<init>(T1, T2)``
- fields:       ``name``

Parameter types are part of the key so overloads never collide; return
types are not (a return type change is a compared field, not a new key).

Sort keys used by every walk over a model or diff:
- packages: name
- types:    name (nested types sort by their dotted name)
- members:  (kind order constructor < method < field, name, parameter signature)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

CONSTRUCTOR_NAME = "<init>"


class Scope(str, Enum):
    """Granularity of a declaration."""

    PACKAGE = "package"
    TYPE = "type"
    MEMBER = "member"


@dataclass(frozen=True, slots=True)
class Identifier:
    """Unique, hashable key of one declaration within a snapshot."""

    package: str
    type_name: str | None = None
    member: str | None = None

    def __post_init__(self) -> None:
        if self.member is not None and self.type_name is None:
            raise ValueError("member identifier requires a type name")

    @property
    def scope(self) -> Scope:
        if self.member is not None:
            return Scope.MEMBER
        if self.type_name is not None:
            return Scope.TYPE
        return Scope.PACKAGE

    @property
    def parent(self) -> Identifier | None:
        """Enclosing declaration, or None for packages."""
        if self.member is not None:
            return Identifier(self.package, self.type_name)
        if self.type_name is not None:
            return Identifier(self.package)
        return None

    @property
    def qualified_type(self) -> str | None:
        """Dotted type name, e.g. ``java.util.Map.Entry``."""
        if self.type_name is None:
            return None
        return qualify(self.package, self.type_name)

    def child(self, name: str) -> Identifier:
        """Identifier of a type (from a package) or member (from a type)."""
        if self.scope is Scope.PACKAGE:
            return Identifier(self.package, name)
        if self.scope is Scope.TYPE:
            return Identifier(self.package, self.type_name, name)
        raise ValueError(f"members have no children: {self}")

    def __str__(self) -> str:
        if self.type_name is None:
            return self.package
        text = qualify(self.package, self.type_name)
        if self.member is not None:
            text = f"{text}#{self.member}"
        return text


def qualify(package: str, type_name: str) -> str:
    """Join a package and a (possibly nested) type name."""
    return f"{package}.{type_name}" if package else type_name


def param_signature(param_types: Iterable[str]) -> str:
    """Comma-separated parameter types, e.g. ``int, java.lang.String``."""
    return ", ".join(param_types)


def member_key(kind: str, name: str, param_types: Iterable[str] = ()) -> str:
    """Build the member part of an identifier.

    Args:
        kind: "constructor", "method" or "field"
        name: member name (ignored for constructors)
        param_types: ordered parameter types (ignored for fields)
    """
    if kind == "field":
        return name
    if kind == "constructor":
        name = CONSTRUCTOR_NAME
    return f"{name}({param_signature(param_types)})"


def split_params(signature: str) -> list[str]:
    """Split a parameter signature on top-level commas.

    Commas nested in generic arguments stay with their type:
    ``Map<K, V>, int`` -> ``["Map<K, V>", "int"]``. ``void`` and the empty
    string both mean no parameters.
    """
    text = signature.strip()
    if not text or text == "void":
        return []
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch in "<([":
            depth += 1
        elif ch in ">)]":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i].strip())
            start = i + 1
    parts.append(text[start:].strip())
    return [p for p in parts if p]
