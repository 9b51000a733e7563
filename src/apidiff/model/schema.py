"""Pydantic schema for JSON/YAML snapshot documents.

A snapshot document is the serialized form of one ``APIModel``:

    name: "mylib 1.2"
    packages:
      - name: com.example
        doc: "Package docs"
        types:
          - name: Widget
            kind: class
            modifiers: {visibility: public, final: true}
            superclass: java.lang.Object
            interfaces: [java.io.Serializable]
            members:
              - {kind: constructor, name: Widget, params: [{name: size, type: int}]}
              - {kind: method, name: resize, return_type: void,
                 params: [{name: n, type: int}], exceptions: [java.io.IOException]}
              - {kind: field, name: MAX, type: int, value: "10",
                 modifiers: {static: true, final: true}}

Unknown keys are rejected so that typos surface as errors instead of
silently dropping data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from apidiff.model.models import (
    APIModel,
    MemberKind,
    MemberNode,
    Modifiers,
    PackageNode,
    Param,
    TypeKind,
    TypeNode,
)

SNAPSHOT_FORMAT_VERSION = 1


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ModifiersSchema(_Strict):
    visibility: Literal["public", "protected", "package", "private"] = "public"
    static: bool = False
    final: bool = False
    abstract: bool = False
    native: bool = False
    synchronized: bool = False
    transient: bool = False
    volatile: bool = False
    deprecated: bool = False
    deprecation_text: str | None = None

    def to_modifiers(self) -> Modifiers:
        return Modifiers(
            visibility=self.visibility,
            is_static=self.static,
            is_final=self.final,
            is_abstract=self.abstract,
            is_native=self.native,
            is_synchronized=self.synchronized,
            is_transient=self.transient,
            is_volatile=self.volatile,
            deprecated=self.deprecated,
            deprecation_text=self.deprecation_text,
        )

    @classmethod
    def from_modifiers(cls, m: Modifiers) -> ModifiersSchema:
        return cls(
            visibility=m.visibility,  # type: ignore[arg-type]
            static=m.is_static,
            final=m.is_final,
            abstract=m.is_abstract,
            native=m.is_native,
            synchronized=m.is_synchronized,
            transient=m.is_transient,
            volatile=m.is_volatile,
            deprecated=m.deprecated,
            deprecation_text=m.deprecation_text,
        )


class ParamSchema(_Strict):
    name: str = ""
    type: str


class MemberSchema(_Strict):
    kind: Literal["constructor", "method", "field"]
    name: str
    params: list[ParamSchema] = Field(default_factory=list)
    return_type: str | None = None
    type: str | None = Field(default=None, description="Field type")
    value: str | None = None
    modifiers: ModifiersSchema = Field(default_factory=ModifiersSchema)
    exceptions: list[str] = Field(default_factory=list)
    inherited_from: str | None = None
    doc: str | None = None

    def to_node(self) -> MemberNode:
        return MemberNode(
            kind=MemberKind(self.kind),
            name=self.name,
            params=tuple(Param(p.name, p.type) for p in self.params),
            return_type=self.return_type,
            field_type=self.type,
            value=self.value,
            modifiers=self.modifiers.to_modifiers(),
            exceptions=tuple(self.exceptions),
            inherited_from=self.inherited_from,
            doc=self.doc,
        )


class TypeSchema(_Strict):
    name: str
    kind: Literal["class", "interface", "enum", "annotation"] = "class"
    modifiers: ModifiersSchema = Field(default_factory=ModifiersSchema)
    superclass: str | None = None
    interfaces: list[str] = Field(default_factory=list)
    members: list[MemberSchema] = Field(default_factory=list)
    doc: str | None = None

    def to_node(self) -> TypeNode:
        return TypeNode(
            name=self.name,
            kind=TypeKind(self.kind),
            modifiers=self.modifiers.to_modifiers(),
            superclass=self.superclass,
            interfaces=tuple(self.interfaces),
            members=tuple(m.to_node() for m in self.members),
            doc=self.doc,
        )


class PackageSchema(_Strict):
    name: str
    types: list[TypeSchema] = Field(default_factory=list)
    doc: str | None = None

    def to_node(self) -> PackageNode:
        return PackageNode(
            name=self.name,
            types=tuple(t.to_node() for t in self.types),
            doc=self.doc,
        )


class SnapshotDocument(_Strict):
    """Top-level snapshot document."""

    format_version: int = SNAPSHOT_FORMAT_VERSION
    name: str
    packages: list[PackageSchema] = Field(default_factory=list)

    def to_model(self, name: str | None = None) -> APIModel:
        return APIModel(
            name=name or self.name,
            packages=tuple(p.to_node() for p in self.packages),
        )

    @classmethod
    def from_model(cls, model: APIModel) -> SnapshotDocument:
        return cls(
            name=model.name,
            packages=[
                PackageSchema(
                    name=pkg.name,
                    doc=pkg.doc,
                    types=[_type_schema(t) for t in pkg.types],
                )
                for pkg in model.packages
            ],
        )


def _type_schema(t: TypeNode) -> TypeSchema:
    return TypeSchema(
        name=t.name,
        kind=t.kind.value,  # type: ignore[arg-type]
        modifiers=ModifiersSchema.from_modifiers(t.modifiers),
        superclass=t.superclass,
        interfaces=list(t.interfaces),
        members=[
            MemberSchema(
                kind=m.kind.value,  # type: ignore[arg-type]
                name=m.name,
                params=[ParamSchema(name=p.name, type=p.type) for p in m.params],
                return_type=m.return_type,
                type=m.field_type,
                value=m.value,
                modifiers=ModifiersSchema.from_modifiers(m.modifiers),
                exceptions=list(m.exceptions),
                inherited_from=m.inherited_from,
                doc=m.doc,
            )
            for m in t.members
        ],
        doc=t.doc,
    )
