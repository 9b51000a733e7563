"""API model package: immutable snapshot of one API surface.

Public API re-exports for the model subpackage.
"""

from apidiff.model.identifiers import Identifier, Scope, member_key
from apidiff.model.inheritance import with_inherited_members
from apidiff.model.models import (
    APIModel,
    Declaration,
    MemberKind,
    MemberNode,
    Modifiers,
    PackageNode,
    Param,
    TypeKind,
    TypeNode,
)
from apidiff.model.sources import (
    load_snapshot,
    model_from_dict,
    model_from_jdiff_xml,
    model_to_dict,
    public_surface,
    write_snapshot,
)

__all__ = [
    "APIModel",
    "Declaration",
    "Identifier",
    "MemberKind",
    "MemberNode",
    "Modifiers",
    "PackageNode",
    "Param",
    "Scope",
    "TypeKind",
    "TypeNode",
    "load_snapshot",
    "member_key",
    "model_from_dict",
    "model_from_jdiff_xml",
    "model_to_dict",
    "public_surface",
    "with_inherited_members",
    "write_snapshot",
]
