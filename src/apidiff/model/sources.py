"""Produce APIModels from snapshot files.

Two snapshot formats:
- JSON / YAML documents following ``apidiff.model.schema``
- JDiff XML API files (``<api><package><class>...``)

Every loader restricts the model to the public surface (public and
protected declarations) before handing it on; the diff engine relies on
that having happened once, here.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from apidiff.core.errors import MalformedModelError
from apidiff.model.identifiers import split_params
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
from apidiff.model.schema import SNAPSHOT_FORMAT_VERSION, SnapshotDocument

log = structlog.get_logger(__name__)

PUBLIC_SURFACE = frozenset({"public", "protected"})

_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}
_XML_SUFFIXES = {".xml"}


# ============================================================================
# Public surface filtering
# ============================================================================


def public_surface(model: APIModel) -> APIModel:
    """Drop private and package-private types and members."""
    packages = []
    for pkg in model.packages:
        types = [
            TypeNode(
                name=t.name,
                kind=t.kind,
                modifiers=t.modifiers,
                superclass=t.superclass,
                interfaces=t.interfaces,
                members=tuple(
                    m for m in t.members if m.modifiers.visibility in PUBLIC_SURFACE
                ),
                doc=t.doc,
            )
            for t in pkg.types
            if t.modifiers.visibility in PUBLIC_SURFACE
        ]
        packages.append(PackageNode(name=pkg.name, types=tuple(types), doc=pkg.doc))
    return APIModel(name=model.name, packages=tuple(packages))


# ============================================================================
# Source 1: JSON / YAML documents
# ============================================================================


def model_from_dict(data: dict[str, Any], name: str | None = None) -> APIModel:
    """Validate a snapshot document and build its public-surface model.

    Args:
        data: Parsed snapshot document
        name: Display label overriding the document's own name

    Raises:
        MalformedModelError: If the document does not match the schema or
            declares the same identifier twice.
    """
    try:
        doc = SnapshotDocument.model_validate(data)
    except ValidationError as e:
        err = e.errors()[0]
        location = ".".join(str(loc) for loc in err["loc"])
        raise MalformedModelError.invalid_structure(
            f"{location}: {err['msg']}", location=location
        ) from e
    return public_surface(doc.to_model(name))


def model_to_dict(model: APIModel) -> dict[str, Any]:
    """Serialize a model as a snapshot document."""
    return SnapshotDocument.from_model(model).model_dump(mode="json", exclude_defaults=True)


def write_snapshot(model: APIModel, path: Path) -> None:
    """Write a model as a JSON or YAML snapshot, chosen by suffix."""
    data = model_to_dict(model)
    # exclude_defaults drops the version; always record it
    data = {"format_version": SNAPSHOT_FORMAT_VERSION, **data}
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in _YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=False))
    else:
        path.write_text(json.dumps(data, indent=2))


# ============================================================================
# Source 2: JDiff XML API files
# ============================================================================


def model_from_jdiff_xml(source: str | Path, name: str | None = None) -> APIModel:
    """Parse a JDiff XML API file (or XML text) into a public-surface model.

    Structure:
    <api name="mylib 1.2">
      <package name="com.example">
        <class name="Widget" extends="java.lang.Object" abstract="false"
               static="false" final="false" visibility="public"
               deprecated="not deprecated">
          <implements name="java.io.Serializable"/>
          <constructor name="Widget" type="int, String" .../>
          <method name="resize" return="void" abstract="false" native="false"
                  synchronized="false" ...>
            <param name="n" type="int"/>
            <exception name="IOException" type="java.io.IOException"/>
            <doc>Resizes.</doc>
          </method>
          <field name="MAX" type="int" transient="false" volatile="false"
                 value="10" .../>
        </class>
        <doc>Package docs</doc>
      </package>
    </api>
    """
    label = str(source) if isinstance(source, Path) else "<string>"
    try:
        if isinstance(source, Path):
            root = ET.parse(source).getroot()
        else:
            root = ET.fromstring(source)
    except ET.ParseError as e:
        raise MalformedModelError.parse_error(label, str(e)) from e

    if _local(root.tag) != "api":
        raise MalformedModelError.parse_error(label, f"root element is <{root.tag}>, not <api>")

    api_name = name or root.get("name")
    if not api_name:
        raise MalformedModelError.parse_error(label, "no API identifier found")

    packages = tuple(_xml_package(el) for el in root if _local(el.tag) == "package")
    return public_surface(APIModel(name=api_name, packages=packages))


def _local(tag: str) -> str:
    """Strip an XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def _flag(el: ET.Element, attr: str) -> bool:
    return el.get(attr, "false") == "true"


def _xml_doc(el: ET.Element) -> str | None:
    """Inner markup of the element's <doc> child, if any."""
    for child in el:
        if _local(child.tag) == "doc":
            text = child.text or ""
            text += "".join(ET.tostring(sub, encoding="unicode") for sub in child)
            return text
    return None


def _xml_modifiers(el: ET.Element) -> Modifiers:
    deprecated_attr = el.get("deprecated", "not deprecated")
    deprecated = deprecated_attr != "not deprecated"
    text = None
    if deprecated and deprecated_attr != "deprecated, no comment":
        text = deprecated_attr
    return Modifiers(
        visibility=el.get("visibility", "public"),
        is_static=_flag(el, "static"),
        is_final=_flag(el, "final"),
        is_abstract=_flag(el, "abstract"),
        is_native=_flag(el, "native"),
        is_synchronized=_flag(el, "synchronized"),
        is_transient=_flag(el, "transient"),
        is_volatile=_flag(el, "volatile"),
        deprecated=deprecated,
        deprecation_text=text,
    )


def _xml_exceptions(el: ET.Element) -> tuple[str, ...]:
    return tuple(
        child.get("type") or child.get("name", "")
        for child in el
        if _local(child.tag) == "exception"
    )


def _xml_member(el: ET.Element, type_name: str) -> MemberNode | None:
    tag = _local(el.tag)
    if tag == "constructor":
        params = tuple(
            Param(name=f"arg{i}", type=t) for i, t in enumerate(split_params(el.get("type", "")))
        )
        return MemberNode(
            kind=MemberKind.CONSTRUCTOR,
            name=el.get("name") or type_name.rsplit(".", 1)[-1],
            params=params,
            modifiers=_xml_modifiers(el),
            exceptions=_xml_exceptions(el),
            doc=_xml_doc(el),
        )
    if tag == "method":
        params = tuple(
            Param(name=p.get("name", ""), type=p.get("type", ""))
            for p in el
            if _local(p.tag) == "param"
        )
        return MemberNode(
            kind=MemberKind.METHOD,
            name=el.get("name", ""),
            params=params,
            return_type=el.get("return") or "void",
            modifiers=_xml_modifiers(el),
            exceptions=_xml_exceptions(el),
            doc=_xml_doc(el),
        )
    if tag == "field":
        return MemberNode(
            kind=MemberKind.FIELD,
            name=el.get("name", ""),
            field_type=el.get("type") or "void",
            value=el.get("value"),
            modifiers=_xml_modifiers(el),
            doc=_xml_doc(el),
        )
    return None


def _xml_type(el: ET.Element) -> TypeNode:
    name = el.get("name", "")
    members = []
    interfaces = []
    for child in el:
        if _local(child.tag) == "implements":
            interfaces.append(child.get("name", ""))
            continue
        member = _xml_member(child, name)
        if member is not None:
            members.append(member)
    return TypeNode(
        name=name,
        kind=TypeKind.INTERFACE if _local(el.tag) == "interface" else TypeKind.CLASS,
        modifiers=_xml_modifiers(el),
        superclass=el.get("extends"),
        interfaces=tuple(interfaces),
        members=tuple(members),
        doc=_xml_doc(el),
    )


def _xml_package(el: ET.Element) -> PackageNode:
    types = tuple(_xml_type(c) for c in el if _local(c.tag) in ("class", "interface"))
    return PackageNode(name=el.get("name", ""), types=types, doc=_xml_doc(el))


# ============================================================================
# Dispatch
# ============================================================================


def load_snapshot(path: Path, name: str | None = None) -> APIModel:
    """Load a snapshot file, choosing the format by suffix.

    Args:
        path: .json, .yaml/.yml or JDiff .xml file
        name: Display label (e.g. "mylib 1.2") overriding the file's own name

    Raises:
        MalformedModelError: Missing file, unknown suffix, unparseable
            content or invalid model.
    """
    if not path.is_file():
        raise MalformedModelError.snapshot_not_found(str(path))

    suffix = path.suffix.lower()
    if suffix in _XML_SUFFIXES:
        model = model_from_jdiff_xml(path, name)
    elif suffix in _JSON_SUFFIXES or suffix in _YAML_SUFFIXES:
        data = _read_document(path, suffix)
        model = model_from_dict(data, name)
    else:
        raise MalformedModelError.parse_error(str(path), f"unsupported snapshot format '{suffix}'")

    log.info("snapshot_loaded", path=str(path), api=model.name, declarations=len(model))
    return model


def _read_document(path: Path, suffix: str) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedModelError.parse_error(str(path), str(e)) from e
    try:
        data = json.loads(text) if suffix in _JSON_SUFFIXES else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedModelError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise MalformedModelError.parse_error(str(path), "top-level value must be a mapping")
    return data
