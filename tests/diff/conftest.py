"""Test fixtures for the diff engine.

``old_api`` / ``new_api`` are two releases of a small widgets library that
between them exercise every change kind:

    com.added                 added package
    com.example               container changed
      Fresh                   added type
      Gone                    removed type
      Legacy                  unchanged
      Widget                  container changed
        <init>()              unchanged
        <init>(int)           added overload
        draw()                deprecated
        paint(Graphics)       removed
        resize(int)           changed: exception added (breaking)
        MAX                   changed: value 10 -> 20
    com.example.util          unchanged
    com.removed               removed package
"""

from __future__ import annotations

from typing import Any

import pytest

from apidiff.diff.models import DiffResult
from apidiff.diff.ops import compare_apis
from apidiff.model.models import APIModel
from apidiff.model.sources import model_from_dict


def _method(name: str, *param_types: str, returns: str = "void", **extra: Any) -> dict[str, Any]:
    return {
        "kind": "method",
        "name": name,
        "return_type": returns,
        "params": [{"name": f"a{i}", "type": t} for i, t in enumerate(param_types)],
        **extra,
    }


def _ctor(*param_types: str) -> dict[str, Any]:
    return {
        "kind": "constructor",
        "name": "Widget",
        "params": [{"name": f"a{i}", "type": t} for i, t in enumerate(param_types)],
    }


def _max_field(value: str) -> dict[str, Any]:
    return {
        "kind": "field",
        "name": "MAX",
        "type": "int",
        "value": value,
        "modifiers": {"static": True, "final": True},
    }


OLD_DOCUMENT: dict[str, Any] = {
    "name": "widgets 1.0",
    "packages": [
        {
            "name": "com.example",
            "doc": "Widgets.",
            "types": [
                {
                    "name": "Widget",
                    "superclass": "java.lang.Object",
                    "members": [
                        _ctor(),
                        _method("resize", "int", exceptions=["java.io.IOException"]),
                        _method("draw"),
                        _method("paint", "Graphics"),
                        _max_field("10"),
                    ],
                },
                {"name": "Legacy", "members": [_method("old")]},
                {"name": "Gone", "members": [_method("x")]},
            ],
        },
        {
            "name": "com.example.util",
            "types": [
                {"name": "Strings", "members": [_method("trim", "String", returns="String")]}
            ],
        },
        {"name": "com.removed", "types": [{"name": "Thing", "members": [_method("t")]}]},
    ],
}

NEW_DOCUMENT: dict[str, Any] = {
    "name": "widgets 2.0",
    "packages": [
        {"name": "com.added", "types": [{"name": "New", "members": [_method("n")]}]},
        {
            "name": "com.example",
            "doc": "Widgets.",
            "types": [
                {
                    "name": "Widget",
                    "superclass": "java.lang.Object",
                    "members": [
                        _ctor(),
                        _ctor("int"),
                        _method(
                            "resize",
                            "int",
                            exceptions=[
                                "java.io.IOException",
                                "java.util.concurrent.TimeoutException",
                            ],
                        ),
                        _method("draw", modifiers={"deprecated": True}),
                        _max_field("20"),
                    ],
                },
                {"name": "Legacy", "members": [_method("old")]},
                {"name": "Fresh", "members": [_method("f")]},
            ],
        },
        {
            "name": "com.example.util",
            "types": [
                {"name": "Strings", "members": [_method("trim", "String", returns="String")]}
            ],
        },
    ],
}


@pytest.fixture
def old_api() -> APIModel:
    return model_from_dict(OLD_DOCUMENT)


@pytest.fixture
def new_api() -> APIModel:
    return model_from_dict(NEW_DOCUMENT)


@pytest.fixture
def widgets_diff(old_api: APIModel, new_api: APIModel) -> DiffResult:
    """Sequential comparison of the two widget releases."""
    return compare_apis(old_api, new_api)
