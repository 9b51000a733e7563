"""Tests for the comparison entry points."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog
from structlog.testing import LogCapture

from apidiff.config.models import ApiDiffConfig, ComparisonConfig, ReportConfig
from apidiff.core.errors import ErrorCode, MalformedModelError
from apidiff.core.logging import _add_run_id, get_run_id, run_context
from apidiff.diff.models import ChangeKind
from apidiff.diff.ops import compare_apis, compare_snapshots
from apidiff.model.identifiers import Identifier
from apidiff.model.models import APIModel, MemberKind, MemberNode, PackageNode, Param, TypeNode
from apidiff.model.sources import write_snapshot


def _hierarchy(base_members: tuple[MemberNode, ...]) -> APIModel:
    return APIModel(
        "lib",
        packages=(
            PackageNode(
                "p",
                types=(
                    TypeNode("Base", members=base_members),
                    TypeNode("Child", superclass="p.Base"),
                ),
            ),
        ),
    )


def _run(returns: str = "void") -> MemberNode:
    return MemberNode(MemberKind.METHOD, "run", params=(Param("n", "int"),), return_type=returns)


@pytest.fixture
def log_entries() -> Iterator[list[dict[str, Any]]]:
    """Capture structlog events with the run ID processor in front."""
    structlog.reset_defaults()
    capture = LogCapture()
    structlog.configure(processors=[_add_run_id, capture])
    yield capture.entries
    structlog.reset_defaults()


class TestCompareApis:
    """In-memory comparison."""

    def test_run_id_cleared_after_comparison(self, old_api: APIModel, new_api: APIModel) -> None:
        compare_apis(old_api, new_api)
        assert get_run_id() is None

    def test_outer_run_id_restored(self, old_api: APIModel, new_api: APIModel) -> None:
        with run_context("outer"):
            compare_apis(old_api, new_api)
            assert get_run_id() == "outer"

    @pytest.mark.parametrize("workers", [1, 4])
    def test_every_event_carries_one_run_id(
        self,
        old_api: APIModel,
        new_api: APIModel,
        log_entries: list[dict[str, Any]],
        workers: int,
    ) -> None:
        compare_apis(old_api, new_api, max_workers=workers)

        events = [entry["event"] for entry in log_entries]
        assert "package_diffed" in events
        assert all("run_id" in entry for entry in log_entries), events
        assert len({entry["run_id"] for entry in log_entries}) == 1

    def test_report_config_carried_on_result(self, old_api: APIModel, new_api: APIModel) -> None:
        config = ApiDiffConfig(report=ReportConfig(incompatible_only=True))
        result = compare_apis(old_api, new_api, config=config)
        assert result.options.incompatible_only

    def test_inherited_members_compared_when_enabled(self) -> None:
        old, new = _hierarchy((_run(),)), _hierarchy((_run("int"),))
        child_run = Identifier("p", "Child", "run(int)")

        plain = compare_apis(old, new)
        expanded = compare_apis(
            old, new, config=ApiDiffConfig(comparison=ComparisonConfig(include_inherited=True))
        )

        assert plain.find(child_run) is None
        record = expanded.find(child_run)
        assert record is not None
        assert record.kind is ChangeKind.CHANGED
        assert record.difference("return_type") is not None

    def test_max_workers_override(self, old_api: APIModel, new_api: APIModel) -> None:
        sequential = compare_apis(old_api, new_api)
        parallel = compare_apis(old_api, new_api, max_workers=4)
        assert parallel.packages == sequential.packages


class TestCompareSnapshots:
    """File-based comparison."""

    def test_compares_written_snapshots(
        self, tmp_path: Path, old_api: APIModel, new_api: APIModel
    ) -> None:
        old_path, new_path = tmp_path / "old.json", tmp_path / "new.yaml"
        write_snapshot(old_api, old_path)
        write_snapshot(new_api, new_path)

        result = compare_snapshots(old_path, new_path, old_label="v1", new_label="v2")

        assert (result.old_name, result.new_name) == ("v1", "v2")
        assert result.summary == compare_apis(old_api, new_api).summary

    def test_missing_snapshot_raises(self, tmp_path: Path, old_api: APIModel) -> None:
        old_path = tmp_path / "old.json"
        write_snapshot(old_api, old_path)

        with pytest.raises(MalformedModelError) as exc_info:
            compare_snapshots(old_path, tmp_path / "missing.json")
        assert exc_info.value.code is ErrorCode.SNAPSHOT_NOT_FOUND
