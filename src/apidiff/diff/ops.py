"""Comparison entry points.

Orchestrates the full pipeline: sources -> matcher -> differ -> result.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from apidiff.config.models import ApiDiffConfig
from apidiff.core.logging import run_context
from apidiff.diff.differ import Differ
from apidiff.diff.matcher import MatchStatus, match_models
from apidiff.diff.models import DiffResult, ReportOptions
from apidiff.model.inheritance import with_inherited_members
from apidiff.model.models import APIModel
from apidiff.model.sources import load_snapshot

log = structlog.get_logger(__name__)


def compare_apis(
    old: APIModel,
    new: APIModel,
    *,
    config: ApiDiffConfig | None = None,
    max_workers: int | None = None,
) -> DiffResult:
    """Compare two snapshots.

    Args:
        old: Snapshot of the earlier version
        new: Snapshot of the later version
        config: Comparison and report settings (defaults if None)
        max_workers: Override for ``config.comparison.max_workers``

    Returns:
        DiffResult covering every identifier of either snapshot.
    """
    config = config or ApiDiffConfig()
    workers = max_workers or config.comparison.max_workers
    with run_context():
        return _compare(old, new, config, workers)


def _compare(old: APIModel, new: APIModel, config: ApiDiffConfig, workers: int) -> DiffResult:
    if config.comparison.include_inherited:
        old = with_inherited_members(old)
        new = with_inherited_members(new)

    log.info("comparison_started", old=old.name, new=new.name, workers=workers)

    table = match_models(old, new)
    log.debug(
        "models_matched",
        identifiers=len(table),
        old_only=len(table.with_status(MatchStatus.OLD_ONLY)),
        new_only=len(table.with_status(MatchStatus.NEW_ONLY)),
    )

    differ = Differ(old, new, max_workers=workers)
    result = differ.diff(table, ReportOptions.from_config(config.report))

    log.info(
        "comparison_finished",
        summary=result.summary,
        breaking=result.breaking_summary,
        packages=len(result.packages),
    )
    return result


def compare_snapshots(
    old_path: Path,
    new_path: Path,
    *,
    old_label: str | None = None,
    new_label: str | None = None,
    config: ApiDiffConfig | None = None,
) -> DiffResult:
    """Load two snapshot files and compare them.

    The two loads are independent and run concurrently.

    Args:
        old_path: Snapshot file of the earlier version
        new_path: Snapshot file of the later version
        old_label: Display name of the old API (defaults to the file's own name)
        new_label: Display name of the new API (defaults to the file's own name)
        config: Comparison and report settings

    Raises:
        MalformedModelError: If either snapshot is missing or invalid.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="apidiff-loader") as executor:
        old_future = executor.submit(load_snapshot, old_path, old_label)
        new_future = executor.submit(load_snapshot, new_path, new_label)
        old = old_future.result()
        new = new_future.result()
    return compare_apis(old, new, config=config)
