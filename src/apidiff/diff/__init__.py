"""API diff package: matcher, differ and statistics.

Public API re-exports for the diff subpackage.
"""

from apidiff.diff.differ import Differ
from apidiff.diff.matcher import (
    CorrespondenceTable,
    Match,
    MatchStatus,
    match_models,
)
from apidiff.diff.models import (
    ChangeKind,
    ChangeRecord,
    DiffResult,
    ReportOptions,
    Severity,
    SubDifference,
)
from apidiff.diff.ops import compare_apis, compare_snapshots
from apidiff.diff.stats import (
    KindCounts,
    ScopeStatistics,
    StatisticsAccumulator,
    StatisticsSummary,
)

__all__ = [
    "ChangeKind",
    "ChangeRecord",
    "CorrespondenceTable",
    "DiffResult",
    "Differ",
    "KindCounts",
    "Match",
    "MatchStatus",
    "ReportOptions",
    "Severity",
    "ScopeStatistics",
    "StatisticsAccumulator",
    "StatisticsSummary",
    "SubDifference",
    "compare_apis",
    "compare_snapshots",
    "match_models",
]
