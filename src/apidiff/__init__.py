"""apidiff - structural differences between two snapshots of an API surface."""

from apidiff.diff import ChangeKind, ChangeRecord, DiffResult, compare_apis, compare_snapshots
from apidiff.model import APIModel, Identifier, load_snapshot

__version__ = "0.1.0"

__all__ = [
    "APIModel",
    "ChangeKind",
    "ChangeRecord",
    "DiffResult",
    "Identifier",
    "compare_apis",
    "compare_snapshots",
    "load_snapshot",
]
