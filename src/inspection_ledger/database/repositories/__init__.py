"""Repository modules for each logical collection."""

from inspection_ledger.database.repositories.inspections import InspectionRepository
from inspection_ledger.database.repositories.pull_history import PullHistoryRepository
from inspection_ledger.database.repositories.releases import ReleaseRepository
from inspection_ledger.database.repositories.snapshots import (
    CurrentSnapshotRepository,
    VersionArchiveRepository,
)

__all__ = [
    "CurrentSnapshotRepository",
    "InspectionRepository",
    "PullHistoryRepository",
    "ReleaseRepository",
    "VersionArchiveRepository",
]
