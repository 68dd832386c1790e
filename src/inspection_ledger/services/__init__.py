"""Workflow services over the document store."""

from inspection_ledger.services.releases import ReleaseWorkflow
from inspection_ledger.services.versioning import VersionStore

__all__ = ["ReleaseWorkflow", "VersionStore"]
