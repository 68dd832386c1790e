"""HTTP routers exposing the versioning and release workflows."""

from inspection_ledger.routes import releases, status, versions

__all__ = ["releases", "status", "versions"]
