"""Session-based access to the authenticated manager."""

from inspection_ledger.auth.middleware import (
    current_user_id,
    get_user,
    require_authenticated_user,
)

__all__ = ["current_user_id", "get_user", "require_authenticated_user"]
