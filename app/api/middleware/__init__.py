"""API middleware modules."""

from .auth import AuthenticatedUser, get_current_user, require_admin

__all__ = ["AuthenticatedUser", "get_current_user", "require_admin"]
