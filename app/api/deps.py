"""
Database client dependencies for route handlers.

Routes build repositories from these so tests can swap the client.
"""

from fastapi import Depends
from supabase import Client

from app.api.middleware.auth import AuthenticatedUser, get_current_user, require_admin
from app.db.client import get_service_client, get_supabase_client, get_supabase_client_with_token


def get_db() -> Client:
    """Public (anon key) client for data every visitor may read."""
    return get_supabase_client()


def get_user_db(auth: AuthenticatedUser = Depends(get_current_user)) -> Client:
    """Client scoped to the caller, so RLS applies."""
    return get_supabase_client_with_token(auth.access_token)


def get_admin_db(admin: AuthenticatedUser = Depends(require_admin)) -> Client:
    """Service-role client, only after the caller passed the admin check."""
    return get_service_client()
