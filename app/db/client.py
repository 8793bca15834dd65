"""
Supabase client configuration.

Three privilege levels are used across the project:
- anon / publishable key: what the browser app uses, subject to RLS
- service-role key: bypasses RLS, needed for DDL over RPC and bucket admin
- user access token: anon key plus the user's JWT, so auth.uid() resolves
"""

from supabase import Client, ClientOptions, create_client

from app.config import KeyRole, Settings, get_settings

_clients: dict[str, Client] = {}


class MissingCredentialsError(ValueError):
    """Raised when the Supabase URL or the key for a role is not configured."""

    def __init__(self, role: str, missing: list[str]):
        self.role = role
        self.missing = missing
        super().__init__(
            f"Missing Supabase environment variables for {role} client: "
            + ", ".join(missing)
        )


def _get_url_and_key(role: KeyRole, settings: Settings | None = None) -> tuple[str, str]:
    """Get Supabase URL and key for a role, raising if either is absent."""
    settings = settings or get_settings()
    missing = settings.missing_for(role)
    if missing:
        raise MissingCredentialsError(role, missing)
    return settings.supabase_url, settings.key_for(role)


def get_supabase_client(role: KeyRole = "anon") -> Client:
    """
    Get a cached Supabase client for the given role.

    Args:
        role: "anon" for the public key, "service" for the service-role key

    Raises:
        MissingCredentialsError: If the URL or the role's key is not set
    """
    if role not in _clients:
        url, key = _get_url_and_key(role)
        # Scripts never need a persisted session or token refresh
        options = ClientOptions(auto_refresh_token=False, persist_session=False)
        _clients[role] = create_client(url, key, options=options)
    return _clients[role]


def get_service_client() -> Client:
    """Client with the service-role key; bypasses RLS."""
    return get_supabase_client("service")


def get_supabase_client_with_token(access_token: str) -> Client:
    """
    Get a Supabase client authenticated with the user's access token.

    This client respects RLS policies because auth.uid() will return the user's ID.
    """
    url, key = _get_url_and_key("anon")
    options = ClientOptions(
        headers={"Authorization": f"Bearer {access_token}"},
        auto_refresh_token=False,
        persist_session=False,
    )
    return create_client(url, key, options=options)


def reset_clients() -> None:
    _clients.clear()

