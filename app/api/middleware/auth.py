"""
JWT Authentication middleware for Supabase Auth.

Validates JWTs issued by Supabase and exposes the caller to route
handlers. Admin-only routes additionally check ``profiles.user_type``.
"""

from dataclasses import dataclass

import jwt
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import get_settings
from app.db.repository import ProfileRepository

logger = structlog.get_logger()

security = HTTPBearer()


@dataclass
class AuthenticatedUser:
    user_id: str
    access_token: str
    role: str | None = None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """
    Validate the Supabase JWT from the Authorization header.

    Raises 401 if token is missing or invalid.
    """
    return _validate_token(credentials.credentials)


async def require_admin(
    auth: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Allow the request only for users whose profile is of type admin."""
    profiles = ProfileRepository(access_token=auth.access_token)
    if not profiles.is_admin(auth.user_id):
        logger.warning("Admin route denied", user_id=auth.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return auth


def _validate_token(token: str) -> AuthenticatedUser:
    """
    Validate a Supabase JWT and extract the user.

    Raises:
        HTTPException(401): If token is invalid, expired, or missing required claims
    """
    jwt_secret = get_settings().supabase_jwt_secret

    if not jwt_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server auth configuration error",
        )

    try:
        # Supabase uses HS256 algorithm and 'authenticated' audience
        payload = jwt.decode(
            token,
            jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidAudienceError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token audience",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user identifier",
        )

    return AuthenticatedUser(user_id=user_id, access_token=token, role=payload.get("role"))
