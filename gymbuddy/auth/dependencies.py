"""
FastAPI dependency functions for authentication.

These functions verify the Supabase Auth bearer token and resolve it into a
stable user id. Uses Supabase's JWT Signing Keys (ES256, fetched via JWKS).
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from gymbuddy.config import Settings, get_settings

logger = logging.getLogger(__name__)

# JWKS clients keyed by URL; PyJWKClient caches keys and handles rotation
_jwks_clients: Dict[str, PyJWKClient] = {}


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        access_token: The full JWT access token (for creating authenticated Supabase clients)
        email: The 'email' claim, if the token carries one
    """
    user_id: str
    access_token: str
    email: Optional[str] = None


def get_jwks_client(settings: Settings) -> PyJWKClient:
    """
    Get or create the JWKS client for the configured Supabase project.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    jwks_url = settings.SUPABASE_JWKS_URL
    if not jwks_url:
        raise ValueError(
            "SUPABASE_URL is not configured. "
            "Cannot construct JWKS URL for JWT verification."
        )

    client = _jwks_clients.get(jwks_url)
    if client is None:
        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )
        _jwks_clients[jwks_url] = client

    return client


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized("unauthorized", "Invalid Authorization header format")

    return parts[1]


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify a Supabase access token and return its claims.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or unverifiable
    """
    try:
        jwks_client = get_jwks_client(settings)
        signing_key = jwks_client.get_signing_key_from_jwt(token)

        # Supabase issuer includes the /auth/v1 path
        issuer = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1"

        return decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=issuer,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except Exception as e:
        logger.error(f"Unexpected error during token verification: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")


async def get_authenticated_user(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthenticatedUser:
    """
    Verify the bearer token and return the authenticated user.

    The token is the only source of truth for user_id; ids sent in request
    bodies are never trusted for identity.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Usage:
        @router.get("/profile")
        async def get_profile(
            auth_user: AuthenticatedUser = Depends(get_authenticated_user)
        ):
            supabase_client = get_supabase_client(auth_user.access_token, settings)
    """
    token = _extract_bearer_token(authorization)
    payload = decode_access_token(token, settings)

    user_id = payload.get("sub")
    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    email = payload.get("email")

    logger.info(f"Token verified successfully for user_id={user_id}")

    return AuthenticatedUser(
        user_id=str(user_id),
        access_token=token,
        email=str(email) if email else None,
    )
