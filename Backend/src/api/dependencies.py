"""Shared dependencies for API routes."""
import asyncio
import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from api.errors import AuthenticationError
from core.media import AuthenticatedUser

logger = logging.getLogger(__name__)


def verify_bearer_token(token: str, project_id: str) -> dict:
    """Verify a Firebase ID token and return its claims."""
    import google_auth_httplib2
    import httplib2
    from google.oauth2 import id_token

    request = google_auth_httplib2.Request(httplib2.Http(timeout=10))
    try:
        return id_token.verify_firebase_token(token, request, audience=project_id)
    except ValueError as exc:
        raise AuthenticationError("Invalid or expired token") from exc


def user_from_claims(claims: Optional[dict]) -> AuthenticatedUser:
    if not claims or not claims.get("email"):
        raise AuthenticationError("Token does not carry an email identity")
    return AuthenticatedUser(
        uid=str(claims.get("user_id") or claims.get("sub") or ""),
        email=claims["email"],
        name=claims.get("name", ""),
    )


async def get_current_user(
    authorization: Optional[str] = Header(None, description="Bearer <Firebase ID token>"),
) -> AuthenticatedUser:
    """
    Resolve the bearer credential into the calling user's identity.

    Raises:
        HTTPException: 401 when the header is missing or the token is invalid
    """
    import config

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing bearer token")

    try:
        claims = await asyncio.to_thread(verify_bearer_token, token.strip(), config.FIREBASE_PROJECT_ID)
        return user_from_claims(claims)
    except AuthenticationError as exc:
        logger.warning("Authentication failed: %s", exc.message)
        raise HTTPException(exc.status_code, exc.message)
