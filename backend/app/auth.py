"""
Biodex Backend - Session Guard
===============================

What:  Resolves the signed-in user from the hosted auth service's access
       token and guards protected routes.
Why:   Sign-up, sign-in and token refresh live in the hosted auth service.
       This backend only needs to know *who* is asking, which the token's
       `sub` claim tells it.
How:   The token arrives in the auth cookie (browser pages) or in an
       `Authorization: Bearer` header (API clients). It is verified as an
       HS256 JWT with the project secret and the `authenticated` audience.
       Anything missing, expired or tampered with counts as "no session".

Usage:
    @router.get("/species")
    async def species_page(session: Session = Depends(require_session)): ...

    `require_session` is the entry-point precondition: it raises
    AuthenticationRequiredError before the route body (and any fetch) runs.
    The global handler turns that into a redirect to "/" for pages.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Request

from app.config import settings
from app.exceptions import AuthenticationRequiredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """The authenticated context for one request."""

    user_id: uuid.UUID
    email: Optional[str] = None


def _extract_token(request: Request) -> Optional[str]:
    """Bearer header wins over the cookie so API clients can act explicitly."""
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    token = request.cookies.get(settings.auth_cookie_name)
    return token or None


def decode_session(token: str) -> Optional[Session]:
    """
    Verify an access token and build the Session it describes.

    Returns None for any token that cannot be trusted: bad signature,
    expired, wrong audience, or a `sub` that is not a UUID.
    """
    if not settings.auth_jwt_secret:
        logger.warning("AUTH_JWT_SECRET is not configured; treating request as signed out")
        return None

    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Access token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("Rejected access token: %s", str(e))
        return None

    try:
        user_id = uuid.UUID(str(claims["sub"]))
    except ValueError:
        logger.info("Access token subject is not a user id: %r", claims["sub"])
        return None

    return Session(user_id=user_id, email=claims.get("email"))


async def get_current_session(request: Request) -> Optional[Session]:
    """FastAPI dependency: the current session, or None when signed out."""
    token = _extract_token(request)
    if token is None:
        return None
    return decode_session(token)


async def require_session(
    session: Optional[Session] = Depends(get_current_session),
) -> Session:
    """FastAPI dependency for protected routes."""
    if session is None:
        raise AuthenticationRequiredError()
    return session
