"""Identity of the caller.

HTTP requests are authenticated by fastapi-keycloak-middleware before they
reach a router. WebSocket upgrades bypass that middleware, so socket tokens
are verified here against the realm's signing keys. Either way the rest of
the service only sees the ``sub`` claim as the user id.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog
from fastapi import Request
from fastapi_keycloak_middleware import KeycloakConfiguration, get_user
from jwcrypto import jwt
from jwcrypto.jwk import JWKSet

from .config import AuthSettings, get_auth_settings
from .exceptions import AuthenticationError

logger = structlog.get_logger()


async def user_mapper(userinfo: dict[str, Any]) -> str:
    """Map verified claims to the user id stored on the request."""
    return str(userinfo.get("sub", ""))


def get_keycloak_config() -> KeycloakConfiguration:
    """Middleware configuration for the configured realm."""
    settings = get_auth_settings()
    return KeycloakConfiguration(
        url=settings.keycloak_url,
        realm=settings.keycloak_realm,
        client_id=settings.keycloak_client_id,
        client_secret=settings.keycloak_client_secret,
        claims=["sub"],
        reject_on_missing_claim=False,
    )


async def get_current_user_id(request: Request) -> str:
    """Dependency returning the authenticated user id.

    Raises:
        AuthenticationError: If the middleware attached no user
    """
    user_id = await get_user(request)
    if user_id is None:
        raise AuthenticationError()
    return str(user_id)


def _certs_url(settings: AuthSettings) -> str:
    return (
        f"{settings.keycloak_url}/realms/{settings.keycloak_realm}"
        "/protocol/openid-connect/certs"
    )


async def _fetch_signing_keys(settings: AuthSettings) -> JWKSet:
    async with httpx.AsyncClient() as client:
        response = await client.get(_certs_url(settings))
    return JWKSet.from_json(response.text)


def _subject(token: str, keys: JWKSet) -> str:
    claims: Any = jwt.JWT(key=keys, jwt=token).claims
    if isinstance(claims, str):
        claims = json.loads(claims)
    subject = str(claims.get("sub") or "")
    if not subject:
        raise ValueError("token has no subject")
    return subject


async def authenticate_websocket(token: str) -> str:
    """Verify a socket token and return its subject.

    The token signature is checked against the realm's published keys.

    Args:
        token: Bearer token sent by the client

    Returns:
        User id (``sub`` claim)

    Raises:
        AuthenticationError: If the keys cannot be fetched or the token is
            invalid or has no subject
    """
    try:
        keys = await _fetch_signing_keys(get_auth_settings())
        return _subject(token, keys)
    except Exception as e:
        logger.warning("ws_token_rejected", error=str(e))
        raise AuthenticationError("Invalid token") from e
