"""Azure AD bearer-token validation.

Signing keys come from the tenant's JWKS document, cached per tenant for a day.
When a refresh fails, a stale cached copy is still used.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any

from fastapi import HTTPException, status
from jose import jwk, jwt
from jose.constants import Algorithms
from jose.exceptions import ExpiredSignatureError, JWSSignatureError, JWTClaimsError, JWTError

from evalboard.models.auth import UserInfo

logger = logging.getLogger(__name__)

_JWKS_TTL_SECONDS = 24 * 60 * 60

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_aud": True,
    "verify_iss": True,
    "verify_exp": True,
    "require": ["exp", "iss", "aud"],
}


class JwksCache:
    def __init__(self, ttl_seconds: int = _JWKS_TTL_SECONDS) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    def clear(self) -> None:
        self._entries.clear()

    def get(self, tenant_id: str) -> dict[str, Any]:
        now = time.time()
        cached = self._entries.get(tenant_id)
        if cached and now - cached[0] < self.ttl_seconds:
            return cached[1]

        jwks_uri = f"https://login.microsoftonline.com/{tenant_id}/discovery/v2.0/keys"
        logger.info("Fetching JWKS from %s", jwks_uri)

        try:
            req = urllib.request.Request(jwks_uri)  # noqa: S310
            with urllib.request.urlopen(req, timeout=15) as resp:  # noqa: S310
                jwks = json.loads(resp.read().decode())
        except (urllib.error.URLError, urllib.error.HTTPError) as e:
            logger.error("Failed to fetch JWKS: %s", e)
            if cached:
                logger.warning("Using expired JWKS from cache for tenant %s", tenant_id)
                return cached[1]
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Could not fetch JWKS: {e}",
            ) from e

        self._entries[tenant_id] = (now, jwks)
        return jwks


jwks_cache = JwksCache()


def get_jwks(tenant_id: str) -> dict[str, Any]:
    return jwks_cache.get(tenant_id)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_signing_key(token: str, tenant_id: str) -> dict[str, str]:
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise _unauthorized(f"Invalid token header: {e}") from e

    kid = header.get("kid")
    if not kid:
        raise _unauthorized("Token has no 'kid' in header")

    for key in get_jwks(tenant_id).get("keys", []):
        if key.get("kid") == kid:
            return key

    raise _unauthorized(f"No matching signing key for kid: {kid}")


def validate_token(token: str, tenant_id: str, client_id: str) -> dict[str, Any]:
    """Verify signature, expiry, issuer and audience; return the token claims.

    Both v1 and v2 issuers and both audience spellings are accepted.
    """
    if not tenant_id or not client_id:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing Azure AD configuration",
        )

    signing_key = get_signing_key(token, tenant_id)
    algorithm = signing_key.get("alg", Algorithms.RS256)
    public_key = jwk.construct(signing_key, algorithm=algorithm)

    issuers = [
        f"https://login.microsoftonline.com/{tenant_id}/v2.0",
        f"https://sts.windows.net/{tenant_id}/",
    ]
    audiences = [client_id, f"api://{client_id}"]

    last_error: Exception | None = None
    for issuer in issuers:
        for audience in audiences:
            try:
                return jwt.decode(
                    token,
                    public_key,
                    algorithms=[algorithm],
                    audience=audience,
                    issuer=issuer,
                    options=_DECODE_OPTIONS,
                )
            except ExpiredSignatureError as e:
                raise _unauthorized("Token is expired") from e
            except JWSSignatureError as e:
                raise _unauthorized("Invalid token signature") from e
            except (JWTClaimsError, JWTError) as e:
                last_error = e

    message = str(last_error).lower() if isinstance(last_error, JWTClaimsError) else ""
    if "audience" in message:
        raise _unauthorized(f"Invalid token audience. Expected one of: {audiences}")
    if "issuer" in message:
        raise _unauthorized(f"Invalid token issuer. Expected one of: {issuers}")
    raise _unauthorized("Invalid authentication credentials")


def user_from_claims(claims: dict[str, Any]) -> UserInfo:
    return UserInfo(
        id=claims.get("oid") or claims.get("sub"),
        name=claims.get("name"),
        email=claims.get("preferred_username") or claims.get("email"),
    )
