"""
Bearer token handling.

The hosted auth provider signs access tokens with a shared HS256 secret. The
API only verifies them; create_access_token mints equivalent tokens for local
scripts and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from .config import get_settings
from .exceptions import AuthenticationError


def _decode_options(audience: Optional[str]) -> Dict[str, Any]:
    return {"verify_aud": audience is not None}


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a token carrying `data` as claims.

    `exp` defaults to jwt_expire_days from now; `aud` is added when an
    audience is configured and the caller did not set one.
    """
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else timedelta(days=settings.jwt_expire_days)

    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime}
    if settings.jwt_audience:
        claims.setdefault("aud", settings.jwt_audience)

    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a token.

    Raises:
        AuthenticationError: bad signature, expired, wrong audience, or no `sub`
    """
    settings = get_settings()

    try:
        claims = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=_decode_options(settings.jwt_audience),
        )
    except JWTError as e:
        raise AuthenticationError(
            message="Invalid or expired token",
            details={"error": str(e)},
        )

    if not claims.get("sub"):
        raise AuthenticationError(message="Token has no subject")
    return claims


def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """Return the token of a `Bearer <token>` header, else None."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token or " " in token.strip():
        return None
    return token.strip()
