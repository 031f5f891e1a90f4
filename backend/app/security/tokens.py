"""
BileMo API — JWT Issuing and Decoding
=======================================

What:  Signs and verifies the bearer tokens returned by /api/login_check.
How:   python-jose, HMAC algorithm and secret from settings.

Claims:
    sub        account email
    principal  "customer" or "admin" (which table to resolve `sub` in)
    roles      effective roles at issue time (informational; the roles used
               for authorization are re-read from the database)
    iat / exp  issue and expiry timestamps
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.exceptions import UnauthorizedError


def create_access_token(email: str, principal_kind: str, roles: Iterable[str]) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": email,
        "principal": principal_kind,
        "roles": list(roles),
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Returns the verified claims.

    Raises:
        UnauthorizedError: expired token, bad signature, or missing claims.
    """
    try:
        claims = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        raise UnauthorizedError(message="Expired JWT Token")
    except JWTError:
        raise UnauthorizedError(message="Invalid JWT Token")

    if not claims.get("sub") or claims.get("principal") not in {"customer", "admin"}:
        raise UnauthorizedError(message="Invalid JWT Token")
    return claims
