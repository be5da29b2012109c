"""Bearer token dependency for routes that need the signed-in user"""
import logging

from fastapi import HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from concierge import config

settings = config.get_settings()
log = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry of a token issued by ``security.create_access_token``."""
    try:
        # iat is not checked: tablets at the front desk drift a few seconds
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM], options={"verify_iat": False})
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError as e:
        log.info(f"[Auth] Rejected token: {type(e).__name__}: {e}")
        raise _unauthorized("Invalid token")

    if claims.get("typ") != "access":
        raise _unauthorized("Invalid token type")
    return claims


async def get_current_user_id(request: Request) -> int:
    """User id from the ``Authorization: Bearer <jwt>`` header, or 401."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Missing bearer token")

    claims = decode_access_token(token.strip())
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token (no sub)")
