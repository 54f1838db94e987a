from datetime import datetime, timedelta, UTC

from jose import JWTError, jwt
from app.config import settings
from app.core.exceptions import UnauthorizedException

ALGORITHM = "HS256"
TENANT_CONTEXT_TOKEN_TYPE = "tenant_context"


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (principal id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        # Extract principal id from 'sub' claim
        principal_id: str = payload.get("sub")
        if principal_id is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def decode_access_token(token: str) -> dict:
    """
    Decode a bearer access token from the identity provider.

    Tenant context tokens are signed with the same key but only grant a
    tenant binding, never authentication.

    Raises:
        UnauthorizedException: If token invalid or is a tenant context token
    """
    payload = decode_jwt(token)
    if payload.get("typ") == TENANT_CONTEXT_TOKEN_TYPE:
        raise UnauthorizedException("Invalid token: not an access token")
    return payload


def create_tenant_context_token(principal_id: str, tenant_id: int) -> str:
    """
    Issue the short-lived token a super-admin carries after switching tenant.

    The token is bound to the principal so it cannot be replayed by anyone else.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": principal_id,
        "tenant_id": tenant_id,
        "typ": TENANT_CONTEXT_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.TENANT_CONTEXT_TTL_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def read_tenant_context_token(token: str, principal_id: str) -> int | None:
    """
    Return the tenant id stored in a context token, or None if the token is
    invalid, expired, of another type, or issued to a different principal.
    """
    try:
        payload = decode_jwt(token)
    except UnauthorizedException:
        return None

    if payload.get("typ") != TENANT_CONTEXT_TOKEN_TYPE or payload["sub"] != principal_id:
        return None

    tenant_id = payload.get("tenant_id")
    return tenant_id if isinstance(tenant_id, int) else None
