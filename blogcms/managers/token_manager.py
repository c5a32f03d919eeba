"""JWT access tokens for dashboard users."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from blogcms.configs import settings
from blogcms.schemas.auth import TokenData


def create_access_token(
    user_id: UUID,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        user_id: Subject of the token.
        role: Role at issue time; permissions are re-read from the user.
        expires_delta: Lifetime, defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``.

    Returns:
        str: Encoded JWT.
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": str(user_id),
        "role": role,
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "access",
    }
    return jwt.encode(claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenData | None:
    """Validate a token; returns None when it is invalid, expired or not an access token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if not subject or payload.get("type") != "access":
        return None
    try:
        user_id = UUID(subject)
    except ValueError:
        return None
    return TokenData(user_id=user_id, role=payload.get("role", "user"), jti=payload.get("jti"))
