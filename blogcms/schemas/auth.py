from uuid import UUID

from pydantic import BaseModel


class Token(BaseModel):
    """Token schema for JWT access tokens."""

    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Claims extracted from a validated access token."""

    user_id: UUID
    role: str
    jti: str | None = None
