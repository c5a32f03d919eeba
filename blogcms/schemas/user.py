"""User, registration and login schemas."""

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, StringConstraints, field_validator

from blogcms.auth.permissions import Role
from blogcms.configs.settings import MIN_PASSWORD_LENGTH


def normalize_email(value: Any) -> Any:  # noqa: ANN401
    """Lowercase and trim an email before validation."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserCreate(BaseModel):
    """Registration payload."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    email: EmailStr = Field(..., examples=["jane@example.com"])
    password: SecretStr = Field(..., description=f"At least {MIN_PASSWORD_LENGTH} characters")

    _normalize_email = field_validator("email", mode="before")(normalize_email)

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value()) < MIN_PASSWORD_LENGTH:
            mssg = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            raise ValueError(mssg)
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: SecretStr

    _normalize_email = field_validator("email", mode="before")(normalize_email)


class RoleAssignment(BaseModel):
    role: Role


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str


class RegistrationResponse(BaseModel):
    message: str = "User registered successfully"
    user: UserResponse
