"""Registration, login and role management."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from blogcms.auth.permissions import Role
from blogcms.errors import DuplicateEntryError, InputValidationError, InvalidCredentialsError
from blogcms.managers.password_manager import hash_password, verify_password
from blogcms.managers.token_manager import create_access_token
from blogcms.monitoring import get_logger
from blogcms.repositories import UserRepository
from blogcms.schemas import RegistrationResponse, Token, UserCreate, UserLogin, UserResponse
from blogcms.services.base import BaseService, validate_input

logger = get_logger(__name__)


class UserService(BaseService):
    async def register(self, data: UserCreate | Mapping[str, Any]) -> RegistrationResponse:
        """
        Register an account; the very first account becomes ``admin``.

        Raises:
            InputValidationError: Missing fields or a short password.
            DuplicateEntryError: The email is already registered.
        """
        payload = validate_input(UserCreate, data)
        password_hash = await hash_password(payload.password.get_secret_value())

        async with self.db.transaction() as session:
            repo = UserRepository(session)
            if await repo.get_by_email(payload.email) is not None:
                mssg = "A user with this email already exists"
                raise DuplicateEntryError(mssg)
            role = Role.ADMIN if await repo.count() == 0 else Role.USER
            user = await repo.create(
                {
                    "name": payload.name,
                    "email": payload.email,
                    "password_hash": password_hash,
                    "role": role.value,
                },
            )
            created = UserResponse.model_validate(user)

        logger.info("user registered", user_id=str(created.id), role=created.role)
        return RegistrationResponse(user=created)

    async def authenticate(self, data: UserLogin | Mapping[str, Any]) -> Token:
        """
        Check credentials and issue an access token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
        """
        payload = validate_input(UserLogin, data)
        async with self.db.session() as session:
            user = await UserRepository(session).get_by_email(payload.email)
        if user is None or not await verify_password(
            payload.password.get_secret_value(),
            user.password_hash,
        ):
            raise InvalidCredentialsError
        return Token(access_token=create_access_token(user.id, user.role))

    async def get_user(self, user_id: UUID) -> UserResponse | None:
        async with self.db.session() as session:
            user = await UserRepository(session).get_by_id(user_id)
        return UserResponse.model_validate(user) if user else None

    async def list_users(self) -> list[UserResponse]:
        async with self.db.session() as session:
            users = await UserRepository(session).list_all()
        return [UserResponse.model_validate(user) for user in users]

    async def assign_role(self, user_id: UUID, role: Role | str) -> UserResponse:
        try:
            role = Role(role)
        except ValueError as e:
            mssg = f"Unknown role: {role}"
            raise InputValidationError(mssg) from e
        async with self.db.transaction() as session:
            repo = UserRepository(session)
            user = await repo.get_or_raise(user_id)
            updated = UserResponse.model_validate(await repo.update(user, {"role": role.value}))
        logger.info("role assigned", user_id=str(user_id), role=role.value)
        return updated

    async def ensure_admin(self, name: str, email: str, password: str) -> tuple[UserResponse, bool]:
        """
        Create an admin account, or promote and reset an existing one.

        Returns:
            The admin and whether it was newly created.
        """
        payload = validate_input(UserCreate, {"name": name, "email": email, "password": password})
        password_hash = await hash_password(payload.password.get_secret_value())
        async with self.db.transaction() as session:
            repo = UserRepository(session)
            user = await repo.get_by_email(payload.email)
            if user is None:
                user = await repo.create(
                    {
                        "name": payload.name,
                        "email": payload.email,
                        "password_hash": password_hash,
                        "role": Role.ADMIN.value,
                    },
                )
                created = True
            else:
                user = await repo.update(
                    user,
                    {"password_hash": password_hash, "role": Role.ADMIN.value},
                )
                created = False
            admin = UserResponse.model_validate(user)
        return admin, created
