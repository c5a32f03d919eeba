"""User repository."""

from sqlalchemy import select

from blogcms.models import UserDB
from blogcms.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    model = UserDB
    duplicate_detail = "A user with this email already exists"

    async def get_by_email(self, email: str) -> UserDB | None:
        return await self.get_by_field("email", email.strip().lower())

    async def list_all(self) -> list[UserDB]:
        result = await self.session.execute(select(UserDB).order_by(UserDB.created_at))
        return list(result.scalars().all())
