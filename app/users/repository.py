# app/users/repository.py

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.models import User


class UserRepository:
    """
    Data Access Layer for the User model.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Fetch a user by email address."""
        stmt = select(User).where(User.email_address == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
