from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_inventory.models import User


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def insert_user(db: AsyncSession, *, email: str, password_hash: str, role: str) -> User:
    user = User(email=email, password_hash=password_hash, role=role)
    db.add(user)
    await db.flush()
    return user
