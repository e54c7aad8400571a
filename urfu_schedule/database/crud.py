from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select

from urfu_schedule.database.engine import async_session
from urfu_schedule.database.models import User


async def get_user_group(chat_id: int) -> Optional[str]:
    async with async_session() as session:
        result = await session.execute(select(User).where(User.chat_id == chat_id))
        user = result.scalar_one_or_none()
        return user.group_id if user else None


async def save_user_group(chat_id: int, group_id: str) -> None:
    async with async_session() as session:
        result = await session.execute(select(User).where(User.chat_id == chat_id))
        user = result.scalar_one_or_none()

        if user:
            user.group_id = group_id
            user.updated_at = datetime.now(timezone.utc)
        else:
            session.add(User(chat_id=chat_id, group_id=group_id))

        await session.commit()
