from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.feedback import Feedback, FeedbackStatusEnum


class FeedbackRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, feedback: Feedback) -> Feedback:
        self.db.add(feedback)
        await self.db.commit()
        await self.db.refresh(feedback)
        return feedback

    async def list_for_user(self, user_id: int) -> List[Feedback]:
        result = await self.db.execute(
            select(Feedback)
            .where(Feedback.user_id == user_id)
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        )
        return list(result.scalars().all())

    async def list_all(self) -> List[Feedback]:
        result = await self.db.execute(
            select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc())
        )
        return list(result.scalars().all())

    async def get(self, feedback_id: int) -> Optional[Feedback]:
        result = await self.db.execute(select(Feedback).where(Feedback.id == feedback_id))
        return result.scalar_one_or_none()

    async def get_owned(self, user_id: int, feedback_id: int) -> Optional[Feedback]:
        result = await self.db.execute(
            select(Feedback).where(Feedback.id == feedback_id, Feedback.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def update_status(self, feedback: Feedback, status: FeedbackStatusEnum) -> Feedback:
        feedback.status = status
        await self.db.commit()
        await self.db.refresh(feedback)
        return feedback

    async def delete(self, feedback: Feedback) -> None:
        await self.db.delete(feedback)
        await self.db.commit()
