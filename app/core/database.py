import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import settings
from app.core.base import Base
from app.core.db import engine

# Models must be imported so their tables are registered on Base.metadata
from app.models.user import User
from app.models.meal import Meal
from app.models.progress import DailyProgress, daily_progress_meals
from app.models.feedback import Feedback

logger = logging.getLogger(__name__)


async def init_database(bind: AsyncEngine = engine):
    """Create tables (drop them first when RESET_DATABASE is set)."""
    async with bind.begin() as conn:
        if settings.RESET_DATABASE:
            logger.warning("RESET_DATABASE=true, dropping all tables")
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")
