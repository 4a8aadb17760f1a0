import datetime as dt
from typing import List, Optional

from app.schemas.base import CamelModel
from app.schemas.meal import MealRead


class DailyProgressRead(CamelModel):
    # None for a day without meals, such aggregates are not persisted
    id: Optional[int] = None
    user_id: int
    date: dt.date
    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fat: float = 0
    meals: List[MealRead] = []
