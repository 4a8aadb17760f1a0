from app.models.user import User
from app.models.meal import Meal
from app.models.progress import DailyProgress, daily_progress_meals
from app.models.feedback import Feedback

__all__ = [
    "User",
    "Meal",
    "DailyProgress", "daily_progress_meals",
    "Feedback",
]
