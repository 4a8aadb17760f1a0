from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.users import router as users_router
from app.api.v1.meals import router as meals_router
from app.api.v1.progress import router as progress_router
from app.api.v1.feedback import router as feedback_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(meals_router, prefix="/meals", tags=["meals"])
api_router.include_router(progress_router, prefix="/progress", tags=["progress"])
api_router.include_router(feedback_router, prefix="/feedback", tags=["feedback"])


@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "message": "API is running"}
