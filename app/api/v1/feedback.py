import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user, get_feedback_repository
from app.core.exceptions import NotFoundError
from app.core.rbac import require_admin
from app.models.feedback import Feedback
from app.models.user import User
from app.repositories.feedback_repository import FeedbackRepository
from app.schemas.feedback import FeedbackCreate, FeedbackRead, FeedbackStatusUpdate

router = APIRouter(tags=["feedback"])
logger = logging.getLogger(__name__)


@router.post("", response_model=FeedbackRead, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=FeedbackRead, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def submit_feedback(
        feedback_data: FeedbackCreate,
        current_user: User = Depends(get_current_user),
        repo: FeedbackRepository = Depends(get_feedback_repository),
):
    feedback = await repo.create(Feedback(
        user_id=current_user.id,
        content=feedback_data.content,
        type=feedback_data.type,
    ))
    logger.info("User %s submitted %s feedback %s", current_user.id, feedback.type.value, feedback.id)
    return feedback


@router.get("", response_model=List[FeedbackRead])
@router.get("/", response_model=List[FeedbackRead], include_in_schema=False)
async def list_my_feedback(
        current_user: User = Depends(get_current_user),
        repo: FeedbackRepository = Depends(get_feedback_repository),
):
    """Feedback sent by the current user, newest first"""
    return await repo.list_for_user(current_user.id)


@router.get("/all", response_model=List[FeedbackRead])
async def list_all_feedback(
        admin: User = Depends(require_admin),
        repo: FeedbackRepository = Depends(get_feedback_repository),
):
    """Feedback from every user (admin only)"""
    return await repo.list_all()


@router.patch("/{feedback_id}", response_model=FeedbackRead)
async def update_feedback_status(
        feedback_id: int,
        update: FeedbackStatusUpdate,
        admin: User = Depends(require_admin),
        repo: FeedbackRepository = Depends(get_feedback_repository),
):
    """Move feedback through pending/reviewed/implemented/declined (admin only)"""
    feedback = await repo.get(feedback_id)
    if feedback is None:
        raise NotFoundError("Feedback not found")
    return await repo.update_status(feedback, update.status)


@router.delete("/{feedback_id}")
async def delete_feedback(
        feedback_id: int,
        current_user: User = Depends(get_current_user),
        repo: FeedbackRepository = Depends(get_feedback_repository),
):
    """Users can delete only their own feedback"""
    feedback = await repo.get_owned(current_user.id, feedback_id)
    if feedback is None:
        raise NotFoundError("Feedback not found")
    await repo.delete(feedback)
    return {"message": "Feedback deleted successfully"}
