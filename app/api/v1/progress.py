from typing import List

from fastapi import APIRouter, Depends, Query

from app.core.dates import parse_day
from app.core.dependencies import get_current_user, get_progress_service
from app.models.user import User
from app.schemas.progress import DailyProgressRead
from app.services.progress_service import ProgressService

router = APIRouter(tags=["progress"])


@router.get("", response_model=List[DailyProgressRead])
@router.get("/", response_model=List[DailyProgressRead], include_in_schema=False)
async def list_progress(
        current_user: User = Depends(get_current_user),
        service: ProgressService = Depends(get_progress_service),
):
    """Every stored day of the current user, newest first"""
    return await service.list(current_user.id)


@router.get("/date/{day}", response_model=DailyProgressRead)
async def get_progress_for_date(
        day: str,
        current_user: User = Depends(get_current_user),
        service: ProgressService = Depends(get_progress_service),
):
    """One day's totals; a day without meals comes back as zeros"""
    return await service.read(current_user.id, parse_day(day))


@router.get("/range", response_model=List[DailyProgressRead])
async def get_progress_range(
        start_date: str = Query(alias="startDate"),
        end_date: str = Query(alias="endDate"),
        current_user: User = Depends(get_current_user),
        service: ProgressService = Depends(get_progress_service),
):
    """Stored days between startDate and endDate inclusive, oldest first"""
    start = parse_day(start_date, "startDate")
    end = parse_day(end_date, "endDate")
    return await service.read_range(current_user.id, start, end)


@router.post("/date/{day}/recompute", response_model=DailyProgressRead)
async def recompute_progress_for_date(
        day: str,
        current_user: User = Depends(get_current_user),
        service: ProgressService = Depends(get_progress_service),
):
    """Rebuild one day's totals from the logged meals"""
    return await service.resync(current_user.id, parse_day(day))
