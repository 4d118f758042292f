"""Generation status routes."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session, select

from workoutgen.db.engine import get_session
from workoutgen.models.generation import GenerationLog

router = APIRouter()


class GenerationStatusResponse(BaseModel):
    status: str
    started_at: Optional[datetime]
    finished_at: Optional[datetime]
    activity_type: Optional[str]
    workout_id: Optional[int]
    samples_written: Optional[int]
    route_points_written: Optional[int]
    error_message: Optional[str]


@router.get("/status", response_model=GenerationStatusResponse)
def generation_status(session: Session = Depends(get_session)):
    """Return the status of the most recent create-workout attempt."""
    log = session.exec(
        select(GenerationLog).order_by(GenerationLog.started_at.desc(), GenerationLog.id.desc())
    ).first()
    if not log:
        return GenerationStatusResponse(
            status="never_run",
            started_at=None,
            finished_at=None,
            activity_type=None,
            workout_id=None,
            samples_written=None,
            route_points_written=None,
            error_message=None,
        )
    return GenerationStatusResponse(
        status=log.status,
        started_at=log.started_at,
        finished_at=log.finished_at,
        activity_type=log.activity_type,
        workout_id=log.workout_id,
        samples_written=log.samples_written,
        route_points_written=log.route_points_written,
        error_message=log.error_message,
    )
