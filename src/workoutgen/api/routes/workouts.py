"""Stored workout query routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from workoutgen.db.engine import get_session
from workoutgen.models.workout import RouteLocation, Workout, WorkoutRoute, WorkoutSample

router = APIRouter()


@router.get("/", response_model=List[Workout])
def list_workouts(
    limit: int = 20,
    offset: int = 0,
    activity_type: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """List saved workouts, newest first, optionally for one activity type."""
    query = select(Workout)
    if activity_type:
        query = query.where(Workout.activity_type == activity_type)
    workouts = session.exec(
        query.order_by(Workout.start_time.desc()).offset(offset).limit(limit)
    ).all()
    return workouts


def _get_workout_or_404(workout_id: int, session: Session) -> Workout:
    workout = session.get(Workout, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.get("/{workout_id}", response_model=Workout)
def get_workout(workout_id: int, session: Session = Depends(get_session)):
    """Fetch a single workout by primary key."""
    return _get_workout_or_404(workout_id, session)


@router.get("/{workout_id}/samples", response_model=List[WorkoutSample])
def get_workout_samples(
    workout_id: int,
    kind: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """Samples of a workout in time order, optionally filtered by quantity kind."""
    _get_workout_or_404(workout_id, session)
    query = select(WorkoutSample).where(WorkoutSample.workout_id == workout_id)
    if kind:
        query = query.where(WorkoutSample.kind == kind)
    return session.exec(query.order_by(WorkoutSample.start_time, WorkoutSample.id)).all()


@router.get("/{workout_id}/route", response_model=List[RouteLocation])
def get_workout_route(workout_id: int, session: Session = Depends(get_session)):
    """Route points of a workout; empty for indoor and swimming workouts."""
    _get_workout_or_404(workout_id, session)
    route = session.exec(
        select(WorkoutRoute)
        .where(WorkoutRoute.workout_id == workout_id)
        .order_by(WorkoutRoute.created_at.desc())
    ).first()
    if not route:
        return []
    return session.exec(
        select(RouteLocation)
        .where(RouteLocation.route_id == route.id)
        .order_by(RouteLocation.point_index)
    ).all()
