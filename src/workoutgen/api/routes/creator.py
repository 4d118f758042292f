"""Creator form state, health access and the create-workout trigger."""
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from workoutgen.api.dependencies import get_creator
from workoutgen.creator import WorkoutCreator
from workoutgen.generation.types import (
    ActivityType,
    LengthUnit,
    LocationType,
    SwimmingLocationType,
)

router = APIRouter()

# Creator fields that hold raw form text
_TEXT_FIELDS = {"lap_length", "workout_start_latitude", "workout_start_longitude"}


class CreatorStateResponse(BaseModel):
    state: str
    activity_type: ActivityType
    location_type: LocationType
    swimming_location_type: SwimmingLocationType
    lap_length: str
    lap_length_unit: LengthUnit
    workout_start_date: datetime
    workout_end_date: datetime
    workout_start_latitude: str
    workout_start_longitude: str
    available_activity_types: List[ActivityType]
    available_location_types: List[LocationType]


class HealthAccessResponse(BaseModel):
    is_health_data_available: bool
    has_health_access: bool
    need_to_ask_for_health_access: bool


class CreateWorkoutRequest(BaseModel):
    """Form overrides; omitted fields keep the creator's current values."""
    activity_type: Optional[ActivityType] = None
    location_type: Optional[LocationType] = None
    swimming_location_type: Optional[SwimmingLocationType] = None
    lap_length: Optional[float] = None
    lap_length_unit: Optional[LengthUnit] = None
    workout_start_date: Optional[datetime] = None
    workout_end_date: Optional[datetime] = None
    workout_start_latitude: Optional[float] = None
    workout_start_longitude: Optional[float] = None


class GenerationResultResponse(BaseModel):
    status: str
    workout_id: Optional[int]
    sample_count: int
    route_point_count: int
    errors: Dict[str, str]


def _health_access(creator: WorkoutCreator) -> HealthAccessResponse:
    return HealthAccessResponse(
        is_health_data_available=creator.is_health_data_available,
        has_health_access=creator.has_health_access,
        need_to_ask_for_health_access=creator.need_to_ask_for_health_access,
    )


@router.get("/", response_model=CreatorStateResponse)
def creator_state(creator: WorkoutCreator = Depends(get_creator)):
    """Current form values, including the randomized default window."""
    return CreatorStateResponse(
        state=creator.state.value,
        activity_type=creator.activity_type,
        location_type=creator.location_type,
        swimming_location_type=creator.swimming_location_type,
        lap_length=creator.lap_length,
        lap_length_unit=creator.lap_length_unit,
        workout_start_date=creator.workout_start_date,
        workout_end_date=creator.workout_end_date,
        workout_start_latitude=creator.workout_start_latitude,
        workout_start_longitude=creator.workout_start_longitude,
        available_activity_types=creator.available_activity_types,
        available_location_types=creator.available_location_types,
    )


@router.get("/health-access", response_model=HealthAccessResponse)
def health_access(creator: WorkoutCreator = Depends(get_creator)):
    creator.check_health_access()
    return _health_access(creator)


@router.post("/health-access", response_model=HealthAccessResponse)
async def request_health_access(creator: WorkoutCreator = Depends(get_creator)):
    """Ask the store for sharing access to every workout data type."""
    if not await creator.request_permission_to_health_data():
        raise HTTPException(status_code=502, detail="Authorization request failed")
    return _health_access(creator)


@router.post("/workouts", response_model=GenerationResultResponse)
async def create_workout(
    request: CreateWorkoutRequest,
    creator: WorkoutCreator = Depends(get_creator),
):
    """
    Apply the form overrides and create one workout.

    Runs to completion before responding. 409 if a workout is already being
    created, 403 without sharing access, 422 if the fields do not form a
    valid workout.
    """
    if creator.is_creating_workout:
        raise HTTPException(status_code=409, detail="A workout is already being created")
    if not creator.check_health_access():
        raise HTTPException(status_code=403, detail="No sharing access to the health store")

    overrides = {
        name: str(value) if name in _TEXT_FIELDS else value
        for name, value in request.model_dump(exclude_none=True).items()
    }
    previous = {name: getattr(creator, name) for name in overrides}
    for name, value in overrides.items():
        setattr(creator, name, value)

    # A rejected request leaves the form as it was
    try:
        creator.current_parameters()
    except ValueError as exc:
        for name, value in previous.items():
            setattr(creator, name, value)
        raise HTTPException(status_code=422, detail=str(exc))

    try:
        result = await creator.create_workout()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return GenerationResultResponse(
        status=result.status,
        workout_id=result.workout_id,
        sample_count=result.sample_count,
        route_point_count=result.route_point_count,
        errors=result.errors,
    )
