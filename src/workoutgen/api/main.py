"""
HTTP API for the workout generator.

    uvicorn workoutgen.api.main:app --port 8000

Routers:
    /creator      form state, health access, create-workout trigger
    /workouts     saved workouts with their samples and routes
    /generations  outcome of the latest create-workout attempt
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from workoutgen.api.routes import creator as creator_routes
from workoutgen.api.routes import generations, workouts
from workoutgen.creator import CreatorBusyError
from workoutgen.db.engine import get_engine, init_db

logger = logging.getLogger(__name__)


async def _creator_busy(request: Request, exc: CreatorBusyError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Build the app around the shared health store database."""

    engine = get_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("Health store ready at %s", engine.url)
        yield

    app = FastAPI(
        title="Workout Sample Data API",
        description="Generate fake workouts into the local health store",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(creator_routes.router, prefix="/creator", tags=["creator"])
    app.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
    app.include_router(generations.router, prefix="/generations", tags=["generations"])

    # A create that loses the race for the creator after the route's own check
    app.add_exception_handler(CreatorBusyError, _creator_busy)

    return app


app = create_app()
