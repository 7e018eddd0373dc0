"""
FastAPI surface for the booking engine.

POST   /bookings                    schedule a request, returns created/skipped counts
DELETE /bookings/{id}               delete one occurrence (or its series with wholeSeries=true)
DELETE /bookings/series/{series_id} delete a whole series
GET    /schedule                    one day's grid grouped by room, staff or location
GET    /utilization                 used vs open minutes for a scope and date range
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config import Config
from generators.data_factory import DataGenerator
from generators.seed_io import load_seed_data
from models import (
    Booking,
    BookingRequest,
    ConflictPolicy,
    DayGrid,
    GroupBy,
    Location,
    Room,
    StaffMember,
    UtilizationReport
)
from scheduler.business_calendar import BusinessCalendar
from scheduler.engine import BookingScheduler
from scheduler.exceptions import BookingNotFound, BookingValidationError, StoreError
from scheduler.projection import GroupingProjector, filter_bookings
from scheduler.slots import SlotGridBuilder
from scheduler.store import BookingStore, InMemoryBookingStore, StaticDirectory
from scheduler.utilization import UtilizationCalculator

logger = logging.getLogger(__name__)

APP_NAME = "Room & Therapist Scheduler"


# Pydantic Schemas for Request/Response
class ScheduleBookingBody(BookingRequest):
    policy: ConflictPolicy = Field(default=ConflictPolicy.SKIP)


class ScheduleBookingResponse(BaseModel):
    created: int
    skipped: int
    series_id: Optional[str] = None
    message: str
    bookings: List[Booking]
    replaced_ids: List[str] = Field(default_factory=list)


def _load_practice():
    """Reference data and bookings from the seed file, or generated demo data."""
    resources, bookings = (None, [])
    if Config.DATA_FILE:
        resources, bookings = load_seed_data(Config.DATA_FILE)
    if not resources:
        generator = DataGenerator(seed=Config.DEMO_SEED, calendar=BusinessCalendar(Config.BUSINESS_HOURS))
        resources = generator.generate_resources()
        bookings = generator.generate_bookings(resources["rooms"], resources["staff"], date.today())
    directory = StaticDirectory(resources["locations"], resources["rooms"], resources["staff"])
    return InMemoryBookingStore(bookings), directory


def create_app(
    store: Optional[BookingStore] = None,
    directory: Optional[StaticDirectory] = None,
    calendar: Optional[BusinessCalendar] = None
) -> FastAPI:
    if store is None or directory is None:
        store, directory = _load_practice()

    app = FastAPI(title=APP_NAME)
    app.state.store = store
    app.state.directory = directory
    app.state.calendar = calendar or BusinessCalendar(Config.BUSINESS_HOURS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BookingValidationError)
    async def validation_error_handler(request: Request, exc: BookingValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if isinstance(exc, BookingNotFound):
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

        logger.error(f"Store failure on {request.url.path}: {exc}")
        content = {"detail": str(exc)}
        if exc.result is not None:
            content["created"] = exc.result.created_count
            content["skipped"] = exc.result.skipped
            content["bookings"] = [b.model_dump(mode='json') for b in exc.result.created]
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=content)

    _register_routes(app)
    return app


def get_store(request: Request) -> BookingStore:
    return request.app.state.store


def get_directory(request: Request) -> StaticDirectory:
    return request.app.state.directory


def get_calendar(request: Request) -> BusinessCalendar:
    return request.app.state.calendar


def get_scheduler(
    store: BookingStore = Depends(get_store),
    directory: StaticDirectory = Depends(get_directory)
) -> BookingScheduler:
    return BookingScheduler(store, directory)


def _require_location(directory: StaticDirectory, location_id: Optional[str]) -> None:
    if location_id is not None and location_id not in {l.id for l in directory.list_locations()}:
        raise HTTPException(status_code=404, detail=f"Location {location_id} not found")


def _register_routes(app: FastAPI) -> None:

    @app.get("/locations", response_model=List[Location])
    def list_locations(directory: StaticDirectory = Depends(get_directory)):
        return directory.list_locations()

    @app.get("/rooms", response_model=List[Room])
    def list_rooms(
        location_id: Optional[str] = Query(default=None, alias="locationId"),
        directory: StaticDirectory = Depends(get_directory)
    ):
        return directory.rooms_for_location(location_id)

    @app.get("/staff", response_model=List[StaffMember])
    def list_staff(
        include_inactive: bool = Query(default=False, alias="includeInactive"),
        directory: StaticDirectory = Depends(get_directory)
    ):
        return directory.list_staff() if include_inactive else directory.list_active_staff()

    @app.post("/bookings", response_model=ScheduleBookingResponse, status_code=status.HTTP_201_CREATED)
    def create_booking(body: ScheduleBookingBody, scheduler: BookingScheduler = Depends(get_scheduler)):
        request = BookingRequest(**body.model_dump(exclude={"policy"}))
        result = scheduler.schedule(request, body.policy)
        return ScheduleBookingResponse(
            created=result.created_count,
            skipped=result.skipped,
            series_id=result.series_id,
            message=result.summary(),
            bookings=result.created,
            replaced_ids=result.replaced_ids
        )

    @app.delete("/bookings/series/{series_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_series(series_id: str, scheduler: BookingScheduler = Depends(get_scheduler)):
        scheduler.cancel_series(series_id)

    @app.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_booking(
        booking_id: str,
        whole_series: bool = Query(default=False, alias="wholeSeries"),
        scheduler: BookingScheduler = Depends(get_scheduler)
    ):
        scheduler.cancel(booking_id, whole_series=whole_series)

    @app.get("/schedule", response_model=DayGrid)
    def get_schedule(
        day: date = Query(alias="date"),
        group_by: GroupBy = Query(default=GroupBy.ROOM, alias="groupBy"),
        location_id: Optional[str] = Query(default=None, alias="locationId"),
        room_id: Optional[str] = Query(default=None, alias="roomId"),
        staff_id: Optional[str] = Query(default=None, alias="staffId"),
        store: BookingStore = Depends(get_store),
        directory: StaticDirectory = Depends(get_directory),
        calendar: BusinessCalendar = Depends(get_calendar)
    ):
        _require_location(directory, location_id)
        rooms = directory.rooms_for_location(location_id)
        room_ids = [r.id for r in rooms]
        if room_id is not None:
            if room_id not in room_ids:
                raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
            room_ids = [room_id]

        # Overnight bookings belong to the day they start on
        day_bookings = [b for b in store.query_bookings(room_ids) if b.start.date() == day]
        bookings = filter_bookings(day_bookings, staff_id=staff_id)

        projector = GroupingProjector(directory.list_locations(), directory.list_rooms(), directory.list_staff())
        slots = SlotGridBuilder(calendar, Config.SLOT_MINUTES).slots_for(day)
        return projector.day_grid(day, group_by, bookings, slots, location_id=location_id)

    @app.get("/utilization", response_model=UtilizationReport)
    def get_utilization(
        date_from: date = Query(alias="from"),
        date_to: date = Query(alias="to"),
        location_id: Optional[str] = Query(default=None, alias="locationId"),
        room_id: Optional[str] = Query(default=None, alias="roomId"),
        store: BookingStore = Depends(get_store),
        directory: StaticDirectory = Depends(get_directory),
        calendar: BusinessCalendar = Depends(get_calendar)
    ):
        if date_to < date_from:
            raise HTTPException(status_code=400, detail="'to' cannot be before 'from'")
        calculator = UtilizationCalculator(calendar, directory.list_rooms())
        scope = calculator.rooms_in_scope(location_id, room_id)
        _require_location(directory, location_id)
        if room_id is not None and not scope:
            raise HTTPException(status_code=404, detail=f"Room {room_id} not found")
        bookings = store.query_bookings([r.id for r in scope])
        return calculator.utilization(bookings, date_from, date_to, location_id=location_id, room_id=room_id)


app = create_app()
