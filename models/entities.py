"""
Reference data models for the Room & Therapist Scheduler.

These are the entities the booking engine looks up but never owns:
1. Locations (sites that group rooms)
2. Rooms (the unit of conflict)
3. Staff members (therapists who hold bookings)
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Location(BaseModel):
    """A physical site. Owns zero or more rooms for display grouping."""
    id: str = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Display name")


class Room(BaseModel):
    """
    A bookable room. Two bookings conflict only if they target the same room.
    """
    id: str = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Display name, e.g. 'Room 1'")
    location_id: str = Field(description="Owning location")

    model_config = ConfigDict(json_schema_extra={
        "example": {"id": "room_01", "name": "Room 1", "location_id": "loc_downtown"}
    })


class StaffMember(BaseModel):
    """
    A therapist. Inactive staff cannot take new bookings, but their
    historical bookings stay valid.
    """
    id: str = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Display name")
    email: Optional[str] = Field(default=None, description="Contact string")
    active: bool = Field(default=True, description="Eligible for new bookings")
    color: Optional[str] = Field(
        default=None,
        description="Display color, opaque to the engine (e.g. '#6366F1')"
    )
