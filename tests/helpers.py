import datetime

from models import Booking

# 2025-03-03 is a Monday; 2025-03-02 the Sunday before it
MONDAY = datetime.date(2025, 3, 3)
SUNDAY = datetime.date(2025, 3, 2)


def at(day: datetime.date, hour: int, minute: int = 0) -> datetime.datetime:
    return datetime.datetime(day.year, day.month, day.day, hour, minute)


def make_booking(
    room_id: str,
    start: datetime.datetime,
    end: datetime.datetime,
    staff_id: str = "staff_ana",
    **kwargs
) -> Booking:
    return Booking(room_id=room_id, staff_id=staff_id, start=start, end=end, **kwargs)
