import json
import os
from typing import Optional

from dotenv import load_dotenv

from models import BusinessHoursSpec, DEFAULT_BUSINESS_HOURS

load_dotenv()


def _business_hours_from_env(raw: Optional[str]) -> BusinessHoursSpec:
    """BUSINESS_HOURS='{"0": null, "1": [9, 20], ...}' -> BusinessHoursSpec; unset means the default week."""
    if not raw:
        return DEFAULT_BUSINESS_HOURS
    return BusinessHoursSpec(hours=json.loads(raw))


class Config:
    # Data
    DATA_FILE = os.getenv('BOOKING_DATA_FILE')  # JSON seed; demo data is generated when unset
    DASHBOARD_FILE = os.getenv('DASHBOARD_FILE', 'dashboard_data.json')
    CSV_EXPORT_FILE = os.getenv('CSV_EXPORT_FILE', 'bookings.csv')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Scheduling
    SLOT_MINUTES = int(os.getenv('SLOT_MINUTES', 30))
    DEFAULT_CONFLICT_POLICY = os.getenv('DEFAULT_CONFLICT_POLICY', 'skip').lower()
    DISPLAY_WEEKS = int(os.getenv('DISPLAY_WEEKS', 2))
    BUSINESS_HOURS = _business_hours_from_env(os.getenv('BUSINESS_HOURS'))

    # Demo data
    DEMO_SEED = int(os.getenv('DEMO_SEED', 7))
