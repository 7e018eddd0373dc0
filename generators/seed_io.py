"""
Seed file persistence.
Saves a generated practice to JSON and re-hydrates it, so the CLI and the API
can start from the same data.
"""

import json
import logging
from typing import Dict, List, Optional, Tuple

from models import Booking, Location, Room, StaffMember

logger = logging.getLogger(__name__)


def save_seed_data(data: dict, filename: str):
    """Helper to save generated data so the same practice can be reloaded."""
    serializable = {}
    for key, val in data.items():
        if isinstance(val, list):
            serializable[key] = [item.model_dump(mode='json') for item in val]

    with open(filename, 'w') as f:
        json.dump(serializable, f, indent=2)
    logger.info(f"💾 Saved seed data to {filename}")


def load_seed_data(filename: str) -> Tuple[Optional[Dict[str, List]], List[Booking]]:
    """
    Helper to load JSON data and reconstruct Pydantic objects.
    Returns (None, []) when the file is missing or unreadable.
    """
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning(f"⚠️ Seed file {filename} not found or invalid. Falling back to Generator.")
        return None, []

    logger.info(f"📂 Loading seed data from {filename}...")

    # Re-hydrate Pydantic models from the JSON dicts
    resources = {
        "locations": [Location(**item) for item in data.get('locations', [])],
        "rooms": [Room(**item) for item in data.get('rooms', [])],
        "staff": [StaffMember(**item) for item in data.get('staff', [])],
    }
    bookings = [Booking(**item) for item in data.get('bookings', [])]

    logger.info(f"✅ Seed Loaded: {len(resources['rooms'])} rooms, {len(resources['staff'])} staff, {len(bookings)} bookings.")
    return resources, bookings
