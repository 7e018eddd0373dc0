"""
Booking scheduling engine for the Room & Therapist Scheduler.

Import the components from their modules (scheduler.engine, scheduler.store, ...).
"""
