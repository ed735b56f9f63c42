"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest

from models.entities import Availability, ScheduleRequest, SchedulingOptions, TimeSlot, User
from services.scheduling_engine import SchedulingEngine
from services.timezone_service import TimezoneService

DAY = "2024-01-10"


@pytest.fixture
def engine():
    return SchedulingEngine(timezone_service=TimezoneService(today=date(2024, 3, 1)))


@pytest.fixture
def options():
    return SchedulingOptions(duration=30, buffer_time=15)


def make_slot(start: str, end: str, slot_date: str = DAY) -> TimeSlot:
    return TimeSlot(date=slot_date, start=start, end=end)


def make_availability(
    user_id: str,
    windows: list[tuple[str, str]],
    slot_date: str = DAY,
    scheduler_id: str = "sched-1",
    updated_at: Optional[str] = None,
) -> Availability:
    """Helper to build one submission from (start, end) windows on a single date."""
    return Availability(
        user_id=user_id,
        scheduler_id=scheduler_id,
        time_slots=[make_slot(start, end, slot_date) for start, end in windows],
        updated_at=updated_at,
    )


def make_request(
    candidate: list[Availability],
    interviewers: list[Availability],
    duration: int = 30,
    timezone: str = "UTC",
    users: Optional[list[User]] = None,
) -> ScheduleRequest:
    """Helper to create a ScheduleRequest with sensible defaults."""
    return ScheduleRequest(
        scheduler_id="sched-1",
        timezone=timezone,
        interview_duration=duration,
        candidate_availability=candidate,
        interviewer_availability=interviewers,
        users=users,
    )
