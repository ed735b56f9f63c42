"""Aggregate overlap statistics between candidate and interviewer availability."""

from typing import Optional

from models.entities import Availability, SchedulingOptions, SchedulingStats
from services.slot_finder import find_overlapping_slots


def count_slots(availability: list[Availability]) -> int:
    return sum(len(avail.time_slots) for avail in availability)


def collect_dates(availability: list[Availability]) -> list[str]:
    """Distinct slot dates in first-seen order."""
    dates: dict[str, None] = {}
    for avail in availability:
        for slot in avail.time_slots:
            dates.setdefault(slot.date, None)
    return list(dates)


def find_overlapping_days(
    candidate_availability: list[Availability],
    interviewer_availability: list[Availability]
) -> list[str]:
    """Dates offered by both sides, in candidate order."""
    interviewer_dates = set(collect_dates(interviewer_availability))
    return [d for d in collect_dates(candidate_availability) if d in interviewer_dates]


def get_scheduling_stats(
    candidate_availability: list[Availability],
    interviewer_availability: list[Availability],
    options: Optional[SchedulingOptions] = None
) -> SchedulingStats:
    """
    Report raw overlap capacity, ignoring buffers and cross-interviewer conflicts.

    Overlapping hours sum the duration of every slot the overlap finder
    lays out, so a wide overlap counts each possible start position.
    """
    options = options or SchedulingOptions()
    overlapping_slots = find_overlapping_slots(
        candidate_availability,
        interviewer_availability,
        options
    )
    total_minutes = sum(slot.duration for slot in overlapping_slots)

    return SchedulingStats(
        total_candidate_slots=count_slots(candidate_availability),
        total_interviewer_slots=count_slots(interviewer_availability),
        overlapping_days=len(find_overlapping_days(candidate_availability, interviewer_availability)),
        total_overlapping_hours=total_minutes / 60
    )
