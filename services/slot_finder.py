"""Intersects candidate and interviewer windows into interview-sized slots."""

import logging

from models.entities import Availability, SchedulingOptions, TimeSlot, TimeSlotMatch
from services.slot_scorer import BASE_SCORE, rank_slots
from services.time_utils import (
    add_minutes_to_time,
    format_time,
    max_time,
    min_time,
    minutes_to_time,
    parse_time,
    time_difference,
)

logger = logging.getLogger(__name__)

MAX_STEP_MINUTES = 15


def find_time_slot_overlap(
    slot1: TimeSlot,
    slot2: TimeSlot,
    required_duration: int
) -> list[TimeSlot]:
    """
    Find the overlap of two same-date windows and lay out interview slots in it.

    Start offsets step through the spare time of the overlap at
    ``min(15, max(1, spare // 4))`` minutes, so short overlaps still offer
    a few positions.

    Args:
        slot1: Interviewer window (its date is used for the results)
        slot2: Candidate window on the same date
        required_duration: Interview length in minutes

    Returns:
        Slots of exactly ``required_duration`` minutes inside the overlap,
        in start order; empty if the overlap is too short
    """
    start1, end1 = parse_time(slot1.start), parse_time(slot1.end)
    start2, end2 = parse_time(slot2.start), parse_time(slot2.end)
    overlap_start = max_time(start1, start2)
    overlap_end = min_time(end1, end2)

    # Disjoint same-day windows must not be read as an overnight overlap
    same_day = start1.total_minutes < end1.total_minutes and start2.total_minutes < end2.total_minutes
    if same_day and overlap_end.total_minutes < overlap_start.total_minutes:
        return []

    overlap_duration = time_difference(overlap_start, overlap_end)
    if overlap_duration < required_duration:
        return []

    available_duration = overlap_duration - required_duration
    step = min(MAX_STEP_MINUTES, max(1, available_duration // 4))

    possible_slots = []
    for offset in range(0, available_duration + 1, step):
        slot_start = format_time(minutes_to_time(overlap_start.total_minutes + offset))
        slot_end = add_minutes_to_time(slot_start, required_duration)
        if parse_time(slot_end).total_minutes <= overlap_end.total_minutes:
            possible_slots.append(TimeSlot(date=slot1.date, start=slot_start, end=slot_end))

    # Exact fit or wrapped overlap: offer the overlap start
    if not possible_slots:
        slot_start = format_time(overlap_start)
        possible_slots.append(TimeSlot(
            date=slot1.date,
            start=slot_start,
            end=add_minutes_to_time(slot_start, required_duration)
        ))

    return possible_slots


def group_slots_by_date(availability: list[Availability]) -> dict[str, list[TimeSlot]]:
    """Bucket every slot by date; dates keep their first-seen order."""
    by_date: dict[str, list[TimeSlot]] = {}
    for avail in availability:
        for slot in avail.time_slots:
            by_date.setdefault(slot.date, []).append(slot)
    return by_date


def find_overlapping_slots(
    candidate_availability: list[Availability],
    interviewer_availability: list[Availability],
    options: SchedulingOptions
) -> list[TimeSlotMatch]:
    """
    List every interview slot the candidate could share with the interviewer(s).

    Order is interviewer record, then interviewer slot, then candidate slot
    on that date, then start offset. With ``prefer_nice_times`` the offsets
    of each window pair are ranked by the slot scorer first.
    """
    candidate_by_date = group_slots_by_date(candidate_availability)
    matches: list[TimeSlotMatch] = []

    for interviewer_avail in interviewer_availability:
        for interviewer_slot in interviewer_avail.time_slots:
            candidate_slots = candidate_by_date.get(interviewer_slot.date)
            if not candidate_slots:
                continue

            for candidate_slot in candidate_slots:
                overlaps = find_time_slot_overlap(
                    interviewer_slot,
                    candidate_slot,
                    options.duration
                )
                if options.prefer_nice_times:
                    ranked = rank_slots(overlaps, options.business_hours)
                else:
                    ranked = [(slot, BASE_SCORE, []) for slot in overlaps]

                for slot, score, reasons in ranked:
                    matches.append(TimeSlotMatch(
                        date=interviewer_slot.date,
                        start_time=slot.start,
                        end_time=slot.end,
                        duration=options.duration,
                        score=score,
                        reasons=list(reasons)
                    ))

    logger.debug("Found %d overlapping slot(s)", len(matches))
    return matches
