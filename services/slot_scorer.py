"""Ranks interview start times by how natural they look to people."""

from models.entities import BusinessHours, TimeSlot
from services.time_utils import parse_time

BASE_SCORE = 100


def score_slot(
    slot: TimeSlot,
    business_hours: BusinessHours = BusinessHours()
) -> tuple[int, list[str]]:
    """
    Score a slot by its start time.

    Round starts earn a single bonus (on the hour beats half hour beats
    quarter hour beats 5-minute mark). Starts whose hour lies within
    business hours (inclusive of the closing hour) earn a further bonus.

    Returns:
        (score, reasons)
    """
    start = parse_time(slot.start)
    score = BASE_SCORE
    reasons = []

    if start.minutes == 0:
        score += 20
        reasons.append("Starts on the hour")
    elif start.minutes == 30:
        score += 15
        reasons.append("Starts on the half hour")
    elif start.minutes % 15 == 0:
        score += 10
        reasons.append("Starts on a quarter hour")
    elif start.minutes % 5 == 0:
        score += 5
        reasons.append("Starts on a 5-minute mark")

    open_hour = parse_time(business_hours.start).hours
    close_hour = parse_time(business_hours.end).hours
    if open_hour <= start.hours <= close_hour:
        score += 10
        reasons.append("Within business hours")

    return score, reasons


def rank_slots(
    slots: list[TimeSlot],
    business_hours: BusinessHours = BusinessHours()
) -> list[tuple[TimeSlot, int, list[str]]]:
    """Score slots and order them best first; equal scores keep input order."""
    scored = []
    for slot in slots:
        score, reasons = score_slot(slot, business_hours)
        scored.append((slot, score, reasons))
    # sorted() is stable, so generation order breaks ties
    return sorted(scored, key=lambda item: item[1], reverse=True)


def select_best_time_slot(
    slots: list[TimeSlot],
    business_hours: BusinessHours = BusinessHours()
) -> TimeSlot:
    """Pick the nicest slot from a non-empty list."""
    if not slots:
        raise ValueError("Cannot select from an empty slot list")
    if len(slots) == 1:
        return slots[0]
    return rank_slots(slots, business_hours)[0][0]
