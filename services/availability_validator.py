"""Structural validation of availability submissions."""

from models.entities import Availability, ValidationResult
from services.time_utils import is_valid_date_format, is_valid_time_format, parse_time


def validate_availability(availability: list[Availability]) -> ValidationResult:
    """
    Check every submission and slot, collecting all problems.

    A slot range is rejected when its start is not strictly before its
    end (compared in minutes, not just hours). The range check is skipped
    for slots whose times are malformed, since those are already reported.
    """
    errors: list[str] = []

    if not availability:
        errors.append("No availability provided")
        return ValidationResult(valid=False, errors=errors)

    for index, avail in enumerate(availability):
        if not avail.time_slots:
            errors.append(f"No time slots provided for availability at index {index}")
            continue

        for slot_index, slot in enumerate(avail.time_slots):
            if not is_valid_date_format(slot.date):
                errors.append(
                    f"Invalid date format for availability {index} slot {slot_index}: {slot.date}"
                )

            if not is_valid_time_format(slot.start) or not is_valid_time_format(slot.end):
                errors.append(
                    f"Invalid time format for availability {index} slot {slot_index}: "
                    f"{slot.start}-{slot.end}"
                )
                continue

            if parse_time(slot.start).total_minutes >= parse_time(slot.end).total_minutes:
                errors.append(
                    f"Invalid time range for availability {index} slot {slot_index}: "
                    "start time must be before end time"
                )

    return ValidationResult(valid=not errors, errors=errors)
