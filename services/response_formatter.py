"""Builds structured schedule responses and their human-readable messages."""

from datetime import date
from typing import Optional

from models.entities import (
    Availability,
    AvailabilitySummary,
    DateAvailability,
    IndividualInterview,
    PartySummary,
    ScheduledSlot,
    ScheduleOutcome,
    ScheduleRequest,
    ScheduleResponse,
    SchedulingOptions,
    SlotSummary,
    TimeSlotMatch,
)
from services.scheduling_stats import count_slots, find_overlapping_days
from services.slot_finder import group_slots_by_date
from services.time_utils import parse_time, time_difference
from services.timezone_service import TimezoneService

NO_OVERLAP_MESSAGE = "No overlapping time slots found between candidate and any interviewer."
INTERNAL_ERROR_MESSAGE = "Failed to generate schedule. Please try again or contact support."


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


class ResponseFormatter:
    """Formats scheduling results in a consistent, structured manner."""

    @staticmethod
    def format_long_date(date_str: str) -> str:
        """Render YYYY-MM-DD as e.g. "Wednesday, January 10th, 2024"."""
        day = date.fromisoformat(date_str)
        return f"{day.strftime('%A, %B')} {_ordinal(day.day)}, {day.year}"

    @staticmethod
    def format_schedule_message(slot: TimeSlotMatch, timezone: str) -> str:
        """Message for a single scheduled interview."""
        long_date = ResponseFormatter.format_long_date(slot.date)
        reasons = f" ({', '.join(slot.reasons)})" if slot.reasons else ""
        return (
            f"Interview scheduled for {long_date} at "
            f"{slot.start_time} - {slot.end_time} {timezone}{reasons}"
        )

    @staticmethod
    def format_multiple_interviews_message(
        interviews: list[TimeSlotMatch],
        timezone: str,
        buffer_time: int = 15
    ) -> str:
        """Summary message; singular phrasing for one interview."""
        if not interviews:
            return "No interviews scheduled"

        if len(interviews) == 1:
            return ResponseFormatter.format_schedule_message(interviews[0], timezone)

        long_date = ResponseFormatter.format_long_date(interviews[0].date)
        return (
            f"{len(interviews)} individual interviews scheduled for {long_date} "
            f"with {buffer_time}-minute breaks between sessions. "
            "Check details below for specific times."
        )

    @staticmethod
    def _date_buckets(availability: list[Availability]) -> list[DateAvailability]:
        buckets = []
        for slot_date, slots in group_slots_by_date(availability).items():
            buckets.append(DateAvailability(
                date=slot_date,
                slots=[
                    SlotSummary(
                        start=slot.start,
                        end=slot.end,
                        duration_minutes=time_difference(parse_time(slot.start), parse_time(slot.end))
                    )
                    for slot in slots
                ]
            ))
        return buckets

    @staticmethod
    def build_availability_summary(request: ScheduleRequest) -> AvailabilitySummary:
        """Date-bucketed view of both sides' availability plus shared dates."""
        candidate_dates = ResponseFormatter._date_buckets(request.candidate_availability)
        interviewer_dates = ResponseFormatter._date_buckets(request.interviewer_availability)

        return AvailabilitySummary(
            candidate=PartySummary(
                total_days=len(candidate_dates),
                total_slots=count_slots(request.candidate_availability),
                availability_by_date=candidate_dates
            ),
            interviewers=PartySummary(
                # One per submission record, matching the upstream contract
                total_interviewers=len(request.interviewer_availability),
                total_days=len(interviewer_dates),
                total_slots=count_slots(request.interviewer_availability),
                availability_by_date=interviewer_dates
            ),
            overlapping_days=find_overlapping_days(
                request.candidate_availability,
                request.interviewer_availability
            )
        )

    @staticmethod
    def build_success_response(
        interviews: list[TimeSlotMatch],
        request: ScheduleRequest,
        options: SchedulingOptions,
        timezone_service: TimezoneService
    ) -> ScheduleResponse:
        """
        Assemble the response for a run that assigned at least one interview.

        The first interview is the primary scheduled time; the rest become
        suggested times, capped at ``max_suggestions - 1``.
        """
        for interview in interviews:
            interview.date = timezone_service.resolve_date(interview.date)

        scheduled = [
            timezone_service.to_utc_iso(interview.date, interview.start_time, request.timezone)
            for interview in interviews
        ]

        all_slots = []
        individual = []
        for interview, scheduled_time in zip(interviews, scheduled):
            all_slots.append(ScheduledSlot(
                date=interview.date,
                start_time=interview.start_time,
                end_time=interview.end_time,
                score=interview.score,
                reasons=list(interview.reasons),
                scheduled_time=scheduled_time,
                interviewer_id=interview.interviewer_id,
                interviewer_name=interview.interviewer_name
            ))
            individual.append(IndividualInterview(
                interviewer_id=interview.interviewer_id or "unknown",
                interviewer_name=interview.interviewer_name or "Unknown Interviewer",
                date=interview.date,
                start_time=interview.start_time,
                end_time=interview.end_time,
                score=interview.score,
                reasons=list(interview.reasons),
                scheduled_time=scheduled_time
            ))

        return ScheduleResponse(
            success=True,
            outcome=ScheduleOutcome.SCHEDULED,
            scheduled_time=scheduled[0],
            message=ResponseFormatter.format_multiple_interviews_message(
                interviews,
                request.timezone,
                options.buffer_time
            ),
            suggested_times=scheduled[1:max(1, options.max_suggestions)],
            all_available_slots=all_slots,
            availability_summary=ResponseFormatter.build_availability_summary(request),
            individual_interviews=individual
        )

    @staticmethod
    def build_failure_response(
        message: str,
        outcome: ScheduleOutcome,
        error: Optional[str] = None
    ) -> ScheduleResponse:
        return ScheduleResponse(
            success=False,
            outcome=outcome,
            message=message,
            error=error
        )
