"""Core scheduling algorithm."""

import logging
from typing import NamedTuple, Optional

from models.entities import (
    Availability,
    ScheduleOutcome,
    ScheduleRequest,
    ScheduleResponse,
    SchedulingOptions,
    SchedulingStats,
    TimeSlotMatch,
    User,
    ValidationResult,
)
from services.availability_validator import validate_availability
from services.response_formatter import (
    INTERNAL_ERROR_MESSAGE,
    NO_OVERLAP_MESSAGE,
    ResponseFormatter,
)
from services.scheduling_stats import get_scheduling_stats
from services.slot_finder import find_overlapping_slots
from services.time_utils import parse_time
from services.timezone_service import TimezoneService

logger = logging.getLogger(__name__)


class CandidateSession(NamedTuple):
    """A stretch of the candidate's day already committed to an interview."""
    date: str
    start: str
    end: str


def has_candidate_time_conflict(
    proposed: CandidateSession,
    assigned: list[CandidateSession],
    buffer_minutes: int
) -> bool:
    """
    Check whether a proposed session clashes with the candidate's committed ones.

    Only sessions on the same date are compared. Each committed session is
    extended by ``buffer_minutes`` after its end; the proposed session is not.
    """
    proposed_start = parse_time(proposed.start).total_minutes
    proposed_end = parse_time(proposed.end).total_minutes

    for existing in assigned:
        if existing.date != proposed.date:
            continue
        existing_start = parse_time(existing.start).total_minutes
        existing_end_with_buffer = parse_time(existing.end).total_minutes + buffer_minutes
        if proposed_start < existing_end_with_buffer and proposed_end > existing_start:
            return True

    return False


def interviewer_display_name(interviewer_id: str, users: Optional[list[User]]) -> str:
    """Name and email from the directory, or a short placeholder."""
    for user in users or []:
        if user.id == interviewer_id:
            return f"{user.name} ({user.email})"
    return f"Interviewer {interviewer_id[:8]}"


class SchedulingEngine:
    """Engine for assigning one candidate session per interviewer."""

    def __init__(
        self,
        default_options: Optional[SchedulingOptions] = None,
        timezone_service: Optional[TimezoneService] = None
    ):
        """
        Initialize scheduling engine.

        Args:
            default_options: Options used when a call does not override them
            timezone_service: Converts local slot times to UTC instants
        """
        self.default_options = default_options or SchedulingOptions()
        self.timezone_service = timezone_service or TimezoneService()

    def resolve_options(
        self,
        request: ScheduleRequest,
        options: Optional[SchedulingOptions] = None,
        **overrides
    ) -> SchedulingOptions:
        """Merge defaults, call-level options, field overrides and the request duration."""
        resolved = (options or self.default_options).with_overrides(**overrides)
        return resolved.with_overrides(
            duration=request.interview_duration or resolved.duration
        )

    def find_optimal_schedule(
        self,
        request: ScheduleRequest,
        options: Optional[SchedulingOptions] = None,
        **overrides
    ) -> ScheduleResponse:
        """
        Schedule an interview with every interviewer the candidate overlaps with.

        Args:
            request: Candidate and interviewer availability plus the output timezone
            options: Replaces the engine defaults for this call
            **overrides: Individual SchedulingOptions fields to replace

        Returns:
            A ScheduleResponse; infeasibility and unexpected failures are
            reported through ``success``/``outcome`` rather than raised
        """
        try:
            opts = self.resolve_options(request, options, **overrides)

            interviews = self.find_individual_interviews(
                request.candidate_availability,
                request.interviewer_availability,
                opts,
                request.users
            )

            if not interviews:
                logger.info("Scheduler %s: no interviewer overlaps with the candidate", request.scheduler_id)
                return ResponseFormatter.build_failure_response(
                    NO_OVERLAP_MESSAGE,
                    ScheduleOutcome.NO_OVERLAP
                )

            return ResponseFormatter.build_success_response(
                interviews,
                request,
                opts,
                self.timezone_service
            )
        except Exception as e:
            logger.exception("Scheduling error for scheduler %s", getattr(request, "scheduler_id", None))
            return ResponseFormatter.build_failure_response(
                INTERNAL_ERROR_MESSAGE,
                ScheduleOutcome.INTERNAL_ERROR,
                error=f"{type(e).__name__}: {e}"
            )

    def find_individual_interviews(
        self,
        candidate_availability: list[Availability],
        interviewer_availability: list[Availability],
        options: SchedulingOptions,
        users: Optional[list[User]] = None
    ) -> list[TimeSlotMatch]:
        """
        Assign at most one non-conflicting candidate session per interviewer.

        Interviewers are visited in the order they first appear. Pass 1
        gives each one the first slot that clears the candidate's committed
        sessions (plus buffer). Pass 2 retries the interviewers pass 1 left
        out against everything assigned so far. Results are in assignment
        order, so pass-2 successes follow all pass-1 successes.
        """
        interviewer_groups: dict[str, list[Availability]] = {}
        for avail in interviewer_availability:
            interviewer_groups.setdefault(avail.user_id, []).append(avail)

        assigned: list[CandidateSession] = []
        interviews: list[TimeSlotMatch] = []

        def try_assign(interviewer_id: str) -> bool:
            slots = find_overlapping_slots(
                candidate_availability,
                interviewer_groups[interviewer_id],
                options
            )
            for slot in slots:
                proposed = CandidateSession(slot.date, slot.start_time, slot.end_time)
                if has_candidate_time_conflict(proposed, assigned, options.buffer_time):
                    continue
                assigned.append(proposed)
                slot.interviewer_id = interviewer_id
                slot.interviewer_name = interviewer_display_name(interviewer_id, users)
                interviews.append(slot)
                return True
            return False

        unscheduled = [i for i in interviewer_groups if not try_assign(i)]

        # Rescue pass against every pass-1 assignment
        still_unscheduled = [i for i in unscheduled if not try_assign(i)]

        if still_unscheduled:
            logger.info(
                "Scheduled %d of %d interviewer(s); no slot for %s",
                len(interviews),
                len(interviewer_groups),
                ", ".join(still_unscheduled)
            )
        else:
            logger.debug("Scheduled all %d interviewer(s)", len(interviews))

        return interviews

    def validate_availability(self, availability: list[Availability]) -> ValidationResult:
        return validate_availability(availability)

    def get_scheduling_stats(
        self,
        candidate_availability: list[Availability],
        interviewer_availability: list[Availability]
    ) -> SchedulingStats:
        return get_scheduling_stats(
            candidate_availability, interviewer_availability, self.default_options
        )
