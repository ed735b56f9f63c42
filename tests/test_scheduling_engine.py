"""Tests for the multi-interviewer assigner and the scheduling entry point."""

import json
from itertools import combinations

import pytest

from models.entities import ScheduleOutcome, SchedulingOptions, User
from services.response_formatter import INTERNAL_ERROR_MESSAGE, NO_OVERLAP_MESSAGE
from services.scheduling_engine import (
    CandidateSession,
    SchedulingEngine,
    has_candidate_time_conflict,
    interviewer_display_name,
)
from services.time_utils import parse_time
from tests.conftest import DAY, make_availability, make_request


def _times(interviews):
    return [(i.interviewer_id, i.start_time, i.end_time) for i in interviews]


class TestCandidateTimeConflict:
    def setup_method(self):
        self.assigned = [CandidateSession(DAY, "10:00", "10:30")]

    def test_overlap_conflicts(self):
        assert has_candidate_time_conflict(CandidateSession(DAY, "10:15", "10:45"), self.assigned, 15)

    def test_inside_buffer_conflicts(self):
        assert has_candidate_time_conflict(CandidateSession(DAY, "10:44", "11:14"), self.assigned, 15)

    def test_after_buffer_is_free(self):
        assert not has_candidate_time_conflict(CandidateSession(DAY, "10:45", "11:15"), self.assigned, 15)

    def test_buffer_only_extends_existing_session(self):
        # Ends exactly when the existing session starts; no buffer before it
        assert not has_candidate_time_conflict(CandidateSession(DAY, "09:30", "10:00"), self.assigned, 15)

    def test_other_dates_ignored(self):
        assert not has_candidate_time_conflict(
            CandidateSession("2024-01-11", "10:00", "10:30"), self.assigned, 15
        )

    def test_zero_buffer(self):
        assert not has_candidate_time_conflict(CandidateSession(DAY, "10:30", "11:00"), self.assigned, 0)


class TestInterviewerDisplayName:
    def test_uses_directory(self):
        users = [User(id="int-1", name="Alice Smith", email="alice@example.com")]
        assert interviewer_display_name("int-1", users) == "Alice Smith (alice@example.com)"

    def test_falls_back_to_id_prefix(self):
        assert interviewer_display_name("abcdef123456", None) == "Interviewer abcdef12"


class TestFindIndividualInterviews:
    def setup_method(self):
        self.engine = SchedulingEngine()

    def test_single_interviewer_partial_overlap(self, options):
        candidate = [make_availability("cand", [("09:30", "10:30")])]
        interviewers = [make_availability("int-a", [("09:00", "10:00")])]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert _times(interviews) == [("int-a", "09:30", "10:00")]

    def test_takes_first_feasible_slot(self, options):
        candidate = [make_availability("cand", [("08:50", "10:00")])]
        interviewers = [make_availability("int-a", [("08:00", "12:00")])]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert interviews[0].start_time == "08:50"

    def test_second_interviewer_omitted_without_slack(self, options):
        candidate = [make_availability("cand", [("09:00", "10:00")])]
        interviewers = [
            make_availability("int-1", [("09:00", "10:00")]),
            make_availability("int-2", [("09:00", "10:00")]),
        ]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert _times(interviews) == [("int-1", "09:00", "09:30")]

    def test_second_interviewer_placed_after_buffer(self, options):
        candidate = [make_availability("cand", [("09:00", "11:00")])]
        interviewers = [
            make_availability("int-1", [("09:00", "11:00")]),
            make_availability("int-2", [("09:00", "11:00")]),
        ]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert _times(interviews) == [("int-1", "09:00", "09:30"), ("int-2", "09:45", "10:15")]

    def test_output_follows_encounter_order_not_time(self):
        candidate = [make_availability("cand", [("09:00", "17:00")])]
        interviewers = [
            make_availability("late", [("14:00", "15:00")]),
            make_availability("early", [("09:00", "10:00")]),
        ]
        interviews = self.engine.find_individual_interviews(
            candidate, interviewers, SchedulingOptions(duration=60)
        )
        assert _times(interviews) == [("late", "14:00", "15:00"), ("early", "09:00", "10:00")]

    def test_records_grouped_by_interviewer(self, options):
        candidate = [make_availability("cand", [("09:00", "17:00")])]
        interviewers = [
            make_availability("int-a", [("16:00", "16:30")]),
            make_availability("int-b", [("09:00", "09:30")]),
            make_availability("int-a", [("11:00", "11:30")]),
        ]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert _times(interviews) == [("int-a", "16:00", "16:30"), ("int-b", "09:00", "09:30")]

    def test_later_record_used_when_earlier_conflicts(self, options):
        candidate = [make_availability("cand", [("09:00", "17:00")])]
        interviewers = [
            make_availability("int-b", [("09:00", "09:30")]),
            make_availability("int-a", [("09:00", "09:30")]),
            make_availability("int-a", [("13:00", "13:30")]),
        ]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert _times(interviews) == [("int-b", "09:00", "09:30"), ("int-a", "13:00", "13:30")]

    def test_no_overlap_gives_empty(self, options):
        candidate = [make_availability("cand", [("09:00", "10:00")], "2024-01-08")]
        interviewers = [make_availability("int-a", [("09:00", "10:00")], "2024-01-09")]
        assert self.engine.find_individual_interviews(candidate, interviewers, options) == []

    def test_sessions_never_clash(self):
        options = SchedulingOptions(duration=45, buffer_time=20)
        candidate = [
            make_availability("cand", [("09:00", "12:30"), ("13:00", "17:00")]),
            make_availability("cand", [("10:00", "12:00")], "2024-01-11"),
        ]
        interviewers = [
            make_availability(f"int-{n}", [("09:00", "17:00")]) for n in range(4)
        ] + [make_availability("int-x", [("10:00", "12:00")], "2024-01-11")]
        interviews = self.engine.find_individual_interviews(candidate, interviewers, options)
        assert len(interviews) == 5
        for first, second in combinations(interviews, 2):
            if first.date != second.date:
                continue
            earlier, later = sorted((first, second), key=lambda i: parse_time(i.start_time).total_minutes)
            gap = parse_time(later.start_time).total_minutes - parse_time(earlier.end_time).total_minutes
            assert gap >= options.buffer_time


class TestFindOptimalSchedule:
    def test_single_interview_response(self, engine):
        request = make_request(
            [make_availability("cand", [("09:30", "10:30")])],
            [make_availability("int-a", [("09:00", "10:00")])],
        )
        response = engine.find_optimal_schedule(request, buffer_time=15)
        assert response.success is True
        assert response.outcome == ScheduleOutcome.SCHEDULED
        assert response.scheduled_time == "2024-01-10T09:30:00.000Z"
        assert response.suggested_times == []
        assert response.message == (
            "Interview scheduled for Wednesday, January 10th, 2024 at 09:30 - 10:00 UTC"
        )
        assert response.individual_interviews[0].interviewer_name == "Interviewer int-a"

    def test_converts_from_request_timezone(self, engine):
        request = make_request(
            [make_availability("cand", [("09:30", "10:30")])],
            [make_availability("int-a", [("09:00", "10:00")])],
            timezone="America/New_York",
        )
        assert engine.find_optimal_schedule(request).scheduled_time == "2024-01-10T14:30:00.000Z"

    def test_multiple_interviews_message_and_suggestions(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "17:00")])],
            [make_availability(f"int-{n}", [("09:00", "17:00")]) for n in range(3)],
            users=[User(id="int-0", name="Ana", email="ana@example.com")],
        )
        response = engine.find_optimal_schedule(request, buffer_time=15)
        assert response.message == (
            "3 individual interviews scheduled for Wednesday, January 10th, 2024 "
            "with 15-minute breaks between sessions. Check details below for specific times."
        )
        assert response.scheduled_time == "2024-01-10T09:00:00.000Z"
        assert response.suggested_times == ["2024-01-10T09:45:00.000Z", "2024-01-10T10:30:00.000Z"]
        assert [s.interviewer_id for s in response.all_available_slots] == ["int-0", "int-1", "int-2"]
        assert response.individual_interviews[0].interviewer_name == "Ana (ana@example.com)"

    def test_suggestions_capped_by_max_suggestions(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "17:00")])],
            [make_availability(f"int-{n}", [("09:00", "17:00")]) for n in range(4)],
        )
        response = engine.find_optimal_schedule(request, max_suggestions=2)
        assert len(response.suggested_times) == 1
        assert len(response.individual_interviews) == 4

    def test_default_duration_when_unset(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "12:00")])],
            [make_availability("int-a", [("09:00", "12:00")])],
            duration=0,
        )
        response = engine.find_optimal_schedule(request)
        assert response.individual_interviews[0].end_time == "10:00"

    def test_configured_default_duration_when_unset(self):
        engine = SchedulingEngine(default_options=SchedulingOptions(duration=30))
        request = make_request(
            [make_availability("cand", [("09:00", "12:00")])],
            [make_availability("int-a", [("09:00", "12:00")])],
            duration=0,
        )
        response = engine.find_optimal_schedule(request)
        assert response.individual_interviews[0].end_time == "09:30"

    def test_no_overlap_is_reported_not_raised(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "10:00")])],
            [make_availability("int-a", [("13:00", "14:00")])],
        )
        response = engine.find_optimal_schedule(request)
        assert response.success is False
        assert response.outcome == ScheduleOutcome.NO_OVERLAP
        assert response.message == NO_OVERLAP_MESSAGE
        assert response.scheduled_time is None

    def test_internal_failure_downgraded(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "10:00")])],
            [make_availability("int-a", [("09:00", "10:00")])],
            timezone="Mars/Olympus_Mons",
        )
        response = engine.find_optimal_schedule(request)
        assert response.success is False
        assert response.outcome == ScheduleOutcome.INTERNAL_ERROR
        assert response.message == INTERNAL_ERROR_MESSAGE
        assert "UnknownTimeZoneError" in response.error

    def test_missing_date_falls_back_to_today(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "10:00")], slot_date="")],
            [make_availability("int-a", [("09:00", "10:00")], slot_date="")],
        )
        response = engine.find_optimal_schedule(request)
        assert response.success is True
        assert response.scheduled_time == "2024-03-01T09:00:00.000Z"
        assert response.individual_interviews[0].date == "2024-03-01"

    def test_prefer_nice_times_option(self, engine):
        request = make_request(
            [make_availability("cand", [("08:50", "10:00")])],
            [make_availability("int-a", [("08:00", "12:00")])],
        )
        response = engine.find_optimal_schedule(request, prefer_nice_times=True)
        interview = response.individual_interviews[0]
        assert interview.start_time == "09:00"
        assert interview.score == 130

    def test_deterministic_output(self, engine):
        request = make_request(
            [make_availability("cand", [("09:00", "17:00")])],
            [make_availability(f"int-{n}", [("09:00", "12:00")]) for n in range(3)],
        )
        first = json.dumps(engine.find_optimal_schedule(request).to_dict(), sort_keys=True)
        second = json.dumps(engine.find_optimal_schedule(request).to_dict(), sort_keys=True)
        assert first == second

    def test_engine_defaults_used(self):
        engine = SchedulingEngine(default_options=SchedulingOptions(buffer_time=0))
        request = make_request(
            [make_availability("cand", [("09:00", "10:30")])],
            [
                make_availability("int-1", [("09:00", "10:30")]),
                make_availability("int-2", [("09:00", "10:30")]),
            ],
        )
        response = engine.find_optimal_schedule(request)
        assert [i.start_time for i in response.individual_interviews] == ["09:00", "09:30"]

    def test_resolve_options_rejects_unknown_fields(self, engine):
        request = make_request([], [])
        with pytest.raises(ValueError, match="Unknown scheduling option"):
            engine.resolve_options(request, colour="blue")


class TestEngineDelegates:
    def test_validate_availability(self, engine):
        assert engine.validate_availability([]).errors == ["No availability provided"]

    def test_get_scheduling_stats(self, engine):
        stats = engine.get_scheduling_stats(
            [make_availability("cand", [("09:00", "10:00")])],
            [make_availability("int", [("09:00", "10:00")])],
        )
        assert stats.overlapping_days == 1

    def test_get_scheduling_stats_uses_engine_defaults(self):
        engine = SchedulingEngine(default_options=SchedulingOptions(duration=30))
        stats = engine.get_scheduling_stats(
            [make_availability("cand", [("09:00", "09:30")])],
            [make_availability("int", [("09:00", "09:30")])],
        )
        assert stats.total_overlapping_hours == 0.5
