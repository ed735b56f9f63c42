"""Domain models for the interview scheduler."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Optional


def _require(data: dict, key: str, record: str) -> Any:
    """Fetch a required key from a JSON mapping."""
    if key not in data or data[key] is None:
        raise ValueError(f"{record} is missing required field '{key}'")
    return data[key]


@dataclass
class TimeSlot:
    """A window of time on a single calendar date (local time)."""
    date: str  # YYYY-MM-DD
    start: str  # HH:MM
    end: str  # HH:MM

    @classmethod
    def from_dict(cls, data: dict) -> "TimeSlot":
        return cls(
            date=data.get("date", ""),
            start=_require(data, "start", "TimeSlot"),
            end=_require(data, "end", "TimeSlot"),
        )

    def to_dict(self) -> dict:
        return {"date": self.date, "start": self.start, "end": self.end}


@dataclass
class Availability:
    """One person's complete availability submission for a scheduler."""
    user_id: str
    scheduler_id: str
    time_slots: list[TimeSlot]
    timezone: str = "UTC"
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Availability":
        return cls(
            user_id=_require(data, "user_id", "Availability"),
            scheduler_id=data.get("scheduler_id", ""),
            time_slots=[TimeSlot.from_dict(s) for s in data.get("time_slots") or []],
            timezone=data.get("timezone") or "UTC",
            id=data.get("id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "scheduler_id": self.scheduler_id,
            "time_slots": [s.to_dict() for s in self.time_slots],
            "timezone": self.timezone,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class User:
    """A scheduler participant (candidate or interviewer)."""
    id: str
    name: str
    email: str
    role: str = "interviewer"  # "candidate" | "interviewer"
    scheduler_id: Optional[str] = None
    timezone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=_require(data, "id", "User"),
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=data.get("role", "interviewer"),
            scheduler_id=data.get("scheduler_id"),
            timezone=data.get("timezone"),
        )


@dataclass(frozen=True)
class BusinessHours:
    """Business hours window in HH:MM format."""
    start: str = "09:00"
    end: str = "17:00"


@dataclass(frozen=True)
class SchedulingOptions:
    """Engine configuration for a single scheduling run."""
    duration: int = 60  # minutes
    buffer_time: int = 30  # minutes between the candidate's sessions
    business_hours: BusinessHours = field(default_factory=BusinessHours)
    preferred_days: tuple[int, ...] = (1, 2, 3, 4, 5)  # 0 = Sunday
    max_suggestions: int = 5
    prefer_nice_times: bool = False

    def __post_init__(self):
        bad_days = [day for day in self.preferred_days if not 0 <= day <= 6]
        if bad_days:
            raise ValueError(f"preferred_days must be 0-6 (0 = Sunday), got {bad_days}")

    def with_overrides(self, **overrides) -> "SchedulingOptions":
        """Return a copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown scheduling option(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "preferred_days" in changes:
            changes["preferred_days"] = tuple(changes["preferred_days"])
        return replace(self, **changes)


@dataclass
class TimeSlotMatch:
    """A candidate interview slot produced during one matching run."""
    date: str
    start_time: str
    end_time: str
    duration: int
    score: int = 100
    reasons: list[str] = field(default_factory=list)
    interviewer_id: Optional[str] = None
    interviewer_name: Optional[str] = None


@dataclass
class ScheduleRequest:
    """Input envelope for a scheduling run."""
    scheduler_id: str
    timezone: str
    interview_duration: int
    candidate_availability: list[Availability]
    interviewer_availability: list[Availability]
    users: Optional[list[User]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleRequest":
        users = data.get("users")
        return cls(
            scheduler_id=data.get("scheduler_id", ""),
            timezone=data.get("timezone") or "UTC",
            interview_duration=int(data.get("interview_duration") or 0),
            candidate_availability=[
                Availability.from_dict(a) for a in data.get("candidate_availability") or []
            ],
            interviewer_availability=[
                Availability.from_dict(a) for a in data.get("interviewer_availability") or []
            ],
            users=[User.from_dict(u) for u in users] if users is not None else None,
        )


class ScheduleOutcome(str, Enum):
    """How a scheduling run ended."""
    SCHEDULED = "scheduled"
    NO_OVERLAP = "no_overlap"
    INTERNAL_ERROR = "internal_error"


@dataclass
class ScheduledSlot:
    """An assigned slot as echoed in ``all_available_slots``."""
    date: str
    start_time: str
    end_time: str
    score: int
    reasons: list[str]
    scheduled_time: str
    interviewer_id: Optional[str] = None
    interviewer_name: Optional[str] = None


@dataclass
class IndividualInterview:
    """The slot assigned to one interviewer."""
    interviewer_id: str
    interviewer_name: str
    date: str
    start_time: str
    end_time: str
    score: int
    reasons: list[str]
    scheduled_time: str


@dataclass
class SlotSummary:
    start: str
    end: str
    duration_minutes: int


@dataclass
class DateAvailability:
    date: str
    slots: list[SlotSummary]


@dataclass
class PartySummary:
    """Date-bucketed availability for one side of the interview."""
    total_days: int
    total_slots: int
    availability_by_date: list[DateAvailability]
    total_interviewers: Optional[int] = None


@dataclass
class AvailabilitySummary:
    candidate: PartySummary
    interviewers: PartySummary
    overlapping_days: list[str]


@dataclass
class ScheduleResponse:
    """Output envelope for a scheduling run."""
    success: bool
    message: str
    outcome: ScheduleOutcome
    scheduled_time: Optional[str] = None
    suggested_times: list[str] = field(default_factory=list)
    all_available_slots: list[ScheduledSlot] = field(default_factory=list)
    availability_summary: Optional[AvailabilitySummary] = None
    individual_interviews: list[IndividualInterview] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize to the JSON wire format, dropping empty optional fields."""
        result: dict[str, Any] = {
            "success": self.success,
            "outcome": self.outcome.value,
            "message": self.message,
            "suggested_times": list(self.suggested_times),
        }
        if self.scheduled_time is not None:
            result["scheduled_time"] = self.scheduled_time
        if self.all_available_slots:
            result["all_available_slots"] = [_as_dict(s) for s in self.all_available_slots]
        if self.availability_summary is not None:
            result["availability_summary"] = _summary_dict(self.availability_summary)
        if self.individual_interviews:
            result["individual_interviews"] = [_as_dict(i) for i in self.individual_interviews]
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str]

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


@dataclass
class SchedulingStats:
    """Raw overlap capacity between the two sides."""
    total_candidate_slots: int
    total_interviewer_slots: int
    overlapping_days: int
    total_overlapping_hours: float

    def to_dict(self) -> dict:
        return {
            "totalCandidateSlots": self.total_candidate_slots,
            "totalInterviewerSlots": self.total_interviewer_slots,
            "overlappingDays": self.overlapping_days,
            "totalOverlappingHours": self.total_overlapping_hours,
        }


def _as_dict(record) -> dict:
    return {f.name: _plain(getattr(record, f.name)) for f in fields(record)}


def _plain(value):
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return _as_dict(value)
    return value


def _summary_dict(summary: AvailabilitySummary) -> dict:
    def party(p: PartySummary) -> dict:
        data = {
            "total_days": p.total_days,
            "total_slots": p.total_slots,
            "availability_by_date": [_as_dict(d) for d in p.availability_by_date],
        }
        if p.total_interviewers is not None:
            data = {"total_interviewers": p.total_interviewers, **data}
        return data

    return {
        "candidate": party(summary.candidate),
        "interviewers": party(summary.interviewers),
        "overlapping_days": list(summary.overlapping_days),
    }
