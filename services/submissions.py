"""Reduces stored availability records to the latest submission per user."""

import logging
from datetime import datetime
from typing import Optional, Union

import pytz

from models.entities import Availability, User

logger = logging.getLogger(__name__)

Timestamp = Union[str, datetime, None]


def _as_datetime(value: Timestamp) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Naive timestamps are taken as UTC so they compare with aware ones
    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed


def _is_newer(record: Availability, current: Availability) -> bool:
    record_time = _as_datetime(record.updated_at)
    current_time = _as_datetime(current.updated_at)
    if record_time is None:
        return False
    if current_time is None:
        return True
    return record_time > current_time


def latest_submission_per_user(records: list[Availability]) -> list[Availability]:
    """
    Keep the most recently updated submission for each user.

    A submission replaces earlier ones wholesale; slots are never merged.
    Users appear in the order they were first encountered, and on equal
    timestamps the earlier record wins.
    """
    latest: dict[str, Availability] = {}
    for record in records:
        current = latest.get(record.user_id)
        if current is None or _is_newer(record, current):
            latest[record.user_id] = record

    if len(latest) < len(records):
        logger.debug(
            "Reduced %d availability record(s) to %d latest submission(s)",
            len(records),
            len(latest)
        )
    return list(latest.values())


def split_by_role(
    records: list[Availability],
    users: list[User]
) -> tuple[list[Availability], list[Availability]]:
    """
    Separate records into (candidate, interviewer) lists using the user directory.

    Records whose user is not in the directory are dropped.
    """
    roles = {user.id: user.role for user in users}
    candidate = [r for r in records if roles.get(r.user_id) == "candidate"]
    interviewer = [r for r in records if roles.get(r.user_id) == "interviewer"]
    unknown = len(records) - len(candidate) - len(interviewer)
    if unknown:
        logger.warning("Ignoring %d availability record(s) from unknown users", unknown)
    return candidate, interviewer

