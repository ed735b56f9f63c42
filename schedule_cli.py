"""
Command line entry point for the interview scheduler.

Reads a JSON schedule request (or availability list) and writes the
engine's JSON result to stdout.

Usage:
    python schedule_cli.py schedule request.json --buffer 15 --prefer-nice-times
    python schedule_cli.py validate availability.json
    python schedule_cli.py stats request.json
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from models.entities import Availability, BusinessHours, ScheduleRequest, SchedulingOptions
from services.scheduling_engine import SchedulingEngine
from services.submissions import latest_submission_per_user
from services.time_utils import is_valid_time_format

# ============================================================================
# CONFIGURATION
# ============================================================================

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def _env_int(name: str, default: int) -> int:
    """Parse an integer env var with a clear error on bad values."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_time(name: str, default: str) -> str:
    raw = os.getenv(name) or default
    if not is_valid_time_format(raw):
        raise ValueError(f"Invalid HH:MM time for {name}: {raw!r}")
    return raw


def load_default_options() -> SchedulingOptions:
    """Build engine defaults from SCHEDULER_* environment variables."""
    options = SchedulingOptions(
        duration=_env_int("SCHEDULER_DEFAULT_DURATION", 60),
        buffer_time=_env_int("SCHEDULER_BUFFER_MINUTES", 30),
        business_hours=BusinessHours(
            start=_env_time("SCHEDULER_BUSINESS_HOURS_START", "09:00"),
            end=_env_time("SCHEDULER_BUSINESS_HOURS_END", "17:00"),
        ),
        max_suggestions=_env_int("SCHEDULER_MAX_SUGGESTIONS", 5),
        prefer_nice_times=_env_bool("SCHEDULER_PREFER_NICE_TIMES", False),
    )
    if options.duration < 1:
        raise ValueError(f"SCHEDULER_DEFAULT_DURATION must be >= 1, got {options.duration}")
    if options.buffer_time < 0:
        raise ValueError(f"SCHEDULER_BUFFER_MINUTES must be >= 0, got {options.buffer_time}")
    if options.max_suggestions < 1:
        raise ValueError(f"SCHEDULER_MAX_SUGGESTIONS must be >= 1, got {options.max_suggestions}")
    return options


def configure_logging(verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


# ============================================================================
# COMMANDS
# ============================================================================

def _load_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def _load_request(path: str) -> ScheduleRequest:
    data = _load_json(path)
    if not isinstance(data, dict):
        raise ValueError("Schedule request must be a JSON object")
    data.setdefault("timezone", os.getenv("SCHEDULER_DEFAULT_TIMEZONE", "UTC"))
    return ScheduleRequest.from_dict(data)


def run_schedule(args: argparse.Namespace, engine: SchedulingEngine) -> int:
    request = _load_request(args.request)
    if args.latest_only:
        request.candidate_availability = latest_submission_per_user(request.candidate_availability)
        request.interviewer_availability = latest_submission_per_user(request.interviewer_availability)

    response = engine.find_optimal_schedule(
        request,
        buffer_time=args.buffer,
        max_suggestions=args.max_suggestions,
        prefer_nice_times=True if args.prefer_nice_times else None,
    )
    _emit(response.to_dict())
    return EXIT_OK if response.success else EXIT_FAILED


def run_validate(args: argparse.Namespace, engine: SchedulingEngine) -> int:
    data = _load_json(args.availability)
    if isinstance(data, list):
        result = engine.validate_availability([Availability.from_dict(a) for a in data])
        _emit(result.to_dict())
        return EXIT_OK if result.valid else EXIT_FAILED

    request = ScheduleRequest.from_dict(data)
    results = {
        "candidate": engine.validate_availability(request.candidate_availability),
        "interviewer": engine.validate_availability(request.interviewer_availability),
    }
    _emit({side: result.to_dict() for side, result in results.items()})
    return EXIT_OK if all(r.valid for r in results.values()) else EXIT_FAILED


def run_stats(args: argparse.Namespace, engine: SchedulingEngine) -> int:
    request = _load_request(args.request)
    stats = engine.get_scheduling_stats(
        request.candidate_availability,
        request.interviewer_availability
    )
    _emit(stats.to_dict())
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Match candidate and interviewer availability into interview slots."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging output.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    schedule = subparsers.add_parser("schedule", help="Find interview slots for a request.")
    schedule.add_argument("request", help="Path to a schedule request JSON file.")
    schedule.add_argument("--buffer", type=int, default=None, help="Minutes between sessions.")
    schedule.add_argument(
        "--max-suggestions",
        type=int,
        default=None,
        help="Cap on scheduled + suggested times.",
    )
    schedule.add_argument(
        "--prefer-nice-times",
        action="store_true",
        help="Rank start times within each overlap by how round they are.",
    )
    schedule.add_argument(
        "--latest-only",
        action="store_true",
        help="Keep only each user's most recent availability submission.",
    )
    schedule.set_defaults(handler=run_schedule)

    validate = subparsers.add_parser("validate", help="Validate availability submissions.")
    validate.add_argument(
        "availability",
        help="Path to an availability list or schedule request JSON file.",
    )
    validate.set_defaults(handler=run_validate)

    stats = subparsers.add_parser("stats", help="Report raw overlap statistics.")
    stats.add_argument("request", help="Path to a schedule request JSON file.")
    stats.set_defaults(handler=run_stats)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        engine = SchedulingEngine(default_options=load_default_options())
        return args.handler(args, engine)
    except (OSError, ValueError) as e:
        logger.error("Could not process input: %s", e)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
