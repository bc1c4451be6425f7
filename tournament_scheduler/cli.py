"""
Command line entry point for the Tournament Match Scheduler.

    python -m tournament_scheduler.cli schedule bracket.json --validate
    python -m tournament_scheduler.cli reschedule live.json --verbose

The JSON file holds the same body as POST /api/schedule (or /api/reschedule).
"""

import argparse
import json
import logging
import sys
from datetime import datetime

from pydantic import ValidationError

from tournament_scheduler.api.schemas import ScheduleRequest, RescheduleRequest
from tournament_scheduler.core.exceptions import SchedulingError, FeasibilityError
from tournament_scheduler.core.logging_config import setup_logging
from tournament_scheduler.services.scheduler import schedule_matches, reschedule_matches
from tournament_scheduler.services.validator import ScheduleValidator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tournament-scheduler",
        description="Tournament Match Scheduler - place matches on courts with rest and dependency constraints"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("schedule", "Schedule every match of a tournament"),
        ("reschedule", "Re-plan the pending matches after some have been played"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("file", help="JSON file with matches, courts and config")
        command.add_argument(
            "--validate",
            action="store_true",
            help="Re-check the produced schedule against every hard constraint"
        )
        command.add_argument(
            "--verbose",
            action="store_true",
            help="Enable verbose output (log every placement)"
        )

    return parser


def _load_payload(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def main(argv=None) -> int:
    """
    Run one scheduling call from a JSON file and print the report.

    Returns:
        0 on success, 1 on configuration, feasibility or input errors
    """
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    print("=" * 60)
    print("TOURNAMENT MATCH SCHEDULER")
    print("=" * 60)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    try:
        payload = _load_payload(args.file)

        if args.command == "reschedule":
            request = RescheduleRequest.model_validate(payload)
            matches, courts, config = request.to_domain()
            result = reschedule_matches(matches, courts, config)
            completed = config.completed_matches
        else:
            request = ScheduleRequest.model_validate(payload)
            matches, courts, config = request.to_domain()
            result = schedule_matches(matches, courts, config)
            completed = None

        validator = ScheduleValidator(config)
        print("\n" + validator.generate_schedule_report(result))

        if args.validate:
            validation = validator.validate_schedule(result, matches, completed)
            print("\nVALIDATION SUMMARY")
            print(validation.get_summary())
            for error in validation.errors:
                print(f"  - {error}")
            if not validation.is_valid:
                print("WARNING: Schedule has hard constraint violations!")

        return 0

    except FeasibilityError as e:
        print(f"\nERROR: {e}")
        print(f"Scheduled {e.placed} of {e.total} matches")
        if e.unplaced:
            print(f"Unplaced: {', '.join(str(match_id) for match_id in e.unplaced)}")
        return 1

    except SchedulingError as e:
        print(f"\nERROR: {e}")
        return 1

    except (OSError, ValueError, ValidationError) as e:
        print(f"\nERROR: Could not read {args.file}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
