"""Command line interface for the court rotation scheduler."""

import argparse
import json
import logging
import sys

from court_rotation.models import (
    MIN_PARTICIPANTS,
    InsufficientParticipantsError,
    SessionConfig,
)
from court_rotation.reporting import (
    export_schedule_csv,
    format_schedule,
    schedule_to_dict,
)
from court_rotation.roster import create_example_roster, load_roster, save_roster
from court_rotation.scheduling import DoublesRotationScheduler
from court_rotation.validation import ScheduleValidator

logger = logging.getLogger(__name__)


def run_all_tests() -> bool:
    """Discover and run the unit tests under tests/"""
    import os
    import unittest

    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    suite = unittest.TestLoader().discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=2).run(suite)
    return result.wasSuccessful()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Doubles court rotation scheduler (fair play counts, fresh partners)"
    )
    parser.add_argument("--test", action="store_true", help="Run unit tests")
    parser.add_argument("--roster", type=str, help="JSON or CSV roster file")
    parser.add_argument(
        "--example", type=int, metavar="N", help="Use an example roster of N players"
    )
    parser.add_argument(
        "--save-example", type=str, help="Save the example roster to a JSON file"
    )
    parser.add_argument("--courts", type=int, default=1, help="Number of courts")
    parser.add_argument("--rounds", type=int, default=1, help="Number of rounds")
    parser.add_argument(
        "--tiered", action="store_true", help="Prefer same-tier courts"
    )
    parser.add_argument("--export-json", type=str, help="Export schedule to JSON file")
    parser.add_argument("--export-csv", type=str, help="Export schedule to CSV file")
    parser.add_argument(
        "--validate", action="store_true", help="Validate schedule constraints"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """Main command line interface"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.test:
        print("🧪 Running unit tests...")
        return 0 if run_all_tests() else 1

    if args.save_example:
        roster = create_example_roster(args.example or 12)
        try:
            save_roster(roster, args.save_example)
        except OSError as e:
            logger.error(f"💥 Could not save example roster: {e}")
            print(f"❌ {e}")
            return 1
        print(f"📁 Example roster saved to {args.save_example}")
        return 0

    try:
        if args.roster:
            roster = load_roster(args.roster)
        elif args.example:
            roster = create_example_roster(args.example)
        else:
            print("❌ Please specify --roster, --example N, or --save-example")
            parser.print_help()
            return 1

        config = SessionConfig(
            court_count=args.courts, round_count=args.rounds, tiered=args.tiered
        )

        # The tiered engine tolerates tiny rosters, the front end does not
        if len(roster) < MIN_PARTICIPANTS:
            raise InsufficientParticipantsError(len(roster))

        scheduler = DoublesRotationScheduler(search_limit=config.search_limit)
        if config.tiered:
            schedule = scheduler.schedule_by_tier(
                roster.participants, config.court_count, config.round_count
            )
        else:
            schedule = scheduler.schedule(
                roster.participants, config.court_count, config.round_count
            )
    except (ValueError, KeyError, OSError) as e:
        logger.error(f"💥 Could not build schedule: {e}")
        print(f"❌ {e}")
        return 1

    print(format_schedule(schedule))

    if args.validate:
        print(f"\n🔍 Validating schedule constraints...")
        valid, violations = ScheduleValidator.validate_all(
            schedule, config.court_count, config.round_count
        )
        for violation in violations[:5]:
            print(f"   ❌ {violation}")
        print(
            f"\n🎯 Overall validation: {'✅ ALL CONSTRAINTS SATISFIED' if valid else '❌ CONSTRAINT VIOLATIONS FOUND'}"
        )

    try:
        if args.export_json:
            with open(args.export_json, "w", encoding="utf-8") as f:
                json.dump(schedule_to_dict(schedule), f, indent=2, ensure_ascii=False)
            print(f"💾 Schedule exported to {args.export_json}")

        if args.export_csv:
            export_schedule_csv(schedule, args.export_csv)
            print(f"💾 Schedule exported to {args.export_csv}")
    except OSError as e:
        logger.error(f"💥 Could not export schedule: {e}")
        print(f"❌ {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
