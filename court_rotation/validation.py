"""Constraint validation for generated schedules."""

import math
from collections import Counter
from typing import List, Tuple

from court_rotation.models import PLAYERS_PER_COURT, Schedule
from court_rotation.reporting import play_count_stats


class ScheduleValidator:
    """Helper class to validate schedule constraints"""

    @staticmethod
    def validate_round_count(
        schedule: Schedule, round_count: int
    ) -> Tuple[bool, List[str]]:
        """Validate that the schedule has exactly the requested number of rounds"""
        violations = []

        if len(schedule) != round_count:
            violations.append(
                f"Expected {round_count} rounds but found {len(schedule)}"
            )

        for index, round_ in enumerate(schedule, start=1):
            if round_.round_number != index:
                violations.append(
                    f"Round at position {index} is numbered {round_.round_number}"
                )

        return len(violations) == 0, violations

    @staticmethod
    def validate_slot_count(schedule: Schedule) -> Tuple[bool, List[str]]:
        """Validate that every court has exactly four slots"""
        violations = []

        for round_ in schedule:
            for court in round_.courts:
                if len(court.slots) != PLAYERS_PER_COURT:
                    violations.append(
                        f"Round {round_.round_number}, Court {court.court_number}: "
                        f"{len(court.slots)} slots instead of {PLAYERS_PER_COURT}"
                    )

        return len(violations) == 0, violations

    @staticmethod
    def validate_unique_per_court(schedule: Schedule) -> Tuple[bool, List[str]]:
        """Validate that nobody is seated twice on the same court"""
        violations = []

        for round_ in schedule:
            for court in round_.courts:
                ids = Counter(p.id for p in court.participants)
                for participant_id, count in ids.items():
                    if count > 1:
                        violations.append(
                            f"Round {round_.round_number}, Court {court.court_number}: "
                            f"participant {participant_id} seated {count} times"
                        )

        return len(violations) == 0, violations

    @staticmethod
    def validate_unique_per_round(schedule: Schedule) -> Tuple[bool, List[str]]:
        """Validate that nobody plays on more than one court in a round"""
        violations = []

        for round_ in schedule:
            ids = Counter(p.id for p in round_.participants)
            for participant_id, count in ids.items():
                if count > 1:
                    violations.append(
                        f"Round {round_.round_number}: participant {participant_id} "
                        f"plays on {count} courts"
                    )

        return len(violations) == 0, violations

    @staticmethod
    def validate_court_numbers(
        schedule: Schedule, court_count: int
    ) -> Tuple[bool, List[str]]:
        """Validate that courts are numbered 1..n without gaps and within the budget"""
        violations = []

        for round_ in schedule:
            numbers = [court.court_number for court in round_.courts]
            if numbers != list(range(1, len(numbers) + 1)):
                violations.append(
                    f"Round {round_.round_number}: court numbers {numbers} are not sequential"
                )
            if len(numbers) > court_count:
                violations.append(
                    f"Round {round_.round_number}: {len(numbers)} courts used "
                    f"but only {court_count} available"
                )

        return len(violations) == 0, violations

    @staticmethod
    def validate_appearance_spread(schedule: Schedule) -> Tuple[bool, List[str]]:
        """Validate that total appearances differ by at most the fair share rounding"""
        violations = []

        stats = play_count_stats(schedule)
        if not stats:
            return True, violations

        counts = [count for _, count in stats]
        total_slots = sum(counts)
        fair_share = total_slots / len(counts)
        allowed_spread = math.ceil(fair_share) - math.floor(fair_share)
        spread = max(counts) - min(counts)

        if spread > allowed_spread:
            violations.append(
                f"Appearance spread is {spread} (min {min(counts)}, max {max(counts)}) "
                f"but at most {allowed_spread} is fair"
            )

        return len(violations) == 0, violations

    @staticmethod
    def validate_all(
        schedule: Schedule, court_count: int, round_count: int
    ) -> Tuple[bool, List[str]]:
        """Validate all constraints at once.

        Appearance spread is only a hard constraint for untiered schedules; the
        tiered scheduler balances play inside each tier instead.
        """
        checks = [
            ScheduleValidator.validate_round_count(schedule, round_count),
            ScheduleValidator.validate_slot_count(schedule),
            ScheduleValidator.validate_unique_per_court(schedule),
            ScheduleValidator.validate_unique_per_round(schedule),
            ScheduleValidator.validate_court_numbers(schedule, court_count),
        ]
        if not schedule.tiered:
            checks.append(ScheduleValidator.validate_appearance_spread(schedule))

        all_violations = []
        for _, violations in checks:
            all_violations.extend(violations)

        return all(valid for valid, _ in checks), all_violations
