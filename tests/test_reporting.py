"""Unit tests for reporting, schedule validation and the command line interface."""

import csv
import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from court_rotation.cli import main
from court_rotation.models import CourtAssignment, Participant, Round, Schedule
from court_rotation.reporting import (
    export_schedule_csv,
    format_schedule,
    partnership_counts,
    play_count_stats,
    schedule_to_dict,
)
from court_rotation.scheduling import generate_schedule, generate_tiered_schedule
from court_rotation.validation import ScheduleValidator


def make_players(count):
    return [Participant(id=i, name=f"P{i}") for i in range(1, count + 1)]


class TestReporting(unittest.TestCase):
    """Test derived schedule views"""

    def test_play_counts_include_resting_players(self):
        schedule = generate_schedule(make_players(5), 1, 1)
        stats = play_count_stats(schedule)

        self.assertEqual([p.id for p, _ in stats], [1, 2, 3, 4, 5])
        self.assertEqual([count for _, count in stats], [1, 1, 1, 1, 0])

    def test_play_counts_most_first(self):
        schedule = generate_schedule(make_players(5), 1, 2)
        stats = play_count_stats(schedule)

        # Round 2 seats P5 first, then P1..P3
        self.assertEqual([count for _, count in stats], [2, 2, 2, 1, 1])
        self.assertEqual([p.id for p, _ in stats][-2:], [4, 5])

    def test_partnership_counts(self):
        schedule = generate_schedule(make_players(4), 1, 3)
        self.assertEqual(partnership_counts(schedule), {(1, 2): 3, (3, 4): 3})

    def test_format_schedule(self):
        text = format_schedule(generate_schedule(make_players(6), 2, 1))

        self.assertIn("Round 1:", text)
        self.assertIn("Court 2: P5 / P6  vs  (empty) / (empty)", text)
        self.assertIn("Play counts", text)

    def test_format_tiered_schedule(self):
        text = format_schedule(generate_tiered_schedule(make_players(4), 1, 1))
        self.assertIn("Court 1 [beginner]", text)

    def test_schedule_to_dict(self):
        data = schedule_to_dict(generate_schedule(make_players(6), 2, 1))

        court = data["rounds"][0]["courts"][1]
        self.assertEqual(court["court_number"], 2)
        self.assertIsNone(court["tier"])
        self.assertEqual(court["slots"][2:], [None, None])
        self.assertEqual(data["play_counts"]["6"], 1)
        json.dumps(data)

    def test_export_csv(self):
        schedule = generate_schedule(make_players(8), 2, 3)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "schedule.csv")
            export_schedule_csv(schedule, path)
            with open(path, encoding="utf-8", newline="") as f:
                rows = list(csv.reader(f))

        self.assertEqual(rows[0][:3], ["round", "court", "tier"])
        self.assertEqual(len(rows), 1 + 6)


class TestScheduleValidator(unittest.TestCase):
    """Test constraint validation with hand-built schedules"""

    def setUp(self):
        self.players = make_players(8)

    def court(self, number, *indexes):
        slots = tuple(self.players[i] if i is not None else None for i in indexes)
        return CourtAssignment(number, slots)

    def test_duplicate_on_court(self):
        schedule = Schedule(
            rounds=(Round(1, (self.court(1, 0, 1, 2, 0),)),),
            participants=tuple(self.players[:3]),
        )

        valid, violations = ScheduleValidator.validate_unique_per_court(schedule)
        self.assertFalse(valid)
        self.assertIn("participant 1", violations[0])

    def test_duplicate_in_round(self):
        schedule = Schedule(
            rounds=(Round(1, (self.court(1, 0, 1, 2, 3), self.court(2, 3, 4, 5, 6))),),
        )

        valid, violations = ScheduleValidator.validate_unique_per_round(schedule)
        self.assertFalse(valid)
        self.assertIn("plays on 2 courts", violations[0])

    def test_round_count_and_court_numbers(self):
        schedule = Schedule(
            rounds=(Round(1, (self.court(2, 0, 1, 2, 3),)),),
        )

        valid, _ = ScheduleValidator.validate_round_count(schedule, 2)
        self.assertFalse(valid)
        valid, violations = ScheduleValidator.validate_court_numbers(schedule, 1)
        self.assertFalse(valid)
        self.assertIn("not sequential", violations[0])

    def test_appearance_spread(self):
        schedule = Schedule(
            rounds=(
                Round(1, (self.court(1, 0, 1, 2, 3),)),
                Round(2, (self.court(1, 0, 1, 2, 3),)),
            ),
            participants=tuple(self.players),
        )

        valid, violations = ScheduleValidator.validate_appearance_spread(schedule)
        self.assertFalse(valid)
        self.assertIn("spread is 2", violations[0])

    def test_generated_schedule_passes(self):
        schedule = generate_schedule(self.players, 1, 6)
        valid, violations = ScheduleValidator.validate_all(schedule, 1, 6)
        self.assertTrue(valid, violations)


class TestCommandLine(unittest.TestCase):
    """Test the command line entry point"""

    def run_main(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            code = main(list(argv))
        return code, output.getvalue()

    def test_example_with_validation(self):
        code, output = self.run_main(
            "--example", "10", "--courts", "2", "--rounds", "4", "--validate"
        )
        self.assertEqual(code, 0)
        self.assertIn("ALL CONSTRAINTS SATISFIED", output)

    def test_tiered_example(self):
        code, output = self.run_main(
            "--example", "12", "--courts", "3", "--rounds", "2", "--tiered"
        )
        self.assertEqual(code, 0)
        self.assertIn("Tiered schedule", output)

    def test_too_few_players(self):
        code, output = self.run_main("--example", "3")
        self.assertEqual(code, 1)
        self.assertIn("At least 4 participants", output)

        code, _ = self.run_main("--example", "3", "--tiered")
        self.assertEqual(code, 1)

    def test_out_of_range_courts(self):
        code, output = self.run_main("--example", "8", "--courts", "0")
        self.assertEqual(code, 1)
        self.assertIn("Number of courts", output)

    def test_malformed_roster_files(self):
        rosters = {
            "mixed_ids.json": [
                {"id": "ann", "name": "Ann"},
                {"name": "Bob"},
                {"name": "Cy"},
                {"name": "Dee"},
            ],
            "numeric_tier.json": [{"name": f"P{i}", "tier": 2} for i in range(4)],
            "plain_names.json": ["Ann", "Bob", "Cy", "Dee"],
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            for name, data in rosters.items():
                with self.subTest(roster=name):
                    path = os.path.join(tmpdir, name)
                    with open(path, "w", encoding="utf-8") as f:
                        json.dump(data, f)

                    code, output = self.run_main("--roster", path)
                    self.assertEqual(code, 1)
                    self.assertIn("❌", output)

    def test_unwritable_export_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            missing_dir = os.path.join(tmpdir, "missing")
            for flag, filename in (("--export-json", "s.json"), ("--export-csv", "s.csv")):
                with self.subTest(flag=flag):
                    code, output = self.run_main(
                        "--example", "8", flag, os.path.join(missing_dir, filename)
                    )
                    self.assertEqual(code, 1)
                    self.assertIn("❌", output)

    def test_missing_roster(self):
        code, _ = self.run_main()
        self.assertEqual(code, 1)

    def test_roster_file_and_exports(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            roster_path = os.path.join(tmpdir, "roster.json")
            json_path = os.path.join(tmpdir, "schedule.json")
            csv_path = os.path.join(tmpdir, "schedule.csv")

            code, _ = self.run_main("--example", "6", "--save-example", roster_path)
            self.assertEqual(code, 0)

            code, _ = self.run_main(
                "--roster", roster_path, "--rounds", "3",
                "--export-json", json_path, "--export-csv", csv_path,
            )
            self.assertEqual(code, 0)

            with open(json_path, encoding="utf-8") as f:
                data = json.load(f)
            self.assertEqual(len(data["rounds"]), 3)
            self.assertTrue(os.path.exists(csv_path))


if __name__ == "__main__":
    unittest.main()
