"""Derived views of a schedule: play counts, text summaries and exports."""

import csv
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from court_rotation.models import Participant, PartnershipKey, Schedule
from court_rotation.scheduling import PartnershipLedger


def play_count_stats(schedule: Schedule) -> List[Tuple[Participant, int]]:
    """Total appearances of every roster member, most appearances first"""
    counts = Counter(
        p.id for round_ in schedule for court in round_.courts for p in court.participants
    )
    stats = [(p, counts.get(p.id, 0)) for p in schedule.participants]
    return sorted(stats, key=lambda item: -item[1])


def partnership_counts(schedule: Schedule) -> Dict[PartnershipKey, int]:
    """How often each pair of teammates was formed"""
    counts = Counter()
    for round_ in schedule:
        for court in round_.courts:
            if court.is_full:
                counts.update(PartnershipLedger.court_keys(court.slots))
    return dict(counts)


def format_schedule(schedule: Schedule) -> str:
    """Human-readable summary of a schedule"""
    title = "Tiered schedule" if schedule.tiered else "Schedule"
    lines = [f"\n🏸 {title}: {len(schedule)} rounds", "=" * 60]

    for round_ in schedule:
        lines.append(f"Round {round_.round_number}:")
        if not round_.courts:
            lines.append("   (no courts)")
        for court in round_.courts:
            lines.append(f"   {court}")

    lines.append("")
    lines.append("📊 Play counts:")
    for participant, count in play_count_stats(schedule):
        lines.append(f"   {participant.name:15} | {participant.tier:12} | {count}")
    return "\n".join(lines)


def _slot_dict(participant):
    if participant is None:
        return None
    return {"id": participant.id, "name": participant.name, "tier": participant.tier}


def schedule_to_dict(schedule: Schedule) -> Dict[str, Any]:
    """Serialize a schedule for JSON export"""
    return {
        "tiered": schedule.tiered,
        "rounds": [
            {
                "round_number": round_.round_number,
                "courts": [
                    {
                        "court_number": court.court_number,
                        "tier": court.tier,
                        "slots": [_slot_dict(p) for p in court.slots],
                    }
                    for court in round_.courts
                ],
            }
            for round_ in schedule
        ],
        "play_counts": {
            str(participant.id): count
            for participant, count in play_count_stats(schedule)
        },
    }


def export_schedule_csv(schedule: Schedule, path: Union[str, Path]):
    """Write one CSV row per court"""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["round", "court", "tier", "team_a_1", "team_a_2", "team_b_1", "team_b_2"]
        )
        for round_ in schedule:
            for court in round_.courts:
                writer.writerow(
                    [round_.round_number, court.court_number, court.tier or ""]
                    + [p.name if p else "" for p in court.slots]
                )
