"""Roster management and roster file loading."""

import csv
import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

from court_rotation.models import TIERS, Participant

logger = logging.getLogger(__name__)

EXAMPLE_NAMES = [
    "Aiko", "Ben", "Chloe", "Daiki", "Emma", "Felix", "Grace", "Hiro",
    "Isla", "Jun", "Kai", "Lena", "Mio", "Noah", "Olivia", "Ren",
    "Sara", "Taro", "Umi", "Vera", "Wes", "Yui", "Zane", "Akira",
]


class Roster:
    """Ordered, editable list of participants"""

    def __init__(self, participants: List[Participant] = None):
        self._participants: List[Participant] = []
        for participant in participants or []:
            self._append(participant)

    def _append(self, participant: Participant):
        if not isinstance(participant.id, (int, str)) or isinstance(participant.id, bool):
            raise ValueError(f"Participant id must be an integer or a string: {participant.id!r}")
        if self._participants and type(participant.id) is not type(self._participants[0].id):
            raise ValueError(
                f"Participant id {participant.id!r} mixes integer and string ids in one roster"
            )
        if any(p.id == participant.id for p in self._participants):
            raise ValueError(f"Duplicate participant id: {participant.id}")
        self._participants.append(participant)

    def _next_id(self) -> Union[int, str]:
        """Next free id, of the same type as the ids already in the roster"""
        if self._participants and isinstance(self._participants[0].id, str):
            taken = {p.id for p in self._participants}
            candidate = len(self._participants) + 1
            while str(candidate) in taken:
                candidate += 1
            return str(candidate)
        return max((p.id for p in self._participants), default=0) + 1

    def add(self, name: str, tier: str = "beginner") -> Participant:
        """Add a participant and return it"""
        name = name.strip()
        if not name:
            raise ValueError("Participant name must not be empty")

        participant = Participant(id=self._next_id(), name=name, tier=tier)
        self._append(participant)
        logger.debug(f"Added {participant.name} ({participant.tier}) as #{participant.id}")
        return participant

    def remove(self, participant_id) -> Participant:
        """Remove a participant by id"""
        for index, participant in enumerate(self._participants):
            if participant.id == participant_id:
                return self._participants.pop(index)
        raise KeyError(participant_id)

    @property
    def participants(self) -> Tuple[Participant, ...]:
        return tuple(self._participants)

    def by_tier(self) -> Dict[str, List[Participant]]:
        return {
            tier: [p for p in self._participants if p.tier == tier] for tier in TIERS
        }

    def __len__(self):
        return len(self._participants)

    def __iter__(self) -> Iterator[Participant]:
        return iter(self._participants)


def _participant_from_record(record: dict, position: int) -> Participant:
    if not isinstance(record, dict):
        raise ValueError(f"Roster entry {position} is not an object: {record!r}")

    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Roster entry {position} has no name")

    participant_id = record.get("id")
    if participant_id in (None, ""):
        participant_id = position
    elif isinstance(participant_id, str) and participant_id.isdigit():
        participant_id = int(participant_id)
    elif isinstance(participant_id, bool) or not isinstance(participant_id, (int, str)):
        raise ValueError(f"Roster entry {position} has an invalid id: {participant_id!r}")

    tier = record.get("tier") or "beginner"
    if not isinstance(tier, str):
        raise ValueError(f"Roster entry {position} has an invalid tier: {tier!r}")
    return Participant(id=participant_id, name=name.strip(), tier=tier.strip().lower())


def load_roster(path: Union[str, Path]) -> Roster:
    """Load a roster from a JSON or CSV file"""
    path = Path(path)

    if path.suffix.lower() == ".json":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        records = data["participants"] if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise ValueError("Roster JSON must hold a list of participants")
    elif path.suffix.lower() == ".csv":
        with open(path, "r", encoding="utf-8", newline="") as f:
            records = list(csv.DictReader(f))
    else:
        raise ValueError("Provide a .json or .csv roster file")

    roster = Roster(
        [_participant_from_record(r, i) for i, r in enumerate(records, start=1)]
    )
    logger.info(f"📁 Loaded {len(roster)} participants from {path}")
    return roster


def save_roster(roster: Roster, path: Union[str, Path]):
    """Write a roster as JSON"""
    data = {
        "participants": [
            {"id": p.id, "name": p.name, "tier": p.tier} for p in roster
        ]
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def create_example_roster(size: int = 12) -> Roster:
    """Deterministic demo roster cycling through the tiers"""
    roster = Roster()
    for index in range(size):
        base = EXAMPLE_NAMES[index % len(EXAMPLE_NAMES)]
        name = base if index < len(EXAMPLE_NAMES) else f"{base} {index // len(EXAMPLE_NAMES) + 1}"
        roster.add(name, TIERS[index % len(TIERS)])
    return roster
