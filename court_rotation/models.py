"""Data models for doubles court rotation scheduling."""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

PLAYERS_PER_COURT = 4
# Candidate groupings examined per court
SEARCH_LIMIT = 100
MIN_PARTICIPANTS = PLAYERS_PER_COURT

# Processing order of the tiered scheduler
TIERS: Tuple[str, ...] = ("beginner", "intermediate", "advanced")
MIXED_TIER = "mixed"

Tier = Literal["beginner", "intermediate", "advanced"]
CourtTier = Literal["beginner", "intermediate", "advanced", "mixed"]

MAX_COURTS = 10
MAX_ROUNDS = 20


class InsufficientParticipantsError(ValueError):
    """Raised when the roster cannot fill even a single court"""

    def __init__(self, participant_count: int, required: int = MIN_PARTICIPANTS):
        self.participant_count = participant_count
        self.required = required
        super().__init__(
            f"At least {required} participants are required, got {participant_count}"
        )


@dataclass(frozen=True)
class Participant:
    """One person eligible for scheduling"""

    id: Union[int, str]
    name: str
    tier: Tier = "beginner"

    def __post_init__(self):
        """Validate participant after initialization"""
        if self.tier not in TIERS:
            raise ValueError(
                f"Unknown tier '{self.tier}' for {self.name}, expected one of {', '.join(TIERS)}"
            )

    def __str__(self):
        return self.name


# Canonical (low id, high id) pair of teammates
PartnershipKey = Tuple[Union[int, str], Union[int, str]]
Slot = Optional[Participant]


@dataclass(frozen=True)
class CourtAssignment:
    """Four slots on one court; slots 0-1 are team A and slots 2-3 team B"""

    court_number: int
    slots: Tuple[Slot, Slot, Slot, Slot]
    tier: Optional[CourtTier] = None

    @property
    def team_a(self) -> Tuple[Slot, Slot]:
        return self.slots[0], self.slots[1]

    @property
    def team_b(self) -> Tuple[Slot, Slot]:
        return self.slots[2], self.slots[3]

    @property
    def participants(self) -> Tuple[Participant, ...]:
        """Seated participants, empty slots skipped"""
        return tuple(p for p in self.slots if p is not None)

    @property
    def is_full(self) -> bool:
        return len(self.participants) == PLAYERS_PER_COURT

    def __str__(self):
        def side(team):
            return " / ".join(p.name if p else "(empty)" for p in team)

        badge = f" [{self.tier}]" if self.tier else ""
        return f"Court {self.court_number}{badge}: {side(self.team_a)}  vs  {side(self.team_b)}"


@dataclass(frozen=True)
class Round:
    """One batch of courts played simultaneously"""

    round_number: int
    courts: Tuple[CourtAssignment, ...] = ()

    @property
    def participants(self) -> Tuple[Participant, ...]:
        return tuple(p for court in self.courts for p in court.participants)


@dataclass(frozen=True)
class Schedule:
    """Result of schedule generation"""

    rounds: Tuple[Round, ...]
    participants: Tuple[Participant, ...] = ()
    tiered: bool = False

    def __len__(self):
        return len(self.rounds)

    def __iter__(self):
        return iter(self.rounds)

    def __getitem__(self, index):
        return self.rounds[index]


@dataclass
class SessionConfig:
    """Session parameters supplied by the front end"""

    court_count: int = 1
    round_count: int = 1
    tiered: bool = False
    search_limit: int = SEARCH_LIMIT

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not 1 <= self.court_count <= MAX_COURTS:
            raise ValueError(f"Number of courts must be between 1 and {MAX_COURTS}")
        if not 1 <= self.round_count <= MAX_ROUNDS:
            raise ValueError(f"Number of rounds must be between 1 and {MAX_ROUNDS}")
        if self.search_limit <= 0:
            raise ValueError("Search limit must be positive")
