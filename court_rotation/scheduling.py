"""Core scheduling logic: appearance fairness, partner rotation and court filling."""

import logging
import time as time_module
from itertools import combinations as index_combinations
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set

from court_rotation.models import (
    MIN_PARTICIPANTS,
    MIXED_TIER,
    PLAYERS_PER_COURT,
    SEARCH_LIMIT,
    TIERS,
    CourtAssignment,
    InsufficientParticipantsError,
    Participant,
    PartnershipKey,
    Round,
    Schedule,
)

logger = logging.getLogger(__name__)


def combinations(pool: Sequence[Participant], k: int) -> Iterator[List[Participant]]:
    """Lazily yield every k-element subset of pool in index-combinatorial order.

    Each subset preserves the relative order of pool. A fresh iterator is built
    on every call, so two calls with the same pool yield identical sequences.
    """
    if k > len(pool):
        return
    for combo in index_combinations(pool, k):
        yield list(combo)


def partnership_key(first: Participant, second: Participant) -> PartnershipKey:
    """Canonical key for two teammates, independent of seating order"""
    low, high = sorted((first.id, second.id), key=lambda i: (type(i).__name__, i))
    return low, high


class AppearanceCounter:
    """Number of rounds each participant has been seated so far"""

    def __init__(self, participants: Iterable[Participant] = ()):
        self._counts: Dict[object, int] = {p.id: 0 for p in participants}

    def count(self, participant: Participant) -> int:
        return self._counts.get(participant.id, 0)

    def increment(self, participants: Iterable[Optional[Participant]]):
        """Add one appearance for every seated participant"""
        for participant in participants:
            if participant is not None:
                self._counts[participant.id] = self.count(participant) + 1

    def order(self, participants: Iterable[Participant]) -> List[Participant]:
        """Participants sorted by fewest appearances, roster order kept on ties"""
        return sorted(participants, key=self.count)

    def as_dict(self) -> Dict[object, int]:
        return dict(self._counts)


class PartnershipLedger:
    """Partnerships already formed during one scheduling run"""

    def __init__(self):
        self._pairs: Set[PartnershipKey] = set()

    def __contains__(self, key: PartnershipKey) -> bool:
        return key in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    @staticmethod
    def court_keys(group: Sequence[Participant]) -> List[PartnershipKey]:
        """Team A (slots 0-1) and team B (slots 2-3) keys of a group of four"""
        return [
            partnership_key(group[0], group[1]),
            partnership_key(group[2], group[3]),
        ]

    def collisions(self, group: Sequence[Participant]) -> int:
        """How many of the group's two partnerships were already formed"""
        return sum(1 for key in self.court_keys(group) if key in self._pairs)

    def record(self, group: Sequence[Optional[Participant]]):
        """Remember both partnerships of a fully seated court"""
        if len(group) < PLAYERS_PER_COURT or any(p is None for p in group[:4]):
            return
        self._pairs.update(self.court_keys(group))

    def pairs(self) -> Set[PartnershipKey]:
        return set(self._pairs)


class CourtGroupSelector:
    """Pick four participants for one court with the fewest repeated partnerships"""

    def __init__(self, search_limit: int = SEARCH_LIMIT):
        self.search_limit = search_limit

    def select_group(
        self, pool: Sequence[Participant], ledger: PartnershipLedger
    ) -> List[Participant]:
        if len(pool) <= PLAYERS_PER_COURT:
            return list(pool)

        best_group = None
        lowest_collisions = None
        examined = 0

        for candidate in islice(
            combinations(pool, PLAYERS_PER_COURT), self.search_limit
        ):
            examined += 1
            collisions = ledger.collisions(candidate)
            if lowest_collisions is None or collisions < lowest_collisions:
                lowest_collisions = collisions
                best_group = candidate
                if collisions == 0:
                    break

        logger.debug(
            f"Examined {examined} groupings from a pool of {len(pool)}, "
            f"best has {lowest_collisions} repeated partnerships"
        )
        return best_group or list(pool[:PLAYERS_PER_COURT])


def _pad(group: List[Participant]) -> tuple:
    return tuple(group) + (None,) * (PLAYERS_PER_COURT - len(group))


class DoublesRotationScheduler:
    """Main scheduler building rounds of doubles courts.

    The scheduler itself holds no per-run state: every call builds its own
    appearance counters and partnership ledgers.
    """

    def __init__(
        self,
        search_limit: int = SEARCH_LIMIT,
        selector: Optional[CourtGroupSelector] = None,
    ):
        self.selector = selector or CourtGroupSelector(search_limit)

    def schedule(
        self, participants: Sequence[Participant], court_count: int, round_count: int
    ) -> Schedule:
        """Build round_count rounds of up to court_count courts from one roster"""
        if len(participants) < MIN_PARTICIPANTS:
            raise InsufficientParticipantsError(len(participants))

        start_time = time_module.time()
        logger.info(
            f"🏸 Scheduling {round_count} rounds on {court_count} courts for {len(participants)} participants"
        )

        appearances = AppearanceCounter(participants)
        ledger = PartnershipLedger()
        rounds = [
            self._build_round(
                round_index + 1, participants, court_count, appearances, ledger
            )
            for round_index in range(round_count)
        ]

        logger.info(
            f"✅ Schedule generated in {time_module.time() - start_time:.3f} seconds "
            f"({len(ledger)} distinct partnerships)"
        )
        return Schedule(rounds=tuple(rounds), participants=tuple(participants))

    def _build_round(
        self,
        round_number: int,
        participants: Sequence[Participant],
        court_count: int,
        appearances: AppearanceCounter,
        ledger: PartnershipLedger,
    ) -> Round:
        capacity = court_count * PLAYERS_PER_COURT
        available = appearances.order(participants)[:capacity]
        courts = []

        for court_index in range(court_count):
            if not available:
                break

            if len(available) >= PLAYERS_PER_COURT:
                group = self.selector.select_group(available, ledger)
                ledger.record(group)
            else:
                # Leftovers share one padded court
                group = list(available)

            selected_ids = {p.id for p in group}
            available = [p for p in available if p.id not in selected_ids]
            appearances.increment(group)
            courts.append(CourtAssignment(court_index + 1, _pad(group)))

            if len(group) < PLAYERS_PER_COURT:
                break

        logger.debug(f"Round {round_number}: {len(courts)} courts filled")
        return Round(round_number=round_number, courts=tuple(courts))

    def schedule_by_tier(
        self, participants: Sequence[Participant], court_count: int, round_count: int
    ) -> Schedule:
        """Build rounds preferring same-tier courts with one mixed fallback court"""
        start_time = time_module.time()
        logger.info(
            f"🏸 Scheduling {round_count} tiered rounds on {court_count} courts for {len(participants)} participants"
        )

        buckets = {
            tier: [p for p in participants if p.tier == tier] for tier in TIERS
        }
        for tier, members in buckets.items():
            if 0 < len(members) < MIN_PARTICIPANTS:
                logger.warning(
                    f"⚠️  Tier {tier} has only {len(members)} participants, they play in the mixed pool"
                )

        appearances = {tier: AppearanceCounter(buckets[tier]) for tier in TIERS}
        appearances[MIXED_TIER] = AppearanceCounter(participants)
        ledgers = {tier: PartnershipLedger() for tier in TIERS + (MIXED_TIER,)}

        rounds = [
            self._build_tiered_round(
                round_index + 1,
                participants,
                buckets,
                court_count,
                appearances,
                ledgers,
            )
            for round_index in range(round_count)
        ]

        logger.info(
            f"✅ Tiered schedule generated in {time_module.time() - start_time:.3f} seconds"
        )
        return Schedule(
            rounds=tuple(rounds), participants=tuple(participants), tiered=True
        )

    def _pick_court(
        self,
        candidates: Sequence[Participant],
        appearances: AppearanceCounter,
        ledger: PartnershipLedger,
    ) -> List[Participant]:
        """Fewest-appearance four of candidates, recorded against counter and ledger"""
        selected = appearances.order(candidates)[:PLAYERS_PER_COURT]
        group = self.selector.select_group(selected, ledger)
        appearances.increment(group)
        ledger.record(group)
        return group

    def _build_tiered_round(
        self,
        round_number: int,
        participants: Sequence[Participant],
        buckets: Dict[str, List[Participant]],
        court_count: int,
        appearances: Dict[str, AppearanceCounter],
        ledgers: Dict[str, PartnershipLedger],
    ) -> Round:
        courts = []
        used_ids = set()

        for tier in TIERS:
            members = buckets[tier]
            if len(members) < MIN_PARTICIPANTS or len(courts) >= court_count:
                continue

            available = [p for p in members if p.id not in used_ids]
            if len(available) < PLAYERS_PER_COURT:
                continue

            group = self._pick_court(available, appearances[tier], ledgers[tier])
            used_ids.update(p.id for p in group)
            courts.append(CourtAssignment(len(courts) + 1, _pad(group), tier))

        remaining = [p for p in participants if p.id not in used_ids]
        if len(remaining) >= PLAYERS_PER_COURT and len(courts) < court_count:
            group = self._pick_court(
                remaining, appearances[MIXED_TIER], ledgers[MIXED_TIER]
            )
            courts.append(CourtAssignment(len(courts) + 1, _pad(group), MIXED_TIER))

        logger.debug(
            f"Round {round_number}: "
            + ", ".join(f"court {c.court_number} ({c.tier})" for c in courts)
        )
        return Round(round_number=round_number, courts=tuple(courts))


def generate_schedule(
    participants: Sequence[Participant],
    court_count: int,
    round_count: int,
    search_limit: int = SEARCH_LIMIT,
) -> Schedule:
    """Standard schedule using a fresh scheduler"""
    return DoublesRotationScheduler(search_limit).schedule(
        participants, court_count, round_count
    )


def generate_tiered_schedule(
    participants: Sequence[Participant],
    court_count: int,
    round_count: int,
    search_limit: int = SEARCH_LIMIT,
) -> Schedule:
    """Tier-stratified schedule using a fresh scheduler"""
    return DoublesRotationScheduler(search_limit).schedule_by_tier(
        participants, court_count, round_count
    )
