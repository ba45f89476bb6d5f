"""Doubles court rotation: fair play counts and fresh partners across rounds."""

from court_rotation.models import (
    MIXED_TIER,
    TIERS,
    CourtAssignment,
    InsufficientParticipantsError,
    Participant,
    Round,
    Schedule,
    SessionConfig,
)
from court_rotation.scheduling import (
    AppearanceCounter,
    CourtGroupSelector,
    DoublesRotationScheduler,
    PartnershipLedger,
    combinations,
    generate_schedule,
    generate_tiered_schedule,
)
