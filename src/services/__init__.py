"""
Service layer for Hearsay.

Services own the reputation rules: the relationship ledger, the pure
faction reputation functions, and the feedback loop between them.
"""

from __future__ import annotations

from src.services.feedback import (
    FactionEvent,
    FeedbackCoordinator,
    FeedbackTuning,
    InteractionOutcome,
    InteractionResult,
)
from src.services.mitigation import InteractionContext, Profession
from src.services.relationships import RelationshipStore
from src.services.reputation import (
    ReputationRequirement,
    calculate_price_modifier,
    get_faction_standing,
    get_reputation_tier,
    meets_all_requirements,
    meets_requirement,
    update_faction,
)

__all__ = [
    "FactionEvent",
    "FeedbackCoordinator",
    "FeedbackTuning",
    "InteractionContext",
    "InteractionOutcome",
    "InteractionResult",
    "Profession",
    "RelationshipStore",
    "ReputationRequirement",
    "calculate_price_modifier",
    "get_faction_standing",
    "get_reputation_tier",
    "meets_all_requirements",
    "meets_requirement",
    "update_faction",
]
