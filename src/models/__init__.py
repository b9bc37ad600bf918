"""
Core Data Models for Hearsay.

These models define the reputation ontology: factions and the player's
standing with them, directed character relationships, and the characters
that belong to factions.
"""

from src.models.character import (
    PLAYER_ID,
    Character,
    SocialClass,
    create_character,
)
from src.models.faction import (
    FACTION_INFO,
    FACTION_KEYWORDS,
    INITIAL_FACTION_SCORES,
    Faction,
    FactionInfo,
    ReputationState,
    canonicalize_faction,
    initial_reputation,
    round_half_away,
    uniform_reputation,
)
from src.models.relationship import (
    BASELINE_VALUE,
    HISTORY_LIMIT,
    HistoryEntry,
    RelationshipRecord,
    RelationshipStatus,
    clamp_value,
    status_for_value,
)

__all__ = [
    # Character
    "PLAYER_ID",
    "Character",
    "SocialClass",
    "create_character",
    # Faction
    "FACTION_INFO",
    "FACTION_KEYWORDS",
    "INITIAL_FACTION_SCORES",
    "Faction",
    "FactionInfo",
    "ReputationState",
    "canonicalize_faction",
    "initial_reputation",
    "round_half_away",
    "uniform_reputation",
    # Relationship
    "BASELINE_VALUE",
    "HISTORY_LIMIT",
    "HistoryEntry",
    "RelationshipRecord",
    "RelationshipStatus",
    "clamp_value",
    "status_for_value",
]
