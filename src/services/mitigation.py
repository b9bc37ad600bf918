"""
Reputation loss mitigation for Hearsay.

Some profession abilities soften reputation losses. The feedback
coordinator asks the interaction context for the multipliers that apply
and never needs to know which ability produced them.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from src.models import Faction


class Profession(str, Enum):
    """Professions the player can choose."""

    ALCHEMIST = "alchemist"
    HERBALIST = "herbalist"
    SURGEON = "surgeon"
    POISONER = "poisoner"
    SCHOLAR = "scholar"
    COURT_PHYSICIAN = "court_physician"


# Unlock level -> multiplier on negative reputation deltas. Highest unlocked wins.
NEGATIVE_REPUTATION_MULTIPLIERS: dict[Profession, dict[int, float]] = {
    Profession.POISONER: {
        15: 0.5,  # Shadow Contacts
        25: 0.25,  # Master of Shadows
    },
}

PROTECTED_FACTION = Faction.CHURCH
"""Faction shielded by the poisoner's Shadow Worker ability (the Inquisition)."""

SHADOW_WORKER_LEVEL = 15
SHADOW_WORKER_PROTECTION = 0.75

TOXIC_SUBSTANCES = (
    "mercury",
    "quicksilver",
    "opium",
    "laudanum",
    "arsenic",
    "belladonna",
    "hemlock",
    "nightshade",
    "aconite",
    "antimony",
    "lead",
    "vitriol",
    "aqua fortis",
)


def is_toxic(item_name: str) -> bool:
    """Whether an item name mentions a toxic substance."""
    lowered = item_name.lower()
    return any(substance in lowered for substance in TOXIC_SUBSTANCES)


def get_negative_reputation_multiplier(profession: Profession | None, player_level: int) -> float:
    """Multiplier applied to reputation losses (1.0 = no mitigation)."""
    if profession is None:
        return 1.0

    multiplier = 1.0
    for level, value in sorted(NEGATIVE_REPUTATION_MULTIPLIERS.get(profession, {}).items()):
        if player_level >= level:
            multiplier = value
    return multiplier


def get_faction_protection(
    profession: Profession | None,
    player_level: int,
    item_used: str,
    faction: Faction,
) -> float:
    """Fraction of a reputation loss with `faction` that is prevented (0.0-1.0)."""
    if faction != PROTECTED_FACTION or profession != Profession.POISONER:
        return 0.0
    if player_level < SHADOW_WORKER_LEVEL or not is_toxic(item_used):
        return 0.0
    return SHADOW_WORKER_PROTECTION


class InteractionContext(BaseModel):
    """Optional player context attached to an interaction outcome."""

    profession: Profession | None = None
    player_level: Annotated[int, Field(ge=1)] = 1
    item_used: str = ""

    @field_validator("player_level", mode="before")
    @classmethod
    def unknown_level_is_first(cls, value: object) -> object:
        return 1 if value is None else value

    def mitigate(self, faction: Faction, reputation_delta: int) -> int:
        """
        Soften a reputation loss.

        Gains are returned untouched. Each multiplier re-rounds toward
        zero, so a penalty can shrink but never flip into a bonus.
        """
        if reputation_delta >= 0:
            return reputation_delta

        delta = reputation_delta
        multiplier = get_negative_reputation_multiplier(self.profession, self.player_level)
        if multiplier < 1.0:
            delta = math.ceil(delta * multiplier)

        protection = get_faction_protection(
            self.profession, self.player_level, self.item_used, faction
        )
        if protection > 0 and delta < 0:
            delta = math.ceil(delta * (1 - protection))

        return delta
