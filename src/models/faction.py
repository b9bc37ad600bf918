"""
Faction Models for Hearsay.

Defines the six canonical social factions of the city, their static
metadata, and the aggregate reputation state the player holds with them.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (1.5 -> 2, -1.5 -> -2)."""
    rounded = math.floor(abs(value) + 0.5)
    return int(math.copysign(rounded, value)) if rounded else 0


class Faction(str, Enum):
    """The canonical factions tracked by the reputation system."""

    ELITE = "elite"
    COMMON_FOLK = "common_folk"
    CHURCH = "church"
    INDIGENOUS = "indigenous"
    GUILD = "guild"
    MERCHANTS = "merchants"

    @classmethod
    def parse(cls, value: str | Faction | None) -> Faction | None:
        """
        Resolve a faction id, ignoring case and word separators.

        "elite", "ELITE", "commonFolk" and "common_folk" all resolve.
        Returns None for anything that is not a canonical id.
        """
        if value is None:
            return None
        if isinstance(value, Faction):
            return value
        key = _normalize_id(value)
        for faction in cls:
            if key in (_normalize_id(faction.value), _normalize_id(faction.name)):
                return faction
        return None


def _normalize_id(value: str) -> str:
    return value.lower().replace("_", "").replace("-", "").replace(" ", "")


class FactionInfo(BaseModel):
    """Static display metadata for a faction."""

    model_config = ConfigDict(frozen=True)

    name: str
    icon: str
    description: str
    color: str


FACTION_INFO: dict[Faction, FactionInfo] = {
    Faction.ELITE: FactionInfo(
        name="Elite Society",
        icon="🏛️",
        description="Criollos and Spanish nobility",
        color="#8b5cf6",
    ),
    Faction.COMMON_FOLK: FactionInfo(
        name="Common Folk",
        icon="👥",
        description="Mestizos, workers, and everyday patients",
        color="#10b981",
    ),
    Faction.CHURCH: FactionInfo(
        name="The Church",
        icon="⛪",
        description="Clergy and religious authorities",
        color="#f59e0b",
    ),
    Faction.INDIGENOUS: FactionInfo(
        name="Indigenous",
        icon="🌿",
        description="Native healers and patients",
        color="#059669",
    ),
    Faction.GUILD: FactionInfo(
        name="Medical Guild",
        icon="⚕️",
        description="Physicians and licensed apothecaries",
        color="#ef4444",
    ),
    Faction.MERCHANTS: FactionInfo(
        name="Merchants",
        icon="🏪",
        description="Shopkeepers and traders",
        color="#3b82f6",
    ),
}


# Ordered: the first matching keyword group wins.
FACTION_KEYWORDS: tuple[tuple[Faction, tuple[str, ...]], ...] = (
    (Faction.ELITE, ("elite", "criollo", "noble")),
    (Faction.CHURCH, ("church", "clergy", "priest")),
    (Faction.GUILD, ("guild", "artisan", "apothecary")),
    (Faction.MERCHANTS, ("merchant", "trader")),
    (Faction.INDIGENOUS, ("indigenous", "indio", "nahua")),
    (Faction.COMMON_FOLK, ("common", "laborer", "peasant")),
)


def canonicalize_faction(label: str | None) -> Faction | None:
    """
    Map a free-text faction or caste label to a canonical faction.

    Matching is by case-insensitive substring against FACTION_KEYWORDS,
    first match wins. Returns None when nothing matches; callers treat
    that as "no faction effect".
    """
    if not label:
        return None

    lowered = label.lower()
    for faction, keywords in FACTION_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return faction
    return None


Score = Annotated[int, Field(ge=0, le=100)]


class ReputationState(BaseModel):
    """
    The player's aggregate standing with every faction.

    Immutable: every change produces a new state. `factions` is a
    read-only mapping. `overall` is derived from the faction scores on
    read and cannot be set independently.
    """

    model_config = ConfigDict(frozen=True)

    factions: dict[Faction, Score]

    @field_validator("factions", mode="after")
    @classmethod
    def freeze_scores(cls, scores: dict[Faction, int]) -> Mapping[Faction, int]:
        return MappingProxyType(dict(scores))

    @field_serializer("factions")
    def serialize_scores(self, scores: Mapping[Faction, int]) -> dict[Faction, int]:
        return dict(scores)

    def __deepcopy__(self, memo: dict | None = None) -> ReputationState:
        # Nothing inside is mutable, so a shallow copy is already independent.
        return self.model_copy()

    @model_validator(mode="after")
    def require_all_factions(self) -> ReputationState:
        missing = [f.value for f in Faction if f not in self.factions]
        if missing:
            raise ValueError(f"Missing faction scores: {', '.join(missing)}")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall(self) -> int:
        """Rounded mean of all faction scores."""
        return round_half_away(sum(self.factions.values()) / len(self.factions))

    def score(self, faction: Faction) -> int:
        """Get the score for one faction."""
        return self.factions[faction]

    def snapshot(self) -> dict:
        """Plain-data view for UI and read-only callers."""
        return {
            "overall": self.overall,
            "factions": {faction.value: score for faction, score in self.factions.items()},
        }


INITIAL_FACTION_SCORES: dict[Faction, int] = {
    Faction.ELITE: 40,
    Faction.COMMON_FOLK: 60,
    Faction.CHURCH: 50,
    Faction.INDIGENOUS: 30,
    Faction.GUILD: 35,
    Faction.MERCHANTS: 55,
}


def initial_reputation() -> ReputationState:
    """Create the session-start reputation state."""
    return ReputationState(factions=dict(INITIAL_FACTION_SCORES))


def uniform_reputation(score: int = 50) -> ReputationState:
    """Create a reputation state with every faction at the same score."""
    return ReputationState(factions={faction: score for faction in Faction})
