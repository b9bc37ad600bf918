"""
Character Models for Hearsay.

Characters are imported once from content data. The free-text faction
label in that data is resolved to an enumerated faction at import time,
so gameplay code never re-parses labels.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.models.faction import Faction, canonicalize_faction

PLAYER_ID = "player"
"""Entity id of the player in the relationship ledger."""


class SocialClass(str, Enum):
    """Social classes, used to weight a character's influence on their faction."""

    NOBILITY = "nobility"
    ELITE = "elite"
    PROFESSIONAL = "professional"
    MERCHANT = "merchant"
    ARTISAN = "artisan"
    COMMON = "common"
    OUTCAST = "outcast"

    @classmethod
    def parse(cls, value: str | SocialClass | None) -> SocialClass | None:
        """Resolve a class label case-insensitively, None if unknown."""
        if value is None or isinstance(value, SocialClass):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Character(BaseModel):
    """A non-player character as seen by the reputation system."""

    id: str = Field(min_length=1)
    name: str = ""

    faction_label: str | None = None
    """Faction or caste text as it appeared in content data."""

    faction: Faction | None = None
    """Canonical faction, assigned at import. None: no faction effect."""

    social_class: SocialClass | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> Character:
        """
        Import a character from content data.

        Accepts the roster shape {"id", "name", "social": {"faction", "class"}}.
        Flat "faction"/"social_class" keys are also honoured.
        """
        social = data.get("social") or {}
        label = social.get("faction", data.get("faction"))
        raw_class = social.get("class", data.get("social_class"))
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            faction_label=label,
            faction=canonicalize_faction(label),
            social_class=SocialClass.parse(raw_class),
        )


def create_character(
    character_id: str,
    name: str = "",
    *,
    faction_label: str | None = None,
    faction: Faction | None = None,
    social_class: SocialClass | str | None = None,
) -> Character:
    """
    Create a character.

    Args:
        character_id: Unique id
        name: Display name
        faction_label: Free-text faction/caste; canonicalized if `faction` is not given
        faction: Explicit canonical faction
        social_class: Social class or its label

    Returns:
        A new Character instance
    """
    if faction is None:
        faction = canonicalize_faction(faction_label)
    return Character(
        id=character_id,
        name=name,
        faction_label=faction_label,
        faction=faction,
        social_class=SocialClass.parse(social_class),
    )
