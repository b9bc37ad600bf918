"""
Character data interface definitions for Hearsay.

Uses Protocol classes to define the contract for character lookups.
Character rosters are static content owned by another system; the
reputation layer only needs to read them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.models import Character, Faction


class CharacterDirectory(Protocol):
    """
    Interface for character lookups.

    Answers "what faction does this character belong to" and
    "who belongs to this faction" for the feedback coordinator.
    """

    def save_character(self, character: Character) -> None:
        """Insert or update a character."""
        ...

    def get_character(self, character_id: str) -> Character | None:
        """Get a character by ID."""
        ...

    def members_of(self, faction: Faction) -> list[Character]:
        """Get every character whose canonical faction is `faction`."""
        ...

    def all_characters(self) -> list[Character]:
        """Get every known character."""
        ...
