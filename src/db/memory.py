"""
In-memory implementation of the character directory.

Stores characters in a dictionary and keeps a faction -> character-id
index up to date on every save, so faction-wide lookups never scan the
whole roster.
"""

from __future__ import annotations

from collections.abc import Iterable
from copy import deepcopy

from src.models import Character, Faction


class InMemoryCharacterDirectory:
    """In-memory implementation of CharacterDirectory."""

    def __init__(self, characters: Iterable[Character] = ()) -> None:
        self._characters: dict[str, Character] = {}
        self._faction_index: dict[Faction, set[str]] = {faction: set() for faction in Faction}

        for character in characters:
            self.save_character(character)

    def save_character(self, character: Character) -> None:
        """Insert or update a character, moving it between faction buckets if needed."""
        previous = self._characters.get(character.id)
        if previous is not None and previous.faction is not None:
            self._faction_index[previous.faction].discard(character.id)

        self._characters[character.id] = deepcopy(character)
        if character.faction is not None:
            self._faction_index[character.faction].add(character.id)

    def remove_character(self, character_id: str) -> None:
        """Remove a character (no-op if unknown)."""
        character = self._characters.pop(character_id, None)
        if character is not None and character.faction is not None:
            self._faction_index[character.faction].discard(character_id)

    def get_character(self, character_id: str) -> Character | None:
        """Get a character by ID."""
        character = self._characters.get(character_id)
        return deepcopy(character) if character else None

    def members_of(self, faction: Faction) -> list[Character]:
        """Get every character in a faction, ordered by ID."""
        member_ids = sorted(self._faction_index.get(faction, ()))
        return [deepcopy(self._characters[cid]) for cid in member_ids]

    def all_characters(self) -> list[Character]:
        """Get every known character."""
        return [deepcopy(c) for c in self._characters.values()]

    def __len__(self) -> int:
        return len(self._characters)
