"""
Reputation feedback for Hearsay.

Connects individual relationships with faction reputation:
- A change in the player's relationship with a character nudges that
  character's faction, weighted by the character's social importance.
- A large faction-level change nudges every member's opinion of the player.
- Factions allied to the affected one can receive a share of the change.

This is the only service that touches both the relationship ledger and
the faction reputation state.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Annotated

from pydantic import BaseModel, Field

from src.db.interfaces import CharacterDirectory
from src.models import (
    FACTION_INFO,
    PLAYER_ID,
    Character,
    Faction,
    RelationshipRecord,
    ReputationState,
    SocialClass,
    round_half_away,
)
from src.services.mitigation import InteractionContext
from src.services.relationships import RelationshipStore
from src.services.reputation import ReputationChange, reputation_changes, update_faction

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Higher social class = more impact on faction reputation
IMPORTANCE_WEIGHTS: dict[SocialClass, float] = {
    SocialClass.NOBILITY: 3.0,  # Nobles, high officials
    SocialClass.ELITE: 2.5,  # Wealthy merchants, guild masters
    SocialClass.PROFESSIONAL: 2.0,  # Doctors, lawyers, clergy
    SocialClass.MERCHANT: 1.5,  # Shop owners, traders
    SocialClass.ARTISAN: 1.2,  # Craftspeople, skilled workers
    SocialClass.COMMON: 1.0,  # Laborers, servants
    SocialClass.OUTCAST: 0.8,  # Marginalized groups
}
DEFAULT_IMPORTANCE = 1.0

# Directed: a faction listed here shares in its allies' fortunes,
# not necessarily the other way round.
ALLIED_FACTIONS: dict[Faction, tuple[Faction, ...]] = {
    Faction.ELITE: (Faction.CHURCH, Faction.MERCHANTS),
    Faction.CHURCH: (Faction.ELITE,),
    Faction.MERCHANTS: (Faction.ELITE, Faction.GUILD),
    Faction.GUILD: (Faction.MERCHANTS, Faction.COMMON_FOLK),
    Faction.COMMON_FOLK: (Faction.GUILD, Faction.INDIGENOUS),
    Faction.INDIGENOUS: (Faction.COMMON_FOLK,),
}


def _env_number(name: str, default: float, cast: type = float) -> float:
    """Read a numeric setting; unparseable values fall back to the default."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return cast(float(value))
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, value, default)
        return default


@dataclass
class FeedbackTuning:
    """
    Tunable constants for the feedback loop.

    Configuration via environment variables (explicit arguments win):
        HEARSAY_BASE_CONVERSION_RATE: relationship delta -> reputation delta (default 0.2)
        HEARSAY_MIN_RELATIONSHIP_DELTA: smallest change with a faction effect (default 5)
        HEARSAY_MAX_REPUTATION_DELTA: largest faction change per interaction (default 5)
        HEARSAY_SPILLOVER_FACTOR: share of a change passed to allied factions (default 0.3)
        HEARSAY_REVERSE_CONVERSION_RATE: reputation delta -> relationship delta (default 0.5)
        HEARSAY_MIN_REPUTATION_DELTA: smallest faction change fanned out to members (default 5)
    """

    base_conversion_rate: float | None = None
    min_relationship_delta: int | None = None
    max_reputation_delta: int | None = None
    spillover_factor: float | None = None
    reverse_conversion_rate: float | None = None
    min_reputation_delta: int | None = None

    def __post_init__(self) -> None:
        """Fill unset values from the environment, then defaults."""
        if self.base_conversion_rate is None:
            self.base_conversion_rate = _env_number("HEARSAY_BASE_CONVERSION_RATE", 0.2)

        if self.min_relationship_delta is None:
            self.min_relationship_delta = _env_number("HEARSAY_MIN_RELATIONSHIP_DELTA", 5, int)

        if self.max_reputation_delta is None:
            self.max_reputation_delta = _env_number("HEARSAY_MAX_REPUTATION_DELTA", 5, int)

        if self.spillover_factor is None:
            self.spillover_factor = _env_number("HEARSAY_SPILLOVER_FACTOR", 0.3)

        if self.reverse_conversion_rate is None:
            self.reverse_conversion_rate = _env_number("HEARSAY_REVERSE_CONVERSION_RATE", 0.5)

        if self.min_reputation_delta is None:
            self.min_reputation_delta = _env_number("HEARSAY_MIN_REPUTATION_DELTA", 5, int)


def get_importance(character: Character) -> float:
    """Weight of a character's opinion within their faction."""
    if character.social_class is None:
        return DEFAULT_IMPORTANCE
    return IMPORTANCE_WEIGHTS.get(character.social_class, DEFAULT_IMPORTANCE)


# =============================================================================
# Input / Output Models
# =============================================================================


class InteractionOutcome(BaseModel):
    """A resolved interaction reported by the narrative engine."""

    character_id: str
    relationship_delta: Annotated[int, Field(ge=-100, le=100)]
    reason: str = ""
    context: InteractionContext | None = None


class FactionEvent(BaseModel):
    """A faction-level game event (quest, major story beat)."""

    faction_id: str
    reputation_delta: int
    reason: str = ""


class SpilloverEffect(BaseModel):
    """Share of a faction change passed on to an allied faction."""

    faction: Faction
    delta: int


class FeedbackPreview(BaseModel):
    """What a relationship change would do to faction reputation."""

    faction: Faction
    faction_name: str
    reputation_delta: int
    importance: float


class InteractionResult(BaseModel):
    """Everything a single interaction changed."""

    relationship: RelationshipRecord
    reputation: ReputationState
    changes: list[ReputationChange] = Field(default_factory=list)
    spillover: list[SpilloverEffect] = Field(default_factory=list)


# =============================================================================
# Coordinator
# =============================================================================


@dataclass
class FeedbackCoordinator:
    """
    Converts between relationship changes and faction reputation.

    Reputation states are never mutated: methods return the new state and
    the caller commits it. The relationship ledger is mutated in place.
    """

    relationships: RelationshipStore
    characters: CharacterDirectory
    tuning: FeedbackTuning = field(default_factory=FeedbackTuning)
    player_id: str = PLAYER_ID

    def _raw_reputation_delta(self, character: Character, relationship_delta: int) -> int:
        """Weighted, capped, rounded reputation delta before mitigation."""
        cap = self.tuning.max_reputation_delta
        raw = relationship_delta * self.tuning.base_conversion_rate * get_importance(character)
        return round_half_away(max(-cap, min(cap, raw)))

    def _resolve_member(self, character_id: str) -> Character | None:
        """Look up a character that belongs to a faction, else None."""
        character = self.characters.get_character(character_id)
        if character is None:
            logger.debug("Unknown character %s, no faction effect", character_id)
            return None
        if character.faction is None:
            logger.debug("Character %s has no faction, no faction effect", character_id)
            return None
        return character

    def preview(self, character_id: str, relationship_delta: int) -> FeedbackPreview | None:
        """
        Show the faction change a relationship change would cause.

        Ignores mitigation; touches no state. None if there is no effect.
        """
        resolved = self._faction_delta(character_id, relationship_delta, None)
        if resolved is None:
            return None

        faction, reputation_delta = resolved
        return FeedbackPreview(
            faction=faction,
            faction_name=FACTION_INFO[faction].name,
            reputation_delta=reputation_delta,
            importance=get_importance(self.characters.get_character(character_id)),
        )

    def _faction_delta(
        self,
        character_id: str,
        relationship_delta: int,
        context: InteractionContext | None,
    ) -> tuple[Faction, int] | None:
        if abs(relationship_delta) < self.tuning.min_relationship_delta:
            return None

        character = self._resolve_member(character_id)
        if character is None:
            return None

        reputation_delta = self._raw_reputation_delta(character, relationship_delta)
        if context is not None:
            mitigated = context.mitigate(character.faction, reputation_delta)
            if mitigated != reputation_delta:
                logger.info(
                    "Reputation loss with %s mitigated: %d -> %d",
                    character.faction.value,
                    reputation_delta,
                    mitigated,
                )
            reputation_delta = mitigated

        if reputation_delta == 0:
            return None
        return character.faction, reputation_delta

    def apply_relationship_to_reputation(
        self,
        character_id: str,
        relationship_delta: int,
        reason: str,
        current_state: ReputationState,
        context: InteractionContext | None = None,
    ) -> ReputationState | None:
        """
        Turn a relationship change into a faction reputation change.

        Args:
            character_id: Character whose relationship with the player changed
            relationship_delta: Change in relationship value (-100 to +100)
            reason: Why it changed
            current_state: Reputation state to start from (not mutated)
            context: Player context used to mitigate losses

        Returns:
            The new reputation state, or None if there is no faction effect
        """
        resolved = self._faction_delta(character_id, relationship_delta, context)
        if resolved is None:
            return None

        faction, reputation_delta = resolved
        logger.info(
            "%s (%s): relationship %+d -> reputation %+d",
            character_id,
            faction.value,
            relationship_delta,
            reputation_delta,
        )
        return update_faction(current_state, faction, reputation_delta, reason)

    def apply_reputation_to_relationships(
        self,
        faction_id: Faction | str,
        reputation_delta: int,
        reason: str,
    ) -> list[RelationshipRecord]:
        """
        Spread a faction-level change to every member's opinion of the player.

        Returns the updated records (empty if the change is too small,
        the faction is unknown, or it has no members).
        """
        if abs(reputation_delta) < self.tuning.min_reputation_delta:
            return []

        faction = Faction.parse(faction_id)
        if faction is None:
            logger.warning("Unknown faction %r, skipping relationship fan-out", faction_id)
            return []

        members = self.characters.members_of(faction)
        if not members:
            logger.info("No characters found for faction %s", faction.value)
            return []

        relationship_delta = round_half_away(reputation_delta * self.tuning.reverse_conversion_rate)
        logger.info(
            "Faction %s reputation %+d -> updating %d characters by %+d",
            faction.value,
            reputation_delta,
            len(members),
            relationship_delta,
        )
        return [
            self.relationships.update(
                member.id,
                self.player_id,
                relationship_delta,
                f"Faction reputation change: {reason}",
            )
            for member in members
        ]

    def get_spillover_effects(
        self,
        primary_faction: Faction | str,
        delta: int,
    ) -> list[SpilloverEffect]:
        """Share of `delta` each faction allied to `primary_faction` receives."""
        faction = Faction.parse(primary_faction)
        if faction is None:
            return []
        share = round_half_away(delta * self.tuning.spillover_factor)
        allies = ALLIED_FACTIONS.get(faction, ())
        return [SpilloverEffect(faction=ally, delta=share) for ally in allies]

    def apply_spillover(
        self,
        state: ReputationState,
        effects: Iterable[SpilloverEffect],
        reason: str,
    ) -> ReputationState:
        """Apply spillover effects to a reputation state."""
        for effect in effects:
            if effect.delta != 0:
                state = update_faction(
                    state, effect.faction, effect.delta, f"Spillover from {reason}"
                )
        return state

    def handle_interaction(
        self,
        state: ReputationState,
        character_id: str,
        relationship_delta: int,
        reason: str = "",
        *,
        apply_spillover: bool = False,
        context: InteractionContext | None = None,
    ) -> InteractionResult:
        """
        Main entry point for a player/character interaction.

        Updates the player's relationship with the character, the
        character's faction, and optionally the allied factions. All or
        nothing: if a later stage raises, the relationship change is
        rolled back before the error propagates.
        """
        previous = deepcopy(self.relationships.get(self.player_id, character_id))

        try:
            record = self.relationships.update(
                self.player_id, character_id, relationship_delta, reason
            )

            new_state = state
            spillover: list[SpilloverEffect] = []
            resolved = self._faction_delta(character_id, relationship_delta, context)
            if resolved is not None:
                faction, reputation_delta = resolved
                new_state = update_faction(new_state, faction, reputation_delta, reason)

                if apply_spillover:
                    spillover = self.get_spillover_effects(faction, reputation_delta)
                    new_state = self.apply_spillover(new_state, spillover, reason)
        except Exception:
            if previous is None:
                self.relationships.discard(self.player_id, character_id)
            else:
                self.relationships.set(self.player_id, character_id, previous)
            raise

        return InteractionResult(
            relationship=record,
            reputation=new_state,
            changes=reputation_changes(state, new_state),
            spillover=spillover,
        )

    def handle_faction_event(self, state: ReputationState, event: FactionEvent) -> ReputationState:
        """Apply a faction-level event to reputation and to its members' opinions."""
        new_state = update_faction(state, event.faction_id, event.reputation_delta, event.reason)
        self.apply_reputation_to_relationships(
            event.faction_id, event.reputation_delta, event.reason
        )
        return new_state

    def batch_process_relationship_changes(
        self,
        changes: Iterable[InteractionOutcome],
        initial_state: ReputationState,
    ) -> ReputationState:
        """
        Fold many relationship changes into one reputation state.

        Each change sees the state produced by the ones before it.
        """
        state = initial_state
        for change in changes:
            new_state = self.apply_relationship_to_reputation(
                change.character_id,
                change.relationship_delta,
                change.reason,
                state,
                change.context,
            )
            if new_state is not None:
                state = new_state
        return state
