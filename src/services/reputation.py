"""Faction reputation tracking service.

Every function here is pure: it takes a ReputationState and returns a new
one (or a derived value) without mutating its input. The caller owns
replacing the old state.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from src.models import FACTION_INFO, Faction, ReputationState

logger = logging.getLogger(__name__)

OVERALL = "overall"
"""Requirement target meaning the overall score rather than one faction."""


class ReputationChange(BaseModel):
    """Result of a single faction reputation change."""

    faction: Faction
    faction_name: str
    old_score: int
    new_score: int
    delta: int
    standing: str


class FactionStanding(BaseModel):
    """The player's standing with one faction."""

    faction: Faction
    faction_name: str
    score: int
    standing: str


class ReputationRequirement(BaseModel):
    """A gate on one faction (or "overall") reaching a threshold."""

    faction: str
    threshold: int


def get_reputation_tier(score: int) -> str:
    """Return the overall reputation tier label for a given score."""
    if score >= 90:
        return "Legendary"
    if score >= 80:
        return "Renowned"
    if score >= 70:
        return "Respected"
    if score >= 60:
        return "Known"
    if score >= 50:
        return "Neutral"
    if score >= 40:
        return "Obscure"
    if score >= 30:
        return "Suspect"
    if score >= 20:
        return "Disreputable"
    return "Infamous"


def get_faction_standing(score: int) -> str:
    """Return the per-faction standing label for a given score."""
    if score >= 90:
        return "Revered"
    if score >= 80:
        return "Allied"
    if score >= 70:
        return "Trusted"
    if score >= 60:
        return "Friendly"
    if score >= 50:
        return "Warm"
    if score >= 45:
        return "Cordial"
    if score >= 40:
        return "Neutral"
    if score >= 30:
        return "Dismissive"
    if score >= 20:
        return "Unfriendly"
    if score >= 10:
        return "Cold"
    return "Hostile"


def clamp_score(score: int) -> int:
    """Clamp a faction score into 0-100."""
    return max(0, min(100, score))


def update_faction(
    state: ReputationState,
    faction_id: Faction | str,
    delta: int,
    reason: str = "",
) -> ReputationState:
    """
    Apply a delta to one faction's score.

    Unknown faction ids are logged and ignored: the input state is
    returned unchanged. The overall score follows automatically.
    """
    faction = Faction.parse(faction_id)
    if faction is None:
        logger.warning("Unknown faction %r, ignoring reputation change (%s)", faction_id, reason)
        return state

    old_score = state.factions[faction]
    new_score = clamp_score(old_score + delta)
    new_state = ReputationState(factions={**state.factions, faction: new_score})

    logger.info(
        "%s: %d -> %d (%+d) - %s",
        FACTION_INFO[faction].name,
        old_score,
        new_score,
        delta,
        reason,
    )
    return new_state


def calculate_price_modifier(faction_score: int) -> float:
    """
    Price multiplier for trading with a faction.

    1.5x at score 0, 1.0x at 50, 0.5x at 100.
    """
    return 1.5 - faction_score / 100


def meets_requirement(
    state: ReputationState | None,
    faction_id: Faction | str,
    threshold: int,
) -> bool:
    """
    Check a reputation gate.

    With no reputation state at all the gate is open. Otherwise the
    faction (or "overall") must be at or above the threshold; an unknown
    faction never satisfies a gate.
    """
    if state is None:
        return True

    if isinstance(faction_id, str) and faction_id.lower() == OVERALL:
        return state.overall >= threshold

    faction = Faction.parse(faction_id)
    if faction is None:
        logger.warning("Unknown faction %r in reputation requirement", faction_id)
        return False
    return state.factions[faction] >= threshold


def meets_all_requirements(
    state: ReputationState | None,
    requirements: list[ReputationRequirement],
) -> bool:
    """Check several gates at once (all must pass)."""
    if not requirements:
        return True
    if state is None:
        return False
    return all(meets_requirement(state, req.faction, req.threshold) for req in requirements)


def reputation_changes(before: ReputationState, after: ReputationState) -> list[ReputationChange]:
    """List the factions whose score differs between two states."""
    changes: list[ReputationChange] = []
    for faction in Faction:
        old_score = before.factions[faction]
        new_score = after.factions[faction]
        if old_score == new_score:
            continue
        changes.append(
            ReputationChange(
                faction=faction,
                faction_name=FACTION_INFO[faction].name,
                old_score=old_score,
                new_score=new_score,
                delta=new_score - old_score,
                standing=get_faction_standing(new_score),
            )
        )
    return changes


def get_standings(state: ReputationState) -> list[FactionStanding]:
    """Get the player's standing with every faction."""
    return [
        FactionStanding(
            faction=faction,
            faction_name=FACTION_INFO[faction].name,
            score=score,
            standing=get_faction_standing(score),
        )
        for faction, score in state.factions.items()
    ]
