"""
Starter Roster for Hearsay.

A small cast of 1680 Mexico City characters in the content-data shape,
plus the import step that turns them into Characters with canonical
factions.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.db.memory import InMemoryCharacterDirectory
from src.models import Character, ReputationState, initial_reputation
from src.services.feedback import FeedbackCoordinator, FeedbackTuning
from src.services.relationships import RelationshipStore

STARTER_ROSTER: list[dict] = [
    {
        "id": "don_alejandro_cortez",
        "name": "Don Alejandro Cortez",
        "social": {"faction": "Criollo nobility", "class": "nobility"},
    },
    {
        "id": "carlos_enriquez",
        "name": "Carlos Enriquez",
        "social": {"faction": "Elite merchant houses", "class": "elite"},
    },
    {
        "id": "fray_jordanes",
        "name": "Fray Jordanes",
        "social": {"faction": "Franciscan clergy", "class": "professional"},
    },
    {
        "id": "antonia_de_ochoa",
        "name": "Antonia de Ochoa",
        "social": {"faction": "Convent of the Church", "class": "professional"},
    },
    {
        "id": "francisco_dias",
        "name": "Francisco Dias de Araujo",
        "social": {"faction": "Portuguese trader", "class": "merchant"},
    },
    {
        "id": "sebastian_athayde",
        "name": "Sebastián Athayde",
        "social": {"faction": "Apothecary guild", "class": "artisan"},
    },
    {
        "id": "pancho_rodriguez",
        "name": "Pancho Rodriguez",
        "social": {"faction": "Artisan", "class": "artisan"},
    },
    {
        "id": "ana_de_soto",
        "name": "Ana de Soto",
        "social": {"faction": "Common Folk", "class": "common"},
    },
    {
        "id": "diego_perez",
        "name": "Diego Perez",
        "social": {"faction": "Laborer", "class": "common"},
    },
    {
        "id": "xochitl",
        "name": "Xochitl",
        "social": {"faction": "Nahua healer", "class": "outcast"},
    },
    {
        "id": "tlacotzin",
        "name": "Tlacotzin",
        "social": {"faction": "Indigenous", "class": "common"},
    },
    {
        "id": "pablo_the_goat",
        "name": "Pablo the Goat",
        "social": {"faction": None, "class": "goat"},
    },
]


def import_roster(entries: list[dict]) -> list[Character]:
    """Convert content entries into Characters, resolving factions once."""
    return [Character.from_raw(entry) for entry in entries]


@dataclass
class ReputationSession:
    """Everything a play session needs for reputation tracking."""

    characters: InMemoryCharacterDirectory
    relationships: RelationshipStore
    feedback: FeedbackCoordinator
    reputation: ReputationState


def create_session(
    entries: list[dict] | None = None,
    reputation: ReputationState | None = None,
    tuning: FeedbackTuning | None = None,
) -> ReputationSession:
    """
    Create a fresh, isolated reputation session.

    Args:
        entries: Roster in content-data shape (default: STARTER_ROSTER)
        reputation: Starting reputation (default: the standard baseline)
        tuning: Feedback constants (default: environment/defaults)

    Returns:
        A ReputationSession with its own stores
    """
    roster = import_roster(STARTER_ROSTER if entries is None else entries)
    characters = InMemoryCharacterDirectory(roster)
    relationships = RelationshipStore()
    feedback = FeedbackCoordinator(
        relationships=relationships,
        characters=characters,
        tuning=tuning or FeedbackTuning(),
    )
    return ReputationSession(
        characters=characters,
        relationships=relationships,
        feedback=feedback,
        reputation=reputation or initial_reputation(),
    )
