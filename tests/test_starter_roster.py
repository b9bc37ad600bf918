"""Tests for the starter roster and session setup."""

from __future__ import annotations

from src.content.starter_roster import STARTER_ROSTER, create_session, import_roster
from src.models import PLAYER_ID, Faction, uniform_reputation


def test_import_resolves_factions_once():
    characters = {c.id: c for c in import_roster(STARTER_ROSTER)}

    assert characters["don_alejandro_cortez"].faction == Faction.ELITE
    assert characters["carlos_enriquez"].faction == Faction.ELITE
    assert characters["antonia_de_ochoa"].faction == Faction.CHURCH
    assert characters["francisco_dias"].faction == Faction.MERCHANTS
    assert characters["pancho_rodriguez"].faction == Faction.GUILD
    assert characters["diego_perez"].faction == Faction.COMMON_FOLK
    assert characters["xochitl"].faction == Faction.INDIGENOUS
    assert characters["pablo_the_goat"].faction is None


def test_every_faction_has_members():
    session = create_session()
    for faction in Faction:
        assert session.characters.members_of(faction), faction


def test_sessions_are_isolated():
    first = create_session()
    second = create_session()

    first.relationships.update(PLAYER_ID, "xochitl", 20)

    assert second.relationships.get(PLAYER_ID, "xochitl") is None


def test_session_defaults():
    session = create_session()
    assert len(session.characters) == len(STARTER_ROSTER)
    assert session.reputation.overall == 45
    assert session.feedback.relationships is session.relationships


def test_empty_roster():
    session = create_session(entries=[], reputation=uniform_reputation(50))
    assert len(session.characters) == 0
    assert session.reputation.overall == 50


def test_session_round_trip():
    session = create_session(reputation=uniform_reputation(50))

    result = session.feedback.handle_interaction(
        session.reputation, "don_alejandro_cortez", 25, "Cured his gout", apply_spillover=True
    )
    session.reputation = result.reputation

    assert session.reputation.snapshot()["factions"]["elite"] == 55
    assert session.relationships.friends(PLAYER_ID) == ["don_alejandro_cortez"]
    assert (
        session.relationships.gossip(PLAYER_ID, "don_alejandro_cortez", "Don Alejandro")
        is None
    )
