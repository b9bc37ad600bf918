"""Tests for faction reputation tracking."""

from __future__ import annotations

import copy
import logging
import random

import pytest
from pydantic import ValidationError

from src.models import (
    INITIAL_FACTION_SCORES,
    Faction,
    ReputationState,
    initial_reputation,
    round_half_away,
    uniform_reputation,
)
from src.services.reputation import (
    ReputationRequirement,
    calculate_price_modifier,
    get_faction_standing,
    get_reputation_tier,
    get_standings,
    meets_all_requirements,
    meets_requirement,
    reputation_changes,
    update_faction,
)

# --- Tier tests ---


@pytest.mark.parametrize(
    ("score", "tier"),
    [
        (100, "Legendary"),
        (90, "Legendary"),
        (89, "Renowned"),
        (80, "Renowned"),
        (79, "Respected"),
        (70, "Respected"),
        (60, "Known"),
        (50, "Neutral"),
        (49, "Obscure"),
        (40, "Obscure"),
        (30, "Suspect"),
        (20, "Disreputable"),
        (19, "Infamous"),
        (0, "Infamous"),
    ],
)
def test_reputation_tier(score: int, tier: str):
    assert get_reputation_tier(score) == tier


@pytest.mark.parametrize(
    ("score", "standing"),
    [
        (95, "Revered"),
        (80, "Allied"),
        (70, "Trusted"),
        (60, "Friendly"),
        (50, "Warm"),
        (49, "Cordial"),
        (45, "Cordial"),
        (44, "Neutral"),
        (40, "Neutral"),
        (30, "Dismissive"),
        (20, "Unfriendly"),
        (10, "Cold"),
        (9, "Hostile"),
        (0, "Hostile"),
    ],
)
def test_faction_standing(score: int, standing: str):
    assert get_faction_standing(score) == standing


def test_standing_and_tier_are_separate_scales():
    # 45 is "Cordial" per faction but "Obscure" overall
    assert get_faction_standing(45) == "Cordial"
    assert get_reputation_tier(45) == "Obscure"


# --- State tests ---


class TestReputationState:
    """Tests for the ReputationState value object."""

    def test_initial_distribution(self) -> None:
        """Test that the baseline is not uniform and averages to 45."""
        state = initial_reputation()
        assert state.factions == INITIAL_FACTION_SCORES
        assert state.overall == 45

    def test_uniform(self) -> None:
        state = uniform_reputation(50)
        assert set(state.factions) == set(Faction)
        assert state.overall == 50

    def test_overall_cannot_be_passed_in(self) -> None:
        """Test that overall is always derived from the factions."""
        state = ReputationState(factions={f: 50 for f in Faction}, overall=99)
        assert state.overall == 50
        assert "overall" not in ReputationState.model_fields

    def test_missing_faction_rejected(self) -> None:
        scores = {f: 50 for f in Faction if f != Faction.GUILD}
        with pytest.raises(ValidationError):
            ReputationState(factions=scores)

    def test_out_of_range_score_rejected(self) -> None:
        scores = {f: 50 for f in Faction}
        scores[Faction.ELITE] = 150
        with pytest.raises(ValidationError):
            ReputationState(factions=scores)

    def test_string_keys_are_coerced(self) -> None:
        state = ReputationState(factions={f.value: 10 for f in Faction})
        assert state.score(Faction.COMMON_FOLK) == 10

    def test_snapshot(self) -> None:
        """Test the plain-data view handed to the UI."""
        snapshot = initial_reputation().snapshot()
        assert snapshot["overall"] == 45
        assert snapshot["factions"]["common_folk"] == 60
        assert len(snapshot["factions"]) == 6

    def test_model_dump_includes_overall(self) -> None:
        data = uniform_reputation(30).model_dump()
        assert data["overall"] == 30
        assert data["factions"] == {f: 30 for f in Faction}

    def test_scores_are_read_only(self) -> None:
        """Test that a state cannot be edited in place through its mapping."""
        state = initial_reputation()
        with pytest.raises(TypeError):
            state.factions[Faction.ELITE] = 500
        assert state.factions[Faction.ELITE] == 40
        assert state.overall == 45

    def test_input_dict_is_not_shared(self) -> None:
        scores = {f: 50 for f in Faction}
        state = ReputationState(factions=scores)
        scores[Faction.ELITE] = 0
        assert state.score(Faction.ELITE) == 50

    def test_update_returns_read_only_state(self) -> None:
        state = update_faction(initial_reputation(), Faction.ELITE, 5)
        with pytest.raises(TypeError):
            state.factions[Faction.CHURCH] = 0
        assert state.score(Faction.ELITE) == 45

    def test_deepcopy(self) -> None:
        state = initial_reputation()
        assert copy.deepcopy(state) == state


# --- Rounding ---


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1.5, 2), (-1.5, -2), (2.5, 3), (-2.5, -3), (1.4, 1), (-1.4, -1), (0.4, 0), (-0.4, 0), (0, 0)],
)
def test_round_half_away(value: float, expected: int):
    assert round_half_away(value) == expected


# --- Update tests ---


class TestUpdateFaction:
    """Tests for update_faction."""

    def test_positive_delta(self) -> None:
        state = uniform_reputation(50)
        new_state = update_faction(state, Faction.CHURCH, 10, "Donated to the cathedral")

        assert new_state.factions[Faction.CHURCH] == 60
        assert new_state.overall == round_half_away(310 / 6)

    def test_input_not_mutated(self) -> None:
        state = uniform_reputation(50)
        update_faction(state, Faction.CHURCH, 10)
        assert state.factions[Faction.CHURCH] == 50
        assert state.overall == 50

    def test_clamped_high(self) -> None:
        new_state = update_faction(uniform_reputation(95), Faction.GUILD, 40)
        assert new_state.factions[Faction.GUILD] == 100

    def test_clamped_low(self) -> None:
        new_state = update_faction(uniform_reputation(5), Faction.GUILD, -40)
        assert new_state.factions[Faction.GUILD] == 0

    def test_overall_uses_new_score(self) -> None:
        state = initial_reputation()
        new_state = update_faction(state, Faction.INDIGENOUS, 30)
        expected = round_half_away((40 + 60 + 50 + 60 + 35 + 55) / 6)
        assert new_state.overall == expected

    @pytest.mark.parametrize("faction_id", ["ELITE", "Elite", "elite", " elite"])
    def test_case_insensitive(self, faction_id: str) -> None:
        new_state = update_faction(uniform_reputation(50), faction_id, 5)
        assert new_state.factions[Faction.ELITE] == 55

    @pytest.mark.parametrize("faction_id", ["commonFolk", "COMMON_FOLK", "common folk"])
    def test_multiword_ids(self, faction_id: str) -> None:
        new_state = update_faction(uniform_reputation(50), faction_id, 5)
        assert new_state.factions[Faction.COMMON_FOLK] == 55

    def test_unknown_faction_is_noop(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that unknown factions are logged and leave the state untouched."""
        state = uniform_reputation(50)
        with caplog.at_level(logging.WARNING):
            new_state = update_faction(state, "inquisition", -10, "Heresy")

        assert new_state is state
        assert "Unknown faction" in caplog.text

    def test_invariants_hold_for_random_sequences(self) -> None:
        """Scores stay in range and overall tracks the mean after every update."""
        rng = random.Random(1680)
        state = initial_reputation()
        for _ in range(500):
            state = update_faction(state, rng.choice(list(Faction)), rng.randint(-200, 200))
            assert all(0 <= score <= 100 for score in state.factions.values())
            mean = sum(state.factions.values()) / len(state.factions)
            assert state.overall == round_half_away(mean)


# --- Commerce and gating ---


@pytest.mark.parametrize(("score", "modifier"), [(0, 1.5), (50, 1.0), (100, 0.5), (75, 0.75)])
def test_price_modifier(score: int, modifier: float):
    assert calculate_price_modifier(score) == pytest.approx(modifier)


class TestRequirements:
    """Tests for reputation gates."""

    def test_no_state_fails_open(self) -> None:
        assert meets_requirement(None, Faction.CHURCH, 99) is True

    def test_faction_threshold(self) -> None:
        state = initial_reputation()
        assert meets_requirement(state, Faction.CHURCH, 50) is True
        assert meets_requirement(state, Faction.CHURCH, 51) is False

    def test_faction_by_string(self) -> None:
        assert meets_requirement(initial_reputation(), "merchants", 55) is True

    def test_overall(self) -> None:
        state = initial_reputation()
        assert meets_requirement(state, "overall", 45) is True
        assert meets_requirement(state, "overall", 46) is False

    def test_unknown_faction_fails_closed(self) -> None:
        assert meets_requirement(initial_reputation(), "inquisition", 0) is False

    def test_all_requirements(self) -> None:
        state = initial_reputation()
        requirements = [
            ReputationRequirement(faction="elite", threshold=40),
            ReputationRequirement(faction="overall", threshold=40),
        ]
        assert meets_all_requirements(state, requirements) is True

        requirements.append(ReputationRequirement(faction="guild", threshold=36))
        assert meets_all_requirements(state, requirements) is False

    def test_all_requirements_empty(self) -> None:
        assert meets_all_requirements(None, []) is True

    def test_all_requirements_without_state(self) -> None:
        requirements = [ReputationRequirement(faction="elite", threshold=0)]
        assert meets_all_requirements(None, requirements) is False


# --- Reporting ---


def test_reputation_changes():
    before = uniform_reputation(50)
    after = update_faction(update_faction(before, Faction.ELITE, 5), Faction.GUILD, -25)

    changes = reputation_changes(before, after)

    by_faction = {c.faction: c for c in changes}
    assert set(by_faction) == {Faction.ELITE, Faction.GUILD}
    assert by_faction[Faction.ELITE].delta == 5
    assert by_faction[Faction.ELITE].faction_name == "Elite Society"
    assert by_faction[Faction.GUILD].new_score == 25
    assert by_faction[Faction.GUILD].standing == "Unfriendly"


def test_reputation_changes_none():
    state = initial_reputation()
    assert reputation_changes(state, state) == []


def test_get_standings():
    standings = get_standings(initial_reputation())
    assert len(standings) == 6

    by_name = {s.faction_name: s for s in standings}
    assert by_name["Common Folk"].score == 60
    assert by_name["Common Folk"].standing == "Friendly"
    assert by_name["Indigenous"].standing == "Dismissive"
