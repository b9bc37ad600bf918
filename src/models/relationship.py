"""
Relationship Models for Hearsay.

A relationship is one character's directed opinion of another. A's
opinion of B is stored separately from B's opinion of A.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

HISTORY_LIMIT = 10
"""Most recent history entries kept per relationship."""

BASELINE_VALUE = 50
"""Value a relationship starts from before its first change."""


class RelationshipStatus(str, Enum):
    """Discrete bands of relationship value."""

    HOSTILE = "hostile"
    UNFRIENDLY = "unfriendly"
    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    ALLIED = "allied"


def status_for_value(value: int) -> RelationshipStatus:
    """Classify a relationship value (0-100) into its status band."""
    if value < 20:
        return RelationshipStatus.HOSTILE
    if value < 40:
        return RelationshipStatus.UNFRIENDLY
    if value < 60:
        return RelationshipStatus.NEUTRAL
    if value < 80:
        return RelationshipStatus.FRIENDLY
    return RelationshipStatus.ALLIED


def clamp_value(value: int) -> int:
    """Clamp a relationship value into 0-100."""
    return max(0, min(100, value))


class HistoryEntry(BaseModel):
    """One recorded change to a relationship."""

    date: dt.date
    event: str
    delta: int


class RelationshipRecord(BaseModel):
    """
    Directed relationship from `source_id` toward `target_id`.

    `status` is derived from `value`, so the two can never disagree.
    Assignments are validated, so `value` stays within 0-100.
    """

    model_config = ConfigDict(validate_assignment=True)

    source_id: str
    target_id: str

    value: Annotated[int, Field(ge=0, le=100)] = BASELINE_VALUE
    """0 = hostile, 50 = neutral, 100 = allied."""

    type: str = "acquaintance"
    """Free-form tag: "family", "acquaintance", "patron", ..."""

    reason: str = ""
    """Last recorded cause of change."""

    debt: float = 0
    """Reales owed to the source by the target (negative: source owes target)."""

    last_interaction: dt.date = Field(default_factory=dt.date.today)

    history: list[HistoryEntry] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> RelationshipStatus:
        """Status band for the current value."""
        return status_for_value(self.value)

    def tooltip(self) -> dict:
        """Read-only view used for tooltips and dialogue gating."""
        return {
            "value": self.value,
            "status": self.status.value,
            "history": [entry.model_dump() for entry in self.history],
        }
