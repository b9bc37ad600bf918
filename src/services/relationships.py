"""
Relationship ledger for Hearsay.

Holds one directed record per (source, target) pair. One store is owned
by each play session and passed to whatever needs it; nothing here is
module-global.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from src.models import (
    BASELINE_VALUE,
    HISTORY_LIMIT,
    HistoryEntry,
    RelationshipRecord,
    RelationshipStatus,
    clamp_value,
)

logger = logging.getLogger(__name__)

CURRENCY = "reales"


@dataclass
class RelationshipStore:
    """
    Directed relationship ledger.

    Reads never raise: a missing pair is reported as None or an empty list.
    """

    clock: Callable[[], date] = date.today
    """Source of the date stamped on updates."""

    _records: dict[str, dict[str, RelationshipRecord]] = field(
        init=False, default_factory=dict
    )

    def get(self, source_id: str, target_id: str) -> RelationshipRecord | None:
        """Get the relationship from `source_id` toward `target_id`."""
        return self._records.get(source_id, {}).get(target_id)

    def set(self, source_id: str, target_id: str, record: RelationshipRecord) -> None:
        """Store a record as-is, replacing any existing one."""
        if record.source_id != source_id or record.target_id != target_id:
            record = record.model_copy(update={"source_id": source_id, "target_id": target_id})
        self._records.setdefault(source_id, {})[target_id] = record

    def discard(self, source_id: str, target_id: str) -> None:
        """Remove a single record if present."""
        targets = self._records.get(source_id)
        if targets is not None:
            targets.pop(target_id, None)
            if not targets:
                del self._records[source_id]

    def relationships_of(self, entity_id: str) -> list[RelationshipRecord]:
        """Every outgoing relationship of an entity, in insertion order."""
        return list(self._records.get(entity_id, {}).values())

    def update(
        self,
        source_id: str,
        target_id: str,
        delta: int,
        reason: str = "",
    ) -> RelationshipRecord:
        """
        Apply a change to a relationship, creating it if needed.

        A new relationship starts from the neutral baseline. The value is
        always clamped to 0-100. Non-zero changes are appended to the
        history, which keeps only the most recent entries. A zero change
        only refreshes the interaction date.

        Args:
            source_id: Whose opinion changes
            target_id: Who the opinion is about
            delta: Signed change in value
            reason: Why it changed

        Returns:
            The updated record (the stored object itself)
        """
        today = self.clock()
        record = self.get(source_id, target_id)

        if record is None:
            record = RelationshipRecord(
                source_id=source_id,
                target_id=target_id,
                value=clamp_value(BASELINE_VALUE + delta),
                reason=reason,
                last_interaction=today,
            )
            self.set(source_id, target_id, record)
        else:
            record.value = clamp_value(record.value + delta)
            record.last_interaction = today
            if delta != 0:
                record.reason = reason

        if delta != 0:
            record.history.append(HistoryEntry(date=today, event=reason, delta=delta))
            if len(record.history) > HISTORY_LIMIT:
                del record.history[:-HISTORY_LIMIT]

        logger.debug(
            "Relationship %s -> %s: %+d (%s) now %d",
            source_id,
            target_id,
            delta,
            reason,
            record.value,
        )
        return record

    def query(
        self,
        entity_id: str,
        *,
        relationship_type: str | None = None,
        status: RelationshipStatus | str | None = None,
        min_value: int | None = None,
        sort_by_value: bool = False,
    ) -> list[RelationshipRecord]:
        """
        Filter an entity's outgoing relationships.

        Args:
            entity_id: Whose relationships to search
            relationship_type: Keep only this relationship type
            status: Keep only this status band
            min_value: Keep only values >= this
            sort_by_value: Sort by value, highest first

        Returns:
            Matching records (empty if the entity has none)
        """
        results = self.relationships_of(entity_id)

        if relationship_type is not None:
            results = [r for r in results if r.type == relationship_type]
        if status is not None:
            try:
                wanted = RelationshipStatus(status)
            except ValueError:
                logger.debug("Unknown relationship status %r, no matches", status)
                return []
            results = [r for r in results if r.status == wanted]
        if min_value is not None:
            results = [r for r in results if r.value >= min_value]
        if sort_by_value:
            results.sort(key=lambda r: r.value, reverse=True)

        return results

    def allies(self, entity_id: str) -> list[str]:
        """IDs of everyone this entity is allied with."""
        return [r.target_id for r in self.query(entity_id, status=RelationshipStatus.ALLIED)]

    def enemies(self, entity_id: str) -> list[str]:
        """IDs of everyone this entity is hostile toward."""
        return [r.target_id for r in self.query(entity_id, status=RelationshipStatus.HOSTILE)]

    def friends(self, entity_id: str) -> list[str]:
        """IDs with value >= 60, warmest first."""
        return [r.target_id for r in self.query(entity_id, min_value=60, sort_by_value=True)]

    def family(self, entity_id: str) -> list[str]:
        """IDs tagged as family."""
        return [r.target_id for r in self.query(entity_id, relationship_type="family")]

    def gossip(
        self,
        speaker_id: str,
        target_id: str,
        target_name: str | None = None,
    ) -> str | None:
        """
        What `speaker_id` would say about `target_id`.

        Priority: hostile, allied, family, owed money, owing money.
        Returns None if there is no relationship or nothing worth saying.
        """
        record = self.get(speaker_id, target_id)
        if record is None:
            return None

        name = target_name or target_id
        if record.status == RelationshipStatus.HOSTILE:
            return f"I have no love for {name}. {record.reason or 'We have our differences.'}"
        if record.status == RelationshipStatus.ALLIED:
            return (
                f"{name} is a dear friend of mine. "
                f"{record.reason or 'We have known each other for years.'}"
            )
        if record.type == "family":
            return f"{name} is family. {record.reason}".rstrip()
        if record.debt > 0:
            return f"{name} owes me {_format_amount(record.debt)} {CURRENCY}."
        if record.debt < 0:
            return f"I owe {name} {_format_amount(abs(record.debt))} {CURRENCY}."
        return None

    def clear(self) -> None:
        """Drop every relationship. For resets and tests only."""
        self._records.clear()

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._records.values())


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else f"{amount:.2f}"
