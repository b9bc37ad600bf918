"""
Character data layer for Hearsay.

Provides the lookup contract the reputation services depend on, plus an
in-memory implementation used by the starter roster and by tests.
"""

from __future__ import annotations

from src.db.interfaces import CharacterDirectory
from src.db.memory import InMemoryCharacterDirectory

__all__ = [
    "CharacterDirectory",
    "InMemoryCharacterDirectory",
]
