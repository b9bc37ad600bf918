#!/usr/bin/env python3
"""
Walk through a few interactions with the starter roster and print standings.

Usage:
    python scripts/show_standings.py                      # Default walkthrough
    python scripts/show_standings.py --spillover          # Apply spillover to allied factions
    python scripts/show_standings.py --log-level DEBUG    # Show every ledger change
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

WALKTHROUGH = [
    ("don_alejandro_cortez", 20, "Cured his gout"),
    ("fray_jordanes", -15, "Questioned a miracle"),
    ("ana_de_soto", 10, "Treated her cough for free"),
    ("xochitl", 8, "Traded remedies"),
    ("pablo_the_goat", 30, "Fed him a tortilla"),
]


def print_standings(reputation) -> None:
    """Print overall tier and per-faction standing."""
    from src.services.reputation import get_reputation_tier, get_standings

    print(f"  Overall: {reputation.overall} ({get_reputation_tier(reputation.overall)})")
    for standing in get_standings(reputation):
        print(f"  {standing.faction_name:<16} {standing.score:>3}  {standing.standing}")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Show Hearsay reputation standings")
    parser.add_argument("--spillover", action="store_true", help="Apply spillover to allies")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    from src.content.starter_roster import create_session
    from src.models import PLAYER_ID

    session = create_session()

    print("Hearsay Reputation Walkthrough")
    print("=" * 40)
    print_standings(session.reputation)

    for character_id, delta, reason in WALKTHROUGH:
        result = session.feedback.handle_interaction(
            session.reputation,
            character_id,
            delta,
            reason,
            apply_spillover=args.spillover,
        )
        session.reputation = result.reputation

        character = session.characters.get_character(character_id)
        name = character.display_name if character else character_id
        print()
        print(f"{name}: {delta:+d} ({reason})")
        print(f"  Relationship: {result.relationship.value} ({result.relationship.status.value})")
        for change in result.changes:
            print(f"  {change.faction_name}: {change.old_score} -> {change.new_score}")

    print()
    print("Final Standings")
    print("=" * 40)
    print_standings(session.reputation)

    friends = session.relationships.friends(PLAYER_ID)
    print()
    print(f"Friends: {', '.join(friends) if friends else 'none'}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
