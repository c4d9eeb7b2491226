"""The hero fighting a combat.

Only the parts of the hero that combat touches live here: armor for wound
math, the fame ledger and the wound pile.
"""

from typing import Any, Optional


class Hero:
    """Player character as seen by the combat core."""

    def __init__(self, name: str = "Hero", armor: int = 2, fame: int = 0):
        self.name = name
        self.armor = armor
        self.fame = fame
        self.wounds = 0
        self.wounds_in_discard = 0
        self.paralyzed = False

    def gain_fame(self, amount: int) -> None:
        assert amount >= 0, f"Fame gain must be non-negative, got {amount}"
        self.fame += amount

    def take_wound(self) -> None:
        """Add a wound to the hand."""
        self.wounds += 1

    def take_wound_to_discard(self) -> None:
        """Add a wound straight to the discard pile (poison)."""
        self.wounds_in_discard += 1

    def discard_non_wound_cards(self) -> None:
        """Paralyze: mark the hand as discarded down to wounds."""
        self.paralyzed = True

    def get_state(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "armor": self.armor,
            "fame": self.fame,
            "wounds": self.wounds,
            "wounds_in_discard": self.wounds_in_discard,
            "paralyzed": self.paralyzed,
        }

    def load_state(self, state: Optional[dict[str, Any]]) -> None:
        if not state:
            return
        self.fame = int(state.get("fame", self.fame))
        self.wounds = int(state.get("wounds", self.wounds))
        self.wounds_in_discard = int(state.get("wounds_in_discard", self.wounds_in_discard))
        self.paralyzed = bool(state.get("paralyzed", self.paralyzed))
