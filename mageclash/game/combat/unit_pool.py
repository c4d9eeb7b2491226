"""
Unit contribution pool.

Allied units add their ability values to per-phase running totals. A unit can
contribute at most once per combat, tracked by the ``activated_units`` set,
and only abilities accepted by the current phase are counted.
"""

from __future__ import annotations

from typing import Any, Optional

from ...core.data.game_enums import AbilityType, CombatError, CombatPhase
from ...core.messages import Translator, get_default_catalog
from .combat_result import UnitActivationResult

# (phase, ability type) -> (pool total, applied-message key)
ABILITY_ROUTES: dict[tuple[CombatPhase, AbilityType], tuple[str, str]] = {
    (CombatPhase.BLOCK, AbilityType.BLOCK): ("block_points", "combat.applied_block"),
    (CombatPhase.ATTACK, AbilityType.ATTACK): ("attack_points", "combat.applied_attack"),
    (CombatPhase.ATTACK, AbilityType.RANGED): ("attack_points", "combat.applied_attack_from_ranged"),
    (CombatPhase.ATTACK, AbilityType.SIEGE): ("attack_points", "combat.applied_attack_from_siege"),
    (CombatPhase.RANGED, AbilityType.RANGED): ("ranged_points", "combat.applied_ranged"),
    (CombatPhase.RANGED, AbilityType.SIEGE): ("siege_points", "combat.applied_siege"),
}


class UnitContributionPool:
    """Per-combat unit activation record and resource totals."""

    def __init__(self, translator: Optional[Translator] = None):
        self._translator = translator
        self.attack_points = 0
        self.block_points = 0
        self.ranged_points = 0
        self.siege_points = 0
        self.activated_units: set[str] = set()

    @property
    def translator(self) -> Translator:
        if self._translator is None:
            self._translator = get_default_catalog()
        return self._translator

    @staticmethod
    def unit_key(unit: Any) -> str:
        return getattr(unit, "unit_id", None) or unit.get_name()

    def reset(self) -> None:
        """Clear totals and activations. Called once per combat start."""
        self.attack_points = 0
        self.block_points = 0
        self.ranged_points = 0
        self.siege_points = 0
        self.activated_units.clear()

    def is_activated(self, unit: Any) -> bool:
        return self.unit_key(unit) in self.activated_units

    def activate(self, unit: Any, current_phase: CombatPhase) -> UnitActivationResult:
        """Spend a unit and add its phase-relevant abilities to the totals.

        Rejected without any mutation if the unit is not ready or has
        already contributed in this combat.
        """
        if not unit.is_ready():
            return UnitActivationResult.rejected(
                CombatError.NOT_READY, self.translator.translate("combat.unit_not_ready")
            )
        key = self.unit_key(unit)
        if key in self.activated_units:
            return UnitActivationResult.rejected(
                CombatError.ALREADY_ACTIVATED,
                self.translator.translate("combat.unit_already_activated"),
            )

        unit.activate()
        self.activated_units.add(key)

        applied = []
        for ability in unit.get_abilities():
            route = ABILITY_ROUTES.get((current_phase, ability.type))
            if route is None:
                continue
            total, message_key = route
            setattr(self, total, getattr(self, total) + ability.value)
            applied.append(self.translator.translate(message_key, value=ability.value))

        if applied:
            message = self.translator.translate(
                "combat.unit_activated", unit=unit.get_name(), applied=", ".join(applied)
            )
        else:
            message = self.translator.translate("combat.unit_no_effect", unit=unit.get_name())
        return UnitActivationResult(success=True, message=message, applied=applied)

    def consume_attack(self) -> int:
        points, self.attack_points = self.attack_points, 0
        return points

    def consume_block(self) -> int:
        points, self.block_points = self.block_points, 0
        return points

    def consume_ranged_and_siege(self) -> tuple[int, int]:
        ranged, siege = self.ranged_points, self.siege_points
        self.ranged_points = 0
        self.siege_points = 0
        return ranged, siege

    def consume_siege(self) -> int:
        points, self.siege_points = self.siege_points, 0
        return points

    def get_state(self) -> dict[str, Any]:
        """Plain-data snapshot for checkpointing."""
        return {
            "attack_points": self.attack_points,
            "block_points": self.block_points,
            "ranged_points": self.ranged_points,
            "siege_points": self.siege_points,
            "activated_units": sorted(self.activated_units),
        }

    def load_state(self, state: Optional[dict[str, Any]]) -> None:
        if not state:
            return
        self.attack_points = int(state.get("attack_points", 0))
        self.block_points = int(state.get("block_points", 0))
        self.ranged_points = int(state.get("ranged_points", 0))
        self.siege_points = int(state.get("siege_points", 0))
        self.activated_units = set(state.get("activated_units", []))
