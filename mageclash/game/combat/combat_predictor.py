"""
Combat outcome prediction.

Read-only "what-if" projection used by the UI: expected wounds from the
enemies still unblocked, and which enemies the staged attack would beat on
its own. Nothing here mutates combat state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from ...core.data.game_enums import AttackElement, CombatPhase
from .resistance import resistance_multiplier

if TYPE_CHECKING:
    from .combat_context import CombatContext

WOUND_PHASES = frozenset({CombatPhase.BLOCK, CombatPhase.RANGED})
ATTACK_PHASES = frozenset({CombatPhase.ATTACK, CombatPhase.BLOCK, CombatPhase.RANGED})


@dataclass
class CombatPrediction:
    """Projected consequences of the currently staged values."""
    expected_wounds: int = 0
    poison_wounds: int = 0
    is_poisoned: bool = False
    enemies_defeated: list[str] = field(default_factory=list)
    total_enemy_attack: int = 0


class CombatPredictor:
    """Static helpers for combat forecasts."""

    @staticmethod
    def get_predicted_outcome(
        combat: CombatContext,
        current_attack: int = 0,
        current_block: int = 0,
        element: Any = AttackElement.PHYSICAL,
    ) -> Optional[CombatPrediction]:
        """Predict the outcome of committing the staged attack.

        Args:
            combat: Live combat context
            current_attack: Attack staged by the player, not yet committed
            current_block: Block staged by the player (not assigned yet, so
                it does not reduce the projected wounds)
            element: Element of the staged attack

        Returns:
            CombatPrediction, or None outside an active fighting phase
        """
        if combat.phase not in ATTACK_PHASES:
            return None

        prediction = CombatPrediction()
        enemies = combat.roster.to_list()

        if combat.phase in WOUND_PHASES:
            unblocked = [enemy for enemy in enemies if not combat.is_blocked(enemy)]
            total = sum(enemy.effective_attack() for enemy in unblocked)
            armor = max(combat.config.hero_min_armor, combat.hero.armor or 1)
            prediction.total_enemy_attack = total
            prediction.expected_wounds = math.ceil(total / armor)
            prediction.is_poisoned = any(enemy.poison for enemy in unblocked)
            prediction.poison_wounds = prediction.expected_wounds if prediction.is_poisoned else 0

        prediction.enemies_defeated = CombatPredictor.beatable_enemies(
            combat, current_attack + combat.pool.attack_points, element
        )
        return prediction

    @staticmethod
    def beatable_enemies(combat: CombatContext, combined_attack: int, element: Any) -> list[str]:
        """Names of enemies the whole pool could beat one at a time."""
        enemies = [enemy for enemy in combat.roster if enemy not in combat.defeated]
        if not enemies:
            return []

        requirements = np.array(
            [
                enemy.current_health if enemy.is_boss
                else enemy.current_armor(combat.is_blocked(enemy), combat.in_attack_phase)
                for enemy in enemies
            ],
            dtype=np.float64,
        )
        multipliers = np.array([resistance_multiplier(enemy, element) for enemy in enemies], dtype=np.float64)
        beatable = combined_attack >= requirements / multipliers
        return [enemy.name for enemy, hit in zip(enemies, beatable.tolist()) if hit]
