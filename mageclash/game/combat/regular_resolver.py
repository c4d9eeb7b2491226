"""
Regular enemy resolution.

Decides which non-boss targets a shared attack pool defeats. Two policies are
supported, selected by RegularResolutionPolicy:

- ALL_OR_NOTHING: the pool must meet the summed armor-equivalent cost of every
  target, then all of them fall, otherwise none do
- GREEDY: targets are taken in input order while the remaining pool covers
  each one's cost

The armor-equivalent cost of an enemy is ``current_armor / multiplier``. The
enemy computes its own current armor, so elusive and similar rules never
leak into this module.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import numpy as np

from ...core.data.game_enums import RegularResolutionPolicy
from .resistance import resistance_multiplier

if TYPE_CHECKING:
    from ..entities.enemy import Enemy
    from .combat_context import CombatContext
    from .combat_result import CombatResult


class RegularEnemyResolver:
    """Resolves one shared attack pool against regular enemies."""

    def __init__(self, policy: RegularResolutionPolicy = RegularResolutionPolicy.ALL_OR_NOTHING):
        self.policy = policy

    @staticmethod
    def armor_costs(enemies: list[Enemy], element: Any, context: CombatContext) -> np.ndarray:
        """Armor-equivalent cost of each enemy, in input order."""
        if not enemies:
            return np.zeros(0, dtype=np.float64)
        armors = np.array(
            [enemy.current_armor(context.is_blocked(enemy), context.in_attack_phase) for enemy in enemies],
            dtype=np.float64,
        )
        multipliers = np.array([resistance_multiplier(enemy, element) for enemy in enemies], dtype=np.float64)
        return armors / multipliers

    def resolve(
        self,
        enemies: list[Enemy],
        total_attack: int,
        element: Any,
        context: CombatContext,
        result: CombatResult,
    ) -> list[Enemy]:
        """Defeat the enemies the pool can beat and record everything on result.

        Targets that already left the roster are skipped. The full decision is
        computed before any enemy is moved to the defeated list.

        Returns:
            The enemies defeated by this call
        """
        targets = [enemy for enemy in enemies if context.roster.contains(enemy)]
        for enemy in enemies:
            if enemy not in targets:
                result.messages.append(context.translate("combat.invalid_target", enemy=enemy.name))
        if not targets:
            return []

        assert not any(enemy.is_boss for enemy in targets), "Bosses are resolved by BossResolver"

        costs = self.armor_costs(targets, element, context)
        if self.policy == RegularResolutionPolicy.GREEDY:
            defeated, survivors_cost, remaining = self._decide_greedy(targets, costs, total_attack)
        else:
            defeated, survivors_cost, remaining = self._decide_all_or_nothing(targets, costs, total_attack)

        if defeated:
            context.commit_defeats(defeated, result)
            result.messages.append(context.translate("combat.enemies_defeated", count=len(defeated)))
            context.emit_log(f"Attack {total_attack} defeated {len(defeated)} of {len(targets)} enemies")

        if len(defeated) < len(targets):
            key = "combat.attack_partial" if defeated else "combat.attack_weak"
            result.messages.append(context.translate(
                key, attack=math.floor(remaining), armor=math.floor(survivors_cost)
            ))
        return defeated

    @staticmethod
    def _decide_all_or_nothing(
        targets: list[Enemy], costs: np.ndarray, total_attack: int
    ) -> tuple[list[Enemy], float, float]:
        total_armor = float(costs.sum())
        if total_attack >= total_armor:
            return list(targets), 0.0, total_attack - total_armor
        return [], total_armor, float(total_attack)

    @staticmethod
    def _decide_greedy(
        targets: list[Enemy], costs: np.ndarray, total_attack: int
    ) -> tuple[list[Enemy], float, float]:
        remaining = float(total_attack)
        defeated = []
        survivors_cost = 0.0
        for enemy, cost in zip(targets, costs.tolist()):
            if remaining >= cost:
                remaining -= cost
                defeated.append(enemy)
            else:
                survivors_cost += cost
        return defeated, survivors_cost, remaining
