"""
Ranged and siege phase controller.

Handles the opening phase of a combat, where single enemies can be shot down
with ranged and siege attacks before they strike, and where summoners call in
their summoned enemies at the end of the phase.
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING, Any, Callable, Optional

from ...core.data.game_enums import AttackElement, CombatError, CombatPhase
from .boss_resolver import BossResolver
from .combat_result import PhaseResult, RangedAttackResult
from .resistance import resistance_multiplier

if TYPE_CHECKING:
    from ..entities.enemy import Enemy
    from .combat_context import CombatContext

# (enemy_type) -> new summoned enemy
SummonFactory = Callable[[str], "Enemy"]


class RangedPhaseController:
    """Resolves ranged and siege attacks during the Ranged phase."""

    def __init__(
        self,
        context: CombatContext,
        boss_resolver: Optional[BossResolver] = None,
        summon_factory: Optional[SummonFactory] = None,
        rng: Optional[random.Random] = None,
    ):
        self.context = context
        self.boss_resolver = boss_resolver or BossResolver()
        self.summon_factory = summon_factory
        self.rng = rng or random.Random()

    def _phase_violation(self) -> str:
        return self.context.translate(
            "combat.phase_violation", phase=self.context.phase_name(CombatPhase.RANGED)
        )

    def update(self) -> PhaseResult:
        if self.context.phase != CombatPhase.RANGED:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation())
        return PhaseResult.ok(
            self.context.translate("combat.phase_ranged"),
            enemies=self.context.roster.to_list(),
        )

    def execute_attack(
        self,
        enemy: Enemy,
        ranged_value: int,
        siege_value: int,
        element: Any = AttackElement.PHYSICAL,
    ) -> RangedAttackResult:
        """Shoot at a single enemy.

        Fortified enemies can only be hit with siege, and only siege points
        count against them. Otherwise ranged, siege and unit points combine.
        """
        context = self.context
        pool = context.pool
        if context.phase != CombatPhase.RANGED:
            return RangedAttackResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation())
        if not context.roster.contains(enemy):
            return RangedAttackResult.rejected(
                CombatError.INVALID_TARGET, context.translate("combat.invalid_target", enemy=enemy.name)
            )
        if enemy.fortified and siege_value == 0 and pool.siege_points == 0:
            return RangedAttackResult.rejected(
                CombatError.IMMUNE, context.translate("combat.fortified_immunity", enemy=enemy.name)
            )

        if enemy.fortified:
            combined = siege_value + pool.siege_points
        else:
            combined = ranged_value + siege_value + pool.ranged_points + pool.siege_points

        if enemy.is_boss:
            return self._attack_boss(enemy, ranged_value, siege_value, combined, element)
        return self._attack_regular(enemy, ranged_value, siege_value, combined, element)

    def _attack_boss(
        self, boss: Any, ranged_value: int, siege_value: int, combined: int, element: Any
    ) -> RangedAttackResult:
        context = self.context
        result = RangedAttackResult(total_attack=combined)
        if boss.fortified:
            result.unit_contribution = context.pool.consume_siege()
            result.consumed_siege = siege_value
        else:
            ranged, siege = context.pool.consume_ranged_and_siege()
            result.unit_contribution = ranged + siege
            result.consumed_ranged = ranged_value
            result.consumed_siege = siege_value

        self.boss_resolver.resolve([boss], combined, element, context, result)
        result.success = bool(result.damaged)
        return result

    def _attack_regular(
        self, enemy: Enemy, ranged_value: int, siege_value: int, combined: int, element: Any
    ) -> RangedAttackResult:
        context = self.context
        pool = context.pool
        armor = enemy.current_armor(context.is_blocked(enemy), False)
        effective_armor = armor / resistance_multiplier(enemy, element)
        context.emit_log(
            f"Ranged attack: {combined} vs {effective_armor} (armor {armor})",
            level="DEBUG",
            source="RangedPhaseController",
        )

        if combined < effective_armor:
            return RangedAttackResult(
                success=False,
                total_attack=combined,
                messages=[context.translate(
                    "combat.ranged_weak", attack=combined, armor=math.floor(effective_armor)
                )],
            )

        result = RangedAttackResult(success=True, total_attack=combined)
        if enemy.fortified:
            unit_siege = pool.consume_siege()
            result.unit_contribution = unit_siege
            result.consumed_siege = math.ceil(max(0.0, effective_armor - unit_siege))
        else:
            # Unit points are spent first, then siege, then ranged
            unit_ranged, unit_siege = pool.consume_ranged_and_siege()
            result.unit_contribution = unit_ranged + unit_siege
            remaining = max(0.0, effective_armor - result.unit_contribution)
            result.consumed_siege = math.ceil(min(siege_value, remaining))
            remaining -= result.consumed_siege
            if remaining > 0:
                result.consumed_ranged = math.ceil(min(ranged_value, remaining))

        context.commit_defeats([enemy], result)
        result.messages.append(context.translate(
            "combat.defeated_in_combat", enemy=enemy.name, phase=context.phase_name()
        ))
        return result

    def handle_summoning(self) -> list[tuple[Enemy, Enemy]]:
        """Replace every live summoner with a freshly summoned enemy.

        The summoned enemy takes the summoner's roster slot and the summoner
        is recorded in ``context.summoned_from``.

        Returns:
            (summoner, summoned) pairs in roster order
        """
        context = self.context
        if self.summon_factory is None:
            return []

        pairs = []
        for summoner in context.roster.to_list():
            if not summoner.summoner or summoner.is_boss:
                continue
            enemy_type = summoner.summon_type or self.rng.choice(context.config.summon_pool)
            summoned = self.summon_factory(enemy_type)
            summoned.summoned = True
            if not context.roster.replace(summoner.enemy_id, summoned):
                continue
            context.summoned_from[summoned.enemy_id] = summoner
            pairs.append((summoner, summoned))
            context.emit_log(
                context.translate("combat.summoned", summoner=summoner.name, enemy=summoned.name),
                source="RangedPhaseController",
            )
        return pairs
