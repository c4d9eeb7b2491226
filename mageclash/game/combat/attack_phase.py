"""
Attack phase controller.

Orchestrates one attack resolution: validates the phase, adds the unit
attack pool, splits the targets into regulars and bosses, runs both
resolvers and folds everything into a single CombatResult.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ...core.data.game_enums import AttackElement, CombatError, CombatPhase
from ...core.events import AttackResolved
from .boss_resolver import BossResolver
from .combat_result import CombatResult, PhaseResult
from .regular_resolver import RegularEnemyResolver

if TYPE_CHECKING:
    from ..entities.enemy import Enemy
    from .combat_context import CombatContext


class AttackPhaseController:
    """Resolves player attacks during the Attack phase."""

    def __init__(
        self,
        context: CombatContext,
        regular_resolver: Optional[RegularEnemyResolver] = None,
        boss_resolver: Optional[BossResolver] = None,
    ):
        self.context = context
        self.regular_resolver = regular_resolver or RegularEnemyResolver(context.config.regular_policy)
        self.boss_resolver = boss_resolver or BossResolver()

    def _phase_violation(self) -> str:
        return self.context.translate(
            "combat.phase_violation", phase=self.context.phase_name(CombatPhase.ATTACK)
        )

    def update(self) -> PhaseResult:
        """Snapshot of the phase for polling UIs."""
        if self.context.phase != CombatPhase.ATTACK:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation())
        return PhaseResult.ok(
            self.context.phase_name(),
            enemies=self.context.roster.to_list(),
            defeated=list(self.context.defeated),
        )

    def execute_attack(
        self,
        attack_value: int,
        element: Any = AttackElement.PHYSICAL,
        targets: Optional[list[Enemy]] = None,
    ) -> CombatResult:
        """Resolve an attack against targets (default: every remaining enemy).

        Not idempotent: each call applies damage and defeats again, so it
        must be invoked once per player decision.
        """
        context = self.context
        if context.phase != CombatPhase.ATTACK:
            return CombatResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation())

        unit_attack = context.pool.attack_points
        total_attack = attack_value + unit_attack
        if targets is None:
            targets = context.roster.to_list()
        else:
            # One resolution per enemy, in first-seen order
            unique: dict[str, Enemy] = {}
            for enemy in targets:
                unique.setdefault(enemy.enemy_id, enemy)
            targets = list(unique.values())
        live = [enemy for enemy in targets if context.roster.contains(enemy)]

        bosses = [enemy for enemy in targets if enemy.is_boss]
        regulars = [enemy for enemy in targets if not enemy.is_boss]

        result = CombatResult(total_attack=total_attack, unit_contribution=unit_attack)
        if regulars:
            self.regular_resolver.resolve(regulars, total_attack, element, context, result)
        if bosses:
            self.boss_resolver.resolve(bosses, total_attack, element, context, result)

        result.success = bool(result.defeated) or bool(result.damaged)
        if result.success:
            context.pool.consume_attack()
            if not result.messages:
                result.messages.append(context.translate("combat.attack_success"))
        elif not live:
            result.error = CombatError.INVALID_TARGET

        if context.event_manager:
            context.event_manager.publish(
                AttackResolved(
                    turn=context.turn,
                    total_attack=total_attack,
                    defeated_count=len(result.defeated),
                    fame_gained=result.fame_gained,
                    success=result.success,
                ),
                source="AttackPhaseController",
            )
        context.emit_log(
            f"Attack {total_attack} ({unit_attack} from units): "
            f"{len(result.defeated)} defeated, {result.fame_gained} fame",
            source="AttackPhaseController",
        )
        return result
