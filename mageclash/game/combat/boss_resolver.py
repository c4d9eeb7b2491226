"""
Boss resolution.

Applies resistance-adjusted damage to a boss health pool and reports every
phase threshold the hit crossed. Thresholds are consumed once: healing back
above a crossed threshold never lets it fire again.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional

from ...core.data.game_enums import ENRAGED_PHASE
from ...core.events import BossDamaged, BossPhaseTransition
from .combat_result import BossDamage, BossTransitionRecord, DamageResult, PhaseTransition
from .resistance import resistance_multiplier

if TYPE_CHECKING:
    from ..entities.enemy import BossEnemy
    from .boss_abilities import BossAbilityExecutor
    from .combat_context import CombatContext
    from .combat_result import CombatResult

MARKER_ABILITIES = frozenset({"enrage"})


class BossResolver:
    """Resolves attacks against bosses."""

    def __init__(self, ability_executor: Optional[BossAbilityExecutor] = None):
        self.ability_executor = ability_executor

    @staticmethod
    def apply_damage(
        boss: BossEnemy,
        damage: int,
        ability_executor: Optional[BossAbilityExecutor] = None,
    ) -> DamageResult:
        """Apply one hit and fire the thresholds it crossed, in phase order.

        Damage of zero or less changes nothing. A boss already at zero
        health is left untouched and the result is flagged as rejected.
        Thresholds are checked against the health left by the hit; the
        reported health includes whatever the fired abilities changed.
        """
        if boss.is_defeated:
            return DamageResult(health_percent=0.0, defeated=True, rejected=True)

        previous = boss.current_health
        if damage <= 0:
            return DamageResult(
                previous_health=previous,
                current_health=previous,
                health_percent=boss.health_percent,
            )

        new_health = max(0, previous - damage)
        assert new_health < previous
        boss.current_health = new_health
        health_percent = new_health / boss.max_health

        transitions = []
        # boss.phases is ordered from the first threshold crossed to the last
        for phase in boss.phases:
            if phase.triggered or health_percent > phase.threshold:
                continue
            phase.triggered = True
            if phase.key == ENRAGED_PHASE:
                boss.enraged = True

            payload = None
            if phase.ability and phase.ability not in MARKER_ABILITIES and ability_executor:
                payload = ability_executor.execute(boss, phase.ability)
            transitions.append(PhaseTransition(phase=phase.key, ability=phase.ability, payload=payload))

        return DamageResult(
            damage=previous - new_health,
            previous_health=previous,
            current_health=boss.current_health,
            health_percent=boss.health_percent,
            transitions=transitions,
            defeated=new_health == 0,
        )

    def resolve(
        self,
        bosses: list[BossEnemy],
        total_attack: int,
        element: Any,
        context: CombatContext,
        result: CombatResult,
    ) -> list[DamageResult]:
        """Damage each boss by ``floor(total_attack * multiplier)``."""
        outcomes = []
        hit: set[str] = set()
        for boss in bosses:
            if boss.enemy_id in hit:
                continue
            hit.add(boss.enemy_id)
            if not context.roster.contains(boss) or boss.is_defeated:
                result.messages.append(context.translate("combat.invalid_target", enemy=boss.name))
                continue

            damage = math.floor(total_attack * resistance_multiplier(boss, element))
            outcome = self.apply_damage(boss, damage, self.ability_executor)
            outcomes.append(outcome)
            if outcome.damage <= 0:
                continue
            self._record(boss, outcome, context, result)
        return outcomes

    def _record(
        self, boss: BossEnemy, outcome: DamageResult, context: CombatContext, result: CombatResult
    ) -> None:
        result.damaged.append(BossDamage(boss=boss, damage=outcome.damage, health_percent=outcome.health_percent))
        result.messages.append(context.translate(
            "combat.boss_damaged",
            enemy=boss.name,
            amount=outcome.damage,
            current=boss.current_health,
            max=boss.max_health,
        ))
        if context.event_manager:
            context.event_manager.publish(
                BossDamaged(turn=context.turn, boss=boss, damage=outcome.damage,
                            health_percent=outcome.health_percent),
                source="BossResolver",
            )

        for transition in outcome.transitions:
            result.boss_transitions.append(BossTransitionRecord(
                boss=boss, phase=transition.phase, ability=transition.ability, payload=transition.payload
            ))
            phase_name = context.translate(f"boss_phases.{transition.phase}")
            result.messages.append(context.translate("combat.boss_phase", enemy=boss.name, phase=phase_name))
            if transition.phase == ENRAGED_PHASE:
                result.messages.append(context.translate("combat.boss.enraged", name=boss.name))
            if transition.payload and transition.payload.get("message"):
                result.messages.append(transition.payload["message"])
            if context.event_manager:
                context.event_manager.publish(
                    BossPhaseTransition(turn=context.turn, boss=boss, phase=transition.phase,
                                        ability=transition.ability),
                    source="BossResolver",
                )
            context.emit_log(f"{boss.name} entered phase {transition.phase}", source="BossResolver")

        if outcome.defeated:
            context.commit_defeats([boss], result)
            result.messages.append(context.translate("combat.boss_defeated", enemy=boss.name, amount=boss.fame))
