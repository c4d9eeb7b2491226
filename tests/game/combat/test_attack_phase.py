"""
Unit tests for the attack phase controller.
"""

import pytest

from mageclash.core.data.game_enums import AttackElement, CombatError, CombatPhase
from mageclash.core.events import EventType
from mageclash.game.combat.attack_phase import AttackPhaseController
from mageclash.game.combat.boss_abilities import BossAbilityExecutor
from mageclash.game.combat.boss_resolver import BossResolver
from mageclash.game.entities.enemy import Enemy


@pytest.fixture
def controller(context):
    return AttackPhaseController(context)


class TestPhaseGuard:
    """Attacks are only resolved in the Attack phase."""

    def test_block_phase_attack_is_rejected_without_mutation(self, controller, context, orc):
        context.roster.add(orc)
        context.phase = CombatPhase.BLOCK
        context.pool.attack_points = 3

        result = controller.execute_attack(10)

        assert not result.success
        assert result.error == CombatError.PHASE_VIOLATION
        assert result.message == "Only possible during the Attack Phase."
        assert context.roster.to_list() == [orc]
        assert context.defeated == []
        assert context.hero.fame == 0
        assert context.pool.attack_points == 3

    def test_update_reports_phase(self, controller, context, orc):
        context.roster.add(orc)

        status = controller.update()

        assert status.success
        assert status.message == "Attack Phase"
        assert status.data["enemies"] == [orc]

    def test_update_outside_phase(self, controller, context):
        context.phase = CombatPhase.RANGED
        assert controller.update().error == CombatError.PHASE_VIOLATION


class TestExecuteAttack:
    """Single attack resolutions."""

    def test_unit_attack_completes_the_pool(self, controller, context, swordsmen):
        brute = Enemy("brute", enemy_id="brute_1", name="Brute", armor=4, fame=3)
        context.roster.add(brute)
        context.pool.activate(swordsmen, CombatPhase.ATTACK)

        result = controller.execute_attack(2)

        assert result.success
        assert result.total_attack == 4
        assert result.unit_contribution == 2
        assert result.defeated == [brute]
        assert result.fame_gained == 3
        assert context.pool.attack_points == 0

    def test_weak_attack_keeps_unit_points(self, controller, context, orc, swordsmen):
        context.roster.add(orc)
        context.pool.activate(swordsmen, CombatPhase.ATTACK)

        result = controller.execute_attack(0)

        assert not result.success
        assert result.error is None
        assert context.pool.attack_points == 2
        assert result.messages == ["Attack too weak: 2 attack vs 3 armor."]

    def test_defaults_to_every_remaining_enemy(self, controller, context, orc, guard):
        context.roster.add(orc)
        context.roster.add(guard)

        result = controller.execute_attack(7)

        assert result.defeated == [orc, guard]
        assert not context.roster

    def test_explicit_targets(self, controller, context, orc, guard):
        context.roster.add(orc)
        context.roster.add(guard)

        result = controller.execute_attack(3, targets=[orc])

        assert result.defeated == [orc]
        assert context.roster.to_list() == [guard]

    def test_no_targets_is_invalid(self, controller, context):
        result = controller.execute_attack(5)

        assert not result.success
        assert result.error == CombatError.INVALID_TARGET

    def test_targets_outside_roster_are_invalid(self, controller, context, orc):
        result = controller.execute_attack(10, targets=[orc])

        assert not result.success
        assert result.error == CombatError.INVALID_TARGET
        assert result.messages == ["Orc is no longer part of this combat."]
        assert context.hero.fame == 0

    def test_attacking_a_defeated_enemy_again_is_invalid(self, controller, context, orc):
        context.roster.add(orc)
        assert controller.execute_attack(10, targets=[orc]).success

        again = controller.execute_attack(10, targets=[orc])

        assert again.error == CombatError.INVALID_TARGET
        assert again.fame_gained == 0
        assert context.hero.fame == orc.fame

    def test_duplicate_targets_are_resolved_once(self, controller, context, orc):
        context.roster.add(orc)

        result = controller.execute_attack(10, targets=[orc, orc])

        assert result.defeated == [orc]
        assert result.fame_gained == orc.fame
        assert context.hero.fame == orc.fame
        assert context.defeated == [orc]

    def test_duplicate_boss_target_is_hit_once(self, controller, context, boss):
        context.roster.add(boss)

        result = controller.execute_attack(5, targets=[boss, boss])

        assert boss.current_health == 25
        assert len(result.damaged) == 1

    def test_regulars_resolved_before_bosses(self, context, orc, boss, catalog):
        context.roster.add(boss)
        context.roster.add(orc)
        controller = AttackPhaseController(
            context, boss_resolver=BossResolver(BossAbilityExecutor(translator=catalog))
        )

        result = controller.execute_attack(5)

        assert result.defeated == [orc]
        assert result.damaged[0].boss is boss
        assert boss.current_health == 25
        assert result.messages[0] == "1 enemies defeated!"

    def test_element_applies_to_both_paths(self, controller, context, boss):
        salamander = Enemy("salamander", enemy_id="sal", armor=3, fame=2, fire_resist=True)
        boss.fire_resist = True
        context.roster.add(salamander)
        context.roster.add(boss)

        result = controller.execute_attack(6, AttackElement.FIRE)

        assert result.defeated == [salamander]
        assert boss.current_health == 27

    def test_attack_resolved_event(self, controller, context, orc, event_manager):
        received = []
        event_manager.subscribe(EventType.ATTACK_RESOLVED, received.append)
        context.roster.add(orc)

        controller.execute_attack(3)
        event_manager.process_events()

        assert received[0].success
        assert received[0].defeated_count == 1
        assert received[0].fame_gained == 2
