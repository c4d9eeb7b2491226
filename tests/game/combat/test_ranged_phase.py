"""
Unit tests for the ranged and siege phase controller.
"""

from unittest.mock import Mock

import pytest

from mageclash.core.data.game_enums import AttackElement, CombatError, CombatPhase
from mageclash.game.combat.ranged_phase import RangedPhaseController
from mageclash.game.entities.enemy import Enemy


def summon_factory(enemy_type):
    return Enemy(enemy_type, enemy_id=f"{enemy_type}_summoned", armor=2, fame=1)


@pytest.fixture
def ranged_context(context):
    context.phase = CombatPhase.RANGED
    return context


@pytest.fixture
def controller(ranged_context):
    return RangedPhaseController(ranged_context, summon_factory=summon_factory)


class TestGuards:
    def test_wrong_phase(self, controller, ranged_context, orc):
        ranged_context.roster.add(orc)
        ranged_context.phase = CombatPhase.ATTACK

        result = controller.execute_attack(orc, 5, 0)

        assert result.error == CombatError.PHASE_VIOLATION
        assert ranged_context.roster.contains(orc)

    def test_target_not_in_roster(self, controller, orc):
        result = controller.execute_attack(orc, 5, 0)

        assert result.error == CombatError.INVALID_TARGET

    def test_fortified_enemy_immune_to_ranged(self, controller, ranged_context, guard):
        ranged_context.roster.add(guard)

        result = controller.execute_attack(guard, 10, 0)

        assert not result.success
        assert result.error == CombatError.IMMUNE
        assert result.message == "Guard is fortified. Only siege attacks can hit it."
        assert ranged_context.roster.contains(guard)

    def test_update(self, controller, ranged_context, orc):
        ranged_context.roster.add(orc)

        status = controller.update()

        assert status.success
        assert status.data["enemies"] == [orc]


class TestRegularTargets:
    """Shooting down regular enemies."""

    def test_ranged_and_siege_combine(self, controller, ranged_context, orc):
        ranged_context.roster.add(orc)

        result = controller.execute_attack(orc, 2, 1)

        assert result.success
        assert result.defeated == [orc]
        assert result.consumed_siege == 1
        assert result.consumed_ranged == 2
        assert ranged_context.hero.fame == 2
        assert result.messages == ["Orc defeated in the Ranged Phase!"]

    def test_siege_spent_before_ranged(self, controller, ranged_context, orc):
        ranged_context.roster.add(orc)

        result = controller.execute_attack(orc, 5, 2)

        assert result.consumed_siege == 2
        assert result.consumed_ranged == 1

    def test_too_weak(self, controller, ranged_context, orc):
        ranged_context.roster.add(orc)

        result = controller.execute_attack(orc, 2, 0)

        assert not result.success
        assert result.messages == ["Ranged attack too weak: 2 vs 3 armor."]
        assert ranged_context.roster.contains(orc)

    def test_siege_breaks_fortified_enemy(self, controller, ranged_context, guard):
        ranged_context.roster.add(guard)

        result = controller.execute_attack(guard, 10, 4)

        assert result.success
        assert result.consumed_siege == 4
        assert result.consumed_ranged == 0

    def test_only_siege_counts_against_fortified(self, controller, ranged_context, guard):
        ranged_context.roster.add(guard)

        result = controller.execute_attack(guard, 10, 3)

        assert not result.success
        assert result.total_attack == 3

    def test_unit_points_are_spent_first(self, controller, ranged_context, orc, archers):
        ranged_context.roster.add(orc)
        ranged_context.pool.activate(archers, CombatPhase.RANGED)

        result = controller.execute_attack(orc, 1, 0)

        assert result.success
        assert result.unit_contribution == 3
        assert result.consumed_ranged == 0
        assert ranged_context.pool.ranged_points == 0

    def test_unit_siege_lifts_fortified_immunity(self, controller, ranged_context, guard, catapult):
        ranged_context.roster.add(guard)
        ranged_context.pool.activate(catapult, CombatPhase.RANGED)

        result = controller.execute_attack(guard, 0, 0)

        assert result.success
        assert result.unit_contribution == 4

    def test_resistance_raises_effective_armor(self, controller, ranged_context):
        salamander = Enemy("salamander", enemy_id="sal", name="Salamander", armor=3, fire_resist=True)
        ranged_context.roster.add(salamander)

        result = controller.execute_attack(salamander, 5, 0, AttackElement.FIRE)

        assert not result.success
        assert result.messages == ["Ranged attack too weak: 5 vs 6 armor."]


class TestBossTargets:
    def test_ranged_damage_to_boss(self, controller, ranged_context, boss):
        ranged_context.roster.add(boss)

        result = controller.execute_attack(boss, 5, 0)

        assert result.success
        assert boss.current_health == 25
        assert result.consumed_ranged == 5

    def test_fortified_boss_takes_only_siege(self, controller, ranged_context, boss):
        boss.fortified = True
        ranged_context.roster.add(boss)

        result = controller.execute_attack(boss, 10, 3)

        assert boss.current_health == 27
        assert result.consumed_siege == 3
        assert result.consumed_ranged == 0


class TestSummoning:
    """Summoners are swapped for their summons at the end of the phase."""

    def test_summoner_replaced_in_place(self, controller, ranged_context, orc):
        necromancer = Enemy(
            "necromancer", enemy_id="necro", armor=4, summoner=True, summon_type="phantom"
        )
        ranged_context.roster.add(orc)
        ranged_context.roster.add(necromancer)

        pairs = controller.handle_summoning()

        summoned = ranged_context.roster.get("phantom_summoned")
        assert pairs == [(necromancer, summoned)]
        assert summoned.summoned
        assert [enemy.enemy_id for enemy in ranged_context.roster] == ["orc_1", "phantom_summoned"]
        assert ranged_context.summoned_from["phantom_summoned"] is necromancer

    def test_random_summon_from_pool(self, ranged_context):
        rng = Mock()
        rng.choice.return_value = "robber"
        controller = RangedPhaseController(ranged_context, summon_factory=summon_factory, rng=rng)
        ranged_context.roster.add(Enemy("necromancer", enemy_id="necro", armor=4, summoner=True))

        controller.handle_summoning()

        rng.choice.assert_called_once_with(ranged_context.config.summon_pool)
        assert "robber_summoned" in ranged_context.roster

    def test_boss_summoner_is_not_replaced(self, controller, ranged_context, boss):
        boss.summoner = True
        ranged_context.roster.add(boss)

        assert controller.handle_summoning() == []
        assert ranged_context.roster.contains(boss)

    def test_without_factory_nothing_happens(self, ranged_context):
        ranged_context.roster.add(Enemy("necromancer", enemy_id="necro", armor=4, summoner=True))

        assert RangedPhaseController(ranged_context).handle_summoning() == []
        assert "necro" in ranged_context.roster
