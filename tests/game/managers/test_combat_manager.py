"""
Unit tests for the CombatManager class.

Tests phase flow, phase gating and the coordination between the resolvers,
the unit pool and the status effect layer.
"""
import random
from unittest.mock import Mock

import pytest

from mageclash.core.config import CombatConfig
from mageclash.core.data.game_enums import (
    AbilityType,
    CombatError,
    CombatPhase,
    EffectType,
    RegularResolutionPolicy,
)
from mageclash.core.events import EventType
from mageclash.game.combat.blocking_engine import BlockCard
from mageclash.game.entities.enemy import Enemy
from mageclash.game.entities.unit import AlliedUnit, UnitAbility
from mageclash.game.managers.combat_manager import CombatManager


@pytest.fixture
def manager(hero, orc, guard, event_manager, catalog):
    return CombatManager(hero, [orc, guard], event_manager, translator=catalog)


def advance_to_attack(manager):
    """Run the opening phases without doing anything in them."""
    manager.start()
    manager.end_ranged_phase()
    manager.end_block_phase()
    if manager.phase == CombatPhase.DAMAGE:
        manager.resolve_damage_phase()


class TestCombatManagerInitialization:
    """Test CombatManager initialization and setup."""

    def test_initialization(self, manager, orc, guard):
        assert manager.phase == CombatPhase.NOT_IN_COMBAT
        assert manager.roster.to_list() == [orc, guard]
        assert manager.defeated == []
        assert manager.attack_phase.regular_resolver.policy == RegularResolutionPolicy.ALL_OR_NOTHING

    def test_initialization_publishes_event(self, hero, orc, event_manager):
        received = []
        event_manager.subscribe(EventType.MANAGER_INITIALIZED, received.append)

        CombatManager(hero, [orc], event_manager)
        event_manager.process_events()

        assert received[0].manager_name == "CombatManager"

    def test_policy_from_config(self, hero, orc):
        config = CombatConfig(regular_policy=RegularResolutionPolicy.GREEDY)
        manager = CombatManager(hero, [orc], config=config)

        assert manager.attack_phase.regular_resolver.policy == RegularResolutionPolicy.GREEDY

    def test_works_without_event_manager(self, hero, orc):
        manager = CombatManager(hero, [orc])
        advance_to_attack(manager)

        assert manager.attack_enemies(3).success


class TestPhaseFlow:
    """Phases advance in order and reject out-of-turn calls."""

    def test_start_enters_ranged_phase(self, manager):
        result = manager.start()

        assert result.success
        assert manager.phase == CombatPhase.RANGED
        assert result.message == "Combat against 2 enemies begins. Ranged Phase."

    def test_start_twice_is_rejected(self, manager):
        manager.start()

        assert manager.start().error == CombatError.PHASE_VIOLATION

    def test_phase_changes_are_published(self, manager, event_manager):
        changes = []
        event_manager.subscribe(EventType.COMBAT_PHASE_CHANGED, changes.append)

        manager.start()
        manager.end_ranged_phase()
        event_manager.process_events()

        assert [(c.old_phase, c.new_phase) for c in changes] == [
            (CombatPhase.NOT_IN_COMBAT, CombatPhase.RANGED),
            (CombatPhase.RANGED, CombatPhase.BLOCK),
        ]

    def test_phase_change_delivered_before_logs(self, manager, event_manager):
        received = []
        event_manager.subscribe(EventType.COMBAT_PHASE_CHANGED, received.append)
        event_manager.subscribe(EventType.LOG_MESSAGE, received.append)

        manager.start()
        event_manager.process_events()

        assert received[0].event_type == EventType.COMBAT_PHASE_CHANGED
        assert any(event.event_type == EventType.LOG_MESSAGE for event in received[1:])

    def test_attack_outside_attack_phase(self, manager, orc):
        manager.start()

        result = manager.attack_enemies(10)

        assert result.error == CombatError.PHASE_VIOLATION
        assert manager.roster.contains(orc)

    def test_block_outside_block_phase(self, manager, orc):
        manager.start()

        assert manager.block_enemy(orc, 5).error == CombatError.PHASE_VIOLATION

    def test_ranged_outside_ranged_phase(self, manager, orc):
        advance_to_attack(manager)

        assert manager.ranged_attack_enemy(orc, 5).error == CombatError.PHASE_VIOLATION

    def test_info_calls_follow_phase(self, manager):
        manager.start()

        assert manager.ranged_phase_info().success
        assert manager.attack_phase_info().error == CombatError.PHASE_VIOLATION

    def test_full_flow(self, manager):
        advance_to_attack(manager)
        assert manager.phase == CombatPhase.ATTACK

        assert manager.attack_enemies(7).success
        end = manager.end_combat()
        assert end.data["victory"]
        assert manager.is_complete()

        rewards = manager.collect_rewards()
        assert rewards.data["fame_gained"] == 5
        assert manager.phase == CombatPhase.REWARD


class TestRangedPhase:
    def test_ranged_kill(self, manager, orc):
        manager.start()

        result = manager.ranged_attack_enemy(orc, 3)

        assert result.success
        assert manager.defeated == [orc]

    def test_clearing_the_roster_ends_combat(self, hero, orc, catalog):
        manager = CombatManager(hero, [orc], translator=catalog)
        manager.start()
        manager.ranged_attack_enemy(orc, 3)

        result = manager.end_ranged_phase()

        assert manager.phase == CombatPhase.COMPLETE
        assert result.data["victory"]

    def test_summoners_summon_at_end_of_phase(self, hero, catalog):
        necromancer = Enemy("necromancer", enemy_id="necro", name="Necromancer", armor=4,
                            summoner=True, summon_type="orc")
        manager = CombatManager(hero, [necromancer], translator=catalog)
        manager.start()

        result = manager.end_ranged_phase()

        summoned = manager.roster.to_list()[0]
        assert summoned.enemy_type == "orc"
        assert summoned.summoned
        assert "Necromancer summons Orc!" in result.message
        assert manager.phase == CombatPhase.BLOCK

    def test_random_summon_uses_injected_rng(self, hero, catalog):
        necromancer = Enemy("necromancer", enemy_id="necro", armor=4, summoner=True)
        rng = Mock(spec=random.Random)
        rng.choice.return_value = "weakling"
        manager = CombatManager(hero, [necromancer], translator=catalog, rng=rng)
        manager.start()

        manager.end_ranged_phase()

        assert manager.roster.to_list()[0].enemy_type == "weakling"


class TestBlockPhase:
    """Blocking and unit block consumption."""

    @pytest.fixture
    def blocking(self, manager):
        manager.start()
        manager.end_ranged_phase()
        return manager

    def test_block_phase_reports_incoming_damage(self, blocking):
        result = blocking.block_phase()

        assert result.data["total_damage"] == 5

    def test_block_enemy(self, blocking, orc, event_manager):
        blocked = []
        event_manager.subscribe(EventType.ENEMY_BLOCKED, blocked.append)

        result = blocking.block_enemy(orc, 2)
        event_manager.process_events()

        assert result.success
        assert blocking.block_phase().data["total_damage"] == 3
        assert [event.enemy for event in blocked] == [orc]

    def test_enemy_cannot_be_blocked_twice(self, blocking, orc):
        blocking.block_enemy(orc, 2)

        assert blocking.block_enemy(orc, 2).error == CombatError.ALREADY_BLOCKED

    def test_failed_block_changes_nothing(self, blocking, guard):
        result = blocking.block_enemy(guard, 1)

        assert not result.success
        assert blocking.block_phase().data["blocked"] == []

    def test_unit_block_spent_when_needed(self, blocking, orc, archers):
        blocking.activate_unit(archers)

        assert blocking.block_enemy(orc, 0).success
        assert blocking.pool.block_points == 0

    def test_unit_block_kept_when_cards_suffice(self, blocking, orc, archers):
        blocking.activate_unit(archers)

        assert blocking.block_enemy(orc, BlockCard(2)).success
        assert blocking.pool.block_points == 2

    def test_all_blocked_skips_damage_phase(self, blocking, orc, guard):
        blocking.block_enemy(orc, 2)
        blocking.block_enemy(guard, 3)

        result = blocking.end_block_phase()

        assert blocking.phase == CombatPhase.ATTACK
        assert result.message == "All enemies blocked. No damage taken."


class TestDamagePhase:
    """Wounds and unit damage assignment."""

    @pytest.fixture
    def damage(self, manager):
        manager.start()
        manager.end_ranged_phase()
        manager.end_block_phase()
        return manager

    def test_unblocked_enemies_listed(self, damage, orc, guard):
        assert damage.phase == CombatPhase.DAMAGE
        assert damage.damage_phase().data["unblocked"] == [orc, guard]

    def test_hero_takes_wounds(self, damage, hero, event_manager):
        wounded = []
        event_manager.subscribe(EventType.HERO_WOUNDED, wounded.append)

        result = damage.resolve_damage_phase()
        event_manager.process_events()

        assert result.data["wounds"] == 3
        assert hero.wounds == 3
        assert wounded[0].wounds == 3
        assert damage.phase == CombatPhase.ATTACK

    def test_unit_absorbs_damage(self, damage, hero, swordsmen, guard):
        result = damage.assign_damage_to_unit(swordsmen, guard)

        assert result.success
        assert swordsmen.wounds == 1
        assert damage.resolve_damage_phase().data["wounds"] == 1
        assert hero.wounds == 1

    def test_default_assignment_target(self, damage, swordsmen, orc):
        damage.assign_damage_to_unit(swordsmen)

        assert orc.enemy_id in damage.damage_assigned

    def test_damage_assigned_once(self, damage, swordsmen, archers, orc):
        damage.assign_damage_to_unit(swordsmen, orc)

        assert not damage.assign_damage_to_unit(archers, orc).success

    def test_assassin_damage_stays_with_hero(self, hero, swordsmen, catalog):
        phantom = Enemy("phantom", enemy_id="ph", name="Phantom", armor=2, attack=3, assassin=True)
        manager = CombatManager(hero, [phantom], translator=catalog)
        manager.start()
        manager.end_ranged_phase()
        manager.end_block_phase()

        result = manager.assign_damage_to_unit(swordsmen)

        assert result.error == CombatError.INVALID_TARGET
        assert swordsmen.wounds == 0


class TestAttackPhase:
    def test_unit_activation_only_in_active_phases(self, manager, swordsmen):
        result = manager.activate_unit(swordsmen)

        assert result.error == CombatError.PHASE_VIOLATION
        assert not swordsmen.spent

    def test_unit_activation_published(self, manager, swordsmen, event_manager):
        received = []
        event_manager.subscribe(EventType.UNIT_ACTIVATED, received.append)
        advance_to_attack(manager)

        manager.activate_unit(swordsmen)
        event_manager.process_events()

        assert received[0].unit_name == "Swordsmen"
        assert received[0].applied == ("+2 Attack",)

    def test_unit_contributes_once_per_combat(self, manager, swordsmen):
        advance_to_attack(manager)

        assert manager.activate_unit(swordsmen).success
        swordsmen.refresh()
        assert manager.activate_unit(swordsmen).error == CombatError.ALREADY_ACTIVATED

    def test_boss_summons_join_the_roster(self, hero, boss, catalog):
        manager = CombatManager(hero, [boss], translator=catalog)
        advance_to_attack(manager)

        result = manager.attack_enemies(12)

        summoned = [enemy for enemy in manager.roster if enemy is not boss]
        assert len(summoned) == 2
        assert all(enemy.enemy_type == "weakling" and enemy.summoned for enemy in summoned)
        assert result.boss_transitions[0].payload["spawned"] == [e.enemy_id for e in summoned]


class TestStatusEffects:
    def test_poison_becomes_wounds_at_combat_end(self, manager, hero):
        advance_to_attack(manager)
        wounds_before = hero.wounds
        manager.apply_effect_to_hero(EffectType.POISON)
        manager.apply_effect_to_hero(EffectType.POISON)

        result = manager.end_combat()

        assert result.data["poison_wounds"] == 2
        assert hero.wounds == wounds_before + 2
        assert "Poison causes 2 additional wounds." in result.message

    def test_phase_effects_report_damage(self, manager, hero, orc):
        manager.start()
        manager.apply_effect_to_hero(EffectType.BURN)
        manager.apply_effect_to_enemy(orc, EffectType.BURN)

        result = manager.process_phase_effects()

        assert result.data["hero_damage"] == 1
        assert result.data["enemy_damage"] == [(orc, 1)]
        assert hero.wounds == 0

    def test_phase_effects_outside_combat(self, manager):
        assert manager.process_phase_effects().error == CombatError.PHASE_VIOLATION


class TestEndOfCombat:
    def test_end_combat_with_survivors(self, manager, event_manager):
        ended = []
        event_manager.subscribe(EventType.COMBAT_ENDED, ended.append)
        advance_to_attack(manager)

        result = manager.end_combat()
        event_manager.process_events()

        assert not result.data["victory"]
        assert result.message == "Combat ended."
        assert not ended[0].victory
        assert ended[0].wounds_received == 3

    def test_rewards_need_completed_combat(self, manager):
        manager.start()
        assert manager.collect_rewards().error == CombatError.PHASE_VIOLATION

    def test_prediction_through_manager(self, manager):
        manager.start()

        prediction = manager.get_predicted_outcome(current_attack=3)

        assert prediction.expected_wounds == 3
        assert prediction.enemies_defeated == ["Orc"]


class TestSnapshots:
    """get_state/load_state round trip."""

    def test_round_trip_restores_combat(self, manager, orc, guard):
        manager.start()
        manager.ranged_attack_enemy(orc, 3)
        manager.end_ranged_phase()
        manager.block_enemy(guard, 3)
        snapshot = manager.get_state()

        manager.context.blocked.clear()
        manager.end_block_phase()
        manager.load_state(snapshot)

        assert manager.phase == CombatPhase.BLOCK
        assert manager.defeated == [orc]
        assert manager.roster.to_list() == [guard]
        assert manager.context.is_blocked(guard)

    def test_unknown_enemy_in_snapshot(self, manager):
        snapshot = manager.get_state()
        snapshot["enemies"].append({"id": "stranger"})

        with pytest.raises(KeyError):
            manager.load_state(snapshot)

    def test_snapshot_keeps_unit_pool(self, manager):
        archers = AlliedUnit("Archers", [UnitAbility(AbilityType.RANGED, 3)], unit_id="archers")
        manager.start()
        manager.activate_unit(archers)

        state = manager.get_state()

        assert state["pool"]["ranged_points"] == 3
        assert state["pool"]["activated_units"] == ["archers"]
