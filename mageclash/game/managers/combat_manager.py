"""
Combat management system for phase flow and orchestration.

This module drives one combat through its phases (Ranged, Block, Damage,
Attack, Complete, Reward) and coordinates the resolvers, the unit pool and
the status effect layer. Every phase-gated operation returns a typed result
carrying a phase-violation indicator when invoked out of turn.
"""
from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any, Optional

from ...core.config import CombatConfig
from ...core.data.game_enums import AttackElement, CombatError, CombatPhase, EffectType
from ...core.events import (
    CombatEnded, CombatPhaseChanged, CombatStarted, EnemyBlocked, EventPriority, HeroWounded,
    ManagerInitialized, UnitActivated,
)
from ...core.messages import Translator, get_default_catalog
from ...core.status_effects import EffectApplication, StatusEffectManager
from ..combat import (
    AttackPhaseController,
    BlockingEngine,
    BossAbilityExecutor,
    BossResolver,
    CombatContext,
    CombatPredictor,
    CombatPrediction,
    CombatResult,
    DamageSystem,
    PhaseResult,
    RangedAttackResult,
    RangedPhaseController,
    RegularEnemyResolver,
    UnitActivationResult,
    UnitContributionPool,
    UnitDamageResult,
)
from ..combat.blocking_engine import BlockInput
from ..combat.combat_result import BlockResult
from ..entities.enemy_templates import create_enemy
from ..entities.roster import EnemyRoster

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ..entities.enemy import Enemy
    from ..entities.hero import Hero

ACTIVE_PHASES = frozenset({CombatPhase.RANGED, CombatPhase.BLOCK, CombatPhase.DAMAGE, CombatPhase.ATTACK})


class CombatManager:
    """Runs a single combat between the hero and a roster of enemies."""

    def __init__(
        self,
        hero: Hero,
        enemies: list[Enemy],
        event_manager: Optional[EventManager] = None,
        config: Optional[CombatConfig] = None,
        translator: Optional[Translator] = None,
        rng: Optional[random.Random] = None,
    ):
        self.hero = hero
        self.event_manager = event_manager
        self.config = config or CombatConfig()
        self.translator = translator or get_default_catalog()

        self.status_effects = StatusEffectManager(event_manager)
        self.context = CombatContext(
            hero=hero,
            roster=EnemyRoster(enemies),
            pool=UnitContributionPool(self.translator),
            config=self.config,
            translator=self.translator,
            event_manager=event_manager,
            status_effects=self.status_effects,
        )
        # Every enemy that ever took part, for snapshots
        self._known_enemies: dict[str, Enemy] = {enemy.enemy_id: enemy for enemy in enemies}

        executor = BossAbilityExecutor(self.config, spawner=self._spawn_summons, translator=self.translator)
        boss_resolver = BossResolver(executor)
        self.attack_phase = AttackPhaseController(
            self.context, RegularEnemyResolver(self.config.regular_policy), boss_resolver
        )
        self.ranged_phase = RangedPhaseController(
            self.context, boss_resolver, summon_factory=self._create_summon, rng=rng
        )
        self.blocking_engine = BlockingEngine(self.translator)
        self.damage_system = DamageSystem(self.translator, min_armor=self.config.hero_min_armor)

        self.unblocked: list[Enemy] = []
        self.damage_assigned: set[str] = set()
        self.total_damage = 0
        self.wounds_received = 0

        if self.event_manager:
            self.event_manager.publish(
                ManagerInitialized(turn=0, manager_name="CombatManager"),
                source="CombatManager"
            )

    @property
    def phase(self) -> CombatPhase:
        return self.context.phase

    @property
    def pool(self) -> UnitContributionPool:
        return self.context.pool

    @property
    def roster(self) -> EnemyRoster:
        return self.context.roster

    @property
    def defeated(self) -> list[Enemy]:
        return self.context.defeated

    def _set_phase(self, new_phase: CombatPhase) -> None:
        old_phase = self.context.phase
        self.context.phase = new_phase
        if self.event_manager:
            self.event_manager.publish(
                CombatPhaseChanged(turn=self.context.turn, old_phase=old_phase, new_phase=new_phase),
                EventPriority.HIGH,
                source="CombatManager"
            )
        self.context.emit_log(f"Combat phase: {old_phase.value} -> {new_phase.value}", source="CombatManager")

    def _phase_violation(self, required: CombatPhase) -> str:
        return self.translator.translate("combat.phase_violation", phase=self.context.phase_name(required))

    def _track(self, enemy: Enemy) -> None:
        self._known_enemies[enemy.enemy_id] = enemy

    def _create_summon(self, enemy_type: str) -> Enemy:
        summoned = create_enemy(enemy_type, summoned=True)
        self._track(summoned)
        return summoned

    def _spawn_summons(self, enemy_type: str, count: int) -> list[Enemy]:
        """Add boss summons to the roster."""
        spawned = []
        for _ in range(count):
            summoned = self._create_summon(enemy_type)
            self.context.roster.add(summoned)
            spawned.append(summoned)
        return spawned

    # Phase flow

    def start(self) -> PhaseResult:
        """Reset per-combat state and enter the Ranged phase."""
        if self.phase != CombatPhase.NOT_IN_COMBAT:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.NOT_IN_COMBAT))

        self.pool.reset()
        self.damage_system.reset()
        self.context.blocked.clear()
        self.context.defeated.clear()
        self.damage_assigned.clear()
        self.wounds_received = 0
        enemy_count = len(self.roster)
        self._set_phase(CombatPhase.RANGED)

        if self.event_manager:
            self.event_manager.publish(
                CombatStarted(turn=self.context.turn, enemy_count=enemy_count),
                source="CombatManager"
            )
        return PhaseResult.ok(
            self.translator.translate("combat.started", count=enemy_count),
            enemies=self.roster.to_list(),
        )

    def ranged_phase_info(self) -> PhaseResult:
        return self.ranged_phase.update()

    def ranged_attack_enemy(
        self,
        enemy: Enemy,
        ranged_value: int,
        siege_value: int = 0,
        element: Any = AttackElement.PHYSICAL,
    ) -> RangedAttackResult:
        return self.ranged_phase.execute_attack(enemy, ranged_value, siege_value, element)

    def end_ranged_phase(self) -> PhaseResult:
        """Leave the Ranged phase, letting summoners call in their summons."""
        if self.phase != CombatPhase.RANGED:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.RANGED))
        if not self.roster:
            return self.end_combat()

        messages = [
            self.translator.translate("combat.summoned", summoner=summoner.name, enemy=summoned.name)
            for summoner, summoned in self.ranged_phase.handle_summoning()
        ]
        self._set_phase(CombatPhase.BLOCK)
        messages.append(self.translator.translate("combat.block_started"))
        return PhaseResult.ok(" ".join(messages))

    def block_phase(self) -> PhaseResult:
        """Incoming damage still unblocked."""
        if self.phase != CombatPhase.BLOCK:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.BLOCK))
        self.total_damage = sum(
            enemy.effective_attack() for enemy in self.roster if not self.context.is_blocked(enemy)
        )
        return PhaseResult.ok(
            self.translator.translate("combat.total_damage", amount=self.total_damage),
            total_damage=self.total_damage,
            blocked=sorted(self.context.blocked),
        )

    def block_enemy(self, enemy: Enemy, block_input: BlockInput, movement_points: int = 0) -> BlockResult:
        """Try to stop one enemy's attack with the committed block."""
        if self.phase != CombatPhase.BLOCK:
            return BlockResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.BLOCK))
        if not self.roster.contains(enemy):
            return BlockResult.rejected(
                CombatError.INVALID_TARGET, self.translator.translate("combat.invalid_target", enemy=enemy.name)
            )
        if self.context.is_blocked(enemy):
            return BlockResult.rejected(CombatError.ALREADY_BLOCKED, self.translator.translate("combat.already_blocked"))

        unit_block = self.pool.block_points
        result = self.blocking_engine.calculate_block(enemy, block_input, unit_block, movement_points)
        if not result.success:
            return result

        self.context.blocked.add(enemy.enemy_id)
        if unit_block > 0:
            without_units = self.blocking_engine.calculate_block(enemy, block_input, 0, movement_points)
            if not without_units.success:
                self.pool.consume_block()
        if self.event_manager:
            self.event_manager.publish(EnemyBlocked(turn=self.context.turn, enemy=enemy), source="CombatManager")
        return result

    def end_block_phase(self) -> PhaseResult:
        if self.phase != CombatPhase.BLOCK:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.BLOCK))
        self._set_phase(CombatPhase.DAMAGE)
        return self.damage_phase()

    def damage_phase(self) -> PhaseResult:
        """Collect the unblocked enemies; skip straight to Attack if none."""
        if self.phase != CombatPhase.DAMAGE:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.DAMAGE))

        self.unblocked = [enemy for enemy in self.roster if not self.context.is_blocked(enemy)]
        if not self.unblocked:
            self.total_damage = 0
            self._set_phase(CombatPhase.ATTACK)
            return PhaseResult.ok(
                self.translator.translate("combat.damage_skipped"),
                total_damage=0,
                next_phase=CombatPhase.ATTACK,
            )

        self.total_damage = sum(enemy.effective_attack() for enemy in self.unblocked)
        return PhaseResult.ok(
            self.translator.translate("combat.assign_damage"),
            total_damage=self.total_damage,
            unblocked=list(self.unblocked),
            next_phase=CombatPhase.DAMAGE,
        )

    def assign_damage_to_unit(self, unit: Any, enemy: Optional[Enemy] = None) -> UnitDamageResult:
        """Have a unit absorb an unblocked enemy's damage.

        Without an explicit enemy, the first unassigned non-assassin is used.
        """
        if self.phase != CombatPhase.DAMAGE:
            return UnitDamageResult(
                success=False,
                message=self._phase_violation(CombatPhase.DAMAGE),
                error=CombatError.PHASE_VIOLATION,
            )

        pending = [e for e in self.unblocked if e.enemy_id not in self.damage_assigned]
        if enemy is None:
            enemy = next((e for e in pending if not e.assassin), None)
            if enemy is None:
                if any(e.assassin for e in pending):
                    return UnitDamageResult(
                        success=False,
                        message=self.translator.translate("combat.assassinate_restriction", enemy=pending[0].name),
                        error=CombatError.INVALID_TARGET,
                    )
                return UnitDamageResult(
                    success=False,
                    message=self.translator.translate("combat.no_enemy_to_assign"),
                    error=CombatError.INVALID_TARGET,
                )
        elif enemy not in self.unblocked:
            return UnitDamageResult(
                success=False,
                message=self.translator.translate("combat.no_enemy_to_assign"),
                error=CombatError.INVALID_TARGET,
            )

        if enemy.enemy_id in self.damage_assigned:
            return UnitDamageResult(
                success=False,
                message=self.translator.translate("combat.already_assigned"),
                error=CombatError.INVALID_TARGET,
            )

        result = self.damage_system.assign_damage_to_unit(unit, enemy)
        if result.success:
            self.damage_assigned.add(enemy.enemy_id)
            self.total_damage -= enemy.effective_attack()
        return result

    def resolve_damage_phase(self) -> PhaseResult:
        """Wound the hero for every unassigned, unblocked enemy and enter Attack."""
        if self.phase != CombatPhase.DAMAGE:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.DAMAGE))

        remaining = [e for e in self.unblocked if e.enemy_id not in self.damage_assigned]
        report = self.damage_system.calculate_damage(self.hero, remaining)
        self.total_damage = report.total_damage
        self.wounds_received += report.wounds

        messages = [report.message]
        if report.paralyze:
            messages.append(self.translator.translate("combat.paralyze_effect"))
        if report.wounds and self.event_manager:
            self.event_manager.publish(
                HeroWounded(turn=self.context.turn, wounds=report.wounds, poison_wounds=report.poison_wounds),
                source="CombatManager"
            )

        self._set_phase(CombatPhase.ATTACK)
        return PhaseResult.ok(
            " ".join(messages),
            total_damage=report.total_damage,
            wounds=report.wounds,
            paralyze=report.paralyze,
            next_phase=CombatPhase.ATTACK,
        )

    def attack_phase_info(self) -> PhaseResult:
        return self.attack_phase.update()

    def activate_unit(self, unit: Any) -> UnitActivationResult:
        """Spend a unit for the current phase."""
        if self.phase not in ACTIVE_PHASES:
            return UnitActivationResult.rejected(
                CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.ATTACK)
            )
        result = self.pool.activate(unit, self.phase)
        if result.success and self.event_manager:
            self.event_manager.publish(
                UnitActivated(turn=self.context.turn, unit_name=unit.get_name(), applied=tuple(result.applied)),
                source="CombatManager"
            )
        return result

    def attack_enemies(
        self,
        attack_value: int,
        element: Any = AttackElement.PHYSICAL,
        targets: Optional[list[Enemy]] = None,
    ) -> CombatResult:
        return self.attack_phase.execute_attack(attack_value, element, targets)

    # Status effects

    def apply_effect_to_hero(self, effect_type: EffectType) -> EffectApplication:
        return self.status_effects.apply_to_hero(self.hero, effect_type, turn=self.context.turn)

    def apply_effect_to_enemy(self, enemy: Enemy, effect_type: EffectType) -> EffectApplication:
        return self.status_effects.apply_to_enemy(enemy, effect_type, turn=self.context.turn)

    def process_phase_effects(self) -> PhaseResult:
        """Tick status effects at a phase boundary and report their damage.

        The damage is reported, not applied; the caller decides how it lands.
        """
        if self.phase not in ACTIVE_PHASES:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(self.phase))

        messages = []
        hero_result = self.status_effects.process_hero_phase_start(self.hero, turn=self.context.turn)
        if hero_result.damage:
            messages.append(self.translator.translate("combat.hero_status_damage", amount=hero_result.damage))

        enemy_damage = self.status_effects.process_enemy_phase_start(self.roster.to_list(), turn=self.context.turn)
        for enemy, damage in enemy_damage:
            messages.append(
                self.translator.translate("combat.enemy_status_damage", enemy=enemy.name, amount=damage)
            )

        return PhaseResult.ok(
            " ".join(messages),
            hero_damage=hero_result.damage,
            enemy_damage=enemy_damage,
            expired=hero_result.expired,
        )

    # End of combat

    def end_combat(self) -> PhaseResult:
        """Close the combat, turning lingering poison into wounds."""
        if self.phase not in ACTIVE_PHASES:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(self.phase))

        end_result = self.status_effects.process_combat_end(self.hero)
        for _ in range(end_result.wounds):
            self.hero.take_wound()
        self.wounds_received += end_result.wounds

        victory = not self.roster
        fame_gained = sum(enemy.fame for enemy in self.defeated)
        messages = []
        if end_result.wounds:
            messages.append(self.translator.translate("combat.poison_wounds", amount=end_result.wounds))
        messages.append(self.translator.translate("combat.victory" if victory else "combat.combat_ended"))

        self._set_phase(CombatPhase.COMPLETE)
        if self.event_manager:
            self.event_manager.publish(
                CombatEnded(
                    turn=self.context.turn,
                    victory=victory,
                    fame_gained=fame_gained,
                    wounds_received=self.wounds_received,
                ),
                EventPriority.HIGH,
                source="CombatManager"
            )
        return PhaseResult.ok(
            " ".join(messages),
            victory=victory,
            defeated=list(self.defeated),
            remaining=self.roster.to_list(),
            fame_gained=fame_gained,
            wounds_received=self.wounds_received,
            poison_wounds=end_result.wounds,
        )

    def collect_rewards(self) -> PhaseResult:
        if self.phase != CombatPhase.COMPLETE:
            return PhaseResult.rejected(CombatError.PHASE_VIOLATION, self._phase_violation(CombatPhase.COMPLETE))
        fame_gained = sum(enemy.fame for enemy in self.defeated)
        self._set_phase(CombatPhase.REWARD)
        return PhaseResult.ok(
            self.translator.translate("combat.rewards", amount=fame_gained),
            fame_gained=fame_gained,
        )

    def is_complete(self) -> bool:
        return self.phase in (CombatPhase.COMPLETE, CombatPhase.REWARD)

    def get_predicted_outcome(
        self,
        current_attack: int = 0,
        current_block: int = 0,
        element: Any = AttackElement.PHYSICAL,
    ) -> Optional[CombatPrediction]:
        return CombatPredictor.get_predicted_outcome(self.context, current_attack, current_block, element)

    # Snapshots

    def get_state(self) -> dict[str, Any]:
        """Plain-data snapshot of every piece of mutable combat state."""
        return {
            "phase": self.phase.value,
            "enemies": [enemy.get_state() for enemy in self.roster],
            "defeated": [enemy.enemy_id for enemy in self.defeated],
            "blocked": sorted(self.context.blocked),
            "summoned_from": {
                summoned_id: summoner.enemy_id
                for summoned_id, summoner in self.context.summoned_from.items()
            },
            "damage_assigned": sorted(self.damage_assigned),
            "total_damage": self.total_damage,
            "wounds_received": self.wounds_received,
            "pool": self.pool.get_state(),
            "status_effects": self.status_effects.get_state(),
        }

    def load_state(self, state: Optional[dict[str, Any]]) -> None:
        """Restore a snapshot taken from this combat by get_state.

        Raises:
            KeyError: If the snapshot names an enemy this combat never saw
        """
        if not state:
            return

        roster = EnemyRoster()
        for enemy_state in state.get("enemies", []):
            enemy = self._known_enemies[enemy_state["id"]]
            enemy.load_state(enemy_state)
            roster.add(enemy)
        self.context.roster = roster
        self.context.defeated = [self._known_enemies[enemy_id] for enemy_id in state.get("defeated", [])]
        self.context.blocked = set(state.get("blocked", []))
        self.context.summoned_from = {
            summoned_id: self._known_enemies[summoner_id]
            for summoned_id, summoner_id in state.get("summoned_from", {}).items()
        }
        self.context.phase = CombatPhase(state.get("phase", CombatPhase.NOT_IN_COMBAT.value))

        self.damage_assigned = set(state.get("damage_assigned", []))
        self.unblocked = [enemy for enemy in roster if not self.context.is_blocked(enemy)]
        self.total_damage = int(state.get("total_damage", 0))
        self.wounds_received = int(state.get("wounds_received", 0))
        self.pool.load_state(state.get("pool"))
        self.status_effects.load_state(state.get("status_effects"))
