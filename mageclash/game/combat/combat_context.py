"""
Explicit combat context shared by the resolvers.

Resolvers never read combat state from anywhere else: the phase, roster,
defeated list, blocked set and contribution pool are all passed to them
through a CombatContext.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from ...core.config import CombatConfig
from ...core.data.game_enums import CombatPhase
from ...core.events import EnemyDefeated, LogMessage
from ...core.messages import Translator, get_default_catalog
from .unit_pool import UnitContributionPool

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ...core.status_effects import StatusEffectManager
    from ..entities.enemy import Enemy
    from ..entities.hero import Hero
    from ..entities.roster import EnemyRoster
    from .combat_result import CombatResult


@dataclass
class CombatContext:
    """Mutable state of one combat instance."""
    hero: Hero
    roster: EnemyRoster
    phase: CombatPhase = CombatPhase.NOT_IN_COMBAT
    pool: UnitContributionPool = field(default_factory=UnitContributionPool)
    defeated: list[Enemy] = field(default_factory=list)
    blocked: set[str] = field(default_factory=set)  # enemy ids blocked this combat
    summoned_from: dict[str, Enemy] = field(default_factory=dict)  # summoned id -> summoner
    config: CombatConfig = field(default_factory=CombatConfig)
    translator: Translator = field(default_factory=get_default_catalog)
    event_manager: Optional[EventManager] = None
    status_effects: Optional[StatusEffectManager] = None
    turn: int = 0

    @property
    def in_attack_phase(self) -> bool:
        return self.phase == CombatPhase.ATTACK

    def is_blocked(self, enemy: Enemy) -> bool:
        return enemy.enemy_id in self.blocked

    def translate(self, key: str, **params) -> str:
        return self.translator.translate(key, **params)

    def phase_name(self, phase: Optional[CombatPhase] = None) -> str:
        return self.translate(f"phases.{(phase or self.phase).value}")

    def emit_log(self, message: str, level: str = "INFO", source: str = "Combat") -> None:
        """Emit a log message event."""
        if self.event_manager:
            self.event_manager.publish(
                LogMessage(
                    turn=self.turn,
                    message=message,
                    category="BATTLE",
                    level=level,
                    source=source,
                ),
                source=source,
            )

    def commit_defeats(self, enemies: Iterable[Enemy], result: CombatResult) -> None:
        """Apply defeat bookkeeping for enemies already decided to fall.

        Each enemy is moved to the defeated list, removed from the roster,
        credited to the hero's fame and recorded on the result together.
        An enemy the roster no longer holds (e.g. listed twice) is skipped.
        """
        enemies = list(enemies)
        for enemy in enemies:
            assert self.roster.contains(enemy), f"{enemy.enemy_id} is not in the roster"

        fame_before = result.fame_gained
        committed = []
        for enemy in enemies:
            if self.roster.remove(enemy.enemy_id) is None:
                continue
            committed.append(enemy)
            self.defeated.append(enemy)
            self.hero.gain_fame(enemy.fame)
            result.add_defeat(enemy)
            if self.status_effects:
                self.status_effects.remove_enemy(enemy)
            if self.event_manager:
                self.event_manager.publish(
                    EnemyDefeated(turn=self.turn, enemy=enemy, fame=enemy.fame),
                    source="Combat",
                )

        assert result.fame_gained - fame_before == sum(enemy.fame for enemy in committed)
