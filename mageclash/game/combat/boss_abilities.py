"""
Default boss ability executor.

Performs the side effect of a boss phase ability and returns a payload the
combat core forwards in its transition report:

- summon: spawns ``summon_count`` enemies of ``summon_type`` through an
  injected spawner
- heal: restores ``floor(max_health * heal_fraction)`` health
- double_attack: a buff marker, the boss attack scaling itself is driven by
  its enraged flag
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Callable, Optional

from ...core.config import CombatConfig
from ...core.messages import Translator, get_default_catalog

if TYPE_CHECKING:
    from ..entities.enemy import BossEnemy, Enemy

# Spawner signature: (enemy_type, count) -> enemies added to the combat
SummonSpawner = Callable[[str, int], list["Enemy"]]


class BossAbilityExecutor:
    """Executes named boss abilities."""

    def __init__(
        self,
        config: Optional[CombatConfig] = None,
        spawner: Optional[SummonSpawner] = None,
        translator: Optional[Translator] = None,
    ):
        self.config = config or CombatConfig()
        self.spawner = spawner
        self.translator = translator or get_default_catalog()
        self._handlers: dict[str, Callable[[BossEnemy], dict[str, Any]]] = {
            "summon": self._summon,
            "heal": self._heal,
            "double_attack": self._double_attack,
        }

    def execute(self, boss: BossEnemy, ability: str) -> Optional[dict[str, Any]]:
        """Run an ability; unknown abilities do nothing and return None."""
        handler = self._handlers.get(ability)
        if handler is None:
            return None
        return handler(boss)

    def _summon(self, boss: BossEnemy) -> dict[str, Any]:
        enemy_type = boss.summon_type or "weakling"
        spawned = self.spawner(enemy_type, boss.summon_count) if self.spawner else []
        return {
            "type": "summon",
            "enemy_type": enemy_type,
            "count": boss.summon_count,
            "spawned": [enemy.enemy_id for enemy in spawned],
            "message": self.translator.translate(
                "combat.boss.summons", name=boss.name, count=boss.summon_count, enemy=enemy_type
            ),
        }

    def _heal(self, boss: BossEnemy) -> dict[str, Any]:
        amount = math.floor(boss.max_health * self.config.heal_fraction)
        restored = boss.heal(amount)
        return {
            "type": "heal",
            "amount": restored,
            "message": self.translator.translate("combat.boss.heals", name=boss.name, amount=restored),
        }

    def _double_attack(self, boss: BossEnemy) -> dict[str, Any]:
        return {
            "type": "buff",
            "effect": "double_attack",
            "message": self.translator.translate("combat.boss.double_attack", name=boss.name),
        }
