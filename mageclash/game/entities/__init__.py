"""Combat entities.

This package contains the participants of a combat:
- enemy.py: Regular, elusive and boss enemy variants
- enemy_templates.py: YAML-driven enemy and boss creation
- roster.py: Arena-backed roster of the enemies still fighting
- hero.py: The hero's fame ledger, armor and wounds
- unit.py: Allied units and their abilities
"""

from .enemy import Enemy, ElusiveEnemy, BossEnemy, BossPhase, ENEMY_ABILITIES, ENEMY_RESISTANCES
from .enemy_templates import ENEMY_TEMPLATES, BOSS_TEMPLATES, create_enemy, create_enemies, create_boss
from .roster import EnemyRoster
from .hero import Hero
from .unit import AlliedUnit, UnitAbility

__all__ = [
    "Enemy",
    "ElusiveEnemy",
    "BossEnemy",
    "BossPhase",
    "ENEMY_ABILITIES",
    "ENEMY_RESISTANCES",
    "ENEMY_TEMPLATES",
    "BOSS_TEMPLATES",
    "create_enemy",
    "create_enemies",
    "create_boss",
    "EnemyRoster",
    "Hero",
    "AlliedUnit",
    "UnitAbility",
]
