"""Combat resolution components.

This package contains the combat core with clear separation of concerns:
- resistance.py: Elemental damage multipliers
- combat_context.py: Explicit per-combat state passed to every resolver
- combat_result.py: Typed result values returned instead of exceptions
- unit_pool.py: Allied unit contributions, once per combat
- regular_resolver.py: Armor-threshold defeats (all-or-nothing or greedy)
- boss_resolver.py / boss_abilities.py: Health pools and phase abilities
- attack_phase.py / ranged_phase.py: Phase controllers
- blocking_engine.py / damage_system.py: Block and damage rules
- combat_predictor.py: Read-only outcome forecasts

Modules here never import the entity classes at runtime; enemies are handled
through their uniform capabilities.
"""

from .resistance import resistance_multiplier
from .combat_result import (
    PhaseTransition,
    DamageResult,
    BossDamage,
    BossTransitionRecord,
    CombatResult,
    RangedAttackResult,
    UnitActivationResult,
    BlockResult,
    DamageReport,
    UnitDamageResult,
    PhaseResult,
)
from .unit_pool import UnitContributionPool
from .combat_context import CombatContext
from .regular_resolver import RegularEnemyResolver
from .boss_abilities import BossAbilityExecutor
from .boss_resolver import BossResolver
from .attack_phase import AttackPhaseController
from .ranged_phase import RangedPhaseController
from .blocking_engine import BlockingEngine, BlockCard
from .damage_system import DamageSystem
from .combat_predictor import CombatPredictor, CombatPrediction

__all__ = [
    "resistance_multiplier",
    "PhaseTransition",
    "DamageResult",
    "BossDamage",
    "BossTransitionRecord",
    "CombatResult",
    "RangedAttackResult",
    "UnitActivationResult",
    "BlockResult",
    "DamageReport",
    "UnitDamageResult",
    "PhaseResult",
    "UnitContributionPool",
    "CombatContext",
    "RegularEnemyResolver",
    "BossAbilityExecutor",
    "BossResolver",
    "AttackPhaseController",
    "RangedPhaseController",
    "BlockingEngine",
    "BlockCard",
    "DamageSystem",
    "CombatPredictor",
    "CombatPrediction",
]
