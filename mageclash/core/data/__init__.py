"""Core data definitions.

This package contains fundamental combat enums shared by every layer:
- game_enums.py: Combat phases, elements, ability/effect types and error indicators
"""

from .game_enums import (
    CombatPhase,
    AttackElement,
    AbilityType,
    EffectType,
    RegularResolutionPolicy,
    CombatError,
    ENRAGED_PHASE,
    parse_element,
)

__all__ = [
    "CombatPhase",
    "AttackElement",
    "AbilityType",
    "EffectType",
    "RegularResolutionPolicy",
    "CombatError",
    "ENRAGED_PHASE",
    "parse_element",
]
