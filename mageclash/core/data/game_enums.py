"""Centralized combat enums and constants.

This module contains all core combat enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, auto


class CombatPhase(Enum):
    """Phases of a single combat, in the order they are entered."""
    NOT_IN_COMBAT = "not_in_combat"
    RANGED = "ranged"
    BLOCK = "block"
    DAMAGE = "damage"
    ATTACK = "attack"
    COMPLETE = "complete"
    REWARD = "reward"


class AttackElement(Enum):
    """Elements an attack or block can carry."""
    PHYSICAL = "physical"
    FIRE = "fire"
    ICE = "ice"
    COLD_FIRE = "cold_fire"
    HOLY = "holy"


class AbilityType(Enum):
    """Action types an allied unit ability can provide."""
    MOVEMENT = "movement"
    ATTACK = "attack"
    BLOCK = "block"
    INFLUENCE = "influence"
    RANGED = "ranged"
    SIEGE = "siege"
    HEAL = "healing"


class EffectType(Enum):
    """Status effects that can be applied to the hero or enemies."""
    STUN = "stun"
    BURN = "burn"
    FREEZE = "freeze"
    POISON = "poison"
    WEAKEN = "weaken"
    SHIELD = "shield"
    ENRAGE = "enrage"


class RegularResolutionPolicy(Enum):
    """How a shared attack pool is spent against regular enemies."""
    ALL_OR_NOTHING = "all_or_nothing"  # Defeat every target or none
    GREEDY = "greedy"                  # Defeat targets in order while attack lasts


class CombatError(Enum):
    """Recoverable error indicators carried on combat results."""
    PHASE_VIOLATION = auto()   # Operation invoked outside its phase
    INVALID_TARGET = auto()    # Target already defeated or not in the roster
    NOT_READY = auto()         # Unit cannot be activated right now
    ALREADY_ACTIVATED = auto() # Unit already contributed this combat
    ALREADY_BLOCKED = auto()   # Enemy already blocked this combat
    IMMUNE = auto()            # Target immune to the attack type used


# Boss phase key whose threshold marks the boss as enraged
ENRAGED_PHASE = "enraged"


def parse_element(element) -> "AttackElement | None":
    """Convert an element name or enum into an AttackElement.

    Returns None for unknown names so callers can fall back to a neutral
    multiplier instead of failing.
    """
    if isinstance(element, AttackElement):
        return element
    try:
        return AttackElement(str(element).lower())
    except ValueError:
        return None
