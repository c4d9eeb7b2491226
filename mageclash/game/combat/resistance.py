"""
Elemental resistance model.

Maps an (enemy, attack element) pair onto a damage multiplier of 0.5, 1.0 or
2.0 by matching the enemy's resistance and weakness flags. Both resolution
paths (regular armor checks and boss health damage) share this function.
"""

from typing import Any

from ...core.data.game_enums import AttackElement, parse_element

RESISTED = 0.5
NEUTRAL = 1.0
WEAKNESS = 2.0


def _flags_for(enemy: Any, element: AttackElement) -> tuple[bool, bool]:
    """Return (resists, is_weak) for one element."""
    if element == AttackElement.COLD_FIRE:
        # Cold fire is only resisted by enemies resisting both of its halves
        resists = bool(getattr(enemy, "fire_resist", False) and getattr(enemy, "ice_resist", False))
        weak = bool(getattr(enemy, "fire_weak", False) or getattr(enemy, "ice_weak", False))
        return resists, weak

    name = element.value
    return bool(getattr(enemy, f"{name}_resist", False)), bool(getattr(enemy, f"{name}_weak", False))


def resistance_multiplier(enemy: Any, element: Any = AttackElement.PHYSICAL) -> float:
    """Damage multiplier for an attack of ``element`` against ``enemy``.

    Unknown elements and holy attacks are never resisted. An enemy that both
    resists and is weak to an element takes normal damage.
    """
    parsed = parse_element(element)
    if parsed is None or parsed == AttackElement.HOLY:
        return NEUTRAL

    resists, weak = _flags_for(enemy, parsed)
    if resists and weak:
        return NEUTRAL
    if resists:
        return RESISTED
    if weak:
        return WEAKNESS
    return NEUTRAL
