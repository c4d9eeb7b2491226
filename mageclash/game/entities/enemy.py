"""Enemy variants for combat resolution.

Every enemy exposes the same capabilities to the combat core
(``current_armor``, ``effective_attack``, ``block_requirement``), so
resolvers never branch on terrain or ability rules themselves:

- Enemy: regular enemy defeated when an attack meets its armor
- ElusiveEnemy: armor drops to ``lower_armor`` once blocked, in the Attack phase
- BossEnemy: health pool with ordered, fire-once phase thresholds
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from ...core.data.game_enums import ENRAGED_PHASE, AttackElement, parse_element
from ..combat.resistance import resistance_multiplier

# Flags accepted as keyword arguments, all defaulting to False
ENEMY_ABILITIES = (
    "swift", "fortified", "brutal", "poison", "petrify", "elusive",
    "vampiric", "assassin", "cumbersome", "summoner", "summoned",
)
ENEMY_RESISTANCES = (
    "fire_resist", "ice_resist", "physical_resist",
    "fire_weak", "ice_weak", "physical_weak",
)


class Enemy:
    """A regular, armor-threshold enemy."""

    is_boss = False

    def __init__(
        self,
        enemy_type: str,
        enemy_id: Optional[str] = None,
        name: Optional[str] = None,
        armor: int = 0,
        attack: int = 0,
        fame: int = 0,
        attack_element: str = "physical",
        lower_armor: Optional[int] = None,
        summon_type: Optional[str] = None,
        **flags: bool,
    ):
        unknown = set(flags) - set(ENEMY_ABILITIES) - set(ENEMY_RESISTANCES)
        if unknown:
            raise ValueError(f"Unknown enemy flags for '{enemy_type}': {sorted(unknown)}")
        if armor < 0:
            raise ValueError(f"Enemy armor must be >= 0, got {armor}")

        self.enemy_id = enemy_id or f"{enemy_type}_{uuid.uuid4().hex[:8]}"
        self.enemy_type = enemy_type
        self.name = name or enemy_type.replace("_", " ").title()

        self.armor = armor
        self.attack = attack
        self.fame = fame
        self.attack_element = parse_element(attack_element) or AttackElement.PHYSICAL
        self.lower_armor = lower_armor if lower_armor is not None else max(1, armor) // 2
        self.armor_bonus = 0
        self.summon_type = summon_type

        for flag in ENEMY_ABILITIES + ENEMY_RESISTANCES:
            setattr(self, flag, bool(flags.get(flag, False)))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.enemy_id!r}, armor={self.armor}, fame={self.fame})"

    def current_armor(self, is_blocked: bool = False, in_attack_phase: bool = False) -> int:
        """Armor an attack has to meet right now."""
        return self.armor + self.armor_bonus

    def resistance_multiplier(self, element: Any = AttackElement.PHYSICAL) -> float:
        return resistance_multiplier(self, element)

    def effective_attack(self) -> int:
        """Attack dealt when unblocked (doubled if brutal)."""
        return self.attack * 2 if self.brutal else self.attack

    def block_requirement(self) -> int:
        """Block needed to stop this enemy (doubled if swift)."""
        return self.attack * 2 if self.swift else self.attack

    def get_state(self) -> dict[str, Any]:
        """Plain-data snapshot for checkpointing."""
        return {
            "id": self.enemy_id,
            "type": self.enemy_type,
            "name": self.name,
            "armor": self.armor,
            "attack": self.attack,
            "fame": self.fame,
            "armor_bonus": self.armor_bonus,
            "is_boss": self.is_boss,
        }

    def load_state(self, state: Optional[dict[str, Any]]) -> None:
        if not state:
            return
        self.armor_bonus = int(state.get("armor_bonus", self.armor_bonus))


class ElusiveEnemy(Enemy):
    """Enemy whose armor is lowered after being blocked."""

    def current_armor(self, is_blocked: bool = False, in_attack_phase: bool = False) -> int:
        if is_blocked and in_attack_phase:
            return self.lower_armor + self.armor_bonus
        return super().current_armor(is_blocked, in_attack_phase)


@dataclass
class BossPhase:
    """One health threshold on a boss."""
    key: str
    threshold: float  # Fraction of max health at or below which the phase fires
    ability: Optional[str] = None
    triggered: bool = False


class BossEnemy(Enemy):
    """Multi-phase enemy defeated by depleting its health pool."""

    is_boss = True

    def __init__(
        self,
        enemy_type: str,
        max_health: int = 30,
        current_health: Optional[int] = None,
        phase_abilities: Optional[dict[str, Optional[str]]] = None,
        phase_thresholds: Optional[dict[str, float]] = None,
        summon_count: int = 2,
        enrage_multiplier: float = 1.5,
        **kwargs: Any,
    ):
        kwargs.setdefault("summon_type", "weakling")
        super().__init__(enemy_type, **kwargs)
        if max_health <= 0:
            raise ValueError(f"Boss max_health must be positive, got {max_health}")

        self.max_health = max_health
        self.current_health = max_health if current_health is None else current_health
        self.summon_count = summon_count
        self.enrage_multiplier = enrage_multiplier
        self.enraged = False

        abilities = {"1": None, "2": "summon", "3": "heal", ENRAGED_PHASE: "double_attack"}
        if phase_abilities:
            abilities.update({str(k): v for k, v in phase_abilities.items()})
        self.phase_abilities = abilities

        thresholds = phase_thresholds or {"2": 0.66, "3": 0.33, ENRAGED_PHASE: 0.10}
        # Phase "1" is the opening phase and is never crossed
        self.phases = sorted(
            (
                BossPhase(key=str(key), threshold=float(value), ability=abilities.get(str(key)))
                for key, value in thresholds.items()
                if str(key) != "1"
            ),
            key=lambda phase: phase.threshold,
            reverse=True,
        )

    @property
    def health_percent(self) -> float:
        return self.current_health / self.max_health

    @property
    def is_defeated(self) -> bool:
        return self.current_health <= 0

    @property
    def current_phase(self) -> str:
        """Key of the most recently fired phase ("1" before any)."""
        fired = [phase.key for phase in self.phases if phase.triggered]
        return fired[-1] if fired else "1"

    def heal(self, amount: int) -> int:
        """Restore health without un-firing any crossed phase.

        Returns:
            Health actually restored
        """
        if self.is_defeated or amount <= 0:
            return 0
        restored = min(amount, self.max_health - self.current_health)
        self.current_health += restored
        return restored

    def effective_attack(self) -> int:
        attack = super().effective_attack()
        if self.enraged:
            attack = int(attack * self.enrage_multiplier)
        return attack

    def get_state(self) -> dict[str, Any]:
        state = super().get_state()
        state.update({
            "max_health": self.max_health,
            "current_health": self.current_health,
            "phase": self.current_phase,
            "triggered_phases": [phase.key for phase in self.phases if phase.triggered],
            "enraged": self.enraged,
            "summon_type": self.summon_type,
            "summon_count": self.summon_count,
        })
        return state

    def load_state(self, state: Optional[dict[str, Any]]) -> None:
        if not state:
            return
        super().load_state(state)
        self.current_health = int(state.get("current_health", self.current_health))
        self.enraged = bool(state.get("enraged", self.enraged))
        triggered = set(state.get("triggered_phases", []))
        for phase in self.phases:
            phase.triggered = phase.key in triggered
