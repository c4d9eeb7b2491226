"""
Typed result values for combat operations.

Every public combat operation returns one of these instead of raising, so the
UI layer can render a message whether the operation succeeded or not.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from ...core.data.game_enums import CombatError

if TYPE_CHECKING:
    from ..entities.enemy import BossEnemy, Enemy


@dataclass(frozen=True)
class PhaseTransition:
    """A boss phase threshold crossed by one hit."""
    phase: str
    ability: Optional[str] = None
    payload: Optional[dict[str, Any]] = None  # Ability executor output, forwarded as-is


@dataclass
class DamageResult:
    """Outcome of applying damage to a boss health pool."""
    damage: int = 0
    previous_health: int = 0
    current_health: int = 0  # After any ability the hit triggered (e.g. heal)
    health_percent: float = 1.0  # current_health / max_health
    transitions: list[PhaseTransition] = field(default_factory=list)
    defeated: bool = False
    rejected: bool = False  # Boss was already defeated, nothing applied


@dataclass(frozen=True)
class BossDamage:
    """Damage dealt to one boss during a resolution."""
    boss: BossEnemy
    damage: int
    health_percent: float


@dataclass(frozen=True)
class BossTransitionRecord:
    """A phase transition, tagged with the boss it belongs to."""
    boss: BossEnemy
    phase: str
    ability: Optional[str] = None
    payload: Optional[dict[str, Any]] = None


@dataclass
class CombatResult:
    """Aggregate outcome of one attack resolution."""
    success: bool = False
    defeated: list[Enemy] = field(default_factory=list)
    damaged: list[BossDamage] = field(default_factory=list)
    boss_transitions: list[BossTransitionRecord] = field(default_factory=list)
    fame_gained: int = 0
    total_attack: int = 0
    unit_contribution: int = 0
    messages: list[str] = field(default_factory=list)
    error: Optional[CombatError] = None

    @classmethod
    def rejected(cls, error: CombatError, message: str) -> CombatResult:
        """Create a failed result carrying an error indicator."""
        return cls(success=False, error=error, messages=[message])

    @property
    def message(self) -> str:
        return " ".join(self.messages)

    def add_defeat(self, enemy: Enemy) -> None:
        self.defeated.append(enemy)
        self.fame_gained += enemy.fame


@dataclass
class UnitActivationResult:
    """Outcome of activating an allied unit."""
    success: bool
    message: str = ""
    applied: list[str] = field(default_factory=list)
    error: Optional[CombatError] = None

    @classmethod
    def rejected(cls, error: CombatError, message: str) -> UnitActivationResult:
        return cls(success=False, message=message, error=error)


@dataclass
class BlockResult:
    """Outcome of blocking one enemy."""
    success: bool
    message: str = ""
    required: int = 0
    block_value: int = 0
    efficient: bool = True
    error: Optional[CombatError] = None

    @classmethod
    def rejected(cls, error: CombatError, message: str) -> BlockResult:
        return cls(success=False, message=message, error=error)


@dataclass
class DamageReport:
    """Wounds dealt to the hero by unblocked enemies."""
    total_damage: int = 0
    wounds: int = 0  # Includes poison wounds
    poison_wounds: int = 0
    paralyze: bool = False
    vampiric_gain: dict[str, int] = field(default_factory=dict)  # enemy_id -> armor gained
    message: str = ""


@dataclass
class UnitDamageResult:
    """Outcome of assigning one enemy's damage to a unit."""
    success: bool
    message: str = ""
    unit_destroyed: bool = False
    unit_wounded: bool = False
    error: Optional[CombatError] = None


@dataclass
class PhaseResult:
    """Outcome of a phase-level operation on the combat manager."""
    success: bool
    message: str = ""
    error: Optional[CombatError] = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> PhaseResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def rejected(cls, error: CombatError, message: str) -> PhaseResult:
        return cls(success=False, message=message, error=error)


@dataclass
class RangedAttackResult(CombatResult):
    """Attack result that also reports which staged points were spent."""
    consumed_ranged: int = 0
    consumed_siege: int = 0

    @classmethod
    def rejected(cls, error: CombatError, message: str) -> RangedAttackResult:
        return cls(success=False, error=error, messages=[message])
