"""Combat events and their types.

This module defines all events the combat core publishes on the event bus.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events carry the combat turn they were raised in
- Events use proper enums instead of magic strings where a domain enum exists
- Keep event types focused and avoid over-granular events
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..data.game_enums import CombatPhase, EffectType
    from ...game.entities.enemy import Enemy, BossEnemy


class EventType(Enum):
    """Types of combat events that managers can subscribe to."""
    # Combat lifecycle
    COMBAT_STARTED = auto()
    COMBAT_PHASE_CHANGED = auto()
    COMBAT_ENDED = auto()

    # Resolution
    ENEMY_DEFEATED = auto()
    ENEMY_BLOCKED = auto()
    BOSS_DAMAGED = auto()
    BOSS_PHASE_TRANSITION = auto()
    ATTACK_RESOLVED = auto()
    UNIT_ACTIVATED = auto()
    HERO_WOUNDED = auto()

    # Status effects
    STATUS_EFFECT_APPLIED = auto()
    STATUS_EFFECT_EXPIRED = auto()

    # Logging
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()

    # System
    MANAGER_INITIALIZED = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all combat events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class CombatStarted(GameEvent):
    """Event emitted when a combat begins."""
    enemy_count: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.COMBAT_STARTED)


@dataclass(frozen=True)
class CombatPhaseChanged(GameEvent):
    """Event emitted when the combat phase machine moves on."""
    old_phase: "CombatPhase"
    new_phase: "CombatPhase"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBAT_PHASE_CHANGED)


@dataclass(frozen=True)
class CombatEnded(GameEvent):
    """Event emitted when a combat is closed."""
    victory: bool
    fame_gained: int
    wounds_received: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBAT_ENDED)


@dataclass(frozen=True)
class EnemyDefeated(GameEvent):
    """Event emitted when an enemy leaves the roster as defeated."""
    enemy: "Enemy"
    fame: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENEMY_DEFEATED)


@dataclass(frozen=True)
class EnemyBlocked(GameEvent):
    """Event emitted when an enemy attack is fully blocked."""
    enemy: "Enemy"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENEMY_BLOCKED)


@dataclass(frozen=True)
class BossDamaged(GameEvent):
    """Event emitted when a boss loses health."""
    boss: "BossEnemy"
    damage: int
    health_percent: float

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BOSS_DAMAGED)


@dataclass(frozen=True)
class BossPhaseTransition(GameEvent):
    """Event emitted for every boss phase threshold crossed."""
    boss: "BossEnemy"
    phase: str
    ability: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BOSS_PHASE_TRANSITION)


@dataclass(frozen=True)
class AttackResolved(GameEvent):
    """Event emitted when an attack has been resolved against its targets."""
    total_attack: int
    defeated_count: int
    fame_gained: int
    success: bool

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ATTACK_RESOLVED)


@dataclass(frozen=True)
class UnitActivated(GameEvent):
    """Event emitted when an allied unit contributes to the pool."""
    unit_name: str
    applied: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_ACTIVATED)


@dataclass(frozen=True)
class HeroWounded(GameEvent):
    """Event emitted when the hero takes wounds."""
    wounds: int
    poison_wounds: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.HERO_WOUNDED)


@dataclass(frozen=True)
class StatusEffectApplied(GameEvent):
    """Event emitted when a status effect is applied or stacked."""
    target_name: str
    effect_type: "EffectType"
    stacks: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.STATUS_EFFECT_APPLIED)


@dataclass(frozen=True)
class StatusEffectExpired(GameEvent):
    """Event emitted when a timed status effect runs out."""
    target_name: str
    effect_type: "EffectType"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.STATUS_EFFECT_EXPIRED)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str = "BATTLE"
    level: str = "INFO"
    source: str = "Combat"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(GameEvent):
    """Event emitted when the log buffer should be written to disk."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)


# System Events
@dataclass(frozen=True)
class ManagerInitialized(GameEvent):
    """Event emitted when a manager is initialized."""
    manager_name: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.MANAGER_INITIALIZED)
