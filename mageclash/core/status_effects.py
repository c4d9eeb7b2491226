"""
Status Effect System - Timed and stacking combat conditions

This module tracks temporary conditions (burn, poison, stun, ...) on the hero
and on individual enemies. Effects stack up to a per-type cap, tick down once
per phase boundary and are purged when their remaining duration reaches
exactly zero. Indefinite effects (duration -1) never expire by ticking and
are only cleared explicitly, e.g. poison at the end of combat.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import yaml

from .config import resolve_asset_path
from .data.game_enums import EffectType
from .events import StatusEffectApplied, StatusEffectExpired

if TYPE_CHECKING:
    from .events.event_manager import EventManager

INDEFINITE = -1
STATUS_EFFECTS_PATH = "assets/data/status_effects.yaml"


@dataclass(frozen=True)
class EffectDefinition:
    """Static configuration for one effect type."""
    effect_type: EffectType
    name: str
    duration: int = 1
    stackable: bool = False
    max_stacks: int = 1


def _load_effect_definitions() -> dict[EffectType, EffectDefinition]:
    """Load effect definitions from the YAML data file.

    Returns:
        Dictionary mapping EffectType enums to EffectDefinition objects
    """
    yaml_path = resolve_asset_path(STATUS_EFFECTS_PATH)
    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Status effect definitions not found: {yaml_path}")

    try:
        definitions = {}
        for type_name, entry in data["status_effects"].items():
            effect_type = EffectType(type_name)
            definitions[effect_type] = EffectDefinition(
                effect_type=effect_type,
                name=entry.get("name", type_name),
                duration=int(entry.get("duration", 1)),
                stackable=bool(entry.get("stackable", False)),
                max_stacks=int(entry.get("max_stacks", 1)),
            )
        return definitions
    except KeyError as e:
        raise KeyError(f"Invalid status effect structure in {yaml_path}: {e}")
    except ValueError as e:
        raise ValueError(f"Unknown status effect in {yaml_path}: {e}")


EFFECT_DEFINITIONS: dict[EffectType, EffectDefinition] = _load_effect_definitions()


@dataclass
class StatusEffect:
    """A live effect on one target."""
    effect_type: EffectType
    name: str
    duration: int
    remaining_duration: int
    stackable: bool
    max_stacks: int
    stacks: int = 1

    @classmethod
    def from_definition(cls, effect_type: EffectType) -> StatusEffect:
        definition = EFFECT_DEFINITIONS[effect_type]
        return cls(
            effect_type=effect_type,
            name=definition.name,
            duration=definition.duration,
            remaining_duration=definition.duration,
            stackable=definition.stackable,
            max_stacks=definition.max_stacks,
        )

    @property
    def is_indefinite(self) -> bool:
        return self.duration == INDEFINITE

    def add_stack(self) -> bool:
        """Add one stack; False if the effect cannot stack further."""
        if not self.stackable or self.stacks >= self.max_stacks:
            return False
        self.stacks += 1
        return True

    def refresh(self) -> None:
        self.remaining_duration = self.duration

    def tick(self) -> None:
        if self.remaining_duration > 0:
            self.remaining_duration -= 1

    def is_expired(self) -> bool:
        return self.remaining_duration == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.effect_type.value,
            "remaining_duration": self.remaining_duration,
            "stacks": self.stacks,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusEffect:
        effect = cls.from_definition(EffectType(data["type"]))
        effect.remaining_duration = int(data.get("remaining_duration", effect.duration))
        effect.stacks = min(int(data.get("stacks", 1)), effect.max_stacks)
        return effect


@dataclass
class EffectApplication:
    """Outcome of applying an effect to a target."""
    success: bool
    applied: bool = False  # A new record was created
    stacked: bool = False  # An existing record gained a stack
    refreshed: bool = False  # An existing record was at its cap; only its duration reset
    effect: Optional[StatusEffect] = None


@dataclass
class EffectTickResult:
    """Consequences of processing effects at a phase or combat boundary."""
    damage: int = 0
    wounds: int = 0
    expired: list[EffectType] = field(default_factory=list)


class StatusEffectManager:
    """Tracks status effects for the hero and every enemy in a combat."""

    def __init__(self, event_manager: Optional[EventManager] = None):
        self.hero_effects: dict[EffectType, StatusEffect] = {}
        self.enemy_effects: dict[str, list[StatusEffect]] = {}
        self.event_manager = event_manager

    def _publish(self, event) -> None:
        if self.event_manager:
            self.event_manager.publish(event, source="StatusEffectManager")

    @staticmethod
    def _reapply(existing: StatusEffect) -> EffectApplication:
        """Stack onto an existing record if possible; either way restart its timer."""
        stacked = existing.add_stack()
        existing.refresh()
        return EffectApplication(success=True, stacked=stacked, refreshed=not stacked, effect=existing)

    def apply_to_hero(self, hero: Any, effect_type: EffectType, turn: int = 0) -> EffectApplication:
        """Apply an effect to the hero, stacking onto an existing record.

        Re-applying an effect always restarts its duration.

        Raises:
            KeyError: If effect_type has no definition
        """
        existing = self.hero_effects.get(effect_type)
        if existing:
            result = self._reapply(existing)
        else:
            effect = StatusEffect.from_definition(effect_type)
            self.hero_effects[effect_type] = effect
            result = EffectApplication(success=True, applied=True, effect=effect)

        self._publish(StatusEffectApplied(
            turn=turn,
            target_name=getattr(hero, "name", "Hero"),
            effect_type=effect_type,
            stacks=result.effect.stacks,
        ))
        return result

    def apply_to_enemy(self, enemy: Any, effect_type: EffectType, turn: int = 0) -> EffectApplication:
        """Apply an effect to one enemy, scoped by its id."""
        effects = self.enemy_effects.setdefault(enemy.enemy_id, [])
        existing = next((e for e in effects if e.effect_type == effect_type), None)
        if existing:
            result = self._reapply(existing)
        else:
            effect = StatusEffect.from_definition(effect_type)
            effects.append(effect)
            result = EffectApplication(success=True, applied=True, effect=effect)

        self._publish(StatusEffectApplied(
            turn=turn,
            target_name=enemy.name,
            effect_type=effect_type,
            stacks=result.effect.stacks,
        ))
        return result

    def hero_has_effect(self, effect_type: EffectType) -> bool:
        return effect_type in self.hero_effects

    def enemy_has_effect(self, enemy: Any, effect_type: EffectType) -> bool:
        return any(e.effect_type == effect_type for e in self.enemy_effects.get(enemy.enemy_id, []))

    def remove_from_hero(self, effect_type: EffectType) -> bool:
        return self.hero_effects.pop(effect_type, None) is not None

    def remove_from_enemy(self, enemy: Any, effect_type: EffectType) -> bool:
        """Remove one effect from an enemy; False if it did not have it."""
        effects = self.enemy_effects.get(enemy.enemy_id, [])
        remaining = [e for e in effects if e.effect_type != effect_type]
        if len(remaining) == len(effects):
            return False
        self.enemy_effects[enemy.enemy_id] = remaining
        return True

    def remove_enemy(self, enemy: Any) -> None:
        """Forget every effect on an enemy that left the combat."""
        self.enemy_effects.pop(enemy.enemy_id, None)

    def get_hero_effects(self) -> list[StatusEffect]:
        return list(self.hero_effects.values())

    def get_enemy_effects(self, enemy: Any) -> list[StatusEffect]:
        return list(self.enemy_effects.get(enemy.enemy_id, []))

    def process_hero_phase_start(self, hero: Any, turn: int = 0) -> EffectTickResult:
        """Collect damage from stack-scaling effects, then tick and purge.

        Burn deals one damage per stack. Every effect ticks once; effects whose
        remaining duration reaches exactly zero are removed.
        """
        result = EffectTickResult()
        for effect_type, effect in list(self.hero_effects.items()):
            if effect_type == EffectType.BURN:
                result.damage += effect.stacks
            effect.tick()
            if effect.is_expired():
                del self.hero_effects[effect_type]
                result.expired.append(effect_type)
                self._publish(StatusEffectExpired(
                    turn=turn, target_name=getattr(hero, "name", "Hero"), effect_type=effect_type
                ))
        return result

    def process_enemy_phase_start(self, enemies: list[Any], turn: int = 0) -> list[tuple[Any, int]]:
        """Apply the same burn/tick/purge rules to each listed enemy.

        Returns:
            (enemy, damage) pairs for enemies that took status damage
        """
        damaged = []
        for enemy in enemies:
            effects = self.enemy_effects.get(enemy.enemy_id)
            if not effects:
                continue
            damage = 0
            survivors = []
            for effect in effects:
                if effect.effect_type == EffectType.BURN:
                    damage += effect.stacks
                effect.tick()
                if effect.is_expired():
                    self._publish(StatusEffectExpired(
                        turn=turn, target_name=enemy.name, effect_type=effect.effect_type
                    ))
                else:
                    survivors.append(effect)
            self.enemy_effects[enemy.enemy_id] = survivors
            if damage:
                damaged.append((enemy, damage))
        return damaged

    def process_combat_end(self, hero: Any) -> EffectTickResult:
        """Convert lingering effects into combat-exit consequences and reset.

        Poison turns into one wound per stack.
        """
        result = EffectTickResult()
        poison = self.hero_effects.get(EffectType.POISON)
        if poison:
            result.wounds = poison.stacks
        self.clear()
        return result

    def clear(self) -> None:
        self.hero_effects.clear()
        self.enemy_effects.clear()

    def get_state(self) -> dict[str, Any]:
        """Plain-data snapshot for checkpointing."""
        return {
            "hero": [effect.to_dict() for effect in self.hero_effects.values()],
            "enemies": {
                enemy_id: [effect.to_dict() for effect in effects]
                for enemy_id, effects in self.enemy_effects.items()
            },
        }

    def load_state(self, state: Optional[dict[str, Any]]) -> None:
        if not state:
            return
        self.clear()
        for entry in state.get("hero", []):
            effect = StatusEffect.from_dict(entry)
            self.hero_effects[effect.effect_type] = effect
        for enemy_id, entries in state.get("enemies", {}).items():
            self.enemy_effects[enemy_id] = [StatusEffect.from_dict(entry) for entry in entries]
