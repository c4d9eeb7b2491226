"""Allied units that contribute abilities to a combat."""

import uuid
from dataclasses import dataclass
from typing import Optional

from ...core.data.game_enums import AbilityType


@dataclass(frozen=True)
class UnitAbility:
    """One action a unit provides when activated."""
    type: AbilityType
    value: int


class AlliedUnit:
    """A recruited unit: activated once, can absorb enemy damage."""

    def __init__(
        self,
        name: str,
        abilities: Optional[list[UnitAbility]] = None,
        armor: int = 2,
        unit_id: Optional[str] = None,
    ):
        self.unit_id = unit_id or f"unit_{uuid.uuid4().hex[:8]}"
        self.name = name
        self.abilities = list(abilities or [])
        self.armor = armor
        self.ready = True
        self.spent = False
        self.wounds = 0
        self.destroyed = False

    def __repr__(self) -> str:
        return f"AlliedUnit({self.unit_id!r}, {self.name!r})"

    def is_ready(self) -> bool:
        return self.ready and not self.spent and not self.destroyed and self.wounds == 0

    def activate(self) -> None:
        self.spent = True

    def get_abilities(self) -> list[UnitAbility]:
        return list(self.abilities)

    def get_name(self) -> str:
        return self.name

    def take_wound(self) -> None:
        self.wounds += 1

    def refresh(self) -> None:
        """Ready the unit for a new round."""
        self.spent = False
