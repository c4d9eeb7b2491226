"""
Block calculation.

Works out whether the block a player commits stops one enemy attack. Blocks
of the wrong element against an elemental attack only count half, and unit
block points count half against any non-physical attack.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Union

from ...core.data.game_enums import AttackElement, parse_element
from ...core.messages import Translator, get_default_catalog
from .combat_result import BlockResult

if TYPE_CHECKING:
    from ..entities.enemy import Enemy

# Attack element -> block elements that count fully against it
EFFICIENT_BLOCKS: dict[AttackElement, frozenset[AttackElement]] = {
    AttackElement.FIRE: frozenset({AttackElement.ICE, AttackElement.COLD_FIRE}),
    AttackElement.ICE: frozenset({AttackElement.FIRE, AttackElement.COLD_FIRE}),
    AttackElement.COLD_FIRE: frozenset({AttackElement.COLD_FIRE}),
}


@dataclass(frozen=True)
class BlockCard:
    """One block contribution from a card."""
    value: int
    element: AttackElement = AttackElement.PHYSICAL


BlockInput = Union[int, BlockCard, list[BlockCard]]


class BlockingEngine:
    """Computes block outcomes. Holds no combat state."""

    def __init__(self, translator: Optional[Translator] = None):
        self.translator = translator or get_default_catalog()

    @staticmethod
    def _normalize(block_input: BlockInput) -> list[BlockCard]:
        if isinstance(block_input, BlockCard):
            return [block_input]
        if isinstance(block_input, (list, tuple)):
            return list(block_input)
        return [BlockCard(value=int(block_input or 0))]

    @staticmethod
    def block_efficiency(attack_element: Any, block_element: Any) -> float:
        attack = parse_element(attack_element) or AttackElement.PHYSICAL
        efficient = EFFICIENT_BLOCKS.get(attack)
        if efficient is None:
            return 1.0
        return 1.0 if parse_element(block_element) in efficient else 0.5

    def calculate_block(
        self,
        enemy: Enemy,
        block_input: BlockInput,
        unit_block_points: int = 0,
        movement_points: int = 0,
    ) -> BlockResult:
        """Check a committed block against one enemy's attack.

        Args:
            enemy: Enemy whose attack is being blocked
            block_input: Block value, one BlockCard or several
            unit_block_points: Generic block gathered from units
            movement_points: Movement spent to slow a cumbersome enemy

        Returns:
            BlockResult; ``success`` tells whether the attack is stopped
        """
        required = enemy.block_requirement()
        if enemy.cumbersome and movement_points > 0:
            required = max(0, required - movement_points)

        attack_element = enemy.attack_element
        inefficient = False
        card_block = 0
        for card in self._normalize(block_input):
            efficiency = self.block_efficiency(attack_element, card.element)
            if efficiency < 1.0:
                inefficient = True
            card_block += math.floor(card.value * efficiency)

        unit_efficiency = 1.0 if attack_element == AttackElement.PHYSICAL else 0.5
        total_block = card_block + math.floor(unit_block_points * unit_efficiency)

        if total_block >= required:
            note = self.translator.translate("combat.block_inefficient") if inefficient else ""
            return BlockResult(
                success=True,
                message=self.translator.translate("combat.block_success", enemy=enemy.name, note=note),
                required=required,
                block_value=total_block,
                efficient=not inefficient,
            )

        note = self.translator.translate("combat.weak_inefficient") if inefficient else ""
        return BlockResult(
            success=False,
            message=self.translator.translate(
                "combat.block_weak", attack=total_block, armor=required, note=note
            ),
            required=required,
            block_value=total_block,
            efficient=not inefficient,
        )
