"""
Damage phase rules.

Turns unblocked enemy attacks into hero wounds and applies the enemy
abilities that trigger on damage (poison, petrify, vampiric). Enemy damage
can instead be assigned to an allied unit, which takes it whole.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional

from ...core.data.game_enums import CombatError
from ...core.messages import Translator, get_default_catalog
from .combat_result import DamageReport, UnitDamageResult

if TYPE_CHECKING:
    from ..entities.enemy import Enemy


class DamageSystem:
    """Applies enemy damage to the hero or to units."""

    def __init__(self, translator: Optional[Translator] = None, min_armor: int = 1):
        self.translator = translator or get_default_catalog()
        self.min_armor = min_armor
        self.paralyze_triggered = False

    def reset(self) -> None:
        self.paralyze_triggered = False

    def calculate_damage(self, hero: Any, unblocked: list[Enemy]) -> DamageReport:
        """Wound the hero for every unblocked enemy attack.

        Wounds are ``ceil(total attack / hero armor)``. Poison adds the same
        number of wounds again to the discard pile, petrify paralyzes the hero
        when any wound lands, and vampiric enemies gain armor per wound.
        """
        total_damage = sum(enemy.effective_attack() for enemy in unblocked)
        armor = max(self.min_armor, hero.armor or self.min_armor)
        wounds = math.ceil(total_damage / armor)

        for _ in range(wounds):
            hero.take_wound()

        report = DamageReport(total_damage=total_damage)
        if any(enemy.poison for enemy in unblocked):
            report.poison_wounds = wounds
            for _ in range(wounds):
                hero.take_wound_to_discard()
            wounds += report.poison_wounds
        report.wounds = wounds

        if wounds > 0 and any(enemy.petrify for enemy in unblocked):
            self.paralyze_triggered = True
            hero.discard_non_wound_cards()
        report.paralyze = self.paralyze_triggered

        if wounds > 0:
            for enemy in unblocked:
                if enemy.vampiric:
                    enemy.armor_bonus += wounds
                    report.vampiric_gain[enemy.enemy_id] = wounds

        report.message = self.translator.translate("combat.wounds_received", amount=wounds)
        return report

    def assign_damage_to_unit(self, unit: Any, enemy: Enemy) -> UnitDamageResult:
        """Let a unit absorb one enemy's attack.

        Assassins cannot have their damage assigned. Petrify destroys the
        unit outright, poison wounds it a second time.
        """
        if enemy.assassin:
            return UnitDamageResult(
                success=False,
                message=self.translator.translate("combat.assassinate_restriction", enemy=enemy.name),
                error=CombatError.INVALID_TARGET,
            )

        if enemy.petrify:
            unit.destroyed = True
        else:
            unit.take_wound()
        if enemy.poison:
            unit.take_wound()

        if enemy.vampiric:
            enemy.armor_bonus += 2 if unit.destroyed else 1

        return UnitDamageResult(
            success=True,
            message=self.translator.translate(
                "combat.damage_assigned_to", unit=unit.get_name(), enemy=enemy.name
            ),
            unit_destroyed=unit.destroyed,
            unit_wounded=unit.wounds > 0,
        )
