"""
Configuration loader for combat rules.

This module handles loading and parsing of the YAML configuration file that
tunes combat resolution (regular-enemy policy, boss phase table, summoning).
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .data.game_enums import RegularResolutionPolicy

PACKAGE_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = "assets/config/combat.yaml"

DEFAULT_PHASE_THRESHOLDS: dict[str, float] = {
    "2": 0.66,
    "3": 0.33,
    "enraged": 0.10,
}


@dataclass
class CombatConfig:
    """Tunable combat rules."""

    regular_policy: RegularResolutionPolicy = RegularResolutionPolicy.ALL_OR_NOTHING
    phase_thresholds: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_PHASE_THRESHOLDS)
    )
    heal_fraction: float = 0.1
    enrage_multiplier: float = 1.5
    summon_pool: list[str] = field(default_factory=lambda: ["orc", "weakling", "robber"])
    hero_min_armor: int = 1


def resolve_asset_path(path: str) -> Path:
    """Resolve a package-relative asset path, leaving absolute paths alone."""
    if os.path.isabs(path):
        return Path(path)
    return PACKAGE_ROOT / path


class CombatConfigLoader:
    """Loads combat configuration from a YAML file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self._raw: dict[str, Any] = {}
        self.config = CombatConfig()

    def load_config(self) -> bool:
        """
        Load configuration from the YAML file.

        Returns:
            bool: True if the file was found and parsed, False if defaults are in use
        """
        config_file = resolve_asset_path(self.config_path)
        if not config_file.exists():
            self.config = CombatConfig()
            return False

        with open(config_file, 'r', encoding='utf-8') as f:
            self._raw = yaml.safe_load(f) or {}

        self.config = self._parse(self._raw)
        return True

    def _parse(self, data: dict[str, Any]) -> CombatConfig:
        """Build a CombatConfig from parsed YAML, keeping defaults for absent keys."""
        defaults = CombatConfig()
        combat = data.get('combat', {})
        boss = data.get('boss', {})
        hero = data.get('hero', {})

        policy_name = combat.get('regular_policy', defaults.regular_policy.value)
        try:
            policy = RegularResolutionPolicy(str(policy_name).lower())
        except ValueError:
            raise ValueError(f"Unknown regular_policy '{policy_name}' in {self.config_path}")

        thresholds = {
            str(key): float(value)
            for key, value in boss.get('phase_thresholds', defaults.phase_thresholds).items()
        }

        return CombatConfig(
            regular_policy=policy,
            phase_thresholds=thresholds,
            heal_fraction=float(boss.get('heal_fraction', defaults.heal_fraction)),
            enrage_multiplier=float(boss.get('enrage_multiplier', defaults.enrage_multiplier)),
            summon_pool=list(combat.get('summon_pool', defaults.summon_pool)),
            hero_min_armor=int(hero.get('min_armor', defaults.hero_min_armor)),
        )


def load_combat_config(config_path: Optional[str] = None) -> CombatConfig:
    """Load the combat configuration, falling back to defaults."""
    loader = CombatConfigLoader(config_path)
    loader.load_config()
    return loader.config
