"""Enemy templates for encounter spawning.

Templates are loaded from a YAML data file and turned into Enemy, ElusiveEnemy
or BossEnemy instances. Boss phase thresholds come from the combat
configuration so every boss shares the same breakpoints unless a template
overrides them.
"""

from typing import Any, Optional

import yaml

from ...core.config import CombatConfig, resolve_asset_path
from .enemy import BossEnemy, ElusiveEnemy, Enemy

ENEMY_TEMPLATES_PATH = "assets/data/enemies.yaml"


def _load_enemy_templates() -> tuple[dict[str, dict[str, Any]], dict[str, dict[str, Any]]]:
    """Load enemy and boss templates from the YAML file.

    Returns:
        (regular templates, boss templates) keyed by enemy type
    """
    yaml_path = resolve_asset_path(ENEMY_TEMPLATES_PATH)
    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Enemy templates file not found: {yaml_path}")

    try:
        return dict(data["enemies"]), dict(data.get("bosses", {}))
    except (KeyError, TypeError) as e:
        raise KeyError(f"Invalid enemy template structure in {yaml_path}: {e}")


ENEMY_TEMPLATES, BOSS_TEMPLATES = _load_enemy_templates()


def create_enemy(enemy_type: str, enemy_id: Optional[str] = None, **overrides: Any) -> Enemy:
    """Create a regular enemy from its template.

    Args:
        enemy_type: Template key (e.g. "orc")
        enemy_id: Optional stable id, generated when omitted
        overrides: Field values replacing the template's

    Raises:
        KeyError: If enemy_type is not a known template
    """
    if enemy_type not in ENEMY_TEMPLATES:
        raise KeyError(f"No template found for enemy type: {enemy_type}")

    params = {**ENEMY_TEMPLATES[enemy_type], **overrides}
    enemy_class = ElusiveEnemy if params.get("elusive") else Enemy
    return enemy_class(enemy_type, enemy_id=enemy_id, **params)


def create_enemies(enemy_types: list[str]) -> list[Enemy]:
    """Create one enemy per listed template key."""
    return [create_enemy(enemy_type) for enemy_type in enemy_types]


def create_boss(
    boss_type: str,
    enemy_id: Optional[str] = None,
    config: Optional[CombatConfig] = None,
    **overrides: Any,
) -> BossEnemy:
    """Create a boss from its template.

    Raises:
        KeyError: If boss_type is not a known boss template
    """
    if boss_type not in BOSS_TEMPLATES:
        raise KeyError(f"No template found for boss type: {boss_type}")

    config = config or CombatConfig()
    params = {**BOSS_TEMPLATES[boss_type], **overrides}
    params.setdefault("phase_thresholds", config.phase_thresholds)
    params.setdefault("enrage_multiplier", config.enrage_multiplier)
    return BossEnemy(boss_type, enemy_id=enemy_id, **params)
