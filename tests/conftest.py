"""
Basic test fixtures for the mageclash test suite.

Provides fresh combat collaborators (event bus, hero, roster, context) and
a handful of ready-made enemies and units.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from mageclash.core.config import CombatConfig
from mageclash.core.data.game_enums import AbilityType, CombatPhase
from mageclash.core.events.event_manager import EventManager
from mageclash.core.messages import MessageCatalog
from mageclash.game.combat.combat_context import CombatContext
from mageclash.game.combat.unit_pool import UnitContributionPool
from mageclash.game.entities.enemy import BossEnemy, Enemy
from mageclash.game.entities.hero import Hero
from mageclash.game.entities.roster import EnemyRoster
from mageclash.game.entities.unit import AlliedUnit, UnitAbility


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def catalog():
    """The shipped English message catalogue."""
    return MessageCatalog.load()


@pytest.fixture
def hero():
    """A hero with armor 2 and no fame."""
    return Hero(name="Tester", armor=2, fame=0)


@pytest.fixture
def orc():
    return Enemy("orc", enemy_id="orc_1", name="Orc", armor=3, attack=2, fame=2)


@pytest.fixture
def guard():
    return Enemy("guard", enemy_id="guard_1", name="Guard", armor=4, attack=3, fame=3, fortified=True)


@pytest.fixture
def boss():
    """Boss with 30 health and the default 66%/33%/10% thresholds."""
    return BossEnemy(
        "dark_lord",
        enemy_id="boss_1",
        name="Dark Lord",
        armor=10,
        attack=6,
        fame=50,
        max_health=30,
    )


@pytest.fixture
def roster():
    return EnemyRoster()


@pytest.fixture
def context(hero, roster, catalog, event_manager):
    """A combat context in the Attack phase with an empty roster."""
    return CombatContext(
        hero=hero,
        roster=roster,
        phase=CombatPhase.ATTACK,
        pool=UnitContributionPool(catalog),
        config=CombatConfig(),
        translator=catalog,
        event_manager=event_manager,
    )


@pytest.fixture
def swordsmen():
    """Unit with an attack ability."""
    return AlliedUnit("Swordsmen", [UnitAbility(AbilityType.ATTACK, 2)], unit_id="swordsmen")


@pytest.fixture
def archers():
    """Unit with ranged and block abilities."""
    return AlliedUnit(
        "Archers",
        [UnitAbility(AbilityType.RANGED, 3), UnitAbility(AbilityType.BLOCK, 2)],
        unit_id="archers",
    )


@pytest.fixture
def catapult():
    """Unit with a siege ability."""
    return AlliedUnit("Catapult", [UnitAbility(AbilityType.SIEGE, 4)], unit_id="catapult")
