"""
Basic test fixtures for the Chain Legends test suite.

Provides fighters, battles, a fixed clock and an event manager for testing
the combat resolver and the opponent policy.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from chainlegends.core.data import Element, create_battle
from chainlegends.core.events import EventManager
from tests.test_utils import FighterBuilder, ScriptedRandom


FIXED_NOW = 1_000


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same epoch milliseconds."""
    return lambda: FIXED_NOW


@pytest.fixture
def no_crit_rng():
    """Random source that never rolls a critical and adds no speed jitter."""
    return ScriptedRandom()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def fire_fighter():
    """Fire fighter with attack 25 / defense 15."""
    return FighterBuilder("Blaze", Element.FIRE).stats(attack=25, defense=15, speed=13).build()


@pytest.fixture
def water_fighter():
    """Water fighter with attack 20 / defense 18."""
    return FighterBuilder("Tide", Element.WATER).stats(attack=20, defense=18, speed=10).build()


@pytest.fixture
def fire_vs_water(fire_fighter, water_fighter):
    """Fresh battle: Fire on side A, Water on side B, both at full health."""
    return create_battle(fire_fighter, water_fighter, "0xA", "0xB", battle_id="battle-1", created_at=FIXED_NOW)
