"""
Shared pytest fixtures for the skirmish test suite.

This module provides reusable fixtures for:
- Deterministic random sources
- Heroes and units
- Enemy factories
- Sessions already advanced to a given phase
"""

import pytest
import sys

# Ensure project root is in path
import os
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.skirmish.combat_engine import CombatSession
from packages.skirmish.content.enemies import Enemy, next_enemy_id
from packages.skirmish.content.hero import Hero
from packages.skirmish.content.units import Unit, UnitAbility
from packages.skirmish.state.rng import SeededRandom


# =============================================================================
# RNG Fixtures
# =============================================================================


class StubRandom:
    """RandomSource returning scripted values (ints cycle, floats cycle)."""

    def __init__(self, ints=(0,), floats=(0.5,)):
        self.ints = list(ints)
        self.floats = list(floats)
        self.int_calls = 0
        self.float_calls = 0

    def next_int(self, bound):
        value = self.ints[self.int_calls % len(self.ints)]
        self.int_calls += 1
        return value % bound

    def next_float(self):
        value = self.floats[self.float_calls % len(self.floats)]
        self.float_calls += 1
        return value


@pytest.fixture
def stub_random():
    """Factory for scripted random sources."""
    return StubRandom


@pytest.fixture
def seeded_random():
    """SeededRandom with seed 42 for deterministic tests."""
    return SeededRandom(42)


# =============================================================================
# Hero / Unit Fixtures
# =============================================================================


@pytest.fixture
def hero():
    """Hero with armor 2."""
    return Hero(armor=2)


@pytest.fixture
def make_unit():
    """Factory: make_unit("Guardsman", block=3, attack=2)."""
    def _make(name="Peasant", armor=2, **abilities):
        return Unit(
            name=name,
            armor=armor,
            abilities=[UnitAbility(kind, value) for kind, value in abilities.items()],
        )
    return _make


# =============================================================================
# Enemy Fixtures
# =============================================================================


@pytest.fixture
def make_enemy():
    """Factory for ad hoc enemies: make_enemy(armor=2, attack=4, abilities=["poison"])."""
    def _make(name="Enemy", armor=3, attack=3, fame=2, **kwargs):
        return Enemy(id=kwargs.pop("id", next_enemy_id("test")), name=name, armor=armor,
                     attack=attack, fame=fame, **kwargs)
    return _make


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def make_session(hero, stub_random):
    """Factory: a session advanced to "ranged", "block", "damage" or "attack"."""
    def _make(enemies, phase="ranged", hero_obj=None, rng=None, **kwargs):
        session = CombatSession(
            hero_obj or hero,
            enemies,
            random_source=rng or stub_random(),
            **kwargs,
        )
        if phase == "not_started":
            return session
        session.start()
        if phase == "ranged":
            return session
        session.end_ranged_phase()
        if phase == "block":
            return session
        session.end_block_phase()
        if phase == "damage":
            return session
        if session.phase.value == "damage":
            session.resolve_damage_phase()
        return session
    return _make
