"""
Tests for the blocking engine.

Covers the elemental efficiency table, end-only rounding, unit block points,
cumbersome movement payment and numeric normalization.
"""

import math

import pytest

from packages.skirmish.calc.blocking import BlockingEngine, BlockSource, normalize_sources
from packages.skirmish.config import CombatConfig
from packages.skirmish.content.elements import Element


@pytest.fixture
def engine():
    return BlockingEngine()


# =============================================================================
# Efficiency
# =============================================================================


EFFICIENCY_TABLE = [
    # block, attack, efficiency
    ("physical", "physical", 1.0),
    ("physical", "fire", 0.5),
    ("physical", "ice", 0.5),
    ("physical", "cold_fire", 0.5),
    ("fire", "physical", 0.5),
    ("fire", "fire", 0.5),
    ("fire", "ice", 1.0),
    ("fire", "cold_fire", 0.5),
    ("ice", "physical", 0.5),
    ("ice", "fire", 1.0),
    ("ice", "ice", 0.5),
    ("ice", "cold_fire", 0.5),
    ("cold_fire", "physical", 0.5),
    ("cold_fire", "fire", 1.0),
    ("cold_fire", "ice", 1.0),
    ("cold_fire", "cold_fire", 1.0),
]


class TestEfficiency:

    @pytest.mark.parametrize("block,attack,expected", EFFICIENCY_TABLE)
    def test_table(self, engine, block, attack, expected):
        """Reciprocal efficiency table, all sixteen pairs."""
        assert engine.efficiency(block, attack) == expected

    def test_config_inefficiency(self):
        """The inefficient factor comes from config."""
        engine = BlockingEngine(CombatConfig(inefficient_block=0.25))
        assert engine.efficiency(Element.PHYSICAL, Element.FIRE) == 0.25
        assert engine.efficiency(Element.PHYSICAL, Element.PHYSICAL) == 1.0


# =============================================================================
# Block totals
# =============================================================================


class TestCalculateBlock:

    def test_physical_vs_fire_is_halved(self, engine, make_enemy):
        """Physical block 4 vs fire attack 4 -> 2, not blocked."""
        enemy = make_enemy(attack=4, attack_type="fire")
        calc = engine.calculate_block(enemy, [BlockSource(4, "physical")])
        assert calc.total_block == 2
        assert calc.required == 4
        assert not calc.blocked
        assert calc.is_inefficient
        assert calc.inefficient_reasons == ["Physical Block halved vs Fire Attack"]
        assert "too weak" in calc.message

    def test_ice_blocks_fire_fully(self, engine, make_enemy):
        """Ice counters fire at full value."""
        enemy = make_enemy(attack=4, attack_type="fire")
        calc = engine.calculate_block(enemy, BlockSource(4, "ice"))
        assert calc.blocked
        assert not calc.is_inefficient
        assert calc.message == "Blocked (4/4)"

    def test_rounding_only_at_the_end(self, engine, make_enemy):
        """1.5 + 1.5 = 3, not 1 + 1."""
        enemy = make_enemy(attack=3, attack_type="fire")
        calc = engine.calculate_block(enemy, [BlockSource(3), BlockSource(3)])
        assert calc.total_block == 3
        assert calc.blocked

    def test_reason_per_inefficient_source(self, engine, make_enemy):
        """Every inefficient source is listed."""
        enemy = make_enemy(attack=6, attack_type="ice")
        calc = engine.calculate_block(enemy, [
            BlockSource(2, "physical"),
            BlockSource(2, "ice"),
            BlockSource(2, "fire"),
        ])
        # 1 + 1 + 2
        assert calc.total_block == 4
        assert calc.inefficient_reasons == [
            "Physical Block halved vs Ice Attack",
            "Ice Block halved vs Ice Attack",
        ]

    def test_swift_doubles_requirement(self, engine, make_enemy):
        """Swift attack 3 needs block 6."""
        enemy = make_enemy(attack=3, abilities=["swift"])
        assert not engine.calculate_block(enemy, 5).blocked
        assert engine.calculate_block(enemy, 6).blocked

    def test_brutal_swift_requirement(self, engine, make_enemy):
        enemy = make_enemy(attack=2, abilities=["swift", "brutal"])
        assert engine.calculate_block(enemy, 7).required == 8

    def test_accepts_dicts(self, engine, make_enemy):
        """Plain mappings work as block sources."""
        enemy = make_enemy(attack=4, attack_type="fire")
        calc = engine.calculate_block(enemy, [{"value": 4, "element": "ice"}])
        assert calc.blocked

    def test_no_sources(self, engine, make_enemy):
        calc = engine.calculate_block(make_enemy(attack=1), None)
        assert calc.total_block == 0
        assert not calc.blocked

    def test_zero_attack_enemy_is_blocked_by_nothing(self, engine, make_enemy):
        assert engine.calculate_block(make_enemy(attack=0), []).blocked


class TestUnitBlockPoints:
    """Unit block counts as physical and is only consumed when needed."""

    def test_unit_points_fill_gap(self, engine, make_enemy):
        """Unit block closes the gap and is consumed."""
        enemy = make_enemy(attack=5)
        calc = engine.calculate_block(enemy, 3, unit_block_points=3)
        assert calc.blocked
        assert calc.total_block == 6
        assert calc.unit_points_consumed == 3

    def test_unit_points_not_needed(self, engine, make_enemy):
        """Unit block is kept when cards alone suffice."""
        enemy = make_enemy(attack=5)
        calc = engine.calculate_block(enemy, 5, unit_block_points=3)
        assert calc.blocked
        assert calc.unit_points_consumed == 0

    def test_unit_points_not_consumed_on_failure(self, engine, make_enemy):
        """A failed block consumes nothing."""
        enemy = make_enemy(attack=10)
        calc = engine.calculate_block(enemy, 3, unit_block_points=3)
        assert not calc.blocked
        assert calc.unit_points_consumed == 0

    def test_unit_points_halved_vs_fire(self, engine, make_enemy):
        """Unit block is physical, so halved vs fire."""
        enemy = make_enemy(attack=3, attack_type="fire")
        calc = engine.calculate_block(enemy, [], unit_block_points=4)
        assert calc.total_block == 2
        assert "Unit Block halved vs Fire Attack" in calc.inefficient_reasons


class TestCumbersome:
    """Movement closes the gap against cumbersome enemies, 1:1."""

    def test_movement_pays_minimum(self, engine, make_enemy):
        """Attack 6, block 3, movement 5 -> 3 movement consumed."""
        enemy = make_enemy(attack=6, abilities=["cumbersome"])
        calc = engine.calculate_block(enemy, 3, movement_points=5)
        assert calc.blocked
        assert calc.movement_consumed == 3
        assert calc.total_block == 6

    def test_shortfall_consumes_nothing(self, engine, make_enemy):
        """Movement that cannot close the gap is not spent."""
        enemy = make_enemy(attack=6, abilities=["cumbersome"])
        calc = engine.calculate_block(enemy, 1, movement_points=2)
        assert not calc.blocked
        assert calc.movement_consumed == 0
        assert calc.total_block == 1

    def test_no_movement_needed(self, engine, make_enemy):
        enemy = make_enemy(attack=3, abilities=["cumbersome"])
        calc = engine.calculate_block(enemy, 4, movement_points=5)
        assert calc.blocked
        assert calc.movement_consumed == 0

    def test_non_cumbersome_ignores_movement(self, engine, make_enemy):
        """Movement only helps against cumbersome enemies."""
        enemy = make_enemy(attack=6)
        calc = engine.calculate_block(enemy, 3, movement_points=5)
        assert not calc.blocked
        assert calc.movement_consumed == 0


class TestNumericInputs:

    def test_nan_block_value(self, engine, make_enemy):
        """NaN block counts as 0 and is recorded."""
        anomalies = []
        calc = engine.calculate_block(make_enemy(attack=2), [BlockSource(math.nan), BlockSource(2)],
                                      anomalies=anomalies)
        assert calc.total_block == 2
        assert calc.blocked
        assert len(anomalies) == 1

    def test_negative_block_value(self, engine, make_enemy):
        anomalies = []
        calc = engine.calculate_block(make_enemy(attack=2), -4, anomalies=anomalies)
        assert calc.total_block == 0
        assert anomalies

    def test_normalize_sources(self):
        assert normalize_sources(3) == [BlockSource(3)]
        assert normalize_sources([1, BlockSource(2, "ice")]) == [BlockSource(1), BlockSource(2, Element.ICE)]
        assert normalize_sources(None) == []
