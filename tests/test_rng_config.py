"""
Tests for random sources, configuration loading and numeric normalization.
"""

import math
from dataclasses import FrozenInstanceError

import pytest

from packages.skirmish.config import DEFAULT_CONFIG, CombatConfig, load_config
from packages.skirmish.errors import normalize_damage
from packages.skirmish.state.rng import (
    RandomSource,
    SeededRandom,
    SystemRandom,
    XorShift128,
    choice,
    make_random,
)


# =============================================================================
# Random sources
# =============================================================================


class TestXorShift128:

    def test_deterministic(self):
        """Same seed, same sequence."""
        a = XorShift128(1234)
        b = XorShift128(1234)
        assert [a.next_long() for _ in range(5)] == [b.next_long() for _ in range(5)]

    def test_different_seeds_differ(self):
        assert XorShift128(1).next_long() != XorShift128(2).next_long()

    def test_zero_seed_is_usable(self):
        """Seed 0 does not produce an all-zero state."""
        rng = XorShift128(0)
        assert rng.seed0 != 0 or rng.seed1 != 0

    def test_copy_continues_identically(self):
        """A copy continues the same sequence."""
        rng = XorShift128(99)
        rng.next_long()
        clone = rng.copy()
        assert [rng.next_int(100) for _ in range(10)] == [clone.next_int(100) for _ in range(10)]

    def test_bounds(self):
        """next_int and next_float stay in range."""
        rng = XorShift128(7)
        for _ in range(200):
            assert 0 <= rng.next_int(6) < 6
            assert 0.0 <= rng.next_float() < 1.0

    def test_bad_bound(self):
        with pytest.raises(ValueError):
            XorShift128(7).next_int(0)


class TestRandomSources:

    def test_seeded_counter_and_copy(self):
        """SeededRandom counts calls and copies its state."""
        rng = SeededRandom(42)
        rng.next_int(10)
        rng.next_float()
        assert rng.counter == 2
        clone = rng.copy()
        assert clone.counter == 2
        assert rng.next_int(1000) == clone.next_int(1000)

    def test_same_seed_same_sequence(self):
        a, b = SeededRandom(5), SeededRandom(5)
        assert [a.next_int(50) for _ in range(8)] == [b.next_int(50) for _ in range(8)]

    def test_system_random_seeded(self):
        a, b = SystemRandom(3), SystemRandom(3)
        assert a.next_int(100) == b.next_int(100)
        assert 0.0 <= a.next_float() < 1.0

    def test_system_random_bad_bound(self):
        with pytest.raises(ValueError):
            SystemRandom().next_int(-1)

    def test_make_random(self):
        assert isinstance(make_random(1), SeededRandom)
        assert isinstance(make_random(), SystemRandom)

    def test_protocol(self, stub_random):
        """Every source satisfies RandomSource."""
        assert isinstance(SeededRandom(1), RandomSource)
        assert isinstance(SystemRandom(), RandomSource)
        assert isinstance(stub_random(), RandomSource)

    def test_choice(self, stub_random):
        """choice() picks by index and rejects empty input."""
        assert choice(stub_random(ints=(2,)), ["a", "b", "c"]) == "c"
        with pytest.raises(ValueError):
            choice(stub_random(), [])


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no SKIRMISH_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("SKIRMISH_SEED", "SKIRMISH_CRIT_CHANCE", "SKIRMISH_LOG_LEVEL", "SKIRMISH_RESIST_MULTIPLIER"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadConfig:

    def test_defaults(self, clean_env):
        """No environment: DEFAULT_CONFIG."""
        assert load_config() == DEFAULT_CONFIG

    def test_environment(self, clean_env):
        """SKIRMISH_* variables are read and typed."""
        clean_env.setenv("SKIRMISH_SEED", "12")
        clean_env.setenv("SKIRMISH_CRIT_CHANCE", "0.3")
        clean_env.setenv("SKIRMISH_LOG_LEVEL", "DEBUG")
        config = load_config()
        assert config.seed == 12
        assert config.crit_chance == 0.3
        assert config.log_level == "DEBUG"

    def test_overrides_win(self, clean_env):
        """Explicit overrides beat the environment."""
        clean_env.setenv("SKIRMISH_SEED", "12")
        assert load_config(seed=99).seed == 99

    def test_invalid_value(self, clean_env):
        """Bad values name the variable."""
        clean_env.setenv("SKIRMISH_CRIT_CHANCE", "often")
        with pytest.raises(ValueError, match="SKIRMISH_CRIT_CHANCE"):
            load_config()

    def test_env_file(self, clean_env, tmp_path):
        """Settings can come from a .env file."""
        env_file = tmp_path / "combat.env"
        env_file.write_text("SKIRMISH_RESIST_MULTIPLIER=0.25\n")
        # Registered so teardown removes what load_dotenv sets
        clean_env.setenv("SKIRMISH_RESIST_MULTIPLIER", "unset")
        clean_env.delenv("SKIRMISH_RESIST_MULTIPLIER")
        assert load_config(env_file=str(env_file)).resist_multiplier == 0.25

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_CONFIG.crit_chance = 1.0

    def test_to_dict(self):
        data = CombatConfig(seed=3).to_dict()
        assert data["seed"] == 3
        assert data["rainbow_multiplier"] == 2.0


# =============================================================================
# Numeric normalization
# =============================================================================


class TestNormalizeDamage:

    def test_valid_values_pass_through(self):
        assert normalize_damage(4) == 4.0
        assert normalize_damage("2.5") == 2.5
        assert normalize_damage(0) == 0.0

    @pytest.mark.parametrize("bad", [None, math.nan, math.inf, -3, "x", object()])
    def test_invalid_values_become_zero(self, bad):
        """None, NaN, inf, negatives and junk become 0 with a note."""
        anomalies = []
        assert normalize_damage(bad, anomalies, label="attack") == 0.0
        assert len(anomalies) == 1
        assert anomalies[0].startswith("attack value")
