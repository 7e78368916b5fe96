"""
Tests for boss encounters: health damage, phase thresholds, enrage and
phase abilities.
"""

import math

import pytest

from packages.skirmish.content.bosses import (
    ENRAGED,
    PHASE_1,
    PHASE_2,
    PHASE_3,
    BossEnemy,
    BossPhase,
    create_boss,
)


def make_boss(**kwargs):
    data = {"id": "boss_1", "name": "Test Boss", "armor": 5, "attack": 4, "max_health": 30}
    data.update(kwargs)
    return BossEnemy(**data)


class TestTakeDamage:
    """Direct health damage and threshold crossing."""

    def test_damage_reduces_health(self):
        """Damage above zero health leaves the boss standing."""
        boss = make_boss()
        result = boss.take_damage(5)
        assert result.damage == 5
        assert result.previous_health == 30
        assert result.current_health == 25
        assert not result.defeated
        assert result.transitions == []

    def test_phase_2_at_two_thirds(self):
        """30 health, 11 damage -> Phase 2 with its summon ability."""
        boss = create_boss("dark_lord")
        result = boss.take_damage(11)
        assert boss.current_health == 19
        assert [t.phase for t in result.transitions] == [PHASE_2]
        assert result.transitions[0].ability == "summon"
        assert boss.phase_name == PHASE_2

    def test_big_hit_fires_every_threshold_in_order(self):
        """One big hit fires Phase 2, Phase 3 and enrage in order."""
        boss = create_boss("dark_lord")
        result = boss.take_damage(25)
        assert [t.phase for t in result.transitions] == [PHASE_2, PHASE_3, ENRAGED]
        assert boss.enraged
        assert boss.phase_name == ENRAGED

    def test_thresholds_fire_once(self):
        """A threshold never fires twice."""
        boss = make_boss()
        first = boss.take_damage(11)
        second = boss.take_damage(1)
        assert [t.phase for t in first.transitions] == [PHASE_2]
        assert second.transitions == []

    def test_threshold_fires_after_heal_only_once(self):
        """Healing above a threshold does not re-arm it."""
        boss = make_boss()
        boss.take_damage(11)
        boss.heal(10)
        result = boss.take_damage(11)
        assert PHASE_2 not in [t.phase for t in result.transitions]

    def test_defeat(self):
        """Health at 0 is a defeat."""
        boss = make_boss()
        result = boss.take_damage(40)
        assert result.defeated
        assert boss.current_health == 0
        assert boss.is_defeated

    def test_negative_damage_ignored(self):
        """Negative damage does nothing."""
        boss = make_boss()
        result = boss.take_damage(-5)
        assert result.damage == 0
        assert boss.current_health == 30

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf, None])
    def test_non_finite_damage_ignored(self, bad):
        """NaN, infinite or missing damage counts as 0."""
        boss = make_boss()
        result = boss.take_damage(bad)
        assert result.damage == 0
        assert result.transitions == []
        assert boss.current_health == 30

    def test_health_percent(self):
        boss = make_boss()
        boss.take_damage(15)
        assert boss.health_percent == 0.5

    def test_to_dict(self):
        boss = create_boss("dark_lord", enemy_id="dl")
        boss.take_damage(11)
        data = boss.to_dict()
        assert data["id"] == "dl"
        assert data["current_health"] == 19
        assert data["phase"] == PHASE_2
        assert data["is_boss"] is True


class TestEnrage:
    """Enrage is monotonic and multiplies effective attack."""

    def test_enraged_attack(self):
        """Dark Lord: brutal 6 -> 12, enraged x1.5 -> 18."""
        boss = create_boss("dark_lord")
        assert boss.effective_attack() == 12
        boss.take_damage(23)
        assert boss.enraged
        assert boss.effective_attack() == 18

    def test_enrage_survives_heal(self):
        """Enrage is permanent."""
        boss = make_boss()
        boss.take_damage(25)
        boss.heal(30)
        assert boss.enraged
        assert boss.current_health == 30

    def test_custom_threshold(self):
        """Enrage threshold is per boss."""
        boss = make_boss(enrage_threshold=0.5, phases=[])
        result = boss.take_damage(15)
        assert [t.phase for t in result.transitions] == [ENRAGED]

    def test_phase_1_name(self):
        assert make_boss().phase_name == PHASE_1


class TestPhaseAbilities:
    """execute_phase_ability() results."""

    def test_summon(self):
        """Summon asks the caller to spawn the boss's minions."""
        boss = create_boss("dark_lord")
        result = boss.execute_phase_ability("summon")
        assert result.type == "summon"
        assert result.enemy_type == "phantom"
        assert result.count == 2

    def test_heal_bounded(self):
        """Heal restores 10% of max health."""
        boss = make_boss()
        boss.take_damage(10)
        result = boss.execute_phase_ability("heal")
        assert result.type == "heal"
        assert result.amount == 3
        assert boss.current_health == 23

    def test_heal_at_near_full_health(self):
        """Heal never goes above max health."""
        boss = make_boss()
        boss.take_damage(1)
        result = boss.execute_phase_ability("heal")
        assert result.amount == 1
        assert boss.current_health == 30

    def test_double_attack_is_buff(self):
        """double_attack is a marker only."""
        assert make_boss().execute_phase_ability("double_attack").type == "buff"

    def test_unknown_and_none(self):
        """Unknown abilities are not errors."""
        boss = make_boss()
        assert boss.execute_phase_ability("teleport") is None
        assert boss.execute_phase_ability(None) is None


class TestBossValidation:

    def test_zero_max_health(self):
        """max_health must be positive."""
        with pytest.raises(ValueError):
            make_boss(max_health=0)

    def test_current_health_clamped(self):
        assert make_boss(current_health=99).current_health == 30

    def test_unsorted_phases_are_sorted(self):
        boss = make_boss(phases=[BossPhase("Low", 0.2), BossPhase("High", 0.8)])
        assert [p.name for p in boss.phases] == ["High", "Low"]

    def test_unknown_boss(self):
        with pytest.raises(KeyError):
            create_boss("tarrasque")

    def test_definitions_not_shared(self):
        """Each boss gets its own phase ability table."""
        a = create_boss("dark_lord")
        a.phase_abilities["Phase 2"] = None
        b = create_boss("dark_lord")
        assert b.phase_abilities["Phase 2"] == "summon"
