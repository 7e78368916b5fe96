"""
Tests for the enemy model, ability resolution and the ability registry.

Covers: effective attack, block requirement, elusive armor, resistances,
definition catalog, summon pool, and handler dispatch order.
"""

import pytest

from packages.skirmish.content.abilities import Ability, parse_abilities
from packages.skirmish.content.elements import Element
from packages.skirmish.content.enemies import (
    ENEMY_DEFINITIONS,
    Enemy,
    create_enemies,
    create_enemy,
    summon_pool,
)
from packages.skirmish.config import CombatConfig
from packages.skirmish.registry import (
    ABILITY_REGISTRY,
    AbilityContext,
    AbilityRegistry,
    HeroWoundContext,
    UnitWoundContext,
    fold_hooks,
    run_hooks,
)


# =============================================================================
# Derived values
# =============================================================================


class TestEffectiveAttack:
    """Attack is doubled by brutal only."""

    def test_plain_enemy(self, make_enemy):
        assert make_enemy(attack=4).effective_attack() == 4

    def test_brutal_doubles(self, make_enemy):
        """Brutal attack 4 -> 8."""
        assert make_enemy(attack=4, abilities=["brutal"]).effective_attack() == 8

    def test_other_abilities_do_not_change_attack(self, make_enemy):
        """Only brutal modifies attack."""
        enemy = make_enemy(attack=3, abilities=["swift", "poison", "fortified", "vampiric"])
        assert enemy.effective_attack() == 3

    def test_zero_attack(self, make_enemy):
        assert make_enemy(attack=0, abilities=["brutal"]).effective_attack() == 0


class TestBlockRequirement:
    """Swift doubles the block needed, on top of brutal."""

    def test_plain(self, make_enemy):
        assert make_enemy(attack=3).block_requirement() == 3

    def test_swift(self, make_enemy):
        """Swift attack 3 needs 6 block."""
        assert make_enemy(attack=3, abilities=["swift"]).block_requirement() == 6

    def test_swift_and_brutal(self, make_enemy):
        """Swift + brutal attack 3 needs 12 block."""
        assert make_enemy(attack=3, abilities=["swift", "brutal"]).block_requirement() == 12

    def test_swift_poison_fortified_compose(self, make_enemy):
        enemy = make_enemy(attack=2, abilities=["swift", "poison", "fortified"])
        assert enemy.effective_attack() == 2
        assert enemy.block_requirement() == 4
        assert enemy.has(Ability.FORTIFIED)


class TestArmor:
    """current_armor with vampiric bonus and elusive lower armor."""

    def test_armor_bonus_added(self, make_enemy):
        enemy = make_enemy(armor=4)
        enemy.armor_bonus = 2
        assert enemy.current_armor() == 6

    def test_elusive_only_lower_when_blocked_in_attack_phase(self, make_enemy):
        """Elusive armor 5 / lower 2: lower only when blocked in the attack phase."""
        bird = make_enemy(armor=5, lower_armor=2, abilities=["elusive"])
        assert bird.current_armor(False, False) == 5
        assert bird.current_armor(True, False) == 5
        assert bird.current_armor(False, True) == 5
        assert bird.current_armor(True, True) == 2

    def test_elusive_keeps_vampiric_bonus(self, make_enemy):
        """Armor bonus still applies on top of lower armor."""
        bird = make_enemy(armor=5, lower_armor=2, abilities=["elusive"])
        bird.armor_bonus = 1
        assert bird.current_armor(True, True) == 3

    def test_non_elusive_ignores_blocked_flag(self, make_enemy):
        enemy = make_enemy(armor=5, lower_armor=2)
        assert enemy.current_armor(True, True) == 5

    def test_default_lower_armor(self, make_enemy):
        """lower_armor defaults to half the armor."""
        assert make_enemy(armor=4).lower_armor == 2
        assert make_enemy(armor=0).lower_armor == 0


class TestResistances:
    """Resisted elements halve damage, so armor counts double."""

    def test_multiplier(self, make_enemy):
        enemy = make_enemy(resistances=["fire"])
        assert enemy.resistance_multiplier(Element.FIRE) == 0.5
        assert enemy.resistance_multiplier("ice") == 1.0
        assert enemy.resistance_multiplier(Element.PHYSICAL) == 1.0

    def test_effective_armor(self, make_enemy):
        """Physical resist doubles the armor physical attacks must beat."""
        enemy = make_enemy(armor=4, resistances=["physical"])
        assert enemy.effective_armor(Element.PHYSICAL) == 8.0
        assert enemy.effective_armor(Element.FIRE) == 4.0

    def test_config_multiplier(self, make_enemy):
        enemy = make_enemy(armor=3, resistances=["physical"])
        config = CombatConfig(resist_multiplier=0.25)
        assert enemy.effective_armor(Element.PHYSICAL, config=config) == 12.0


class TestEnemyValidation:
    """Bad stats are programmer errors."""

    def test_negative_armor(self):
        with pytest.raises(ValueError):
            Enemy(id="x", name="Bad", armor=-1, attack=2)

    def test_negative_attack(self):
        with pytest.raises(ValueError):
            Enemy(id="x", name="Bad", armor=1, attack=-2)

    def test_unknown_ability(self):
        """Unknown ability tags are rejected."""
        with pytest.raises(ValueError):
            Enemy(id="x", name="Bad", armor=1, attack=1, abilities=["flying"])

    def test_cold_fire_alias(self, make_enemy):
        """"coldFire" parses as cold_fire."""
        assert make_enemy(attack_type="coldFire").attack_type == Element.COLD_FIRE

    def test_parse_abilities(self):
        assert parse_abilities(["Swift", Ability.BRUTAL]) == {Ability.SWIFT, Ability.BRUTAL}


# =============================================================================
# Catalog
# =============================================================================


class TestCatalog:
    """Enemy definitions and factories."""

    def test_create_guard(self):
        guard = create_enemy("guard")
        assert guard.name == "Guard"
        assert guard.armor == 4
        assert guard.has(Ability.FORTIFIED)
        assert guard.enemy_type == "guard"

    def test_create_with_id_and_override(self):
        orc = create_enemy("orc", enemy_id="orc_a", armor=5)
        assert orc.id == "orc_a"
        assert orc.armor == 5

    def test_ids_are_unique(self):
        a, b = create_enemies(["orc", "orc"])
        assert a.id != b.id

    def test_unknown_key(self):
        """Unknown definition keys raise KeyError."""
        with pytest.raises(KeyError):
            create_enemy("balrog")

    def test_every_definition_builds(self):
        """Every catalog entry produces a valid enemy."""
        for key in ENEMY_DEFINITIONS:
            assert create_enemy(key).enemy_type == key

    def test_to_dict(self):
        data = create_enemy("vampire", enemy_id="v1").to_dict()
        assert data["id"] == "v1"
        assert data["abilities"] == ["assassin", "brutal", "poison", "vampiric"]
        assert data["is_boss"] is False


class TestSummonPool:
    """Summoners are replaced by ordinary enemies only."""

    def test_excludes_fortified_and_summoners(self):
        """Fortified and summoner enemies are never summoned."""
        pool = summon_pool()
        for key in ("guard", "golem", "deep_orc", "necromancer", "summoner_orc", "boss"):
            assert key not in pool
        assert "orc" in pool

    def test_sorted(self):
        pool = summon_pool()
        assert pool == sorted(pool)


# =============================================================================
# Registry
# =============================================================================


class TestAbilityRegistry:
    """Handlers are dispatched by ability tag and hook, in priority order."""

    def test_builtin_handlers_registered(self):
        assert ABILITY_REGISTRY.has_handler("modify_attack", Ability.BRUTAL)
        assert ABILITY_REGISTRY.has_handler("modify_block_requirement", Ability.SWIFT)
        assert ABILITY_REGISTRY.has_handler("can_assign_to_unit", Ability.ASSASSIN)
        assert not ABILITY_REGISTRY.has_handler("modify_attack", Ability.SWIFT)

    def test_unit_wound_order(self):
        """Petrify runs before poison on units."""
        handlers = ABILITY_REGISTRY.get_handlers("unit_wound", {Ability.PETRIFY, Ability.POISON})
        assert [ability for ability, _ in handlers] == [Ability.PETRIFY, Ability.POISON]

    def test_filtered_by_abilities(self):
        assert ABILITY_REGISTRY.get_handlers("modify_attack", {Ability.SWIFT}) == []

    def test_custom_registry_priority(self):
        """Lower priority runs first."""
        registry = AbilityRegistry("test")
        registry.register("modify_attack", Ability.SWIFT, lambda ctx: ctx.value + 1, priority=50)
        registry.register("modify_attack", Ability.BRUTAL, lambda ctx: ctx.value * 2, priority=10)
        order = [a for a, _ in registry.get_handlers("modify_attack")]
        assert order == [Ability.BRUTAL, Ability.SWIFT]
        assert registry.list_abilities("modify_attack") == [Ability.SWIFT, Ability.BRUTAL]

    def test_fold_hooks(self, make_enemy):
        """Assassin folds can_assign_to_unit to False."""
        assassin = make_enemy(abilities=["assassin"])
        assert fold_hooks("can_assign_to_unit", assassin, True) is False
        assert fold_hooks("can_assign_to_unit", make_enemy(), True) is True

    def test_run_hooks_unit_wound(self, make_enemy):
        """Petrify + poison: the unit is destroyed."""
        enemy = make_enemy(abilities=["poison", "petrify"])
        ctx = run_hooks("unit_wound", UnitWoundContext(enemy=enemy, unit=None))
        assert ctx.destroy is True
        assert ctx.wounds == 2

    def test_run_hooks_hero_wounds(self, make_enemy):
        """Poison adds a batch, petrify adds discards."""
        enemy = make_enemy(abilities=["poison", "petrify"])
        ctx = run_hooks("hero_wounds", HeroWoundContext(enemy=enemy, wounds=3))
        assert ctx.discard_wounds == 3
        assert ctx.cards_to_discard == 3
        assert ctx.wounds == 3

    def test_handler_context_type(self, make_enemy):
        seen = []
        registry = AbilityRegistry("test")
        registry.register("modify_armor", Ability.ELUSIVE, lambda ctx: seen.append(ctx) or ctx.value)
        _, handler = registry.get_handlers("modify_armor")[0]
        handler(AbilityContext(enemy=make_enemy(), value=3))
        assert isinstance(seen[0], AbilityContext)
