"""
Built-in enemy ability handlers.

Fortified and cumbersome have no handler here: fortified is a targeting rule
checked by the ranged/siege resolver, and cumbersome only unlocks movement
payment in the blocking engine. Summoner is handled at the block-phase entry.
"""

from __future__ import annotations

import logging

from ..content.abilities import Ability
from . import (
    AbilityContext,
    HeroWoundContext,
    UnitWoundContext,
    WoundsDealtContext,
    ability_hook,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Stat modifiers
# =============================================================================

@ability_hook("modify_attack", ability=Ability.BRUTAL)
def brutal_attack(ctx: AbilityContext) -> int:
    return ctx.value * 2


@ability_hook("modify_block_requirement", ability=Ability.SWIFT)
def swift_block_requirement(ctx: AbilityContext) -> int:
    return ctx.value * 2


@ability_hook("modify_armor", ability=Ability.ELUSIVE)
def elusive_armor(ctx: AbilityContext) -> int:
    """Elusive armor drops to lower_armor only once blocked, in the attack phase."""
    if ctx.data.get("blocked") and ctx.data.get("in_attack_phase"):
        return ctx.enemy.lower_armor
    return ctx.value


@ability_hook("can_assign_to_unit", ability=Ability.ASSASSIN)
def assassin_targets_hero(ctx: AbilityContext) -> bool:
    return False


# =============================================================================
# Damage delivery
# =============================================================================

@ability_hook("unit_wound", ability=Ability.PETRIFY, priority=10)
def petrify_unit(ctx: UnitWoundContext) -> None:
    ctx.destroy = True


@ability_hook("unit_wound", ability=Ability.POISON, priority=20)
def poison_unit(ctx: UnitWoundContext) -> None:
    ctx.wounds *= 2


@ability_hook("hero_wounds", ability=Ability.POISON, priority=10)
def poison_hero(ctx: HeroWoundContext) -> None:
    ctx.discard_wounds += ctx.wounds


@ability_hook("hero_wounds", ability=Ability.PETRIFY, priority=20)
def petrify_hero(ctx: HeroWoundContext) -> None:
    ctx.cards_to_discard += ctx.wounds


@ability_hook("wounds_dealt", ability=Ability.VAMPIRIC)
def vampiric_feed(ctx: WoundsDealtContext) -> None:
    if ctx.wounds <= 0:
        return
    ctx.enemy.armor_bonus += ctx.wounds
    ctx.armor_gained += ctx.wounds
    logger.info("%s gains +%d armor from vampirism", ctx.enemy.name, ctx.wounds)

    # Wounded bosses also heal a point
    if getattr(ctx.enemy, "is_boss", False) and ctx.enemy.current_health < ctx.enemy.max_health:
        ctx.healed += ctx.enemy.heal(1)
