"""
Damage Calculator - hero wound maths for the damage phase.

Pure functions, no state is changed here:

    wounds = ceil(total_damage / max(1, hero_armor))

Non-finite or missing damage counts as 0 wounds. Each unblocked enemy also
gets a wound share, ceil(enemy_damage / armor), capped so the shares never
exceed the total. Ability effects that depend on "the wounds this enemy
caused" (poison batch, petrify discards, vampiric gain) use the share.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import math

from ..content.enemies import Enemy
from ..errors import normalize_damage
from ..registry import HeroWoundContext, run_hooks

__all__ = [
    "hero_armor",
    "calculate_wounds",
    "wound_shares",
    "HeroWoundPlan",
    "plan_hero_wounds",
]


def hero_armor(armor: Any, anomalies: Optional[List[str]] = None) -> int:
    """Hero armor floored at 1."""
    return max(1, int(normalize_damage(armor, anomalies, label="armor")))


def calculate_wounds(total_damage: Any, armor: Any = 1, anomalies: Optional[List[str]] = None) -> int:
    """Wounds dealt to the hero by `total_damage`."""
    damage = normalize_damage(total_damage, anomalies)
    if damage <= 0:
        return 0
    return math.ceil(damage / hero_armor(armor, anomalies))


def wound_shares(damages: Dict[str, int], armor: int, total_wounds: int) -> Dict[str, int]:
    """Per-enemy wound shares in roster order, never summing above total_wounds."""
    shares: Dict[str, int] = {}
    remaining = total_wounds
    for enemy_id, damage in damages.items():
        share = min(math.ceil(damage / armor), remaining)
        shares[enemy_id] = share
        remaining -= share
    return shares


@dataclass
class HeroWoundPlan:
    """What resolving the damage phase will do to the hero."""
    total_damage: int
    armor: int
    hand_wounds: int
    discard_wounds: int = 0
    cards_to_discard: int = 0
    shares: Dict[str, int] = field(default_factory=dict)
    delivered: Dict[str, int] = field(default_factory=dict)  # enemy id -> wounds incl. extra batches

    @property
    def wounds_received(self) -> int:
        return self.hand_wounds + self.discard_wounds

    @property
    def paralyze_triggered(self) -> bool:
        return self.cards_to_discard > 0


def plan_hero_wounds(
    enemies: Sequence[Enemy],
    armor: Any,
    anomalies: Optional[List[str]] = None,
) -> HeroWoundPlan:
    """
    Work out hero wounds from the unblocked enemies not routed to units.

    Base wounds come from the summed damage; then every enemy's share runs
    through the hero_wounds ability hooks (poison adds a discard batch,
    petrify adds forced discards).
    """
    armor_value = hero_armor(armor, anomalies)
    damages: Dict[str, int] = {}
    for enemy in enemies:
        damages[enemy.id] = int(normalize_damage(enemy.effective_attack(), anomalies, label=f"{enemy.name} attack"))
    total = sum(damages.values())
    hand_wounds = calculate_wounds(total, armor_value, anomalies)

    plan = HeroWoundPlan(total_damage=total, armor=armor_value, hand_wounds=hand_wounds)
    plan.shares = wound_shares(damages, armor_value, hand_wounds)

    for enemy in enemies:
        share = plan.shares[enemy.id]
        if share <= 0:
            plan.delivered[enemy.id] = 0
            continue
        ctx = run_hooks("hero_wounds", HeroWoundContext(enemy=enemy, wounds=share))
        plan.discard_wounds += ctx.discard_wounds
        plan.cards_to_discard += ctx.cards_to_discard
        plan.delivered[enemy.id] = ctx.wounds + ctx.discard_wounds

    return plan
