"""
Ranged/siege attacks against a single enemy during the ranged phase.

Fortified enemies ignore ranged points entirely: with no siege contribution
the attack is rejected outright, and with some siege only siege counts.

Point consumption on a defeat is greedy: unit points first, then siege,
then ranged.
"""

from __future__ import annotations

from typing import Any, List
import logging
import math

from ..config import CombatConfig
from ..content.abilities import Ability
from ..content.elements import Element
from ..content.enemies import Enemy
from ..errors import CombatError
from ..results import AttackResult
from ..state.session import SessionState
from .attack import damage_boss, defeat_enemy
from .units import UnitContribution


logger = logging.getLogger(__name__)


def resolve_ranged_attack(
    state: SessionState,
    hero: Any,
    enemy: Enemy,
    ranged: int,
    siege: int,
    element: Element,
    config: CombatConfig,
    units: UnitContribution,
    anomalies: List[str],
) -> AttackResult:
    """Resolve one ranged/siege attack. The enemy must already be validated as active."""
    points = units.points
    fortified = enemy.has(Ability.FORTIFIED)

    if fortified:
        if siege + points.siege <= 0:
            return AttackResult.failure(
                CombatError.VALIDATION,
                f"{enemy.name} is fortified: only siege attacks can hit it",
                anomalies=anomalies,
            )
        combined = siege + points.siege
    else:
        combined = ranged + siege + points.ranged + points.siege

    if enemy.is_boss:
        result = AttackResult(total_attack=combined, anomalies=anomalies)
        damage = damage_boss(state, hero, enemy, combined, element, config, result)
        result.unit_points_consumed = units.consume_ranged(siege_only=fortified)
        result.consumed_siege = siege
        result.consumed_ranged = 0 if fortified else ranged
        result.message = f"{enemy.name} takes {damage} damage ({enemy.current_health}/{enemy.max_health})"
        return result

    required = enemy.effective_armor(element, config=config)
    logger.debug("Ranged attack on %s: %d vs %.1f", enemy.name, combined, required)

    if combined < required:
        return AttackResult.failure(
            CombatError.VALIDATION,
            f"Ranged attack too weak ({combined} vs {required:g})",
            total_attack=combined,
            required=required,
            anomalies=anomalies,
        )

    result = AttackResult(total_attack=combined, required=required, anomalies=anomalies)
    unit_points = points.siege if fortified else points.siege + points.ranged
    remaining = max(0, math.ceil(required) - unit_points)
    result.unit_points_consumed = units.consume_ranged(siege_only=fortified)

    result.consumed_siege = min(siege, remaining)
    remaining -= result.consumed_siege
    if not fortified:
        result.consumed_ranged = min(ranged, remaining)

    defeat_enemy(state, hero, enemy, result)
    result.message = f"{enemy.name} defeated in the ranged phase (+{enemy.fame} fame)"
    return result
