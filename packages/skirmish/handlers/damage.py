"""
Damage assignment - routing unblocked enemy damage to units or the hero.

On entering the damage phase the unblocked enemies and their summed attack are
fixed. Each unblocked enemy can then be routed to one ready unit (not for
assassins); whatever is left is converted into hero wounds by
resolve_hero_damage().

Ability effects come from the registry hooks:
- unit_wound: petrify destroys the unit, poison doubles the wound
- hero_wounds: poison adds a discard batch, petrify forces discards
- wounds_dealt: vampiric gains armor (bosses also heal)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from ..calc.damage import plan_hero_wounds
from ..content.enemies import Enemy
from ..content.units import unit_name
from ..errors import CombatError, normalize_damage
from ..registry import UnitWoundContext, WoundsDealtContext, fold_hooks, run_hooks
from ..results import AssignmentResult, DamageResult
from ..state.session import SessionState


logger = logging.getLogger(__name__)

# Wounds a destroyed unit counts as for vampiric gain
DESTROYED_UNIT_WOUNDS = 2


def enemy_damage(enemy: Enemy, anomalies: Optional[List[str]] = None) -> int:
    return int(normalize_damage(enemy.effective_attack(), anomalies, label=f"{enemy.name} attack"))


def enter_damage_phase(state: SessionState, anomalies: Optional[List[str]] = None) -> List[Enemy]:
    """Fix the unblocked enemies and total damage for this damage phase."""
    state.unblocked_enemies = [e for e in state.enemies if not state.is_blocked(e)]
    state.assigned_enemies = set()
    state.total_damage = sum(enemy_damage(e, anomalies) for e in state.unblocked_enemies)
    return state.unblocked_enemies


def feed(enemy: Enemy, wounds: int) -> WoundsDealtContext:
    """Run wounds_dealt hooks for wounds an enemy delivered."""
    return run_hooks("wounds_dealt", WoundsDealtContext(enemy=enemy, wounds=wounds))


def pick_assignable(state: SessionState) -> Optional[Enemy]:
    """First unassigned unblocked enemy whose damage may go to a unit."""
    for enemy in state.pending_unblocked():
        if fold_hooks("can_assign_to_unit", enemy, True):
            return enemy
    return None


def assign_to_unit(
    state: SessionState,
    unit: Any,
    enemy: Optional[Enemy],
    anomalies: List[str],
) -> AssignmentResult:
    """
    Route one unblocked enemy's damage onto a unit.

    Args:
        state: Session state (must be in the damage phase)
        unit: Ready unit taking the damage
        enemy: Enemy whose damage is routed; None picks the first assignable one
        anomalies: Collects notes about normalized numeric inputs
    """
    name = unit_name(unit)

    if enemy is None:
        enemy = pick_assignable(state)
        if enemy is None:
            if state.pending_unblocked():
                return AssignmentResult.failure(
                    CombatError.VALIDATION, "Only assassin damage is left; it must go to the hero", unit=name,
                )
            return AssignmentResult.failure(CombatError.VALIDATION, "No enemy damage left to assign", unit=name)

    if not any(e is enemy for e in state.unblocked_enemies):
        return AssignmentResult.failure(
            CombatError.VALIDATION, f"{enemy.name} is not an unblocked enemy", enemy_id=enemy.id, unit=name,
        )
    if enemy.id in state.assigned_enemies:
        return AssignmentResult.failure(
            CombatError.VALIDATION, f"{enemy.name}'s damage is already assigned", enemy_id=enemy.id, unit=name,
        )
    if not fold_hooks("can_assign_to_unit", enemy, True):
        return AssignmentResult.failure(
            CombatError.VALIDATION,
            f"{enemy.name} is an assassin: its damage cannot be assigned to units",
            enemy_id=enemy.id,
            unit=name,
        )
    if not unit.is_ready():
        return AssignmentResult.failure(CombatError.VALIDATION, f"{name} is not ready", enemy_id=enemy.id, unit=name)

    ctx = run_hooks("unit_wound", UnitWoundContext(enemy=enemy, unit=unit))
    if ctx.destroy:
        unit.destroy()
        delivered = DESTROYED_UNIT_WOUNDS
        logger.info("%s destroyed by %s", name, enemy.name)
    else:
        for _ in range(ctx.wounds):
            unit.take_wound()
        delivered = ctx.wounds
        logger.info("%s takes %d wound(s) from %s", name, ctx.wounds, enemy.name)

    dealt = feed(enemy, delivered)
    state.assigned_enemies.add(enemy.id)
    state.total_damage = max(0, state.total_damage - enemy_damage(enemy, anomalies))
    state.log.log(
        state.phase, "damage_assigned",
        enemy=enemy.id, unit=name, wounds=ctx.wounds, destroyed=ctx.destroy, armor_gained=dealt.armor_gained,
    )

    return AssignmentResult(
        message=f"{enemy.name}'s damage assigned to {name}",
        enemy_id=enemy.id,
        unit=name,
        unit_wounds=0 if ctx.destroy else ctx.wounds,
        unit_destroyed=ctx.destroy,
        armor_gained=dealt.armor_gained,
        healed=dealt.healed,
        remaining_damage=state.total_damage,
        anomalies=anomalies,
    )


def resolve_hero_damage(state: SessionState, hero: Any, anomalies: List[str]) -> DamageResult:
    """Convert the damage of every unassigned unblocked enemy into hero wounds."""
    pending = state.pending_unblocked()
    plan = plan_hero_wounds(pending, hero.armor, anomalies)

    for _ in range(plan.hand_wounds):
        hero.take_wound()
    for _ in range(plan.discard_wounds):
        hero.take_wound_to_discard()

    armor_gained: Dict[str, int] = {}
    for enemy in pending:
        delivered = plan.delivered.get(enemy.id, 0)
        if delivered > 0:
            dealt = feed(enemy, delivered)
            if dealt.armor_gained:
                armor_gained[enemy.id] = dealt.armor_gained
        state.assigned_enemies.add(enemy.id)

    state.wounds_received += plan.wounds_received
    state.cards_to_discard += plan.cards_to_discard
    if plan.paralyze_triggered:
        state.paralyze_triggered = True
    state.total_damage = 0

    logger.info(
        "Damage phase: %d damage vs armor %d = %d wounds (+%d to discard)",
        plan.total_damage, plan.armor, plan.hand_wounds, plan.discard_wounds,
    )
    state.log.log(
        state.phase, "hero_wounded",
        damage=plan.total_damage, wounds=plan.hand_wounds, discard_wounds=plan.discard_wounds,
        cards_to_discard=plan.cards_to_discard,
    )

    return DamageResult(
        message=f"Hero receives {plan.wounds_received} wound(s)",
        total_damage=plan.total_damage,
        wounds_received=plan.wounds_received,
        hand_wounds=plan.hand_wounds,
        discard_wounds=plan.discard_wounds,
        paralyze_triggered=plan.paralyze_triggered,
        cards_to_discard=plan.cards_to_discard,
        armor_gained=armor_gained,
        anomalies=anomalies,
    )
