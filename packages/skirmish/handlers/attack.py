"""
Attack resolution - melee batches, defeats and boss damage.

Regular enemies fall as a group: the batch is defeated only if the total
attack covers the summed effective armor of every regular target
(armor / resistance multiplier; elusive enemies use their lower armor when
blocked). Otherwise nothing happens and the caller can retry with a subset.

Bosses never compare against armor. Each boss target takes
floor(total_attack * resistance_multiplier) health damage, fires its phase
transitions and executes the phase abilities (summon, heal, buff).
"""

from __future__ import annotations

from typing import Any, List, Sequence
import logging
import math

from ..config import CombatConfig
from ..content.bosses import ENRAGE_ABILITY, BossEnemy
from ..content.elements import Element
from ..content.enemies import Enemy
from ..errors import CombatError
from ..results import AttackResult
from ..state.session import SessionState
from .summoning import spawn_minions
from .units import UnitContribution


logger = logging.getLogger(__name__)


def defeat_enemy(state: SessionState, hero: Any, enemy: Enemy, result: AttackResult) -> None:
    """Move an enemy to the defeated list and award its fame once."""
    if not state.is_active(enemy):
        return
    state.remove_enemy(enemy)
    hero.gain_fame(enemy.fame)
    result.defeated.append(enemy.id)
    result.fame_gained += enemy.fame
    state.log.log(state.phase, "enemy_defeated", enemy=enemy.id, name=enemy.name, fame=enemy.fame)
    logger.info("%s defeated (+%d fame)", enemy.name, enemy.fame)


def damage_boss(
    state: SessionState,
    hero: Any,
    boss: BossEnemy,
    attack: int,
    element: Element,
    config: CombatConfig,
    result: AttackResult,
) -> int:
    """Apply an attack to a boss as health damage. Returns the damage dealt."""
    damage = math.floor(attack * boss.resistance_multiplier(element, config))
    outcome = boss.take_damage(damage)
    result.boss_damage += damage
    state.log.log(
        state.phase, "boss_damaged",
        boss=boss.id, damage=damage, health=outcome.current_health, max_health=boss.max_health,
    )

    for transition in outcome.transitions:
        record = transition.to_dict()
        record["boss"] = boss.id
        result.boss_transitions.append(record)
        state.log.log(
            state.phase, "boss_transition",
            boss=boss.id, boss_phase=transition.phase, ability=transition.ability,
        )

        # A defeated boss does not get to use its phase abilities
        if transition.ability and transition.ability != ENRAGE_ABILITY and not outcome.defeated:
            ability = boss.execute_phase_ability(transition.ability)
            if ability is not None:
                entry = ability.to_dict()
                entry["boss"] = boss.id
                result.phase_abilities.append(entry)
                result.summoned.extend(spawn_minions(state, boss, ability))

    if outcome.defeated:
        defeat_enemy(state, hero, boss, result)
    return damage


def resolve_attack(
    state: SessionState,
    hero: Any,
    targets: Sequence[Enemy],
    attack_value: float,
    element: Element,
    config: CombatConfig,
    units: UnitContribution,
    anomalies: List[str],
) -> AttackResult:
    """
    Resolve one melee attack batch. Targets must already be validated as active.

    Unit attack points are added to the batch and consumed when it lands.
    """
    total = int(attack_value) + units.points.attack
    bosses = [t for t in targets if t.is_boss]
    regulars = [t for t in targets if not t.is_boss]
    result = AttackResult(total_attack=total, anomalies=anomalies)
    messages = []

    if regulars:
        required = sum(
            e.effective_armor(element, blocked=state.is_blocked(e), in_attack_phase=True, config=config)
            for e in regulars
        )
        result.required = required
        logger.debug("Attack batch: %d vs %.1f armor (%d targets)", total, required, len(regulars))
        if total >= required:
            for enemy in regulars:
                defeat_enemy(state, hero, enemy, result)
            messages.append(f"{len(regulars)} enemies defeated")
        else:
            messages.append(f"Attack too weak ({total} vs {required:g})")

    for boss in bosses:
        damage = damage_boss(state, hero, boss, total, element, config, result)
        messages.append(f"{boss.name} takes {damage} damage ({boss.current_health}/{boss.max_health})")

    result.success = bool(bosses) or bool(result.defeated)
    if result.success:
        result.unit_points_consumed = units.consume_attack()
    else:
        result.error = CombatError.VALIDATION
    result.message = "; ".join(messages)
    return result
