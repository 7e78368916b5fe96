"""
Summoning - summoner replacement and boss minions.

A summoner enemy is swapped, once, for a random ordinary enemy when the block
phase begins. The replacement keeps none of the summoner's abilities; the
mapping replacement id -> summoner is kept on the session state so fame and
UI can be traced back to the summoner.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

from ..content.abilities import Ability
from ..content.bosses import BossEnemy, PhaseAbilityResult
from ..content.enemies import Enemy, create_enemy, summon_pool
from ..state.rng import RandomSource, choice
from ..state.session import SessionState


logger = logging.getLogger(__name__)


def _summon_record(source: Enemy, summoned: Enemy) -> Dict[str, Any]:
    return {
        "summoner": source.id,
        "summoner_name": source.name,
        "summoned": summoned.id,
        "summoned_name": summoned.name,
        "type": summoned.enemy_type,
    }


def replace_summoners(state: SessionState, rng: RandomSource) -> List[Dict[str, Any]]:
    """
    Replace every active summoner that has not summoned yet.

    Returns one record per replacement, in roster order.
    """
    summoners = [e for e in state.enemies if e.has(Ability.SUMMONER) and not e.summoned]
    pool = summon_pool()
    records = []

    for summoner in summoners:
        key = choice(rng, pool)
        summoned = create_enemy(key, enemy_id=f"summoned_{summoner.id}", summoned=True)
        state.replace_enemy(summoner, summoned)
        state.summoned_enemies[summoned.id] = summoner

        record = _summon_record(summoner, summoned)
        records.append(record)
        state.log.log(state.phase, "summon", **record)
        logger.info("%s summons %s", summoner.name, summoned.name)

    return records


def spawn_minions(state: SessionState, boss: BossEnemy, ability: PhaseAbilityResult) -> List[Dict[str, Any]]:
    """Add the enemies a boss summon ability asks for to the active roster."""
    if ability.type != "summon" or not ability.enemy_type or ability.count <= 0:
        return []

    records = []
    start = sum(1 for s in state.summoned_enemies.values() if s is boss)
    for n in range(ability.count):
        minion = create_enemy(
            ability.enemy_type,
            enemy_id=f"{boss.id}_minion_{start + n + 1}",
            summoned=True,
        )
        state.enemies.append(minion)
        state.summoned_enemies[minion.id] = boss

        record = _summon_record(boss, minion)
        records.append(record)
        state.log.log(state.phase, "summon", **record)

    logger.info("%s summons %d x %s", boss.name, ability.count, ability.enemy_type)
    return records
