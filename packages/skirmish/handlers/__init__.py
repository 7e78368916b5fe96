"""
Phase resolvers for combat.

Each resolver takes the SessionState by reference and returns a result record:
- ranged: ranged/siege attacks in the ranged phase
- attack: melee batches, defeats and boss damage
- damage: routing unblocked damage to units or the hero
- summoning: summoner replacement and boss minions
- units: UnitContribution (unit activation and points)
"""

from .attack import damage_boss, defeat_enemy, resolve_attack
from .damage import assign_to_unit, enter_damage_phase, resolve_hero_damage
from .ranged import resolve_ranged_attack
from .summoning import replace_summoners, spawn_minions
from .units import PHASE_CONTRIBUTIONS, UnitContribution

__all__ = [
    "damage_boss",
    "defeat_enemy",
    "resolve_attack",
    "assign_to_unit",
    "enter_damage_phase",
    "resolve_hero_damage",
    "resolve_ranged_attack",
    "replace_summoners",
    "spawn_minions",
    "PHASE_CONTRIBUTIONS",
    "UnitContribution",
]
