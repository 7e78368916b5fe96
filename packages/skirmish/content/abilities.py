"""
Enemy ability tags.

An enemy is a base stat record plus a set of these tags. What each tag does is
defined by handlers in the ability registry (see packages.skirmish.registry).
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Set, Union


class Ability(str, Enum):
    """Capability tags an enemy can carry."""
    FORTIFIED = "fortified"      # Immune to ranged; only siege applies
    SWIFT = "swift"              # Double block requirement
    BRUTAL = "brutal"            # Double effective attack
    POISON = "poison"            # Extra wound batch on hero, double wounds on units
    VAMPIRIC = "vampiric"        # Gains armor per wound dealt
    ASSASSIN = "assassin"        # Damage cannot be assigned to units
    PETRIFY = "petrify"          # Forces discards on hero, destroys units
    CUMBERSOME = "cumbersome"    # Block may be paid with movement
    ELUSIVE = "elusive"          # Lower armor while blocked in attack phase
    SUMMONER = "summoner"        # Replaced by a random enemy at block phase


def parse_abilities(values: Iterable[Union[str, Ability]]) -> Set[Ability]:
    """Convert an iterable of tags (strings or Ability) into an Ability set."""
    return {v if isinstance(v, Ability) else Ability(str(v).lower()) for v in values}
