"""
Enemy model and enemy definitions.

An Enemy is a base stat record (armor, attack, fame, attack element) plus a set
of Ability tags and elemental resistances. Derived values are computed by
folding the enemy's abilities through the ability registry:

- effective_attack(): attack, doubled if brutal (bosses: x enrage multiplier)
- block_requirement(): effective attack, doubled if swift
- current_armor(blocked, in_attack_phase): armor + armor_bonus, or
  lower_armor + armor_bonus for an elusive enemy that is blocked during the
  attack phase
- resistance_multiplier(element): 0.5 against a resisted element, else 1.0

Only armor_bonus (vampiric) is mutated during combat.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Union
import itertools

from .abilities import Ability, parse_abilities
from .elements import Element
from ..config import DEFAULT_CONFIG
from ..registry import fold_hooks


_enemy_ids = itertools.count(1)


def next_enemy_id(prefix: str = "enemy") -> str:
    """Generate a process-unique enemy id."""
    return f"{prefix}_{next(_enemy_ids)}"


@dataclass(eq=False)
class Enemy:
    """A hostile combatant."""

    id: str
    name: str
    armor: int
    attack: int
    fame: int = 0
    attack_type: Element = Element.PHYSICAL
    abilities: Set[Ability] = field(default_factory=set)
    resistances: Set[Element] = field(default_factory=set)
    lower_armor: Optional[int] = None
    armor_bonus: int = 0
    enemy_type: str = ""
    summoned: bool = False

    is_boss = False

    def __post_init__(self):
        for stat in ("armor", "attack", "fame"):
            if getattr(self, stat) < 0:
                raise ValueError(f"{self.name}: {stat} must be >= 0, got {getattr(self, stat)}")
        self.attack_type = Element.parse(self.attack_type)
        self.abilities = parse_abilities(self.abilities)
        self.resistances = {Element.parse(r) for r in self.resistances}
        if self.lower_armor is None:
            self.lower_armor = max(1, self.armor) // 2

    # -------------------------------------------------------------------------
    # Abilities
    # -------------------------------------------------------------------------

    def has(self, ability: Union[Ability, str]) -> bool:
        """Check whether this enemy carries an ability tag."""
        return Ability(ability) in self.abilities

    def resists(self, element: Union[Element, str]) -> bool:
        return Element.parse(element) in self.resistances

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def effective_attack(self) -> int:
        """Attack value after ability modifiers."""
        return fold_hooks("modify_attack", self, self.attack)

    def block_requirement(self) -> int:
        """Block value needed to block this enemy."""
        return fold_hooks("modify_block_requirement", self, self.effective_attack())

    def current_armor(self, blocked: bool = False, in_attack_phase: bool = False) -> int:
        """Armor including vampiric bonus (elusive aware)."""
        base = fold_hooks(
            "modify_armor", self, self.armor,
            blocked=blocked, in_attack_phase=in_attack_phase,
        )
        return base + self.armor_bonus

    def resistance_multiplier(self, element: Union[Element, str], config=DEFAULT_CONFIG) -> float:
        """Damage multiplier for an attack of the given element."""
        if self.resists(element):
            return config.resist_multiplier
        return 1.0

    def effective_armor(
        self,
        element: Union[Element, str] = Element.PHYSICAL,
        blocked: bool = False,
        in_attack_phase: bool = False,
        config=DEFAULT_CONFIG,
    ) -> float:
        """Attack points needed to defeat this enemy with the given element."""
        return self.current_armor(blocked, in_attack_phase) / self.resistance_multiplier(element, config)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.enemy_type,
            "armor": self.armor,
            "armor_bonus": self.armor_bonus,
            "attack": self.attack,
            "fame": self.fame,
            "attack_type": self.attack_type.value,
            "abilities": sorted(a.value for a in self.abilities),
            "resistances": sorted(r.value for r in self.resistances),
            "summoned": self.summoned,
            "is_boss": self.is_boss,
        }

    def __repr__(self) -> str:
        return f"Enemy({self.id!r}, {self.name!r}, armor={self.armor}, attack={self.attack})"


# =============================================================================
# Enemy definitions
# =============================================================================

ENEMY_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "orc": {"name": "Orc", "armor": 3, "attack": 2, "fame": 2},
    "goblin": {"name": "Goblin", "armor": 2, "attack": 2, "fame": 1, "abilities": ["swift"]},
    "weakling": {"name": "Weakling", "armor": 2, "attack": 1, "fame": 1},
    "guard": {"name": "Guard", "armor": 4, "attack": 3, "fame": 3, "abilities": ["fortified"]},
    "draconum": {
        "name": "Draconum", "armor": 5, "attack": 4, "fame": 4, "attack_type": "fire",
        "abilities": ["swift"], "resistances": ["fire"],
    },
    "robber": {"name": "Robber", "armor": 3, "attack": 2, "fame": 2, "abilities": ["swift"]},
    "mage": {
        "name": "Mage", "armor": 3, "attack": 4, "fame": 4, "attack_type": "ice",
        "abilities": ["swift", "petrify"], "resistances": ["physical"],
    },
    "dragon": {
        "name": "Dragon", "armor": 6, "attack": 5, "fame": 6, "attack_type": "fire",
        "abilities": ["brutal"], "resistances": ["fire"],
    },
    "phantom": {
        "name": "Phantom", "armor": 2, "attack": 3, "fame": 4,
        "abilities": ["swift", "assassin"], "resistances": ["physical"],
    },
    "golem": {
        "name": "Golem", "armor": 8, "attack": 2, "fame": 5,
        "abilities": ["fortified", "cumbersome"], "resistances": ["ice", "physical"],
    },
    "vampire": {
        "name": "Vampire", "armor": 4, "attack": 4, "fame": 5,
        "abilities": ["brutal", "poison", "assassin", "vampiric"],
    },
    "necromancer": {
        "name": "Necromancer", "armor": 4, "attack": 3, "fame": 5,
        "abilities": ["poison", "summoner"],
    },
    "summoner_orc": {"name": "Orc Summoner", "armor": 4, "attack": 4, "fame": 4, "abilities": ["summoner"]},
    "deep_orc": {"name": "Deep Orc", "armor": 4, "attack": 4, "fame": 4, "abilities": ["fortified"]},
    "crystal_golem": {
        "name": "Crystal Golem", "armor": 6, "attack": 6, "fame": 6, "resistances": ["physical"],
    },
    "shadow": {
        "name": "Shadow", "armor": 4, "attack": 3, "fame": 4, "lower_armor": 2,
        "abilities": ["elusive"],
    },
    "elemental": {
        "name": "Fire Elemental", "armor": 6, "attack": 5, "fame": 6, "attack_type": "fire",
        "resistances": ["fire"],
    },
    "boss": {
        "name": "Dark Lord", "armor": 10, "attack": 8, "fame": 20,
        "abilities": ["fortified", "brutal"], "resistances": ["fire", "ice", "physical"],
    },
}


def create_enemy(key: str, enemy_id: Optional[str] = None, **overrides: Any) -> Enemy:
    """
    Create an enemy from its definition.

    Args:
        key: Definition key (e.g., "orc", "guard")
        enemy_id: Explicit id; generated when omitted
        **overrides: Field values replacing the definition's

    Raises:
        KeyError: If the key is not a known enemy
    """
    if key not in ENEMY_DEFINITIONS:
        raise KeyError(f"Unknown enemy type: {key}")
    data = dict(ENEMY_DEFINITIONS[key])
    data.update(overrides)
    return Enemy(id=enemy_id or next_enemy_id(key), enemy_type=key, **data)


def create_enemies(keys: Iterable[str]) -> List[Enemy]:
    return [create_enemy(key) for key in keys]


def summon_pool() -> List[str]:
    """Definition keys a summoner can be replaced by (no fortified, no summoners)."""
    excluded = {Ability.FORTIFIED, Ability.SUMMONER}
    return sorted(
        key for key, data in ENEMY_DEFINITIONS.items()
        if key != "boss" and not (parse_abilities(data.get("abilities", ())) & excluded)
    )
