"""
Attack/block elements and the elemental efficiency table.

Block efficiency is reciprocal: physical counters physical, fire counters ice
and ice counters fire, and only cold fire counters cold fire. Cold fire block
also counters fire and ice.

    block \\ attack | physical | fire | ice | cold_fire
    physical       |   1.0    | 0.5  | 0.5 |   0.5
    fire           |   0.5    | 0.5  | 1.0 |   0.5
    ice            |   0.5    | 1.0  | 0.5 |   0.5
    cold_fire      |   0.5    | 1.0  | 1.0 |   1.0
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Union


class Element(str, Enum):
    """Element tag carried by attacks and blocks."""
    PHYSICAL = "physical"
    FIRE = "fire"
    ICE = "ice"
    COLD_FIRE = "cold_fire"

    @classmethod
    def parse(cls, value: Union[str, "Element", None]) -> "Element":
        """Parse an element tag; None means physical. Accepts 'coldFire' too."""
        if value is None:
            return cls.PHYSICAL
        if isinstance(value, Element):
            return value
        key = str(value).strip().lower().replace("-", "_")
        if key == "coldfire":
            key = "cold_fire"
        return cls(key)

    @property
    def label(self) -> str:
        return ELEMENT_LABELS[self]


ELEMENT_LABELS: Dict[Element, str] = {
    Element.PHYSICAL: "Physical",
    Element.FIRE: "Fire",
    Element.ICE: "Ice",
    Element.COLD_FIRE: "Cold Fire",
}

# Attack elements each block element fully counters.
COUNTERS: Dict[Element, FrozenSet[Element]] = {
    Element.PHYSICAL: frozenset({Element.PHYSICAL}),
    Element.FIRE: frozenset({Element.ICE}),
    Element.ICE: frozenset({Element.FIRE}),
    Element.COLD_FIRE: frozenset({Element.FIRE, Element.ICE, Element.COLD_FIRE}),
}


def block_efficiency(block_element: Element, attack_element: Element, inefficient: float = 0.5) -> float:
    """Efficiency of a block of `block_element` against an attack of `attack_element`."""
    if attack_element in COUNTERS[block_element]:
        return 1.0
    return inefficient
