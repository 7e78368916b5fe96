"""
Hero interface and reference hero.

The engine only reads `armor` and calls take_wound(), take_wound_to_discard()
and gain_fame(); hand management stays with the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class HeroLike(Protocol):
    """Interface the combat engine needs from the hero."""

    armor: int

    def take_wound(self) -> None: ...

    def take_wound_to_discard(self) -> None: ...

    def gain_fame(self, amount: int) -> None: ...


@dataclass
class Hero:
    """Minimal hero: counts wounds (hand and discard) and fame."""

    name: str = "Hero"
    armor: int = 2
    fame: int = 0
    hand_wounds: int = 0
    discard_wounds: int = 0

    @property
    def total_wounds(self) -> int:
        return self.hand_wounds + self.discard_wounds

    def take_wound(self) -> None:
        self.hand_wounds += 1

    def take_wound_to_discard(self) -> None:
        self.discard_wounds += 1

    def gain_fame(self, amount: int) -> None:
        self.fame += amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "armor": self.armor,
            "fame": self.fame,
            "hand_wounds": self.hand_wounds,
            "discard_wounds": self.discard_wounds,
        }
