"""
Played-card payloads.

The combat engine never looks at card identity: only the color and element tags
(for combo detection) and the numeric attack/block values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CardColor(str, Enum):
    """Card colors. The first four are the basic colors a rainbow needs."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    WHITE = "white"
    GOLD = "gold"
    BLACK = "black"


BASIC_COLORS = frozenset({CardColor.RED, CardColor.BLUE, CardColor.GREEN, CardColor.WHITE})


@dataclass(frozen=True)
class PlayedCard:
    """A card played this combat, reduced to what combat math needs."""
    color: Optional[str] = None
    element: Optional[str] = None
    attack: int = 0
    block: int = 0
    is_wound: bool = False

    @classmethod
    def wound(cls) -> "PlayedCard":
        return cls(is_wound=True)
