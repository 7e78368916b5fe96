"""
Combo Detector - bonus multipliers from played-card patterns.

Pure functions over the cards played for one action. Wound cards never count.
Checked in order, first match wins:
1. Rainbow: all four basic colors present -> x2.0 (wins over mono-color)
2. Mono-color: >= 3 cards share one color -> x(1 + 0.15 * count)
3. Element synergy: >= 3 cards share one element -> x1.5

Also home of the critical hit roll, which shares the "multiply then floor"
rounding of apply_combo_bonus().
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional
import math

from ..config import CombatConfig, DEFAULT_CONFIG
from ..content.cards import BASIC_COLORS
from ..state.rng import RandomSource

__all__ = [
    "ComboType",
    "ComboResult",
    "CriticalHitResult",
    "detect_combo",
    "apply_combo_bonus",
    "calculate_critical_hit",
]


class ComboType:
    RAINBOW = "rainbow"
    MONO_COLOR = "mono_color"
    ELEMENT_SYNERGY = "element_synergy"


@dataclass(frozen=True)
class ComboResult:
    """A detected combo. `tag` is the shared color/element, None for rainbow."""
    type: str
    multiplier: float
    tag: Optional[str] = None
    message: str = ""

    def to_dict(self):
        return {"type": self.type, "multiplier": self.multiplier, "tag": self.tag, "message": self.message}


@dataclass(frozen=True)
class CriticalHitResult:
    is_crit: bool
    damage: int
    multiplier: float

    def to_dict(self):
        return {"is_crit": self.is_crit, "damage": self.damage, "multiplier": self.multiplier}


def _attr(card: Any, name: str) -> Any:
    if isinstance(card, dict):
        return card.get(name)
    return getattr(card, name, None)


def _tag(value: Any) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", str(value)).lower()


def _valid_cards(cards: Iterable[Any]) -> List[Any]:
    return [c for c in cards if not _attr(c, "is_wound")]


# =============================================================================
# Detection
# =============================================================================

def detect_combo(cards: Iterable[Any], config: CombatConfig = DEFAULT_CONFIG) -> Optional[ComboResult]:
    """
    Detect the combo formed by a set of played cards.

    Args:
        cards: PlayedCard objects (or mappings with color/element/is_wound)
        config: Source of the combo multipliers

    Returns:
        ComboResult, or None when no combo applies. The cards are not modified.
    """
    valid = _valid_cards(cards or ())
    if not valid:
        return None

    colors = [t for t in (_tag(_attr(c, "color")) for c in valid) if t]
    basic = {c.value for c in BASIC_COLORS}

    if basic <= set(colors):
        return ComboResult(
            type=ComboType.RAINBOW,
            multiplier=config.rainbow_multiplier,
            message="RAINBOW COMBO! Effect doubled!",
        )

    if colors:
        color, count = Counter(colors).most_common(1)[0]
        if count >= config.combo_min_cards:
            multiplier = 1 + count * config.combo_per_card_bonus
            return ComboResult(
                type=ComboType.MONO_COLOR,
                multiplier=multiplier,
                tag=color,
                message=f"{color.upper()} COMBO! x{multiplier:.2f} Bonus!",
            )

    elements = [t for t in (_tag(_attr(c, "element")) for c in valid) if t]
    if elements:
        element, count = Counter(elements).most_common(1)[0]
        if count >= config.combo_min_cards:
            return ComboResult(
                type=ComboType.ELEMENT_SYNERGY,
                multiplier=config.element_synergy_multiplier,
                tag=element,
                message=f"{element.upper()} SYNERGY!",
            )

    return None


def apply_combo_bonus(value: int, combo: Optional[ComboResult]) -> int:
    """floor(value * multiplier), or value unchanged without a combo."""
    if combo is None:
        return value
    return math.floor(value * combo.multiplier)


# =============================================================================
# Critical hits
# =============================================================================

def calculate_critical_hit(
    base: int,
    rng: RandomSource,
    chance: Optional[float] = None,
    multiplier: Optional[float] = None,
    config: CombatConfig = DEFAULT_CONFIG,
) -> CriticalHitResult:
    """Roll a critical hit on `base` damage using the given random source."""
    chance = config.crit_chance if chance is None else chance
    multiplier = config.crit_multiplier if multiplier is None else multiplier
    if rng.next_float() < chance:
        return CriticalHitResult(is_crit=True, damage=math.floor(base * multiplier), multiplier=multiplier)
    return CriticalHitResult(is_crit=False, damage=base, multiplier=1.0)
