"""
Calculation modules - pure combat formulas.

- blocking: elemental block efficiency and block totals
- damage: hero wound maths and per-enemy wound shares
- combos: card combo detection and critical hits
- predictor: read-only outcome forecast
"""

from .blocking import BlockCalculation, BlockingEngine, BlockSource, normalize_sources
from .combos import (
    ComboResult,
    ComboType,
    CriticalHitResult,
    apply_combo_bonus,
    calculate_critical_hit,
    detect_combo,
)
from .damage import HeroWoundPlan, calculate_wounds, hero_armor, plan_hero_wounds, wound_shares

__all__ = [
    # Blocking
    "BlockCalculation",
    "BlockingEngine",
    "BlockSource",
    "normalize_sources",
    # Combos
    "ComboResult",
    "ComboType",
    "CriticalHitResult",
    "apply_combo_bonus",
    "calculate_critical_hit",
    "detect_combo",
    # Damage
    "HeroWoundPlan",
    "calculate_wounds",
    "hero_armor",
    "plan_hero_wounds",
    "wound_shares",
]
