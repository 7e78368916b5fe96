"""
Result records returned by CombatSession operations.

Every mutating operation returns one of these instead of raising for an
expected failure. Callers branch on `result.success` / `result.error`, and
`to_dict()` gives the plain mapping a UI renders:

    {"success": False, "error": "phase_error", "message": "Not in block phase", ...}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import CombatError


def _plain(value: Any) -> Any:
    """Convert enums, nested results and containers into plain data."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, CombatResult):
        return value.to_dict()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_plain(v) for v in value]
    return value


@dataclass
class CombatResult:
    """Fields every operation result carries."""
    success: bool = True
    message: str = ""
    error: Optional[CombatError] = None
    anomalies: List[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: CombatError, message: str, **kwargs: Any):
        return cls(success=False, error=error, message=message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


@dataclass
class PhaseResult(CombatResult):
    """Outcome of a phase transition."""
    phase: Optional[str] = None
    previous_phase: Optional[str] = None
    auto_completed: bool = False
    summoned: List[Dict[str, Any]] = field(default_factory=list)
    unblocked_enemies: List[str] = field(default_factory=list)
    total_damage: int = 0


@dataclass
class BlockResult(CombatResult):
    """Outcome of block_enemy()."""
    enemy_id: Optional[str] = None
    blocked: bool = False
    total_block: int = 0
    required: int = 0
    is_inefficient: bool = False
    inefficient_reasons: List[str] = field(default_factory=list)
    movement_consumed: int = 0
    unit_points_consumed: int = 0


@dataclass
class AttackResult(CombatResult):
    """Outcome of a ranged/siege or melee attack batch."""
    defeated: List[str] = field(default_factory=list)
    fame_gained: int = 0
    total_attack: int = 0
    required: float = 0
    boss_damage: int = 0
    boss_transitions: List[Dict[str, Any]] = field(default_factory=list)
    phase_abilities: List[Dict[str, Any]] = field(default_factory=list)
    summoned: List[Dict[str, Any]] = field(default_factory=list)
    consumed_ranged: int = 0
    consumed_siege: int = 0
    unit_points_consumed: int = 0


@dataclass
class AssignmentResult(CombatResult):
    """Outcome of routing one enemy's damage to a unit."""
    enemy_id: Optional[str] = None
    unit: Optional[str] = None
    unit_wounds: int = 0
    unit_destroyed: bool = False
    armor_gained: int = 0
    healed: int = 0
    remaining_damage: int = 0
    phase: Optional[str] = None


@dataclass
class DamageResult(CombatResult):
    """Outcome of converting remaining unblocked damage into hero wounds."""
    total_damage: int = 0
    wounds_received: int = 0
    hand_wounds: int = 0
    discard_wounds: int = 0
    paralyze_triggered: bool = False
    cards_to_discard: int = 0
    armor_gained: Dict[str, int] = field(default_factory=dict)
    phase: Optional[str] = None


@dataclass
class UnitActivationResult(CombatResult):
    """Outcome of activate_unit()."""
    unit: Optional[str] = None
    applied: Dict[str, int] = field(default_factory=dict)
    unit_points: Dict[str, int] = field(default_factory=dict)


@dataclass
class EndCombatResult(CombatResult):
    """Final tally of a combat."""
    victory: bool = False
    defeated_enemies: List[str] = field(default_factory=list)
    remaining_enemies: List[str] = field(default_factory=list)
    wounds_received: int = 0
    poison_wounds: int = 0
    fame_gained: int = 0
