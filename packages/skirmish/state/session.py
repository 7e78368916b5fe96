"""
Combat session state.

SessionState is the single explicit record a combat mutates. Phase resolvers
(packages.skirmish.handlers) take it by reference, so every field a phase can
change is visible here rather than spread over the session object.

Invariants:
- an enemy id is in at most one of {enemies, defeated_enemies}
- blocked_enemies only holds ids that were active when blocked
- phase only moves forward: NOT_STARTED -> RANGED -> BLOCK -> DAMAGE -> ATTACK -> COMPLETE
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from ..content.enemies import Enemy
from ..content.status_effects import StatusEffectManager


class CombatPhase(str, Enum):
    """Phases of a combat, in order."""
    NOT_STARTED = "not_started"
    RANGED = "ranged"
    BLOCK = "block"
    DAMAGE = "damage"
    ATTACK = "attack"
    COMPLETE = "complete"


# =============================================================================
# Combat log
# =============================================================================

@dataclass
class CombatLogEntry:
    """A single combat log entry."""
    phase: CombatPhase
    event_type: str
    data: Dict[str, Any]


@dataclass
class CombatLog:
    """Ordered record of what happened in a combat."""
    entries: List[CombatLogEntry] = field(default_factory=list)

    def log(self, phase: CombatPhase, event_type: str, **data: Any) -> None:
        self.entries.append(CombatLogEntry(phase=phase, event_type=event_type, data=data))

    def get_events(self, event_type: str) -> List[CombatLogEntry]:
        return [e for e in self.entries if e.event_type == event_type]


# =============================================================================
# Unit contribution
# =============================================================================

@dataclass
class UnitPoints:
    """Bonus points contributed by activated units, per kind."""
    attack: int = 0
    block: int = 0
    ranged: int = 0
    siege: int = 0

    def reset(self) -> None:
        self.attack = self.block = self.ranged = self.siege = 0

    def to_dict(self) -> Dict[str, int]:
        return {"attack": self.attack, "block": self.block, "ranged": self.ranged, "siege": self.siege}


# =============================================================================
# Session state
# =============================================================================

@dataclass
class SessionState:
    """Everything a combat needs to continue."""

    enemies: List[Enemy]
    phase: CombatPhase = CombatPhase.NOT_STARTED
    blocked_enemies: Set[str] = field(default_factory=set)
    defeated_enemies: List[Enemy] = field(default_factory=list)
    unblocked_enemies: List[Enemy] = field(default_factory=list)
    assigned_enemies: Set[str] = field(default_factory=set)  # Damage routed to units
    total_damage: int = 0
    wounds_received: int = 0
    paralyze_triggered: bool = False
    cards_to_discard: int = 0
    summoned_enemies: Dict[str, Enemy] = field(default_factory=dict)  # replacement id -> summoner
    unit_points: UnitPoints = field(default_factory=UnitPoints)
    activated_units: Set[int] = field(default_factory=set)
    status_effects: StatusEffectManager = field(default_factory=StatusEffectManager)
    log: CombatLog = field(default_factory=CombatLog)

    # -------------------------------------------------------------------------
    # Roster queries
    # -------------------------------------------------------------------------

    def get_enemy(self, enemy_id: str) -> Optional[Enemy]:
        """Active enemy by id."""
        for enemy in self.enemies:
            if enemy.id == enemy_id:
                return enemy
        return None

    def is_active(self, enemy: Enemy) -> bool:
        return any(e is enemy for e in self.enemies)

    def is_blocked(self, enemy: Enemy) -> bool:
        return enemy.id in self.blocked_enemies

    def pending_unblocked(self) -> List[Enemy]:
        """Unblocked enemies whose damage has not been routed to a unit."""
        return [e for e in self.unblocked_enemies if e.id not in self.assigned_enemies]

    def remove_enemy(self, enemy: Enemy) -> None:
        """Move an active enemy to the defeated list."""
        self.enemies = [e for e in self.enemies if e is not enemy]
        self.defeated_enemies.append(enemy)

    def replace_enemy(self, old: Enemy, new: Enemy) -> None:
        self.enemies = [new if e is old else e for e in self.enemies]

    @property
    def fame_gained(self) -> int:
        return sum(e.fame for e in self.defeated_enemies)

    def to_dict(self) -> Dict[str, Any]:
        """Plain snapshot of the session for UIs and logs."""
        return {
            "phase": self.phase.value,
            "enemies": [e.to_dict() for e in self.enemies],
            "blocked_enemies": sorted(self.blocked_enemies),
            "defeated_enemies": [e.id for e in self.defeated_enemies],
            "unblocked_enemies": [e.id for e in self.unblocked_enemies],
            "total_damage": self.total_damage,
            "wounds_received": self.wounds_received,
            "paralyze_triggered": self.paralyze_triggered,
            "summoned_enemies": {k: v.id for k, v in self.summoned_enemies.items()},
            "unit_points": self.unit_points.to_dict(),
            "activated_units": len(self.activated_units),
        }
