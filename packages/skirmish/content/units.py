"""
Support units.

The engine talks to units through the UnitLike interface only. Unit is the
reference implementation used by the CLI and tests; a game's own unit class
works as long as it provides the same methods.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Protocol, runtime_checkable


class UnitAbilityType(str, Enum):
    """Phase tag of a unit ability value."""
    ATTACK = "attack"
    BLOCK = "block"
    RANGED = "ranged"
    SIEGE = "siege"


@dataclass(frozen=True)
class UnitAbility:
    type: UnitAbilityType
    value: int

    def __post_init__(self):
        object.__setattr__(self, "type", UnitAbilityType(self.type))


@runtime_checkable
class UnitLike(Protocol):
    """Interface the combat engine needs from a unit."""

    def is_ready(self) -> bool: ...

    def activate(self) -> bool: ...

    def get_abilities(self) -> List[UnitAbility]: ...

    def take_wound(self) -> None: ...

    def destroy(self) -> None: ...


@dataclass(eq=False)
class Unit:
    """A recruitable unit with phase-tagged ability values."""

    name: str
    armor: int = 1
    abilities: List[UnitAbility] = field(default_factory=list)
    ready: bool = True
    wounds: int = 0
    destroyed: bool = False

    def is_ready(self) -> bool:
        return self.ready and self.wounds == 0 and not self.destroyed

    def is_wounded(self) -> bool:
        return self.wounds > 0

    def activate(self) -> bool:
        """Exhaust the unit. Returns False if it was not ready."""
        if not self.is_ready():
            return False
        self.ready = False
        return True

    def refresh(self) -> None:
        self.ready = True

    def get_abilities(self) -> List[UnitAbility]:
        return list(self.abilities)

    def take_wound(self) -> None:
        self.wounds += 1

    def heal(self) -> None:
        self.wounds = 0

    def destroy(self) -> None:
        self.destroyed = True

    def get_name(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "armor": self.armor,
            "abilities": [{"type": a.type.value, "value": a.value} for a in self.abilities],
            "ready": self.ready,
            "wounds": self.wounds,
            "destroyed": self.destroyed,
        }


def unit_name(unit: Any) -> str:
    """Display name for any unit-like object."""
    if hasattr(unit, "get_name"):
        return unit.get_name()
    return getattr(unit, "name", type(unit).__name__)
