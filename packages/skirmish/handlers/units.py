"""
Unit Contribution - bonus points from activated support units.

Each unit can be activated once per combat (tracked by object identity).
What its abilities add depends on the phase it is activated in:

    Ranged phase: RANGED -> ranged points, SIEGE -> siege points
    Block phase:  BLOCK -> block points
    Attack phase: ATTACK, RANGED, SIEGE -> attack points

Abilities that do not fit the current phase are wasted.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

from ..content.units import UnitAbility, UnitAbilityType, unit_name
from ..errors import CombatError
from ..results import UnitActivationResult
from ..state.session import CombatPhase, SessionState


logger = logging.getLogger(__name__)


PHASE_CONTRIBUTIONS: Dict[CombatPhase, Dict[UnitAbilityType, str]] = {
    CombatPhase.RANGED: {
        UnitAbilityType.RANGED: "ranged",
        UnitAbilityType.SIEGE: "siege",
    },
    CombatPhase.BLOCK: {
        UnitAbilityType.BLOCK: "block",
    },
    CombatPhase.ATTACK: {
        UnitAbilityType.ATTACK: "attack",
        UnitAbilityType.RANGED: "attack",
        UnitAbilityType.SIEGE: "attack",
    },
}


def _abilities(unit: Any) -> List[UnitAbility]:
    result = []
    for ability in unit.get_abilities():
        if isinstance(ability, UnitAbility):
            result.append(ability)
        else:
            result.append(UnitAbility(ability["type"], ability["value"]))
    return result


class UnitContribution:
    """Per-combat accumulator of unit points, backed by the session state."""

    def __init__(self, state: SessionState):
        self.state = state

    @property
    def points(self):
        return self.state.unit_points

    def is_activated(self, unit: Any) -> bool:
        return id(unit) in self.state.activated_units

    def activate(self, unit: Any) -> UnitActivationResult:
        """Activate a unit and add its abilities for the current phase."""
        phase = self.state.phase
        mapping = PHASE_CONTRIBUTIONS.get(phase)
        name = unit_name(unit)

        if mapping is None:
            return UnitActivationResult.failure(
                CombatError.PHASE, f"Units cannot be activated in the {phase.value} phase", unit=name,
            )
        if self.is_activated(unit):
            return UnitActivationResult.failure(
                CombatError.VALIDATION, f"{name} was already activated this combat", unit=name,
            )
        if not unit.is_ready():
            return UnitActivationResult.failure(CombatError.VALIDATION, f"{name} is not ready", unit=name)

        abilities = _abilities(unit)
        if unit.activate() is False:
            return UnitActivationResult.failure(CombatError.VALIDATION, f"{name} is not ready", unit=name)
        self.state.activated_units.add(id(unit))

        applied: Dict[str, int] = {}
        for ability in abilities:
            kind = mapping.get(ability.type)
            if kind is None:
                continue
            setattr(self.points, kind, getattr(self.points, kind) + ability.value)
            applied[kind] = applied.get(kind, 0) + ability.value

        summary = ", ".join(f"+{v} {k}" for k, v in applied.items()) or "nothing this phase"
        logger.info("%s activated: %s", name, summary)
        self.state.log.log(phase, "unit_activated", unit=name, applied=dict(applied))

        return UnitActivationResult(
            message=f"{name} activated: {summary}",
            unit=name,
            applied=applied,
            unit_points=self.points.to_dict(),
        )

    # -------------------------------------------------------------------------
    # Consumption
    # -------------------------------------------------------------------------

    def consume_block(self) -> int:
        used, self.points.block = self.points.block, 0
        return used

    def consume_attack(self) -> int:
        used, self.points.attack = self.points.attack, 0
        return used

    def consume_ranged(self, siege_only: bool = False) -> int:
        """Zero ranged/siege points. Fortified targets only use siege points."""
        used = self.points.siege
        self.points.siege = 0
        if not siege_only:
            used += self.points.ranged
            self.points.ranged = 0
        return used
