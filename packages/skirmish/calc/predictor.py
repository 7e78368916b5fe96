"""
Outcome predictor - what the hero can expect from the current state.

Read-only: looks at a session's state and returns a forecast for the UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import math

from ..content.abilities import Ability
from ..content.elements import Element
from ..state.session import CombatPhase
from .damage import plan_hero_wounds

if TYPE_CHECKING:
    from ..combat_engine import CombatSession

__all__ = ["OutcomePrediction", "predict_outcome"]


@dataclass
class OutcomePrediction:
    expected_wounds: int = 0
    poison_wounds: int = 0
    is_poisoned: bool = False
    enemies_defeatable: List[str] = field(default_factory=list)
    total_enemy_attack: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expected_wounds": self.expected_wounds,
            "poison_wounds": self.poison_wounds,
            "is_poisoned": self.is_poisoned,
            "enemies_defeatable": list(self.enemies_defeatable),
            "total_enemy_attack": self.total_enemy_attack,
        }


def predict_outcome(session: CombatSession, current_attack: int = 0) -> Optional[OutcomePrediction]:
    """
    Forecast wounds and defeatable enemies.

    Args:
        session: Session to inspect (not modified)
        current_attack: Attack points the hero has gathered but not yet spent

    Returns:
        OutcomePrediction, or None once the combat is complete
    """
    state = session.state
    if state.phase == CombatPhase.COMPLETE:
        return None

    prediction = OutcomePrediction()

    # Incoming damage
    if state.phase in (CombatPhase.RANGED, CombatPhase.BLOCK):
        threats = [e for e in state.enemies if not state.is_blocked(e)]
    elif state.phase == CombatPhase.DAMAGE:
        threats = state.pending_unblocked()
    else:
        threats = []

    if threats:
        plan = plan_hero_wounds(threats, session.hero.armor)
        prediction.total_enemy_attack = plan.total_damage
        prediction.expected_wounds = plan.hand_wounds
        prediction.poison_wounds = plan.discard_wounds
        prediction.is_poisoned = any(e.has(Ability.POISON) for e in threats)

    # Outgoing attack
    if state.phase in (CombatPhase.RANGED, CombatPhase.BLOCK, CombatPhase.ATTACK):
        attack = current_attack + state.unit_points.attack
        in_attack_phase = state.phase == CombatPhase.ATTACK
        for enemy in state.enemies:
            if enemy.is_boss:
                damage = math.floor(attack * enemy.resistance_multiplier(Element.PHYSICAL, session.config))
                if damage >= enemy.current_health:
                    prediction.enemies_defeatable.append(enemy.name)
                continue
            required = enemy.effective_armor(
                Element.PHYSICAL,
                blocked=state.is_blocked(enemy),
                in_attack_phase=in_attack_phase,
                config=session.config,
            )
            if attack >= required:
                prediction.enemies_defeatable.append(enemy.name)

    return prediction
