"""
Boss encounters - multi-phase enemies with a health pool and enrage.

Bosses are not defeated by comparing attack with armor. Every attack becomes
direct health damage via take_damage(), which also fires phase thresholds
(each at most once) and the enrage transition (monotonic).

Default phase layout:
    Phase 2 at <= 66% health -> ability from phase_abilities["Phase 2"]
    Phase 3 at <= 33% health -> ability from phase_abilities["Phase 3"]
    Enraged at <= enrage_threshold (25%) -> attack x enrage_multiplier
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import math

from .enemies import Enemy, next_enemy_id
from ..config import DEFAULT_CONFIG
from ..errors import normalize_damage


logger = logging.getLogger(__name__)


PHASE_1 = "Phase 1"
PHASE_2 = "Phase 2"
PHASE_3 = "Phase 3"
ENRAGED = "Enraged"

ENRAGE_ABILITY = "enrage"


@dataclass
class BossPhase:
    """A health threshold that fires once."""
    name: str
    threshold: float  # Fraction of max health, fires at or below
    triggered: bool = False


@dataclass(frozen=True)
class PhaseTransition:
    """Record of a phase (or enrage) being entered."""
    phase: str
    ability: Optional[str]
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"phase": self.phase, "ability": self.ability, "message": self.message}


@dataclass(frozen=True)
class BossDamageResult:
    """Outcome of BossEnemy.take_damage()."""
    damage: int
    previous_health: int
    current_health: int
    health_percent: float
    defeated: bool
    transitions: List[PhaseTransition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "damage": self.damage,
            "previous_health": self.previous_health,
            "current_health": self.current_health,
            "health_percent": self.health_percent,
            "defeated": self.defeated,
            "transitions": [t.to_dict() for t in self.transitions],
        }


@dataclass(frozen=True)
class PhaseAbilityResult:
    """What a phase ability asks the caller to do."""
    type: str
    message: str
    enemy_type: Optional[str] = None
    count: int = 0
    amount: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "message": self.message,
            "enemy_type": self.enemy_type,
            "count": self.count,
            "amount": self.amount,
        }


def default_phases() -> List[BossPhase]:
    return [
        BossPhase(PHASE_2, 0.66),
        BossPhase(PHASE_3, 0.33),
    ]


@dataclass(eq=False)
class BossEnemy(Enemy):
    """An enemy with a health pool, phases and enrage."""

    max_health: int = DEFAULT_CONFIG.default_boss_health
    current_health: Optional[int] = None
    phases: List[BossPhase] = field(default_factory=default_phases)
    phase_abilities: Dict[str, Optional[str]] = field(default_factory=dict)
    enrage_threshold: float = DEFAULT_CONFIG.default_enrage_threshold
    enrage_multiplier: float = DEFAULT_CONFIG.default_enrage_multiplier
    heal_fraction: float = DEFAULT_CONFIG.boss_heal_fraction
    summon_type: str = "weakling"
    summon_count: int = 2
    enraged: bool = False

    is_boss = True

    def __post_init__(self):
        super().__post_init__()
        if self.max_health <= 0:
            raise ValueError(f"{self.name}: max_health must be > 0, got {self.max_health}")
        if self.current_health is None:
            self.current_health = self.max_health
        self.current_health = max(0, min(self.max_health, self.current_health))
        # Evaluate thresholds from the highest fraction down
        self.phases = sorted(self.phases, key=lambda p: p.threshold, reverse=True)

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def effective_attack(self) -> int:
        attack = super().effective_attack()
        if self.enraged:
            attack = math.floor(attack * self.enrage_multiplier)
        return attack

    @property
    def health_percent(self) -> float:
        return self.current_health / self.max_health

    @property
    def is_defeated(self) -> bool:
        return self.current_health <= 0

    @property
    def phase_name(self) -> str:
        """Name of the phase the boss is currently in."""
        if self.enraged:
            return ENRAGED
        current = PHASE_1
        for phase in self.phases:
            if phase.triggered:
                current = phase.name
        return current

    def phase_ability(self, phase_name: str) -> Optional[str]:
        return self.phase_abilities.get(phase_name)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def take_damage(self, amount: int) -> BossDamageResult:
        """
        Apply direct health damage and fire any crossed thresholds.

        Args:
            amount: Damage to apply (negative, NaN and infinite amounts are treated as 0)

        Returns:
            BossDamageResult with the transitions that fired, in order
        """
        amount = int(normalize_damage(amount, label="boss damage"))
        previous = self.current_health
        self.current_health = max(0, self.current_health - amount)
        percent = self.health_percent
        transitions: List[PhaseTransition] = []

        for phase in self.phases:
            if not phase.triggered and percent <= phase.threshold:
                phase.triggered = True
                transitions.append(PhaseTransition(
                    phase=phase.name,
                    ability=self.phase_ability(phase.name),
                    message=f"{self.name} enters {phase.name}!",
                ))

        if not self.enraged and percent <= self.enrage_threshold:
            self.enraged = True
            transitions.append(PhaseTransition(
                phase=ENRAGED,
                ability=ENRAGE_ABILITY,
                message=f"{self.name} is enraged!",
            ))

        for transition in transitions:
            logger.info("%s: %s (ability=%s)", self.name, transition.phase, transition.ability)

        return BossDamageResult(
            damage=amount,
            previous_health=previous,
            current_health=self.current_health,
            health_percent=percent,
            defeated=self.current_health == 0,
            transitions=transitions,
        )

    def heal(self, amount: int) -> int:
        """Restore health, bounded at max_health. Returns the amount healed."""
        before = self.current_health
        self.current_health = min(self.max_health, self.current_health + max(0, amount))
        return self.current_health - before

    def execute_phase_ability(self, ability: Optional[str]) -> Optional[PhaseAbilityResult]:
        """
        Resolve a phase ability.

        summon -> asks the caller to spawn summon_count x summon_type
        heal -> restores heal_fraction of max health
        double_attack / enrage -> buff marker only (effective_attack applies it)
        anything else -> None
        """
        if ability == "summon":
            return PhaseAbilityResult(
                type="summon",
                enemy_type=self.summon_type,
                count=self.summon_count,
                message=f"{self.name} summons {self.summon_count} {self.summon_type}!",
            )
        if ability == "heal":
            healed = self.heal(math.floor(self.max_health * self.heal_fraction))
            return PhaseAbilityResult(
                type="heal",
                amount=healed,
                message=f"{self.name} heals {healed} health.",
            )
        if ability in ("double_attack", ENRAGE_ABILITY):
            return PhaseAbilityResult(type="buff", message=f"{self.name} attacks with doubled fury!")
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "max_health": self.max_health,
            "current_health": self.current_health,
            "phase": self.phase_name,
            "enraged": self.enraged,
            "summon_type": self.summon_type,
            "summon_count": self.summon_count,
        })
        return data


# =============================================================================
# Boss definitions
# =============================================================================

BOSS_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "dark_lord": {
        "name": "Dark Lord", "armor": 10, "attack": 6, "fame": 50, "max_health": 30,
        "abilities": ["fortified", "brutal"], "resistances": ["fire", "ice", "physical"],
        "summon_type": "phantom", "summon_count": 2,
        "phase_abilities": {PHASE_1: None, PHASE_2: "summon", PHASE_3: "heal", ENRAGED: "double_attack"},
    },
    "dragon_lord": {
        "name": "Dragon King", "armor": 12, "attack": 8, "fame": 60, "max_health": 40,
        "attack_type": "fire", "abilities": ["brutal"], "resistances": ["fire"],
        "summon_type": "draconum", "summon_count": 1,
        "phase_abilities": {PHASE_1: None, PHASE_2: "summon", PHASE_3: None, ENRAGED: "double_attack"},
    },
    "lich_king": {
        "name": "Lich King", "armor": 8, "attack": 5, "fame": 55, "max_health": 35,
        "abilities": ["poison"], "resistances": ["ice", "physical"],
        "summon_type": "phantom", "summon_count": 3,
        "phase_abilities": {PHASE_1: "summon", PHASE_2: "heal", PHASE_3: "summon", ENRAGED: "double_attack"},
    },
}


def create_boss(key: str, enemy_id: Optional[str] = None, **overrides: Any) -> BossEnemy:
    """
    Create a boss from its definition.

    Raises:
        KeyError: If the key is not a known boss
    """
    if key not in BOSS_DEFINITIONS:
        raise KeyError(f"Unknown boss type: {key}")
    data = dict(BOSS_DEFINITIONS[key])
    data["phase_abilities"] = dict(data["phase_abilities"])
    data.update(overrides)
    return BossEnemy(id=enemy_id or next_enemy_id(key), enemy_type=key, **data)
