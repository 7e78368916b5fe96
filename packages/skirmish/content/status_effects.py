"""
Status effects applied during a combat (poison, burn, stun, ...).

Effects are tracked per combat by StatusEffectManager:
- Hero effects are keyed by type; reapplying a stackable effect adds a stack
- Enemy effects are keyed by enemy id
- Burn deals its stack count as damage at each phase start
- Poison on the hero is flushed into wounds when the combat ends
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import CombatError


class EffectType(str, Enum):
    STUN = "stun"
    BURN = "burn"
    FREEZE = "freeze"
    POISON = "poison"
    WEAKEN = "weaken"
    SHIELD = "shield"
    ENRAGE = "enrage"


PERMANENT = -1

# duration in phases (-1 = until combat end), stackable, max stacks
EFFECT_DATA: Dict[EffectType, Dict[str, Any]] = {
    EffectType.STUN: {"name": "Stunned", "duration": 1, "stackable": False, "max_stacks": 1},
    EffectType.BURN: {"name": "Burning", "duration": 3, "stackable": True, "max_stacks": 3},
    EffectType.FREEZE: {"name": "Frozen", "duration": 2, "stackable": False, "max_stacks": 1},
    EffectType.POISON: {"name": "Poisoned", "duration": PERMANENT, "stackable": True, "max_stacks": 5},
    EffectType.WEAKEN: {"name": "Weakened", "duration": 2, "stackable": True, "max_stacks": 3},
    EffectType.SHIELD: {"name": "Shielded", "duration": 1, "stackable": True, "max_stacks": 5},
    EffectType.ENRAGE: {"name": "Enraged", "duration": 2, "stackable": False, "max_stacks": 1},
}


@dataclass
class StatusEffect:
    """A live effect instance."""
    type: EffectType
    name: str
    duration: int
    remaining: int
    stackable: bool
    max_stacks: int
    stacks: int = 1

    @classmethod
    def create(cls, effect_type: EffectType) -> "StatusEffect":
        data = EFFECT_DATA[effect_type]
        return cls(
            type=effect_type,
            name=data["name"],
            duration=data["duration"],
            remaining=data["duration"],
            stackable=data["stackable"],
            max_stacks=data["max_stacks"],
        )

    def add_stack(self, count: int = 1) -> bool:
        """Add stacks up to max_stacks. Returns True if anything was added."""
        if not self.stackable or self.stacks >= self.max_stacks:
            return False
        self.stacks = min(self.max_stacks, self.stacks + count)
        return True

    def tick(self) -> None:
        if self.remaining > 0:
            self.remaining -= 1

    def is_expired(self) -> bool:
        return self.remaining == 0


@dataclass
class EffectApplication:
    """Result of applying an effect."""
    success: bool
    applied: bool
    stacked: bool
    effect: Optional[StatusEffect] = None
    error: Optional[CombatError] = None
    message: str = ""

    @classmethod
    def failure(cls, message: str) -> "EffectApplication":
        return cls(success=False, applied=False, stacked=False, error=CombatError.VALIDATION, message=message)


@dataclass
class StatusEffectManager:
    """Per-combat status effect bookkeeping."""

    hero_effects: Dict[EffectType, StatusEffect] = field(default_factory=dict)
    enemy_effects: Dict[str, List[StatusEffect]] = field(default_factory=dict)

    def apply_to_hero(self, effect_type: EffectType, stacks: int = 1) -> EffectApplication:
        effect_type = EffectType(effect_type)
        existing = self.hero_effects.get(effect_type)
        if existing is not None:
            stacked = existing.add_stack(stacks)
            return EffectApplication(success=True, applied=False, stacked=stacked, effect=existing)

        effect = StatusEffect.create(effect_type)
        if stacks > 1:
            effect.add_stack(stacks - 1)
        self.hero_effects[effect_type] = effect
        return EffectApplication(success=True, applied=True, stacked=False, effect=effect)

    def apply_to_enemy(self, enemy_id: str, effect_type: EffectType) -> EffectApplication:
        effect_type = EffectType(effect_type)
        effects = self.enemy_effects.setdefault(enemy_id, [])
        for existing in effects:
            if existing.type == effect_type:
                stacked = existing.add_stack()
                return EffectApplication(success=True, applied=False, stacked=stacked, effect=existing)

        effect = StatusEffect.create(effect_type)
        effects.append(effect)
        return EffectApplication(success=True, applied=True, stacked=False, effect=effect)

    def hero_has(self, effect_type: EffectType) -> bool:
        return EffectType(effect_type) in self.hero_effects

    def enemy_has(self, enemy_id: str, effect_type: EffectType) -> bool:
        return any(e.type == EffectType(effect_type) for e in self.enemy_effects.get(enemy_id, []))

    def get_hero_effects(self) -> List[StatusEffect]:
        return list(self.hero_effects.values())

    def get_enemy_effects(self, enemy_id: str) -> List[StatusEffect]:
        return list(self.enemy_effects.get(enemy_id, []))

    def process_hero_phase_start(self) -> int:
        """Tick hero effects. Returns burn damage dealt this phase."""
        damage = 0
        for effect_type, effect in list(self.hero_effects.items()):
            if effect_type == EffectType.BURN:
                damage += effect.stacks
            effect.tick()
            if effect.is_expired():
                del self.hero_effects[effect_type]
        return damage

    def process_enemy_phase_start(self) -> Dict[str, int]:
        """Tick enemy effects. Returns burn damage per enemy id."""
        damage: Dict[str, int] = {}
        for enemy_id, effects in self.enemy_effects.items():
            for effect in effects:
                if effect.type == EffectType.BURN:
                    damage[enemy_id] = damage.get(enemy_id, 0) + effect.stacks
                effect.tick()
            self.enemy_effects[enemy_id] = [e for e in effects if not e.is_expired()]
        return damage

    def pending_poison_wounds(self) -> int:
        poison: Optional[StatusEffect] = self.hero_effects.get(EffectType.POISON)
        return poison.stacks if poison is not None else 0

    def clear(self) -> None:
        self.hero_effects.clear()
        self.enemy_effects.clear()
