"""
Ability Registry - dispatch table for enemy ability effects.

Every enemy ability is resolved by handlers registered against a hook and an
ability tag. Combat code asks the registry to apply "all handlers for the
abilities this enemy has" instead of branching on individual flags, so a new
ability is one decorated function.

Usage:
    from packages.skirmish.registry import ability_hook, AbilityContext

    @ability_hook("modify_attack", ability=Ability.BRUTAL)
    def brutal_attack(ctx: AbilityContext) -> int:
        return ctx.value * 2

Hook kinds:
- fold hooks return a new value (modify_attack, modify_block_requirement,
  modify_armor, can_assign_to_unit)
- event hooks mutate their context (unit_wound, hero_wounds, wounds_dealt)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING
import functools

from ..content.abilities import Ability

if TYPE_CHECKING:
    from ..content.enemies import Enemy


# =============================================================================
# Hooks
# =============================================================================

class AbilityHook(Enum):
    """All points where an ability can change combat resolution."""
    MODIFY_ATTACK = "modify_attack"
    MODIFY_BLOCK_REQUIREMENT = "modify_block_requirement"
    MODIFY_ARMOR = "modify_armor"
    CAN_ASSIGN_TO_UNIT = "can_assign_to_unit"
    UNIT_WOUND = "unit_wound"
    HERO_WOUNDS = "hero_wounds"
    WOUNDS_DEALT = "wounds_dealt"


# =============================================================================
# Contexts
# =============================================================================

@dataclass
class AbilityContext:
    """Context passed to fold-hook handlers."""
    enemy: Enemy
    value: Any
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UnitWoundContext:
    """Damage from one enemy landing on one unit."""
    enemy: Enemy
    unit: Any
    wounds: int = 1
    destroy: bool = False


@dataclass
class HeroWoundContext:
    """One enemy's share of hero wounds."""
    enemy: Enemy
    wounds: int
    discard_wounds: int = 0  # Extra batch routed to the discard pile
    cards_to_discard: int = 0  # Non-wound cards the hero must discard


@dataclass
class WoundsDealtContext:
    """Wounds an enemy successfully delivered (to hero or unit)."""
    enemy: Enemy
    wounds: int
    armor_gained: int = 0
    healed: int = 0


# =============================================================================
# Registry
# =============================================================================

class AbilityRegistry:
    """Registry of ability handlers keyed by hook and ability."""

    def __init__(self, name: str):
        self.name = name
        # handlers[hook][ability] = (handler_func, priority)
        self._handlers: Dict[str, Dict[Ability, Tuple[Callable, int]]] = {}

    def register(self, hook: str, ability: Ability, handler: Callable, priority: int = 100):
        """Register a handler for a hook."""
        hook = _hook_name(hook)
        if hook not in self._handlers:
            self._handlers[hook] = {}
        self._handlers[hook][Ability(ability)] = (handler, priority)

    def get_handlers(self, hook: str, abilities: Optional[Iterable[Ability]] = None) -> List[Tuple[Ability, Callable]]:
        """Get all handlers for a hook, filtered by abilities, sorted by priority."""
        hook = _hook_name(hook)
        if hook not in self._handlers:
            return []

        wanted = set(abilities) if abilities is not None else None
        handlers = []
        for ability, (handler, priority) in self._handlers[hook].items():
            if wanted is None or ability in wanted:
                handlers.append((ability, handler, priority))

        # Lower priority runs first; ties broken by tag name for stable order
        handlers.sort(key=lambda x: (x[2], x[0].value))
        return [(h[0], h[1]) for h in handlers]

    def has_handler(self, hook: str, ability: Ability) -> bool:
        hook = _hook_name(hook)
        return hook in self._handlers and Ability(ability) in self._handlers[hook]

    def list_hooks(self) -> List[str]:
        return list(self._handlers.keys())

    def list_abilities(self, hook: str) -> List[Ability]:
        return list(self._handlers.get(_hook_name(hook), {}).keys())


def _hook_name(hook: Any) -> str:
    return hook.value if isinstance(hook, AbilityHook) else str(hook)


ABILITY_REGISTRY = AbilityRegistry("abilities")


# =============================================================================
# Decorator
# =============================================================================

def ability_hook(hook: str, ability: Ability, priority: int = 100):
    """
    Decorator to register an ability handler.

    Args:
        hook: Hook name (see AbilityHook)
        ability: Ability tag the handler implements
        priority: Execution priority (lower = earlier)
    """
    def decorator(func: Callable[[Any], Any]) -> Callable:
        ABILITY_REGISTRY.register(hook, ability, func, priority)

        @functools.wraps(func)
        def wrapper(ctx: Any) -> Any:
            return func(ctx)

        return wrapper
    return decorator


# =============================================================================
# Execution
# =============================================================================

def fold_hooks(hook: str, enemy: Enemy, value: Any, **data: Any) -> Any:
    """
    Thread `value` through every handler for the enemy's abilities.

    Each handler receives AbilityContext(enemy, value, data) and returns the
    new value, which the next handler sees.
    """
    for _, handler in ABILITY_REGISTRY.get_handlers(hook, enemy.abilities):
        value = handler(AbilityContext(enemy=enemy, value=value, data=data))
    return value


def run_hooks(hook: str, ctx: Any) -> Any:
    """Run every handler for ctx.enemy's abilities against a mutable context."""
    for _, handler in ABILITY_REGISTRY.get_handlers(hook, ctx.enemy.abilities):
        handler(ctx)
    return ctx


# Register the built-in ability handlers
from . import abilities as _abilities  # noqa: E402,F401


__all__ = [
    "AbilityHook",
    "AbilityContext",
    "UnitWoundContext",
    "HeroWoundContext",
    "WoundsDealtContext",
    "AbilityRegistry",
    "ABILITY_REGISTRY",
    "ability_hook",
    "fold_hooks",
    "run_hooks",
]
