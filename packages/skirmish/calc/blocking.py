"""
Blocking Engine - elemental block efficiency and block totals.

Calculation order for one block attempt against one enemy:
1. Requirement = enemy.block_requirement() (brutal / swift applied)
2. Each source contributes value * efficiency(source element, enemy attack element)
3. Unit block points count as physical block
4. Sources are summed unrounded; only the final total is floored
5. Cumbersome: movement points may close a remaining gap, 1 point each.
   Only the minimum needed is consumed, and nothing is consumed if the gap
   cannot be closed.
6. blocked = total >= requirement
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union
import logging
import math

from ..config import CombatConfig, DEFAULT_CONFIG
from ..content.abilities import Ability
from ..content.elements import Element, block_efficiency
from ..content.enemies import Enemy
from ..errors import normalize_damage

__all__ = [
    "BlockSource",
    "BlockCalculation",
    "BlockingEngine",
    "normalize_sources",
]


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockSource:
    """One block contribution: a value and its element."""
    value: float
    element: Element = Element.PHYSICAL

    def __post_init__(self):
        object.__setattr__(self, "element", Element.parse(self.element))


BlockInput = Union[BlockSource, float, int, None, Iterable[BlockSource]]


def normalize_sources(sources: BlockInput) -> List[BlockSource]:
    """Accept a list of sources, a single source, or a bare (physical) number."""
    if sources is None:
        return []
    if isinstance(sources, BlockSource):
        return [sources]
    if isinstance(sources, (int, float)):
        return [BlockSource(sources)]
    if isinstance(sources, dict):
        return [BlockSource(sources.get("value", 0), sources.get("element"))]
    result = []
    for source in sources:
        if isinstance(source, BlockSource):
            result.append(source)
        elif isinstance(source, dict):
            result.append(BlockSource(source.get("value", 0), source.get("element")))
        else:
            result.append(BlockSource(source))
    return result


@dataclass
class BlockCalculation:
    """Block total for one enemy, before any state is changed."""
    required: int
    total_block: int
    blocked: bool
    is_inefficient: bool = False
    inefficient_reasons: List[str] = field(default_factory=list)
    movement_consumed: int = 0
    unit_points_consumed: int = 0

    @property
    def message(self) -> str:
        if self.blocked:
            text = f"Blocked ({self.total_block}/{self.required})"
        else:
            text = f"Block too weak ({self.total_block}/{self.required})"
        if self.inefficient_reasons:
            text += ": " + "; ".join(self.inefficient_reasons)
        return text


class BlockingEngine:
    """Computes block efficiency and totals against a single enemy."""

    def __init__(self, config: CombatConfig = DEFAULT_CONFIG):
        self.config = config

    def efficiency(self, block_element: Union[Element, str], attack_element: Union[Element, str]) -> float:
        return block_efficiency(
            Element.parse(block_element),
            Element.parse(attack_element),
            self.config.inefficient_block,
        )

    def calculate_block(
        self,
        enemy: Enemy,
        sources: BlockInput,
        unit_block_points: int = 0,
        movement_points: int = 0,
        anomalies: Optional[List[str]] = None,
    ) -> BlockCalculation:
        """
        Compute the effective block against an enemy.

        Args:
            enemy: Enemy being blocked
            sources: Block sources from cards (see normalize_sources)
            unit_block_points: Block points from activated units (physical)
            movement_points: Movement available to pay a cumbersome enemy
            anomalies: Collects notes about normalized numeric inputs

        Returns:
            BlockCalculation; blocked is False for a failed block
        """
        required = enemy.block_requirement()
        attack_element = enemy.attack_type
        reasons: List[str] = []

        card_total = 0.0
        for source in normalize_sources(sources):
            value = normalize_damage(source.value, anomalies, label="block")
            eff = self.efficiency(source.element, attack_element)
            if eff < 1.0 and value > 0:
                reasons.append(f"{source.element.label} Block halved vs {attack_element.label} Attack")
            card_total += value * eff

        unit_points = normalize_damage(unit_block_points, anomalies, label="unit block")
        unit_total = 0.0
        if unit_points > 0:
            eff = self.efficiency(Element.PHYSICAL, attack_element)
            if eff < 1.0:
                reasons.append(f"Unit Block halved vs {attack_element.label} Attack")
            unit_total = unit_points * eff

        base_block = math.floor(card_total + unit_total)

        movement_consumed = 0
        if enemy.has(Ability.CUMBERSOME) and movement_points > 0:
            needed = min(int(movement_points), max(0, required - base_block))
            if base_block + needed >= required:
                movement_consumed = needed

        total = base_block + movement_consumed
        blocked = total >= required

        unit_points_consumed = 0
        if blocked and unit_points > 0 and math.floor(card_total) + movement_consumed < required:
            unit_points_consumed = int(unit_points)

        logger.debug(
            "Block vs %s (%s): cards=%.1f units=%.1f move=%d -> %d / %d",
            enemy.name, attack_element.value, card_total, unit_total,
            movement_consumed, total, required,
        )

        return BlockCalculation(
            required=required,
            total_block=total,
            blocked=blocked,
            is_inefficient=bool(reasons),
            inefficient_reasons=reasons,
            movement_consumed=movement_consumed,
            unit_points_consumed=unit_points_consumed,
        )
