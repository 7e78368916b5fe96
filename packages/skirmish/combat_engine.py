"""
Combat Engine - the combat session state machine.

A CombatSession resolves one fight between a hero (plus support units) and a
set of enemies. Phase advancement is driven entirely by the caller:

    NOT_STARTED -> RANGED -> BLOCK -> DAMAGE -> ATTACK -> COMPLETE

1. start(): enter the ranged phase
2. ranged_attack_enemy(): ranged/siege attacks against single enemies
3. end_ranged_phase(): summoners are replaced, block phase begins
   (an empty roster completes the combat right away)
4. block_enemy(): block enemies with elemental block sources
5. end_block_phase(): unblocked damage is fixed for the damage phase
6. assign_damage_to_unit() / resolve_damage_phase(): wounds to units / hero
7. attack_enemies(): melee batches
8. end_combat(): always legal, flushes poison and returns the tally

Every operation returns a result record. Calling an operation in the wrong
phase returns a PHASE failure and leaves the session untouched.

Usage:
    from packages.skirmish import CombatSession, Hero, create_enemy

    session = CombatSession(Hero(armor=2), [create_enemy("orc")])
    session.start()
    session.end_ranged_phase()
    session.block_enemy(session.enemies[0], 4)
    session.end_block_phase()
    session.attack_enemies(3)
    result = session.end_combat()
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from .calc.blocking import BlockingEngine, BlockInput, normalize_sources
from .calc.combos import (
    ComboResult,
    CriticalHitResult,
    apply_combo_bonus as _apply_combo_bonus,
    calculate_critical_hit as _calculate_critical_hit,
    detect_combo as _detect_combo,
)
from .calc.predictor import OutcomePrediction, predict_outcome
from .config import CombatConfig, DEFAULT_CONFIG
from .content.elements import Element
from .content.enemies import Enemy
from .content.status_effects import EffectApplication, EffectType, StatusEffect
from .errors import CombatError, normalize_damage
from .handlers.attack import resolve_attack
from .handlers.damage import assign_to_unit, enter_damage_phase, resolve_hero_damage
from .handlers.ranged import resolve_ranged_attack
from .handlers.summoning import replace_summoners
from .handlers.units import UnitContribution
from .results import (
    AssignmentResult,
    AttackResult,
    BlockResult,
    CombatResult,
    DamageResult,
    EndCombatResult,
    PhaseResult,
    UnitActivationResult,
)
from .state.rng import RandomSource, make_random
from .state.session import CombatLog, CombatPhase, SessionState


logger = logging.getLogger(__name__)


EnemyRef = Union[Enemy, str]


class CombatSession:
    """
    One combat between a hero and a roster of enemies.

    The session is single-writer: callers must not run operations on the
    same session concurrently.
    """

    def __init__(
        self,
        hero: Any,
        enemies: Union[Enemy, Iterable[Enemy]],
        random_source: Optional[RandomSource] = None,
        config: Optional[CombatConfig] = None,
    ):
        """
        Args:
            hero: Object with `armor`, take_wound(), take_wound_to_discard(), gain_fame()
            enemies: One enemy or an iterable of enemies
            random_source: Source for summoner picks and critical hits
                (defaults to a seeded source when config.seed is set)
            config: Tunable rule constants (DEFAULT_CONFIG when omitted)
        """
        self.config = config or DEFAULT_CONFIG
        self.hero = hero
        if isinstance(enemies, Enemy):
            enemies = [enemies]
        self.rng = random_source if random_source is not None else make_random(self.config.seed)
        self.state = SessionState(enemies=list(enemies))
        self.blocking = BlockingEngine(self.config)
        self.units = UnitContribution(self.state)
        self.result: Optional[EndCombatResult] = None

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def phase(self) -> CombatPhase:
        return self.state.phase

    @property
    def enemies(self) -> List[Enemy]:
        return list(self.state.enemies)

    @property
    def defeated_enemies(self) -> List[Enemy]:
        return list(self.state.defeated_enemies)

    @property
    def blocked_enemies(self) -> set:
        return set(self.state.blocked_enemies)

    @property
    def unblocked_enemies(self) -> List[Enemy]:
        return list(self.state.unblocked_enemies)

    @property
    def summoned_enemies(self) -> Dict[str, Enemy]:
        return dict(self.state.summoned_enemies)

    @property
    def total_damage(self) -> int:
        return self.state.total_damage

    @property
    def wounds_received(self) -> int:
        return self.state.wounds_received

    @property
    def paralyze_triggered(self) -> bool:
        return self.state.paralyze_triggered

    @property
    def cards_to_discard(self) -> int:
        return self.state.cards_to_discard

    @property
    def log(self) -> CombatLog:
        return self.state.log

    def is_complete(self) -> bool:
        return self.state.phase == CombatPhase.COMPLETE

    # =========================================================================
    # Helpers
    # =========================================================================

    def _wrong_phase(self, result_cls, operation: str, *expected: CombatPhase) -> CombatResult:
        names = " or ".join(p.value for p in expected)
        message = f"{operation} is only valid in the {names} phase (current: {self.phase.value})"
        logger.warning(message)
        return result_cls.failure(CombatError.PHASE, message)

    def _set_phase(self, phase: CombatPhase) -> None:
        previous = self.state.phase
        self.state.phase = phase
        self.state.log.log(phase, "phase_change", previous=previous.value, to=phase.value)
        logger.info("Combat phase: %s -> %s", previous.value, phase.value)

    def _find_enemy(self, ref: EnemyRef) -> Optional[Enemy]:
        """Active enemy for an Enemy object or id."""
        if isinstance(ref, Enemy):
            return ref if self.state.is_active(ref) else None
        return self.state.get_enemy(ref)

    @staticmethod
    def _ref_name(ref: Any) -> str:
        return getattr(ref, "name", None) or str(ref)

    @staticmethod
    def _parse_element(element: Any) -> Optional[Element]:
        try:
            return Element.parse(element)
        except ValueError:
            return None

    @staticmethod
    def _parse_effect(effect_type: Any) -> Optional[EffectType]:
        try:
            return EffectType(effect_type)
        except ValueError:
            return None

    # =========================================================================
    # Phase transitions
    # =========================================================================

    def start(self) -> PhaseResult:
        """Begin the combat in the ranged phase."""
        if self.phase != CombatPhase.NOT_STARTED:
            return self._wrong_phase(PhaseResult, "start", CombatPhase.NOT_STARTED)

        logger.info("Combat started against %d enemies", len(self.state.enemies))
        self._set_phase(CombatPhase.RANGED)
        return PhaseResult(
            message=f"Combat against {len(self.state.enemies)} enemies. Ranged phase.",
            phase=self.phase.value,
            previous_phase=CombatPhase.NOT_STARTED.value,
        )

    def end_ranged_phase(self) -> PhaseResult:
        """Leave the ranged phase; summoners are replaced as the block phase begins."""
        if self.phase != CombatPhase.RANGED:
            return self._wrong_phase(PhaseResult, "end_ranged_phase", CombatPhase.RANGED)

        if not self.state.enemies:
            self.end_combat()
            return PhaseResult(
                message="All enemies defeated in the ranged phase",
                phase=self.phase.value,
                previous_phase=CombatPhase.RANGED.value,
                auto_completed=True,
            )

        self._set_phase(CombatPhase.BLOCK)
        summoned = replace_summoners(self.state, self.rng)
        return PhaseResult(
            message="Block phase",
            phase=self.phase.value,
            previous_phase=CombatPhase.RANGED.value,
            summoned=summoned,
        )

    def end_block_phase(self) -> PhaseResult:
        """Fix unblocked enemies and their damage; enter the damage phase."""
        if self.phase != CombatPhase.BLOCK:
            return self._wrong_phase(PhaseResult, "end_block_phase", CombatPhase.BLOCK)

        anomalies: List[str] = []
        summoned = replace_summoners(self.state, self.rng)
        self._set_phase(CombatPhase.DAMAGE)
        unblocked = enter_damage_phase(self.state, anomalies)

        result = PhaseResult(
            phase=self.phase.value,
            previous_phase=CombatPhase.BLOCK.value,
            summoned=summoned,
            unblocked_enemies=[e.id for e in unblocked],
            total_damage=self.state.total_damage,
            anomalies=anomalies,
        )
        if not unblocked:
            self._set_phase(CombatPhase.ATTACK)
            result.phase = self.phase.value
            result.message = "All enemies blocked. Attack phase."
        else:
            result.message = f"{self.state.total_damage} unblocked damage to assign"
        return result

    # =========================================================================
    # Ranged phase
    # =========================================================================

    def ranged_attack_enemy(
        self,
        enemy: EnemyRef,
        ranged_value: Any = 0,
        siege_value: Any = 0,
        element: Any = Element.PHYSICAL,
    ) -> AttackResult:
        """Attack one enemy with ranged and/or siege points."""
        if self.phase != CombatPhase.RANGED:
            return self._wrong_phase(AttackResult, "ranged_attack_enemy", CombatPhase.RANGED)

        target = self._find_enemy(enemy)
        if target is None:
            return AttackResult.failure(CombatError.VALIDATION, f"{self._ref_name(enemy)} is not an active enemy")
        attack_element = self._parse_element(element)
        if attack_element is None:
            return AttackResult.failure(CombatError.VALIDATION, f"Unknown element: {element!r}")

        anomalies: List[str] = []
        ranged = int(normalize_damage(ranged_value, anomalies, label="ranged"))
        siege = int(normalize_damage(siege_value, anomalies, label="siege"))
        return resolve_ranged_attack(
            self.state, self.hero, target, ranged, siege, attack_element, self.config, self.units, anomalies,
        )

    # =========================================================================
    # Block phase
    # =========================================================================

    def block_enemy(self, enemy: EnemyRef, sources: BlockInput, movement_points: Any = 0) -> BlockResult:
        """
        Try to block one enemy.

        Args:
            enemy: Enemy (or id) to block
            sources: BlockSource list, a single BlockSource, or a bare physical value
            movement_points: Movement available to pay a cumbersome enemy
        """
        if self.phase != CombatPhase.BLOCK:
            return self._wrong_phase(BlockResult, "block_enemy", CombatPhase.BLOCK)

        target = self._find_enemy(enemy)
        if target is None:
            return BlockResult.failure(CombatError.VALIDATION, f"{self._ref_name(enemy)} is not an active enemy")
        if self.state.is_blocked(target):
            return BlockResult.failure(
                CombatError.VALIDATION, f"{target.name} is already blocked", enemy_id=target.id,
            )

        try:
            block_sources = normalize_sources(sources)
        except ValueError as exc:
            return BlockResult.failure(
                CombatError.VALIDATION, f"Invalid block source: {exc}", enemy_id=target.id,
            )

        anomalies: List[str] = []
        movement = int(normalize_damage(movement_points, anomalies, label="movement"))
        calc = self.blocking.calculate_block(
            target, block_sources, self.state.unit_points.block, movement, anomalies,
        )

        unit_points_consumed = 0
        if calc.blocked:
            self.state.blocked_enemies.add(target.id)
            if calc.unit_points_consumed:
                unit_points_consumed = self.units.consume_block()
            logger.info("%s blocked (%d/%d)", target.name, calc.total_block, calc.required)
        else:
            logger.info("Block on %s failed (%d/%d)", target.name, calc.total_block, calc.required)
        self.state.log.log(
            self.phase, "block",
            enemy=target.id, blocked=calc.blocked, total=calc.total_block, required=calc.required,
        )

        return BlockResult(
            message=calc.message,
            anomalies=anomalies,
            enemy_id=target.id,
            blocked=calc.blocked,
            total_block=calc.total_block,
            required=calc.required,
            is_inefficient=calc.is_inefficient,
            inefficient_reasons=list(calc.inefficient_reasons),
            movement_consumed=calc.movement_consumed,
            unit_points_consumed=unit_points_consumed,
        )

    # =========================================================================
    # Damage phase
    # =========================================================================

    def assign_damage_to_unit(self, unit: Any, enemy: Optional[EnemyRef] = None) -> AssignmentResult:
        """
        Route one unblocked enemy's damage onto a ready unit.

        With no enemy given, the first unassigned non-assassin enemy is used.
        Once every unblocked enemy is assigned, the attack phase begins.
        """
        if self.phase != CombatPhase.DAMAGE:
            return self._wrong_phase(AssignmentResult, "assign_damage_to_unit", CombatPhase.DAMAGE)

        target: Optional[Enemy] = None
        if enemy is not None:
            target = self._find_enemy(enemy)
            if target is None:
                return AssignmentResult.failure(
                    CombatError.VALIDATION, f"{self._ref_name(enemy)} is not an active enemy",
                )

        result = assign_to_unit(self.state, unit, target, [])
        if result.success and not self.state.pending_unblocked():
            self._set_phase(CombatPhase.ATTACK)
        result.phase = self.phase.value
        return result

    def resolve_damage_phase(self) -> DamageResult:
        """Convert all remaining unblocked damage into hero wounds; enter the attack phase."""
        if self.phase != CombatPhase.DAMAGE:
            return self._wrong_phase(DamageResult, "resolve_damage_phase", CombatPhase.DAMAGE)

        result = resolve_hero_damage(self.state, self.hero, [])
        self._set_phase(CombatPhase.ATTACK)
        result.phase = self.phase.value
        return result

    # =========================================================================
    # Attack phase
    # =========================================================================

    def attack_enemies(
        self,
        attack_value: Any,
        element: Any = Element.PHYSICAL,
        targets: Optional[Iterable[EnemyRef]] = None,
    ) -> AttackResult:
        """
        Attack a batch of enemies (all active enemies when targets is None).

        Regular targets are defeated all together or not at all; bosses take
        health damage.
        """
        if self.phase != CombatPhase.ATTACK:
            return self._wrong_phase(AttackResult, "attack_enemies", CombatPhase.ATTACK)

        attack_element = self._parse_element(element)
        if attack_element is None:
            return AttackResult.failure(CombatError.VALIDATION, f"Unknown element: {element!r}")

        if targets is None:
            batch = list(self.state.enemies)
        else:
            batch = []
            for ref in targets:
                target = self._find_enemy(ref)
                if target is None:
                    return AttackResult.failure(
                        CombatError.VALIDATION, f"{self._ref_name(ref)} is not an active enemy",
                    )
                if target not in batch:
                    batch.append(target)
        if not batch:
            return AttackResult.failure(CombatError.VALIDATION, "No enemies to attack")

        anomalies: List[str] = []
        value = normalize_damage(attack_value, anomalies, label="attack")
        return resolve_attack(
            self.state, self.hero, batch, value, attack_element, self.config, self.units, anomalies,
        )

    # =========================================================================
    # Units
    # =========================================================================

    def activate_unit(self, unit: Any) -> UnitActivationResult:
        """Activate a unit once this combat; its points depend on the phase."""
        return self.units.activate(unit)

    # =========================================================================
    # End of combat
    # =========================================================================

    def end_combat(self) -> EndCombatResult:
        """Finish the combat from any phase. Outstanding poison becomes hero wounds."""
        if self.result is not None:
            return self.result

        poison_wounds = self.state.status_effects.pending_poison_wounds()
        for _ in range(poison_wounds):
            self.hero.take_wound()
        self.state.wounds_received += poison_wounds
        self.state.status_effects.clear()

        if self.phase != CombatPhase.COMPLETE:
            self._set_phase(CombatPhase.COMPLETE)

        victory = not self.state.enemies
        self.result = EndCombatResult(
            message="Victory!" if victory else "Combat ended",
            victory=victory,
            defeated_enemies=[e.id for e in self.state.defeated_enemies],
            remaining_enemies=[e.id for e in self.state.enemies],
            wounds_received=self.state.wounds_received,
            poison_wounds=poison_wounds,
            fame_gained=self.state.fame_gained,
        )
        self.state.log.log(self.phase, "combat_end", victory=victory, fame=self.result.fame_gained)
        logger.info(
            "Combat ended: victory=%s, wounds=%d, fame=%d",
            victory, self.state.wounds_received, self.result.fame_gained,
        )
        return self.result

    # =========================================================================
    # Combos and critical hits
    # =========================================================================

    def detect_combo(self, cards: Iterable[Any]) -> Optional[ComboResult]:
        return _detect_combo(cards, self.config)

    def apply_combo_bonus(self, value: int, combo: Optional[ComboResult]) -> int:
        return _apply_combo_bonus(value, combo)

    def calculate_critical_hit(self, base: int, chance: Optional[float] = None) -> CriticalHitResult:
        return _calculate_critical_hit(base, self.rng, chance=chance, config=self.config)

    # =========================================================================
    # Status effects
    # =========================================================================

    def apply_effect_to_hero(self, effect_type: Union[EffectType, str], stacks: int = 1) -> EffectApplication:
        effect = self._parse_effect(effect_type)
        if effect is None:
            return EffectApplication.failure(f"Unknown effect: {effect_type!r}")
        application = self.state.status_effects.apply_to_hero(effect, stacks)
        self.state.log.log(self.phase, "effect_applied", target="hero", effect=application.effect.type.value)
        return application

    def apply_effect_to_enemy(self, enemy: EnemyRef, effect_type: Union[EffectType, str]) -> EffectApplication:
        effect = self._parse_effect(effect_type)
        if effect is None:
            return EffectApplication.failure(f"Unknown effect: {effect_type!r}")
        enemy_id = enemy.id if isinstance(enemy, Enemy) else enemy
        application = self.state.status_effects.apply_to_enemy(enemy_id, effect)
        self.state.log.log(self.phase, "effect_applied", target=enemy_id, effect=application.effect.type.value)
        return application

    def get_hero_effects(self) -> List[StatusEffect]:
        return self.state.status_effects.get_hero_effects()

    def get_enemy_effects(self, enemy: EnemyRef) -> List[StatusEffect]:
        enemy_id = enemy.id if isinstance(enemy, Enemy) else enemy
        return self.state.status_effects.get_enemy_effects(enemy_id)

    def process_phase_effects(self) -> Dict[str, Any]:
        """Tick status effects. Returns burn damage for the caller to apply."""
        effects = self.state.status_effects
        hero_damage = effects.process_hero_phase_start()
        enemy_damage = effects.process_enemy_phase_start()

        messages = []
        if hero_damage:
            messages.append(f"Hero takes {hero_damage} damage from status effects")
        for enemy_id, damage in enemy_damage.items():
            messages.append(f"{enemy_id} takes {damage} damage from status effects")

        return {"hero_damage": hero_damage, "enemy_damage": enemy_damage, "messages": messages}

    # =========================================================================
    # Inspection
    # =========================================================================

    def predict_outcome(self, current_attack: int = 0) -> Optional[OutcomePrediction]:
        return predict_outcome(self, current_attack)

    def get_state(self) -> Dict[str, Any]:
        """Plain snapshot of the session (read-only)."""
        return self.state.to_dict()

    def __repr__(self) -> str:
        return f"CombatSession(phase={self.phase.value}, enemies={len(self.state.enemies)})"
