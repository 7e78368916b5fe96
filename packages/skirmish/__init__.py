"""
Skirmish - turn-based combat resolution engine.

Resolves a multi-phase fight between a hero (with support units) and a set of
enemies: ranged/siege attacks, elemental blocking, damage assignment, melee
attacks, boss phases with enrage, enemy abilities and card combos.

Structure:
- content/: elements, ability tags, enemies, bosses, units, hero, cards, status effects
- calc/: pure formulas (blocking, wounds, combos, predictor)
- registry/: ability dispatch table and the built-in ability handlers
- handlers/: per-phase resolvers
- state/: session state record, phases, random sources
- combat_engine.py: CombatSession state machine

Usage:
    from packages.skirmish import CombatSession, Hero, create_enemy

    session = CombatSession(Hero(armor=2), [create_enemy("orc"), create_enemy("guard")])
    session.start()
"""

from .calc.blocking import BlockCalculation, BlockingEngine, BlockSource
from .calc.combos import (
    ComboResult,
    ComboType,
    CriticalHitResult,
    apply_combo_bonus,
    calculate_critical_hit,
    detect_combo,
)
from .calc.damage import calculate_wounds
from .calc.predictor import OutcomePrediction, predict_outcome
from .combat_engine import CombatSession
from .config import CombatConfig, DEFAULT_CONFIG, configure_logging, load_config
from .content.abilities import Ability
from .content.bosses import BOSS_DEFINITIONS, BossEnemy, BossPhase, create_boss
from .content.cards import CardColor, PlayedCard
from .content.elements import Element
from .content.enemies import ENEMY_DEFINITIONS, Enemy, create_enemies, create_enemy, summon_pool
from .content.hero import Hero, HeroLike
from .content.status_effects import EffectType, StatusEffectManager
from .content.units import Unit, UnitAbility, UnitAbilityType, UnitLike
from .errors import CombatError, normalize_damage
from .handlers.units import UnitContribution
from .registry import ABILITY_REGISTRY, ability_hook
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
from .state.rng import RandomSource, SeededRandom, SystemRandom
from .state.session import CombatPhase, SessionState

__version__ = "0.1.0"

__all__ = [
    # Session
    "CombatSession",
    "CombatPhase",
    "SessionState",
    "UnitContribution",
    # Config and errors
    "CombatConfig",
    "DEFAULT_CONFIG",
    "configure_logging",
    "load_config",
    "CombatError",
    "normalize_damage",
    # Results
    "AssignmentResult",
    "AttackResult",
    "BlockResult",
    "CombatResult",
    "DamageResult",
    "EndCombatResult",
    "PhaseResult",
    "UnitActivationResult",
    # Content
    "Ability",
    "Element",
    "Enemy",
    "ENEMY_DEFINITIONS",
    "create_enemy",
    "create_enemies",
    "summon_pool",
    "BossEnemy",
    "BossPhase",
    "BOSS_DEFINITIONS",
    "create_boss",
    "Hero",
    "HeroLike",
    "Unit",
    "UnitAbility",
    "UnitAbilityType",
    "UnitLike",
    "CardColor",
    "PlayedCard",
    "EffectType",
    "StatusEffectManager",
    # Calculations
    "BlockCalculation",
    "BlockingEngine",
    "BlockSource",
    "ComboResult",
    "ComboType",
    "CriticalHitResult",
    "apply_combo_bonus",
    "calculate_critical_hit",
    "detect_combo",
    "calculate_wounds",
    "OutcomePrediction",
    "predict_outcome",
    # Registry
    "ABILITY_REGISTRY",
    "ability_hook",
    # RNG
    "RandomSource",
    "SeededRandom",
    "SystemRandom",
]
