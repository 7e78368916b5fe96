"""
State management for combat: the session record, phases and random sources.
"""

from .rng import RandomSource, SeededRandom, SystemRandom, XorShift128, choice, make_random
from .session import CombatLog, CombatLogEntry, CombatPhase, SessionState, UnitPoints

__all__ = [
    # RNG
    "RandomSource",
    "SeededRandom",
    "SystemRandom",
    "XorShift128",
    "choice",
    "make_random",
    # Session
    "CombatLog",
    "CombatLogEntry",
    "CombatPhase",
    "SessionState",
    "UnitPoints",
]
