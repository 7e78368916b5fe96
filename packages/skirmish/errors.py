"""
Failure taxonomy for combat operations.

Combat operations never raise for expected failures. They return a result
whose `error` field holds one of these kinds:

- PHASE: operation invalid for the current phase (retry in the right phase)
- VALIDATION: bad target or unit (enemy not in roster, unit not ready, ...)
- NUMERIC: NaN/None/infinite input that was normalized to 0
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional
import logging
import math


logger = logging.getLogger(__name__)


class CombatError(str, Enum):
    """Kinds of recoverable combat failures."""
    PHASE = "phase_error"
    VALIDATION = "validation_error"
    NUMERIC = "numeric_anomaly"


def normalize_damage(value: Any, anomalies: Optional[List[str]] = None, label: str = "damage") -> float:
    """
    Coerce a damage-like input into a finite, non-negative number.

    None, NaN, infinities, negatives and non-numeric values become 0.
    Each correction is appended to `anomalies` (if given) and logged.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan

    if math.isfinite(number) and number >= 0:
        return number

    note = f"{label} value {value!r} normalized to 0"
    logger.warning(note)
    if anomalies is not None:
        anomalies.append(note)
    return 0.0
