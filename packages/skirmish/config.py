"""
Combat configuration and logging setup.

All tunable numbers of the combat rules live in CombatConfig. A config can be
built from SKIRMISH_* environment variables (optionally read from a .env file):

    SKIRMISH_LOG_LEVEL=DEBUG
    SKIRMISH_SEED=1234
    SKIRMISH_CRIT_CHANCE=0.2
    SKIRMISH_ENRAGE_MULTIPLIER=2.0

Usage:
    from packages.skirmish.config import load_config, configure_logging

    config = load_config()
    configure_logging(config.log_level)
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional
import logging
import os

from dotenv import find_dotenv, load_dotenv


ENV_PREFIX = "SKIRMISH_"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class CombatConfig:
    """Tunable constants for combat resolution."""

    # Elemental math
    resist_multiplier: float = 0.5
    inefficient_block: float = 0.5

    # Bosses
    default_enrage_threshold: float = 0.25
    default_enrage_multiplier: float = 1.5
    boss_heal_fraction: float = 0.1
    default_boss_health: int = 30

    # Combos
    combo_per_card_bonus: float = 0.15
    rainbow_multiplier: float = 2.0
    element_synergy_multiplier: float = 1.5
    combo_min_cards: int = 3

    # Critical hits
    crit_chance: float = 0.15
    crit_multiplier: float = 1.5

    # Runtime
    log_level: str = "WARNING"
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = CombatConfig()


def _coerce(raw: str, default: Any) -> Any:
    """Convert an environment string to the type of the field default."""
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if default is None:
        # Only `seed` is optional; it is an integer when set.
        return int(raw)
    return raw


def load_config(env_file: Optional[str] = None, **overrides: Any) -> CombatConfig:
    """
    Build a CombatConfig from the environment.

    Args:
        env_file: Optional path to a .env file. When omitted, a .env file is
            searched for from the current directory upwards.
        **overrides: Explicit field values that win over the environment.

    Returns:
        CombatConfig with environment values applied.

    Raises:
        ValueError: If an environment value cannot be converted.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    values: Dict[str, Any] = {}
    for f in fields(CombatConfig):
        raw = os.environ.get(ENV_PREFIX + f.name.upper())
        if raw is None or raw == "":
            continue
        try:
            values[f.name] = _coerce(raw, getattr(DEFAULT_CONFIG, f.name))
        except ValueError as e:
            raise ValueError(f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}") from e

    values.update(overrides)
    return replace(DEFAULT_CONFIG, **values)


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )
