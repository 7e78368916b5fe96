#!/usr/bin/env python3
"""
Skirmish - Command Line Interface

Runs scripted encounters through the combat engine and lists the enemy catalog.

Usage:
    python cli.py simulate --enemies orc,guard --attack 8 --block 4 --seed 7
    python cli.py simulate --boss dark_lord --attack 20 --element fire
    python cli.py catalog
    python cli.py catalog --json
"""

import argparse
import json
import sys
import os
from typing import Any, Dict, List

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from packages.skirmish import (
    BOSS_DEFINITIONS,
    ENEMY_DEFINITIONS,
    CombatPhase,
    CombatSession,
    Hero,
    configure_logging,
    create_boss,
    create_enemy,
    load_config,
)
from packages.skirmish.state.rng import make_random


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_definition(key: str, data: Dict[str, Any]) -> str:
    """One catalog line for an enemy or boss definition."""
    parts = [f"{key:<14} {data['name']:<16} armor {data['armor']:>2}  attack {data['attack']:>2}"]
    parts.append(f"fame {data.get('fame', 0):>2}")
    if "max_health" in data:
        parts.append(f"health {data['max_health']}")
    if data.get("attack_type"):
        parts.append(data["attack_type"])
    if data.get("abilities"):
        parts.append("[" + ", ".join(data["abilities"]) + "]")
    if data.get("resistances"):
        parts.append("resists " + "/".join(data["resistances"]))
    return "  ".join(parts)


def parse_enemy_list(value: str) -> List[str]:
    return [key.strip() for key in value.split(",") if key.strip()]


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_simulate(args) -> int:
    """Run a scripted encounter: ranged volley, blocks, damage, one attack batch."""
    overrides: Dict[str, Any] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.seed is not None:
        overrides["seed"] = args.seed
    config = load_config(env_file=args.env_file, **overrides)
    configure_logging(config.log_level)

    try:
        enemies = [create_enemy(key) for key in parse_enemy_list(args.enemies)]
        if args.boss:
            enemies.append(create_boss(args.boss))
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    if not enemies:
        print("Error: no enemies given", file=sys.stderr)
        return 1

    hero = Hero(armor=args.hero_armor)
    session = CombatSession(hero, enemies, random_source=make_random(config.seed), config=config)
    steps = []

    steps.append(("start", session.start()))
    if args.ranged or args.siege:
        target = session.enemies[0]
        steps.append(("ranged", session.ranged_attack_enemy(target, args.ranged, args.siege, args.element)))
    steps.append(("end_ranged", session.end_ranged_phase()))

    if not session.is_complete():
        if args.block > 0:
            for enemy in session.enemies:
                steps.append(("block", session.block_enemy(enemy, args.block)))
        steps.append(("end_block", session.end_block_phase()))
        if session.phase == CombatPhase.DAMAGE:
            steps.append(("damage", session.resolve_damage_phase()))
        if args.attack > 0 and session.enemies:
            steps.append(("attack", session.attack_enemies(args.attack, args.element)))

    result = session.end_combat()

    output: Dict[str, Any] = {"result": result.to_dict(), "hero": hero.to_dict()}
    if args.steps:
        output["steps"] = [{"step": name, **step.to_dict()} for name, step in steps]
    print(json.dumps(output, indent=2))
    return 0


def cmd_catalog(args) -> int:
    """List enemy and boss definitions."""
    if args.json:
        print(json.dumps({"enemies": ENEMY_DEFINITIONS, "bosses": BOSS_DEFINITIONS}, indent=2))
        return 0

    print("Enemies:")
    for key in sorted(ENEMY_DEFINITIONS):
        print("  " + format_definition(key, ENEMY_DEFINITIONS[key]))
    print()
    print("Bosses:")
    for key in sorted(BOSS_DEFINITIONS):
        print("  " + format_definition(key, BOSS_DEFINITIONS[key]))
    return 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Skirmish - combat resolution engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s simulate --enemies orc,guard --attack 8 --block 4 --seed 7
  %(prog)s simulate --enemies guard --siege 4 --steps
  %(prog)s simulate --boss lich_king --attack 40 --element fire
  %(prog)s catalog
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Run a scripted encounter")
    sim_parser.add_argument("--enemies", "-e", default="", help="Comma-separated enemy keys (e.g., orc,guard)")
    sim_parser.add_argument("--boss", "-b", help="Boss key to add to the encounter")
    sim_parser.add_argument("--ranged", type=int, default=0, help="Ranged points against the first enemy")
    sim_parser.add_argument("--siege", type=int, default=0, help="Siege points against the first enemy")
    sim_parser.add_argument("--block", type=int, default=0, help="Physical block tried against each enemy")
    sim_parser.add_argument("--attack", "-a", type=int, default=0, help="Attack points for one batch on all enemies")
    sim_parser.add_argument("--element", default="physical", help="Element of ranged/melee attacks")
    sim_parser.add_argument("--hero-armor", type=int, default=2, help="Hero armor")
    sim_parser.add_argument("--seed", "-s", type=int, help="Seed for deterministic summoner picks")
    sim_parser.add_argument("--steps", action="store_true", help="Include every step result in the output")
    sim_parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    sim_parser.add_argument("--env-file", help="Path to a .env file with SKIRMISH_* settings")

    # Catalog command
    catalog_parser = subparsers.add_parser("catalog", help="List enemy and boss definitions")
    catalog_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch to command handler
    commands = {
        "simulate": cmd_simulate,
        "catalog": cmd_catalog,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
