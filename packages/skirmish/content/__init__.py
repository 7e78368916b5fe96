"""
Content module - combat records and definition catalogs.

Contains:
- elements: Element tags and the block efficiency table
- abilities: Enemy ability tags
- enemies: Enemy model and ENEMY_DEFINITIONS
- bosses: BossEnemy with phases/enrage and BOSS_DEFINITIONS
- units: Support units and the unit interface
- hero: Hero interface and a reference hero
- cards: Played-card payloads for combo detection
- status_effects: Temporary combat effects (poison, burn, ...)

Submodules are imported directly (e.g. `from packages.skirmish.content.enemies
import Enemy`); the enemy model depends on the ability registry, which in turn
depends on content.abilities.
"""
