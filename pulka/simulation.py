"""
Simulation Step
================
Per-frame systems for player movement, projectile spawning, projectile
movement, collisions, and the goal check.

Each system operates on an explicit SimulationContext. step() runs them
in a fixed order and reports the outcome of the tick.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List
import random

from .components import Box, GoalZone, Playfield, Player, Position, Projectile
from .config import GameConfig
from .input import DirectionalIntent


class Outcome(Enum):
    """Result of a single simulation tick."""
    CONTINUE = auto()
    WON = auto()
    LOST = auto()


@dataclass
class SimulationContext:
    """
    Entity state for one level plus the spawn clock.

    Owned by the LevelController; nothing else mutates it between ticks.
    """
    config: GameConfig
    playfield: Playfield = field(default_factory=Playfield)
    spawn_interval_ms: int = 1000
    rng: random.Random = field(default_factory=random.Random)

    player: Player = field(init=False)
    goal: GoalZone = field(init=False)
    projectiles: List[Projectile] = field(init=False)
    last_spawn_ms: float = field(init=False, default=0.0)
    spawn_count: int = field(init=False, default=0)

    def __post_init__(self):
        self.goal = GoalZone(self.config.goal.width, self.config.goal.height)
        self.reset()

    def reset(self):
        """Fresh level: player at the origin, no projectiles, spawn timer zeroed."""
        pc = self.config.player
        self.player = Player(Position(pc.start_x, pc.start_y), pc.width, pc.height)
        self.projectiles = []
        self.last_spawn_ms = 0.0
        self.spawn_count = 0

    def goal_box(self) -> Box:
        return self.goal.box(self.playfield)


# =============================================================================
# SYSTEMS
# =============================================================================

def _clamp(value: float, low: float, high: float) -> float:
    # A playfield smaller than the entity pins it to the top-left
    return max(low, min(value, high))


def player_movement_system(ctx: SimulationContext, intent: DirectionalIntent):
    """
    Move the player one step along each active axis and keep its box
    inside the playfield. Clamping runs every tick so a shrunken
    playfield pulls the player back in.
    """
    player = ctx.player
    speed = ctx.config.player.speed
    dx, dy = intent.vector()

    player.pos.x = _clamp(
        player.pos.x + dx * speed, 0.0, ctx.playfield.width - player.width
    )
    player.pos.y = _clamp(
        player.pos.y + dy * speed, 0.0, ctx.playfield.height - player.height
    )


def spawn_system(ctx: SimulationContext, now_ms: float) -> bool:
    """Append one projectile if more than the spawn interval has elapsed."""
    if now_ms - ctx.last_spawn_ms <= ctx.spawn_interval_ms:
        return False

    pc = ctx.config.projectile
    ctx.projectiles.append(Projectile(
        Position(
            ctx.playfield.width - pc.spawn_offset,
            ctx.rng.uniform(0, ctx.playfield.height),
        ),
        pc.width,
        pc.height,
    ))
    ctx.last_spawn_ms = now_ms
    ctx.spawn_count += 1
    return True


def projectile_system(ctx: SimulationContext) -> bool:
    """
    Test every projectile against the player, then move it left and drop
    it once it has left the playfield. Every projectile is processed even
    after a hit. Returns True if any projectile touched the player.
    """
    pc = ctx.config.projectile
    player_box = ctx.player.box()
    hit = False
    survivors = []

    for proj in ctx.projectiles:
        if proj.box().overlaps(player_box):
            hit = True
        proj.pos.x -= pc.speed
        if proj.pos.x > pc.despawn_x:
            survivors.append(proj)

    ctx.projectiles = survivors
    return hit


def goal_system(ctx: SimulationContext) -> bool:
    """True when the player's box reaches into the goal zone from the left."""
    player_box = ctx.player.box()
    goal_box = ctx.goal_box()
    return (
        player_box.right > goal_box.x and
        player_box.bottom > goal_box.y and
        player_box.y < goal_box.bottom
    )


def step(ctx: SimulationContext, intent: DirectionalIntent, now_ms: float) -> Outcome:
    """
    Advance the level by one frame.

    ``now_ms`` is the time since the level started. A win in the same
    tick as a hit takes precedence.
    """
    player_movement_system(ctx, intent)
    spawn_system(ctx, now_ms)
    lost = projectile_system(ctx)
    won = goal_system(ctx)

    if won:
        return Outcome.WON
    if lost:
        return Outcome.LOST
    return Outcome.CONTINUE
