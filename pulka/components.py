"""
Component Definitions
======================
Plain dataclasses for everything that lives on the playfield.
Coordinates are world pixels, origin top-left.
"""

from dataclasses import dataclass


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass
class Position:
    """World position with sub-pixel precision."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Box:
    """Axis-aligned bounding box used for every collision and goal test."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: 'Box') -> bool:
        """Inclusive overlap test; touching edges count as a hit."""
        return (
            self.x <= other.right and
            self.right >= other.x and
            self.y <= other.bottom and
            self.bottom >= other.y
        )


@dataclass
class Playfield:
    """Current size of the visible simulation area."""
    width: float = 800.0
    height: float = 600.0

    def resize(self, width: float, height: float):
        """Track a new viewport size. Entities are re-clamped on the next step."""
        self.width = width
        self.height = height


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass
class Player:
    """The single player sprite."""
    pos: Position
    width: float
    height: float

    def box(self) -> Box:
        return Box(self.pos.x, self.pos.y, self.width, self.height)


@dataclass
class Projectile:
    """A horizontally moving hazard."""
    pos: Position
    width: float = 20.0
    height: float = 5.0

    def box(self) -> Box:
        return Box(self.pos.x, self.pos.y, self.width, self.height)


@dataclass(frozen=True)
class GoalZone:
    """
    Goal rectangle anchored to the right edge, vertically centered.

    Only the dimensions are stored; the placement follows the playfield.
    """
    width: float = 100.0
    height: float = 95.0

    def box(self, playfield: Playfield) -> Box:
        return Box(
            playfield.width - self.width,
            (playfield.height - self.height) / 2,
            self.width,
            self.height,
        )
