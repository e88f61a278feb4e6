"""
physics_core.py: The shared, deterministic kinematic helpers and collision logic.
"""

import math
from typing import Sequence, TYPE_CHECKING

from .constants import MS_PER_FRAME, FPS, BG_CLOUD_SPEED
from .data_models import CollisionBox

if TYPE_CHECKING:
    from .obstacle import Obstacle
    from .trex import Trex

# Outer boxes are pulled in by this much before the coarse test.
COLLISION_MARGIN = 1


def frames_elapsed(delta_ms: float) -> float:
    """Converts a tick length into reference frames (1.0 at 60 fps)."""
    return delta_ms / MS_PER_FRAME


def round_half_away(value: float) -> float:
    """Rounds to the nearest integer, halves away from zero."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def scroll_increment(speed: float, delta_ms: float) -> float:
    """Ground and obstacle travel for one tick. Always floored."""
    return float(math.floor(speed * FPS / 1000 * delta_ms))


def cloud_increment(speed: float, delta_ms: float) -> float:
    """Cloud travel for one tick. Always ceiled."""
    return float(math.ceil(BG_CLOUD_SPEED / 1000 * delta_ms * speed))


def boxes_overlap(a: CollisionBox, b: CollisionBox) -> bool:
    """Strict AABB overlap; touching edges do not collide."""
    return (a.x < b.x + b.width and
            a.x + a.width > b.x and
            a.y < b.y + b.height and
            a.y + a.height > b.y)


class PhysicsCore:
    """
    Shared deterministic collision logic used by the game engine.
    """

    MARGIN = COLLISION_MARGIN

    def outer_box(self, x: float, y: float, width: float, height: float) -> CollisionBox:
        return CollisionBox(x, y, width, height).shrink(self.MARGIN)

    def check_collision(self, trex: "Trex", obstacles: Sequence["Obstacle"]) -> bool:
        """
        Two-phase test between the player and the nearest (first) obstacle.
        """
        if not obstacles:
            return False
        obstacle = obstacles[0]

        # 1. Coarse bounding boxes
        trex_box = self.outer_box(trex.x, trex.y, trex.width, trex.height)
        obstacle_box = self.outer_box(obstacle.x, obstacle.y, obstacle.width, obstacle.height)
        if not boxes_overlap(trex_box, obstacle_box):
            return False

        # 2. Per sub-box geometry
        obstacle_boxes = obstacle.collision_boxes()
        for box in trex.collision_boxes:
            trex_part = box.offset(trex.x, trex.y)
            for part in obstacle_boxes:
                if boxes_overlap(trex_part, part):
                    return True

        return False
