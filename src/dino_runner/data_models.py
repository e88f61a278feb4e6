"""
data_models.py: Data structures for the simulation's static geometry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .constants import (
    OBSTACLE_SPECS, TREX_RUNNING_COLLISION_BOXES, TREX_DUCKING_COLLISION_BOXES
)


@dataclass(frozen=True)
class CollisionBox:
    """Axis-aligned rectangle, relative to a sprite origin or in world space."""
    x: float
    y: float
    width: float
    height: float

    def offset(self, dx: float, dy: float) -> "CollisionBox":
        """Returns the same box translated by (dx, dy)."""
        return CollisionBox(self.x + dx, self.y + dy, self.width, self.height)

    def shrink(self, margin: float) -> "CollisionBox":
        """Returns the box pulled in by `margin` on every side."""
        return CollisionBox(
            self.x + margin, self.y + margin,
            self.width - 2 * margin, self.height - 2 * margin)


class ObstacleKind(Enum):
    CACTUS_SMALL = "cactus_small"
    CACTUS_LARGE = "cactus_large"
    PTERODACTYL = "pterodactyl"


@dataclass(frozen=True)
class ObstacleType:
    """Per-kind geometry and spawn gates shared by every instance of that kind."""
    kind: ObstacleKind
    width: int
    height: int
    y_positions: Tuple[int, ...]
    multiple_speed: float           # Speed at which groups of up to 3 unlock
    min_gap: float
    min_speed: float                # Not eligible below this speed
    num_frames: int
    frame_rate: float
    collision_boxes: Tuple[CollisionBox, ...]

    @property
    def groupable(self) -> bool:
        return self.kind is not ObstacleKind.PTERODACTYL


@dataclass
class Star:
    """A single night-sky star."""
    x: float
    y: float
    sprite_index: int

    def to_client_state(self):
        return {"x": round(self.x, 2), "y": round(self.y, 2), "sprite": self.sprite_index}


def _boxes(raw) -> Tuple[CollisionBox, ...]:
    return tuple(CollisionBox(*box) for box in raw)


def _build_obstacle_types() -> Dict[ObstacleKind, ObstacleType]:
    types = {}
    for name, spec in OBSTACLE_SPECS.items():
        kind = ObstacleKind(name)
        types[kind] = ObstacleType(
            kind=kind,
            width=spec["width"],
            height=spec["height"],
            y_positions=tuple(spec["y_positions"]),
            multiple_speed=spec["multiple_speed"],
            min_gap=spec["min_gap"],
            min_speed=spec["min_speed"],
            num_frames=spec["num_frames"],
            frame_rate=spec["frame_rate"],
            collision_boxes=_boxes(spec["collision_boxes"]),
        )
    return types


TREX_RUNNING_BOXES = _boxes(TREX_RUNNING_COLLISION_BOXES)
TREX_DUCKING_BOXES = _boxes(TREX_DUCKING_COLLISION_BOXES)

OBSTACLE_TYPES = _build_obstacle_types()
# Selection order is part of deterministic replay for a given seed.
OBSTACLE_TYPE_ORDER = (
    OBSTACLE_TYPES[ObstacleKind.CACTUS_SMALL],
    OBSTACLE_TYPES[ObstacleKind.CACTUS_LARGE],
    OBSTACLE_TYPES[ObstacleKind.PTERODACTYL],
)
