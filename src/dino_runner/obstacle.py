"""
obstacle.py: A single spawned hazard and its per-instance geometry.
"""

import random
from dataclasses import dataclass
from typing import List

from .constants import (
    WORLD_WIDTH, GAP_COEFFICIENT, MAX_GAP_COEFFICIENT, MAX_OBSTACLE_LENGTH
)
from .data_models import CollisionBox, ObstacleType
from .physics_core import scroll_increment, round_half_away


@dataclass
class Obstacle:
    """The authoritative obstacle state. Owned by the Horizon."""
    type: ObstacleType
    x: float
    y: float
    size: int = 1
    gap: float = 0.0
    remove: bool = False
    frame: int = 0
    frame_timer: float = 0.0

    def __post_init__(self):
        assert 1 <= self.size <= MAX_OBSTACLE_LENGTH, f"bad group size {self.size}"
        assert self.type.groupable or self.size == 1, "pterodactyls never group"

    @classmethod
    def spawn(cls, obstacle_type: ObstacleType, speed: float, rng: random.Random,
              size: int = 1, x: float = WORLD_WIDTH,
              gap_coefficient: float = GAP_COEFFICIENT) -> "Obstacle":
        """Creates an obstacle at the right edge with a randomized altitude and gap."""
        if len(obstacle_type.y_positions) > 1:
            y = rng.choice(obstacle_type.y_positions)
        else:
            y = obstacle_type.y_positions[0]
        obstacle = cls(type=obstacle_type, x=float(x), y=float(y), size=size)
        obstacle.gap = obstacle.compute_gap(speed, rng, gap_coefficient)
        return obstacle

    @property
    def width(self) -> float:
        return self.type.width * self.size

    @property
    def height(self) -> float:
        return self.type.height

    def compute_gap(self, speed: float, rng: random.Random,
                    gap_coefficient: float = GAP_COEFFICIENT) -> float:
        """Distance the next obstacle must wait for, scaled by the current speed."""
        min_gap = round_half_away(self.width * speed + self.type.min_gap * gap_coefficient)
        max_gap = round_half_away(min_gap * MAX_GAP_COEFFICIENT)
        return min_gap + rng.random() * (max_gap - min_gap)

    def collision_boxes(self) -> List[CollisionBox]:
        """World-space sub-boxes, replicated for every unit in the group."""
        boxes = []
        for i in range(self.size):
            offset_x = self.x + i * self.type.width
            for box in self.type.collision_boxes:
                boxes.append(box.offset(offset_x, self.y))
        return boxes

    def update(self, delta_ms: float, speed: float):
        self.x -= scroll_increment(speed, delta_ms)

        if self.type.num_frames > 1:
            self.frame_timer += delta_ms
            if self.frame_timer >= self.type.frame_rate:
                self.frame = (self.frame + 1) % self.type.num_frames
                self.frame_timer = 0.0

        if self.x + self.width <= 0:
            self.remove = True

    def is_visible(self) -> bool:
        return self.x + self.width > 0

    def to_client_state(self):
        return {
            "type": self.type.kind.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "size": self.size,
            "frame": self.frame,
        }
