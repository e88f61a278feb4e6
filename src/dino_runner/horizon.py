"""
horizon.py: The scrolling world: ground, clouds, night sky and the obstacle spawn policy.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .constants import (
    WORLD_WIDTH, CLEAR_TIME, CLOUD_FREQUENCY, MAX_CLOUDS, MAX_OBSTACLE_LENGTH,
    MAX_OBSTACLE_DUPLICATION, GAP_COEFFICIENT, GROUND_SEGMENT_WIDTH,
    CLOUD_WIDTH, MIN_CLOUD_GAP, MAX_CLOUD_GAP, MAX_SKY_LEVEL, MIN_SKY_LEVEL,
    NIGHT_FADE_SPEED, MOON_SPEED, STAR_SPEED, NUM_STARS, STAR_SIZE, STAR_MAX_Y,
    MOON_WIDTH, MOON_Y, MOON_PHASES
)
from .data_models import ObstacleKind, ObstacleType, Star, OBSTACLE_TYPE_ORDER
from .obstacle import Obstacle
from .physics_core import frames_elapsed, scroll_increment, cloud_increment

logger = logging.getLogger(__name__)


@dataclass
class Cloud:
    """Purely cosmetic; scrolls slower than the ground."""
    x: float
    y: float
    gap: float
    remove: bool = False

    def update(self, delta_ms: float, speed: float):
        self.x -= cloud_increment(speed, delta_ms)
        if self.x + CLOUD_WIDTH < 0:
            self.remove = True

    def to_client_state(self):
        return {"x": self.x, "y": round(self.y, 2)}


class HorizonLine:
    """Two ground segments laid end to end, wrapped as they leave the screen."""

    def __init__(self, segment_width: float = GROUND_SEGMENT_WIDTH):
        self.segment_width = segment_width
        self.reset()

    def reset(self):
        self.x_positions = [0.0, float(self.segment_width)]

    def update(self, delta_ms: float, speed: float):
        increment = scroll_increment(speed, delta_ms)
        self.x_positions[0] -= increment
        self.x_positions[1] -= increment

        if self.x_positions[0] + self.segment_width <= 0:
            self.x_positions[0] = self.x_positions[1] + self.segment_width
        if self.x_positions[1] + self.segment_width <= 0:
            self.x_positions[1] = self.x_positions[0] + self.segment_width


class NightMode:
    """
    Moon and stars. Fades in while night is requested and out otherwise;
    the star field is only re-placed once fully faded out.
    """

    def __init__(self, container_width: float, rng: random.Random):
        self.container_width = container_width
        self.rng = rng
        self.opacity = 0.0
        self.moon_x = 0.0
        self.moon_y = MOON_Y
        self.phase = 0
        self.activated = False
        self.stars: List[Star] = []
        self.place_stars()

    def place_stars(self):
        segment = self.container_width / NUM_STARS
        self.stars = [
            Star(x=segment * i + self.rng.random() * segment,
                 y=self.rng.random() * STAR_MAX_Y,
                 sprite_index=i % 2)
            for i in range(NUM_STARS)
        ]

    @property
    def moon_phase_offset(self) -> int:
        return MOON_PHASES[self.phase]

    def update(self, delta_ms: float, show_night_mode: bool):
        frames = frames_elapsed(delta_ms)

        if show_night_mode:
            if not self.activated:
                self.activated = True
                self.phase = (self.phase + 1) % len(MOON_PHASES)
            self.opacity = min(1.0, self.opacity + NIGHT_FADE_SPEED * frames)
        else:
            if self.activated and self.opacity <= 0:
                self.activated = False
                self.place_stars()
            self.opacity = max(0.0, self.opacity - NIGHT_FADE_SPEED * frames)

        if self.opacity <= 0:
            return

        self.moon_x -= MOON_SPEED * frames
        if self.moon_x < -MOON_WIDTH:
            self.moon_x = self.container_width

        for star in self.stars:
            star.x -= STAR_SPEED * frames
            if star.x < -STAR_SIZE:
                star.x = self.container_width

    def reset(self):
        self.opacity = 0.0
        self.moon_x = 0.0
        self.moon_y = MOON_Y
        self.phase = 0
        self.activated = False
        self.place_stars()

    def to_client_state(self):
        return {
            "opacity": round(self.opacity, 4),
            "moon": {"x": round(self.moon_x, 2), "y": self.moon_y,
                     "phase": self.phase, "offset": self.moon_phase_offset},
            "stars": [star.to_client_state() for star in self.stars],
        }


class Horizon:
    """
    Owns every scrolling entity. Obstacles and clouds are kept in spawn
    order and compacted after each update.
    """

    def __init__(self, width: float = WORLD_WIDTH, rng: Optional[random.Random] = None):
        self.width = width
        self.rng = rng if rng is not None else random.Random()
        self.horizon_line = HorizonLine()
        self.night_mode = NightMode(container_width=width, rng=self.rng)
        self.clouds: List[Cloud] = []
        self.obstacles: List[Obstacle] = []
        self.last_obstacle_kind: Optional[ObstacleKind] = None
        self.duplicate_count = 0
        self.run_time = 0.0
        self._add_initial_clouds()

    def update(self, delta_ms: float, speed: float, has_obstacles: bool,
               show_night_mode: bool):
        self.run_time += delta_ms
        self.horizon_line.update(delta_ms, speed)
        self._update_clouds(delta_ms, speed)
        self.night_mode.update(delta_ms, show_night_mode)
        if has_obstacles:
            self._update_obstacles(delta_ms, speed)

    # -------- Clouds --------

    def _add_initial_clouds(self):
        count = 1 + self.rng.randrange(3)
        for _ in range(count):
            self.clouds.append(Cloud(
                x=self.rng.random() * self.width,
                y=self._random_cloud_y(),
                gap=self._random_cloud_gap()))

    def _update_clouds(self, delta_ms: float, speed: float):
        for cloud in self.clouds:
            cloud.update(delta_ms, speed)
        self.clouds = [c for c in self.clouds if not c.remove]

        if len(self.clouds) >= MAX_CLOUDS:
            return
        if not self.clouds:
            self._add_cloud()
            return
        last = self.clouds[-1]
        distance_from_right = self.width - (last.x + CLOUD_WIDTH)
        if distance_from_right > last.gap and CLOUD_FREQUENCY > self.rng.random():
            self._add_cloud()

    def _add_cloud(self):
        self.clouds.append(Cloud(
            x=float(self.width), y=self._random_cloud_y(), gap=self._random_cloud_gap()))

    def _random_cloud_y(self) -> float:
        return MAX_SKY_LEVEL + self.rng.random() * (MIN_SKY_LEVEL - MAX_SKY_LEVEL)

    def _random_cloud_gap(self) -> float:
        return MIN_CLOUD_GAP + self.rng.random() * (MAX_CLOUD_GAP - MIN_CLOUD_GAP)

    # -------- Obstacles --------

    def _update_obstacles(self, delta_ms: float, speed: float):
        for obstacle in self.obstacles:
            obstacle.update(delta_ms, speed)
        self.obstacles = [o for o in self.obstacles if not o.remove]

        if self.run_time < CLEAR_TIME:
            return

        if not self.obstacles:
            self.add_obstacle(speed)
            return
        last = self.obstacles[-1]
        if last.is_visible() and last.x + last.width + last.gap < self.width:
            self.add_obstacle(speed)

    def add_obstacle(self, speed: float) -> Obstacle:
        obstacle_type = self.select_obstacle_type(speed)

        size = 1
        if obstacle_type.groupable and obstacle_type.multiple_speed <= speed:
            size = 1 + self.rng.randrange(MAX_OBSTACLE_LENGTH)

        obstacle = Obstacle.spawn(obstacle_type, speed, self.rng, size=size,
                                  x=self.width, gap_coefficient=GAP_COEFFICIENT)
        self.obstacles.append(obstacle)
        logger.debug("Spawned %s x%d (gap %.1f) at speed %.3f",
                     obstacle_type.kind.value, size, obstacle.gap, speed)
        return obstacle

    def select_obstacle_type(self, speed: float) -> ObstacleType:
        """
        Uniform pick among speed-eligible types; after MAX_OBSTACLE_DUPLICATION
        repeats a different type is forced when one is eligible.
        """
        available = [t for t in OBSTACLE_TYPE_ORDER if t.min_speed <= speed]
        chosen = self.rng.choice(available)

        if chosen.kind is self.last_obstacle_kind:
            self.duplicate_count += 1
            if self.duplicate_count >= MAX_OBSTACLE_DUPLICATION:
                others = [t for t in available if t.kind is not self.last_obstacle_kind]
                if others:
                    chosen = self.rng.choice(others)
                    self.duplicate_count = 0
        else:
            self.duplicate_count = 0

        self.last_obstacle_kind = chosen.kind
        return chosen

    def reset(self):
        self.obstacles = []
        self.clouds = []
        self.horizon_line.reset()
        self.night_mode.reset()
        self.last_obstacle_kind = None
        self.duplicate_count = 0
        self.run_time = 0.0
        self._add_initial_clouds()

    def to_client_state(self):
        return {
            "ground": list(self.horizon_line.x_positions),
            "clouds": [c.to_client_state() for c in self.clouds],
            "obstacles": [o.to_client_state() for o in self.obstacles],
            "night": self.night_mode.to_client_state(),
        }
