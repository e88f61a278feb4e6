"""
trex.py: The player character, its jump/duck physics and animation timers.
"""

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from .constants import (
    TREX_START_X, TREX_GROUND_Y, TREX_WIDTH, TREX_HEIGHT, TREX_WIDTH_DUCK,
    TREX_HEIGHT_DUCK, GRAVITY, INITIAL_JUMP_VELOCITY, DROP_VELOCITY,
    SPEED_DROP_VELOCITY, SPEED_DROP_COEFFICIENT, MIN_JUMP_HEIGHT,
    MAX_JUMP_HEIGHT, MAX_BLINK_COUNT, BLINK_DURATION, MAX_BLINK_DELAY,
    RUN_FRAME_RATE, DUCK_FRAME_RATE
)
from .data_models import CollisionBox, TREX_RUNNING_BOXES, TREX_DUCKING_BOXES
from .physics_core import frames_elapsed, round_half_away


class TrexStatus(Enum):
    WAITING = "waiting"
    RUNNING = "running"
    JUMPING = "jumping"
    DUCKING = "ducking"
    CRASHED = "crashed"


@dataclass
class Trex:
    """The player state, mutated by its own update and by input handlers."""
    rng: random.Random = field(default_factory=random.Random, repr=False)

    x: float = TREX_START_X
    y: float = TREX_GROUND_Y
    status: TrexStatus = TrexStatus.WAITING

    # Jump physics
    jump_velocity: float = 0.0
    jumping: bool = False
    ducking: bool = False
    reached_min_height: bool = False
    speed_drop: bool = False
    duck_queued: bool = False       # Duck requested mid-air, applied on landing
    jump_count: int = 0

    # Waiting-state blink
    blink_count: int = 0
    blink_timer: float = 0.0
    blink_delay: float = 0.0
    blinking: bool = False

    # Running / ducking leg animation
    run_timer: float = 0.0
    run_frame: int = 0

    @property
    def width(self) -> float:
        return TREX_WIDTH_DUCK if self.status is TrexStatus.DUCKING else TREX_WIDTH

    @property
    def height(self) -> float:
        return TREX_HEIGHT_DUCK if self.status is TrexStatus.DUCKING else TREX_HEIGHT

    @property
    def collision_boxes(self) -> Tuple[CollisionBox, ...]:
        if self.status is TrexStatus.DUCKING:
            return TREX_DUCKING_BOXES
        return TREX_RUNNING_BOXES

    @property
    def frame(self) -> int:
        """Sprite frame for the current pose."""
        if self.status is TrexStatus.WAITING:
            return 1 if self.blinking else 0
        if self.status in (TrexStatus.RUNNING, TrexStatus.DUCKING):
            return self.run_frame
        return 0

    @property
    def on_ground(self) -> bool:
        return not self.jumping and self.y >= TREX_GROUND_Y

    def update(self, delta_ms: float):
        """Advances animation and, while airborne, the jump integration."""
        if self.status is TrexStatus.WAITING:
            self._update_blink(delta_ms)
        elif self.status is TrexStatus.RUNNING:
            self._update_legs(delta_ms, RUN_FRAME_RATE)
        elif self.status is TrexStatus.JUMPING:
            self._update_jump(frames_elapsed(delta_ms))
        elif self.status is TrexStatus.DUCKING:
            self._update_legs(delta_ms, DUCK_FRAME_RATE)

    def _update_blink(self, delta_ms: float):
        self.blink_timer += delta_ms
        if self.blinking:
            if self.blink_timer >= BLINK_DURATION:
                self.blinking = False
                self.blink_timer = 0.0
                self.blink_count += 1
                self.blink_delay = float(math.ceil(self.rng.random() * MAX_BLINK_DELAY))
        elif self.blink_timer >= self.blink_delay and self.blink_count < MAX_BLINK_COUNT:
            self.blinking = True
            self.blink_timer = 0.0

    def _update_legs(self, delta_ms: float, frame_rate: float):
        self.run_timer += delta_ms
        if self.run_timer >= frame_rate:
            self.run_frame = (self.run_frame + 1) % 2
            self.run_timer = 0.0

    def _update_jump(self, frames: float):
        if self.speed_drop:
            self.y += round_half_away(self.jump_velocity * SPEED_DROP_COEFFICIENT * frames)
        else:
            self.y += round_half_away(self.jump_velocity * frames)
        self.jump_velocity += GRAVITY * frames

        if self.y < TREX_GROUND_Y - MIN_JUMP_HEIGHT or self.speed_drop:
            self.reached_min_height = True

        # MAX_JUMP_HEIGHT is an absolute y; crossing it starts the descent.
        if self.y < MAX_JUMP_HEIGHT or self.speed_drop:
            self.end_jump()

        if self.y >= TREX_GROUND_Y:
            self._land()

    def _land(self):
        self.y = TREX_GROUND_Y
        self.jump_velocity = 0.0
        self.jumping = False
        self.reached_min_height = False
        self.speed_drop = False

        if self.duck_queued:
            self.duck_queued = False
            self.ducking = True
            self.status = TrexStatus.DUCKING
        else:
            self.status = TrexStatus.RUNNING

    def start_jump(self, speed: float):
        if self.status is TrexStatus.CRASHED:
            return
        if self.status is TrexStatus.JUMPING or self.jumping:
            return

        self.status = TrexStatus.JUMPING
        self.jumping = True
        self.ducking = False
        self.reached_min_height = False
        self.speed_drop = False
        self.jump_velocity = INITIAL_JUMP_VELOCITY - speed / 10
        self.jump_count += 1

    def end_jump(self):
        """Cuts the ascent short, but never before the minimum height is reached."""
        if self.reached_min_height and self.jump_velocity < DROP_VELOCITY:
            self.jump_velocity = DROP_VELOCITY

    def set_speed_drop(self):
        self.speed_drop = True
        self.jump_velocity = SPEED_DROP_VELOCITY

    def set_duck(self, is_ducking: bool):
        if self.status is TrexStatus.CRASHED:
            return

        if is_ducking and self.status is TrexStatus.JUMPING:
            self.set_speed_drop()
            self.duck_queued = True
            return

        if not is_ducking:
            self.duck_queued = False

        if is_ducking:
            self.ducking = True
            self.status = TrexStatus.DUCKING
        elif not is_ducking and self.status is TrexStatus.DUCKING:
            self.ducking = False
            self.status = TrexStatus.RUNNING

    def crash(self):
        self.status = TrexStatus.CRASHED

    def reset(self):
        """Back to the initial waiting pose; the random source is kept."""
        self.x = TREX_START_X
        self.y = TREX_GROUND_Y
        self.status = TrexStatus.WAITING
        self.jump_velocity = 0.0
        self.jumping = False
        self.ducking = False
        self.reached_min_height = False
        self.speed_drop = False
        self.duck_queued = False
        self.jump_count = 0
        self.blink_count = 0
        self.blink_timer = 0.0
        self.blink_delay = 0.0
        self.blinking = False
        self.run_timer = 0.0
        self.run_frame = 0

    def to_client_state(self):
        """Prepares a minimal state dictionary for rendering."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "status": self.status.value,
            "frame": self.frame,
            "v": round(self.jump_velocity, 4),
        }
