"""
game_engine.py: The authoritative game simulation and its top-level state machine.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .constants import (
    WORLD_WIDTH, MS_PER_FRAME, INITIAL_SPEED, MAX_SPEED, ACCELERATION,
    CLEAR_TIME, INVERT_DISTANCE, INVERT_FADE_DURATION, GAME_OVER_CLEAR_TIME,
    SCORE_COEFFICIENT, ACHIEVEMENT_DISTANCE, FLASH_DURATION, FLASH_ITERATIONS
)
from .horizon import Horizon
from .physics_core import PhysicsCore
from .trex import Trex, TrexStatus

logger = logging.getLogger(__name__)

FLASH_TOGGLES = FLASH_ITERATIONS * 2   # One hide plus one show per blink


class GameState(Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    PAUSED = "paused"
    CRASHED = "crashed"


@dataclass
class GameEngine(PhysicsCore):
    """
    The engine managing the entire world state.
    Inherits collision detection from PhysicsCore.

    `sounds` needs play_jump/play_score/play_game_over, `score_store`
    needs load() -> int and save(int). Both are optional.
    """
    seed: Optional[int] = None
    sounds: Any = None
    score_store: Any = None
    width: float = WORLD_WIDTH

    state: GameState = GameState.WAITING
    current_speed: float = INITIAL_SPEED
    distance_ran: float = 0.0
    high_score: int = 0
    running_time: float = 0.0
    ready: bool = False

    # Night-mode toggling
    show_night_mode: bool = False
    invert_timer: float = 0.0
    last_invert_trigger: int = 0

    game_over_timer: float = 0.0

    # Achievement flash
    flash_timer: float = 0.0
    flash_count: int = FLASH_TOGGLES
    last_achievement: int = 0
    score_visible: bool = True

    rng: random.Random = field(init=False, repr=False)
    trex: Trex = field(init=False, repr=False)
    horizon: Horizon = field(init=False, repr=False)

    def __post_init__(self):
        self.rng = random.Random(self.seed)
        self.trex = Trex(rng=self.rng)
        self.horizon = Horizon(width=self.width, rng=self.rng)

    @property
    def score(self) -> int:
        return math.floor(self.distance_ran * SCORE_COEFFICIENT)

    # -------- Collaborators --------

    def init(self):
        """Starts the sounds, loads the persisted high score and marks the engine ready."""
        if self.sounds is not None and hasattr(self.sounds, "init"):
            try:
                self.sounds.init()
            except Exception as e:
                logger.warning("Could not start sounds: %s", e)
        if self.score_store is not None:
            try:
                self.high_score = int(self.score_store.load() or 0)
            except Exception as e:
                logger.warning("Could not load high score: %s", e)
                self.high_score = 0
        self.ready = True
        logger.info("Engine ready (high score %d)", self.high_score)

    def _play(self, name: str):
        """Fire-and-forget sound effect; failures never reach the simulation."""
        if self.sounds is None:
            return
        try:
            getattr(self.sounds, name)()
        except Exception as e:
            logger.debug("Sound %s failed: %s", name, e)

    def _save_high_score(self):
        if self.score_store is None:
            return
        try:
            self.score_store.save(self.high_score)
        except Exception as e:
            logger.warning("Could not save high score: %s", e)

    # -------- Tick --------

    def update(self, delta_ms: float):
        """Advances the world by one frame. `delta_ms` is pre-clamped by the host."""
        if self.state is GameState.WAITING:
            self.trex.update(delta_ms)
        elif self.state is GameState.PLAYING:
            self._update_playing(delta_ms)
        elif self.state is GameState.CRASHED:
            self.game_over_timer += delta_ms

    def _update_playing(self, delta_ms: float):
        self.running_time += delta_ms
        has_obstacles = self.running_time > CLEAR_TIME

        # 1. Player, then the world it runs through
        self.trex.update(delta_ms)
        self.horizon.update(delta_ms, self.current_speed, has_obstacles, self.show_night_mode)

        # 2. Collision against this tick's obstacle positions
        if has_obstacles and self.horizon.obstacles and \
                self.check_collision(self.trex, self.horizon.obstacles):
            self.game_over()
            return

        # 3. Distance & speed
        self.distance_ran += self.current_speed * delta_ms / MS_PER_FRAME
        if self.current_speed < MAX_SPEED:
            self.current_speed = min(MAX_SPEED, self.current_speed + ACCELERATION)

        # 4. Night mode and achievement flash
        self._update_night_mode(delta_ms)
        self._update_score_flash(delta_ms)

    def _update_night_mode(self, delta_ms: float):
        trigger = self.score // INVERT_DISTANCE
        if trigger > self.last_invert_trigger:
            self.last_invert_trigger = trigger
            self.show_night_mode = not self.show_night_mode
            self.invert_timer = 0.0

        if self.show_night_mode:
            self.invert_timer += delta_ms
            if self.invert_timer >= INVERT_FADE_DURATION:
                self.show_night_mode = False
                self.invert_timer = 0.0

    def _update_score_flash(self, delta_ms: float):
        current = self.score
        if current > 0:
            achievement = current // ACHIEVEMENT_DISTANCE
            if achievement > self.last_achievement:
                self.last_achievement = achievement
                self.flash_timer = 0.0
                self.flash_count = 0
                self.score_visible = False
                self._play("play_score")

        if self.flash_count < FLASH_TOGGLES:
            self.flash_timer += delta_ms
            if self.flash_timer >= FLASH_DURATION:
                self.flash_timer = 0.0
                self.flash_count += 1
                self.score_visible = not self.score_visible
        else:
            self.score_visible = True

    # -------- State transitions --------

    def start_game(self):
        self.state = GameState.PLAYING
        self.trex.status = TrexStatus.RUNNING
        self.current_speed = INITIAL_SPEED
        self.distance_ran = 0.0
        self.running_time = 0.0
        self.show_night_mode = False
        self.invert_timer = 0.0
        self.last_invert_trigger = 0
        logger.info("Round started")

    def game_over(self):
        self.state = GameState.CRASHED
        self.trex.crash()
        self._play("play_game_over")

        current = self.score
        if current > self.high_score:
            self.high_score = current
            self._save_high_score()

        self.game_over_timer = 0.0
        logger.info("Game over: score %d, high score %d", current, self.high_score)

    def restart(self):
        """Starts a fresh round, but only once the post-crash cooldown has elapsed."""
        if self.state is not GameState.CRASHED:
            return
        if self.game_over_timer < GAME_OVER_CLEAR_TIME:
            return

        self.trex.reset()
        self.horizon.reset()
        self.distance_ran = 0.0
        self.current_speed = INITIAL_SPEED
        self.running_time = 0.0
        self.show_night_mode = False
        self.invert_timer = 0.0
        self.last_invert_trigger = 0
        self.game_over_timer = 0.0
        self.flash_timer = 0.0
        self.flash_count = FLASH_TOGGLES
        self.last_achievement = 0
        self.score_visible = True

        self.state = GameState.PLAYING
        self.trex.status = TrexStatus.RUNNING
        logger.info("Round restarted")

    def pause(self):
        if self.state is GameState.PLAYING:
            self.state = GameState.PAUSED
            logger.info("Paused")

    def resume(self):
        if self.state is GameState.PAUSED:
            self.state = GameState.PLAYING
            logger.info("Resumed")

    # -------- Input --------

    def on_action_start(self):
        """Jump / tap."""
        if self.state is GameState.WAITING:
            self.start_game()
            self.trex.start_jump(self.current_speed)
            self._play("play_jump")
        elif self.state is GameState.PLAYING:
            if not self.trex.jumping:
                self._play("play_jump")
            self.trex.start_jump(self.current_speed)
        elif self.state is GameState.PAUSED:
            self.resume()
        elif self.state is GameState.CRASHED:
            self.restart()

    def on_action_end(self):
        self.trex.end_jump()

    def on_duck_start(self):
        self.trex.set_duck(True)

    def on_duck_end(self):
        self.trex.set_duck(False)

    # -------- Render query --------

    def to_client_state(self):
        """Everything a renderer needs for the current frame."""
        state = {
            "state": self.state.value,
            "trex": self.trex.to_client_state(),
            "score": self.score,
            "high_score": self.high_score,
            "score_visible": self.score_visible,
            "night_mode": self.show_night_mode,
            "speed": round(self.current_speed, 4),
            "distance": round(self.distance_ran, 2),
            "ready": self.ready,
        }
        state.update(self.horizon.to_client_state())
        return state
