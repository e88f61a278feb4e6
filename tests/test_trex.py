"""Tests for trex.py: jump physics, ducking and animation timers."""

import random
import sys
from pathlib import Path

# Ensure src/ is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from dino_runner.constants import (
    MS_PER_FRAME, TREX_GROUND_Y, MIN_JUMP_HEIGHT, INITIAL_JUMP_VELOCITY,
    DROP_VELOCITY, TREX_WIDTH, TREX_WIDTH_DUCK, TREX_HEIGHT_DUCK, MAX_BLINK_COUNT
)
from dino_runner.data_models import TREX_DUCKING_BOXES, TREX_RUNNING_BOXES
from dino_runner.trex import Trex, TrexStatus


def running_trex(seed=0):
    trex = Trex(rng=random.Random(seed))
    trex.status = TrexStatus.RUNNING
    return trex


def run_until_landed(trex, delta=MS_PER_FRAME, limit=500):
    """Ticks until the jump ends; returns (ticks, lowest y reached)."""
    apex = trex.y
    for tick in range(1, limit + 1):
        trex.update(delta)
        apex = min(apex, trex.y)
        if not trex.jumping:
            return tick, apex
    raise AssertionError("trex never landed")


class TestJump:
    def test_initial_state(self):
        """Trex starts waiting on the ground at full standing size."""
        trex = Trex()
        assert trex.status is TrexStatus.WAITING
        assert trex.y == TREX_GROUND_Y
        assert trex.width == TREX_WIDTH

    def test_start_jump_velocity_depends_on_speed(self):
        """Initial velocity is the base jump velocity minus a tenth of the speed."""
        trex = running_trex()
        trex.start_jump(8.0)
        assert trex.status is TrexStatus.JUMPING
        assert trex.jumping is True
        assert trex.jump_velocity == INITIAL_JUMP_VELOCITY - 0.8
        assert trex.jump_count == 1

    def test_start_jump_ignored_while_airborne(self):
        """A second jump request mid-air changes nothing."""
        trex = running_trex()
        trex.start_jump(6.0)
        trex.update(MS_PER_FRAME)
        velocity = trex.jump_velocity
        trex.start_jump(6.0)
        assert trex.jump_velocity == velocity
        assert trex.jump_count == 1

    def test_jump_returns_to_ground(self):
        """Any speed: an uninterrupted jump lands exactly on the ground at rest."""
        for speed in (6.0, 8.5, 10.0, 13.0):
            trex = running_trex()
            trex.start_jump(speed)
            ticks, apex = run_until_landed(trex)
            assert trex.y == TREX_GROUND_Y
            assert trex.jump_velocity == 0
            assert trex.status is TrexStatus.RUNNING
            assert apex < TREX_GROUND_Y
            assert ticks < 100

    def test_jump_lands_with_uneven_deltas(self):
        """Landing snaps to the ground even with irregular frame times."""
        trex = running_trex()
        trex.start_jump(6.0)
        deltas = [10.0, 16.67, 33.0, 50.0, 7.5]
        for i in range(200):
            trex.update(deltas[i % len(deltas)])
            if not trex.jumping:
                break
        assert trex.y == TREX_GROUND_Y
        assert trex.jump_velocity == 0

    def test_on_ground_only_between_jumps(self):
        trex = running_trex()
        assert trex.on_ground is True
        trex.start_jump(6.0)
        trex.update(MS_PER_FRAME)
        assert trex.on_ground is False
        run_until_landed(trex)
        assert trex.on_ground is True

    def test_immediate_release_keeps_minimum_height(self):
        """Releasing right after the press never makes a jump lower than the minimum."""
        trex = running_trex()
        trex.start_jump(6.0)
        trex.end_jump()
        assert trex.jump_velocity < DROP_VELOCITY
        _, apex = run_until_landed(trex)
        assert apex <= TREX_GROUND_Y - MIN_JUMP_HEIGHT

    def test_release_after_min_height_shortens_jump(self):
        """Releasing once the minimum height is reached lowers the apex."""
        full = running_trex()
        full.start_jump(6.0)
        _, full_apex = run_until_landed(full)

        short = running_trex()
        short.start_jump(6.0)
        apex = short.y
        released = False
        for _ in range(200):
            short.update(MS_PER_FRAME)
            apex = min(apex, short.y)
            if short.reached_min_height and not released:
                short.end_jump()
                released = True
                assert short.jump_velocity == DROP_VELOCITY
            if not short.jumping:
                break

        assert released
        assert apex > full_apex
        assert apex <= TREX_GROUND_Y - MIN_JUMP_HEIGHT

    def test_end_jump_before_min_height_is_ignored(self):
        """end_jump has no effect until reached_min_height is set."""
        trex = running_trex()
        trex.start_jump(6.0)
        velocity = trex.jump_velocity
        trex.end_jump()
        assert trex.jump_velocity == velocity
        assert trex.reached_min_height is False


class TestDuck:
    def test_duck_on_ground(self):
        """Ducking on the ground switches pose, size and collision boxes."""
        trex = running_trex()
        trex.set_duck(True)
        assert trex.status is TrexStatus.DUCKING
        assert trex.width == TREX_WIDTH_DUCK
        assert trex.height == TREX_HEIGHT_DUCK
        assert trex.collision_boxes == TREX_DUCKING_BOXES

        trex.set_duck(False)
        assert trex.status is TrexStatus.RUNNING
        assert trex.collision_boxes == TREX_RUNNING_BOXES

    def test_speed_drop_descends_faster(self):
        """Ducking mid-air lands sooner than the same jump left alone."""
        plain = running_trex()
        plain.start_jump(6.0)
        for _ in range(3):
            plain.update(MS_PER_FRAME)
        plain_ticks, _ = run_until_landed(plain)

        dropped = running_trex()
        dropped.start_jump(6.0)
        for _ in range(3):
            dropped.update(MS_PER_FRAME)
        dropped.set_duck(True)
        assert dropped.speed_drop is True
        assert dropped.duck_queued is True
        dropped_ticks, _ = run_until_landed(dropped)

        assert dropped_ticks < plain_ticks

    def test_queued_duck_applies_on_landing(self):
        """Holding duck through the landing ends the jump ducking."""
        trex = running_trex()
        trex.start_jump(6.0)
        trex.update(MS_PER_FRAME)
        trex.set_duck(True)
        run_until_landed(trex)
        assert trex.status is TrexStatus.DUCKING
        assert trex.duck_queued is False

    def test_released_duck_lands_running(self):
        """Releasing duck before landing clears the queued duck."""
        trex = running_trex()
        trex.start_jump(6.0)
        trex.update(MS_PER_FRAME)
        trex.set_duck(True)
        trex.set_duck(False)
        run_until_landed(trex)
        assert trex.status is TrexStatus.RUNNING

    def test_crashed_ignores_input(self):
        """A crashed trex neither jumps nor ducks."""
        trex = running_trex()
        trex.crash()
        trex.start_jump(6.0)
        trex.set_duck(True)
        assert trex.status is TrexStatus.CRASHED
        assert trex.jumping is False


class TestAnimation:
    def test_run_frames_alternate(self):
        """Running legs switch frame every 83 ms."""
        trex = running_trex()
        assert trex.frame == 0
        trex.update(83)
        assert trex.frame == 1
        trex.update(83)
        assert trex.frame == 0

    def test_duck_frames_are_slower(self):
        """Ducking legs switch frame every 125 ms."""
        trex = running_trex()
        trex.set_duck(True)
        trex.update(100)
        assert trex.frame == 0
        trex.update(25)
        assert trex.frame == 1

    def test_waiting_blinks_at_most_three_times(self):
        """The waiting trex blinks, each blink closes the eye for 100 ms, three blinks max."""
        trex = Trex(rng=random.Random(7))
        trex.update(16)
        assert trex.blinking is True
        assert trex.frame == 1
        trex.update(100)
        assert trex.blinking is False
        assert trex.blink_count == 1
        assert 0 <= trex.blink_delay <= 7000

        for _ in range(2000):
            trex.update(16)
        assert trex.blink_count == MAX_BLINK_COUNT
        assert trex.blinking is False

    def test_reset_restores_initial_pose(self):
        """reset() puts the trex back to waiting on the ground."""
        trex = running_trex()
        trex.start_jump(6.0)
        for _ in range(5):
            trex.update(MS_PER_FRAME)
        trex.reset()
        assert trex.status is TrexStatus.WAITING
        assert trex.y == TREX_GROUND_Y
        assert trex.jump_velocity == 0
        assert trex.jump_count == 0
