"""Tests for horizon.py: spawn policy, clouds, ground and night sky."""

import random
import sys
from pathlib import Path

# Ensure src/ is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from dino_runner.constants import (
    MS_PER_FRAME, CLEAR_TIME, MAX_CLOUDS, MAX_OBSTACLE_DUPLICATION, GROUND_SEGMENT_WIDTH,
    MOON_PHASES
)
from dino_runner.data_models import ObstacleKind
from dino_runner.horizon import Cloud, Horizon, HorizonLine, NightMode


def longest_run(kinds):
    best = run = 0
    previous = None
    for kind in kinds:
        run = run + 1 if kind is previous else 1
        previous = kind
        best = max(best, run)
    return best


class TestObstacleSpawning:
    def test_no_obstacles_before_clear_time(self):
        horizon = Horizon(rng=random.Random(1))
        while horizon.run_time + MS_PER_FRAME < CLEAR_TIME:
            horizon.update(MS_PER_FRAME, 6.0, True, False)
            assert horizon.obstacles == []

    def test_first_obstacle_after_clear_time(self):
        horizon = Horizon(rng=random.Random(1))
        for _ in range(200):
            horizon.update(MS_PER_FRAME, 6.0, True, False)
        assert len(horizon.obstacles) >= 1
        assert horizon.obstacles[0].type.kind is not ObstacleKind.PTERODACTYL

    def test_no_spawn_without_obstacle_flag(self):
        horizon = Horizon(rng=random.Random(1))
        for _ in range(400):
            horizon.update(MS_PER_FRAME, 6.0, False, False)
        assert horizon.obstacles == []

    def test_next_spawn_waits_for_gap(self):
        horizon = Horizon(rng=random.Random(4))
        horizon.run_time = CLEAR_TIME
        horizon.update(MS_PER_FRAME, 6.0, True, False)
        assert len(horizon.obstacles) == 1
        horizon.update(MS_PER_FRAME, 6.0, True, False)
        assert len(horizon.obstacles) == 1

    def test_obstacles_keep_spawn_order(self):
        """Obstacles stay ordered left to right in spawn order."""
        horizon = Horizon(rng=random.Random(8))
        for _ in range(3000):
            horizon.update(MS_PER_FRAME, 10.0, True, False)
            xs = [o.x for o in horizon.obstacles]
            assert xs == sorted(xs)

    def test_duplicate_cap(self):
        """Never more than two of the same kind in a row."""
        for speed in (6.0, 10.0):
            horizon = Horizon(rng=random.Random(21))
            kinds = [horizon.select_obstacle_type(speed).kind for _ in range(2000)]
            assert longest_run(kinds) <= MAX_OBSTACLE_DUPLICATION

    def test_pterodactyl_needs_speed(self):
        horizon = Horizon(rng=random.Random(13))
        kinds = {horizon.select_obstacle_type(8.0).kind for _ in range(500)}
        assert ObstacleKind.PTERODACTYL not in kinds
        kinds = {horizon.select_obstacle_type(9.0).kind for _ in range(500)}
        assert ObstacleKind.PTERODACTYL in kinds

    def test_groups_need_speed(self):
        horizon = Horizon(rng=random.Random(17))
        for _ in range(300):
            assert horizon.add_obstacle(3.0).size == 1
        sizes = {horizon.add_obstacle(13.0).size for _ in range(300)}
        assert sizes == {1, 2, 3}

    def test_pterodactyls_never_group(self):
        horizon = Horizon(rng=random.Random(19))
        for _ in range(500):
            obstacle = horizon.add_obstacle(13.0)
            if obstacle.type.kind is ObstacleKind.PTERODACTYL:
                assert obstacle.size == 1

    def test_reset_clears_obstacles(self):
        horizon = Horizon(rng=random.Random(1))
        horizon.add_obstacle(6.0)
        horizon.reset()
        assert horizon.obstacles == []
        assert horizon.run_time == 0
        assert horizon.last_obstacle_kind is None
        assert 1 <= len(horizon.clouds) <= 3


class TestClouds:
    def test_cloud_scroll_ceiled(self):
        cloud = Cloud(x=100, y=40, gap=150)
        cloud.update(16, 6.0)
        assert cloud.x == 99

    def test_cloud_removed_off_screen(self):
        cloud = Cloud(x=-46, y=40, gap=150)
        cloud.update(16, 6.0)
        assert cloud.remove is True

    def test_cloud_cap(self):
        horizon = Horizon(rng=random.Random(2))
        for _ in range(5000):
            horizon.update(MS_PER_FRAME, 13.0, False, False)
            assert 0 < len(horizon.clouds) <= MAX_CLOUDS

    def test_initial_clouds(self):
        for seed in range(20):
            horizon = Horizon(rng=random.Random(seed))
            assert 1 <= len(horizon.clouds) <= 3


class TestHorizonLine:
    def test_segments_stay_contiguous(self):
        line = HorizonLine()
        for _ in range(500):
            line.update(MS_PER_FRAME, 7.0)
            first, second = line.x_positions
            assert abs(first - second) == GROUND_SEGMENT_WIDTH
            assert min(line.x_positions) > -GROUND_SEGMENT_WIDTH

    def test_reset(self):
        line = HorizonLine()
        line.update(MS_PER_FRAME, 6.0)
        line.reset()
        assert line.x_positions == [0.0, GROUND_SEGMENT_WIDTH]


class TestNightMode:
    def test_fade_in_advances_phase(self):
        night = NightMode(600, random.Random(3))
        night.update(MS_PER_FRAME, True)
        assert night.activated is True
        assert night.phase == 1
        assert night.moon_phase_offset == MOON_PHASES[1]
        assert 0 < night.opacity < 1
        for _ in range(40):
            night.update(MS_PER_FRAME, True)
        assert night.opacity == 1.0
        assert night.phase == 1

    def test_fade_out_then_replace_stars(self):
        night = NightMode(600, random.Random(3))
        for _ in range(40):
            night.update(MS_PER_FRAME, True)
        before = [(s.x, s.y) for s in night.stars]

        night.update(MS_PER_FRAME, False)
        assert night.activated is True
        assert 0 < night.opacity < 1

        for _ in range(40):
            night.update(MS_PER_FRAME, False)
        assert night.opacity == 0
        assert night.activated is False
        assert [(s.x, s.y) for s in night.stars] != before

    def test_second_night_uses_next_phase(self):
        night = NightMode(600, random.Random(3))
        night.update(MS_PER_FRAME, True)
        for _ in range(60):
            night.update(MS_PER_FRAME, False)
        night.update(MS_PER_FRAME, True)
        assert night.phase == 2

    def test_sky_still_while_invisible(self):
        night = NightMode(600, random.Random(3))
        stars = [(s.x, s.y) for s in night.stars]
        for _ in range(100):
            night.update(MS_PER_FRAME, False)
        assert night.moon_x == 0
        assert [(s.x, s.y) for s in night.stars] == stars

    def test_moon_moves_at_night(self):
        night = NightMode(600, random.Random(3))
        for _ in range(10):
            night.update(MS_PER_FRAME, True)
        assert night.moon_x != 0
        assert -20 <= night.moon_x <= 600

    def test_stars_spread_over_segments(self):
        night = NightMode(600, random.Random(9))
        assert len(night.stars) == 2
        assert 0 <= night.stars[0].x < 300 <= night.stars[1].x < 600
        assert all(0 <= s.y < 70 for s in night.stars)
