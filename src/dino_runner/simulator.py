#!/usr/bin/env python3
"""Headless game simulator: runs the engine with a policy and records replay frames."""

from typing import Callable, Optional

from .constants import MS_PER_FRAME, FPS, TREX_GROUND_Y, TREX_HEIGHT, TREX_HEIGHT_DUCK
from .game_engine import GameEngine, GameState

# Safety limit: stop if a round exceeds this many ticks (~5 minutes at 60fps)
MAX_TICKS = 18_000

JUMP = "jump"
DUCK = "duck"


def jump_over_obstacles(engine: GameEngine, lookahead: float = 5.0) -> Optional[str]:
    """
    Simple autopilot: once the nearest obstacle is within `lookahead` frames
    of travel, duck under pterodactyls flying at head height and jump
    everything else that is low enough to hit.
    """
    trex = engine.trex
    for obstacle in engine.horizon.obstacles:
        if obstacle.x + obstacle.width < trex.x:
            continue
        if obstacle.x - (trex.x + trex.width) > engine.current_speed * lookahead:
            return None
        bottom = obstacle.y + obstacle.height
        if bottom <= TREX_GROUND_Y:
            return None
        if bottom <= TREX_GROUND_Y + TREX_HEIGHT - TREX_HEIGHT_DUCK:
            return DUCK
        return JUMP
    return None


def simulate(policy: Callable[[GameEngine], Optional[str]] = jump_over_obstacles,
             seed: int = 0, max_ticks: int = MAX_TICKS,
             delta_ms: float = MS_PER_FRAME, record_every: int = 6):
    """
    Run one headless round.

    Args:
        policy: called every tick with the engine, returns "jump", "duck" or None.
            Returning an action holds the matching input down; returning
            something else releases it.
        seed: random seed for deterministic replay
        max_ticks: tick limit for a round that never crashes
        delta_ms: fixed tick length
        record_every: keep one frame out of this many

    Returns:
        dict: {
            'score': int,
            'ticks': int,
            'seed': int,
            'crashed': bool,
            'frames': list of to_client_state() dicts plus 'tick' and 'action'
        }
    """
    engine = GameEngine(seed=seed)
    engine.init()
    engine.on_action_start()
    engine.on_action_end()

    frames = []
    held = None
    tick = 0

    while engine.state is GameState.PLAYING and tick < max_ticks:
        action = policy(engine)
        if action != held:
            # Release the previous input before pressing the next one
            if held == JUMP:
                engine.on_action_end()
            elif held == DUCK:
                engine.on_duck_end()
            if action == JUMP:
                engine.on_action_start()
            elif action == DUCK:
                engine.on_duck_start()
            held = action if action in (JUMP, DUCK) else None
        elif held == JUMP and engine.trex.on_ground:
            # Still held after landing: jump again
            engine.on_action_start()

        engine.update(delta_ms)
        tick += 1

        if tick % record_every == 0:
            frame = engine.to_client_state()
            frame["tick"] = tick
            frame["action"] = held
            frames.append(frame)

    # Record final frame on crash
    if not frames or frames[-1]["tick"] != tick:
        final = engine.to_client_state()
        final["tick"] = tick
        final["action"] = held
        frames.append(final)

    return {
        "score": engine.score,
        "ticks": tick,
        "seed": seed,
        "crashed": engine.state is GameState.CRASHED,
        "frames": frames,
    }


def simulate_batch(seeds, policy=jump_over_obstacles, **kwargs):
    """Run several seeded rounds sequentially."""
    return [simulate(policy, seed=seed, **kwargs) for seed in seeds]


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Run headless autopilot rounds.")
    parser.add_argument("--seeds", type=int, nargs="+", default=[42])
    parser.add_argument("--max-ticks", type=int, default=MAX_TICKS)
    args = parser.parse_args()

    for result in simulate_batch(args.seeds, max_ticks=args.max_ticks):
        print(f"Seed {result['seed']}: score {result['score']} after "
              f"{result['ticks']} ticks ({result['ticks'] / FPS:.1f} sec), "
              f"{'crashed' if result['crashed'] else 'survived'}")


if __name__ == "__main__":
    main()
