#!/usr/bin/env python3
"""
dino_client.py

pygame window for the runner: keyboard input, delta clamping and drawing.
The engine is advanced once per rendered frame.
"""

import argparse
import logging
from typing import Dict, Optional, Tuple

import pygame

from .constants import (
    WORLD_WIDTH, WORLD_HEIGHT, FPS, GROUND_Y_POS, CLOUD_WIDTH, CLOUD_HEIGHT,
    MOON_WIDTH, MOON_HEIGHT, STAR_SIZE
)
from .game_engine import GameEngine, GameState
from .score_db import HighScoreStore, DB_FILE
from .sound import GameSounds, SAMPLE_RATE

logger = logging.getLogger(__name__)

MAX_DELTA_MS = 50.0     # Larger gaps (window drag, stalls) are cut to this

DAY_PALETTE = {
    "background": (247, 247, 247),
    "ink": (83, 83, 83),
    "cloud": (218, 218, 218),
    "hint": (150, 150, 150),
}
NIGHT_PALETTE = {
    "background": (48, 48, 48),
    "ink": (220, 220, 220),
    "cloud": (90, 90, 90),
    "hint": (160, 160, 160),
}

ACTION_KEYS = (pygame.K_SPACE, pygame.K_UP)
DUCK_KEYS = (pygame.K_DOWN,)


def clamp_delta(delta_ms: float) -> float:
    return max(0.0, min(MAX_DELTA_MS, delta_ms))


class DinoClient:
    def __init__(self, seed: Optional[int] = None, db_file: str = DB_FILE,
                 scale: int = 2, muted: bool = False):
        pygame.mixer.pre_init(SAMPLE_RATE, -16, 1, 512)
        pygame.init()
        self.scale = scale
        self.screen = pygame.display.set_mode((WORLD_WIDTH * scale, WORLD_HEIGHT * scale))
        pygame.display.set_caption("Dino Runner")

        self.sounds = GameSounds(muted=muted)
        self.store = HighScoreStore(db_file)
        self.engine = GameEngine(seed=seed, sounds=self.sounds, score_store=self.store)
        self.engine.init()

        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 12 * scale)
        self.small_font = pygame.font.Font(None, 10 * scale)

    def run(self):
        """The main client execution loop."""
        running = True
        try:
            while running:
                delta_ms = clamp_delta(self.clock.tick(FPS))

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        self._handle_event(event)

                self.engine.update(delta_ms)
                self._draw_game(self.engine.to_client_state())
        finally:
            self.close()

    def close(self):
        """Releases audio, the score database and pygame."""
        self.sounds.dispose()
        self.store.close()
        pygame.quit()

    def _handle_event(self, event: pygame.event.Event):
        """Translates device events into the engine's logical inputs."""
        engine = self.engine
        if event.type == pygame.KEYDOWN:
            if event.key in ACTION_KEYS:
                engine.on_action_start()
            elif event.key in DUCK_KEYS:
                engine.on_duck_start()
            elif event.key == pygame.K_p:
                if engine.state is GameState.PAUSED:
                    engine.resume()
                else:
                    engine.pause()
        elif event.type == pygame.KEYUP:
            if event.key in ACTION_KEYS:
                engine.on_action_end()
            elif event.key in DUCK_KEYS:
                engine.on_duck_end()
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            engine.on_action_start()
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            engine.on_action_end()
        elif event.type == pygame.WINDOWFOCUSLOST:
            engine.pause()

    # ----------------- Drawing -----------------

    def _rect(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        s = self.scale
        return (int(x * s), int(y * s), max(1, int(w * s)), max(1, int(h * s)))

    def _draw_game(self, state: Dict):
        """Renders the game state using pygame."""
        palette = NIGHT_PALETTE if state["night_mode"] else DAY_PALETTE
        screen = self.screen
        screen.fill(palette["background"])
        ink = palette["ink"]

        # Night sky
        night = state["night"]
        if night["opacity"] > 0:
            alpha = int(255 * night["opacity"])
            sky = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
            moon = night["moon"]
            pygame.draw.ellipse(sky, (240, 240, 240, alpha),
                                self._rect(moon["x"], moon["y"], MOON_WIDTH, MOON_HEIGHT))
            for star in night["stars"]:
                size = STAR_SIZE if star["sprite"] == 0 else STAR_SIZE - 3
                pygame.draw.rect(sky, (240, 240, 240, alpha),
                                 self._rect(star["x"], star["y"], size, size))
            screen.blit(sky, (0, 0))

        for cloud in state["clouds"]:
            pygame.draw.ellipse(screen, palette["cloud"],
                                self._rect(cloud["x"], cloud["y"], CLOUD_WIDTH, CLOUD_HEIGHT))

        # Ground: a line per segment, dashed by the scroll offset
        for offset in state["ground"]:
            pygame.draw.rect(screen, ink, self._rect(offset, GROUND_Y_POS + 7, WORLD_WIDTH, 1))
            for bump in range(0, WORLD_WIDTH, 37):
                pygame.draw.rect(screen, ink, self._rect(offset + bump, GROUND_Y_POS + 10, 3, 1))

        for obstacle in state["obstacles"]:
            if obstacle["type"] == "pterodactyl":
                wing_y = obstacle["y"] + (6 if obstacle["frame"] else 16)
                pygame.draw.rect(screen, ink, self._rect(
                    obstacle["x"], obstacle["y"] + 12, obstacle["width"], 10))
                pygame.draw.rect(screen, ink, self._rect(
                    obstacle["x"] + 14, wing_y, 16, 6))
            else:
                unit = obstacle["width"] / obstacle["size"]
                for i in range(obstacle["size"]):
                    pygame.draw.rect(screen, ink, self._rect(
                        obstacle["x"] + i * unit + 2, obstacle["y"], unit - 4, obstacle["height"]))

        self._draw_trex(state["trex"], ink, palette["background"])
        self._draw_score(state, ink)

        if state["state"] == GameState.WAITING.value:
            self._draw_hint("Press Space to start", palette["hint"])
        elif state["state"] == GameState.PAUSED.value:
            self._draw_hint("Paused: press Space or P to resume", palette["hint"])
        elif state["state"] == GameState.CRASHED.value:
            over = self.font.render("G A M E   O V E R", True, ink)
            screen.blit(over, (screen.get_width() // 2 - over.get_width() // 2,
                               screen.get_height() // 2 - 15 * self.scale))
            self._draw_hint("Press Space to restart", palette["hint"])

        pygame.display.flip()

    def _draw_trex(self, trex: Dict, ink, background):
        x, y, w, h = trex["x"], trex["y"], trex["width"], trex["height"]
        if trex["status"] == "ducking":
            # Drawn at the bottom of the standing frame
            y = y + 47 - h
        pygame.draw.rect(self.screen, ink, self._rect(x, y, w, h))

        if trex["status"] == "crashed":
            eye_color = (200, 60, 60)
        elif trex["status"] == "waiting" and trex["frame"]:
            eye_color = ink     # blink
        else:
            eye_color = background
        pygame.draw.rect(self.screen, eye_color, self._rect(x + w - 12, y + 4, 3, 3))

        if trex["status"] in ("running", "ducking"):
            leg = 6 if trex["frame"] else 0
            pygame.draw.rect(self.screen, background, self._rect(x + 10 + leg, y + h - 4, 6, 4))

    def _draw_score(self, state: Dict, ink):
        text = ""
        if state["high_score"] > 0:
            text = f"HI {state['high_score']:05d}  "
        if state["score_visible"] or state["state"] != GameState.PLAYING.value:
            text += f"{state['score']:05d}"
        if not text:
            return
        surf = self.font.render(text, True, ink)
        self.screen.blit(surf, (self.screen.get_width() - surf.get_width() - 10 * self.scale,
                                5 * self.scale))

    def _draw_hint(self, message: str, color):
        surf = self.small_font.render(message, True, color)
        self.screen.blit(surf, (self.screen.get_width() // 2 - surf.get_width() // 2,
                                self.screen.get_height() // 2))


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def main():
    parser = argparse.ArgumentParser(description="Play the runner in a pygame window.")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible world")
    parser.add_argument("--db", default=DB_FILE, help="sqlite file holding the high score")
    parser.add_argument("--scale", type=int, default=2, help="window pixels per world unit")
    parser.add_argument("--mute", action="store_true", help="disable sound effects")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    args = parser.parse_args()

    setup_logging(args.debug)
    client = DinoClient(seed=args.seed, db_file=args.db, scale=args.scale, muted=args.mute)
    client.run()


if __name__ == "__main__":
    main()
