"""
sound.py: Jump, score and game-over effects synthesized for pygame's mixer.
"""

import array
import logging
from typing import Dict, Optional

import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050


def square(t: float, freq: float) -> float:
    """Square wave oscillator."""
    return 1 if (t * freq) % 1 < 0.5 else -1


def tone(duration: float, freq_at, volume: float = 0.3, decay: float = 8.0,
         sample_rate: int = SAMPLE_RATE) -> array.array:
    """Mono 16-bit samples of a decaying square wave whose pitch follows freq_at(t)."""
    samples = array.array('h')
    for i in range(int(sample_rate * duration)):
        t = i / sample_rate
        env = max(0.0, 1 - t * decay)
        samples.append(int(square(t, freq_at(t)) * volume * env * 32767))
    return samples


class GameSounds:
    """
    Sound effects for the engine. Silent when the mixer cannot start.
    """

    def __init__(self, muted: bool = False):
        self._initialized = False
        self._muted = muted
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._rate = SAMPLE_RATE
        self._channels = 1

    def init(self) -> bool:
        """Initialize the mixer and generate the effects."""
        if self._muted:
            return False
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 1, 512)
            pygame.mixer.init()
            # pygame.init() may already have opened the mixer in another format.
            self._rate, _, self._channels = pygame.mixer.get_init()
            self._generate_all_sounds()
            self._initialized = True
            logger.info("Audio initialized at %d Hz, %d channel(s)", self._rate, self._channels)
        except (pygame.error, ValueError) as e:
            logger.error(f"Failed to initialize audio: {e}")
            self._initialized = False
        return self._initialized

    def _create_sound(self, samples: array.array) -> pygame.mixer.Sound:
        if self._channels == 1:
            return pygame.mixer.Sound(buffer=samples)
        # Interleaved frames: the same sample on every channel.
        frames = array.array('h')
        for s in samples:
            frames.extend([s] * self._channels)
        return pygame.mixer.Sound(buffer=frames)

    def _generate_all_sounds(self):
        # Short blip for a jump
        self._sounds["jump"] = self._create_sound(
            tone(0.08, lambda t: 660, volume=0.25, decay=12.0, sample_rate=self._rate))
        # Two-tone chirp every achievement
        self._sounds["score"] = self._create_sound(
            tone(0.2, lambda t: 880 if t < 0.1 else 1320, volume=0.2, decay=5.0,
                 sample_rate=self._rate))
        # Falling buzz on a crash
        self._sounds["hit"] = self._create_sound(
            tone(0.25, lambda t: 220 - t * 400, volume=0.35, decay=4.0,
                 sample_rate=self._rate))

    def play(self, name: str) -> Optional[pygame.mixer.Channel]:
        if not self._initialized or self._muted:
            return None
        sound = self._sounds.get(name)
        if sound is None:
            logger.warning(f"Sound not found: {name}")
            return None
        sound.stop()
        return sound.play()

    def play_jump(self):
        self.play("jump")

    def play_score(self):
        self.play("score")

    def play_game_over(self):
        self.play("hit")

    def dispose(self):
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False
