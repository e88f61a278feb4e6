"""
constants.py: Centralized configuration for the runner simulation.
"""

# -------- World & Timing --------
WORLD_WIDTH = 600
WORLD_HEIGHT = 150
FPS = 60
MS_PER_FRAME = 1000.0 / FPS     # Reference frame used to scale per-frame physics

# -------- Game Config --------
INITIAL_SPEED = 6.0
MAX_SPEED = 13.0
ACCELERATION = 0.001            # Added once per playing tick
BG_CLOUD_SPEED = 0.2
BOTTOM_PAD = 10.0
CLEAR_TIME = 3000.0             # ms before obstacles appear
CLOUD_FREQUENCY = 0.5
GAP_COEFFICIENT = 0.6
MAX_GAP_COEFFICIENT = 1.5
MAX_CLOUDS = 6
MAX_OBSTACLE_LENGTH = 3
MAX_OBSTACLE_DUPLICATION = 2
INVERT_DISTANCE = 700           # Score points between night-mode toggles
INVERT_FADE_DURATION = 12000.0  # ms before night mode reverts on its own
GAME_OVER_CLEAR_TIME = 750.0    # ms before a crashed round can restart
SPEED_DROP_COEFFICIENT = 3.0

# -------- Score --------
SCORE_COEFFICIENT = 0.025
ACHIEVEMENT_DISTANCE = 100
FLASH_DURATION = 250.0
FLASH_ITERATIONS = 3

# -------- Ground --------
GROUND_Y_POS = 127.0
GROUND_SEGMENT_WIDTH = 600

# -------- T-Rex --------
TREX_WIDTH = 44
TREX_HEIGHT = 47
TREX_WIDTH_DUCK = 59
TREX_HEIGHT_DUCK = 25
TREX_START_X = 50.0
TREX_GROUND_Y = WORLD_HEIGHT - TREX_HEIGHT - BOTTOM_PAD   # 93

GRAVITY = 0.6                   # Velocity change per reference frame
INITIAL_JUMP_VELOCITY = -10.0
DROP_VELOCITY = -5.0            # Fall-start velocity after an early release
SPEED_DROP_VELOCITY = 1.0
MIN_JUMP_HEIGHT = 30.0          # Relative to the ground
MAX_JUMP_HEIGHT = 30.0          # Absolute y, compared directly

MAX_BLINK_COUNT = 3
BLINK_DURATION = 100.0
MAX_BLINK_DELAY = 7000
RUN_FRAME_RATE = 83.0
DUCK_FRAME_RATE = 125.0

# (x, y, width, height) relative to the sprite origin
TREX_RUNNING_COLLISION_BOXES = (
    (22, 0, 17, 16),
    (1, 18, 30, 9),
    (10, 35, 14, 8),
    (1, 24, 29, 5),
    (5, 30, 21, 4),
    (9, 34, 15, 4),
)
TREX_DUCKING_COLLISION_BOXES = (
    (1, 18, 55, 25),
)

# -------- Obstacles --------
# y_positions holds every altitude the type can spawn at.
OBSTACLE_SPECS = {
    "cactus_small": {
        "width": 17,
        "height": 35,
        "y_positions": (105,),
        "multiple_speed": 4,
        "min_gap": 120,
        "min_speed": 0,
        "num_frames": 1,
        "frame_rate": 0.0,
        "collision_boxes": (
            (0, 7, 5, 27),
            (4, 0, 6, 34),
            (10, 4, 7, 14),
        ),
    },
    "cactus_large": {
        "width": 25,
        "height": 50,
        "y_positions": (90,),
        "multiple_speed": 7,
        "min_gap": 120,
        "min_speed": 0,
        "num_frames": 1,
        "frame_rate": 0.0,
        "collision_boxes": (
            (0, 12, 7, 38),
            (8, 0, 7, 49),
            (13, 10, 10, 38),
        ),
    },
    "pterodactyl": {
        "width": 46,
        "height": 40,
        "y_positions": (100, 75, 50),
        "multiple_speed": 999,
        "min_gap": 150,
        "min_speed": 8.5,
        "num_frames": 2,
        "frame_rate": 1000.0 / 6,
        "collision_boxes": (
            (15, 15, 16, 5),
            (18, 21, 24, 6),
            (2, 14, 4, 3),
            (6, 10, 4, 7),
            (10, 8, 6, 9),
        ),
    },
}

# -------- Night Mode --------
NIGHT_FADE_SPEED = 0.035        # Opacity per reference frame
MOON_SPEED = 0.25
STAR_SPEED = 0.3
NUM_STARS = 2
STAR_SIZE = 9
STAR_MAX_Y = 70
MOON_WIDTH = 20
MOON_HEIGHT = 40
MOON_Y = 30.0
MOON_PHASES = (140, 120, 100, 60, 40, 20, 0)

# -------- Clouds --------
CLOUD_WIDTH = 46
CLOUD_HEIGHT = 14
MIN_CLOUD_GAP = 100
MAX_CLOUD_GAP = 400
MAX_SKY_LEVEL = 30
MIN_SKY_LEVEL = 71
