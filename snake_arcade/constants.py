"""Game constants."""

CANVAS_W, CANVAS_H = 800, 600
CELL_SIZE = 20
INITIAL_LENGTH = 5
MIN_SNAKE_LENGTH = 3

DEFAULT_SPEED = 100
MIN_INTERVAL = 20
MAX_DIFFICULTY_SPEED = 1000
DIFFICULTIES = {"easy": 150, "normal": 100, "hard": 60}

RENDER_INTERVAL = 16
SPECIAL_FOOD_DELAY = 5000
SPECIAL_FOOD_INTERVAL = 15000
SPECIAL_FOOD_LIFETIME = 8000

SCORE_PER_FOOD = 10
SHRINK_AMOUNT = 3
MAX_SPAWN_ATTEMPTS = 5000

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
OPPOSITES = {"up": "down", "down": "up", "left": "right", "right": "left"}

KEY_CODES = {
    87: "up",      # W
    83: "down",    # S
    68: "right",   # D
    65: "left",    # A
    38: "up",
    40: "down",
    39: "right",
    37: "left",
    32: "pause",   # Space
    80: "pause",   # P
}
KEY_NAMES = {
    "ArrowUp": "up", "ArrowDown": "down", "ArrowLeft": "left", "ArrowRight": "right",
    "w": "up", "s": "down", "a": "left", "d": "right",
    "W": "up", "S": "down", "A": "left", "D": "right",
    " ": "pause", "Spacebar": "pause", "p": "pause", "P": "pause",
}

REGULAR = "regular"
SNAKE_COLOR = "#fac020"
SNAKE_BORDER = "#fab520"
FOOD_COLOR = "#f8a2ff"
BOARD_COLOR = "#09080a"

POWER_UPS = {
    "speed_boost": {"name": "Speed Boost", "color": "#00ffff", "duration": 5000, "probability": 0.25, "speed_multiplier": 0.5},
    "slow_time": {"name": "Slow Time", "color": "#66ccff", "duration": 5000, "probability": 0.20, "speed_multiplier": 1.5},
    "invincibility": {"name": "Invincibility", "color": "#ffcc00", "duration": 5000, "probability": 0.15},
    "shrink": {"name": "Shrink", "color": "#cc66ff", "duration": 0, "probability": 0.20},
    "double_points": {"name": "Double Points", "color": "#33ff66", "duration": 10000, "probability": 0.20},
}
DEFAULT_POWER_UP = "speed_boost"

if abs(sum(p["probability"] for p in POWER_UPS.values()) - 1.0) > 1e-9:
    raise ValueError("power-up probabilities must sum to 1.0")

DEFAULT_OPTIONS = {
    "width": CANVAS_W,
    "height": CANVAS_H,
    "cell_size": CELL_SIZE,
    "speed": DEFAULT_SPEED,
    "initial_length": INITIAL_LENGTH,
    "special_food_delay": SPECIAL_FOOD_DELAY,
    "special_food_interval": SPECIAL_FOOD_INTERVAL,
    "special_food_lifetime": SPECIAL_FOOD_LIFETIME,
}
