"""Shared constants for Snake Royale. All game-wide configuration lives here."""

# --- Display ---
SCREEN_WIDTH = 1800
SCREEN_HEIGHT = 680
FPS = 60
CELL_RENDER_SIZE = 20  # pixels per board cell
STATUS_BAR_HEIGHT = 40  # pixels reserved under the board

# --- Board ---
BOARD_WIDTH = 90
BOARD_HEIGHT = 30
OBSTACLE_RATIO = 0.05      # fraction of cells turned into obstacles
MIN_SPAWN_DISTANCE = 6     # cells between any two starting heads

# --- Simulation ---
DEFAULT_TICK_RATE = 8      # ticks per second
FAST_TICK_RATE = 12        # ticks per second with the FAST modifier
INITIAL_FOOD = 4
FOOD_PLACEMENT_ATTEMPTS = 5000

# --- Spawning ---
SPAWN_RESERVE_LENGTH = 3   # initial body cells, head included
SPAWN_FORWARD_CLEAR = 3    # free cells required ahead of a new head
SPAWN_ATTEMPTS = 2000

# --- Session ---
DEFAULT_GAME_ID = "public"
REASON_LAST_STANDING = "last standing"
REASON_ALL_DEAD = "all dead"
LEADERBOARD_SIZE = 10

# --- Colors ---
COLOR_OPTIONS = (
    "#e6194b",
    "#3cb44b",
    "#ffe119",
    "#0082c8",
    "#f58231",
    "#911eb4",
    "#46f0f0",
    "#f032e6",
)
COLOR_BG = (15, 23, 42)
COLOR_GRID = (30, 41, 59)
COLOR_OBSTACLE = (100, 116, 139)
COLOR_FOOD = (250, 204, 21)
COLOR_DEAD = (71, 85, 105)
COLOR_TEXT = (226, 232, 240)
