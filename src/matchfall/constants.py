GRID_ROWS = 8
GRID_COLS = 8

# Tile values are the integers 1..SYMBOL_COUNT.
SYMBOL_COUNT = 5
SCORE_PER_TILE = 10

# Layout space: row 0 is the top row, y grows downward.
CELL_SIZE = 64
BOARD_PADDING = 10

# ============================================================================
# ANIMATION (per reference frame)
# ============================================================================
REFERENCE_FPS = 60
SMOOTHING_FACTOR = 0.2   # fraction of remaining distance covered per frame while sliding
SNAP_DISTANCE = 1.0      # remaining distance at which a sliding tile snaps onto its target
FALL_GRAVITY = 2.0       # velocity gained per frame while falling (layout units / frame^2)
SHRINK_STEP = 0.1        # scale lost per frame while clearing

# Initialization re-rolls matched values until the board is match-free.
MAX_INIT_ATTEMPTS = 1000

# ============================================================================
# FRONT-END
# ============================================================================
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
WINDOW_TITLE = "Matchfall"
