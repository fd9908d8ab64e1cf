GRID_ROWS = 8
GRID_COLS = 8

# Round timing and scoring defaults.
INITIAL_SECONDS = 120.0
BASIC_BLOCK_SPAWN_PROBABILITY = 0.95
BOMB_RADIUS = 1

# Minimum connected region size for a Basic block click to resolve.
MIN_MATCH_SIZE = 2

# Number of full grids sampled before giving up on a playable board.
MAX_GENERATION_ATTEMPTS = 1000

# Colors a Basic block can carry (BlockColor values 1..N).
BASIC_COLOR_COUNT = 6

# Score store keys.
HIGH_SCORE_KEY = "HighScore"
LAST_SCORE_KEY = "LastScore"
