GRID_SIZE = 5

# Palette order is significant: tiles store the index into this list.
COLOR_NAMES = ["red", "pink", "yellow", "green", "blue", "orange"]
# Player-facing names; the rendered swatches do not match the internal names.
COLOR_LABELS = {
    "red": "brown",
    "pink": "pink",
    "yellow": "white",
    "green": "mint blue",
    "blue": "turquoise",
    "orange": "orange",
}

# ============================================================================
# SCORING
# ============================================================================
SCORE_PER_MATCH = 10

# ============================================================================
# LIFE MODE
# ============================================================================
LIFE_MAX = 60
DECAY_STEP = 5
DECAY_INTERVAL = 1.0       # seconds between decay drops
NO_MATCH_PENALTY = 20
GAME_OVER_GRACE = 0.5      # seconds life may sit at zero before the game is lost
# (minimum cluster size, life gained) checked from the largest tier down
LIFE_GAIN_TIERS = ((8, 30), (6, 15), (3, 5))
MULTI_CLUSTER_MULTIPLIER = 2

# ============================================================================
# COLOR MODE
# ============================================================================
GOAL_SEED_COUNT = 5
GOAL_SPAWN_CHANCE = 0.10
STALEMATE_SHUFFLE_ATTEMPTS = 40
