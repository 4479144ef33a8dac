# ============================================================================
# BOARD
# ============================================================================
GRID_COLS = 8
GRID_ROWS = 8
MIN_GRID_SIZE = 3

# ============================================================================
# PALETTE
# ============================================================================
PALETTE_SIZE = 8
MIN_PALETTE_SIZE = 3

# ============================================================================
# MATCHING & SCORING
# ============================================================================
MATCH_LENGTH = 3
POINTS_PER_MARK = 10

# ============================================================================
# GENERATION & RESOLUTION LIMITS
# ============================================================================
# Full-board restarts allowed before generation gives up.
MAX_GENERATION_ATTEMPTS = 1000
# Upper bound on advance() calls made by GridEngine.resolve().
MAX_RESOLVE_STEPS = 10_000
