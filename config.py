# config.py
import os

# ======= Board geometry =======
GRID_W = int(os.getenv("EP_GRID_W", "16"))
GRID_H = int(os.getenv("EP_GRID_H", "16"))

# ======= Seed placement =======
# The interior search grows outward from this cell; the designated tile is
# placed there before the border is solved.
SEED_X        = int(os.getenv("EP_SEED_X", "7"))
SEED_Y        = int(os.getenv("EP_SEED_Y", "8"))
SEED_TILE_ID  = int(os.getenv("EP_SEED_TILE_ID", "139"))
SEED_ROTATION = int(os.getenv("EP_SEED_ROTATION", "2"))

# ======= Tile database =======
TILES_FILE   = os.getenv("EP_TILES_FILE", "pieces.txt")
SYNTH_COLORS = int(os.getenv("EP_SYNTH_COLORS", "22"))

# ======= Run driver =======
RUN_SECONDS      = float(os.getenv("EP_RUN_SECONDS", "10"))
MAX_ATTEMPTS     = int(os.getenv("EP_MAX_ATTEMPTS", "0"))   # 0 = time box only
WORKERS          = int(os.getenv("EP_WORKERS", "1"))
RANDOM_SEED      = os.getenv("EP_RANDOM_SEED", "").strip()
LEADERBOARD_SIZE = int(os.getenv("EP_LEADERBOARD_SIZE", "5"))

# ======= Export =======
EXPORT_MIN_FILLED = int(os.getenv("EP_EXPORT_MIN_FILLED", "150"))
EXPORT_DIR        = os.getenv("EP_EXPORT_DIR", "outputs")
HISTORY_DIR       = os.getenv("EP_HISTORY_DIR", "history-output")
EXPORT_HISTORY    = int(os.getenv("EP_EXPORT_HISTORY", "1")) != 0
EMPTY_SYMBOL      = os.getenv("EP_EMPTY_SYMBOL", "X")
CELL_DELIMITER    = os.getenv("EP_CELL_DELIMITER", "-")


class CFG:
    GRID_W = GRID_W
    GRID_H = GRID_H

    SEED_X        = SEED_X
    SEED_Y        = SEED_Y
    SEED_TILE_ID  = SEED_TILE_ID
    SEED_ROTATION = SEED_ROTATION

    TILES_FILE   = TILES_FILE
    SYNTH_COLORS = SYNTH_COLORS

    RUN_SECONDS      = RUN_SECONDS
    MAX_ATTEMPTS     = MAX_ATTEMPTS
    WORKERS          = WORKERS
    RANDOM_SEED      = RANDOM_SEED
    LEADERBOARD_SIZE = LEADERBOARD_SIZE

    EXPORT_MIN_FILLED = EXPORT_MIN_FILLED
    EXPORT_DIR        = EXPORT_DIR
    HISTORY_DIR       = HISTORY_DIR
    EXPORT_HISTORY    = EXPORT_HISTORY
    EMPTY_SYMBOL      = EMPTY_SYMBOL
    CELL_DELIMITER    = CELL_DELIMITER


def seed_from_config(raw=None):
    """Return the configured run seed as an int, or None when unset."""
    value = CFG.RANDOM_SEED if raw is None else raw
    value = (str(value) if value is not None else "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        # non-numeric seeds are still reproducible
        return sum((i + 1) * ord(ch) for i, ch in enumerate(value))


__all__ = ["CFG", "seed_from_config"]
