"""Configuration constants for the Latin Quest drill game."""

SERVICE_NAME = 'latin-quest'

# Difficulty tiers: round time (s), match pairs per round, XP multiplier,
# sentence length (4 adds adjective agreement)
DIFFICULTY = {
    'easy': {'time': 28, 'round_size': 4, 'xp_mult': 0.85, 'sentence_len': 3},
    'normal': {'time': 22, 'round_size': 5, 'xp_mult': 1.0, 'sentence_len': 3},
    'hard': {'time': 18, 'round_size': 6, 'xp_mult': 1.2, 'sentence_len': 4},
}
DEFAULT_DIFFICULTY = 'normal'

MODES = ('match', 'sighting')
MODE_NAMES = {'match': 'Match', 'sighting': 'Sighting Log'}

# Scoring
BASE_XP = 28
SPEED_FACTOR = 1.6
SPEED_BONUS_CAP = 45
COMBO_STEP = 7
COMBO_BONUS_CAP = 70

# Sentence builder
MAX_TILES = 10

# Progression
UNLOCK_THRESHOLD = 250        # XP per reward card

# Persisted progress
PROGRESS_SCHEMA_VERSION = 2
DEFAULT_PLAYER_NAME = 'Challenger'


def difficulty_conf(key: str) -> dict:
    """Return the tier settings, falling back to normal for unknown keys."""
    return DIFFICULTY.get(key) or DIFFICULTY[DEFAULT_DIFFICULTY]
